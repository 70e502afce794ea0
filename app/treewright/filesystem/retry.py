"""Retrying deletion for transiently locked targets.

Antivirus scanners, indexers and other processes briefly hold files
open. These wrappers re-run a deletion when it fails with an I/O-busy
error through tenacity, waiting ``attempt * backoff`` seconds between
attempts. The waits sleep on the cancellation token so a cancel wakes
them early. Not-found and permission failures are never retried.
"""

import logging
from collections.abc import Callable

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

from treewright.core.cancellation import CancellationToken
from treewright.core.config import DEFAULT_RETRY_BACKOFF_SECONDS
from treewright.core.errors import DeletionError, ErrorKind, classify_error
from treewright.filesystem.deletion import delete_directory, delete_file

logger = logging.getLogger(__name__)

MAX_RETRY_DELETION = 3


def delete_directory_with_retry(
    path: str,
    cancellation: CancellationToken | None = None,
    *,
    backoff: float = DEFAULT_RETRY_BACKOFF_SECONDS,
    contents_only: bool = False,
    continue_on_error: bool = False,
    max_workers: int | None = None,
) -> None:
    """Delete a directory tree, retrying on I/O-busy failures.

    Only a DeletionError that carries at least one I/O-busy failure is
    retried; the parallel engine reports per-entry failures that way.

    Args:
        path: Directory to delete.
        cancellation: Checked before every attempt and during backoff.
        backoff: Linear backoff unit in seconds.
        contents_only: Keep ``path`` itself, see delete_directory().
        continue_on_error: Swallow per-entry failures, see delete_directory().
        max_workers: Worker threads per attempt.

    Raises:
        OperationCancelledError: If cancelled before or between attempts.
        Exception: The last attempt's failure, unchanged.
    """
    _with_retry(
        lambda: delete_directory(
            path,
            contents_only=contents_only,
            continue_on_error=continue_on_error,
            cancellation=cancellation,
            max_workers=max_workers,
        ),
        _is_retryable_directory_failure,
        path,
        cancellation,
        backoff,
    )


def delete_file_with_retry(
    path: str,
    cancellation: CancellationToken | None = None,
    *,
    backoff: float = DEFAULT_RETRY_BACKOFF_SECONDS,
) -> None:
    """Delete a single file, retrying on I/O-busy failures.

    Raises:
        OperationCancelledError: If cancelled before or between attempts.
        OSError: The last attempt's failure, unchanged.
    """
    _with_retry(
        lambda: delete_file(path),
        _is_retryable_file_failure,
        path,
        cancellation,
        backoff,
    )


def delete_with_retry(
    path: str,
    cancellation: CancellationToken | None = None,
    *,
    backoff: float = DEFAULT_RETRY_BACKOFF_SECONDS,
) -> None:
    """Delete ``path`` with retries whether it is a directory or a file."""
    delete_directory_with_retry(path, cancellation, backoff=backoff)
    delete_file_with_retry(path, cancellation, backoff=backoff)


def _is_retryable_directory_failure(exc: BaseException) -> bool:
    return isinstance(exc, DeletionError) and ErrorKind.IO_BUSY in exc.kinds()


def _is_retryable_file_failure(exc: BaseException) -> bool:
    return classify_error(exc) == ErrorKind.IO_BUSY


def _with_retry(
    operation: Callable[[], None],
    retryable: Callable[[BaseException], bool],
    path: str,
    cancellation: CancellationToken | None,
    backoff: float,
) -> None:
    token = cancellation or CancellationToken.none()

    def check_cancelled(retry_state: RetryCallState) -> None:
        token.raise_if_cancelled()

    def cancellable_sleep(seconds: float) -> None:
        if token.wait(seconds):
            token.raise_if_cancelled()

    def log_retry(retry_state: RetryCallState) -> None:
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Deleting %s failed (attempt %d/%d), retrying in %.1fs: %s",
            path,
            retry_state.attempt_number,
            MAX_RETRY_DELETION,
            delay,
            error,
        )

    retrying = Retrying(
        stop=stop_after_attempt(MAX_RETRY_DELETION),
        wait=wait_incrementing(start=backoff, increment=backoff),
        retry=retry_if_exception(retryable),
        before=check_cancelled,
        before_sleep=log_retry,
        sleep=cancellable_sleep,
        reraise=True,
    )
    retrying(operation)
