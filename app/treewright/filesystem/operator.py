"""Filesystem lifecycle operator.

Batch front end over the deletion engine and the staged move, with
dry-run support and per-path failure isolation. Used by the CLI.
"""

import logging
import os
from dataclasses import dataclass

from treewright.core.cancellation import CancellationToken
from treewright.core.config import TreewrightConfig, get_default_config
from treewright.core.errors import ErrorKind, TreewrightError, classify_error
from treewright.filesystem.move import move_directory
from treewright.filesystem.retry import delete_directory_with_retry, delete_file_with_retry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeletionResult:
    """Result of a single deletion operation.

    Attributes:
        path: Path that was operated on.
        success: Whether the operation completed successfully.
        error: Error message if the operation failed, None otherwise.
        error_kind: Category of the failure, None on success.
        dry_run: Whether this was a dry-run (no actual deletion).
    """

    path: str
    success: bool
    error: str | None = None
    error_kind: ErrorKind | None = None
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Result of a staged move.

    Attributes:
        source: Directory that was moved.
        target: Destination directory.
        staging: Intermediate staging directory.
        success: Whether the move completed.
        error: Error message if the move failed, None otherwise.
        dry_run: Whether this was a dry-run (nothing moved).
    """

    source: str
    target: str
    staging: str
    success: bool
    error: str | None = None
    dry_run: bool = False


class DeletionOperator:
    """Deletes and moves directory trees on behalf of the CLI.

    Attributes:
        _dry_run: If True, simulate operations without modifying the filesystem.
        _config: Tunables for retries and the worker pool.
        _cancellation: Token shared by all operations of this operator.
    """

    def __init__(
        self,
        *,
        dry_run: bool = False,
        config: TreewrightConfig | None = None,
        cancellation: CancellationToken | None = None,
    ) -> None:
        """Initialize the DeletionOperator.

        Args:
            dry_run: If True, report what would be done without doing it.
            config: Configuration; defaults are used if None.
            cancellation: Token to abort in-flight operations.
        """
        self._dry_run = dry_run
        self._config = config or get_default_config()
        self._cancellation = cancellation or CancellationToken.none()

    def delete(
        self,
        paths: list[str],
        *,
        contents_only: bool = False,
        continue_on_error: bool | None = None,
    ) -> list[DeletionResult]:
        """Delete multiple paths and return results.

        Each path may be a file or a directory; failures are isolated per
        path. A cancellation stops the batch and marks the remaining paths
        as failed.

        Args:
            paths: Paths to delete.
            contents_only: Keep the directories themselves. A path that is not a
                directory then fails with INVALID_ARGUMENT.
            continue_on_error: Swallow per-entry failures; defaults to config.

        Returns:
            List of DeletionResult, one per input path.
        """
        if continue_on_error is None:
            continue_on_error = self._config.continue_on_error
        return [self._delete_single(p, contents_only, continue_on_error) for p in paths]

    def move(self, source: str, target: str, staging: str) -> MoveResult:
        """Move a directory tree via a staging directory.

        Returns:
            MoveResult indicating success or failure.
        """
        if self._dry_run:
            logger.info("Dry-run: would move %s to %s via %s", source, target, staging)
            return MoveResult(
                source=source, target=target, staging=staging, success=True, dry_run=True
            )

        try:
            move_directory(source, target, staging, self._cancellation)
        except (OSError, TreewrightError) as e:
            return MoveResult(
                source=source, target=target, staging=staging, success=False, error=str(e)
            )
        return MoveResult(source=source, target=target, staging=staging, success=True)

    def _delete_single(
        self, path: str, contents_only: bool, continue_on_error: bool
    ) -> DeletionResult:
        """Delete a single path with retries.

        Args:
            path: File or directory to delete.
            contents_only: For directories, keep the directory itself.
            continue_on_error: Swallow per-entry failures.

        Returns:
            DeletionResult indicating success or failure.
        """
        if contents_only and os.path.lexists(path) and not os.path.isdir(path):
            return DeletionResult(
                path=path,
                success=False,
                error=f"Not a directory: {path}",
                error_kind=ErrorKind.INVALID_ARGUMENT,
            )

        if self._dry_run:
            logger.info("Dry-run: would delete %s", path)
            return DeletionResult(path=path, success=True, dry_run=True)

        if not os.path.lexists(path):
            logger.debug("Nothing to delete at %s", path)
            return DeletionResult(path=path, success=True)

        backoff = self._config.retry_backoff_seconds
        try:
            delete_directory_with_retry(
                path,
                self._cancellation,
                backoff=backoff,
                contents_only=contents_only,
                continue_on_error=continue_on_error,
                max_workers=self._config.max_workers,
            )
            if not contents_only:
                delete_file_with_retry(path, self._cancellation, backoff=backoff)
        except (OSError, TreewrightError) as e:
            logger.debug("Deleting %s failed: %s", path, e)
            return DeletionResult(
                path=path, success=False, error=str(e), error_kind=classify_error(e)
            )

        return DeletionResult(path=path, success=True)
