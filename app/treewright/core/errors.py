"""Error taxonomy for filesystem lifecycle operations.

Operating system failures keep their native ``OSError`` subclasses
(``FileNotFoundError``, ``PermissionError``, ...). This module adds the
failures the library raises itself and a classifier that maps any
exception onto the categories callers reason about, most importantly
whether a failure is transient and therefore worth retrying.
"""

from collections.abc import Iterable
from enum import Enum


class ErrorKind(str, Enum):
    """Category of a failure.

    Attributes:
        NOT_FOUND: Target already absent (a race with an external deletion).
        PERMISSION_DENIED: Attribute change or delete rejected by the OS.
        IO_BUSY: Target locked or temporarily inaccessible; retryable.
        CANCELLED: Caller-requested abort.
        INVALID_ARGUMENT: Malformed path, wrong rootedness, invalid characters.
        INVALID_PATH: Path traversal resolves above the root.
        OTHER: Anything else.
    """

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    IO_BUSY = "io_busy"
    CANCELLED = "cancelled"
    INVALID_ARGUMENT = "invalid_argument"
    INVALID_PATH = "invalid_path"
    OTHER = "other"


class TreewrightError(Exception):
    """Base exception for errors raised by treewright."""


class InvalidArgumentError(TreewrightError, ValueError):
    """Raised when an argument is malformed (empty, wrongly rooted, bad characters)."""


class InvalidPathError(TreewrightError, ValueError):
    """Raised when a relative path escapes above its root."""


class OperationCancelledError(TreewrightError):
    """Raised when the caller's cancellation token was triggered."""


class DeletionError(TreewrightError):
    """Aggregate of per-entry failures from a parallel deletion pass.

    Attributes:
        path: Root of the deletion that failed.
        errors: Failures collected before the pass stopped, first one first.
    """

    def __init__(self, path: str, errors: Iterable[BaseException]) -> None:
        self.path = path
        self.errors: tuple[BaseException, ...] = tuple(errors)
        first = self.errors[0] if self.errors else None
        detail = f": {first}" if first is not None else ""
        more = f" (+{len(self.errors) - 1} more)" if len(self.errors) > 1 else ""
        super().__init__(f"Failed to delete {path}{detail}{more}")

    def kinds(self) -> set["ErrorKind"]:
        """Return the categories of all collected failures."""
        return {classify_error(e) for e in self.errors}


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception onto the failure taxonomy.

    Args:
        exc: Exception to classify.

    Returns:
        The matching ErrorKind. Any ``OSError`` that is neither a not-found
        nor a permission failure counts as IO_BUSY.
    """
    if isinstance(exc, DeletionError) and exc.errors:
        return classify_error(exc.errors[0])
    if isinstance(exc, OperationCancelledError):
        return ErrorKind.CANCELLED
    if isinstance(exc, InvalidPathError):
        return ErrorKind.INVALID_PATH
    if isinstance(exc, InvalidArgumentError):
        return ErrorKind.INVALID_ARGUMENT
    if isinstance(exc, (FileNotFoundError, NotADirectoryError)):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, PermissionError):
        return ErrorKind.PERMISSION_DENIED
    if isinstance(exc, OSError):
        return ErrorKind.IO_BUSY
    return ErrorKind.OTHER


def is_retryable(exc: BaseException) -> bool:
    """Check whether a failure is transient.

    A plain exception is retryable if it is IO_BUSY. A DeletionError is
    retryable if at least one of its collected failures is.
    """
    if isinstance(exc, DeletionError):
        return ErrorKind.IO_BUSY in exc.kinds()
    return classify_error(exc) == ErrorKind.IO_BUSY
