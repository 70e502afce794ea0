"""Cooperative cancellation.

A CancellationToken is a thread-safe flag that long-running operations
poll between units of work. Tokens can be linked: a child token is
cancelled whenever its parent is, but cancelling the child leaves the
parent untouched. The deletion engine uses this to stop its own worker
pool on the first error without cancelling the caller.
"""

import threading
from types import TracebackType

from treewright.core.errors import OperationCancelledError


class CancellationToken:
    """Thread-safe, idempotent cancellation flag with parent linking."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._children: list[CancellationToken] = []
        self._parent: CancellationToken | None = None

    @classmethod
    def none(cls) -> "CancellationToken":
        """Return a fresh token that nobody else holds."""
        return cls()

    @property
    def cancelled(self) -> bool:
        """True once cancel() has been called on this token or an ancestor."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Cancel this token and every token linked to it.

        Safe to call from any number of threads, any number of times.
        """
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            children = list(self._children)
        for child in children:
            child.cancel()

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelledError if this token is cancelled."""
        if self._event.is_set():
            raise OperationCancelledError("Operation was cancelled")

    def wait(self, timeout: float) -> bool:
        """Sleep for up to ``timeout`` seconds, waking early on cancellation.

        Returns:
            True if the token was cancelled, False if the timeout elapsed.
        """
        return self._event.wait(timeout)

    def link(self) -> "CancellationToken":
        """Create a child token that is cancelled together with this one."""
        child = CancellationToken()
        child._parent = self
        with self._lock:
            already_cancelled = self._event.is_set()
            if not already_cancelled:
                self._children.append(child)
        if already_cancelled:
            child.cancel()
        return child

    def detach(self) -> None:
        """Stop following the parent token."""
        parent = self._parent
        if parent is None:
            return
        with parent._lock:
            if self in parent._children:
                parent._children.remove(self)
        self._parent = None

    def __enter__(self) -> "CancellationToken":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.detach()

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"<CancellationToken {state}>"
