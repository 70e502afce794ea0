"""Directory deletion engine.

Deletes directory trees of arbitrary size in two phases:

1. Parallel phase: the tree walker feeds a bounded queue consumed by a
   pool of worker threads. Each worker clears the read-only attribute of
   its entry, deletes files and reparse points on the spot and records
   ordinary directories in the deletion plan. The first unswallowed
   failure cancels the pool's scope so no new work is started; work
   already in flight finishes.
2. Drain phase: the recorded directories are removed sequentially,
   longest path first, which guarantees children go before parents.
"""

import logging
import os
import queue
import stat
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from treewright.core.cancellation import CancellationToken
from treewright.core.errors import DeletionError, InvalidArgumentError
from treewright.core.platform import Platform
from treewright.filesystem.models import EntryAttributes, FileSystemEntry, attributes_from_stat
from treewright.filesystem.walker import walk

logger = logging.getLogger(__name__)

_HOST = Platform.current()

# Entries buffered per worker between the walker and the pool.
_QUEUE_DEPTH_PER_WORKER = 64


class DeletionPlan:
    """Directories pending removal after their contents are cleared.

    Safe for concurrent push() from worker threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._directories: list[str] = []

    def push(self, path: str) -> None:
        with self._lock:
            self._directories.append(path)

    def __len__(self) -> int:
        with self._lock:
            return len(self._directories)

    def ordered(self) -> list[str]:
        """Return pending directories, longest path first.

        A descendant's path is always longer than its ancestor's, so this
        order removes children before parents without tracking depth.
        """
        with self._lock:
            return sorted(self._directories, key=len, reverse=True)


def clear_read_only(path: str) -> bool:
    """Clear the read-only attribute of ``path``.

    On Windows this clears FILE_ATTRIBUTE_READONLY; elsewhere it adds the
    owner write bit. Must not be called on reparse points: chmod follows
    links and would modify the link target.

    Returns:
        True if the attribute was set and has been cleared.
    """
    st = os.lstat(path)
    if EntryAttributes.READ_ONLY not in attributes_from_stat(st):
        return False
    if _HOST.is_windows:
        os.chmod(path, stat.S_IWRITE | stat.S_IREAD)
    else:
        os.chmod(path, stat.S_IMODE(st.st_mode) | stat.S_IWUSR)
    return True


def delete_directory(
    path: str,
    *,
    contents_only: bool = False,
    continue_on_error: bool = False,
    cancellation: CancellationToken | None = None,
    max_workers: int | None = None,
) -> None:
    """Delete a directory tree.

    Succeeds immediately if ``path`` is not a directory. A root that is
    itself a reparse point is removed as a link; its target is untouched.

    Args:
        path: Directory to delete.
        contents_only: Remove everything inside ``path`` but keep ``path``.
        continue_on_error: Treat per-entry failures as handled and keep going.
        cancellation: Caller's cancellation token.
        max_workers: Worker threads for the parallel phase (default: CPU count).

    Raises:
        InvalidArgumentError: If ``path`` is empty.
        DeletionError: If a per-entry failure or an enumeration failure
            stopped the parallel phase; carries the collected failures.
        OperationCancelledError: If the caller's token was cancelled.
        OSError: If a directory cannot be removed in the drain phase.
    """
    if not path:
        raise InvalidArgumentError("path must not be empty")
    token = cancellation or CancellationToken.none()

    if not os.path.isdir(path):
        return
    root = FileSystemEntry.from_path(path)

    if not contents_only:
        if root.is_reparse_point:
            logger.debug("Removing reparse point root %s", root.path)
            _remove_reparse_point(root.path)
            return
        clear_read_only(root.path)
    elif root.is_reparse_point:
        raise InvalidArgumentError(f"Cannot delete contents of reparse point: {root.path}")

    plan = DeletionPlan()
    if not contents_only:
        plan.push(root.path)

    failures = _run_parallel_phase(root.path, plan, token, continue_on_error, max_workers)
    if failures:
        raise DeletionError(root.path, failures) from failures[0]
    token.raise_if_cancelled()

    directories = plan.ordered()
    logger.debug("Removing %d directories under %s", len(directories), root.path)
    for directory in directories:
        token.raise_if_cancelled()
        try:
            _remove_with_parent_fallback(os.rmdir, directory)
        except FileNotFoundError:
            logger.debug("Directory already gone: %s", directory)


def delete_file(path: str) -> None:
    """Delete a single file, clearing its read-only attribute first.

    No-op if nothing exists at ``path`` or if ``path`` is a directory.
    A symlink is removed as a link.

    Raises:
        InvalidArgumentError: If ``path`` is empty.
        OSError: If the file cannot be deleted.
    """
    if not path:
        raise InvalidArgumentError("path must not be empty")
    try:
        entry = FileSystemEntry.from_path(path)
    except FileNotFoundError:
        return
    if entry.is_directory:
        return

    if not entry.is_reparse_point and entry.is_read_only:
        clear_read_only(entry.path)
    _remove_file(entry.path)


def delete(path: str, cancellation: CancellationToken | None = None) -> None:
    """Delete ``path`` whether it is a directory or a file."""
    delete_directory(path, cancellation=cancellation)
    delete_file(path)


# =============================================================================
# Parallel phase
# =============================================================================


def _run_parallel_phase(
    root: str,
    plan: DeletionPlan,
    token: CancellationToken,
    continue_on_error: bool,
    max_workers: int | None,
) -> list[BaseException]:
    """Walk ``root`` and process its entries on a worker pool.

    Returns:
        Failures that stopped the phase, in the order they were recorded.
    """
    workers = max_workers or os.cpu_count() or 1
    failures: list[BaseException] = []
    failures_lock = threading.Lock()

    def record_failure(exc: BaseException) -> None:
        with failures_lock:
            failures.append(exc)

    # A linked scope: the pool stops on the first error without cancelling
    # the caller's token.
    with token.link() as scope:
        work: queue.Queue[FileSystemEntry | None] = queue.Queue(
            maxsize=workers * _QUEUE_DEPTH_PER_WORKER
        )
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="treewright-delete"
        ) as pool:
            futures = [
                pool.submit(_worker, work, scope, plan, continue_on_error, record_failure)
                for _ in range(workers)
            ]
            try:
                for entry in walk(root, scope):
                    if scope.cancelled:
                        break
                    work.put(entry)
            except Exception as e:
                logger.debug("Enumeration of %s failed: %s", root, e)
                record_failure(e)
                scope.cancel()
            finally:
                for _ in futures:
                    work.put(None)

            for future in futures:
                future.result()

    return failures


def _worker(
    work: "queue.Queue[FileSystemEntry | None]",
    scope: CancellationToken,
    plan: DeletionPlan,
    continue_on_error: bool,
    record_failure: Callable[[BaseException], None],
) -> None:
    """Consume entries until the sentinel; skip them once cancelled."""
    while True:
        item = work.get()
        if item is None:
            return
        if scope.cancelled:
            continue

        try:
            _process_entry(item, plan)
        except Exception as e:
            if continue_on_error:
                logger.warning("Ignoring failure deleting %s: %s", item.path, e)
                continue
            record_failure(e)
            scope.cancel()


def _process_entry(entry: FileSystemEntry, plan: DeletionPlan) -> None:
    """Delete one walked entry, or defer it to the plan if it is a directory."""
    try:
        if not entry.is_reparse_point and entry.is_read_only:
            clear_read_only(entry.path)

        if not entry.is_directory:
            _remove_file(entry.path)
        elif entry.is_reparse_point:
            _remove_reparse_point(entry.path)
        else:
            plan.push(entry.path)
    except FileNotFoundError:
        # Removed by another actor since the walk observed it.
        logger.debug("Entry already gone: %s", entry.path)


# =============================================================================
# Removal primitives
# =============================================================================


def _remove_file(path: str) -> None:
    try:
        _remove_with_parent_fallback(os.remove, path)
    except FileNotFoundError:
        logger.debug("File already gone: %s", path)


def _remove_reparse_point(path: str) -> None:
    """Remove a directory reparse point without touching its target.

    Directory links are removed directory-style on Windows. When the link
    no longer resolves to a directory (its target, possibly another link
    deleted in parallel, vanished), it is removed file-style instead.
    """
    try:
        if _HOST.is_windows:
            _remove_with_parent_fallback(os.rmdir, path)
        else:
            _remove_with_parent_fallback(os.unlink, path)
    except (FileNotFoundError, NotADirectoryError):
        logger.debug("Reparse point target vanished, removing as file: %s", path)
        if os.path.lexists(path):
            _remove_file(path)


def _remove_with_parent_fallback(remove: Callable[[str], None], path: str) -> None:
    """Call ``remove(path)``; on POSIX retry once after making the parent writable.

    POSIX checks write permission on the containing directory, so a
    read-only parent blocks removal of its children.
    """
    try:
        remove(path)
    except PermissionError:
        if _HOST.is_windows or not _make_owner_writable(os.path.dirname(path)):
            raise
        remove(path)


def _make_owner_writable(directory: str) -> bool:
    st = os.stat(directory)
    if st.st_mode & stat.S_IWUSR:
        return False
    os.chmod(directory, stat.S_IMODE(st.st_mode) | stat.S_IWUSR)
    return True
