"""Lazy directory tree walker.

Enumerates every file and directory below a root exactly once without
ever descending into reparse points (symlinks, junctions). A reparse
point directory is yielded like any other entry but its children stay
invisible, which keeps the walk finite even when links point back into
the tree.
"""

import logging
import os
from collections.abc import Iterator

from treewright.core.cancellation import CancellationToken
from treewright.core.errors import InvalidArgumentError
from treewright.filesystem.models import FileSystemEntry

logger = logging.getLogger(__name__)


def walk(
    directory: str, cancellation: CancellationToken | None = None
) -> Iterator[FileSystemEntry]:
    """Recursively enumerate a directory without following reparse points.

    The walk is lazy and not cached; iterate again to walk again. Each
    directory is yielded when its parent is enumerated and expanded later,
    so parents always come before their children. Entries deleted by other
    actors between enumeration and use surface as not-found errors in the
    consumer, not here.

    Args:
        directory: Root directory to enumerate. Must not be a reparse point.
        cancellation: Token checked before each directory is expanded and
            before each entry is yielded.

    Yields:
        FileSystemEntry for every entry in the subtree (the root excluded).

    Raises:
        InvalidArgumentError: If ``directory`` is a reparse point.
        OSError: If a directory cannot be enumerated.
    """
    root = FileSystemEntry.from_path(directory)
    if root.is_reparse_point:
        raise InvalidArgumentError(f"Cannot walk reparse point: {directory}")

    pending: list[str] = [root.path]
    while pending:
        if cancellation is not None and cancellation.cancelled:
            logger.debug("Walk of %s cancelled", directory)
            return

        current = pending.pop()
        try:
            entries = os.scandir(current)
        except FileNotFoundError:
            if current == root.path:
                raise
            logger.debug("Directory vanished during walk: %s", current)
            continue

        with entries:
            for dir_entry in entries:
                try:
                    item = FileSystemEntry.from_dir_entry(dir_entry)
                except FileNotFoundError:
                    logger.debug("Entry vanished during walk: %s", dir_entry.path)
                    continue

                # Queue before yielding: the consumer may delete a reparse
                # point in parallel and invalidate its attributes.
                if item.is_directory and not item.is_reparse_point:
                    pending.append(item.path)

                if cancellation is not None and cancellation.cancelled:
                    return
                yield item
