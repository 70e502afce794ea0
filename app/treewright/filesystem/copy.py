"""Incremental directory copy.

Copies a directory tree onto a target, skipping files whose size and
modification time already match. Reparse point directories are recreated
as links instead of being followed.
"""

import logging
import os
import shutil

from treewright.core.cancellation import CancellationToken
from treewright.core.errors import InvalidArgumentError
from treewright.filesystem.models import FileSystemEntry

logger = logging.getLogger(__name__)


def copy_directory(
    source: str,
    target: str,
    cancellation: CancellationToken | None = None,
) -> int:
    """Copy ``source`` into ``target`` recursively.

    A file is copied when the target file is missing or differs in size or
    modification time. Metadata is preserved, so a second run copies
    nothing.

    Args:
        source: Existing directory to copy from.
        target: Directory to copy into; created if needed.
        cancellation: Checked before each file and each subdirectory.

    Returns:
        Number of files copied.

    Raises:
        InvalidArgumentError: If ``source`` is not a directory or ``target``
            is empty.
        OperationCancelledError: If cancelled mid-copy.
        OSError: If a file cannot be read or written.
    """
    if not source or not os.path.isdir(source):
        raise InvalidArgumentError(f"Directory not found: '{source}'")
    if not target:
        raise InvalidArgumentError("target must not be empty")
    token = cancellation or CancellationToken.none()
    token.raise_if_cancelled()

    os.makedirs(target, exist_ok=True)

    copied = 0
    subdirectories: list[FileSystemEntry] = []
    with os.scandir(source) as entries:
        for dir_entry in entries:
            entry = FileSystemEntry.from_dir_entry(dir_entry)
            if entry.is_directory:
                subdirectories.append(entry)
                continue

            token.raise_if_cancelled()
            destination = os.path.join(target, dir_entry.name)
            if _needs_copy(entry.path, destination):
                shutil.copy2(entry.path, destination)
                copied += 1

    for entry in subdirectories:
        token.raise_if_cancelled()
        destination = os.path.join(target, os.path.basename(entry.path))
        if entry.is_reparse_point:
            _copy_link(entry.path, destination)
            continue
        copied += copy_directory(entry.path, destination, token)

    logger.debug("Copied %d files from %s to %s", copied, source, target)
    return copied


def _needs_copy(source: str, destination: str) -> bool:
    try:
        dest_stat = os.stat(destination)
    except FileNotFoundError:
        return True
    src_stat = os.stat(source)
    return src_stat.st_size != dest_stat.st_size or src_stat.st_mtime != dest_stat.st_mtime


def _copy_link(source: str, destination: str) -> None:
    """Recreate the link at ``source`` at ``destination`` unless it already matches."""
    link_target = os.readlink(source)
    if os.path.islink(destination):
        if os.readlink(destination) == link_target:
            return
        os.unlink(destination)
    os.symlink(link_target, destination, target_is_directory=True)
