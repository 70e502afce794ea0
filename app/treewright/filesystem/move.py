"""Staged directory move.

Relocates a directory tree through an intermediate staging location.
Same-volume renames are atomic, so the only windows in which neither
source nor target is consistent are the delete-then-create-parent steps,
and those run before each rename rather than during it.

There is no rollback: if the move fails after the source was renamed to
staging, the tree is left in the staging location for the caller to
recover.
"""

import logging
import os

from treewright.core.cancellation import CancellationToken
from treewright.core.errors import InvalidArgumentError
from treewright.core.paths import parent_directory_name
from treewright.core.platform import Platform
from treewright.filesystem.deletion import delete_directory

logger = logging.getLogger(__name__)


def move_directory(
    source: str,
    target: str,
    staging: str,
    cancellation: CancellationToken | None = None,
    platform: Platform | None = None,
) -> None:
    """Move ``source`` to ``target`` via ``staging``.

    Steps:
    1. Delete any leftover ``staging`` directory.
    2. Ensure the parent of ``staging`` exists.
    3. Rename ``source`` to ``staging``.
    4. Delete any existing ``target`` directory.
    5. Ensure the parent of ``target`` exists.
    6. Rename ``staging`` to ``target``.

    Args:
        source: Existing directory to move.
        target: Final location; replaced if it exists.
        staging: Intermediate location on the same volume as both.
        cancellation: Caller's cancellation token, passed to deletions.
        platform: Path conventions for deriving parent directories.

    Raises:
        InvalidArgumentError: If an argument is empty or ``source`` is not
            a directory. Raised before any side effect.
        OperationCancelledError: If cancelled during a deletion step.
        OSError: If a rename or directory creation fails.
    """
    if not source or not os.path.isdir(source):
        raise InvalidArgumentError(f"Directory not found: '{source}'")
    if not target:
        raise InvalidArgumentError("target must not be empty")
    if not staging:
        raise InvalidArgumentError("staging must not be empty")
    platform = platform or Platform.current()

    logger.debug("Moving %s to %s via %s", source, target, staging)

    delete_directory(staging, cancellation=cancellation)
    _ensure_parent(staging, platform)
    os.rename(source, staging)

    delete_directory(target, cancellation=cancellation)
    _ensure_parent(target, platform)
    os.rename(staging, target)


def _ensure_parent(path: str, platform: Platform) -> None:
    parent = parent_directory_name(os.path.abspath(path), platform)
    if parent:
        os.makedirs(parent, exist_ok=True)
