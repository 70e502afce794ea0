"""Filesystem lifecycle module.

This module provides the tree walker, the parallel deletion engine, its
retry wrapper, the staged directory move and the supporting copy and
permission-probe operations.
"""

from treewright.filesystem.copy import copy_directory
from treewright.filesystem.deletion import (
    DeletionPlan,
    clear_read_only,
    delete,
    delete_directory,
    delete_file,
)
from treewright.filesystem.models import EntryAttributes, EntryKind, FileSystemEntry
from treewright.filesystem.move import move_directory
from treewright.filesystem.operator import DeletionOperator, DeletionResult, MoveResult
from treewright.filesystem.permissions import validate_execute_permission
from treewright.filesystem.retry import (
    MAX_RETRY_DELETION,
    delete_directory_with_retry,
    delete_file_with_retry,
    delete_with_retry,
)
from treewright.filesystem.walker import walk

__all__ = [
    "MAX_RETRY_DELETION",
    "DeletionOperator",
    "DeletionPlan",
    "DeletionResult",
    "EntryAttributes",
    "EntryKind",
    "FileSystemEntry",
    "MoveResult",
    "clear_read_only",
    "copy_directory",
    "delete",
    "delete_directory",
    "delete_directory_with_retry",
    "delete_file",
    "delete_file_with_retry",
    "delete_with_retry",
    "move_directory",
    "validate_execute_permission",
    "walk",
]
