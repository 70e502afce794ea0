"""Filesystem entry models.

This module defines the values produced by the tree walker and consumed
by the deletion engine: the kind of an entry, its attribute flags and
the entry itself.
"""

import os
import stat
from dataclasses import dataclass
from enum import Enum, Flag, auto

# Windows-only stat attributes; constant values are fixed by the Win32 API.
_FILE_ATTRIBUTE_READONLY = getattr(stat, "FILE_ATTRIBUTE_READONLY", 0x1)
_FILE_ATTRIBUTE_REPARSE_POINT = getattr(stat, "FILE_ATTRIBUTE_REPARSE_POINT", 0x400)


class EntryKind(str, Enum):
    """Kind of a filesystem entry.

    Attributes:
        FILE: Regular file, or a link that does not resolve to a directory.
        DIRECTORY: Directory, or a link that resolves to one.
    """

    FILE = "file"
    DIRECTORY = "directory"


class EntryAttributes(Flag):
    """Attribute flags of a filesystem entry.

    Attributes:
        NONE: No flags set.
        READ_ONLY: Entry cannot be modified by its owner as-is.
        REPARSE_POINT: Entry redirects elsewhere (symlink or junction).
    """

    NONE = 0
    READ_ONLY = auto()
    REPARSE_POINT = auto()


def attributes_from_stat(st: os.stat_result) -> EntryAttributes:
    """Derive attribute flags from an lstat() result.

    Windows reports native file attributes; elsewhere read-only means the
    owner write bit is missing and a reparse point is a symlink.
    """
    attributes = EntryAttributes.NONE
    native = getattr(st, "st_file_attributes", None)

    if native is not None:
        if native & _FILE_ATTRIBUTE_READONLY:
            attributes |= EntryAttributes.READ_ONLY
        if native & _FILE_ATTRIBUTE_REPARSE_POINT:
            attributes |= EntryAttributes.REPARSE_POINT
    elif not st.st_mode & stat.S_IWUSR:
        attributes |= EntryAttributes.READ_ONLY

    if stat.S_ISLNK(st.st_mode):
        attributes |= EntryAttributes.REPARSE_POINT
    return attributes


@dataclass(slots=True)
class FileSystemEntry:
    """A file or directory observed by the tree walker.

    Attributes are captured at enumeration time and may go stale while
    other actors modify the tree; call refresh() to re-read them.

    Attributes:
        path: Absolute path of the entry.
        kind: Whether the entry is a file or a directory.
        attributes: Attribute flags captured at observation time.
    """

    path: str
    kind: EntryKind
    attributes: EntryAttributes = EntryAttributes.NONE

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)

    @classmethod
    def from_dir_entry(cls, entry: os.DirEntry[str]) -> "FileSystemEntry":
        """Build an entry from a scandir() result.

        Raises:
            OSError: If the entry vanished before it could be inspected.
        """
        attributes = attributes_from_stat(entry.stat(follow_symlinks=False))
        kind = EntryKind.DIRECTORY if entry.is_dir() else EntryKind.FILE
        return cls(path=entry.path, kind=kind, attributes=attributes)

    @classmethod
    def from_path(cls, path: str) -> "FileSystemEntry":
        """Build an entry by inspecting ``path`` on disk.

        Raises:
            FileNotFoundError: If nothing exists at ``path``.
        """
        # abspath drops a trailing separator, which would make lstat follow a link.
        path = os.path.abspath(path)
        attributes = attributes_from_stat(os.lstat(path))
        kind = EntryKind.DIRECTORY if os.path.isdir(path) else EntryKind.FILE
        return cls(path=path, kind=kind, attributes=attributes)

    @property
    def is_directory(self) -> bool:
        return self.kind == EntryKind.DIRECTORY

    @property
    def is_reparse_point(self) -> bool:
        return EntryAttributes.REPARSE_POINT in self.attributes

    @property
    def is_read_only(self) -> bool:
        return EntryAttributes.READ_ONLY in self.attributes

    @property
    def exists(self) -> bool:
        """Whether the entry itself (not a link target) is still on disk."""
        return os.path.lexists(self.path)

    def refresh(self) -> None:
        """Re-read the attribute flags from disk.

        Raises:
            FileNotFoundError: If the entry has been removed.
        """
        self.attributes = attributes_from_stat(os.lstat(self.path))
