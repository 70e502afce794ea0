"""Host platform context.

Path algebra and attribute handling branch on whether the host uses
backslash-rooted, case-insensitive paths (Windows) or slash-rooted,
case-sensitive paths (Linux). This module captures that decision in an
explicit value that is passed around instead of being looked up globally.
"""

import sys
from dataclasses import dataclass
from enum import Enum

# Control characters are invalid in paths on Windows.
_CONTROL_CHARS = frozenset(chr(i) for i in range(1, 32))

_WINDOWS_INVALID_PATH_CHARS = frozenset({"|", "\0"}) | _CONTROL_CHARS
_WINDOWS_INVALID_FILENAME_CHARS = (
    frozenset({'"', "<", ">", "|", "\0", ":", "*", "?", "\\", "/"}) | _CONTROL_CHARS
)
_POSIX_INVALID_PATH_CHARS = frozenset({"\0"})
_POSIX_INVALID_FILENAME_CHARS = frozenset({"\0", "/"})


class OSFamily(str, Enum):
    """Operating system family.

    Attributes:
        WINDOWS: Backslash separators, drive-rooted, case-insensitive.
        LINUX: Slash separators, case-sensitive.
        MACOS: Slash separators, case-insensitive.
    """

    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"


@dataclass(frozen=True, slots=True)
class Platform:
    """Path conventions of one operating system family.

    Attributes:
        family: The operating system family these conventions belong to.
    """

    family: OSFamily

    @classmethod
    def current(cls) -> "Platform":
        """Detect the platform of the running interpreter."""
        if sys.platform.startswith("win"):
            return cls(OSFamily.WINDOWS)
        if sys.platform == "darwin":
            return cls(OSFamily.MACOS)
        return cls(OSFamily.LINUX)

    @classmethod
    def for_family(cls, family: OSFamily | str) -> "Platform":
        """Build the platform for an explicit family (e.g. ``"windows"``)."""
        return cls(OSFamily(family))

    @property
    def is_windows(self) -> bool:
        return self.family == OSFamily.WINDOWS

    @property
    def sep(self) -> str:
        """Primary directory separator."""
        return "\\" if self.is_windows else "/"

    @property
    def alt_sep(self) -> str:
        """Alternate directory separator (``/`` on every family)."""
        return "/"

    @property
    def separators(self) -> tuple[str, ...]:
        return ("\\", "/") if self.is_windows else ("/",)

    @property
    def case_sensitive(self) -> bool:
        """Whether path comparison is case-sensitive (Linux only)."""
        return self.family == OSFamily.LINUX

    @property
    def invalid_path_chars(self) -> frozenset[str]:
        if self.is_windows:
            return _WINDOWS_INVALID_PATH_CHARS
        return _POSIX_INVALID_PATH_CHARS

    @property
    def invalid_filename_chars(self) -> frozenset[str]:
        if self.is_windows:
            return _WINDOWS_INVALID_FILENAME_CHARS
        return _POSIX_INVALID_FILENAME_CHARS

    @property
    def exe_extension(self) -> str:
        return ".exe" if self.is_windows else ""

    def is_rooted(self, path: str) -> bool:
        """Check whether a path is rooted.

        On Windows a path is rooted if it starts with a separator or a
        drive designator (``C:``); elsewhere it must start with ``/``.

        Args:
            path: Path to check.

        Returns:
            True if the path is rooted.
        """
        if not path:
            return False
        if self.is_windows:
            if path[0] in self.separators:
                return True
            return len(path) >= 2 and path[1] == ":" and path[0].isalpha()
        return path.startswith("/")

    def starts_with(self, path: str, prefix: str) -> bool:
        """Prefix comparison under the platform's case rule."""
        if self.case_sensitive:
            return path.startswith(prefix)
        # Compare equal-length slices so callers can slice by len(prefix).
        return len(path) >= len(prefix) and path[: len(prefix)].upper() == prefix.upper()

    def file_name(self, path: str) -> str:
        """Return the final component of ``path`` (text after the last separator)."""
        index = max(path.rfind(sep) for sep in self.separators)
        return path[index + 1 :]
