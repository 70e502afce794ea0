"""Unit tests for the platform context."""

from unittest.mock import patch

import pytest
from treewright.core.platform import OSFamily, Platform


class TestPlatformDetection:
    """Tests for Platform.current and Platform.for_family."""

    @pytest.mark.parametrize(
        ("sys_platform", "family"),
        [
            ("win32", OSFamily.WINDOWS),
            ("darwin", OSFamily.MACOS),
            ("linux", OSFamily.LINUX),
        ],
    )
    def test_current(self, sys_platform: str, family: OSFamily) -> None:
        """current() maps sys.platform onto a family."""
        with patch("treewright.core.platform.sys.platform", sys_platform):
            assert Platform.current().family == family

    def test_for_family_accepts_strings(self) -> None:
        """for_family accepts the enum value as a plain string."""
        assert Platform.for_family("windows") == Platform(OSFamily.WINDOWS)

    def test_for_family_rejects_unknown(self) -> None:
        """Unknown families are rejected."""
        with pytest.raises(ValueError):
            Platform.for_family("plan9")


class TestPlatformConventions:
    """Tests for separator, case and character conventions."""

    def test_windows_conventions(self) -> None:
        platform = Platform.for_family(OSFamily.WINDOWS)

        assert platform.sep == "\\"
        assert platform.separators == ("\\", "/")
        assert not platform.case_sensitive
        assert platform.exe_extension == ".exe"
        assert "|" in platform.invalid_path_chars
        assert "?" in platform.invalid_filename_chars

    def test_linux_conventions(self) -> None:
        platform = Platform.for_family(OSFamily.LINUX)

        assert platform.sep == "/"
        assert platform.separators == ("/",)
        assert platform.case_sensitive
        assert platform.exe_extension == ""
        assert platform.invalid_path_chars == frozenset({"\0"})

    def test_macos_is_case_insensitive(self) -> None:
        """macOS uses POSIX separators but ignores case."""
        platform = Platform.for_family(OSFamily.MACOS)

        assert platform.sep == "/"
        assert not platform.case_sensitive

    @pytest.mark.parametrize(
        ("path", "expected"),
        [("C:\\x", True), ("c:", True), ("\\x", True), ("/x", True), ("x\\y", False), ("", False)],
    )
    def test_windows_is_rooted(self, path: str, expected: bool) -> None:
        """Windows paths are rooted by a drive or a leading separator."""
        assert Platform.for_family(OSFamily.WINDOWS).is_rooted(path) is expected

    @pytest.mark.parametrize(("path", "expected"), [("/x", True), ("x/y", False), ("C:", False)])
    def test_posix_is_rooted(self, path: str, expected: bool) -> None:
        """POSIX paths are rooted only by a leading slash."""
        assert Platform.for_family(OSFamily.LINUX).is_rooted(path) is expected

    def test_starts_with_respects_case_rule(self) -> None:
        """Prefix comparison is case-insensitive off Linux."""
        assert not Platform.for_family(OSFamily.LINUX).starts_with("/ABC", "/abc")
        assert Platform.for_family(OSFamily.MACOS).starts_with("/ABC/d", "/abc")
        assert not Platform.for_family(OSFamily.MACOS).starts_with("/ab", "/abc")

    def test_file_name(self) -> None:
        """file_name returns the text after the last separator."""
        assert Platform.for_family(OSFamily.WINDOWS).file_name("a\\b/c") == "c"
        assert Platform.for_family(OSFamily.LINUX).file_name("a\\b") == "a\\b"
        assert Platform.for_family(OSFamily.LINUX).file_name("a/b/") == ""
