"""Unit tests for path algebra and application paths.

Tests resolve_path, make_relative and parent_directory_name for POSIX
and Windows conventions, plus the XDG-compliant directory helpers.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from treewright.core.errors import InvalidArgumentError, InvalidPathError
from treewright.core.paths import (
    APP_NAME,
    ensure_config_dir,
    get_config_dir,
    get_config_path,
    get_staging_dir,
    get_state_dir,
    make_relative,
    parent_directory_name,
    resolve_path,
)
from treewright.core.platform import OSFamily, Platform

LINUX = Platform.for_family(OSFamily.LINUX)
MACOS = Platform.for_family(OSFamily.MACOS)
WINDOWS = Platform.for_family(OSFamily.WINDOWS)


class TestResolvePathPosix:
    """Tests for resolve_path with POSIX conventions."""

    def test_collapses_parent_reference(self) -> None:
        """A '..' cancels the component before it."""
        assert resolve_path("/a", "b/../c", LINUX) == "/a/c"

    def test_drops_current_directory_components(self) -> None:
        """'.' components are dropped."""
        assert resolve_path("/a", "./b/./c", LINUX) == "/a/b/c"

    def test_resolves_back_to_root(self) -> None:
        """Climbing back to the root itself is allowed."""
        assert resolve_path("/a", "b/..", LINUX) == "/a"

    def test_filesystem_root(self) -> None:
        """Resolving '.' against '/' yields '/'."""
        assert resolve_path("/", ".", LINUX) == "/"

    def test_ignores_duplicate_separators(self) -> None:
        """Empty components from doubled separators are dropped."""
        assert resolve_path("/a/", "b//c/", LINUX) == "/a/b/c"

    def test_escape_above_root_fails(self) -> None:
        """Climbing above the root raises InvalidPathError."""
        with pytest.raises(InvalidPathError):
            resolve_path("/a", "../x", LINUX)

    def test_deep_escape_fails(self) -> None:
        """Climbing above the root after descending still fails."""
        with pytest.raises(InvalidPathError):
            resolve_path("/a/b", "c/../../..", LINUX)

    def test_escape_above_filesystem_root_fails(self) -> None:
        """'..' against '/' has nothing to cancel."""
        with pytest.raises(InvalidPathError):
            resolve_path("/", "..", LINUX)

    @pytest.mark.parametrize(
        "relative",
        ["x", "x/y", "x/../y", "./x", "x/./../..", "../a/x", "x/y/../../..", "a/b/c/../../d"],
    )
    def test_result_never_leaves_root(self, relative: str) -> None:
        """The result is the root or a descendant, or the call fails."""
        root = "/srv/work"
        try:
            result = resolve_path(root, relative, LINUX)
        except InvalidPathError:
            return
        assert result == root or result.startswith(root + "/")

    def test_unrooted_root_rejected(self) -> None:
        """The root must be a rooted path."""
        with pytest.raises(InvalidArgumentError, match="rooted"):
            resolve_path("a", "b", LINUX)

    def test_rooted_relative_rejected(self) -> None:
        """The relative path must not be rooted."""
        with pytest.raises(InvalidArgumentError, match="can not be a rooted path"):
            resolve_path("/a", "/b", LINUX)

    def test_invalid_path_character_rejected(self) -> None:
        """NUL is never valid in a path."""
        with pytest.raises(InvalidArgumentError, match="invalid path characters"):
            resolve_path("/a", "b\0c", LINUX)

    @pytest.mark.parametrize(("root", "relative"), [("", "b"), ("/a", "")])
    def test_empty_arguments_rejected(self, root: str, relative: str) -> None:
        """Both arguments are required."""
        with pytest.raises(InvalidArgumentError):
            resolve_path(root, relative, LINUX)

    def test_backslash_is_a_plain_character(self) -> None:
        """On POSIX a backslash is part of the file name."""
        assert resolve_path("/a", "b\\c", LINUX) == "/a/b\\c"


class TestResolvePathWindows:
    """Tests for resolve_path with Windows conventions."""

    def test_collapses_and_uses_backslashes(self) -> None:
        """Result is joined with backslashes."""
        assert resolve_path("C:\\work", "src\\..\\out", WINDOWS) == "C:\\work\\out"

    def test_accepts_forward_slashes(self) -> None:
        """Alternate separators in the input are accepted."""
        assert resolve_path("C:\\a", "b/c", WINDOWS) == "C:\\a\\b\\c"

    def test_single_component_is_drive_rooted(self) -> None:
        """A lone drive resolves to its drive-rooted form."""
        assert resolve_path("C:\\", ".", WINDOWS) == "C:\\"

    def test_escape_above_root_fails(self) -> None:
        """Climbing above the root raises InvalidPathError."""
        with pytest.raises(InvalidPathError):
            resolve_path("C:\\a", "..\\..\\b", WINDOWS)

    def test_invalid_file_name_character_rejected(self) -> None:
        """Wildcards are invalid in the final component."""
        with pytest.raises(InvalidArgumentError, match="invalid folder name characters"):
            resolve_path("C:\\a", "b\\c?d", WINDOWS)

    def test_invalid_path_character_rejected(self) -> None:
        """A pipe is invalid anywhere in a Windows path."""
        with pytest.raises(InvalidArgumentError, match="invalid path characters"):
            resolve_path("C:\\a", "b|c\\d", WINDOWS)

    @pytest.mark.parametrize("relative", ["D:\\x", "\\x", "D:x"])
    def test_rooted_relative_rejected(self, relative: str) -> None:
        """Drive- or separator-rooted relative paths are rejected."""
        with pytest.raises(InvalidArgumentError):
            resolve_path("C:\\a", relative, WINDOWS)


class TestMakeRelative:
    """Tests for make_relative."""

    def test_strips_folder_prefix(self) -> None:
        """A path under the folder becomes relative."""
        assert make_relative("/src/project/foo.cpp", "/src", LINUX) == "project/foo.cpp"

    def test_unrelated_folder_returns_path(self) -> None:
        """A path outside the folder is returned unchanged."""
        assert make_relative("/src/project/foo.cpp", "/specs", LINUX) == "/src/project/foo.cpp"

    def test_prefix_without_separator_boundary_returns_path(self) -> None:
        """A textual prefix that ends mid-component does not count."""
        assert (
            make_relative("/src/project/foo.cpp", "/src/proj", LINUX) == "/src/project/foo.cpp"
        )

    def test_equal_paths_yield_empty_string(self) -> None:
        """A folder relative to itself is empty."""
        assert make_relative("/src", "/src", LINUX) == ""

    def test_folder_with_trailing_separator(self) -> None:
        """A folder ending in a separator already sits on a boundary."""
        assert make_relative("/usr/bin/ls", "/usr/bin/", LINUX) == "ls"

    def test_linux_is_case_sensitive(self) -> None:
        """On Linux a differently cased prefix does not match."""
        assert make_relative("/Src/a.txt", "/src", LINUX) == "/Src/a.txt"

    def test_macos_is_case_insensitive(self) -> None:
        """On macOS a differently cased prefix matches."""
        assert make_relative("/Src/a.txt", "/src", MACOS) == "a.txt"

    def test_windows_is_case_insensitive(self) -> None:
        """On Windows case is ignored and backslashes are used."""
        assert make_relative("d:\\src\\project\\foo.cpp", "D:\\SRC", WINDOWS) == "project\\foo.cpp"

    def test_windows_normalizes_alternate_separators(self) -> None:
        """Forward slashes are converted before comparison."""
        assert make_relative("d:/src/project/foo.cpp", "d:\\src", WINDOWS) == "project\\foo.cpp"

    def test_windows_drive_root_folder(self) -> None:
        """A drive root folder ends with a separator."""
        assert make_relative("d:\\src\\foo.cpp", "d:\\", WINDOWS) == "src\\foo.cpp"

    def test_works_for_paths_that_do_not_exist(self, tmp_path: Path) -> None:
        """No disk access is involved."""
        missing = tmp_path / "missing" / "file.txt"
        assert not missing.exists()
        assert make_relative(str(missing), str(tmp_path), LINUX) == "missing/file.txt"

    def test_empty_path_rejected(self) -> None:
        """The path argument is required."""
        with pytest.raises(InvalidArgumentError):
            make_relative("", "/src", LINUX)


class TestParentDirectoryName:
    """Tests for parent_directory_name."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/a/b/c", "/a/b"),
            ("/a/b/c/", "/a/b"),
            ("/a", "/"),
            ("/", "/"),
            ("a/b", "a"),
            ("a", ""),
            ("", ""),
            ("   ", ""),
        ],
    )
    def test_posix(self, path: str, expected: str) -> None:
        """POSIX parents keep a leading separator for rooted input."""
        assert parent_directory_name(path, LINUX) == expected

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("C:\\a\\b", "C:\\a"),
            ("C:\\a\\b\\", "C:\\a"),
            ("C:/a/b", "C:\\a"),
            ("C:\\a", "C:"),
            ("C:\\", ""),
            ("", ""),
        ],
    )
    def test_windows(self, path: str, expected: str) -> None:
        """Windows parents are joined with backslashes."""
        assert parent_directory_name(path, WINDOWS) == expected


class TestApplicationDirs:
    """Tests for the XDG-compliant directory helpers."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {"HOME": "/home/tester"}):
            os.environ.pop("XDG_CONFIG_HOME", None)

            result = get_config_dir()

        assert result == Path("/home/tester") / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_config_dir() == tmp_path / APP_NAME
            assert get_config_path() == tmp_path / APP_NAME / "config.toml"

    def test_respects_xdg_state_home(self, tmp_path: Path) -> None:
        """get_state_dir and the staging dir live under XDG_STATE_HOME."""
        with patch.dict(os.environ, {"XDG_STATE_HOME": str(tmp_path)}):
            assert get_state_dir() == tmp_path / APP_NAME
            assert get_staging_dir() == tmp_path / APP_NAME / "staging"

    def test_ensure_config_dir_creates_directory(self, tmp_path: Path) -> None:
        """ensure_config_dir creates the directory."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = ensure_config_dir()

        assert result.is_dir()

    def test_ensure_config_dir_reports_failure(self, tmp_path: Path) -> None:
        """A directory that cannot be created raises RuntimeError."""
        blocker = tmp_path / "file"
        blocker.write_text("")
        with (
            patch.dict(os.environ, {"XDG_CONFIG_HOME": str(blocker)}),
            pytest.raises(RuntimeError, match="Cannot create config directory"),
        ):
            ensure_config_dir()
