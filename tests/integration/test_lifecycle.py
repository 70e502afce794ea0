"""Integration tests for directory tree lifecycles.

These tests drive the CLI end to end against real trees on disk: copy a
tree, move the copy through a staging area, then delete everything.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from treewright.cli.main import app
from treewright.core.paths import resolve_path
from treewright.core.platform import Platform
from treewright.filesystem.deletion import delete_directory
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path):
    """Point config and state lookups at a temporary directory."""
    with patch.dict(
        os.environ,
        {
            "XDG_CONFIG_HOME": str(tmp_path / "xdg-config"),
            "XDG_STATE_HOME": str(tmp_path / "xdg-state"),
        },
    ):
        yield


def _build_deep_tree(root: Path, width: int, depth: int) -> int:
    """Create ``width`` files in each of ``depth`` nested levels; return the file count."""
    current = root
    count = 0
    for level in range(depth):
        current = current / f"level{level}"
        current.mkdir(parents=True)
        for i in range(width):
            (current / f"f{i}.txt").write_text(f"{level}:{i}")
            count += 1
    return count


class TestTreeLifecycle:
    """Copy, move and delete a tree through the CLI."""

    def test_copy_move_delete(self, sample_tree: Path, tmp_path: Path) -> None:
        copy = tmp_path / "copy"
        moved = tmp_path / "moved"

        cp = runner.invoke(app, ["fs", "cp", str(sample_tree), str(copy)])
        mv = runner.invoke(app, ["fs", "mv", str(copy), str(moved)])
        rm = runner.invoke(app, ["fs", "rm", str(sample_tree), str(moved)])

        assert (cp.exit_code, mv.exit_code, rm.exit_code) == (0, 0, 0)
        assert not copy.exists()
        assert not moved.exists()
        assert not sample_tree.exists()
        assert list((tmp_path / "xdg-state" / "treewright" / "staging").iterdir()) == []

    def test_config_tunables_apply(self, tmp_path: Path) -> None:
        """A config file with a single worker still deletes a deep tree."""
        config_dir = tmp_path / "xdg-config" / "treewright"
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text("max_workers = 1\nretry_backoff_seconds = 0\n")
        root = tmp_path / "deep"
        _build_deep_tree(root, width=20, depth=12)

        result = runner.invoke(app, ["fs", "rm", str(root)])

        assert result.exit_code == 0
        assert not root.exists()


class TestResolvedPathsStayInside:
    """Paths produced by resolve_path are safe deletion targets."""

    @pytest.mark.skipif(os.name == "nt", reason="POSIX paths")
    def test_delete_resolved_subdirectory(self, sample_tree: Path) -> None:
        target = resolve_path(str(sample_tree), "a/b/../b", Platform.current())

        delete_directory(target)

        assert not (sample_tree / "a" / "b").exists()
        assert (sample_tree / "a" / "a1.txt").exists()
