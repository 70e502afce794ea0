"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
import stat
from pathlib import Path

import pytest


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a nested directory tree with files and a read-only file.

    Layout::

        tree/
            top.txt
            a/
                a1.txt
                b/
                    b1.txt (read-only)
                    c/
                        c1.txt
            empty/
    """
    root = tmp_path / "tree"
    (root / "a" / "b" / "c").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "top.txt").write_text("top")
    (root / "a" / "a1.txt").write_text("a1")
    (root / "a" / "b" / "b1.txt").write_text("b1")
    (root / "a" / "b" / "c" / "c1.txt").write_text("c1")
    os.chmod(root / "a" / "b" / "b1.txt", stat.S_IRUSR | stat.S_IRGRP | stat.S_IROTH)
    return root


@pytest.fixture
def external_dir(tmp_path: Path) -> Path:
    """Create a directory outside any tree under test, with one file."""
    target = tmp_path / "external"
    target.mkdir()
    (target / "keep.txt").write_text("keep")
    return target
