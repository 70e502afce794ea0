"""CLI commands for treewright.

This package contains all subcommand implementations.
"""

from treewright.cli.commands import config, fs, path

__all__ = ["config", "fs", "path"]
