"""CLI package for treewright.

This package contains the Typer application and all subcommands.
"""

from treewright.cli.main import app

__all__ = ["app"]
