"""Filesystem lifecycle commands.

Provides commands to delete, move and copy directory trees, to probe
directory permissions and to fingerprint files.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from treewright.core.config import ConfigError, TreewrightConfig, load_config_or_default
from treewright.core.errors import TreewrightError
from treewright.core.paths import get_staging_dir
from treewright.filesystem.copy import copy_directory
from treewright.filesystem.operator import DeletionOperator, DeletionResult
from treewright.filesystem.permissions import validate_execute_permission
from treewright.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
)
from treewright.utils.hashing import get_file_hash, get_path_hash

app = typer.Typer(
    help="Delete, move and copy directory trees.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def rm(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Files or directories to delete."),
    ],
    contents_only: Annotated[
        bool,
        typer.Option("--contents-only", help="Keep the directories, delete their contents."),
    ] = False,
    continue_on_error: Annotated[
        bool,
        typer.Option("--continue-on-error", help="Skip entries that cannot be deleted."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
) -> None:
    """Delete files and directory trees, retrying locked entries."""
    config = _load_config()
    operator = DeletionOperator(dry_run=dry_run, config=config)
    results = operator.delete(
        [str(p) for p in paths],
        contents_only=contents_only,
        continue_on_error=continue_on_error or None,
    )

    _print_deletion_results(results)

    if any(not r.success for r in results):
        raise typer.Exit(code=1)


@app.command()
def mv(
    source: Annotated[Path, typer.Argument(help="Directory to move.")],
    target: Annotated[Path, typer.Argument(help="Destination; replaced if it exists.")],
    staging: Annotated[
        Path | None,
        typer.Option(
            "--staging",
            "-s",
            help="Staging directory on the same volume (default: state dir).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be moved."),
    ] = False,
) -> None:
    """Move a directory tree through a staging directory."""
    staging_path = staging or get_staging_dir() / source.name
    operator = DeletionOperator(dry_run=dry_run, config=_load_config())
    result = operator.move(str(source), str(target), str(staging_path))

    if not result.success:
        print_error(result.error or f"Failed to move {source}")
        raise typer.Exit(code=1)

    if result.dry_run:
        print_info(f"Dry run: would move {source} to {target} via {staging_path}")
    else:
        print_success(f"Moved {source} to {target}")


@app.command()
def cp(
    source: Annotated[Path, typer.Argument(help="Directory to copy.")],
    target: Annotated[Path, typer.Argument(help="Directory to copy into.")],
) -> None:
    """Copy a directory tree, skipping files that are already up to date."""
    try:
        copied = copy_directory(str(source), str(target))
    except (OSError, TreewrightError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Copied {copied} file(s) from {source} to {target}")


@app.command("check-permissions")
def check_permissions(
    directory: Annotated[Path, typer.Argument(help="Directory to probe.")],
) -> None:
    """Check read access on a directory and all of its ancestors."""
    config = _load_config()
    try:
        validate_execute_permission(str(directory), failsafe=config.permissions_check_failsafe)
    except (OSError, RuntimeError, TreewrightError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"All directories up from {directory} are readable.")


@app.command("hash")
def hash_command(
    target: Annotated[Path, typer.Argument(help="File to fingerprint.")],
    path_only: Annotated[
        bool,
        typer.Option("--path-only", help="Hash the path string instead of the contents."),
    ] = False,
) -> None:
    """Print the SHA-256 fingerprint of a file or of its path."""
    if path_only:
        console.print(get_path_hash(str(target)))
        return
    try:
        console.print(get_file_hash(target))
    except OSError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


# === Private helper functions ===


def _load_config() -> TreewrightConfig:
    try:
        return load_config_or_default()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _print_deletion_results(results: list[DeletionResult]) -> None:
    """Display deletion results as a Rich table."""
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=6, justify="center")
    table.add_column("Path")
    table.add_column("Message")

    for result in results:
        if result.dry_run:
            status = "[info]DRY[/info]"
            message = "[muted]would delete[/muted]"
        elif result.success:
            status = "[success]OK[/success]"
            message = ""
        else:
            status = "[error]FAIL[/error]"
            kind = f"{result.error_kind.value}: " if result.error_kind else ""
            message = f"[error]{kind}{escape(result.error or '')}[/error]"
        table.add_row(status, escape(result.path), message)

    console.print(table)

    failed = sum(1 for r in results if not r.success)
    if failed:
        console.print(f"\n[dim]{len(results) - failed} succeeded, {failed} failed[/dim]")
