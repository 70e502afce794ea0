"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from treewright import __version__
from treewright.cli.commands import config, fs, path
from treewright.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="treewright",
    help="Reliable creation, relocation and deletion of directory trees.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"treewright version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
) -> None:
    """treewright - filesystem lifecycle primitives.

    Delete, move and copy directory trees safely, and resolve paths
    without escaping their root.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
            force=True,
        )


# Register commands
app.add_typer(fs.app, name="fs")
app.add_typer(path.app, name="path")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
