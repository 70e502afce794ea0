"""Path algebra commands.

Textual path computations; none of these commands touch the disk.
"""

from typing import Annotated

import typer

from treewright.core.errors import TreewrightError
from treewright.core.paths import make_relative, parent_directory_name, resolve_path
from treewright.core.platform import OSFamily, Platform
from treewright.utils.formatting import console, print_error

app = typer.Typer(
    help="Resolve and relativize paths without touching the disk.",
    invoke_without_command=True,
    no_args_is_help=True,
)

PlatformOption = Annotated[
    OSFamily | None,
    typer.Option(
        "--platform",
        "-p",
        help="Path conventions to apply (default: host).",
        case_sensitive=False,
    ),
]


@app.command()
def resolve(
    root: Annotated[str, typer.Argument(help="Rooted path to resolve against.")],
    relative: Annotated[str, typer.Argument(help="Relative path to resolve.")],
    platform: PlatformOption = None,
) -> None:
    """Resolve RELATIVE against ROOT, refusing to escape ROOT."""
    try:
        console.print(resolve_path(root, relative, _platform(platform)), markup=False)
    except TreewrightError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


@app.command()
def relative(
    target: Annotated[str, typer.Argument(help="Path to make relative.")],
    folder: Annotated[str, typer.Argument(help="Folder to make it relative to.")],
    platform: PlatformOption = None,
) -> None:
    """Print TARGET relative to FOLDER, or TARGET unchanged if it is not under it."""
    try:
        console.print(make_relative(target, folder, _platform(platform)), markup=False)
    except TreewrightError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


@app.command()
def parent(
    target: Annotated[str, typer.Argument(help="Path whose parent to print.")],
    platform: PlatformOption = None,
) -> None:
    """Print the parent directory of TARGET."""
    console.print(parent_directory_name(target, _platform(platform)), markup=False)


def _platform(family: OSFamily | None) -> Platform:
    return Platform.for_family(family) if family else Platform.current()
