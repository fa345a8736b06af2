"""CLI entry point — registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="design-diff",
    help="design-diff - classify changes between two versions of design tokens or component schemas",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"design-diff {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Compare two versions of a design dataset."""


# Import subcommands to register them
from .compare import components as _components, tokens as _tokens  # noqa: F401, E402
from .resolve import resolve as _resolve  # noqa: F401, E402
