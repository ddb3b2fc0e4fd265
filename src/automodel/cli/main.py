"""automodel CLI main entry point.

This module defines the main Typer application and registers all commands
for the automodel CLI.
"""

from typing import Annotated

import typer

from automodel import __version__
from automodel.cli.commands import check, config
from automodel.cli.formatters import console

# Create the main Typer app
app = typer.Typer(
    name="automodel",
    help="automodel - Model selection engine for coding agents",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command(name="check")(check.check)
app.add_typer(config.app, name="config")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]automodel[/] version [green]{__version__}[/]")
        raise typer.Exit()


@app.callback()
def main(
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
) -> None:
    """automodel - Model selection engine for coding agents.

    Picks the cheapest capable model for a task from a
    Strategy x TaskType x Complexity matrix.

    Use [bold cyan]automodel COMMAND --help[/] for command-specific help.
    """
    pass


__all__ = ["app", "main"]
