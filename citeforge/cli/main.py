"""CiteForge CLI - Main application entry point.

Registers all commands on the `citeforge` Typer application.
"""

from __future__ import annotations

import typer

from citeforge.cli import marker
from citeforge.cli.console import set_verbose_mode

app = typer.Typer(
    name="citeforge",
    help="Citation markers and rich text for bibliographies",
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Debug logging and full tracebacks"
    ),
) -> None:
    """CiteForge - citation markers for bibliographies."""
    set_verbose_mode(verbose)

    if version:
        from citeforge import __version__

        typer.echo(f"CiteForge {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


app.command("marker")(marker.command)


def cli_main() -> None:
    """Entry point for the console script."""
    app()
