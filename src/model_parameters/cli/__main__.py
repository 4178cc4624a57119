"""model-parameters CLI entry point.

Provides commands for inspecting, transforming and sampling parameter trees
and for unit conversion.
"""

import logging
import sys

import typer

from .tree import show_command, convert_command, units_command
from .sampling import transform_command, sample_command

app = typer.Typer(
    name="mparams",
    help="Inspect, transform and sample YAML parameter trees",
    invoke_without_command=True,
)

app.command("show")(show_command)
app.command("transform")(transform_command)
app.command("sample")(sample_command)
app.command("convert")(convert_command)
app.command("units")(units_command)


@app.command("version")
def version():
    """Show version information."""
    from .. import __version__
    typer.echo(f"model-parameters version {__version__}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output")
):
    """Inspect, transform and sample YAML parameter trees."""
    if verbose:
        logging.basicConfig(level=logging.INFO)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        typer.echo("\nError: Missing command.", err=True)
        raise typer.Exit(1)


def cli_main():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("\nAborted", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli_main()
