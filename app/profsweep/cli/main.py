"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from profsweep import __version__
from profsweep.cli.commands import config, probe, run
from profsweep.utils.formatting import configure_logging

# Create main Typer app
app = typer.Typer(
    name="profsweep",
    help="Prune stale user profiles across a Windows workstation fleet.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"profsweep version {__version__}")
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
            help="Enable verbose (debug) logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """profsweep - stale user-profile pruning for Windows workstations.

    Finds local profiles unused for longer than a threshold on every
    reachable workstation and, with --apply, deletes them. User accounts
    and server-class machines are never touched.
    """
    configure_logging(verbose=verbose)
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.add_typer(run.app, name="run")
app.add_typer(probe.app, name="probe")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
