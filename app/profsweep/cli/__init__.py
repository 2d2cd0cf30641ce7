"""CLI package for profsweep.

This package contains the Typer application and all subcommands.
"""

from profsweep.cli.main import app

__all__ = ["app"]
