"""CLI commands for profsweep.

This package contains all subcommand implementations.
"""

from profsweep.cli.commands import config, probe, run

__all__ = ["config", "probe", "run"]
