"""Probe command implementation.

Runs only the reachability stage and lists which hosts answered.
"""

from typing import Annotated

import typer

from profsweep.cli import types
from profsweep.cli.display import create_probe_table
from profsweep.core.orchestrator import FleetPruner, NoTargetHostsError, RunOptions
from profsweep.utils.formatting import console, print_error, print_success, print_warning

app = typer.Typer(
    help="Check which hosts answer remote-management probes.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def probe_hosts(
    ctx: typer.Context,
    computers: Annotated[
        list[str] | None,
        typer.Option(
            "--computer",
            "-c",
            help="Host(s) to probe; repeat or comma-separate. Default: directory lookup.",
        ),
    ] = None,
    max_workers: Annotated[
        int | None,
        typer.Option("--max-workers", "-w", min=1, help="Concurrent probes."),
    ] = None,
) -> None:
    """Probe hosts without collecting inventory."""
    if ctx.invoked_subcommand is not None:
        return

    config = types.load_run_config()
    options = RunOptions.from_config(config, max_workers=max_workers)
    hosts = types.resolve_hosts(computers, config)

    pruner = FleetPruner(types.get_channel(config), options, reporter=_NullReporter())
    try:
        reachable, unreachable = pruner.probe(hosts)
    except NoTargetHostsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print(create_probe_table(reachable, unreachable))

    if not reachable:
        print_error(f"None of the {len(hosts)} host(s) are reachable.")
        raise typer.Exit(code=1)
    if unreachable:
        print_warning(f"{len(unreachable)} of {len(hosts)} host(s) are unreachable.")
    else:
        print_success(f"All {len(hosts)} host(s) are reachable.")


class _NullReporter:
    """Reporter for commands that never run the full pipeline."""

    def counters(self, summary: object) -> None:
        """Ignore counters."""

    def plan(self, plan: object, *, dry_run: bool) -> None:
        """Ignore plans."""

    def failure(self, outcome: object, label: str) -> None:
        """Ignore failures."""

    def totals(self, summary: object, *, dry_run: bool) -> None:
        """Ignore totals."""
