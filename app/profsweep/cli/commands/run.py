"""Run command implementation.

Inventories every reachable workstation, reports profiles unused for
longer than the threshold, and deletes them when --apply is given.
"""

from typing import Annotated

import typer

from profsweep.cli import types
from profsweep.cli.display import ConsoleReporter
from profsweep.core.orchestrator import FleetPruner, PruneError, RunOptions
from profsweep.core.policy import InvalidThresholdError
from profsweep.models.profile import HostPlan
from profsweep.utils.formatting import print_error, print_info

app = typer.Typer(
    help="Find and prune stale user profiles.",
    invoke_without_command=True,
)


def _confirm_deletion(plans: list[HostPlan]) -> bool:
    """Prompt user to confirm deletion.

    Args:
        plans: Per-host deletion plans.

    Returns:
        True if user confirms, False otherwise.
    """
    total = sum(plan.count for plan in plans)
    return typer.confirm(
        f"\nDelete {total} profile(s) on {len(plans)} host(s)?",
        default=False,
    )


@app.callback(invoke_without_command=True)
def run_prune(
    ctx: typer.Context,
    apply: Annotated[
        bool,
        typer.Option(
            "--apply",
            help="Delete eligible profiles. Without this flag the run is a dry-run.",
        ),
    ] = False,
    days: Annotated[
        int | None,
        typer.Option(
            "--days",
            "-d",
            help="Inactivity threshold in days (default from config, 90).",
        ),
    ] = None,
    computers: Annotated[
        list[str] | None,
        typer.Option(
            "--computer",
            "-c",
            help="Target host(s); repeat or comma-separate. Default: directory lookup.",
        ),
    ] = None,
    max_workers: Annotated[
        int | None,
        typer.Option(
            "--max-workers",
            "-w",
            min=1,
            help="Hosts inventoried concurrently (default from config, 25).",
        ),
    ] = None,
    measure_size: Annotated[
        bool | None,
        typer.Option(
            "--measure-size/--no-measure-size",
            help="Measure profile folder sizes on each host (slow).",
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt when applying.",
        ),
    ] = False,
) -> None:
    """Find and prune stale user profiles.

    Profiles whose last use is unknown or older than the threshold are
    eligible. Loaded, special and out-of-root profiles are never touched,
    and server-class hosts are skipped.

    Examples:
        profsweep run                          # Preview against directory hosts
        profsweep run -c WS-01,WS-02 --days 120
        profsweep run --apply --yes            # Delete without confirmation
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    quiet = bool((ctx.obj or {}).get("quiet"))
    config = types.load_run_config()

    inactive_days = config.inactive_days if days is None else days
    if inactive_days < 0:
        print_error(f"Inactivity threshold must be zero or more days, got {inactive_days}.")
        raise typer.Exit(code=1)

    options = RunOptions.from_config(
        config,
        inactive_days=inactive_days,
        dry_run=not apply,
        max_workers=max_workers,
        measure_size=measure_size,
    )
    hosts = types.resolve_hosts(computers, config)

    pruner = FleetPruner(
        types.get_channel(config),
        options,
        ConsoleReporter(),
        confirm=None if yes else _confirm_deletion,
    )
    try:
        report = pruner.run(hosts)
    except (PruneError, InvalidThresholdError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if report.aborted:
        print_info("Aborted.")
        return

    if options.dry_run:
        if not quiet:
            print_info("\nDry-run mode: no profiles were deleted. Re-run with --apply to delete.")
        return

    # Exit with error code if any deletion failed
    if report.has_failures:
        raise typer.Exit(code=1)
