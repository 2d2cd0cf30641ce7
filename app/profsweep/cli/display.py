"""Shared Rich display functions for run reports.

Report lines are printed verbatim (no markup) so their ``[TAG]:``
prefixes stay greppable; tables use the themed console.
"""

from rich import box
from rich.table import Table

from profsweep.models.outcome import DeletionOutcome
from profsweep.models.profile import HostPlan
from profsweep.report.aggregator import (
    RunSummary,
    format_failure_line,
    format_plan_line,
    format_queried_line,
    format_skipped_line,
)
from profsweep.utils.formatting import console, print_line


def create_summary_table(summary: RunSummary, dry_run: bool = True) -> Table:
    """Create the fixed-width bordered summary table.

    Args:
        summary: Final run counters.
        dry_run: Whether the run was a preview (omits deletion rows).

    Returns:
        Rich Table with one row per counter.
    """
    title = "Summary (Dry Run)" if dry_run else "Summary"
    table = Table(
        title=title,
        box=box.ASCII,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Metric", width=34, no_wrap=True)
    table.add_column("Value", width=14, justify="right", no_wrap=True)

    table.add_row("Profiles analyzed", str(summary.profiles_analyzed))
    table.add_row("Profiles evaluated", str(summary.profiles_evaluated))
    table.add_row(
        f"Profiles eligible (>= {summary.inactive_days} days)",
        str(summary.profiles_eligible),
    )
    table.add_row("Estimated data to remove", summary.eligible_gb)

    if not dry_run:
        table.add_row("Profiles deleted", f"[deleted]{summary.deleted}[/]")
        table.add_row("Profiles skipped", f"[skipped]{summary.skipped_profiles}[/]")
        failed_style = "error" if summary.failed else "muted"
        table.add_row("Profiles failed", f"[{failed_style}]{summary.failed}[/]")

    return table


def create_probe_table(reachable: list[str], unreachable: dict[str, str]) -> Table:
    """Create a table listing probe results per host.

    Args:
        reachable: Hosts that answered.
        unreachable: Hosts that did not, with their reason.

    Returns:
        Rich Table with one row per host.
    """
    table = Table(
        title="Reachability",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Host", no_wrap=True)
    table.add_column("Status", width=12)

    rows = [(host, "[success]reachable[/]") for host in reachable]
    rows.extend((host, f"[error]{reason}[/]") for host, reason in unreachable.items())
    for host, status in sorted(rows, key=lambda r: r[0].casefold()):
        table.add_row(host, status)

    return table


class ConsoleReporter:
    """Prints run report events to the shared console."""

    def counters(self, summary: RunSummary) -> None:
        """Print the hosts-queried and hosts-skipped lines."""
        print_line(format_queried_line(summary))
        print_line(format_skipped_line(summary))

    def plan(self, plan: HostPlan, *, dry_run: bool) -> None:
        """Print one host's deletion line."""
        print_line(format_plan_line(plan, dry_run=dry_run))

    def failure(self, outcome: DeletionOutcome, label: str) -> None:
        """Print one failed deletion."""
        print_line(format_failure_line(outcome, label))

    def totals(self, summary: RunSummary, *, dry_run: bool) -> None:
        """Print the summary table."""
        console.print()
        console.print(create_summary_table(summary, dry_run=dry_run))
