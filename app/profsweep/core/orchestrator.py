"""Fleet pruning orchestration.

Runs the stages of a pruning run in order:

1. Fix the cutoff instant (before any remote call).
2. Probe every target and drop unreachable hosts.
3. Collect inventory from reachable hosts in parallel.
4. Report counters and per-host plans.
5. In apply mode, delete planned profiles one host at a time.
6. Report final totals.

Per-host failures are absorbed into the aggregator. Only run-level
preconditions raise.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from profsweep.core.policy import compute_cutoff
from profsweep.core.retry import RetryPolicy
from profsweep.discovery.base import normalize_hosts
from profsweep.operators.profiles import ProfileOperator
from profsweep.report.aggregator import FleetAggregator, RunSummary
from profsweep.scanners.profiles import ProfileCollector
from profsweep.scanners.reachability import ReachabilityFilter

if TYPE_CHECKING:
    from profsweep.core.config import PruneConfig
    from profsweep.models.outcome import DeletionOutcome
    from profsweep.models.profile import HostPlan
    from profsweep.remote.base import RemoteChannel

logger = logging.getLogger(__name__)


class PruneError(Exception):
    """Base exception for run-terminating failures."""


class NoTargetHostsError(PruneError):
    """Raised when the run has no hosts to target."""


class NoReachableHostsError(PruneError):
    """Raised when no targeted host can be inventoried."""


class RunReporter(Protocol):
    """Receives report events in the order they must be shown."""

    def counters(self, summary: RunSummary) -> None:
        """Show the hosts-queried and hosts-skipped counters."""

    def plan(self, plan: HostPlan, *, dry_run: bool) -> None:
        """Show one host's deletion plan."""

    def failure(self, outcome: DeletionOutcome, label: str) -> None:
        """Show one failed deletion."""

    def totals(self, summary: RunSummary, *, dry_run: bool) -> None:
        """Show the final summary table."""


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Parameters for one pruning run.

    Attributes:
        inactive_days: Inactivity threshold in days.
        dry_run: Preview only; never delete.
        users_root: Managed users directory on each host.
        max_workers: Concurrency cap for probes and collection.
        measure_size: Ask hosts to measure profile folder sizes.
        collect_attempts: Attempts per host for inventory collection.
    """

    inactive_days: int = 90
    dry_run: bool = True
    users_root: str = "C:\\Users"
    max_workers: int = 25
    measure_size: bool = False
    collect_attempts: int = 1

    @classmethod
    def from_config(cls, config: PruneConfig, **overrides: object) -> RunOptions:
        """Build options from configuration, with explicit overrides.

        Overrides whose value is None are ignored.
        """
        values: dict[str, object] = {
            "inactive_days": config.inactive_days,
            "users_root": config.users_root,
            "max_workers": config.max_workers,
            "measure_size": config.measure_size,
            "collect_attempts": config.collect_attempts,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class RunReport:
    """Everything a run produced.

    Attributes:
        summary: Final counters.
        cutoff_utc: Cutoff instant used for every host.
        plans: Per-host deletion plans.
        outcomes: Deletion outcomes (empty in dry-run mode).
        aborted: True if deletion was declined at the confirmation step.
    """

    summary: RunSummary
    cutoff_utc: datetime
    plans: list[HostPlan] = field(default_factory=lambda: [])
    outcomes: list[DeletionOutcome] = field(default_factory=lambda: [])
    aborted: bool = False

    @property
    def has_failures(self) -> bool:
        """Check if any deletion attempt failed."""
        return any(o.failed for o in self.outcomes)


class FleetPruner:
    """Coordinates a pruning run across a fleet.

    Args:
        channel: Remote channel for probes, inventory and deletion.
        options: Run parameters.
        reporter: Receives report output.
        confirm: Called with the plans before deleting in apply mode;
            returning False skips deletion. None means no confirmation.
        now: Reference instant for the cutoff. Defaults to the current time.
    """

    def __init__(
        self,
        channel: RemoteChannel,
        options: RunOptions,
        reporter: RunReporter,
        *,
        confirm: Callable[[list[HostPlan]], bool] | None = None,
        now: datetime | None = None,
    ) -> None:
        self._channel = channel
        self._options = options
        self._reporter = reporter
        self._confirm = confirm
        self._now = now

    def run(self, hosts: list[str]) -> RunReport:
        """Run the full pipeline against ``hosts``.

        Args:
            hosts: Target host names (deduplicated here).

        Returns:
            RunReport for the run.

        Raises:
            InvalidThresholdError: If the threshold is negative.
            NoTargetHostsError: If ``hosts`` is empty.
            NoReachableHostsError: If no host could be inventoried.
        """
        options = self._options
        cutoff = compute_cutoff(options.inactive_days, self._now)

        targets = normalize_hosts(hosts)
        if not targets:
            msg = "No target hosts to query"
            raise NoTargetHostsError(msg)

        logger.info(
            "Starting run: %d host(s), cutoff %s, dry_run=%s",
            len(targets),
            cutoff.isoformat(),
            options.dry_run,
        )
        aggregator = FleetAggregator(
            targets,
            inactive_days=options.inactive_days,
            users_root=options.users_root,
        )

        reachability = ReachabilityFilter(self._channel, max_workers=options.max_workers)
        partition = reachability.partition(targets)
        aggregator.record_reachability(partition)
        if not partition.reachable:
            self._reporter.counters(aggregator.summary())
            msg = f"None of the {len(targets)} targeted host(s) are reachable"
            raise NoReachableHostsError(msg)

        collector = ProfileCollector(
            self._channel,
            users_root=options.users_root,
            cutoff_utc=cutoff,
            max_workers=options.max_workers,
            measure_size=options.measure_size,
            retry=RetryPolicy(max_attempts=options.collect_attempts),
        )
        aggregator.record_collection(collector.collect(list(partition.reachable)))

        summary = aggregator.summary()
        self._reporter.counters(summary)
        if summary.hosts_skipped >= summary.hosts_queried:
            msg = f"None of the {len(targets)} targeted host(s) could be inventoried"
            raise NoReachableHostsError(msg)

        plans = aggregator.plans()
        for plan in plans:
            self._reporter.plan(plan, dry_run=options.dry_run)

        outcomes: list[DeletionOutcome] = []
        aborted = False
        if not options.dry_run and plans:
            if self._confirm is not None and not self._confirm(plans):
                logger.info("Deletion declined at confirmation")
                aborted = True
            else:
                outcomes = ProfileOperator(self._channel).execute(plans)
                aggregator.record_outcomes(outcomes)
                self._report_failures(plans, outcomes)

        final = aggregator.summary()
        self._reporter.totals(final, dry_run=options.dry_run or aborted)
        return RunReport(
            summary=final,
            cutoff_utc=cutoff,
            plans=plans,
            outcomes=outcomes,
            aborted=aborted,
        )

    def probe(self, hosts: list[str]) -> tuple[list[str], dict[str, str]]:
        """Run only the reachability stage.

        Returns:
            Tuple of (reachable hosts, unreachable host to reason).

        Raises:
            NoTargetHostsError: If ``hosts`` is empty.
        """
        targets = normalize_hosts(hosts)
        if not targets:
            msg = "No target hosts to query"
            raise NoTargetHostsError(msg)
        reachability = ReachabilityFilter(self._channel, max_workers=self._options.max_workers)
        partition = reachability.partition(targets)
        return list(partition.reachable), dict(partition.unreachable)

    def _report_failures(self, plans: list[HostPlan], outcomes: list[DeletionOutcome]) -> None:
        """Send every failed outcome to the reporter with its label."""
        by_host = {plan.computer: plan for plan in plans}
        for outcome in outcomes:
            if not outcome.failed:
                continue
            plan = by_host.get(outcome.computer)
            label = plan.label_for(outcome.security_id) if plan else outcome.security_id
            self._reporter.failure(outcome, label)
