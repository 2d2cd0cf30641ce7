"""Fleet-wide aggregation of run results.

The aggregator is fed on the coordinating thread after each stage has
finished (reachability, collection, deletion). It owns the skip set and
all counters; stages never write to it concurrently.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from profsweep.models.outcome import DeletionOutcome
from profsweep.models.profile import HostPlan, ProfileRecord
from profsweep.models.result import (
    REASON_COLLECTION_ERROR,
    REASON_UNREACHABLE,
    HostResult,
    ReachabilityReport,
)

logger = logging.getLogger(__name__)

_BYTES_PER_GB = 1024**3


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Snapshot of the fleet counters.

    Attributes:
        inactive_days: Threshold in force for the run.
        hosts_queried: Size of the original target set.
        skipped_hosts: Skipped host mapped to its reason.
        profiles_analyzed: Rows reported by all hosts.
        profiles_evaluated: Rows that passed SID and path validation.
        profiles_eligible: Evaluated rows that are deletion candidates.
        eligible_bytes: Sum of known eligible sizes, None if none known.
        eligible_labels: Host mapped to its eligible account labels.
        deleted: Profiles deleted.
        skipped_profiles: Profiles the hosts declined to delete.
        failed: Deletion attempts that failed.
    """

    inactive_days: int
    hosts_queried: int
    skipped_hosts: dict[str, str] = field(default_factory=lambda: {})
    profiles_analyzed: int = 0
    profiles_evaluated: int = 0
    profiles_eligible: int = 0
    eligible_bytes: int | None = None
    eligible_labels: dict[str, tuple[str, ...]] = field(default_factory=lambda: {})
    deleted: int = 0
    skipped_profiles: int = 0
    failed: int = 0

    @property
    def hosts_skipped(self) -> int:
        """Number of skipped hosts."""
        return len(self.skipped_hosts)

    @property
    def skip_reasons(self) -> list[str]:
        """Distinct skip reasons, or every reason class when none occurred."""
        reasons = sorted(set(self.skipped_hosts.values()))
        return reasons or sorted((REASON_COLLECTION_ERROR, REASON_UNREACHABLE))

    @property
    def eligible_gb(self) -> str:
        """Estimated eligible volume in GB, or ``N/A`` if no size was known."""
        if self.eligible_bytes is None:
            return "N/A"
        return f"{self.eligible_bytes / _BYTES_PER_GB:.2f} GB"


class FleetAggregator:
    """Folds per-stage results into fleet counters and deletion plans.

    Args:
        targets: The full target set for the run.
        inactive_days: Threshold in force for the run.
        users_root: Managed users directory; records outside it are discarded.
    """

    def __init__(self, targets: Iterable[str], *, inactive_days: int, users_root: str) -> None:
        self._targets = list(targets)
        self._inactive_days = inactive_days
        self._users_root = users_root
        self._skipped: dict[str, str] = {}
        self._analyzed = 0
        self._records: list[ProfileRecord] = []
        self._outcomes: list[DeletionOutcome] = []

    def skip(self, computer: str, reason: str) -> None:
        """Add a host to the skip set; the first reason recorded wins."""
        self._skipped.setdefault(computer, reason)

    def record_reachability(self, report: ReachabilityReport) -> None:
        """Fold a reachability partition into the skip set."""
        for computer, reason in sorted(report.unreachable.items()):
            self.skip(computer, reason)

    def record_collection(self, results: Iterable[HostResult]) -> None:
        """Fold inventory results into the counters.

        Failed hosts join the skip set and contribute no records. Records
        with no SID or a path outside the users root are counted as
        analyzed but otherwise discarded.
        """
        for result in results:
            if not result.ok:
                self.skip(result.computer, result.reason or REASON_COLLECTION_ERROR)
                continue
            for record in result.records:
                self._analyzed += 1
                if not record.security_id or not record.is_under(self._users_root):
                    logger.debug(
                        "Discarding record %r on %s: missing SID or outside %s",
                        record.local_path,
                        record.computer,
                        self._users_root,
                    )
                    continue
                self._records.append(record)

    def record_outcomes(self, outcomes: Iterable[DeletionOutcome]) -> None:
        """Fold deletion outcomes into the counters."""
        self._outcomes.extend(outcomes)

    @property
    def records(self) -> list[ProfileRecord]:
        """Validated records collected so far."""
        return list(self._records)

    @property
    def outcomes(self) -> list[DeletionOutcome]:
        """Deletion outcomes recorded so far."""
        return list(self._outcomes)

    def plans(self) -> list[HostPlan]:
        """Build deletion plans for hosts with eligible profiles.

        Returns:
            Non-empty plans sorted by host name.
        """
        by_host: dict[str, list[ProfileRecord]] = {}
        for record in self._records:
            by_host.setdefault(record.computer, []).append(record)

        plans = [HostPlan.from_records(host, records) for host, records in by_host.items()]
        return sorted((p for p in plans if p.count), key=lambda p: p.computer.casefold())

    def summary(self) -> RunSummary:
        """Return a snapshot of the counters."""
        # Counted from the plans so duplicate rows for one SID count once
        plans = self.plans()
        sizes = [p.size_bytes for p in plans if p.size_bytes is not None]

        return RunSummary(
            inactive_days=self._inactive_days,
            hosts_queried=len(self._targets),
            skipped_hosts=dict(self._skipped),
            profiles_analyzed=self._analyzed,
            profiles_evaluated=len(self._records),
            profiles_eligible=sum(p.count for p in plans),
            eligible_bytes=sum(sizes) if sizes else None,
            eligible_labels={p.computer: p.labels for p in plans},
            deleted=sum(1 for o in self._outcomes if o.deleted),
            skipped_profiles=sum(1 for o in self._outcomes if o.skipped),
            failed=sum(1 for o in self._outcomes if o.failed),
        )


def format_queried_line(summary: RunSummary) -> str:
    """Return the hosts-queried counter line."""
    return f"[INFO]: Total Hosts Queried: {summary.hosts_queried}"


def format_skipped_line(summary: RunSummary) -> str:
    """Return the hosts-skipped counter line."""
    reasons = " / ".join(summary.skip_reasons)
    return f"[INFO]: Skipped host(s) due to {reasons}: {summary.hosts_skipped}"


def format_plan_line(plan: HostPlan, *, dry_run: bool) -> str:
    """Return the per-host deletion line."""
    tag = "[DRY-RUN]:" if dry_run else "[INFO]:"
    labels = ", ".join(plan.labels)
    return f'{tag} Deleting {plan.count} profile(s) on "{plan.computer}" ({labels})'


def format_failure_line(outcome: DeletionOutcome, label: str) -> str:
    """Return the line reporting a failed deletion."""
    return (
        f'[ERROR]: Failed to delete {label} on "{outcome.computer}" '
        f"(code {outcome.code}): {outcome.message or 'no detail'}"
    )
