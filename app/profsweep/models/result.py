"""Per-host task results.

Remote tasks never share mutable state with the coordinator. Each one
returns one of these tagged results, and the coordinator folds them
into counters once every task has finished.
"""

from dataclasses import dataclass, field

from profsweep.models.profile import ProfileRecord

# Skip reasons reported in the host counters
REASON_UNREACHABLE = "unreachable"
REASON_COLLECTION_ERROR = "collection error"


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Outcome of a reachability probe.

    Attributes:
        computer: Probed host.
        reachable: Whether the host answered.
        error: Failure detail when unreachable.
    """

    computer: str
    reachable: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ReachabilityReport:
    """Partition of the target set by reachability.

    Attributes:
        reachable: Hosts that answered the probe, sorted.
        unreachable: Hosts that did not, mapped to their skip reason.
    """

    reachable: tuple[str, ...]
    unreachable: dict[str, str] = field(default_factory=lambda: {})

    @property
    def total(self) -> int:
        """Number of hosts probed."""
        return len(self.reachable) + len(self.unreachable)


@dataclass(frozen=True, slots=True)
class HostResult:
    """Tagged result of inventory collection on one host.

    Attributes:
        computer: Host the task ran against.
        ok: True if collection succeeded.
        records: Profiles reported by the host (empty on failure).
        workstation: False if the host declared itself server-class.
        reason: Skip reason when ok is False.
        error: Failure detail when ok is False.
    """

    computer: str
    ok: bool
    records: tuple[ProfileRecord, ...] = ()
    workstation: bool = True
    reason: str | None = None
    error: str | None = None

    @classmethod
    def success(
        cls,
        computer: str,
        records: list[ProfileRecord],
        workstation: bool = True,
    ) -> "HostResult":
        """Create a successful result."""
        return cls(computer=computer, ok=True, records=tuple(records), workstation=workstation)

    @classmethod
    def failure(
        cls,
        computer: str,
        error: str,
        reason: str = REASON_COLLECTION_ERROR,
    ) -> "HostResult":
        """Create a failed result carrying no records."""
        return cls(computer=computer, ok=False, reason=reason, error=error)
