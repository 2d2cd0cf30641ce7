"""Profile models for fleet inventory and deletion planning.

This module defines the per-profile record produced by inventory
collection and the per-host plan built from eligible records.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ProfileRecord:
    """A local user profile discovered on a host.

    Attributes:
        computer: Host that owns the profile.
        security_id: SID of the profile's owning principal.
        account_label: Display name; never empty.
        local_path: Profile root path on the host.
        last_use_utc: Normalized last-use instant, None if unknown.
        eligible: Whether the profile is a deletion candidate for this run.
        size_bytes: Size of the profile folder, None if not measured.
    """

    computer: str
    security_id: str
    account_label: str
    local_path: str
    last_use_utc: datetime | None
    eligible: bool
    size_bytes: int | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate profile data after initialization."""
        if not self.computer:
            msg = "Computer name cannot be empty"
            raise ValueError(msg)
        if not self.account_label:
            msg = "Account label cannot be empty"
            raise ValueError(msg)
        if self.size_bytes is not None and self.size_bytes < 0:
            msg = f"Size must not be negative, got {self.size_bytes}"
            raise ValueError(msg)

    @property
    def size_human(self) -> str:
        """Return human-readable size string."""
        if self.size_bytes is None:
            return "unknown"

        size = float(self.size_bytes)
        for unit in ("B", "KB", "MB", "GB"):
            if size < 1024:
                return f"{size:.1f} {unit}"
            size /= 1024
        return f"{size:.1f} TB"

    @property
    def last_use_known(self) -> bool:
        """Check if the host reported a usable last-use time."""
        return self.last_use_utc is not None

    def is_under(self, users_root: str) -> bool:
        """Check if the profile lives below ``users_root`` (case-insensitive).

        Args:
            users_root: Managed users directory, e.g. ``C:\\Users``.

        Returns:
            True if local_path is strictly inside users_root.
        """
        root = _normalize_path(users_root)
        path = _normalize_path(self.local_path)
        return bool(root) and path.startswith(root + "\\") and len(path) > len(root) + 1


@dataclass(frozen=True, slots=True)
class HostPlan:
    """Deletion plan for a single host.

    Attributes:
        computer: Target host.
        security_ids: Sorted, deduplicated SIDs to delete.
        labels: Account labels, in the same order as security_ids.
        size_bytes: Sum of known profile sizes, None if none were known.
    """

    computer: str
    security_ids: tuple[str, ...]
    labels: tuple[str, ...]
    size_bytes: int | None = None

    @property
    def count(self) -> int:
        """Number of profiles planned for deletion."""
        return len(self.security_ids)

    def label_for(self, security_id: str) -> str:
        """Return the label for a planned SID, or the SID itself."""
        try:
            return self.labels[self.security_ids.index(security_id)]
        except ValueError:
            return security_id

    @classmethod
    def from_records(cls, computer: str, records: Iterable[ProfileRecord]) -> "HostPlan":
        """Build a plan from a host's records, keeping only eligible ones.

        Args:
            computer: Target host.
            records: Records reported for that host.

        Returns:
            HostPlan for the eligible records (possibly empty).
        """
        by_sid: dict[str, ProfileRecord] = {}
        for record in records:
            if record.eligible and record.security_id not in by_sid:
                by_sid[record.security_id] = record

        sids = tuple(sorted(by_sid))
        sizes = [by_sid[s].size_bytes for s in sids if by_sid[s].size_bytes is not None]
        return cls(
            computer=computer,
            security_ids=sids,
            labels=tuple(by_sid[s].account_label for s in sids),
            size_bytes=sum(s for s in sizes if s is not None) if sizes else None,
        )


def _normalize_path(path: str) -> str:
    """Normalize a Windows path for prefix comparison."""
    return path.replace("/", "\\").rstrip("\\").casefold()
