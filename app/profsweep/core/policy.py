"""Inactivity eligibility policy.

Pure functions, no I/O. A profile is eligible for deletion when its last
use is unknown or falls on or before the run's cutoff instant.
"""

from datetime import UTC, datetime, timedelta


class InvalidThresholdError(ValueError):
    """Raised when the inactivity threshold is negative."""


def compute_cutoff(inactive_days: int, now: datetime | None = None) -> datetime:
    """Compute the cutoff instant for a run.

    Called once per run so every host is judged against the same instant.

    Args:
        inactive_days: Inactivity threshold in days.
        now: Reference instant. Defaults to the current UTC time.

    Returns:
        Aware UTC datetime ``now - inactive_days``.

    Raises:
        InvalidThresholdError: If inactive_days is negative.
    """
    if inactive_days < 0:
        msg = f"Inactivity threshold must be zero or more days, got {inactive_days}"
        raise InvalidThresholdError(msg)

    reference = now or datetime.now(UTC)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=UTC)
    return reference.astimezone(UTC) - timedelta(days=inactive_days)


def is_eligible(last_use_utc: datetime | None, cutoff_utc: datetime) -> bool:
    """Decide whether a profile is a deletion candidate.

    Unknown last use counts as eligible: activity can't be proven.
    The boundary is inclusive.

    Args:
        last_use_utc: Normalized last-use instant, or None if unknown.
        cutoff_utc: The run's cutoff instant.

    Returns:
        True if the profile is eligible.
    """
    if last_use_utc is None:
        return True
    return last_use_utc <= cutoff_utc
