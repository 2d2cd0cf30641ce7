"""Unit tests for the inactivity policy."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from profsweep.core.policy import InvalidThresholdError, compute_cutoff, is_eligible


class TestComputeCutoff:
    """Tests for compute_cutoff function."""

    def test_subtracts_days(self, now: datetime) -> None:
        """Cutoff is the reference instant minus the threshold."""
        assert compute_cutoff(90, now) == now - timedelta(days=90)

    def test_zero_days_is_now(self, now: datetime) -> None:
        """A zero threshold makes the cutoff the reference instant."""
        assert compute_cutoff(0, now) == now

    def test_negative_days_rejected(self, now: datetime) -> None:
        """Negative thresholds are invalid."""
        with pytest.raises(InvalidThresholdError, match="zero or more"):
            compute_cutoff(-1, now)

    def test_invalid_threshold_is_value_error(self) -> None:
        """InvalidThresholdError can be caught as ValueError."""
        with pytest.raises(ValueError):
            compute_cutoff(-30)

    def test_result_is_utc(self) -> None:
        """Reference instants in other zones are converted to UTC."""
        reference = datetime(2024, 6, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        cutoff = compute_cutoff(1, reference)
        assert cutoff == datetime(2024, 5, 31, 12, 0, tzinfo=UTC)
        assert cutoff.tzinfo == UTC

    def test_default_reference_is_current_time(self) -> None:
        """Without a reference the cutoff is relative to now."""
        before = datetime.now(UTC)
        cutoff = compute_cutoff(10)
        after = datetime.now(UTC)
        assert before - timedelta(days=10) <= cutoff <= after - timedelta(days=10)


class TestIsEligible:
    """Tests for is_eligible function."""

    def test_unknown_last_use_is_eligible(self, now: datetime) -> None:
        """Profiles with no known last use are candidates."""
        assert is_eligible(None, now)

    def test_older_than_cutoff(self, now: datetime) -> None:
        """Last use before the cutoff is eligible."""
        assert is_eligible(now - timedelta(days=1), now)

    def test_boundary_is_inclusive(self, now: datetime) -> None:
        """Last use exactly at the cutoff is eligible."""
        assert is_eligible(now, now)

    def test_newer_than_cutoff(self, now: datetime) -> None:
        """Last use after the cutoff is not eligible."""
        assert not is_eligible(now + timedelta(seconds=1), now)

    def test_two_hundred_days_against_ten_day_threshold(self, now: datetime) -> None:
        """A profile idle for 200 days is eligible at a 10-day threshold."""
        cutoff = compute_cutoff(10, now)
        assert is_eligible(now - timedelta(days=200), cutoff)
        assert not is_eligible(now - timedelta(days=5), cutoff)
