"""Unit tests for profile models."""

from datetime import UTC, datetime

import pytest
from profsweep.models.profile import HostPlan, ProfileRecord


def _record(
    sid: str,
    label: str,
    *,
    eligible: bool = True,
    path: str | None = None,
    size: int | None = None,
    computer: str = "WS-01",
) -> ProfileRecord:
    return ProfileRecord(
        computer=computer,
        security_id=sid,
        account_label=label,
        local_path=path or f"C:\\Users\\{label}",
        last_use_utc=None if eligible else datetime(2024, 5, 30, tzinfo=UTC),
        eligible=eligible,
        size_bytes=size,
    )


class TestProfileRecord:
    """Tests for ProfileRecord dataclass."""

    def test_validates_computer(self) -> None:
        """An empty host name is rejected."""
        with pytest.raises(ValueError, match="Computer name"):
            _record("S-1-5-21-1", "alice", computer="")

    def test_validates_label(self) -> None:
        """An empty account label is rejected."""
        with pytest.raises(ValueError, match="Account label"):
            _record("S-1-5-21-1", "", path="C:\\Users\\x")

    def test_validates_size(self) -> None:
        """Negative sizes are rejected."""
        with pytest.raises(ValueError, match="negative"):
            _record("S-1-5-21-1", "alice", size=-1)

    @pytest.mark.parametrize(
        ("size", "expected"),
        [(None, "unknown"), (512, "512.0 B"), (1536, "1.5 KB"), (3 * 1024**3, "3.0 GB")],
    )
    def test_size_human(self, size: int | None, expected: str) -> None:
        """size_human renders bytes with a unit."""
        assert _record("S-1-5-21-1", "alice", size=size).size_human == expected

    def test_last_use_known(self) -> None:
        """last_use_known reflects whether a time was reported."""
        assert not _record("S-1-5-21-1", "alice").last_use_known
        assert _record("S-1-5-21-1", "alice", eligible=False).last_use_known

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("C:\\Users\\alice", True),
            ("c:\\users\\ALICE\\", True),
            ("C:/Users/alice", True),
            ("C:\\Users", False),
            ("C:\\UsersOld\\alice", False),
            ("D:\\Profiles\\alice", False),
        ],
    )
    def test_is_under(self, path: str, expected: bool) -> None:
        """Only paths strictly inside the users root are managed."""
        record = _record("S-1-5-21-1", "alice", path=path)
        assert record.is_under("C:\\Users\\") is expected


class TestHostPlan:
    """Tests for HostPlan dataclass."""

    def test_from_records_keeps_eligible_sorted(self) -> None:
        """Plans hold eligible SIDs in sorted order with matching labels."""
        plan = HostPlan.from_records(
            "WS-01",
            [
                _record("S-1-5-21-9", "zoe"),
                _record("S-1-5-21-2", "bob", eligible=False),
                _record("S-1-5-21-1", "alice"),
            ],
        )

        assert plan.security_ids == ("S-1-5-21-1", "S-1-5-21-9")
        assert plan.labels == ("alice", "zoe")
        assert plan.count == 2

    def test_from_records_deduplicates(self) -> None:
        """A SID reported twice is planned once."""
        plan = HostPlan.from_records(
            "WS-01",
            [_record("S-1-5-21-1", "alice"), _record("S-1-5-21-1", "alice-dup")],
        )

        assert plan.security_ids == ("S-1-5-21-1",)
        assert plan.labels == ("alice",)

    def test_size_sums_known_values(self) -> None:
        """Plan size sums known sizes only."""
        plan = HostPlan.from_records(
            "WS-01",
            [
                _record("S-1-5-21-1", "alice", size=100),
                _record("S-1-5-21-2", "bob"),
                _record("S-1-5-21-3", "carol", size=50),
            ],
        )
        assert plan.size_bytes == 150

    def test_size_unknown(self) -> None:
        """Plan size is None when nothing was measured."""
        assert HostPlan.from_records("WS-01", [_record("S-1-5-21-1", "alice")]).size_bytes is None

    def test_empty_plan(self) -> None:
        """No eligible records means an empty plan."""
        plan = HostPlan.from_records("WS-01", [_record("S-1-5-21-1", "alice", eligible=False)])
        assert plan.count == 0

    def test_label_for(self) -> None:
        """label_for maps planned SIDs and echoes unknown ones."""
        plan = HostPlan.from_records("WS-01", [_record("S-1-5-21-1", "alice")])

        assert plan.label_for("S-1-5-21-1") == "alice"
        assert plan.label_for("S-1-5-21-404") == "S-1-5-21-404"
