"""Unit tests for the profile deletion operator."""

from typing import Any

from profsweep.models.outcome import EXCEPTION, SKIPPED
from profsweep.models.profile import HostPlan
from profsweep.operators.profiles import ProfileOperator
from profsweep.remote.base import RemoteError
from profsweep.remote.scripts import DELETE_TASK

SID_A = "S-1-5-21-100-200-300-1001"
SID_B = "S-1-5-21-100-200-300-1002"
SID_C = "S-1-5-21-100-200-300-1003"


def _plan(computer: str, *sids: str) -> HostPlan:
    return HostPlan(computer=computer, security_ids=tuple(sids), labels=tuple(sids))


class TestDelete:
    """Tests for ProfileOperator.delete."""

    def test_all_deleted(self, fake_channel: Any) -> None:
        """Successful deletions yield deleted outcomes in SID order."""
        outcomes = ProfileOperator(fake_channel).delete("H1", [SID_B, SID_A])

        assert [o.security_id for o in outcomes] == [SID_A, SID_B]
        assert all(o.deleted and o.code == 0 for o in outcomes)
        assert fake_channel.tasks(DELETE_TASK) == [("H1", {"security_ids": [SID_A, SID_B]})]

    def test_status_code_failure(self, fake_channel: Any) -> None:
        """A non-zero host status is reported as a failure with that code."""
        fake_channel.deletions["H1"] = [
            {"sid": SID_A, "deleted": False, "code": 8, "message": "Generic failure"},
        ]

        (outcome,) = ProfileOperator(fake_channel).delete("H1", [SID_A])

        assert not outcome.deleted
        assert outcome.code == 8
        assert outcome.failed
        assert outcome.message == "Generic failure"

    def test_exactly_one_outcome_per_sid(self, fake_channel: Any) -> None:
        """Duplicates in the request and the response collapse to one outcome."""
        fake_channel.deletions["H1"] = [
            {"sid": SID_A, "deleted": True, "code": 0},
            {"sid": SID_A, "deleted": False, "code": 5},
            {"sid": "S-1-5-21-999", "deleted": True, "code": 0},
        ]

        outcomes = ProfileOperator(fake_channel).delete("H1", [SID_A, SID_A, f" {SID_A} "])

        assert len(outcomes) == 1
        assert outcomes[0].deleted

    def test_skipped_profiles(self, fake_channel: Any) -> None:
        """Profiles the host declines are skipped, not failed."""
        fake_channel.deletions["H1"] = [
            {"sid": SID_A, "deleted": False, "code": "skipped", "message": "profile is loaded"},
            {"sid": SID_B, "deleted": False, "code": 0},
        ]

        outcomes = ProfileOperator(fake_channel).delete("H1", [SID_A, SID_B])

        assert [o.code for o in outcomes] == [SKIPPED, SKIPPED]
        assert not any(o.failed for o in outcomes)

    def test_missing_result(self, fake_channel: Any) -> None:
        """A SID the host did not report is an exception outcome."""
        fake_channel.deletions["H1"] = [{"sid": SID_A, "deleted": True, "code": 0}]

        outcomes = ProfileOperator(fake_channel).delete("H1", [SID_A, SID_B])

        assert outcomes[1].code == EXCEPTION
        assert "no result" in outcomes[1].message

    def test_string_codes(self, fake_channel: Any) -> None:
        """Numeric strings and unknown codes are normalized."""
        fake_channel.deletions["H1"] = [
            {"sid": SID_A, "deleted": False, "code": "5"},
            {"sid": SID_B, "deleted": False, "code": "exception", "message": "boom"},
            {"sid": SID_C, "deleted": False, "code": None},
        ]

        outcomes = ProfileOperator(fake_channel).delete("H1", [SID_A, SID_B, SID_C])

        assert [o.code for o in outcomes] == [5, EXCEPTION, EXCEPTION]

    def test_single_object_payload(self, fake_channel: Any) -> None:
        """A bare object for one SID is accepted."""
        fake_channel.deletions["H1"] = {"sid": SID_A, "deleted": True, "code": 0}

        (outcome,) = ProfileOperator(fake_channel).delete("H1", [SID_A])

        assert outcome.deleted

    def test_channel_failure_fails_every_sid(self, fake_channel: Any) -> None:
        """A failed call yields an exception outcome for each SID."""
        fake_channel.deletions["H1"] = RemoteError("H1", "connection reset")

        outcomes = ProfileOperator(fake_channel).delete("H1", [SID_A, SID_B])

        assert [o.code for o in outcomes] == [EXCEPTION, EXCEPTION]
        assert all(o.message == "connection reset" for o in outcomes)

    def test_invalid_sid_never_sent(self, fake_channel: Any) -> None:
        """Malformed SIDs fail locally and are not sent to the host."""
        bad = "S-1-5-21-1'; Remove-Item"
        outcomes = ProfileOperator(fake_channel).delete("H1", [SID_A, bad])

        sent = fake_channel.tasks(DELETE_TASK)[0][1]["security_ids"]
        assert sent == [SID_A]
        assert {o.security_id: o.failed for o in outcomes} == {SID_A: False, bad: True}

    def test_nothing_to_delete(self, fake_channel: Any) -> None:
        """An empty request makes no remote call."""
        assert ProfileOperator(fake_channel).delete("H1", ["", "  "]) == []
        assert fake_channel.calls == []


class TestExecute:
    """Tests for ProfileOperator.execute."""

    def test_hosts_processed_in_order(self, fake_channel: Any) -> None:
        """Hosts run one at a time in sorted order."""
        plans = [_plan("h2", SID_A), _plan("H1", SID_B), _plan("H3")]

        outcomes = ProfileOperator(fake_channel).execute(plans)

        assert [host for host, _ in fake_channel.tasks(DELETE_TASK)] == ["H1", "h2"]
        assert [o.computer for o in outcomes] == ["H1", "h2"]

    def test_failing_host_does_not_stop_others(self, fake_channel: Any) -> None:
        """A host that fails entirely leaves the others untouched."""
        fake_channel.deletions["H1"] = RuntimeError("unexpected")
        plans = [_plan("H1", SID_A), _plan("H2", SID_A, SID_B)]

        outcomes = ProfileOperator(fake_channel).execute(plans)

        assert [(o.computer, o.failed) for o in outcomes] == [
            ("H1", True),
            ("H2", False),
            ("H2", False),
        ]
