"""Unit tests for deletion outcomes and host results."""

from profsweep.models.outcome import (
    EXCEPTION,
    SKIPPED,
    DeletionOutcome,
    exception_outcome,
    skipped_outcome,
)
from profsweep.models.result import (
    REASON_COLLECTION_ERROR,
    HostResult,
    ReachabilityReport,
)


class TestDeletionOutcome:
    """Tests for DeletionOutcome classification."""

    def test_deleted(self) -> None:
        """A deleted profile is neither skipped nor failed."""
        outcome = DeletionOutcome("WS-01", "S-1-5-21-1", deleted=True, code=0)
        assert not outcome.skipped
        assert not outcome.failed

    def test_skipped(self) -> None:
        """Skipped outcomes are not failures."""
        outcome = skipped_outcome("WS-01", "S-1-5-21-1", "profile is loaded")
        assert outcome.code == SKIPPED
        assert outcome.skipped
        assert not outcome.failed

    def test_status_code_failure(self) -> None:
        """A non-zero host status is a failure."""
        outcome = DeletionOutcome("WS-01", "S-1-5-21-1", deleted=False, code=8)
        assert outcome.failed

    def test_exception_failure(self) -> None:
        """Exception outcomes are failures."""
        outcome = exception_outcome("WS-01", "S-1-5-21-1", "access denied")
        assert outcome.code == EXCEPTION
        assert outcome.failed
        assert outcome.message == "access denied"


class TestResults:
    """Tests for per-host result types."""

    def test_host_success(self) -> None:
        """Successful results carry records and workstation flag."""
        result = HostResult.success("WS-01", [], workstation=False)
        assert result.ok
        assert not result.workstation
        assert result.records == ()

    def test_host_failure(self) -> None:
        """Failed results default to the collection error reason."""
        result = HostResult.failure("WS-01", "timed out")
        assert not result.ok
        assert result.reason == REASON_COLLECTION_ERROR
        assert result.error == "timed out"

    def test_reachability_total(self) -> None:
        """total counts both sides of the partition."""
        report = ReachabilityReport(reachable=("A", "B"), unreachable={"C": "unreachable"})
        assert report.total == 3
