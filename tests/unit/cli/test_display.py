"""Unit tests for cli/display.py.

Tests for the summary table, probe table and console reporter.
"""

import io

import pytest
from profsweep.cli.display import ConsoleReporter, create_probe_table, create_summary_table
from profsweep.core.theme import get_theme
from profsweep.models.profile import HostPlan
from profsweep.report.aggregator import RunSummary
from rich.console import Console


def _render(renderable: object) -> str:
    buf = io.StringIO()
    console = Console(file=buf, width=80, theme=get_theme(), no_color=True)
    console.print(renderable)
    return buf.getvalue()


def _summary(**overrides: object) -> RunSummary:
    values: dict[str, object] = {
        "inactive_days": 90,
        "hosts_queried": 3,
        "profiles_analyzed": 12,
        "profiles_evaluated": 10,
        "profiles_eligible": 4,
        "eligible_bytes": 3 * 1024**3,
    }
    values.update(overrides)
    return RunSummary(**values)  # type: ignore[arg-type]


class TestSummaryTable:
    """Tests for create_summary_table."""

    def test_dry_run_rows(self) -> None:
        """Dry-run tables show the four inventory counters."""
        output = _render(create_summary_table(_summary(), dry_run=True))

        assert "Summary (Dry Run)" in output
        assert "Profiles eligible (>= 90 days)" in output
        assert "3.00 GB" in output
        assert "Profiles deleted" not in output
        assert "+--" in output

    def test_apply_rows(self) -> None:
        """Apply tables add deletion counters."""
        summary = _summary(deleted=3, skipped_profiles=0, failed=1)

        output = _render(create_summary_table(summary, dry_run=False))

        assert "Summary" in output
        assert "(Dry Run)" not in output
        assert "Profiles deleted" in output
        assert "Profiles failed" in output

    def test_unknown_size(self) -> None:
        """Unknown volume renders as N/A."""
        output = _render(create_summary_table(_summary(eligible_bytes=None)))
        assert "N/A" in output


class TestProbeTable:
    """Tests for create_probe_table."""

    def test_rows_sorted(self) -> None:
        """Hosts are listed alphabetically with their status."""
        output = _render(create_probe_table(["ws-b"], {"WS-A": "unreachable"}))

        assert output.index("WS-A") < output.index("ws-b")
        assert "unreachable" in output


class TestConsoleReporter:
    """Tests for ConsoleReporter."""

    def test_plan_line_is_literal(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Report lines keep their bracketed tags verbatim."""
        reporter = ConsoleReporter()

        reporter.plan(HostPlan("H1", ("S-1-5-21-1",), ("[bold]alice",)), dry_run=True)

        out = capsys.readouterr().out
        assert out.strip() == '[DRY-RUN]: Deleting 1 profile(s) on "H1" ([bold]alice)'
