"""Run aggregation and report lines.

This module exports the fleet aggregator and the report line builders.
"""

from profsweep.report.aggregator import (
    FleetAggregator,
    RunSummary,
    format_failure_line,
    format_plan_line,
    format_queried_line,
    format_skipped_line,
)

__all__ = [
    "FleetAggregator",
    "RunSummary",
    "format_failure_line",
    "format_plan_line",
    "format_queried_line",
    "format_skipped_line",
]
