"""Data models for profsweep.

This module exports the run-scoped data structures shared across
collection, deletion and reporting.
"""

from profsweep.models.outcome import EXCEPTION, SKIPPED, DeletionOutcome
from profsweep.models.profile import HostPlan, ProfileRecord
from profsweep.models.result import (
    REASON_COLLECTION_ERROR,
    REASON_UNREACHABLE,
    HostResult,
    ProbeResult,
    ReachabilityReport,
)

__all__ = [
    "EXCEPTION",
    "REASON_COLLECTION_ERROR",
    "REASON_UNREACHABLE",
    "SKIPPED",
    "DeletionOutcome",
    "HostPlan",
    "HostResult",
    "ProbeResult",
    "ProfileRecord",
    "ReachabilityReport",
]
