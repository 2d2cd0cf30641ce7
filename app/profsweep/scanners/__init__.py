"""Fleet scanners.

This module exports the reachability filter and the profile inventory
collector.
"""

from profsweep.scanners.profiles import ProfileCollector
from profsweep.scanners.reachability import ReachabilityFilter

__all__ = ["ProfileCollector", "ReachabilityFilter"]
