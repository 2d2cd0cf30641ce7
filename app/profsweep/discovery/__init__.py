"""Host discovery for profsweep.

This module exports the host source classes that produce a run's
target set.
"""

from profsweep.discovery.base import DiscoveryError, HostSource, parse_host_list
from profsweep.discovery.directory import DirectoryHostSource
from profsweep.discovery.static import StaticHostSource

__all__ = [
    "DirectoryHostSource",
    "DiscoveryError",
    "HostSource",
    "StaticHostSource",
    "parse_host_list",
]
