"""profsweep - stale user-profile pruning for Windows workstation fleets."""

__version__ = "0.3.0"
