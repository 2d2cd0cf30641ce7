"""Remote execution for profsweep.

This module exports the channel interface, the WinRM implementation,
and the task builders for the host-side routines.
"""

from profsweep.remote.base import RemoteChannel, RemoteError, RemoteTask
from profsweep.remote.scripts import delete_task, inventory_task
from profsweep.remote.winrm_channel import WinRMChannel

__all__ = [
    "RemoteChannel",
    "RemoteError",
    "RemoteTask",
    "WinRMChannel",
    "delete_task",
    "inventory_task",
]
