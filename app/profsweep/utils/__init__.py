"""Utility modules for profsweep.

This module exports commonly used utility functions.
"""

from profsweep.utils.formatting import (
    configure_logging,
    console,
    err_console,
    print_error,
    print_info,
    print_line,
    print_success,
    print_warning,
)
from profsweep.utils.shell import CommandResult, run_powershell

__all__ = [
    "CommandResult",
    "configure_logging",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_line",
    "print_success",
    "print_warning",
    "run_powershell",
]
