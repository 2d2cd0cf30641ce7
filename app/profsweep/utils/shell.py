"""Local process execution.

Only used for the directory lookup, which runs PowerShell on the
operator's machine rather than on the target hosts.
"""

import base64
import shutil
import subprocess
from dataclasses import dataclass

# Newest first: PowerShell 7, then Windows PowerShell 5.1
POWERSHELL_EXECUTABLES: tuple[str, ...] = ("pwsh", "powershell")


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured output of a finished process."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0


def run_command(args: list[str], *, timeout: float | None = 60.0) -> CommandResult:
    """Run a process to completion and capture its output.

    Raises:
        subprocess.TimeoutExpired: If the process exceeds timeout.
        FileNotFoundError: If the executable is not found.
    """
    completed = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
    )
    return CommandResult(completed.stdout, completed.stderr, completed.returncode)


def find_powershell() -> str | None:
    """Return the first PowerShell executable on PATH, or None."""
    return next((exe for exe in POWERSHELL_EXECUTABLES if shutil.which(exe)), None)


def encode_script(script: str) -> str:
    """Encode a script for ``-EncodedCommand`` (base64 of UTF-16LE)."""
    return base64.b64encode(script.encode("utf-16-le")).decode("ascii")


def run_powershell(script: str, *, timeout: float | None = 120.0) -> CommandResult:
    """Run a PowerShell script locally.

    The script is passed encoded, so quotes and newlines in it need no
    escaping.

    Raises:
        FileNotFoundError: If no PowerShell executable is available.
        subprocess.TimeoutExpired: If the script exceeds timeout.
    """
    executable = find_powershell()
    if executable is None:
        msg = "PowerShell is not available on this system"
        raise FileNotFoundError(msg)

    return run_command(
        [executable, "-NoProfile", "-NonInteractive", "-EncodedCommand", encode_script(script)],
        timeout=timeout,
    )
