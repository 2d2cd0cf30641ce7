"""WinRM remote channel.

Runs task scripts through PowerShell remoting using pywinrm.
"""

import logging
from typing import Any

import winrm
from winrm.exceptions import WinRMError, WinRMTransportError

from profsweep.core.config import WinRMSettings
from profsweep.remote.base import RemoteChannel, RemoteError, RemoteTask, decode_output

logger = logging.getLogger(__name__)


class WinRMChannel(RemoteChannel):
    """Remote channel backed by pywinrm sessions.

    A fresh session is opened per call; sessions are not shared between
    threads.

    Args:
        settings: Connection settings.
    """

    def __init__(self, settings: WinRMSettings) -> None:
        self._settings = settings

    def endpoint(self, computer: str) -> str:
        """Return the WS-Management URL for a host."""
        scheme = "https" if self._settings.use_ssl else "http"
        return f"{scheme}://{computer}:{self._settings.effective_port}/wsman"

    def _session(self, computer: str, *, read_timeout: int, operation_timeout: int) -> Any:
        """Open a pywinrm session to a host."""
        return winrm.Session(
            self.endpoint(computer),
            auth=(self._settings.username, self._settings.password),
            transport=self._settings.transport,
            read_timeout_sec=read_timeout,
            operation_timeout_sec=operation_timeout,
        )

    def probe(self, computer: str) -> None:
        """Run ``hostname`` with the short probe timeout.

        Raises:
            RemoteError: If the host does not answer or the command fails.
        """
        timeout = self._settings.probe_timeout_sec
        # pywinrm requires the read timeout to exceed the operation timeout
        try:
            session = self._session(
                computer,
                read_timeout=timeout + 1,
                operation_timeout=timeout,
            )
            response = session.run_cmd("hostname")
        except (WinRMError, WinRMTransportError, OSError) as e:
            raise RemoteError(computer, str(e) or type(e).__name__) from e

        if response.status_code != 0:
            raise RemoteError(computer, f"probe exited with status {response.status_code}")
        logger.debug("Probe ok: %s", computer)

    def invoke(self, computer: str, task: RemoteTask) -> Any:
        """Run a task script through ``run_ps`` and decode its JSON output.

        Raises:
            RemoteError: If the call fails or returns a non-zero status.
        """
        logger.debug("Invoking %s on %s", task.name, computer)
        try:
            session = self._session(
                computer,
                read_timeout=self._settings.read_timeout_sec,
                operation_timeout=self._settings.operation_timeout_sec,
            )
            response = session.run_ps(task.render())
        except (WinRMError, WinRMTransportError, OSError) as e:
            raise RemoteError(computer, str(e) or type(e).__name__) from e

        stdout = response.std_out.decode("utf-8", errors="replace")
        if response.status_code != 0:
            stderr = response.std_err.decode("utf-8", errors="replace").strip()
            raise RemoteError(
                computer,
                f"{task.name} exited with status {response.status_code}: {stderr or 'no detail'}",
            )
        return decode_output(computer, stdout)
