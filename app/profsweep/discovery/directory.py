"""Directory host source.

Lists enabled computer accounts with the ActiveDirectory PowerShell
module on the local machine and drops server-class systems.
"""

import json
import logging
import subprocess
from typing import Any

from profsweep.core.retry import RetryPolicy
from profsweep.discovery.base import DiscoveryError, HostSource, normalize_hosts
from profsweep.utils.shell import run_powershell

logger = logging.getLogger(__name__)

_QUERY = (
    "Import-Module ActiveDirectory -ErrorAction Stop; "
    "Get-ADComputer -Filter 'Enabled -eq $true' -Properties OperatingSystem{search_base} | "
    "Select-Object Name, OperatingSystem | ConvertTo-Json -Compress"
)


class DirectoryHostSource(HostSource):
    """Host source backed by Active Directory.

    Args:
        server_marker: Hosts whose operating system label contains this
            (case-insensitive) are excluded.
        search_base: Optional distinguished name to search under.
        retry: Retry policy for the directory query.
        timeout: Maximum time in seconds for the query.
    """

    def __init__(
        self,
        *,
        server_marker: str = "Server",
        search_base: str | None = None,
        retry: RetryPolicy | None = None,
        timeout: float = 120.0,
    ) -> None:
        self._server_marker = server_marker
        self._search_base = search_base
        self._retry = retry or RetryPolicy()
        self._timeout = timeout

    @property
    def name(self) -> str:
        """Return the source description."""
        return "Active Directory"

    def query(self) -> str:
        """Return the PowerShell query used for discovery."""
        base = ""
        if self._search_base:
            escaped = self._search_base.replace("'", "''")
            base = f" -SearchBase '{escaped}'"
        return _QUERY.format(search_base=base)

    def hosts(self) -> list[str]:
        """Query the directory for enabled workstation-class computers.

        Raises:
            DiscoveryError: If PowerShell or the ActiveDirectory module is
                unavailable, or the query fails.
        """
        try:
            output = self._retry.call(self._run_query, label="directory query")
        except (OSError, subprocess.TimeoutExpired, RuntimeError) as e:
            msg = f"Directory lookup failed: {e}"
            raise DiscoveryError(msg) from e

        entries = _parse_entries(output)
        marker = self._server_marker.casefold()
        names: list[str] = []
        for entry in entries:
            name = entry.get("Name")
            if not isinstance(name, str) or not name.strip():
                continue
            platform = entry.get("OperatingSystem") or ""
            if marker and marker in str(platform).casefold():
                logger.debug("Excluding server-class host %s (%s)", name, platform)
                continue
            names.append(name)

        hosts = normalize_hosts(names)
        logger.info("Directory returned %d workstation host(s)", len(hosts))
        return hosts

    def _run_query(self) -> str:
        """Run the directory query once."""
        result = run_powershell(self.query(), timeout=self._timeout)
        if not result.success:
            msg = result.stderr.strip() or f"exit status {result.returncode}"
            raise RuntimeError(msg)
        return result.stdout


def _parse_entries(output: str) -> list[dict[str, Any]]:
    """Decode the directory query output into a list of entries."""
    text = output.strip()
    if not text:
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Directory lookup returned invalid JSON: {e}"
        raise DiscoveryError(msg) from e
    # ConvertTo-Json emits a bare object for a single result
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        msg = "Directory lookup returned an unexpected payload"
        raise DiscoveryError(msg)
    return [entry for entry in data if isinstance(entry, dict)]
