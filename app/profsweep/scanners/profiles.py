"""Remote profile inventory collector.

Runs the inventory routine on each reachable host under a concurrency
cap and turns each host's payload into ``ProfileRecord`` objects, with
eligibility computed against the run's single cutoff instant.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Any

from profsweep.core.identity import account_label
from profsweep.core.policy import is_eligible
from profsweep.core.retry import RetryPolicy
from profsweep.core.timeconv import normalize_timestamp
from profsweep.models.profile import ProfileRecord
from profsweep.models.result import HostResult
from profsweep.remote.base import RemoteChannel, RemoteError
from profsweep.remote.scripts import inventory_task

logger = logging.getLogger(__name__)

# Label used when a host reports neither SID nor path
_UNKNOWN_LABEL = "(unknown)"


class ProfileCollector:
    """Collects profile inventory from many hosts in parallel.

    Each host is handled by an independent task that returns a
    ``HostResult``; a failure on one host never affects another.

    Args:
        channel: Remote channel used to run the inventory routine.
        users_root: Managed users directory on each host.
        cutoff_utc: The run's cutoff instant, fixed before any remote call.
        max_workers: Maximum hosts collected concurrently.
        measure_size: Ask hosts to measure profile folder sizes.
        retry: Retry policy for the inventory call.
    """

    def __init__(
        self,
        channel: RemoteChannel,
        *,
        users_root: str,
        cutoff_utc: datetime,
        max_workers: int = 25,
        measure_size: bool = False,
        retry: RetryPolicy | None = None,
    ) -> None:
        if max_workers < 1:
            msg = f"max_workers must be at least 1, got {max_workers}"
            raise ValueError(msg)
        self._channel = channel
        self._users_root = users_root
        self._cutoff = cutoff_utc
        self._max_workers = max_workers
        self._measure_size = measure_size
        self._retry = retry or RetryPolicy()

    @property
    def cutoff_utc(self) -> datetime:
        """Return the cutoff instant applied to every host."""
        return self._cutoff

    def collect(self, hosts: list[str]) -> list[HostResult]:
        """Collect inventory from all hosts.

        Args:
            hosts: Reachable hosts.

        Returns:
            One HostResult per host, sorted by host name.
        """
        if not hosts:
            return []

        results: list[HostResult] = []
        workers = min(self._max_workers, len(hosts))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="inventory") as pool:
            futures = [pool.submit(self.collect_host, host) for host in hosts]
            for future in as_completed(futures):
                results.append(future.result())

        results.sort(key=lambda r: r.computer.casefold())
        return results

    def collect_host(self, computer: str) -> HostResult:
        """Collect inventory from one host.

        Never raises; failures are returned as a failed HostResult.
        """
        task = inventory_task(self._users_root, measure_size=self._measure_size)
        try:
            payload = self._retry.call(
                lambda: self._channel.invoke(computer, task),
                label=f"inventory on {computer}",
            )
            workstation, records = self.parse_payload(computer, payload)
        except Exception as e:  # noqa: BLE001 - one host's failure must not stop the fleet
            logger.warning("Inventory failed on %s: %s", computer, e)
            return HostResult.failure(computer, str(e) or type(e).__name__)

        if not workstation:
            logger.info("Skipping %s: not a workstation", computer)
        else:
            logger.info("Collected %d profile(s) from %s", len(records), computer)
        return HostResult.success(computer, records, workstation=workstation)

    def parse_payload(self, computer: str, payload: Any) -> tuple[bool, list[ProfileRecord]]:
        """Convert an inventory payload into records.

        Args:
            computer: Host that produced the payload.
            payload: Decoded JSON output of the inventory routine.

        Returns:
            Tuple of (is_workstation, records).

        Raises:
            RemoteError: If the payload does not have the expected shape.
        """
        if not isinstance(payload, dict):
            raise RemoteError(computer, "inventory payload is not an object")

        if payload.get("workstation") is False:
            return False, []

        rows = payload.get("profiles") or []
        # ConvertTo-Json collapses single-element arrays in some hosts
        if isinstance(rows, dict):
            rows = [rows]
        if not isinstance(rows, list):
            raise RemoteError(computer, "inventory payload has no profile list")

        records: list[ProfileRecord] = []
        for row in rows:
            if not isinstance(row, dict):
                logger.debug("Ignoring malformed profile row from %s: %r", computer, row)
                continue
            records.append(self._build_record(computer, row))
        return True, records

    def _build_record(self, computer: str, row: dict[str, Any]) -> ProfileRecord:
        """Build one record, normalizing time and applying the policy."""
        security_id = str(row.get("sid") or "").strip()
        local_path = str(row.get("local_path") or "").strip()
        last_use = normalize_timestamp(row.get("last_use"))
        label = account_label(security_id, row.get("account"), local_path) or _UNKNOWN_LABEL

        record = ProfileRecord(
            computer=computer,
            security_id=security_id,
            account_label=label,
            local_path=local_path,
            last_use_utc=last_use,
            eligible=is_eligible(last_use, self._cutoff),
            size_bytes=_parse_size(row.get("size_bytes")),
        )
        logger.debug(
            "%s on %s: last use %s, %s, eligible=%s",
            label,
            computer,
            last_use.isoformat() if last_use else "unknown",
            record.size_human,
            record.eligible,
        )
        return record


def _parse_size(value: object) -> int | None:
    """Return a non-negative byte count, or None if not reported."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return int(value)
