"""Reachability filter.

Probes every target once, in parallel, and partitions the target set
into reachable and unreachable hosts. A failed probe is final for the
run; there is no retry.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from profsweep.models.result import REASON_UNREACHABLE, ProbeResult, ReachabilityReport
from profsweep.remote.base import RemoteChannel

logger = logging.getLogger(__name__)


class ReachabilityFilter:
    """Partitions hosts by a lightweight remote-management probe.

    Args:
        channel: Remote channel used for probing.
        max_workers: Maximum concurrent probes.
    """

    def __init__(self, channel: RemoteChannel, *, max_workers: int = 25) -> None:
        if max_workers < 1:
            msg = f"max_workers must be at least 1, got {max_workers}"
            raise ValueError(msg)
        self._channel = channel
        self._max_workers = max_workers

    def probe(self, computer: str) -> ProbeResult:
        """Probe a single host.

        Never raises; any failure marks the host unreachable.
        """
        try:
            self._channel.probe(computer)
        except Exception as e:  # noqa: BLE001 - any probe failure means unreachable
            logger.info("Host %s is unreachable: %s", computer, e)
            return ProbeResult(computer=computer, reachable=False, error=str(e))
        return ProbeResult(computer=computer, reachable=True)

    def partition(self, hosts: list[str]) -> ReachabilityReport:
        """Probe all hosts and partition them.

        Args:
            hosts: Target hosts (deduplicated).

        Returns:
            ReachabilityReport whose two sides together cover every input
            host exactly once.
        """
        if not hosts:
            return ReachabilityReport(reachable=())

        results: list[ProbeResult] = []
        workers = min(self._max_workers, len(hosts))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="probe") as pool:
            futures = [pool.submit(self.probe, host) for host in hosts]
            for future in as_completed(futures):
                results.append(future.result())

        reachable = sorted((r.computer for r in results if r.reachable), key=str.casefold)
        unreachable = {r.computer: REASON_UNREACHABLE for r in results if not r.reachable}
        logger.info(
            "Reachability: %d reachable, %d unreachable",
            len(reachable),
            len(unreachable),
        )
        return ReachabilityReport(reachable=tuple(reachable), unreachable=unreachable)
