"""Remote profile deletion operator.

Deletes planned profiles one host at a time. The host-side routine
re-reads every profile before deleting it, so a profile that was loaded
or removed after inventory is skipped rather than trusted from the
earlier snapshot.
"""

import logging
from collections.abc import Iterable
from typing import Any

from profsweep.core.identity import is_security_id
from profsweep.models.outcome import (
    EXCEPTION,
    SKIPPED,
    DeletionOutcome,
    OutcomeCode,
    exception_outcome,
)
from profsweep.models.profile import HostPlan
from profsweep.remote.base import RemoteChannel, RemoteError
from profsweep.remote.scripts import delete_task

logger = logging.getLogger(__name__)


class ProfileOperator:
    """Executes profile deletions on remote hosts.

    Hosts are processed sequentially and SIDs within a host in sorted
    order. Every requested SID yields exactly one DeletionOutcome.

    Args:
        channel: Remote channel used to run the deletion routine.
    """

    def __init__(self, channel: RemoteChannel) -> None:
        self._channel = channel

    def execute(self, plans: Iterable[HostPlan]) -> list[DeletionOutcome]:
        """Run deletion for every plan, one host at a time.

        A failing host never stops the remaining hosts.

        Args:
            plans: Per-host deletion plans.

        Returns:
            Outcomes for all hosts, in host then SID order.
        """
        outcomes: list[DeletionOutcome] = []
        for plan in sorted(plans, key=lambda p: p.computer.casefold()):
            if not plan.security_ids:
                continue
            outcomes.extend(self.delete(plan.computer, plan.security_ids))
        return outcomes

    def delete(self, computer: str, security_ids: Iterable[str]) -> list[DeletionOutcome]:
        """Delete profiles on one host.

        Args:
            computer: Target host.
            security_ids: SIDs to delete; duplicates are ignored.

        Returns:
            One DeletionOutcome per distinct SID, sorted by SID.
        """
        requested = sorted({sid.strip() for sid in security_ids if sid and sid.strip()})
        if not requested:
            return []

        # Only well-formed SIDs are interpolated into the host-side filter
        valid = [sid for sid in requested if is_security_id(sid)]
        outcomes: dict[str, DeletionOutcome] = {
            sid: exception_outcome(computer, sid, "not a valid security identifier")
            for sid in requested
            if sid not in valid
        }

        if valid:
            logger.info("Deleting %d profile(s) on %s", len(valid), computer)
            try:
                payload = self._channel.invoke(computer, delete_task(valid))
                outcomes.update(self._parse_payload(computer, valid, payload))
            except Exception as e:  # noqa: BLE001 - one host's failure must not stop the fleet
                detail = e.detail if isinstance(e, RemoteError) else str(e) or type(e).__name__
                logger.error("Deletion failed on %s: %s", computer, detail)
                for sid in valid:
                    outcomes[sid] = exception_outcome(computer, sid, detail)

        result = [outcomes[sid] for sid in requested]
        for outcome in result:
            if outcome.failed:
                logger.warning(
                    "Failed to delete %s on %s (code %s): %s",
                    outcome.security_id,
                    computer,
                    outcome.code,
                    outcome.message,
                )
        return result

    def _parse_payload(
        self,
        computer: str,
        requested: list[str],
        payload: Any,
    ) -> dict[str, DeletionOutcome]:
        """Map routine output to one outcome per requested SID.

        Unrequested or repeated entries are ignored; requested SIDs the
        routine did not report become exception outcomes.
        """
        rows = [payload] if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            raise RemoteError(computer, "deletion payload is not a list")

        wanted = {sid.upper(): sid for sid in requested}
        outcomes: dict[str, DeletionOutcome] = {}
        for row in rows:
            if not isinstance(row, dict):
                continue
            sid = wanted.get(str(row.get("sid") or "").strip().upper())
            if sid is None or sid in outcomes:
                continue
            outcomes[sid] = _row_to_outcome(computer, sid, row)

        for sid in requested:
            if sid not in outcomes:
                outcomes[sid] = exception_outcome(computer, sid, "no result reported by host")
        return outcomes


def _row_to_outcome(computer: str, sid: str, row: dict[str, Any]) -> DeletionOutcome:
    """Build an outcome from one row of routine output."""
    code = _parse_code(row.get("code"))
    message = str(row.get("message") or "")
    deleted = code == 0 and row.get("deleted") is not False
    if code == 0 and not deleted:
        # Status OK without a confirmed deletion is reported as a skip
        code = SKIPPED
    return DeletionOutcome(
        computer=computer,
        security_id=sid,
        deleted=deleted,
        code=code,
        message=message or ("deleted" if deleted else ""),
    )


def _parse_code(value: object) -> OutcomeCode:
    """Normalize a status code from routine output."""
    if isinstance(value, bool):
        return EXCEPTION
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
        if text.lower() == SKIPPED:
            return SKIPPED
    return EXCEPTION
