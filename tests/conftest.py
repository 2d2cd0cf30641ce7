"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import threading
from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from profsweep.core.timeconv import to_filetime
from profsweep.remote.base import RemoteChannel, RemoteError, RemoteTask
from profsweep.remote.scripts import DELETE_TASK, INVENTORY_TASK

# Fixed reference instant shared by time-sensitive tests
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


class FakeChannel(RemoteChannel):
    """In-memory remote channel.

    Attributes:
        unreachable: Hosts whose probe fails.
        inventories: Host mapped to an inventory payload or an exception.
        deletions: Host mapped to a deletion payload, an exception, or a
            callable receiving the requested SIDs.
        calls: Every (host, task name, params) invoked, in call order.
        probes: Every host probed.
    """

    def __init__(self) -> None:
        self.unreachable: set[str] = set()
        self.inventories: dict[str, Any] = {}
        self.deletions: dict[str, Any] = {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.probes: list[str] = []
        self._lock = threading.Lock()

    def probe(self, computer: str) -> None:
        with self._lock:
            self.probes.append(computer)
        if computer in self.unreachable:
            raise RemoteError(computer, "connection refused")

    def invoke(self, computer: str, task: RemoteTask) -> Any:
        with self._lock:
            self.calls.append((computer, task.name, dict(task.params)))

        if task.name == INVENTORY_TASK:
            result = self.inventories.get(computer, {"workstation": True, "profiles": []})
        elif task.name == DELETE_TASK:
            sids = list(task.params["security_ids"])
            result = self.deletions.get(computer)
            if result is None:
                result = [
                    {"sid": sid, "deleted": True, "code": 0, "message": "deleted"} for sid in sids
                ]
            elif callable(result):
                result = result(sids)
        else:
            raise RemoteError(computer, f"unknown task {task.name}")

        if isinstance(result, Exception):
            raise result
        return result

    def tasks(self, name: str) -> list[tuple[str, dict[str, Any]]]:
        """Return (host, params) for every call of a task."""
        return [(host, params) for host, task_name, params in self.calls if task_name == name]


@pytest.fixture
def fake_channel() -> FakeChannel:
    """Create an empty fake remote channel."""
    return FakeChannel()


@pytest.fixture
def now() -> datetime:
    """Reference instant for cutoff computation."""
    return NOW


@pytest.fixture
def profile_row() -> Callable[..., dict[str, Any]]:
    """Factory for inventory rows as reported by the host routine.

    ``days_ago`` of None reports an unknown last use.
    """

    def _make(
        sid: str,
        account: str | None = None,
        *,
        days_ago: float | None = 200,
        folder: str | None = None,
        root: str = "C:\\Users",
        size_bytes: int | None = None,
    ) -> dict[str, Any]:
        leaf = folder or (account.split("\\")[-1] if account else sid)
        last_use = None if days_ago is None else to_filetime(NOW - timedelta(days=days_ago))
        return {
            "sid": sid,
            "account": account,
            "local_path": f"{root}\\{leaf}",
            "last_use": last_use,
            "size_bytes": size_bytes,
        }

    return _make


@pytest.fixture
def workstation_payload() -> Callable[..., dict[str, Any]]:
    """Factory for a workstation inventory payload."""

    def _make(*rows: dict[str, Any]) -> dict[str, Any]:
        return {"workstation": True, "caption": "Microsoft Windows 11 Pro", "profiles": list(rows)}

    return _make


@pytest.fixture
def isolated_config(tmp_path: Path) -> Iterator[Path]:
    """Point the config directory at a temporary location."""
    with patch.dict("os.environ", {"XDG_CONFIG_HOME": str(tmp_path)}):
        yield tmp_path / "profsweep"
