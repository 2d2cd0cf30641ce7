"""Abstract remote-call channel.

Host-side routines are shipped as ``RemoteTask`` descriptors: a
self-contained PowerShell body plus JSON parameters. The routine shares
nothing with the coordinator; it reads ``$Params`` and writes one JSON
document to stdout, which the channel decodes and returns.
"""

import base64
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

# Decodes the base64 JSON parameter blob into $Params on the host
_PARAMS_PREAMBLE = (
    "$Params = [System.Text.Encoding]::UTF8.GetString("
    "[System.Convert]::FromBase64String('{blob}')) | ConvertFrom-Json\n"
)


class RemoteError(Exception):
    """Raised when a remote call cannot be completed."""

    def __init__(self, computer: str, message: str) -> None:
        super().__init__(f"{computer}: {message}")
        self.computer = computer
        self.detail = message


@dataclass(frozen=True, slots=True)
class RemoteTask:
    """A host-side routine and its parameters.

    Attributes:
        name: Short task name used in logs.
        body: PowerShell script body. Reads ``$Params``, prints JSON.
        params: JSON-serializable parameters.
    """

    name: str
    body: str
    params: dict[str, Any] = field(default_factory=lambda: {})

    def render(self) -> str:
        """Return the full script with the parameter preamble prepended.

        Parameters travel base64-encoded so no value needs PowerShell quoting.
        """
        payload = json.dumps(self.params, separators=(",", ":"), sort_keys=True)
        blob = base64.b64encode(payload.encode("utf-8")).decode("ascii")
        return _PARAMS_PREAMBLE.format(blob=blob) + self.body


class RemoteChannel(ABC):
    """Abstract transport for running tasks on remote hosts.

    Implementations must be safe to call from several threads at once,
    one call per host at a time.

    Example:
        >>> channel = WinRMChannel(settings)
        >>> channel.probe("WS-0142")
        >>> data = channel.invoke("WS-0142", inventory_task("C:\\\\Users"))
    """

    @abstractmethod
    def probe(self, computer: str) -> None:
        """Perform a short liveness round trip.

        Args:
            computer: Host to probe.

        Raises:
            RemoteError: If the host does not answer.
        """

    @abstractmethod
    def invoke(self, computer: str, task: RemoteTask) -> Any:
        """Run a task on a host and return its decoded JSON output.

        Args:
            computer: Target host.
            task: Routine to run.

        Returns:
            The decoded JSON document printed by the routine.

        Raises:
            RemoteError: If the call fails or the output is not valid JSON.
        """


def decode_output(computer: str, text: str) -> Any:
    """Decode a routine's JSON output.

    Args:
        computer: Host that produced the output (for error messages).
        text: Raw stdout.

    Returns:
        Decoded JSON value.

    Raises:
        RemoteError: If the output is empty or not JSON.
    """
    stripped = text.strip()
    if not stripped:
        raise RemoteError(computer, "empty output from remote routine")
    try:
        return json.loads(stripped)
    except json.JSONDecodeError as e:
        raise RemoteError(computer, f"invalid JSON from remote routine: {e}") from e
