"""Host source for an explicit host list."""

from collections.abc import Iterable

from profsweep.discovery.base import HostSource, parse_host_list


class StaticHostSource(HostSource):
    """Host source backed by a list given on the command line.

    Args:
        value: Comma-delimited string or list of host names.
    """

    def __init__(self, value: str | Iterable[str]) -> None:
        self._hosts = parse_host_list(value)

    @property
    def name(self) -> str:
        """Return the source description."""
        return "explicit host list"

    def hosts(self) -> list[str]:
        """Return the parsed host list."""
        return list(self._hosts)
