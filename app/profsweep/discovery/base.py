"""Abstract base class for host sources.

A host source produces the target set for a run: a deduplicated,
sorted list of host names.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable


class DiscoveryError(Exception):
    """Raised when the target host list cannot be obtained."""


class HostSource(ABC):
    """Abstract base class for all host sources.

    Example:
        >>> source = StaticHostSource("WS-01,WS-02")
        >>> source.hosts()
        ['WS-01', 'WS-02']
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short description of the source for log messages."""

    @abstractmethod
    def hosts(self) -> list[str]:
        """Return the target hosts.

        Returns:
            Deduplicated host names sorted case-insensitively.

        Raises:
            DiscoveryError: If the source cannot be queried.
        """


def normalize_hosts(names: Iterable[str]) -> list[str]:
    """Deduplicate and sort host names.

    Host names are case-insensitive; the first spelling seen is kept.
    Blank entries are dropped.

    Args:
        names: Raw host names.

    Returns:
        Sorted, deduplicated host names.
    """
    seen: dict[str, str] = {}
    for raw in names:
        name = raw.strip()
        if name and name.casefold() not in seen:
            seen[name.casefold()] = name
    return sorted(seen.values(), key=str.casefold)


def parse_host_list(value: str | Iterable[str] | None) -> list[str]:
    """Parse an explicit host list.

    Accepts a single comma-delimited string or a list whose items may
    themselves be comma-delimited.

    Args:
        value: Host list as given on the command line.

    Returns:
        Sorted, deduplicated host names (empty if value is None).
    """
    if value is None:
        return []
    items = [value] if isinstance(value, str) else list(value)
    names: list[str] = []
    for item in items:
        names.extend(item.split(","))
    return normalize_hosts(names)
