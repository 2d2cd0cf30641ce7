"""Bounded retry for remote calls.

Attempts run back to back with no backoff. Used for directory discovery
and inventory collection; probes and deletions are single-shot.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry a callable a fixed number of times.

    Attributes:
        max_attempts: Total attempts, including the first one.
        retry_on: Exception types that trigger another attempt.
    """

    max_attempts: int = 1
    retry_on: tuple[type[BaseException], ...] = (Exception,)

    def __post_init__(self) -> None:
        """Validate retry settings after initialization."""
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)

    def call(self, func: Callable[[], T], *, label: str = "operation") -> T:
        """Run ``func`` until it succeeds or attempts run out.

        Args:
            func: Zero-argument callable to run.
            label: Name used in log messages.

        Returns:
            The callable's return value.

        Raises:
            Exception: The last error raised by ``func`` once attempts are
                exhausted, or any error not listed in retry_on.
        """
        attempt = 1
        while True:
            try:
                return func()
            except self.retry_on as e:
                if attempt >= self.max_attempts:
                    raise
                logger.info(
                    "%s failed (attempt %d/%d): %s",
                    label,
                    attempt,
                    self.max_attempts,
                    e,
                )
                attempt += 1
