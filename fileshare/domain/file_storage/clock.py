"""
Clock Interface

Abstract time source for the storage index, so expiry can be driven
deterministically in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone


class Clock(ABC):
    """Supplies the current time as integer UTC epoch seconds."""

    @abstractmethod
    def now(self) -> int:
        """
        Get the current time.

        Returns:
            Seconds since the Unix epoch, UTC
        """
        pass  # pragma: no cover


class SystemClock(Clock):
    """Wall clock time in UTC."""

    def now(self) -> int:
        return int(datetime.now(timezone.utc).timestamp())
