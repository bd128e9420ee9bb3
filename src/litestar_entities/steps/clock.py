"""Clock implementations.

:class:`SystemClock` is used in production. :class:`InstantClock` advances a
virtual time on every sleep without waiting, so workflows driven by it finish
immediately and deterministically.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

__all__ = ["InstantClock", "SystemClock"]


class SystemClock:
    """Wall clock backed by :func:`asyncio.sleep`."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class InstantClock:
    """Virtual clock whose sleeps return at once.

    Each call to :meth:`sleep` yields control to the event loop and moves the
    virtual time forward by the requested duration.

    Example:
        >>> clock = InstantClock(datetime(2024, 1, 21, 10, 30, tzinfo=timezone.utc))
        >>> await clock.sleep(90)
        >>> clock.now()
        datetime.datetime(2024, 1, 21, 10, 31, 30, tzinfo=datetime.timezone.utc)
    """

    def __init__(self, start: datetime | None = None) -> None:
        """Initialize the clock.

        Args:
            start: Initial virtual time. Defaults to the current UTC time.
        """
        self._now = start or datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move the virtual time forward without yielding."""
        self._now += timedelta(seconds=seconds)

    async def sleep(self, seconds: float) -> None:
        self.advance(seconds)
        await asyncio.sleep(0)
