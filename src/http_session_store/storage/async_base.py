"""Abstract base class for async session drivers.

Same contract as ``SessionDriver`` with every operation a coroutine, for
frameworks whose request handling runs on an event loop.

Classes
-------
- AsyncSessionDriver  — abstract base for all async drivers
"""
from __future__ import annotations

from abc import ABC, abstractmethod


class AsyncSessionDriver(ABC):
    """Async reading and writing of raw session payloads.

    Implementations should use ``asyncio.Lock`` for in-process safety
    where needed, and raise ``DriverError`` on backing storage failure.
    """

    @abstractmethod
    async def load(self, session_id: str) -> str | None:
        """Return the payload stored under ``session_id``, or None."""

    @abstractmethod
    async def save(self, session_id: str, payload: str) -> None:
        """Persist ``payload`` under ``session_id``, overwriting any previous one."""

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Remove the payload for ``session_id``.  Missing entries are ignored."""

    async def exists(self, session_id: str) -> bool:
        """Return True if a payload is stored under ``session_id``."""
        return await self.load(session_id) is not None
