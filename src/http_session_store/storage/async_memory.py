"""Async in-memory session driver.

Stores payloads in a plain Python dict guarded by ``asyncio.Lock``.
All data is lost when the process exits.

Classes
-------
- AsyncMemoryDriver  — dict-backed ephemeral async storage
"""
from __future__ import annotations

import asyncio

from http_session_store.storage.async_base import AsyncSessionDriver


class AsyncMemoryDriver(AsyncSessionDriver):
    """Ephemeral async in-process driver backed by a Python dict.

    An ``asyncio.Lock`` guards all access so that concurrent coroutines
    do not race on the internal dict.

    Parameters
    ----------
    initial_data:
        Optional pre-populated mapping of session ids to payloads.
        A shallow copy is taken so the caller's dict is not mutated.
    """

    def __init__(self, initial_data: dict[str, str] | None = None) -> None:
        self._store: dict[str, str] = dict(initial_data or {})
        self._lock: asyncio.Lock = asyncio.Lock()

    async def load(self, session_id: str) -> str | None:
        """Return the payload for ``session_id``, or None."""
        async with self._lock:
            return self._store.get(session_id)

    async def save(self, session_id: str, payload: str) -> None:
        """Store ``payload`` under ``session_id``, overwriting if present."""
        async with self._lock:
            self._store[session_id] = payload

    async def delete(self, session_id: str) -> None:
        """Remove ``session_id`` if present."""
        async with self._lock:
            self._store.pop(session_id, None)

    async def list_sessions(self) -> list[str]:
        """Return all stored session ids in insertion order."""
        async with self._lock:
            return list(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"AsyncMemoryDriver(sessions={len(self._store)})"
