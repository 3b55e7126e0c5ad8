"""In-memory session driver.

Stores payloads in a plain Python dict.  All data is lost when the process
exits.  This driver is primarily useful for tests and single-process
development servers.

Classes
-------
- MemoryDriver  — dict-backed ephemeral storage
"""
from __future__ import annotations

from http_session_store.storage.base import SessionDriver


class MemoryDriver(SessionDriver):
    """Ephemeral, in-process driver backed by a Python dict.

    Parameters
    ----------
    initial_data:
        Optional pre-populated mapping of session ids to payloads.
        A shallow copy is taken so the caller's dict is not mutated.
    """

    def __init__(self, initial_data: dict[str, str] | None = None) -> None:
        self._store: dict[str, str] = dict(initial_data or {})

    # ------------------------------------------------------------------
    # SessionDriver interface
    # ------------------------------------------------------------------

    def load(self, session_id: str) -> str | None:
        """Return the payload for ``session_id``, or None."""
        return self._store.get(session_id)

    def save(self, session_id: str, payload: str) -> None:
        """Store ``payload`` under ``session_id``, overwriting if present."""
        self._store[session_id] = payload

    def delete(self, session_id: str) -> None:
        """Remove ``session_id`` from the store if present."""
        self._store.pop(session_id, None)

    def exists(self, session_id: str) -> bool:
        """Return True if ``session_id`` is present."""
        return session_id in self._store

    def list(self) -> list[str]:
        """Return all stored session ids in insertion order."""
        return list(self._store)

    # ------------------------------------------------------------------
    # Extras
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Remove all stored sessions."""
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"MemoryDriver(sessions={len(self._store)})"
