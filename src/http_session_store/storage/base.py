"""Abstract base class for session drivers.

A driver persists the serialized session payload keyed by session id.
The payload is always a UTF-8 JSON string produced by ``Store.serialize``.

Classes
-------
- SessionDriver  — abstract base for all synchronous drivers
- DriverError    — backing storage failed to read or write
"""
from __future__ import annotations

from abc import ABC, abstractmethod


class DriverError(OSError):
    """Raised when a driver's backing storage fails.

    Parameters
    ----------
    session_id:
        The session being read or written when the failure occurred.
    message:
        Description of the failure.
    """

    def __init__(self, session_id: str, message: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session {session_id!r}: {message}")


class SessionDriver(ABC):
    """Reads and writes raw session payloads.

    Drivers must be safe for sequential use within one request.  For
    concurrent requests on the same session id, the last write wins; a
    driver must never leave a payload half written.
    """

    @abstractmethod
    def load(self, session_id: str) -> str | None:
        """Return the payload stored under ``session_id``.

        Parameters
        ----------
        session_id:
            The session to retrieve.

        Returns
        -------
        str | None
            The previously saved payload, or None if there is none.

        Raises
        ------
        DriverError
            If the backing storage cannot be read.
        """

    @abstractmethod
    def save(self, session_id: str, payload: str) -> None:
        """Persist ``payload`` under ``session_id``, overwriting any previous one.

        Raises
        ------
        DriverError
            If the backing storage cannot be written.
        """

    @abstractmethod
    def delete(self, session_id: str) -> None:
        """Remove the payload for ``session_id``.  Missing entries are ignored.

        Raises
        ------
        DriverError
            If the backing storage cannot be written.
        """

    def exists(self, session_id: str) -> bool:
        """Return True if a payload is stored under ``session_id``."""
        return self.load(session_id) is not None

    def list(self) -> list[str]:
        """Return all stored session ids.

        Raises
        ------
        NotImplementedError
            If the driver cannot enumerate its sessions.
        """
        raise NotImplementedError(
            f"{type(self).__name__} cannot enumerate stored sessions"
        )
