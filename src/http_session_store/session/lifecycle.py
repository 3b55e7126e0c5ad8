"""Session lifecycle management.

A ``Session`` binds one ``Store`` to one request/response cycle.  At the
start of the request it resolves the session id (reusing the client's id
or generating a new one), writes the id back to the client, and loads the
stored payload from a driver.  At the end of the request ``commit`` hands
the serialized store back to the driver.

Classes
-------
- SessionStatus        — UNRESOLVED / RESOLVED
- Session              — lifecycle over a synchronous ``SessionDriver``
- AsyncSession         — lifecycle over an ``AsyncSessionDriver``
- SessionInitError     — the driver failed while loading the session
- SessionPersistError  — the driver failed while saving the session
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable
from enum import Enum
from typing import Any
from uuid import uuid4

from http_session_store.cookies import SessionCookie
from http_session_store.session.store import Store
from http_session_store.storage.async_base import AsyncSessionDriver
from http_session_store.storage.base import DriverError, SessionDriver

logger = logging.getLogger(__name__)

_VALID_ID_RE = re.compile(r"[A-Za-z0-9_-]{1,128}")


class SessionStatus(str, Enum):
    """Resolution state of a session id within one request."""

    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


class SessionInitError(RuntimeError):
    """Raised when the driver fails to load an existing session."""

    def __init__(self, session_id: str, cause: Exception) -> None:
        self.session_id = session_id
        super().__init__(f"Cannot initiate session {session_id!r}: {cause}")


class SessionPersistError(RuntimeError):
    """Raised when the driver fails to save a session."""

    def __init__(self, session_id: str, cause: Exception) -> None:
        self.session_id = session_id
        super().__init__(f"Cannot persist session {session_id!r}: {cause}")


def generate_session_id() -> str:
    """Return a new random session id."""
    return uuid4().hex


def is_valid_session_id(session_id: str | None) -> bool:
    """Return True if ``session_id`` is a syntactically acceptable id."""
    return bool(session_id) and _VALID_ID_RE.fullmatch(session_id) is not None  # type: ignore[arg-type]


class _SessionBase:
    """Id resolution and store delegation shared by both lifecycles."""

    def __init__(
        self,
        cookie: SessionCookie,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._cookie = cookie
        self._id_factory = id_factory or generate_session_id
        self._status = SessionStatus.UNRESOLVED
        self._session_id: str | None = None
        self._is_new = False
        self._store: Store | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def session_id(self) -> str:
        """The resolved session id."""
        self._require_resolved()
        return self._session_id  # type: ignore[return-value]

    @property
    def is_new(self) -> bool:
        """True when no valid id came with the request."""
        self._require_resolved()
        return self._is_new

    @property
    def store(self) -> Store:
        """The value store bound to this request."""
        self._require_resolved()
        return self._store  # type: ignore[return-value]

    def _require_resolved(self) -> None:
        if self._status is not SessionStatus.RESOLVED:
            raise RuntimeError("Session is not instantiated; call instantiate() first.")

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _resolve_id(self) -> None:
        if self._status is SessionStatus.RESOLVED:
            raise RuntimeError("Session is already instantiated.")

        incoming = self._cookie.read_incoming_id()
        if is_valid_session_id(incoming):
            self._session_id = incoming
            self._is_new = False
            logger.debug("Session: reusing id %r", incoming)
        else:
            if incoming is not None:
                logger.debug("Session: discarding invalid id %r", incoming)
            self._session_id = self._id_factory()
            self._is_new = True
            logger.debug("Session: resolved new id %r", self._session_id)

        # Sent on every response so clients without a valid cookie get one.
        self._cookie.write_outgoing_id(self._session_id)

    def _bind(self, payload: str | None) -> None:
        self._store = Store(payload)
        self._status = SessionStatus.RESOLVED

    # ------------------------------------------------------------------
    # Store delegation
    # ------------------------------------------------------------------

    def put(self, key: str, value: Any) -> None:
        self.store.put(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        return self.store.get(key, default)

    def increment(self, key: str, steps: int | float = 1) -> None:
        self.store.increment(key, steps)

    def decrement(self, key: str, steps: int | float = 1) -> None:
        self.store.decrement(key, steps)

    def forget(self, key: str) -> None:
        self.store.forget(key)

    def pull(self, key: str, default: Any = None) -> Any:
        return self.store.pull(key, default)

    def all(self) -> dict[str, Any]:
        return self.store.all()

    def clear(self) -> None:
        self.store.clear()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(session_id={self._session_id!r}, "
            f"is_new={self._is_new!r}, status={self._status.value!r})"
        )


class Session(_SessionBase):
    """Session lifecycle over a synchronous driver.

    Parameters
    ----------
    cookie:
        Reads and writes the session id cookie for this request.
    driver:
        Persists the serialized store keyed by session id.
    id_factory:
        Callable producing new session ids.  Defaults to random hex UUIDs.

    Example
    -------
    ::

        session = Session(SessionCookie(jar), MemoryDriver()).instantiate()
        session.put("user.id", 42)
        session.commit()
    """

    def __init__(
        self,
        cookie: SessionCookie,
        driver: SessionDriver,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        super().__init__(cookie, id_factory)
        self._driver = driver

    def instantiate(self) -> Session:
        """Resolve the session id and load the stored values.

        Returns
        -------
        Session
            ``self``, now in the ``RESOLVED`` state.

        Raises
        ------
        SessionInitError
            If the driver fails to load the payload.
        StoreInitError
            If the stored payload is not valid JSON.
        RuntimeError
            If the session was already instantiated.
        """
        self._resolve_id()
        payload: str | None = None
        if not self._is_new:
            try:
                payload = self._driver.load(self._session_id)  # type: ignore[arg-type]
            except DriverError as exc:
                logger.warning("Session: load failed for %r: %s", self._session_id, exc)
                raise SessionInitError(self._session_id, exc) from exc  # type: ignore[arg-type]
        self._bind(payload)
        return self

    def commit(self) -> str:
        """Hand the serialized store to the driver.

        Returns
        -------
        str
            The payload that was saved.

        Raises
        ------
        SessionPersistError
            If the driver fails to save the payload.
        """
        payload = self.store.serialize()
        try:
            self._driver.save(self.session_id, payload)
        except DriverError as exc:
            logger.warning("Session: save failed for %r: %s", self._session_id, exc)
            raise SessionPersistError(self.session_id, exc) from exc
        logger.debug("Session: saved %r (%d bytes)", self._session_id, len(payload))
        return payload


class AsyncSession(_SessionBase):
    """Session lifecycle over an async driver.

    Same semantics as ``Session``; ``instantiate`` and ``commit`` are
    coroutines that await the driver to completion.
    """

    def __init__(
        self,
        cookie: SessionCookie,
        driver: AsyncSessionDriver,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        super().__init__(cookie, id_factory)
        self._driver = driver

    async def instantiate(self) -> AsyncSession:
        """Resolve the session id and load the stored values."""
        self._resolve_id()
        payload: str | None = None
        if not self._is_new:
            try:
                payload = await self._driver.load(self._session_id)  # type: ignore[arg-type]
            except DriverError as exc:
                logger.warning("AsyncSession: load failed for %r: %s", self._session_id, exc)
                raise SessionInitError(self._session_id, exc) from exc  # type: ignore[arg-type]
        self._bind(payload)
        return self

    async def commit(self) -> str:
        """Hand the serialized store to the driver and return the payload."""
        payload = self.store.serialize()
        try:
            await self._driver.save(self.session_id, payload)
        except DriverError as exc:
            logger.warning("AsyncSession: save failed for %r: %s", self._session_id, exc)
            raise SessionPersistError(self.session_id, exc) from exc
        logger.debug("AsyncSession: saved %r (%d bytes)", self._session_id, len(payload))
        return payload
