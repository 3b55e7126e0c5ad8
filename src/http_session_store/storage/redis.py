"""Redis session driver.

Import-guarded: ``redis`` is an optional dependency.  Attempting to
instantiate ``RedisDriver`` without the ``redis`` package installed will
raise ``ImportError`` with a helpful message.

Classes
-------
- RedisDriver  — Redis key-value session storage
"""
from __future__ import annotations

import logging

from http_session_store.storage.base import DriverError, SessionDriver

logger = logging.getLogger(__name__)

_REDIS_IMPORT_ERROR = (
    "The 'redis' package is required for RedisDriver. "
    "Install it with: pip install redis"
)


class RedisDriver(SessionDriver):
    """Persists sessions in a Redis instance.

    Each session is stored as a Redis string under the key
    ``<key_prefix><session_id>``.  Redis ``SET`` replaces the value
    atomically, so concurrent writers resolve to last-write-wins.

    Parameters
    ----------
    host:
        Redis server hostname. Defaults to ``"localhost"``.
    port:
        Redis server port. Defaults to ``6379``.
    db:
        Redis logical database index. Defaults to ``0``.
    password:
        Optional authentication password.
    key_prefix:
        String prepended to all session keys.  Defaults to ``"session:"``.
    ttl_seconds:
        Optional TTL for session keys.  When ``None`` keys persist until
        explicitly deleted.
    url:
        If supplied, overrides host/port/db/password and is used as a
        Redis connection URL (e.g. ``"redis://localhost:6379/0"``).
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: str | None = None,
        key_prefix: str = "session:",
        ttl_seconds: int | None = None,
        url: str | None = None,
    ) -> None:
        try:
            import redis as redis_module  # noqa: PLC0415
        except ImportError as exc:
            raise ImportError(_REDIS_IMPORT_ERROR) from exc

        if url is not None:
            self._client = redis_module.Redis.from_url(url, decode_responses=True)
        else:
            self._client = redis_module.Redis(
                host=host,
                port=port,
                db=db,
                password=password,
                decode_responses=True,
            )
        self._redis_error: type[Exception] = redis_module.RedisError
        self._key_prefix = key_prefix
        self._ttl_seconds = ttl_seconds

    def _key(self, session_id: str) -> str:
        return f"{self._key_prefix}{session_id}"

    # ------------------------------------------------------------------
    # SessionDriver interface
    # ------------------------------------------------------------------

    def load(self, session_id: str) -> str | None:
        """Return the payload for ``session_id``, or None.

        Raises
        ------
        DriverError
            If Redis cannot be reached or rejects the command.
        """
        try:
            value = self._client.get(self._key(session_id))
        except self._redis_error as exc:
            logger.warning("RedisDriver: load failed for %r: %s", session_id, exc)
            raise DriverError(session_id, f"redis load failed: {exc}") from exc
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    def save(self, session_id: str, payload: str) -> None:
        """Write ``payload`` under the prefixed key, applying the TTL if set.

        Raises
        ------
        DriverError
            If Redis cannot be reached or rejects the command.
        """
        key = self._key(session_id)
        try:
            if self._ttl_seconds is not None:
                self._client.setex(key, self._ttl_seconds, payload)
            else:
                self._client.set(key, payload)
        except self._redis_error as exc:
            logger.warning("RedisDriver: save failed for %r: %s", session_id, exc)
            raise DriverError(session_id, f"redis save failed: {exc}") from exc

    def delete(self, session_id: str) -> None:
        """Remove the key for ``session_id`` if it exists."""
        try:
            self._client.delete(self._key(session_id))
        except self._redis_error as exc:
            raise DriverError(session_id, f"redis delete failed: {exc}") from exc

    def exists(self, session_id: str) -> bool:
        """Return True if the key for ``session_id`` exists in Redis."""
        try:
            return bool(self._client.exists(self._key(session_id)))
        except self._redis_error as exc:
            raise DriverError(session_id, f"redis exists failed: {exc}") from exc

    def list(self) -> list[str]:
        """Return all session ids stored under the configured prefix.

        Uses a Redis SCAN to avoid blocking the server.
        """
        prefix_len = len(self._key_prefix)
        session_ids: list[str] = []
        cursor: int = 0
        while True:
            cursor, keys = self._client.scan(
                cursor=cursor, match=f"{self._key_prefix}*", count=100
            )
            for key in keys:
                text = key.decode("utf-8") if isinstance(key, bytes) else str(key)
                session_ids.append(text[prefix_len:])
            if cursor == 0:
                break
        return session_ids

    def __repr__(self) -> str:
        return (
            f"RedisDriver(key_prefix={self._key_prefix!r}, "
            f"ttl_seconds={self._ttl_seconds!r})"
        )
