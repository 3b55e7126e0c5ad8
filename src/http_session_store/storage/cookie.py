"""Cookie session driver.

Keeps the session payload on the client: the payload travels in a cookie
named after the session id, next to the session id cookie itself.  Nothing
is stored server side, so payloads are limited by browser cookie size.

Classes
-------
- CookieDriver  — payload-in-cookie storage
"""
from __future__ import annotations

from http_session_store.config import CookieOptions
from http_session_store.cookies import CookieJar
from http_session_store.storage.base import SessionDriver


class CookieDriver(SessionDriver):
    """Stores each session payload in a cookie named by the session id.

    A driver instance is bound to one request/response pair through its
    ``jar``; build a new one per request.

    Parameters
    ----------
    jar:
        Cookie access for the current request.
    options:
        Attributes applied to the payload cookie.
    """

    def __init__(self, jar: CookieJar, options: CookieOptions | None = None) -> None:
        self._jar = jar
        self._options = options or CookieOptions()

    def load(self, session_id: str) -> str | None:
        """Return the payload sent back by the client, or None."""
        return self._jar.read(session_id) or None

    def save(self, session_id: str, payload: str) -> None:
        """Queue ``payload`` as the outgoing cookie ``session_id``."""
        self._jar.write(session_id, payload, self._options)

    def delete(self, session_id: str) -> None:
        """Queue an empty, already expired cookie for ``session_id``."""
        expired = self._options.model_copy(update={"max_age": 0})
        self._jar.write(session_id, "", expired)

    def __repr__(self) -> str:
        return f"CookieDriver(jar={self._jar!r})"
