"""Cookie access for session handling.

Web frameworks wrap request and response cookies differently, so session
code only talks to a ``CookieJar``.  ``SimpleCookieJar`` is a standalone
implementation over ``http.cookies`` that parses a ``Cookie`` request
header and renders ``Set-Cookie`` response headers.

Classes
-------
- CookieJar        — abstract read/write access to cookies
- SimpleCookieJar  — ``http.cookies``-backed jar
- SessionCookie    — reads and writes the session id cookie
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from http.cookies import CookieError, SimpleCookie

from http_session_store.config import CookieOptions, SessionConfig

logger = logging.getLogger(__name__)


class CookieJar(ABC):
    """Read cookies from the current request and write them to its response."""

    @abstractmethod
    def read(self, name: str) -> str | None:
        """Return the incoming value of cookie ``name``, or None if absent."""

    @abstractmethod
    def write(self, name: str, value: str, options: CookieOptions) -> None:
        """Queue cookie ``name`` with ``value`` on the outgoing response."""


class SimpleCookieJar(CookieJar):
    """Cookie jar over ``http.cookies.SimpleCookie``.

    Parameters
    ----------
    cookie_header:
        Raw value of the incoming ``Cookie`` header, if any.  Unparseable
        headers are treated as carrying no cookies.
    """

    def __init__(self, cookie_header: str | None = None) -> None:
        self._incoming: SimpleCookie = SimpleCookie()
        if cookie_header:
            try:
                self._incoming.load(cookie_header)
            except CookieError:
                logger.debug("SimpleCookieJar: ignoring malformed header %r", cookie_header)
                self._incoming = SimpleCookie()
        self._outgoing: SimpleCookie = SimpleCookie()

    def read(self, name: str) -> str | None:
        morsel = self._incoming.get(name)
        return None if morsel is None else morsel.value

    def write(self, name: str, value: str, options: CookieOptions) -> None:
        self._outgoing.pop(name, None)
        self._outgoing[name] = value
        morsel = self._outgoing[name]
        morsel["path"] = options.path
        if options.http_only:
            morsel["httponly"] = True
        if options.secure:
            morsel["secure"] = True
        if options.same_site is not None:
            morsel["samesite"] = options.same_site
        if options.domain is not None:
            morsel["domain"] = options.domain
        if options.max_age is not None:
            morsel["max-age"] = options.max_age

    def outgoing(self, name: str) -> str | None:
        """Return the value queued for cookie ``name``, if any."""
        morsel = self._outgoing.get(name)
        return None if morsel is None else morsel.value

    def outgoing_headers(self) -> list[str]:
        """Return one ``Set-Cookie`` header value per written cookie."""
        return [morsel.OutputString() for morsel in self._outgoing.values()]

    def __repr__(self) -> str:
        return (
            f"SimpleCookieJar(incoming={sorted(self._incoming)!r}, "
            f"outgoing={list(self._outgoing)!r})"
        )


class SessionCookie:
    """Carries the session id between client and server.

    Parameters
    ----------
    jar:
        Cookie access for the current request/response pair.
    config:
        Supplies the cookie name and cookie attributes.
    """

    def __init__(self, jar: CookieJar, config: SessionConfig | None = None) -> None:
        self._jar = jar
        self._config = config or SessionConfig()

    @property
    def name(self) -> str:
        """Name of the session id cookie."""
        return self._config.cookie_name

    def read_incoming_id(self) -> str | None:
        """Return the session id sent by the client, or None."""
        return self._jar.read(self.name) or None

    def write_outgoing_id(self, session_id: str) -> None:
        """Send ``session_id`` back to the client."""
        self._jar.write(self.name, session_id, self._config.cookie_options())
