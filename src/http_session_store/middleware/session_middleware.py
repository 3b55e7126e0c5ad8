"""Session before/after request middleware.

Wraps the start and end of each request cycle: the session is resolved
and loaded before the request handler runs, and persisted after it.

Classes
-------
- SessionMiddleware  — before/after request hooks for session handling
"""
from __future__ import annotations

import logging
from collections.abc import Callable

from http_session_store.config import SessionConfig
from http_session_store.cookies import CookieJar, SessionCookie
from http_session_store.session.lifecycle import Session
from http_session_store.storage import SessionDriver, make_driver

logger = logging.getLogger(__name__)


class SessionMiddleware:
    """Instantiate a ``Session`` per request and commit it afterwards.

    This middleware is framework-agnostic: callers adapt their framework's
    cookies to a ``CookieJar`` and call the hooks at the right points in
    their own request pipeline.

    Parameters
    ----------
    config:
        Session configuration.  Defaults to ``SessionConfig()``.
    driver:
        Driver shared by all requests.  When omitted one is built from
        ``config``; the cookie driver is rebuilt per request because it is
        bound to that request's cookies.
    id_factory:
        Optional callable producing new session ids.
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        driver: SessionDriver | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.config = config or SessionConfig()
        if driver is None and self.config.driver != "cookie":
            driver = make_driver(self.config)
        self._driver = driver
        self._id_factory = id_factory

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def before_request(self, jar: CookieJar) -> Session:
        """Resolve and load the session for the request owning ``jar``.

        Parameters
        ----------
        jar:
            Cookie access for the incoming request and its response.

        Returns
        -------
        Session
            An instantiated session ready for use by the request handler.

        Raises
        ------
        SessionInitError
            If the driver fails to load the session.
        """
        driver = self._driver if self._driver is not None else make_driver(self.config, jar)
        session = Session(
            SessionCookie(jar, self.config), driver, id_factory=self._id_factory
        ).instantiate()
        logger.debug(
            "SessionMiddleware: %s session %r",
            "created" if session.is_new else "loaded",
            session.session_id,
        )
        return session

    def after_request(self, session: Session) -> str:
        """Persist ``session`` and return its id.

        Raises
        ------
        SessionPersistError
            If the driver fails to save the session.
        """
        session.commit()
        logger.debug("SessionMiddleware: saved session %r", session.session_id)
        return session.session_id

    def discard(self, session: Session) -> None:
        """Drop ``session`` without saving.

        Useful for rolling back a request cycle that encountered an error.
        Nothing is persisted until ``after_request`` runs, so not calling
        it is the whole rollback; this method only records the decision.
        The session id cookie has already been written and is kept.
        """
        logger.debug("SessionMiddleware: discarded session %r", session.session_id)
