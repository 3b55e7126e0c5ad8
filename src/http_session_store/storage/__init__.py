"""Session driver subpackage.

All sync drivers implement the ``SessionDriver`` ABC.
All async drivers implement the ``AsyncSessionDriver`` ABC.
The redis driver guards its third-party import so that the package
remains installable without that extra.

Public surface (sync)
---------------------
- SessionDriver  — abstract base class
- DriverError    — backing storage failure
- CookieDriver   — payload carried in a client cookie
- FileDriver     — one file per session
- MemoryDriver   — in-process dict (useful for testing)
- RedisDriver    — Redis keys (requires ``redis`` package)
- make_driver    — build the driver named by a ``SessionConfig``

Public surface (async)
----------------------
- AsyncSessionDriver  — abstract base class for async drivers
- AsyncMemoryDriver   — async dict-based driver with asyncio.Lock
"""
from __future__ import annotations

from http_session_store.config import SessionConfig
from http_session_store.cookies import CookieJar
from http_session_store.storage.async_base import AsyncSessionDriver
from http_session_store.storage.async_memory import AsyncMemoryDriver
from http_session_store.storage.base import DriverError, SessionDriver
from http_session_store.storage.cookie import CookieDriver
from http_session_store.storage.file import FileDriver
from http_session_store.storage.memory import MemoryDriver
from http_session_store.storage.redis import RedisDriver


def make_driver(config: SessionConfig, jar: CookieJar | None = None) -> SessionDriver:
    """Instantiate the driver named by ``config.driver``.

    Parameters
    ----------
    config:
        Session configuration.
    jar:
        Cookie access for the current request.  Required by the cookie
        driver, ignored by the others.

    Returns
    -------
    SessionDriver
        A configured driver instance.

    Raises
    ------
    ValueError
        If the cookie driver is selected without a ``jar``.
    """
    if config.driver == "cookie":
        if jar is None:
            raise ValueError("The cookie driver needs the request's cookie jar")
        return CookieDriver(jar, config.cookie_options())
    if config.driver == "file":
        return FileDriver(config.file_location)
    if config.driver == "redis":
        return RedisDriver(
            key_prefix=config.redis_key_prefix,
            ttl_seconds=config.age,
            url=config.redis_url,
        )
    return MemoryDriver()


__all__ = [
    "AsyncMemoryDriver",
    "AsyncSessionDriver",
    "CookieDriver",
    "DriverError",
    "FileDriver",
    "MemoryDriver",
    "RedisDriver",
    "SessionDriver",
    "make_driver",
]
