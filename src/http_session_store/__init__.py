"""http-session-store — Server-side HTTP session values.

A session id travels in a cookie; the values bound to it live in a
``Store`` that is serialized to a pluggable driver between requests,
preserving each value's type through a ``{"d": ..., "t": ...}`` encoding.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> from http_session_store import Store
>>> store = Store()
>>> store.put("username", "virk")
>>> store.to_json()
{'username': {'d': 'virk', 't': 'String'}}
"""
from __future__ import annotations

# Value store
from http_session_store.session.serializer import (
    GuardedValue,
    MalformedPairError,
    TypeTag,
    UnsupportedTypeError,
    guard,
    unguard,
)
from http_session_store.session.store import NotANumberError, Store, StoreInitError

# Lifecycle
from http_session_store.session.lifecycle import (
    AsyncSession,
    Session,
    SessionInitError,
    SessionPersistError,
    SessionStatus,
)

# Configuration and cookies
from http_session_store.config import CookieOptions, SessionConfig
from http_session_store.cookies import CookieJar, SessionCookie, SimpleCookieJar

# Drivers
from http_session_store.storage import (
    AsyncMemoryDriver,
    AsyncSessionDriver,
    CookieDriver,
    DriverError,
    FileDriver,
    MemoryDriver,
    RedisDriver,
    SessionDriver,
    make_driver,
)

# Middleware
from http_session_store.middleware.session_middleware import SessionMiddleware

__version__: str = "0.1.0"

__all__ = [
    "__version__",
    # Value store
    "GuardedValue",
    "MalformedPairError",
    "NotANumberError",
    "Store",
    "StoreInitError",
    "TypeTag",
    "UnsupportedTypeError",
    "guard",
    "unguard",
    # Lifecycle
    "AsyncSession",
    "Session",
    "SessionInitError",
    "SessionPersistError",
    "SessionStatus",
    # Configuration and cookies
    "CookieJar",
    "CookieOptions",
    "SessionConfig",
    "SessionCookie",
    "SimpleCookieJar",
    # Drivers
    "AsyncMemoryDriver",
    "AsyncSessionDriver",
    "CookieDriver",
    "DriverError",
    "FileDriver",
    "MemoryDriver",
    "RedisDriver",
    "SessionDriver",
    "make_driver",
    # Middleware
    "SessionMiddleware",
]
