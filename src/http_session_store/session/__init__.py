"""Session subpackage.

Provides the per-request value store, its type-preserving value codec,
and the lifecycle that binds a store to one request/response cycle.

Public surface
--------------
- Store               — nested, dotted-path session values
- TypeTag             — Number / Boolean / String / Date / Object / Array
- GuardedValue        — one encoded value and its tag
- guard / unguard     — encode and decode one value
- Session             — lifecycle over a synchronous driver
- AsyncSession        — lifecycle over an async driver
- SessionStatus       — UNRESOLVED / RESOLVED
"""
from __future__ import annotations

from http_session_store.session.lifecycle import AsyncSession, Session, SessionStatus
from http_session_store.session.serializer import GuardedValue, TypeTag, guard, unguard
from http_session_store.session.store import Store

__all__ = [
    "AsyncSession",
    "GuardedValue",
    "Session",
    "SessionStatus",
    "Store",
    "TypeTag",
    "guard",
    "unguard",
]
