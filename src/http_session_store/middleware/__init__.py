"""Middleware subpackage.

Public surface
--------------
- SessionMiddleware  — before/after request hooks for session handling
"""
from __future__ import annotations

from http_session_store.middleware.session_middleware import SessionMiddleware

__all__ = ["SessionMiddleware"]
