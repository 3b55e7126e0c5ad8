#!/usr/bin/env python3
"""Example: Quickstart — http-session-store

Minimal working example: run two request cycles through the session
middleware and watch values survive between them.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install http-session-store
"""
from __future__ import annotations

import http_session_store
from http_session_store import (
    MemoryDriver,
    SessionConfig,
    SessionMiddleware,
    SimpleCookieJar,
)


def main() -> None:
    print(f"http-session-store version: {http_session_store.__version__}")

    config = SessionConfig(driver="memory")
    middleware = SessionMiddleware(config, driver=MemoryDriver())

    # Step 1: first request arrives without a session cookie
    jar = SimpleCookieJar()
    session = middleware.before_request(jar)
    session.put("user.name", "virk")
    session.put("visits", 1)
    session_id = middleware.after_request(session)
    print(f"New session '{session_id}' (is_new={session.is_new})")
    for header in jar.outgoing_headers():
        print(f"  Set-Cookie: {header}")

    # Step 2: second request echoes the cookie back
    jar = SimpleCookieJar(f"{config.cookie_name}={session_id}")
    session = middleware.before_request(jar)
    session.increment("visits")
    print(f"\nResumed session '{session.session_id}' (is_new={session.is_new})")
    print(f"  user.name = {session.get('user.name')}")
    print(f"  visits    = {session.get('visits')}")

    # Step 3: flash-style read-once value
    session.put("flash.notice", "Profile saved")
    print(f"  flash     = {session.pull('flash.notice')}")
    middleware.after_request(session)
    print(f"  payload   = {session.store.serialize()}")


if __name__ == "__main__":
    main()
