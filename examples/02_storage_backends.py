#!/usr/bin/env python3
"""Example: Storage Drivers

Demonstrates saving and restoring a session payload with the memory,
file and cookie drivers.

Usage:
    python examples/02_storage_backends.py

Requirements:
    pip install http-session-store
"""
from __future__ import annotations

import tempfile

import http_session_store
from http_session_store import (
    CookieDriver,
    FileDriver,
    MemoryDriver,
    Session,
    SessionCookie,
    SessionDriver,
    SimpleCookieJar,
)


def demo_driver(label: str, driver: SessionDriver) -> None:
    jar = SimpleCookieJar()
    session = Session(SessionCookie(jar), driver, id_factory=lambda: "s-001").instantiate()
    session.put("cart", ["apple", "pear"])
    session.put("seen", 3)
    payload = session.commit()

    restored = driver.load("s-001")
    print(f"  [{label}] saved {len(payload)} bytes, restored equal: {restored == payload}")


def main() -> None:
    print(f"http-session-store version: {http_session_store.__version__}")

    print("\nMemory driver:")
    demo_driver("memory", MemoryDriver())

    print("\nFile driver:")
    with tempfile.TemporaryDirectory() as tmpdir:
        driver = FileDriver(tmpdir)
        demo_driver("file", driver)
        print(f"  Stored sessions: {driver.list()}")

    print("\nCookie driver:")
    jar = SimpleCookieJar()
    driver = CookieDriver(jar)
    driver.save("s-001", '{"seen":{"d":"3","t":"Number"}}')
    for header in jar.outgoing_headers():
        print(f"  Set-Cookie: {header}")


if __name__ == "__main__":
    main()
