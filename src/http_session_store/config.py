"""Session configuration.

Classes
-------
- CookieOptions  — attributes applied to every cookie the session writes
- SessionConfig  — driver selection, cookie naming, and lifetime
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

DriverName = Literal["cookie", "file", "memory", "redis"]


class CookieOptions(BaseModel):
    """Attributes rendered onto ``Set-Cookie`` headers.

    Parameters
    ----------
    http_only:
        Hide the cookie from client-side scripts.
    same_site:
        ``"Strict"``, ``"Lax"``, ``"None"``, or None to omit the attribute.
    path:
        Cookie path.
    secure:
        Only send the cookie over HTTPS.
    domain:
        Optional cookie domain.
    max_age:
        Lifetime in seconds.  None makes it a browser-session cookie.
    """

    http_only: bool = True
    same_site: Literal["Strict", "Lax", "None"] | None = None
    path: str = "/"
    secure: bool = False
    domain: str | None = None
    max_age: int | None = None

    model_config = {"frozen": True}


class SessionConfig(BaseModel):
    """Configuration for session handling.

    Parameters
    ----------
    driver:
        Which driver persists session payloads.
    cookie_name:
        Name of the cookie carrying the session id.
    clear_with_browser:
        When True, cookies carry no ``Max-Age`` and expire with the browser
        session.
    age:
        Session lifetime in seconds.  Used as cookie ``Max-Age`` and as the
        redis key TTL.
    cookie:
        Attributes for cookies written by the session.
    file_location:
        Directory used by the file driver.
    redis_url:
        Connection URL for the redis driver.  None uses localhost defaults.
    redis_key_prefix:
        Prefix prepended to every redis key.
    """

    driver: DriverName = "cookie"
    cookie_name: str = Field(default="adonis-session", min_length=1)
    clear_with_browser: bool = False
    age: int = Field(default=7200, gt=0)
    cookie: CookieOptions = Field(default_factory=CookieOptions)
    file_location: str = "tmp/sessions"
    redis_url: str | None = None
    redis_key_prefix: str = "session:"

    def cookie_options(self) -> CookieOptions:
        """Return ``cookie`` with ``max_age`` derived from ``age``."""
        max_age = None if self.clear_with_browser else self.age
        return self.cookie.model_copy(update={"max_age": max_age})

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> SessionConfig:
        """Build a config from a plain mapping such as a parsed settings file."""
        return cls.model_validate(data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SessionConfig:
        """Load a config from a YAML file.

        The file may hold the settings at its top level or under a
        ``session:`` key.  An empty file yields the defaults.
        """
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if isinstance(raw, dict) and isinstance(raw.get("session"), dict):
            raw = raw["session"]
        return cls.from_mapping(raw)
