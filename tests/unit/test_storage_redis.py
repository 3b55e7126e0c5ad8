"""Unit tests for http_session_store.storage.redis.RedisDriver.

All tests use a MagicMock in place of the real redis client so no
Redis server is required.  The ``redis`` package is also mocked at the
import level so the test suite runs without it installed.
"""
from __future__ import annotations

import sys
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from http_session_store.storage.base import DriverError


class FakeRedisError(Exception):
    """Stands in for ``redis.RedisError``."""


# ---------------------------------------------------------------------------
# Helpers — build a fully mocked RedisDriver without the real redis package
# ---------------------------------------------------------------------------


def _make_driver(
    key_prefix: str = "session:",
    ttl_seconds: int | None = None,
    url: str | None = None,
) -> Any:
    """Return a RedisDriver whose internal client is a MagicMock."""
    mock_redis_module = MagicMock()
    mock_redis_module.RedisError = FakeRedisError
    mock_client = MagicMock()
    mock_redis_module.Redis.return_value = mock_client
    mock_redis_module.Redis.from_url.return_value = mock_client

    with patch.dict(sys.modules, {"redis": mock_redis_module}):
        from http_session_store.storage.redis import RedisDriver

        driver = RedisDriver(key_prefix=key_prefix, ttl_seconds=ttl_seconds, url=url)
    driver._mock_module = mock_redis_module  # type: ignore[attr-defined]
    driver._mock_client = mock_client  # type: ignore[attr-defined]
    return driver


# ---------------------------------------------------------------------------
# Import-guard behaviour
# ---------------------------------------------------------------------------


class TestRedisDriverImportGuard:
    def test_import_error_when_redis_missing(self) -> None:
        with patch.dict(sys.modules, {"redis": None}):  # type: ignore[dict-item]
            from http_session_store.storage.redis import RedisDriver

            with pytest.raises(ImportError, match="pip install redis"):
                RedisDriver()


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestRedisDriverConstruction:
    def test_defaults(self) -> None:
        driver = _make_driver()
        assert driver._key_prefix == "session:"
        assert driver._ttl_seconds is None

    def test_host_connection_decodes_responses(self) -> None:
        driver = _make_driver()
        kwargs = driver._mock_module.Redis.call_args.kwargs
        assert kwargs["host"] == "localhost"
        assert kwargs["decode_responses"] is True

    def test_url_connection(self) -> None:
        driver = _make_driver(url="redis://cache:6379/1")
        driver._mock_module.Redis.from_url.assert_called_once_with(
            "redis://cache:6379/1", decode_responses=True
        )

    def test_key_prepends_prefix(self) -> None:
        assert _make_driver(key_prefix="pfx:")._key("abc") == "pfx:abc"

    def test_repr(self) -> None:
        assert "pfx:" in repr(_make_driver(key_prefix="pfx:"))


# ---------------------------------------------------------------------------
# load / save / delete / exists
# ---------------------------------------------------------------------------


class TestRedisDriverOperations:
    def test_save_without_ttl_uses_set(self) -> None:
        driver = _make_driver()
        driver.save("s1", "{}")
        driver._mock_client.set.assert_called_once_with("session:s1", "{}")

    def test_save_with_ttl_uses_setex(self) -> None:
        driver = _make_driver(ttl_seconds=60)
        driver.save("s1", "{}")
        driver._mock_client.setex.assert_called_once_with("session:s1", 60, "{}")

    def test_load_returns_payload(self) -> None:
        driver = _make_driver()
        driver._mock_client.get.return_value = "{}"
        assert driver.load("s1") == "{}"
        driver._mock_client.get.assert_called_once_with("session:s1")

    def test_load_decodes_bytes(self) -> None:
        driver = _make_driver()
        driver._mock_client.get.return_value = b'{"a":1}'
        assert driver.load("s1") == '{"a":1}'

    def test_load_missing_returns_none(self) -> None:
        driver = _make_driver()
        driver._mock_client.get.return_value = None
        assert driver.load("s1") is None

    def test_delete(self) -> None:
        driver = _make_driver()
        driver.delete("s1")
        driver._mock_client.delete.assert_called_once_with("session:s1")

    def test_exists(self) -> None:
        driver = _make_driver()
        driver._mock_client.exists.return_value = 1
        assert driver.exists("s1") is True
        driver._mock_client.exists.return_value = 0
        assert driver.exists("s1") is False


class TestRedisDriverErrors:
    def test_load_failure_raises_driver_error(self) -> None:
        driver = _make_driver()
        driver._mock_client.get.side_effect = FakeRedisError("connection refused")
        with pytest.raises(DriverError, match="connection refused") as excinfo:
            driver.load("s1")
        assert excinfo.value.session_id == "s1"

    def test_save_failure_raises_driver_error(self) -> None:
        driver = _make_driver()
        driver._mock_client.set.side_effect = FakeRedisError("read only replica")
        with pytest.raises(DriverError):
            driver.save("s1", "{}")

    def test_delete_failure_raises_driver_error(self) -> None:
        driver = _make_driver()
        driver._mock_client.delete.side_effect = FakeRedisError("boom")
        with pytest.raises(DriverError):
            driver.delete("s1")


class TestRedisDriverList:
    def test_list_single_scan_page(self) -> None:
        driver = _make_driver()
        driver._mock_client.scan.return_value = (0, ["session:a", "session:b"])
        assert driver.list() == ["a", "b"]

    def test_list_follows_cursor(self) -> None:
        driver = _make_driver()
        driver._mock_client.scan.side_effect = [
            (7, ["session:a"]),
            (0, [b"session:b"]),
        ]
        assert driver.list() == ["a", "b"]
        assert driver._mock_client.scan.call_count == 2
