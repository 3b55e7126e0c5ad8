"""Unit tests for http_session_store.session.lifecycle."""
from __future__ import annotations

import json

import pytest

from http_session_store.config import SessionConfig
from http_session_store.cookies import SessionCookie, SimpleCookieJar
from http_session_store.session.lifecycle import (
    AsyncSession,
    Session,
    SessionInitError,
    SessionPersistError,
    SessionStatus,
    generate_session_id,
    is_valid_session_id,
)
from http_session_store.session.store import StoreInitError
from http_session_store.storage.async_memory import AsyncMemoryDriver
from http_session_store.storage.base import DriverError
from http_session_store.storage.memory import MemoryDriver


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class FailingDriver(MemoryDriver):
    """MemoryDriver whose I/O can be switched to fail."""

    def __init__(self, fail_load: bool = False, fail_save: bool = False) -> None:
        super().__init__()
        self.fail_load = fail_load
        self.fail_save = fail_save
        self.load_calls = 0

    def load(self, session_id: str) -> str | None:
        self.load_calls += 1
        if self.fail_load:
            raise DriverError(session_id, "disk on fire")
        return super().load(session_id)

    def save(self, session_id: str, payload: str) -> None:
        if self.fail_save:
            raise DriverError(session_id, "disk full")
        super().save(session_id, payload)


def _session(
    cookie_header: str | None,
    driver: MemoryDriver,
    id_factory=None,
) -> tuple[Session, SimpleCookieJar]:
    jar = SimpleCookieJar(cookie_header)
    session = Session(SessionCookie(jar, SessionConfig()), driver, id_factory=id_factory)
    return session, jar


@pytest.fixture()
def driver() -> FailingDriver:
    return FailingDriver()


# ---------------------------------------------------------------------------
# Id helpers
# ---------------------------------------------------------------------------


class TestSessionIds:
    def test_generated_ids_are_valid(self) -> None:
        assert is_valid_session_id(generate_session_id())

    def test_generated_ids_differ(self) -> None:
        assert generate_session_id() != generate_session_id()

    @pytest.mark.parametrize("value", ["20", "abc-DEF_123", "a" * 128])
    def test_valid_ids(self, value: str) -> None:
        assert is_valid_session_id(value)

    @pytest.mark.parametrize(
        "value", [None, "", "../etc/passwd", "a b", "a" * 129, "abc\n", "\nabc"]
    )
    def test_invalid_ids(self, value: str | None) -> None:
        assert not is_valid_session_id(value)


# ---------------------------------------------------------------------------
# Id resolution
# ---------------------------------------------------------------------------


class TestSessionResolution:
    def test_create_session_id(self, driver: FailingDriver) -> None:
        session, jar = _session(None, driver)
        session.instantiate()
        assert session.is_new is True
        headers = jar.outgoing_headers()
        assert len(headers) == 1
        assert headers[0].startswith(f"adonis-session={session.session_id}")

    def test_re_use_existing_session_id_if_exists(self, driver: FailingDriver) -> None:
        session, jar = _session("adonis-session=20", driver)
        session.instantiate()
        assert session.is_new is False
        assert session.session_id == "20"
        assert jar.outgoing_headers()[0].startswith("adonis-session=20")

    def test_invalid_incoming_id_gets_replaced(self, driver: FailingDriver) -> None:
        session, jar = _session('adonis-session="../x"', driver, id_factory=lambda: "fresh")
        session.instantiate()
        assert session.is_new is True
        assert session.session_id == "fresh"
        assert jar.outgoing("adonis-session") == "fresh"

    def test_id_factory_is_used(self, driver: FailingDriver) -> None:
        session, _ = _session(None, driver, id_factory=lambda: "abc123")
        session.instantiate()
        assert session.session_id == "abc123"

    def test_new_session_skips_driver_read(self, driver: FailingDriver) -> None:
        session, _ = _session(None, driver)
        session.instantiate()
        assert driver.load_calls == 0

    def test_status_transitions(self, driver: FailingDriver) -> None:
        session, _ = _session(None, driver)
        assert session.status is SessionStatus.UNRESOLVED
        session.instantiate()
        assert session.status is SessionStatus.RESOLVED

    def test_instantiate_returns_self(self, driver: FailingDriver) -> None:
        session, _ = _session(None, driver)
        assert session.instantiate() is session

    def test_instantiate_twice_fails(self, driver: FailingDriver) -> None:
        session, _ = _session(None, driver)
        session.instantiate()
        with pytest.raises(RuntimeError, match="already"):
            session.instantiate()

    def test_accessing_store_before_instantiate_fails(self, driver: FailingDriver) -> None:
        session, _ = _session(None, driver)
        with pytest.raises(RuntimeError, match="instantiate"):
            session.get("user")

    def test_repr(self, driver: FailingDriver) -> None:
        session, _ = _session("adonis-session=20", driver)
        session.instantiate()
        assert "'20'" in repr(session)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestSessionLoading:
    def test_existing_payload_is_loaded(self, driver: FailingDriver) -> None:
        driver.save("20", json.dumps({"username": {"d": "virk", "t": "String"}}))
        session, _ = _session("adonis-session=20", driver)
        session.instantiate()
        assert session.get("username") == "virk"

    def test_missing_record_yields_empty_store(self, driver: FailingDriver) -> None:
        session, _ = _session("adonis-session=20", driver)
        session.instantiate()
        assert session.all() == {}
        assert driver.load_calls == 1

    def test_driver_failure_raises_init_error(self) -> None:
        driver = FailingDriver(fail_load=True)
        session, _ = _session("adonis-session=20", driver)
        with pytest.raises(SessionInitError) as excinfo:
            session.instantiate()
        assert excinfo.value.session_id == "20"
        assert isinstance(excinfo.value.__cause__, DriverError)

    def test_corrupt_payload_is_hard_failure(self, driver: FailingDriver) -> None:
        driver.save("20", "not json")
        session, _ = _session("adonis-session=20", driver)
        with pytest.raises(StoreInitError):
            session.instantiate()


# ---------------------------------------------------------------------------
# Store delegation and commit
# ---------------------------------------------------------------------------


class TestSessionCommit:
    def test_delegates_to_store(self, driver: FailingDriver) -> None:
        session, _ = _session(None, driver)
        session.instantiate()
        session.put("visits", 1)
        session.increment("visits", 2)
        session.decrement("visits")
        session.put("flash.notice", "saved")
        assert session.pull("flash.notice") == "saved"
        session.forget("flash")
        assert session.all() == {"visits": 2}
        session.clear()
        assert session.all() == {}

    def test_commit_saves_payload(self, driver: FailingDriver) -> None:
        session, _ = _session(None, driver, id_factory=lambda: "s1")
        session.instantiate()
        session.put("username", "virk")
        payload = session.commit()
        assert payload == '{"username":{"d":"virk","t":"String"}}'
        assert driver.load("s1") == payload

    def test_empty_store_commits_empty_mapping(self, driver: FailingDriver) -> None:
        session, _ = _session(None, driver, id_factory=lambda: "s1")
        session.instantiate()
        assert session.commit() == "{}"

    def test_values_survive_between_requests(self, driver: FailingDriver) -> None:
        first, _ = _session(None, driver, id_factory=lambda: "s1")
        first.instantiate()
        first.put("user.id", 42)
        first.put("cart", ["apple"])
        first.commit()

        second, jar = _session("adonis-session=s1", driver)
        second.instantiate()
        assert second.is_new is False
        assert second.all() == {"user": {"id": 42}, "cart": ["apple"]}
        assert jar.outgoing("adonis-session") == "s1"

    def test_commit_before_instantiate_fails(self, driver: FailingDriver) -> None:
        session, _ = _session(None, driver)
        with pytest.raises(RuntimeError):
            session.commit()

    def test_save_failure_raises_persist_error(self) -> None:
        driver = FailingDriver(fail_save=True)
        session, _ = _session(None, driver, id_factory=lambda: "s1")
        session.instantiate()
        with pytest.raises(SessionPersistError) as excinfo:
            session.commit()
        assert excinfo.value.session_id == "s1"
        assert isinstance(excinfo.value.__cause__, DriverError)


# ---------------------------------------------------------------------------
# AsyncSession
# ---------------------------------------------------------------------------


class FailingAsyncDriver(AsyncMemoryDriver):
    async def load(self, session_id: str) -> str | None:
        raise DriverError(session_id, "timeout")


class TestAsyncSession:
    @pytest.mark.asyncio
    async def test_new_session(self) -> None:
        jar = SimpleCookieJar()
        session = await AsyncSession(SessionCookie(jar), AsyncMemoryDriver()).instantiate()
        assert session.is_new is True
        assert jar.outgoing("adonis-session") == session.session_id

    @pytest.mark.asyncio
    async def test_round_trip_through_driver(self) -> None:
        driver = AsyncMemoryDriver()
        first = AsyncSession(SessionCookie(SimpleCookieJar()), driver, id_factory=lambda: "a1")
        await first.instantiate()
        first.put("user.age", 22)
        await first.commit()

        second = AsyncSession(SessionCookie(SimpleCookieJar("adonis-session=a1")), driver)
        await second.instantiate()
        assert second.is_new is False
        assert second.get("user.age") == 22

    @pytest.mark.asyncio
    async def test_driver_failure_raises_init_error(self) -> None:
        session = AsyncSession(
            SessionCookie(SimpleCookieJar("adonis-session=a1")), FailingAsyncDriver()
        )
        with pytest.raises(SessionInitError):
            await session.instantiate()
