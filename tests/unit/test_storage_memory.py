"""Unit tests for http_session_store.storage.memory.MemoryDriver."""
from __future__ import annotations

import pytest

from http_session_store.storage.base import SessionDriver
from http_session_store.storage.memory import MemoryDriver


@pytest.fixture()
def driver() -> MemoryDriver:
    return MemoryDriver()


class TestMemoryDriverLoadSave:
    def test_save_and_load(self, driver: MemoryDriver) -> None:
        driver.save("s1", '{"key": "value"}')
        assert driver.load("s1") == '{"key": "value"}'

    def test_save_overwrites_existing(self, driver: MemoryDriver) -> None:
        driver.save("s1", "original")
        driver.save("s1", "updated")
        assert driver.load("s1") == "updated"

    def test_load_missing_returns_none(self, driver: MemoryDriver) -> None:
        assert driver.load("nonexistent") is None


class TestMemoryDriverDeleteExists:
    def test_exists_false_before_save(self, driver: MemoryDriver) -> None:
        assert driver.exists("s1") is False

    def test_exists_true_after_save(self, driver: MemoryDriver) -> None:
        driver.save("s1", "payload")
        assert driver.exists("s1") is True

    def test_delete_removes_entry(self, driver: MemoryDriver) -> None:
        driver.save("s1", "payload")
        driver.delete("s1")
        assert driver.load("s1") is None

    def test_delete_missing_is_noop(self, driver: MemoryDriver) -> None:
        driver.delete("ghost")
        assert len(driver) == 0


class TestMemoryDriverExtras:
    def test_list_in_insertion_order(self, driver: MemoryDriver) -> None:
        driver.save("beta", "b")
        driver.save("alpha", "a")
        assert driver.list() == ["beta", "alpha"]

    def test_clear_empties_store(self, driver: MemoryDriver) -> None:
        driver.save("a", "1")
        driver.clear()
        assert driver.list() == []

    def test_repr_contains_session_count(self, driver: MemoryDriver) -> None:
        driver.save("x", "y")
        assert "1" in repr(driver)

    def test_initial_data_shallow_copied(self) -> None:
        source = {"k": "v"}
        driver = MemoryDriver(initial_data=source)
        source["extra"] = "new"
        assert driver.exists("k")
        assert not driver.exists("extra")

    def test_is_a_session_driver(self, driver: MemoryDriver) -> None:
        assert isinstance(driver, SessionDriver)


class TestSessionDriverDefaults:
    def test_default_list_is_not_supported(self) -> None:
        class LoadOnly(SessionDriver):
            def load(self, session_id: str) -> str | None:
                return "payload" if session_id == "known" else None

            def save(self, session_id: str, payload: str) -> None:
                pass

            def delete(self, session_id: str) -> None:
                pass

        driver = LoadOnly()
        assert driver.exists("known") is True
        assert driver.exists("other") is False
        with pytest.raises(NotImplementedError, match="LoadOnly"):
            driver.list()
