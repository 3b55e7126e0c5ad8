"""The per-request session value store.

A ``Store`` holds a nested mapping of session values addressed by dotted
paths (``"user.profile.age"``).  It is built from the payload a driver
returned for the current session, mutated while the request is handled,
and serialized back to a payload once the response is ready.

Classes
-------
- Store            — nested, path-addressed session values
- StoreInitError   — the persisted payload is not a JSON object
- NotANumberError  — increment/decrement on a non-numeric value
"""
from __future__ import annotations

import copy
import json
from collections.abc import Mapping, MutableMapping
from typing import Any

from http_session_store.session.serializer import ensure_storable, guard, unguard

_PATH_SEPARATOR = "."
_MISSING = object()


class StoreInitError(ValueError):
    """Raised when a store payload is not a valid top-level JSON object."""

    def __init__(self, payload: str) -> None:
        self.payload = payload
        super().__init__(
            f"Cannot initiate session store since unable to parse {payload}"
        )


class NotANumberError(TypeError):
    """Raised when incrementing or decrementing a non-numeric value."""

    def __init__(self, operation: str, key: str, value: object) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Cannot {operation} {key} with value as {value}")


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_empty(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, Mapping)):
        return len(value) == 0
    return False


def _split(path: str) -> list[str]:
    return path.split(_PATH_SEPARATOR)


def _as_index(segment: str) -> int | None:
    return int(segment) if segment.isdigit() else None


def _child(node: object, segment: str) -> object:
    """Return ``node[segment]`` or ``_MISSING``."""
    if isinstance(node, Mapping):
        return node.get(segment, _MISSING)
    if isinstance(node, list):
        index = _as_index(segment)
        if index is not None and index < len(node):
            return node[index]
    return _MISSING


def _plain(value: Any) -> Any:
    """Return ``value`` with every mapping copied into a plain ``dict``."""
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_plain(item) for item in value)
    return value


def _assign(node: MutableMapping[str, Any] | list[Any], segment: str, value: object) -> None:
    if isinstance(node, list):
        index = _as_index(segment)
        if index is not None:
            if index >= len(node):
                node.extend([None] * (index + 1 - len(node)))
            node[index] = value
            return
    node[segment] = value  # type: ignore[index]


class Store:
    """Nested key-value container for one request's session data.

    Keys are dotted paths into nested mappings.  Writes create any missing
    intermediate mappings; reads of missing paths return a default.

    Parameters
    ----------
    payload:
        A payload previously produced by ``serialize``.  When ``None`` or
        empty the store starts empty.

    Raises
    ------
    StoreInitError
        If ``payload`` is not a JSON object.
    MalformedPairError
        If any top-level entry of ``payload`` is not a valid pair.
    """

    def __init__(self, payload: str | None = None) -> None:
        self._values: dict[str, Any] = {}
        if payload:
            self._values = self._parse(payload)

    @staticmethod
    def _parse(payload: str) -> dict[str, Any]:
        try:
            entries = json.loads(payload)
        except ValueError as exc:
            raise StoreInitError(payload) from exc
        if not isinstance(entries, dict):
            raise StoreInitError(payload)
        return {key: unguard(pair) for key, pair in entries.items()}

    # ------------------------------------------------------------------
    # Path-addressed access
    # ------------------------------------------------------------------

    def put(self, key: str, value: Any) -> None:
        """Set ``value`` at ``key``, creating intermediate mappings.

        Raises
        ------
        UnsupportedTypeError
            If ``value`` holds anything that cannot be persisted.
        """
        ensure_storable(value)
        segments = _split(key)
        node: Any = self._values
        for segment, following in zip(segments, segments[1:]):
            child = _child(node, segment)
            # Lists are only walked by numeric segments.
            indexable = isinstance(child, list) and _as_index(following) is not None
            if not (isinstance(child, dict) or indexable):
                child = {}
                _assign(node, segment, child)
            node = child
        _assign(node, segments[-1], _plain(value))

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value at ``key``, or ``default`` when any segment is missing."""
        node: object = self._values
        for segment in _split(key):
            node = _child(node, segment)
            if node is _MISSING:
                return default
        return node

    def increment(self, key: str, steps: int | float = 1) -> None:
        """Add ``steps`` to the number stored at ``key``.

        Raises
        ------
        NotANumberError
            If the value at ``key`` is not a number.
        """
        value = self.get(key)
        if not _is_number(value):
            raise NotANumberError("increment", key, value)
        self.put(key, value + steps)

    def decrement(self, key: str, steps: int | float = 1) -> None:
        """Subtract ``steps`` from the number stored at ``key``.

        Raises
        ------
        NotANumberError
            If the value at ``key`` is not a number.
        """
        value = self.get(key)
        if not _is_number(value):
            raise NotANumberError("decrement", key, value)
        self.put(key, value - steps)

    def forget(self, key: str) -> None:
        """Remove the value at ``key``.  Missing paths are ignored.

        Parents left empty by the removal are kept.
        """
        *parents, leaf = _split(key)
        node: object = self._values
        for segment in parents:
            node = _child(node, segment)
            if node is _MISSING:
                return
        if isinstance(node, dict):
            node.pop(leaf, None)
        elif isinstance(node, list):
            index = _as_index(leaf)
            if index is not None and index < len(node):
                del node[index]

    def pull(self, key: str, default: Any = None) -> Any:
        """Return the value at ``key`` and remove it from the store."""
        value = self.get(key, default)
        self.forget(key)
        return value

    # ------------------------------------------------------------------
    # Whole-store operations
    # ------------------------------------------------------------------

    def all(self) -> dict[str, Any]:
        """Return a deep copy of every value in the store."""
        return copy.deepcopy(self._values)

    def clear(self) -> None:
        """Remove every value from the store."""
        self._values = {}

    def to_json(self) -> dict[str, dict[str, str]]:
        """Return the wire mapping of guarded top-level values.

        Top-level values that are ``None`` or empty (``""``, ``[]``,
        ``{}``) are left out.

        Raises
        ------
        UnsupportedTypeError
            If a value cannot be persisted.
        """
        return {
            key: guard(value).to_wire()
            for key, value in self._values.items()
            if not _is_empty(value)
        }

    def serialize(self) -> str:
        """Return the JSON payload handed to session drivers."""
        return json.dumps(self.to_json(), separators=(",", ":"), ensure_ascii=False)

    @property
    def is_empty(self) -> bool:
        """True when ``to_json`` would produce an empty mapping."""
        return all(_is_empty(value) for value in self._values.values())

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Store(keys={list(self._values)!r})"
