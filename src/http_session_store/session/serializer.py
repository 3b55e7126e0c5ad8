"""Type-preserving serialization of individual session values.

Every top-level session value is stored as a ``{"d": <text>, "t": <tag>}``
pair.  The tag records which of the six supported kinds the value was, so
that the text can be read back into the same kind on the next request.

Functions
---------
- type_tag_of  — classify a runtime value into a ``TypeTag``
- guard        — encode one value into a ``GuardedValue``
- unguard      — decode a ``GuardedValue`` (or its wire mapping) back

Classes
-------
- TypeTag              — the six supported value kinds
- GuardedValue         — an encoded value and its tag
- UnsupportedTypeError — raised when guarding an unsupported value
- MalformedPairError   — raised when unguarding a damaged pair
"""
from __future__ import annotations

import json
import math
import re
from collections.abc import Callable, Mapping
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# "Fri Oct 16 2026 22:00:00 GMT+0000", optionally followed by " (Zone Name)"
_DATE_TEXT_RE = re.compile(
    r"^[A-Za-z]{3} (?P<month>[A-Za-z]{3}) (?P<day>\d{1,2}) (?P<year>\d{4}) "
    r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2}) "
    r"GMT(?P<sign>[+-])(?P<off_h>\d{2})(?P<off_m>\d{2})"
)


class TypeTag(str, Enum):
    """The value kinds a session store can persist."""

    NUMBER = "Number"
    BOOLEAN = "Boolean"
    STRING = "String"
    DATE = "Date"
    OBJECT = "Object"
    ARRAY = "Array"


class UnsupportedTypeError(TypeError):
    """Raised when a value of an unsupported runtime type is stored."""

    def __init__(self, value: object) -> None:
        self.type_name = type(value).__name__
        super().__init__(
            f"Cannot store {self.type_name} data type to session store"
        )


class MalformedPairError(ValueError):
    """Raised when a serialized pair cannot be read back into a value."""

    def __init__(self, pair: object, reason: str = "unrecognized pair type") -> None:
        self.pair = pair
        super().__init__(f"Cannot unguard {reason}: {pair!r}")


class GuardedValue(BaseModel):
    """A value encoded as text together with its ``TypeTag``.

    On the wire the fields are named ``d`` and ``t``; both the short and
    the long names are accepted on input.
    """

    data: str = Field(alias="d")
    type: TypeTag = Field(alias="t")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("data", mode="before")
    @classmethod
    def _numeric_data_as_text(cls, value: Any) -> Any:
        # Payloads written by hand sometimes carry a bare number in "d".
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_wire(self) -> dict[str, str]:
        """Return the ``{"d": ..., "t": ...}`` mapping stored in payloads."""
        return {"d": self.data, "t": self.type.value}


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def type_tag_of(value: object) -> TypeTag:
    """Return the ``TypeTag`` for ``value``.

    Raises
    ------
    UnsupportedTypeError
        If ``value`` is not one of the six supported kinds.
    """
    # bool is an int subclass and must be checked first
    if isinstance(value, bool):
        return TypeTag.BOOLEAN
    if isinstance(value, (int, float)):
        return TypeTag.NUMBER
    if isinstance(value, str):
        return TypeTag.STRING
    if isinstance(value, (datetime, date)):
        return TypeTag.DATE
    if isinstance(value, Mapping):
        return TypeTag.OBJECT
    if isinstance(value, (list, tuple)):
        return TypeTag.ARRAY
    raise UnsupportedTypeError(value)


def ensure_storable(value: object) -> None:
    """Raise ``UnsupportedTypeError`` unless ``value`` can be persisted.

    ``None`` is accepted anywhere; containers are checked recursively.
    """
    if value is None:
        return
    tag = type_tag_of(value)
    if tag is TypeTag.OBJECT:
        for item in value.values():  # type: ignore[attr-defined]
            ensure_storable(item)
    elif tag is TypeTag.ARRAY:
        for item in value:  # type: ignore[attr-defined]
            ensure_storable(item)


# ---------------------------------------------------------------------------
# Writers (value -> text)
# ---------------------------------------------------------------------------


def _json_default(value: object) -> object:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return dict(value)
    raise UnsupportedTypeError(value)


def _write_json(value: object) -> str:
    return json.dumps(
        value, separators=(",", ":"), ensure_ascii=False, default=_json_default
    )


def _write_number(value: int | float) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
    return str(value)


def _write_boolean(value: bool) -> str:
    return "true" if value else "false"


def _write_date(value: date) -> str:
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        value = value.astimezone()
    offset = value.utcoffset() or timedelta(0)
    minutes = int(offset.total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return (
        f"{_WEEKDAYS[value.weekday()]} {_MONTHS[value.month - 1]} "
        f"{value.day:02d} {value.year:04d} "
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d} "
        f"GMT{sign}{hours:02d}{minutes:02d}"
    )


_WRITERS: Mapping[TypeTag, Callable[[Any], str]] = MappingProxyType(
    {
        TypeTag.NUMBER: _write_number,
        TypeTag.BOOLEAN: _write_boolean,
        TypeTag.STRING: lambda value: value,
        TypeTag.DATE: _write_date,
        TypeTag.OBJECT: _write_json,
        TypeTag.ARRAY: _write_json,
    }
)


# ---------------------------------------------------------------------------
# Readers (text -> value)
# ---------------------------------------------------------------------------


def _read_number(text: str) -> int | float:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return math.nan


def _read_boolean(text: str) -> bool:
    return text in ("true", "1")


def _read_date(text: str) -> datetime | None:
    # Unreadable dates degrade to None, like damaged nested payloads.
    match = _DATE_TEXT_RE.match(text)
    if match is not None and match.group("month") in _MONTHS:
        return _read_js_date(match)
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def _read_js_date(match: re.Match[str]) -> datetime | None:
    offset = timedelta(
        hours=int(match.group("off_h")), minutes=int(match.group("off_m"))
    )
    if match.group("sign") == "-":
        offset = -offset
    try:
        return datetime(
            int(match.group("year")),
            _MONTHS.index(match.group("month")) + 1,
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second")),
            tzinfo=timezone(offset),
        )
    except ValueError:
        return None


def _read_json(text: str) -> Any:
    # Damaged nested payloads degrade to None instead of failing the session.
    try:
        return json.loads(text)
    except ValueError:
        return None


_READERS: Mapping[TypeTag, Callable[[str], Any]] = MappingProxyType(
    {
        TypeTag.NUMBER: _read_number,
        TypeTag.BOOLEAN: _read_boolean,
        TypeTag.STRING: lambda text: text,
        TypeTag.DATE: _read_date,
        TypeTag.OBJECT: _read_json,
        TypeTag.ARRAY: _read_json,
    }
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def guard(value: object) -> GuardedValue:
    """Encode ``value`` as text tagged with its original kind.

    Parameters
    ----------
    value:
        A number, boolean, string, date/datetime, mapping, or list/tuple.

    Returns
    -------
    GuardedValue
        The encoded text and its ``TypeTag``.

    Raises
    ------
    UnsupportedTypeError
        If ``value`` (or anything nested inside it) has an unsupported type.
    """
    tag = type_tag_of(value)
    return GuardedValue(data=_WRITERS[tag](value), type=tag)


def unguard(pair: GuardedValue | Mapping[str, Any] | None) -> Any:
    """Decode a pair produced by ``guard`` back into a native value.

    Parameters
    ----------
    pair:
        A ``GuardedValue`` or a ``{"d": ..., "t": ...}`` mapping.

    Returns
    -------
    Any
        The decoded value.  ``Number`` text that is not numeric decodes
        to ``nan``; ``Date``, ``Object`` and ``Array`` text that cannot
        be read decodes to ``None``.

    Raises
    ------
    MalformedPairError
        If the pair is absent, lacks ``d`` or ``t``, or carries an
        unknown tag.
    """
    if isinstance(pair, GuardedValue):
        guarded = pair
    elif isinstance(pair, Mapping):
        try:
            guarded = GuardedValue.model_validate(pair)
        except ValidationError as exc:
            raise MalformedPairError(pair) from exc
    else:
        raise MalformedPairError(pair)

    if not guarded.data:
        raise MalformedPairError(pair, reason="pair without data")
    return _READERS[guarded.type](guarded.data)
