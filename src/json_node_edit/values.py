"""Tagged-union representation of JSON values.

Every JSON value is one of six frozen dataclasses sharing a ``kind`` tag:

- JsonNull    -> ValueKind.NULL
- JsonBool    -> ValueKind.BOOLEAN
- JsonNumber  -> ValueKind.NUMBER
- JsonString  -> ValueKind.STRING
- JsonArray   -> ValueKind.ARRAY   (ordered tuple of items)
- JsonObject  -> ValueKind.OBJECT  (ordered tuple of (key, value) members)

Values are immutable, so parsed trees can be cached and shared; updates build
new containers along the edited path and reuse everything else.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any, TypeAlias

__all__ = [
    "JsonArray",
    "JsonBool",
    "JsonNull",
    "JsonNumber",
    "JsonObject",
    "JsonString",
    "JsonValue",
    "ValueKind",
    "from_python",
    "to_python",
]


class ValueKind(StrEnum):
    """The six JSON value kinds; values are the lowercased member names."""

    NULL = auto()
    BOOLEAN = auto()
    NUMBER = auto()
    STRING = auto()
    ARRAY = auto()
    OBJECT = auto()


@dataclass(frozen=True, slots=True)
class JsonNull:
    @property
    def kind(self) -> ValueKind:
        return ValueKind.NULL

    @property
    def is_container(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class JsonBool:
    value: bool

    @property
    def kind(self) -> ValueKind:
        return ValueKind.BOOLEAN

    @property
    def is_container(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class JsonNumber:
    value: int | float

    @property
    def kind(self) -> ValueKind:
        return ValueKind.NUMBER

    @property
    def is_container(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class JsonString:
    value: str

    @property
    def kind(self) -> ValueKind:
        return ValueKind.STRING

    @property
    def is_container(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class JsonArray:
    """A JSON array.  ``items`` keeps element order."""

    items: tuple[JsonValue, ...] = ()

    @property
    def kind(self) -> ValueKind:
        return ValueKind.ARRAY

    @property
    def is_container(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self.items)

    def get(self, index: int) -> JsonValue | None:
        """Return the item at ``index``, or None when out of range."""
        if 0 <= index < len(self.items):
            return self.items[index]
        return None

    def with_item(self, index: int, value: JsonValue) -> JsonArray:
        """Return a copy with ``index`` overwritten, or appended when it equals len."""
        if index == len(self.items):
            return JsonArray((*self.items, value))
        items = list(self.items)
        items[index] = value
        return JsonArray(tuple(items))


@dataclass(frozen=True, slots=True)
class JsonObject:
    """A JSON object.  ``members`` keeps insertion order of keys.

    Duplicate keys are collapsed at construction time by ``from_python`` and the
    parser (last occurrence wins, first position kept), matching ``json.loads``.
    """

    members: tuple[tuple[str, JsonValue], ...] = ()

    @property
    def kind(self) -> ValueKind:
        return ValueKind.OBJECT

    @property
    def is_container(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self.members)

    def keys(self) -> list[str]:
        return [key for key, _ in self.members]

    def get(self, key: str) -> JsonValue | None:
        """Return the value stored under ``key``, or None when absent."""
        for member_key, value in self.members:
            if member_key == key:
                return value
        return None

    def with_member(self, key: str, value: JsonValue) -> JsonObject:
        """Return a copy with ``key`` overwritten in place, or appended when new."""
        members = list(self.members)
        for i, (member_key, _) in enumerate(members):
            if member_key == key:
                members[i] = (key, value)
                return JsonObject(tuple(members))
        members.append((key, value))
        return JsonObject(tuple(members))


JsonValue: TypeAlias = (
    JsonNull | JsonBool | JsonNumber | JsonString | JsonArray | JsonObject
)

_JSON_VALUE_TYPES = (JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject)


def from_python(value: Any) -> JsonValue:
    """Convert a plain Python JSON value into its tagged representation.

    Tagged values are returned unchanged.  ``dict`` keys must be strings;
    tuples are accepted as arrays.

    Raises:
        TypeError:  If ``value`` (or anything nested in it) is not a JSON type.
        ValueError: If a float is NaN or infinite.
    """
    if isinstance(value, _JSON_VALUE_TYPES):
        return value

    # bool MUST be checked before int: bool subclasses int in Python
    if isinstance(value, bool):
        return JsonBool(value)

    if value is None:
        return JsonNull()

    if isinstance(value, int):
        return JsonNumber(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            msg = f"JSON numbers must be finite, got {value!r}"
            raise ValueError(msg)
        return JsonNumber(value)

    if isinstance(value, str):
        return JsonString(value)

    if isinstance(value, dict):
        members: dict[str, JsonValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                msg = f"JSON object keys must be str, got {type(key)!r}"
                raise TypeError(msg)
            members[key] = from_python(item)
        return JsonObject(tuple(members.items()))

    if isinstance(value, (list, tuple)):
        return JsonArray(tuple(from_python(item) for item in value))

    raise TypeError(f"Unsupported JSON value type: {type(value)!r}")


def to_python(value: JsonValue) -> Any:
    """Convert a tagged value back into plain ``dict``/``list``/scalar form."""
    match value:
        case JsonNull():
            return None
        case JsonBool(value=b):
            return b
        case JsonNumber(value=n):
            return n
        case JsonString(value=s):
            return s
        case JsonArray(items=items):
            return [to_python(item) for item in items]
        case JsonObject(members=members):
            return {key: to_python(item) for key, item in members}
    raise TypeError(f"Unsupported JSON value type: {type(value)!r}")
