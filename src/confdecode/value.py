"""Immutable configuration value tree. Every decoded config is one of these variants."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, ClassVar

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class ValueType(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    ARRAY = "array"
    TABLE = "table"


class _ValueBase:
    """Type introspection and typed projections shared by every variant.

    Projections are total: each returns the payload when the variant matches
    and ``None`` otherwise.
    """

    kind: ClassVar[ValueType]

    def same_type(self, other: Value) -> bool:
        """Tests whether this and another value have the same type."""
        return self.kind is other.kind

    def type_str(self) -> str:
        """Returns a human-readable representation of the type of this value."""
        return self.kind.value

    def as_str(self) -> str | None:
        return None

    def as_integer(self) -> int | None:
        return None

    def as_float(self) -> float | None:
        return None

    def as_bool(self) -> bool | None:
        return None

    def as_datetime(self) -> str | None:
        """Extracts the datetime text if this is a datetime.

        The text is kept as given, e.g. ``1979-05-27T07:32:00Z``; it is never parsed.
        """
        return None

    def as_slice(self) -> tuple[Value, ...] | None:
        return None

    def as_table(self) -> Mapping[str, Value] | None:
        return None


@dataclass(frozen=True)
class String(_ValueBase):
    kind: ClassVar[ValueType] = ValueType.STRING

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"String payload must be str, got {type(self.value).__name__}")

    def as_str(self) -> str | None:
        return self.value


@dataclass(frozen=True)
class Integer(_ValueBase):
    """A signed 64-bit integer."""

    kind: ClassVar[ValueType] = ValueType.INTEGER

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Integer payload must be int, got {type(self.value).__name__}")
        if not _INT64_MIN <= self.value <= _INT64_MAX:
            raise ValueError(f"Integer {self.value} does not fit in 64 bits")

    def as_integer(self) -> int | None:
        return self.value


@dataclass(frozen=True)
class Float(_ValueBase):
    kind: ClassVar[ValueType] = ValueType.FLOAT

    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"Float payload must be int or float, got {type(self.value).__name__}")
        object.__setattr__(self, "value", float(self.value))

    def as_float(self) -> float | None:
        return self.value


@dataclass(frozen=True)
class Boolean(_ValueBase):
    kind: ClassVar[ValueType] = ValueType.BOOLEAN

    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError(f"Boolean payload must be bool, got {type(self.value).__name__}")

    def as_bool(self) -> bool | None:
        return self.value


@dataclass(frozen=True)
class Datetime(_ValueBase):
    """An ISO 8601 datetime stored as opaque text."""

    kind: ClassVar[ValueType] = ValueType.DATETIME

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"Datetime payload must be str, got {type(self.value).__name__}")

    def as_datetime(self) -> str | None:
        return self.value


@dataclass(frozen=True)
class Array(_ValueBase):
    """Ordered, possibly heterogeneous sequence of values."""

    kind: ClassVar[ValueType] = ValueType.ARRAY

    items: tuple[Value, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def as_slice(self) -> tuple[Value, ...] | None:
        return self.items


@dataclass(frozen=True)
class Table(_ValueBase):
    """String-keyed mapping; iteration follows key sort order."""

    kind: ClassVar[ValueType] = ValueType.TABLE

    entries: Mapping[str, Value] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for key in self.entries:
            if not isinstance(key, str):
                raise TypeError(f"Table keys must be str, got {type(key).__name__}")
        object.__setattr__(self, "entries", MappingProxyType(dict(sorted(self.entries.items()))))

    def __hash__(self) -> int:
        return hash(tuple(self.entries.items()))

    def as_table(self) -> Mapping[str, Value] | None:
        return self.entries


# The closed set of value variants.
Value = String | Integer | Float | Boolean | Datetime | Array | Table

_VARIANTS = (String, Integer, Float, Boolean, Datetime, Array, Table)


def from_python(obj: Any) -> Value:
    """Convert plain Python data (as returned by JSON/YAML/TOML loaders) to a value tree.

    ``bool`` is checked before ``int``; dates and times become ``Datetime``
    holding their ISO form. ``None`` and unknown types raise ``TypeError``.
    """
    if isinstance(obj, _VARIANTS):
        return obj
    if isinstance(obj, bool):
        return Boolean(obj)
    if isinstance(obj, int):
        return Integer(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, (dt.datetime, dt.date, dt.time)):
        return Datetime(obj.isoformat())
    if isinstance(obj, Mapping):
        return Table({_table_key(k): from_python(v) for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return Array(tuple(from_python(item) for item in obj))
    raise TypeError(f"Cannot represent {type(obj).__name__} as a config value")


def to_python(value: Value) -> Any:
    """Project a value tree back to plain Python data. Datetimes stay text."""
    match value:
        case Array(items=items):
            return [to_python(item) for item in items]
        case Table(entries=entries):
            return {k: to_python(v) for k, v in entries.items()}
        case _:
            return value.value


def _table_key(key: Any) -> str:
    if not isinstance(key, str):
        raise TypeError(f"Table keys must be str, got {type(key).__name__}")
    return key
