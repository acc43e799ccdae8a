"""Decoding a value tree at a specific path, with path-tagged errors.

At this level:

- we don't know what kind of configuration it is;
- we don't know where it comes from (YAML, JSON, TOML or built by hand);
- we don't assume a human will read the result.

``DecodePath`` is an immutable cursor: every traversal returns a new cursor with
the path extended and the description replaced by the child's. Failures raise
``At``, which always carries the dotted path where the problem was found.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import cast

from confdecode.value import Boolean, Datetime, Float, Integer, String, Value, ValueType

logger = logging.getLogger("confdecode.decode")


@dataclass(frozen=True)
class Property:
    """A named, described table field referenced by an error."""

    name: str
    desc: str


# ---------------------------------------------------------------------------
# Error variants
# ---------------------------------------------------------------------------


class _ErrorBase:
    code: str

    def at(self, path: str) -> At:
        return At(cast("Error", self), path)

    def message(self) -> str: ...


@dataclass(frozen=True)
class ExpectedTable(_ErrorBase):
    code = "EXPECTED_TABLE"

    desc: str

    def message(self) -> str:
        return f"expected a table: {self.desc}"


@dataclass(frozen=True)
class ExpectedString(_ErrorBase):
    code = "EXPECTED_STRING"

    desc: str

    def message(self) -> str:
        return f"expected a string: {self.desc}"


@dataclass(frozen=True)
class ExpectedInteger(_ErrorBase):
    code = "EXPECTED_INTEGER"

    desc: str

    def message(self) -> str:
        return f"expected an integer: {self.desc}"


@dataclass(frozen=True)
class ExpectedFloat(_ErrorBase):
    code = "EXPECTED_FLOAT"

    desc: str

    def message(self) -> str:
        return f"expected a float: {self.desc}"


@dataclass(frozen=True)
class ExpectedBool(_ErrorBase):
    code = "EXPECTED_BOOL"

    desc: str

    def message(self) -> str:
        return f"expected a boolean: {self.desc}"


@dataclass(frozen=True)
class ExpectedDatetime(_ErrorBase):
    code = "EXPECTED_DATETIME"

    desc: str

    def message(self) -> str:
        return f"expected a datetime: {self.desc}"


@dataclass(frozen=True)
class ExpectedSlice(_ErrorBase):
    code = "EXPECTED_SLICE"

    desc: str

    def message(self) -> str:
        return f"expected an array: {self.desc}"


@dataclass(frozen=True)
class ExpectedOneOfTypes(_ErrorBase):
    """The value's type is none of the accepted representations."""

    code = "EXPECTED_ONE_OF_TYPES"

    found_type: str
    possible_list: tuple[str, ...]

    def message(self) -> str:
        return f"found {self.found_type}, expected one of: {', '.join(self.possible_list)}"


@dataclass(frozen=True)
class ExpectedProperty(_ErrorBase):
    code = "EXPECTED_PROPERTY"

    property: Property

    def message(self) -> str:
        return f"missing property '{self.property.name}': {self.property.desc}"


@dataclass(frozen=True)
class ExpectedProperties(_ErrorBase):
    """All of the listed properties were expected."""

    code = "EXPECTED_PROPERTIES"

    properties: tuple[Property, ...]

    def message(self) -> str:
        names = ", ".join(f"'{p.name}'" for p in self.properties)
        return f"missing properties: {names}"


@dataclass(frozen=True)
class ExpectedOneOfProperties(_ErrorBase):
    """At least one of the listed properties was expected."""

    code = "EXPECTED_ONE_OF_PROPERTIES"

    properties: tuple[Property, ...]

    def message(self) -> str:
        names = ", ".join(f"'{p.name}'" for p in self.properties)
        return f"expected at least one of: {names}"


@dataclass(frozen=True)
class IncorrectValue(_ErrorBase):
    """Value is present and well-typed but not one of the acceptable values."""

    code = "INCORRECT_VALUE"

    explanation: str | None
    value: Value
    possible_list: tuple[Value, ...] = ()

    def message(self) -> str:
        text = f"incorrect value {render_value(self.value)}"
        if self.explanation:
            text += f": {self.explanation}"
        if self.possible_list:
            text += f" (possible values: {', '.join(render_value(v) for v in self.possible_list)})"
        return text


Error = (
    ExpectedTable
    | ExpectedString
    | ExpectedInteger
    | ExpectedFloat
    | ExpectedBool
    | ExpectedDatetime
    | ExpectedSlice
    | ExpectedOneOfTypes
    | ExpectedProperty
    | ExpectedProperties
    | ExpectedOneOfProperties
    | IncorrectValue
)


class At(Exception):
    """An ``Error`` paired with the dotted path where it occurred."""

    def __init__(self, error: Error, path: str) -> None:
        super().__init__(error, path)
        self.error = error
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.error.message()}"
        return self.error.message()

    def __repr__(self) -> str:
        return f"At(error={self.error!r}, path={self.path!r})"


def render_value(value: Value) -> str:
    """Short text form of a value for messages and suggestions."""
    match value:
        case String(value=text) | Datetime(value=text):
            return repr(text)
        case Boolean(value=flag):
            return "true" if flag else "false"
        case Integer(value=number) | Float(value=number):
            return str(number)
        case _:
            return f"<{value.type_str()}>"


def path_as_string(components: Iterable[str]) -> str:
    """Join path components with ``.``; components are not escaped."""
    return ".".join(components)


# ---------------------------------------------------------------------------
# Cursor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DecodePath:
    """Encapsulates decoding a value at a specific path.

    Besides the value and its path, the cursor carries a description of what the
    value means; it is used in errors. Methods like ``table_property`` drill down
    into the value and record the documentation at the same time, so when an
    error occurs it says exactly what was expected and where.
    """

    components: tuple[str, ...]
    value: Value
    description: str

    @classmethod
    def new(cls, value: Value, description: str) -> DecodePath:
        """Construct the root cursor with the given description."""
        return cls(components=(), value=value, description=description)

    @classmethod
    def new_at(cls, value: Value, path: Iterable[str], description: str) -> DecodePath:
        """Construct a cursor at the given path."""
        return cls(components=tuple(path), value=value, description=description)

    def clone_with(self, value: Value) -> DecodePath:
        """Same path and description, different value."""
        return DecodePath(components=self.components, value=value, description=self.description)

    def __str__(self) -> str:
        return path_as_string(self.components)

    # -- traversal -----------------------------------------------------------

    def table_property(self, property_name: str, property_desc: str) -> DecodePath:
        """Descend into a property of this table.

        Raises ``ExpectedTable`` at this path if the value is not a table, and
        ``ExpectedProperty`` at the property's path if the key is missing.
        """
        table = self.as_table()
        child = table.get(property_name)
        if child is None:
            raise self._fail(
                ExpectedProperty(Property(property_name, property_desc)),
                path_as_string((*self.components, property_name)),
            )
        return self.join(child, property_name, property_desc)

    def join(self, value: Value, property_name: str, property_desc: str) -> DecodePath:
        """Descend one component using ``value`` as if it were the child."""
        return DecodePath(
            components=(*self.components, property_name),
            value=value,
            description=property_desc,
        )

    def optional_property(self, property_name: str, property_desc: str) -> DecodePath | None:
        """Like ``table_property``, but a missing key yields ``None``."""
        child = self.as_table().get(property_name)
        if child is None:
            return None
        return self.join(child, property_name, property_desc)

    def property_or(self, property_name: str, property_desc: str, default: Value) -> DecodePath:
        """Like ``table_property``, but a missing key yields a cursor over ``default``."""
        child = self.as_table().get(property_name)
        return self.join(default if child is None else child, property_name, property_desc)

    def items(self, item_desc: str) -> list[DecodePath]:
        """One cursor per array element, keyed by its index."""
        return [self.join(item, str(i), item_desc) for i, item in enumerate(self.as_slice())]

    def entries(self, entry_desc: str) -> list[tuple[str, DecodePath]]:
        """One cursor per table entry, in key order."""
        return [(key, self.join(child, key, entry_desc)) for key, child in self.as_table().items()]

    def require_properties(self, properties: Sequence[Property]) -> list[DecodePath]:
        table = self.as_table()
        missing = tuple(p for p in properties if p.name not in table)
        if missing:
            raise self._fail(ExpectedProperties(missing), str(self))
        return [self.join(table[p.name], p.name, p.desc) for p in properties]

    def one_of_properties(self, properties: Sequence[Property]) -> list[DecodePath]:
        """Cursors for the listed properties that are present; at least one must be."""
        table = self.as_table()
        present = [self.join(table[p.name], p.name, p.desc) for p in properties if p.name in table]
        if not present:
            raise self._fail(ExpectedOneOfProperties(tuple(properties)), str(self))
        return present

    # -- typed extraction ----------------------------------------------------

    def as_str(self) -> str:
        result = self.value.as_str()
        if result is None:
            raise self._fail(ExpectedString(self.description), str(self))
        return result

    def as_integer(self) -> int:
        result = self.value.as_integer()
        if result is None:
            raise self._fail(ExpectedInteger(self.description), str(self))
        return result

    def as_float(self) -> float:
        result = self.value.as_float()
        if result is None:
            raise self._fail(ExpectedFloat(self.description), str(self))
        return result

    def as_bool(self) -> bool:
        result = self.value.as_bool()
        if result is None:
            raise self._fail(ExpectedBool(self.description), str(self))
        return result

    def as_datetime(self) -> str:
        result = self.value.as_datetime()
        if result is None:
            raise self._fail(ExpectedDatetime(self.description), str(self))
        return result

    def as_slice(self) -> tuple[Value, ...]:
        result = self.value.as_slice()
        if result is None:
            raise self._fail(ExpectedSlice(self.description), str(self))
        return result

    def as_table(self) -> Mapping[str, Value]:
        result = self.value.as_table()
        if result is None:
            raise self._fail(ExpectedTable(self.description), str(self))
        return result

    # -- value checks --------------------------------------------------------

    def expect_type(self, *kinds: ValueType) -> Value:
        """Require the value to be one of ``kinds``."""
        if self.value.kind not in kinds:
            raise self._fail(
                ExpectedOneOfTypes(self.value.type_str(), tuple(k.value for k in kinds)),
                str(self),
            )
        return self.value

    def one_of(self, possible: Sequence[Value], explanation: str | None = None) -> Value:
        """Require the value to equal one of ``possible``."""
        if self.value not in possible:
            raise self._fail(IncorrectValue(explanation, self.value, tuple(possible)), str(self))
        return self.value

    def _fail(self, error: Error, path: str) -> At:
        logger.debug("decode failed at %r: %s", path, error.code)
        return error.at(path)
