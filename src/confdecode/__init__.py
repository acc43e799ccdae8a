"""Decode dynamically-typed configuration trees with path-annotated errors."""

from confdecode.decode import (
    At,
    DecodePath,
    Error,
    ExpectedBool,
    ExpectedDatetime,
    ExpectedFloat,
    ExpectedInteger,
    ExpectedOneOfProperties,
    ExpectedOneOfTypes,
    ExpectedProperties,
    ExpectedProperty,
    ExpectedSlice,
    ExpectedString,
    ExpectedTable,
    IncorrectValue,
    Property,
)
from confdecode.value import (
    Array,
    Boolean,
    Datetime,
    Float,
    Integer,
    String,
    Table,
    Value,
    ValueType,
    from_python,
    to_python,
)

__version__ = "0.1.0"

__all__ = [
    "Array",
    "At",
    "Boolean",
    "Datetime",
    "DecodePath",
    "Error",
    "ExpectedBool",
    "ExpectedDatetime",
    "ExpectedFloat",
    "ExpectedInteger",
    "ExpectedOneOfProperties",
    "ExpectedOneOfTypes",
    "ExpectedProperties",
    "ExpectedProperty",
    "ExpectedSlice",
    "ExpectedString",
    "ExpectedTable",
    "Float",
    "IncorrectValue",
    "Integer",
    "Property",
    "String",
    "Table",
    "Value",
    "ValueType",
    "from_python",
    "to_python",
]
