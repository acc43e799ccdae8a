"""Structured diagnostics built from decoding errors, with YAML source positions."""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel

from confdecode.decode import (
    At,
    ExpectedOneOfProperties,
    ExpectedOneOfTypes,
    ExpectedProperties,
    IncorrectValue,
    render_value,
)


class SourceSpan(BaseModel):
    """Points to exact location in YAML source for error reporting."""

    file: str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None


class SpanLookup(Protocol):
    def get(self, path: str) -> SourceSpan | None: ...


class Diagnostic(BaseModel):
    """A structured error with optional source position and suggestions."""

    code: str
    message: str
    path: str | None = None
    span: SourceSpan | None = None
    suggestions: list[str] = []

    @classmethod
    def from_at(cls, at: At, source_map: SpanLookup | None = None) -> Diagnostic:
        """Render a path-tagged decoding error.

        The span is taken from the closest recorded ancestor of the error path,
        since a missing property has no position of its own.
        """
        return cls(
            code=at.error.code,
            message=at.error.message(),
            path=at.path or None,
            span=_nearest_span(at.path, source_map) if source_map else None,
            suggestions=_suggestions(at),
        )


class ValidationResult(BaseModel):
    """Result of decoding a configuration tree."""

    valid: bool
    errors: list[Diagnostic] = []
    warnings: list[Diagnostic] = []

    @classmethod
    def from_errors(
        cls, errors: list[At], source_map: SpanLookup | None = None
    ) -> ValidationResult:
        return cls(
            valid=not errors,
            errors=[Diagnostic.from_at(e, source_map) for e in errors],
        )


def _nearest_span(path: str, source_map: SpanLookup) -> SourceSpan | None:
    while path:
        span = source_map.get(path)
        if span is not None:
            return span
        path = path.rpartition(".")[0]
    return None


def _suggestions(at: At) -> list[str]:
    match at.error:
        case IncorrectValue(possible_list=possible):
            return [render_value(v) for v in possible]
        case ExpectedOneOfTypes(possible_list=possible):
            return list(possible)
        case ExpectedProperties(properties=props) | ExpectedOneOfProperties(properties=props):
            return [p.name for p in props]
        case _:
            return []
