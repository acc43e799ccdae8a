"""Tests for rendering decoding errors into pydantic diagnostics."""

from __future__ import annotations

import pytest

from confdecode.decode import (
    At,
    DecodePath,
    ExpectedOneOfProperties,
    ExpectedOneOfTypes,
    ExpectedProperty,
    IncorrectValue,
    Property,
)
from confdecode.models.errors import Diagnostic, SourceSpan, ValidationResult
from confdecode.parser.loader import SourceMap, TrackedLoader
from confdecode.value import Integer, String
from tests.conftest import SAMPLE_CONFIG_YAML


def _decode_error(yaml: str, loader: TrackedLoader) -> tuple[At, SourceMap]:
    value, source_map = loader.load_string(yaml, filename="service.yaml")
    root = DecodePath.new(value, "Service configuration")
    with pytest.raises(At) as exc_info:
        root.table_property("server", "Server").table_property("port", "Listen port").as_integer()
    return exc_info.value, source_map


class TestDiagnostic:
    def test_from_at(self, loader: TrackedLoader) -> None:
        at, source_map = _decode_error("server:\n  port: eighty\n", loader)
        diag = Diagnostic.from_at(at, source_map)
        assert diag.code == "EXPECTED_INTEGER"
        assert diag.message == "expected an integer: Listen port"
        assert diag.path == "server.port"
        assert diag.span == SourceSpan(file="service.yaml", line=2, column=3)
        assert diag.suggestions == []

    def test_missing_property_uses_parent_span(self, loader: TrackedLoader) -> None:
        at, source_map = _decode_error("server:\n  host: localhost\n", loader)
        assert at.error == ExpectedProperty(Property("port", "Listen port"))
        diag = Diagnostic.from_at(at, source_map)
        assert diag.path == "server.port"
        assert diag.span is not None
        assert diag.span.line == 1

    def test_root_error_has_no_path(self) -> None:
        diag = Diagnostic.from_at(ExpectedOneOfProperties((Property("a", "A"),)).at(""))
        assert diag.path is None
        assert diag.span is None
        assert diag.suggestions == ["a"]

    def test_incorrect_value_suggestions(self) -> None:
        error = IncorrectValue(None, String("loud"), (String("debug"), Integer(3)))
        diag = Diagnostic.from_at(error.at("log.level"))
        assert diag.code == "INCORRECT_VALUE"
        assert diag.suggestions == ["'debug'", "3"]

    def test_one_of_types_suggestions(self) -> None:
        diag = Diagnostic.from_at(ExpectedOneOfTypes("boolean", ("integer", "string")).at("x"))
        assert diag.suggestions == ["integer", "string"]

    def test_serializes_to_json(self) -> None:
        diag = Diagnostic.from_at(ExpectedProperty(Property("port", "Port")).at("server.port"))
        data = diag.model_dump()
        assert data["code"] == "EXPECTED_PROPERTY"
        assert data["path"] == "server.port"


class TestValidationResult:
    def test_valid_when_no_errors(self) -> None:
        result = ValidationResult.from_errors([])
        assert result.valid
        assert result.errors == []

    def test_collects_errors(self, loader: TrackedLoader) -> None:
        value, source_map = loader.load_string(SAMPLE_CONFIG_YAML)
        root = DecodePath.new(value, "Config")
        errors: list[At] = []
        for upstream in root.table_property("upstreams", "Upstreams").items("Upstream"):
            try:
                upstream.table_property("name", "Name").as_integer()
            except At as e:
                errors.append(e)
        result = ValidationResult.from_errors(errors, source_map)
        assert not result.valid
        assert [e.path for e in result.errors] == ["upstreams.0.name", "upstreams.1.name"]
        assert all(e.span is not None for e in result.errors)
