"""Pydantic diagnostic models for confdecode."""

from confdecode.models.errors import Diagnostic, SourceSpan, ValidationResult

__all__ = [
    "Diagnostic",
    "SourceSpan",
    "ValidationResult",
]
