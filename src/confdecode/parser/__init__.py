"""YAML loading into value trees with line fidelity."""

from confdecode.parser.loader import SourceMap, TrackedLoader, YAMLSafetyError, YAMLValueError

__all__ = [
    "SourceMap",
    "TrackedLoader",
    "YAMLSafetyError",
    "YAMLValueError",
]
