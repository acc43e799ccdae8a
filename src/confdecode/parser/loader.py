"""YAML loader producing value trees, with position tracking for rich error reporting."""

from __future__ import annotations

import datetime as dt
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq

from confdecode.models.errors import SourceSpan
from confdecode.settings import Settings
from confdecode.value import (
    Array,
    Boolean,
    Datetime,
    Float,
    Integer,
    String,
    Table,
    Value,
)

logger = logging.getLogger("confdecode.parser")

# Regex to detect YAML anchor definitions (&name).
# Matches & at line start or after whitespace/sequence indicators, followed by
# an anchor name, but NOT inside quoted strings (good-enough heuristic).
_ANCHOR_RE = re.compile(r"(?:^|[\s\-:])&(\w+)", re.MULTILINE)


class YAMLSafetyError(Exception):
    """Raised when YAML input violates safety constraints.

    Distinct from parse errors: these indicate potentially malicious input
    (e.g., billion-laughs anchors, excessive nesting, oversized documents).
    """


class YAMLValueError(Exception):
    """Raised when a parsed YAML node has no value-tree representation (e.g. null)."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


@dataclass
class SourceMap:
    """Maps dotted value paths to their source positions for error reporting."""

    _positions: dict[str, SourceSpan] = field(default_factory=dict)

    def add(self, path: str, span: SourceSpan) -> None:
        self._positions[path] = span

    def get(self, path: str) -> SourceSpan | None:
        return self._positions.get(path)

    def merge(self, other: SourceMap) -> None:
        self._positions.update(other._positions)

    @property
    def paths(self) -> list[str]:
        return list(self._positions.keys())


class TrackedLoader:
    """YAML loader that builds a value tree and tracks source positions.

    Uses ruamel.yaml which preserves line/column info on every parsed node.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or Settings()
        self._yaml = YAML()
        self._yaml.preserve_quotes = True

    # -- safety checks -------------------------------------------------------

    def _check_yaml_safety(self, content: str) -> None:
        """Pre-parse safety checks on raw YAML text.

        Raises ``YAMLSafetyError`` if the content contains anchors/aliases
        or exceeds the maximum document size.
        """
        limit = self._settings.max_document_size
        if len(content) > limit:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum size "
                f"({len(content):,} chars > {limit:,} limit)"
            )
        if _ANCHOR_RE.search(content):
            raise YAMLSafetyError("YAML anchors/aliases are not supported")

    def _check_shape(self, data: Any) -> None:
        """Post-parse check: reject documents with too many nodes or too deep nesting."""
        node_limit = self._settings.max_node_count
        depth_limit = self._settings.max_depth
        count = 0
        stack: list[tuple[Any, int]] = [(data, 0)]
        while stack:
            node, depth = stack.pop()
            count += 1
            if count > node_limit:
                raise YAMLSafetyError(
                    f"YAML document exceeds maximum node count ({node_limit:,})"
                )
            if depth > depth_limit:
                raise YAMLSafetyError(
                    f"YAML document exceeds maximum nesting depth ({depth_limit})"
                )
            if isinstance(node, dict):
                stack.extend((child, depth + 1) for child in node.values())
            elif isinstance(node, list):
                stack.extend((child, depth + 1) for child in node)

    # -- public loading API --------------------------------------------------

    def load(self, path: Path) -> tuple[Value, SourceMap]:
        """Load a YAML file and return its value tree + source position map."""
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.load_string(content, filename=str(path))

    def load_string(self, content: str, filename: str = "<string>") -> tuple[Value, SourceMap]:
        """Load YAML from a string. An empty document is an empty table."""
        self._check_yaml_safety(content)
        data = self._yaml.load(content)
        if data is None:
            return Table(), SourceMap()
        self._check_shape(data)
        source_map = SourceMap()
        self._extract_positions(data, filename, "", source_map)
        value = self._to_value(data, "")
        logger.debug("loaded %s (%d positions)", filename, len(source_map.paths))
        return value, source_map

    def _extract_positions(
        self,
        data: Any,
        filename: str,
        prefix: str,
        source_map: SourceMap,
    ) -> None:
        """Recursively extract source positions from ruamel.yaml nodes."""
        if isinstance(data, CommentedMap):
            for key in data:
                key_path = _join(prefix, str(key))
                try:
                    key_positions = data.lc.key(key)
                    if key_positions:
                        line, col = key_positions
                        source_map.add(
                            key_path,
                            SourceSpan(file=filename, line=line + 1, column=col + 1),
                        )
                except (AttributeError, KeyError, TypeError):
                    # Fall back to the map's own position
                    try:
                        source_map.add(
                            key_path,
                            SourceSpan(file=filename, line=data.lc.line + 1, column=data.lc.col + 1),
                        )
                    except (AttributeError, TypeError):
                        pass
                self._extract_positions(data[key], filename, key_path, source_map)
        elif isinstance(data, CommentedSeq):
            for i, item in enumerate(data):
                item_path = _join(prefix, str(i))
                try:
                    item_pos = data.lc.item(i)
                    if item_pos:
                        line, col = item_pos
                        source_map.add(
                            item_path,
                            SourceSpan(file=filename, line=line + 1, column=col + 1),
                        )
                except (AttributeError, KeyError, TypeError):
                    pass
                self._extract_positions(item, filename, item_path, source_map)

    def _to_value(self, data: Any, path: str) -> Value:
        """Convert ruamel.yaml nodes to the value tree, keeping paths for errors."""
        if isinstance(data, dict):
            return Table({str(k): self._to_value(v, _join(path, str(k))) for k, v in data.items()})
        if isinstance(data, list):
            return Array(tuple(self._to_value(item, _join(path, str(i))) for i, item in enumerate(data)))
        if data is None:
            raise YAMLValueError("null values are not supported", path)
        if isinstance(data, bool):
            return Boolean(data)
        if isinstance(data, int):
            try:
                return Integer(int(data))
            except ValueError as e:
                raise YAMLValueError(str(e), path) from e
        if isinstance(data, float):
            return Float(float(data))
        if isinstance(data, str):
            return String(str(data))
        if isinstance(data, (dt.datetime, dt.date)):
            return Datetime(data.isoformat())
        raise YAMLValueError(f"unsupported YAML value of type {type(data).__name__}", path)


def _join(prefix: str, component: str) -> str:
    return f"{prefix}.{component}" if prefix else component
