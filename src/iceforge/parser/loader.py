"""YAML loader with byte-span tracking for compiler-style diagnostics."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from iceforge.models.errors import SourceSpan

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters
_MAX_NODE_COUNT = 50_000
_MAX_DEPTH = 20

# Anchor definitions (&name) at line start or after whitespace/sequence
# indicators, matched after comments are stripped. Quoted strings are not
# excluded.
_ANCHOR_RE = re.compile(r"(?:^|[\s\-:])&(\w+)", re.MULTILINE)
_COMMENT_RE = re.compile(r"(?:^|(?<=\s))#.*$", re.MULTILINE)

# Resolved tags of scalars that keep their source text instead of the
# parsed number (`version: 1.10` stays "1.10").
_NUMBER_TAGS = frozenset({"tag:yaml.org,2002:int", "tag:yaml.org,2002:float"})


class YAMLSafetyError(Exception):
    """Raised when YAML input violates safety constraints.

    Distinct from parse errors: these reject anchors/aliases, excessive
    nesting and oversized documents before the manifest is interpreted.
    """


class ByteOffsets:
    """Converts character indices of a document into UTF-8 byte offsets."""

    def __init__(self, content: str) -> None:
        self._content = content
        self._ascii = content.isascii()

    def offset(self, index: int) -> int:
        index = max(0, min(index, len(self._content)))
        if self._ascii:
            return index
        return len(self._content[:index].encode("utf-8"))

    def span(self, start: int, end: int) -> SourceSpan:
        return SourceSpan(start=self.offset(start), end=self.offset(max(start, end)))


@dataclass
class SourceMap:
    """Maps manifest key paths (``subprojects[0].name``) to byte spans."""

    _positions: dict[str, SourceSpan] = field(default_factory=dict)

    def add(self, path: str, span: SourceSpan) -> None:
        self._positions[path] = span

    def get(self, path: str) -> SourceSpan | None:
        return self._positions.get(path)

    def nearest(self, path: str) -> SourceSpan | None:
        """Span of ``path`` or of its closest recorded ancestor."""
        while True:
            span = self._positions.get(path)
            if span is not None or not path:
                return span
            cut = max(path.rfind("."), path.rfind("["))
            path = path[:cut] if cut > 0 else ""

    @property
    def paths(self) -> list[str]:
        return list(self._positions.keys())


class TrackedLoader:
    """YAML loader that records the byte span of every parsed node.

    Values come from ruamel.yaml's round-trip loader; spans come from the
    composed node graph, whose marks delimit each scalar, mapping and
    sequence exactly.
    """

    def __init__(self) -> None:
        self._yaml = YAML()

    # -- safety checks -------------------------------------------------------

    @staticmethod
    def _check_yaml_safety(content: str) -> None:
        """Pre-parse safety checks on raw YAML text."""
        if len(content) > _MAX_DOCUMENT_SIZE:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum size "
                f"({len(content):,} chars > {_MAX_DOCUMENT_SIZE:,} limit)"
            )
        if _ANCHOR_RE.search(_COMMENT_RE.sub("", content)):
            raise YAMLSafetyError("YAML anchors/aliases are not supported in iceforge manifests")

    @staticmethod
    def _check_node_count(data: Any, limit: int = _MAX_NODE_COUNT) -> None:
        count = 0
        stack: list[Any] = [data]
        while stack:
            node = stack.pop()
            count += 1
            if count > limit:
                raise YAMLSafetyError(f"YAML document exceeds maximum node count ({limit:,})")
            if isinstance(node, dict):
                stack.extend(node.values())
            elif isinstance(node, list):
                stack.extend(node)

    # -- public loading API --------------------------------------------------

    def load(self, path: Path) -> tuple[dict[str, Any], SourceMap]:
        """Load a YAML manifest file and return parsed dict + source map."""
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.load_string(content)

    def load_string(self, content: str) -> tuple[dict[str, Any], SourceMap]:
        """Load a YAML manifest from a string."""
        self._check_yaml_safety(content)
        root = self._yaml.compose(content)
        if root is None:
            return {}, SourceMap()
        source_map = SourceMap()
        numbers: dict[str, str] = {}
        self._extract_positions(root, "", source_map, numbers, ByteOffsets(content), depth=0)
        data = self._yaml.load(content)
        self._check_node_count(data)
        return self._to_plain_dict(data, numbers), source_map

    def _extract_positions(
        self,
        node: Node,
        prefix: str,
        source_map: SourceMap,
        numbers: dict[str, str],
        offsets: ByteOffsets,
        depth: int,
    ) -> None:
        """Record the span of every node and the source text of numeric scalars."""
        if depth > _MAX_DEPTH:
            raise YAMLSafetyError(f"YAML document exceeds maximum nesting depth ({_MAX_DEPTH})")
        source_map.add(prefix, offsets.span(node.start_mark.index, node.end_mark.index))
        if isinstance(node, ScalarNode) and node.tag in _NUMBER_TAGS:
            numbers[prefix] = node.value
        elif isinstance(node, MappingNode):
            for key_node, value_node in node.value:
                key_path = f"{prefix}.{key_node.value}" if prefix else str(key_node.value)
                self._extract_positions(
                    value_node, key_path, source_map, numbers, offsets, depth + 1
                )
        elif isinstance(node, SequenceNode):
            for i, item in enumerate(node.value):
                self._extract_positions(
                    item, f"{prefix}[{i}]", source_map, numbers, offsets, depth + 1
                )

    def _to_plain_dict(self, data: Any, numbers: dict[str, str]) -> dict[str, Any]:
        """Convert ruamel.yaml CommentedMap/Seq to plain Python dict/list.

        Numbers are replaced by their source text from ``numbers`` so that
        pydantic sees `1.10`, not the float `1.1`.
        """
        if isinstance(data, dict):
            return {str(k): self._to_plain_value(v, str(k), numbers) for k, v in data.items()}
        return {}

    def _to_plain_value(self, data: Any, path: str, numbers: dict[str, str]) -> Any:
        if isinstance(data, (CommentedMap, dict)):
            return {
                str(k): self._to_plain_value(v, f"{path}.{k}", numbers) for k, v in data.items()
            }
        if isinstance(data, (CommentedSeq, list)):
            return [
                self._to_plain_value(item, f"{path}[{i}]", numbers) for i, item in enumerate(data)
            ]
        # Drop ruamel's scalar subclasses (ScalarFloat, ScalarInt, quoted strings).
        if isinstance(data, str):
            return str(data)
        if isinstance(data, bool):
            return bool(data)
        if isinstance(data, (int, float)) and path in numbers:
            return numbers[path]
        if isinstance(data, int):
            return int(data)
        if isinstance(data, float):
            return float(data)
        return data
