"""Document loader: JSON / JSON5 parsing with safety limits and a value span map."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import json5
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError

from ocifkit.models.errors import SourcePosition

logger = logging.getLogger("ocifkit.parser")

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters
_MAX_DEPTH = 64


class DocumentParseError(Exception):
    """Raised when text is neither valid JSON nor valid JSON5."""


class DocumentSafetyError(DocumentParseError):
    """Raised when input violates the loader's size or nesting limits."""


def escape_pointer_segment(segment: str) -> str:
    """Escape one reference token per RFC 6901."""
    return segment.replace("~", "~0").replace("/", "~1")


def split_pointer(path: str) -> list[str]:
    """Split a JSON pointer into unescaped segments.

    Both ``""`` and ``"/"`` denote the document root and yield ``[]``.
    """
    if path in ("", "/"):
        return []
    parts = path.split("/")
    if parts[0] == "":
        parts = parts[1:]
    return [p.replace("~1", "/").replace("~0", "~") for p in parts]


def join_pointer(segments: list[str | int]) -> str:
    """Build a JSON pointer from path segments (``""`` for the root)."""
    return "".join("/" + escape_pointer_segment(str(s)) for s in segments)


@dataclass
class SourceMap:
    """Maps JSON pointers to the source position of the value they address."""

    _positions: dict[str, SourcePosition] = field(default_factory=dict)

    def add(self, path: str, position: SourcePosition) -> None:
        # First occurrence wins
        self._positions.setdefault(path, position)

    def get(self, path: str) -> SourcePosition | None:
        return self._positions.get(path)

    @property
    def paths(self) -> list[str]:
        return list(self._positions.keys())


class DocumentLoader:
    """Parses OCIF documents from text or files.

    Strict JSON is tried first, then JSON5. A separate pass through
    ruamel.yaml (JSON being flow-style YAML) recovers per-value positions.
    """

    def __init__(
        self,
        max_document_size: int = _MAX_DOCUMENT_SIZE,
        max_depth: int = _MAX_DEPTH,
    ) -> None:
        self.max_document_size = max_document_size
        self.max_depth = max_depth
        self._yaml = YAML()

    # -- safety checks -------------------------------------------------------

    def _check_size(self, content: str) -> None:
        if len(content) > self.max_document_size:
            raise DocumentSafetyError(
                f"Document exceeds maximum size "
                f"({len(content):,} chars > {self.max_document_size:,} limit)"
            )

    def _check_depth(self, data: Any) -> None:
        """Reject documents nested deeper than ``max_depth``."""
        stack: list[tuple[Any, int]] = [(data, 0)]
        while stack:
            node, depth = stack.pop()
            if depth > self.max_depth:
                raise DocumentSafetyError(
                    f"Document exceeds maximum nesting depth ({self.max_depth})"
                )
            if isinstance(node, dict):
                stack.extend((v, depth + 1) for v in node.values())
            elif isinstance(node, list):
                stack.extend((v, depth + 1) for v in node)

    # -- public loading API --------------------------------------------------

    def loads(self, content: str) -> Any:
        """Parse a document from text, accepting JSON or JSON5."""
        self._check_size(content)
        try:
            data = json.loads(content)
        except RecursionError as e:
            raise DocumentSafetyError("Document is nested too deeply to parse") from e
        except ValueError:
            try:
                data = json5.loads(content)
            except RecursionError as e:
                raise DocumentSafetyError("Document is nested too deeply to parse") from e
            except ValueError as e:
                raise DocumentParseError(f"Invalid JSON format: {e}") from e
            logger.debug("Parsed document as JSON5")
        self._check_depth(data)
        return data

    def load(self, path: Path) -> Any:
        """Parse a UTF-8 document file."""
        return self.loads(self.read_text(path))

    @staticmethod
    def read_text(path: Path) -> str:
        with path.open("r", encoding="utf-8") as handle:
            return handle.read()

    def source_map(self, content: str) -> SourceMap:
        """Return value positions keyed by JSON pointer.

        Raises ``DocumentParseError`` when the text cannot be read as
        flow-style YAML (e.g. JSON5 comments or duplicate keys).
        """
        self._check_size(content)
        try:
            data = self._yaml.load(content)
        except (YAMLError, ValueError, TypeError) as e:
            raise DocumentParseError(f"Cannot map source positions: {e}") from e
        source_map = SourceMap()
        if data is not None:
            self._extract_positions(data, "", source_map)
        return source_map

    def _extract_positions(self, data: Any, prefix: str, source_map: SourceMap) -> None:
        """Recursively record value positions from ruamel.yaml nodes."""
        if isinstance(data, CommentedMap):
            for key in data:
                key_path = f"{prefix}/{escape_pointer_segment(str(key))}"
                try:
                    line, col = data.lc.value(key)
                    source_map.add(key_path, SourcePosition(line=line + 1, column=col + 1))
                except (AttributeError, KeyError, TypeError):
                    pass
                self._extract_positions(data[key], key_path, source_map)
        elif isinstance(data, CommentedSeq):
            for i, item in enumerate(data):
                item_path = f"{prefix}/{i}"
                try:
                    line, col = data.lc.item(i)
                    source_map.add(item_path, SourcePosition(line=line + 1, column=col + 1))
                except (AttributeError, KeyError, TypeError):
                    pass
                self._extract_positions(item, item_path, source_map)
