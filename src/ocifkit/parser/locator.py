"""Map JSON pointers back to line/column positions in the raw document text.

The schema validator only reports abstract paths. Two strategies recover a
position for them:

* :func:`locate` re-tokenizes the text in a single left-to-right pass. It is a
  best-effort heuristic, not a JSON parser, and also copes with the common
  JSON5 extensions (comments, single quotes, unquoted keys).
* :class:`SpanLocator` looks pointers up in a :class:`SourceMap` built by the
  loader, and falls back to the scan when the map has no entry.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from ocifkit.models.errors import SourcePosition
from ocifkit.parser.loader import DocumentLoader, DocumentParseError, SourceMap, split_pointer

logger = logging.getLogger("ocifkit.parser")

_IDENT_RE = re.compile(r"[A-Za-z_$][\w$]*")
_QUOTES = "\"'"


@dataclass
class _Frame:
    kind: str  # "{" or "["
    segment: str | None = None
    index: int = 0
    expect_key: bool = False
    awaiting_value: bool = False


class _PathScanner:
    """Scans text until the value addressed by ``target`` starts."""

    def __init__(self, target: list[str]) -> None:
        self.target = target
        self.stack: list[_Frame] = []
        self.root_pending = True
        self.quote: str | None = None
        self.escape = False
        self.key_buffer: list[str] | None = None
        self.in_block_comment = False

    def _current_path(self) -> list[str | None]:
        return [frame.segment for frame in self.stack]

    def _awaiting_value(self) -> bool:
        if not self.stack:
            return self.root_pending
        return self.stack[-1].awaiting_value

    def _push_key(self, key: str) -> None:
        frame = self.stack[-1]
        frame.segment = key
        frame.expect_key = False

    def _open(self, ch: str) -> None:
        if ch == "{":
            self.stack.append(_Frame("{", expect_key=True))
        else:
            self.stack.append(_Frame("[", segment="0", awaiting_value=True))

    def scan(self, text: str) -> SourcePosition | None:
        for line_no, line in enumerate(text.split("\n"), start=1):
            found = self._scan_line(line)
            if found is not None:
                return SourcePosition(line=line_no, column=found + 1)
        return None

    def _scan_line(self, line: str) -> int | None:
        i = 0
        n = len(line)
        while i < n:
            ch = line[i]

            if self.in_block_comment:
                if line.startswith("*/", i):
                    self.in_block_comment = False
                    i += 2
                else:
                    i += 1
                continue

            if self.quote is not None:
                if self.escape:
                    self.escape = False
                    if self.key_buffer is not None:
                        self.key_buffer.append(ch)
                elif ch == "\\":
                    self.escape = True
                elif ch == self.quote:
                    self.quote = None
                    if self.key_buffer is not None:
                        self._push_key("".join(self.key_buffer))
                        self.key_buffer = None
                elif self.key_buffer is not None:
                    self.key_buffer.append(ch)
                i += 1
                continue

            if ch in " \t\r\ufeff":
                i += 1
                continue
            if line.startswith("//", i):
                return None
            if line.startswith("/*", i):
                self.in_block_comment = True
                i += 2
                continue

            frame = self.stack[-1] if self.stack else None

            if frame is not None and frame.kind == "{" and frame.expect_key:
                if ch in _QUOTES:
                    self.quote = ch
                    self.key_buffer = []
                    i += 1
                    continue
                if ch == "}":
                    self.stack.pop()
                    i += 1
                    continue
                match = _IDENT_RE.match(line, i)
                if match:
                    self._push_key(match.group())
                    i = match.end()
                    continue
                i += 1
                continue

            if ch == ":" and frame is not None and frame.kind == "{":
                frame.awaiting_value = True
                i += 1
                continue

            if self._awaiting_value() and ch not in ",]}":
                if frame is None:
                    self.root_pending = False
                else:
                    frame.awaiting_value = False
                if self._current_path() == self.target:
                    return i + 1 if ch in _QUOTES else i
                if ch in "{[":
                    self._open(ch)
                elif ch in _QUOTES:
                    self.quote = ch
                i += 1
                continue

            if ch in "}]":
                if self.stack:
                    self.stack.pop()
            elif ch == "," and frame is not None:
                if frame.kind == "{":
                    frame.segment = None
                    frame.expect_key = True
                    frame.awaiting_value = False
                else:
                    frame.index += 1
                    frame.segment = str(frame.index)
                    frame.awaiting_value = True
            elif ch in _QUOTES:
                # Stray string outside a value slot
                self.quote = ch
            i += 1
        return None


def find_position(text: str, path: str) -> SourcePosition | None:
    """Return the 1-based position of the value addressed by ``path``, or None.

    The document root sits at ``(1, 1)``. Empty text and paths that never
    match give None. With duplicate keys the first match in scan order wins.
    """
    target = split_pointer(path)
    if not target:
        return SourcePosition()
    if not text.strip():
        return None
    return _PathScanner(target).scan(text)


def locate(text: str, path: str) -> SourcePosition:
    """Like :func:`find_position`, but a miss degrades to ``(1, 1)``."""
    return find_position(text, path) or SourcePosition()


class Locator(Protocol):
    def find(self, path: str) -> SourcePosition | None: ...

    def locate(self, path: str) -> SourcePosition: ...


class ScanLocator:
    """Locator bound to one document text, using the heuristic scan."""

    def __init__(self, text: str) -> None:
        self.text = text

    def find(self, path: str) -> SourcePosition | None:
        return find_position(self.text, path)

    def locate(self, path: str) -> SourcePosition:
        return self.find(path) or SourcePosition()


class SpanLocator:
    """Locator backed by the loader's source map, falling back to the scan."""

    def __init__(self, text: str, loader: DocumentLoader | None = None) -> None:
        self.text = text
        self._source_map: SourceMap | None
        try:
            self._source_map = (loader or DocumentLoader()).source_map(text)
        except DocumentParseError as e:
            logger.debug("Span map unavailable, using scan locator: %s", e)
            self._source_map = None

    def find(self, path: str) -> SourcePosition | None:
        if not split_pointer(path):
            return SourcePosition()
        if self._source_map is not None:
            position = self._source_map.get(path)
            if position is not None:
                return position
        return find_position(self.text, path)

    def locate(self, path: str) -> SourcePosition:
        return self.find(path) or SourcePosition()


_LOCATORS = {
    "scan": ScanLocator,
    "span": SpanLocator,
}


def make_locator(strategy: str, text: str) -> Locator:
    """Create the named locator strategy (``"scan"`` or ``"span"``) for *text*."""
    try:
        factory = _LOCATORS[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown locator '{strategy}'. Available: {', '.join(sorted(_LOCATORS))}"
        ) from None
    return factory(text)
