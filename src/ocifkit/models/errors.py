"""Structured validation errors with source position tracking."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class SourcePosition(BaseModel):
    """1-based line/column inside the raw document text."""

    model_config = ConfigDict(frozen=True)

    line: int = 1
    column: int = 1


class Violation(BaseModel):
    """A single failed schema constraint, addressed by a JSON pointer.

    ``path`` is ``""`` (or ``"/"``) for the document root.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    keyword: str
    message: str
    params: dict[str, Any] = {}


class LocatedError(BaseModel):
    """A violation mapped back onto the source text for display."""

    path: str
    message: str
    line: int = 1
    column: int = 1
    details: str = ""
    context: str = ""
    keyword: str | None = None

    @property
    def position(self) -> SourcePosition:
        return SourcePosition(line=self.line, column=self.column)


class ValidationResult(BaseModel):
    """Result of validating a document's text."""

    valid: bool
    errors: list[LocatedError] = []
