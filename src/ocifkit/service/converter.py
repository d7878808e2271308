"""Orchestrates conversion: text → validation → diagram model → layout → rendered artifact."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ocifkit.layout.builder import DiagramBuilder
from ocifkit.layout.geometry import compute_bounds, resolve_relations
from ocifkit.models.diagram import Bounds, DiagramModel, DiagramRelation
from ocifkit.models.errors import ValidationResult
from ocifkit.parser.loader import DocumentParseError
from ocifkit.parser.validator import DocumentValidator, parse_error
from ocifkit.render.registry import RendererRegistry

logger = logging.getLogger("ocifkit.service")


class InvalidDocumentError(Exception):
    """Raised when a document fails validation and cannot be converted."""

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        super().__init__(f"Document is invalid ({len(result.errors)} error(s))")


@dataclass
class ConversionResult:
    """The rendered artifact and what went into it."""

    content: str
    format: str
    media_type: str
    file_extension: str
    model: DiagramModel
    relations: list[DiagramRelation] = field(default_factory=list)
    bounds: Bounds | None = None

    @property
    def dropped_relations(self) -> int:
        """Relations omitted because an endpoint did not resolve to a node."""
        return len(self.model.relations) - len(self.relations)


class DocumentConverter:
    """Validates and converts OCIF documents into the registered output formats."""

    def __init__(self, validator: DocumentValidator | None = None) -> None:
        self.validator = validator or DocumentValidator()
        self._builder = DiagramBuilder()

    def build_model(self, document: dict[str, Any]) -> DiagramModel:
        """Build the diagram model for an already-validated document."""
        return self._builder.build(document)

    def render_document(
        self, document: dict[str, Any], fmt: str, **options: Any
    ) -> ConversionResult:
        """Lay out and render an already-validated document."""
        renderer = RendererRegistry.get(fmt, **options)
        model = self.build_model(document)
        relations = resolve_relations(model.relations, model.nodes)
        bounds = compute_bounds(model.nodes)
        result = ConversionResult(
            content=renderer.render(model.nodes, relations, bounds),
            format=renderer.name,
            media_type=renderer.media_type,
            file_extension=renderer.file_extension,
            model=model,
            relations=relations,
            bounds=bounds,
        )
        if result.dropped_relations:
            logger.debug("Dropped %d relation(s) with unresolved endpoints", result.dropped_relations)
        return result

    def convert(self, text: str, fmt: str = "svg", **options: Any) -> ConversionResult:
        """Validate *text* and render it; raises ``InvalidDocumentError`` if invalid."""
        # Resolve the renderer first so an unknown format fails before parsing
        RendererRegistry.get(fmt, **options)
        try:
            document = self.validator.parse(text)
        except DocumentParseError as e:
            raise InvalidDocumentError(
                ValidationResult(valid=False, errors=[parse_error(e)])
            ) from e
        result = self.validator.validate_document(document, text)
        if not result.valid:
            raise InvalidDocumentError(result)
        return self.render_document(document, fmt, **options)
