"""Pydantic domain models for ocifkit."""

from ocifkit.models.diagram import (
    Bounds,
    DiagramModel,
    DiagramNode,
    DiagramRelation,
    NodeKind,
    NodeStyle,
    Point,
    RawRelation,
)
from ocifkit.models.errors import LocatedError, SourcePosition, ValidationResult, Violation

__all__ = [
    "Bounds",
    "DiagramModel",
    "DiagramNode",
    "DiagramRelation",
    "LocatedError",
    "NodeKind",
    "NodeStyle",
    "Point",
    "RawRelation",
    "SourcePosition",
    "ValidationResult",
    "Violation",
]
