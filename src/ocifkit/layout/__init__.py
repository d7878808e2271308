"""Diagram model building, layout and connector geometry."""

from ocifkit.layout.builder import DiagramBuilder
from ocifkit.layout.geometry import compute_bounds, resolve_relations

__all__ = ["DiagramBuilder", "compute_bounds", "resolve_relations"]
