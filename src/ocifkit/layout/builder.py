"""Diagram model builder: validated OCIF document → normalized node/relation graph."""

from __future__ import annotations

import logging
import math
from typing import Any

from ocifkit.models.diagram import DiagramModel, DiagramNode, NodeKind, NodeStyle, RawRelation

logger = logging.getLogger("ocifkit.layout")

DEFAULT_WIDTH = 120.0
DEFAULT_HEIGHT = 60.0
DEFAULT_TEXT = "Node"

# Grid slots for nodes without an explicit position
GRID_PADDING = 50.0
GRID_SPACING = 100.0
GRID_COLUMNS = 3

OVAL_TYPES = frozenset({"@ocif/node/oval", "@ocwg/node/oval"})
ARROW_TYPES = frozenset({"@ocif/node/arrow", "@ocwg/node/arrow"})
TEXT_PLAIN = "text/plain"


def _is_number(value: Any) -> bool:
    """Finite int or float. JSON5 admits NaN and Infinity; those count as absent."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _component(value: Any, index: int) -> float | None:
    if isinstance(value, (list, tuple)) and len(value) > index and _is_number(value[index]):
        return float(value[index])
    return None


def _pair(value: Any) -> tuple[float, float] | None:
    """Read the first two numeric entries of a vector array."""
    x, y = _component(value, 0), _component(value, 1)
    if x is None or y is None:
        return None
    return x, y


def grid_position(index: int, width: float, height: float) -> tuple[float, float]:
    """Deterministic fallback slot for the *index*-th node entry."""
    col = index % GRID_COLUMNS
    row = index // GRID_COLUMNS
    return (
        GRID_PADDING + col * (width + GRID_SPACING),
        GRID_PADDING + row * (height + GRID_SPACING),
    )


def iter_node_entries(document: dict[str, Any]) -> list[tuple[str, dict[str, Any]]]:
    """Return ``(id, entry)`` pairs in source order.

    ``nodes`` may be a list of node objects or a mapping keyed by id.
    """
    raw = document.get("nodes")
    if isinstance(raw, dict):
        items = [(str(k), v) for k, v in raw.items()]
    elif isinstance(raw, list):
        items = [(str(v.get("id", i)) if isinstance(v, dict) else str(i), v) for i, v in enumerate(raw)]
    else:
        return []
    return [
        (str(entry.get("id", key)), entry) for key, entry in items if isinstance(entry, dict)
    ]


def _first_data(entry: dict[str, Any]) -> dict[str, Any]:
    data = entry.get("data")
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0]
    return {}


def is_arrow_entry(entry: dict[str, Any]) -> bool:
    """Arrow pseudo-nodes are drawn as connectors, never as shapes."""
    return _first_data(entry).get("type") in ARROW_TYPES


def resolve_text(entry: dict[str, Any], resources: list[Any]) -> str:
    """Inline text, else the referenced resource's text/plain content, else ``"Node"``."""
    text = entry.get("text")
    if isinstance(text, str):
        return text
    resource_id = entry.get("resource")
    if resource_id is None:
        return DEFAULT_TEXT
    resource = next(
        (r for r in resources if isinstance(r, dict) and r.get("id") == resource_id), None
    )
    if resource is None:
        return DEFAULT_TEXT
    for rep in resource.get("representations") or []:
        if isinstance(rep, dict) and rep.get("mime-type") == TEXT_PLAIN:
            content = rep.get("content")
            return content if isinstance(content, str) and content else DEFAULT_TEXT
    return DEFAULT_TEXT


def resolve_style(entry: dict[str, Any]) -> tuple[NodeKind, NodeStyle]:
    data = _first_data(entry)
    kind = NodeKind.OVAL if data.get("type") in OVAL_TYPES else NodeKind.RECTANGLE
    overrides: dict[str, Any] = {}
    stroke_width = data.get("strokeWidth")
    if _is_number(stroke_width) and stroke_width >= 0:
        overrides["stroke_width"] = stroke_width
    if isinstance(data.get("strokeColor"), str):
        overrides["stroke_color"] = data["strokeColor"]
    if isinstance(data.get("fillColor"), str):
        overrides["fill_color"] = data["fillColor"]
    return kind, NodeStyle(**overrides)


class DiagramBuilder:
    """Builds a :class:`DiagramModel` from a schema-valid document."""

    def build(self, document: dict[str, Any]) -> DiagramModel:
        resources = document.get("resources")
        if not isinstance(resources, list):
            resources = []

        nodes: list[DiagramNode] = []
        seen: set[str] = set()
        for index, (node_id, entry) in enumerate(iter_node_entries(document)):
            if is_arrow_entry(entry):
                logger.debug("Skipping arrow pseudo-node '%s'", node_id)
                continue
            if node_id in seen:
                logger.debug("Skipping duplicate node id '%s'", node_id)
                continue
            seen.add(node_id)

            size = entry.get("size")
            width = _component(size, 0)
            height = _component(size, 1)
            width = width if width is not None and width > 0 else DEFAULT_WIDTH
            height = height if height is not None and height > 0 else DEFAULT_HEIGHT
            position = _pair(entry.get("position"))
            x, y = position if position else grid_position(index, width, height)
            kind, style = resolve_style(entry)

            nodes.append(
                DiagramNode(
                    id=node_id,
                    kind=kind,
                    x=x,
                    y=y,
                    width=width,
                    height=height,
                    text=resolve_text(entry, resources),
                    style=style,
                )
            )

        return DiagramModel(nodes=nodes, relations=self._raw_relations(document))

    @staticmethod
    def _raw_relations(document: dict[str, Any]) -> list[RawRelation]:
        relations: list[RawRelation] = []
        groups = document.get("relations")
        if not isinstance(groups, list):
            return relations
        for group in groups:
            if not isinstance(group, dict):
                continue
            for entry in group.get("data") or []:
                if not isinstance(entry, dict):
                    continue
                start, end = entry.get("start"), entry.get("end")
                if not isinstance(start, str) or not isinstance(end, str):
                    continue
                relations.append(
                    RawRelation(
                        start=start,
                        end=end,
                        type=str(entry.get("type", "")),
                        rel=str(entry.get("rel", "")),
                        node=entry.get("node") if isinstance(entry.get("node"), str) else None,
                        group_id=group.get("id") if isinstance(group.get("id"), str) else None,
                    )
                )
        return relations
