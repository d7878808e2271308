"""JSON Canvas (https://jsoncanvas.org, v1.0) renderer."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from ocifkit.models.diagram import Bounds, DiagramNode, DiagramRelation
from ocifkit.render.base import Renderer, unique_id
from ocifkit.render.registry import RendererRegistry


def _side(dx: float, dy: float) -> str:
    """Canvas side facing direction ``(dx, dy)`` (y grows downward)."""
    if abs(dx) >= abs(dy):
        return "right" if dx >= 0 else "left"
    return "bottom" if dy >= 0 else "top"


def build_canvas(
    nodes: Sequence[DiagramNode], relations: Sequence[DiagramRelation]
) -> dict[str, Any]:
    by_id = {node.id: node for node in nodes}
    canvas_nodes = [
        {
            "id": node.id,
            "type": "text",
            "x": round(node.x),
            "y": round(node.y),
            "width": round(node.width),
            "height": round(node.height),
            "text": node.text,
            "color": node.style.stroke_color,
        }
        for node in nodes
    ]
    edges: list[dict[str, Any]] = []
    used = set(by_id)
    for i, rel in enumerate(relations):
        source, target = by_id[rel.from_node_id], by_id[rel.to_node_id]
        dx = target.center.x - source.center.x
        dy = target.center.y - source.center.y
        edge: dict[str, Any] = {
            "id": unique_id(rel.node or f"edge-{i}", i, used),
            "fromNode": rel.from_node_id,
            "fromSide": _side(dx, dy),
            "toNode": rel.to_node_id,
            "toSide": _side(-dx, -dy),
            "toEnd": "arrow",
        }
        label = rel.relation_role or rel.semantic_type
        if label:
            edge["label"] = label
        edges.append(edge)
    return {"nodes": canvas_nodes, "edges": edges}


@RendererRegistry.register
class JSONCanvasRenderer(Renderer):
    """Infinite-canvas document readable by Obsidian and other JSON Canvas tools."""

    @property
    def name(self) -> str:
        return "jsoncanvas"

    @property
    def media_type(self) -> str:
        return "application/json"

    @property
    def file_extension(self) -> str:
        return ".canvas"

    def render(
        self,
        nodes: Sequence[DiagramNode],
        relations: Sequence[DiagramRelation],
        bounds: Bounds,
    ) -> str:
        return json.dumps(build_canvas(nodes, relations), indent=2)
