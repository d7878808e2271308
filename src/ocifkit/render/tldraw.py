"""tldraw file renderer.

Produces a ``.tldr`` document: a versioned envelope holding the store
records. Each node becomes a group carrying the OCIF metadata with a ``geo``
shape inside; each relation becomes an ``arrow`` shape bound to both endpoint
shapes.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from ocifkit.models.diagram import Bounds, DiagramNode, DiagramRelation, NodeKind
from ocifkit.render.base import Renderer, unique_id
from ocifkit.render.registry import RendererRegistry

PAGE_ID = "page:page"
FILE_FORMAT_VERSION = 1

SCHEMA_SEQUENCES: dict[str, int] = {
    "com.tldraw.store": 4,
    "com.tldraw.asset": 1,
    "com.tldraw.camera": 1,
    "com.tldraw.document": 2,
    "com.tldraw.instance": 25,
    "com.tldraw.instance_page_state": 5,
    "com.tldraw.page": 1,
    "com.tldraw.instance_presence": 5,
    "com.tldraw.pointer": 1,
    "com.tldraw.shape": 4,
    "com.tldraw.asset.bookmark": 1,
    "com.tldraw.asset.image": 3,
    "com.tldraw.asset.video": 3,
    "com.tldraw.shape.group": 0,
    "com.tldraw.shape.text": 2,
    "com.tldraw.shape.bookmark": 2,
    "com.tldraw.shape.draw": 1,
    "com.tldraw.shape.geo": 8,
    "com.tldraw.shape.note": 6,
    "com.tldraw.shape.line": 4,
    "com.tldraw.shape.frame": 0,
    "com.tldraw.shape.arrow": 4,
    "com.tldraw.shape.highlight": 0,
    "com.tldraw.shape.embed": 4,
    "com.tldraw.shape.image": 3,
    "com.tldraw.shape.video": 2,
    "com.tldraw.binding.arrow": 0,
}

_INDEX_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def index_key(i: int) -> str:
    """Fractional-index key for the *i*-th sibling (``a0`` ... ``az``, then ``b00`` ...)."""
    base = len(_INDEX_DIGITS)
    for head, width in (("a", 1), ("b", 2), ("c", 3)):
        if i < base**width:
            digits = ""
            for _ in range(width):
                i, rem = divmod(i, base)
                digits = _INDEX_DIGITS[rem] + digits
            return head + digits
        i -= base**width
    raise ValueError("Too many shapes for a single page")


def _base_records(timestamp: int) -> list[dict[str, Any]]:
    return [
        {
            "gridSize": 10,
            "name": "",
            "meta": {},
            "id": "document:document",
            "typeName": "document",
        },
        {
            "id": "pointer:pointer",
            "typeName": "pointer",
            "x": 0,
            "y": 0,
            "lastActivityTimestamp": timestamp,
            "meta": {},
        },
        {"meta": {}, "id": PAGE_ID, "name": "Page 1", "index": "a1", "typeName": "page"},
        {
            "editingShapeId": None,
            "croppingShapeId": None,
            "selectedShapeIds": [],
            "hoveredShapeId": None,
            "erasingShapeIds": [],
            "hintingShapeIds": [],
            "focusedGroupId": None,
            "meta": {},
            "id": f"instance_page_state:{PAGE_ID}",
            "pageId": PAGE_ID,
            "typeName": "instance_page_state",
        },
        {"x": 0, "y": 0, "z": 1, "meta": {}, "id": f"camera:{PAGE_ID}", "typeName": "camera"},
    ]


def _node_records(node: DiagramNode, index: int) -> list[dict[str, Any]]:
    node_type = "oval-node" if node.kind == NodeKind.OVAL else "rect-node"
    group_id = f"shape:{node.id}_group"
    group = {
        "x": node.x,
        "y": node.y,
        "rotation": 0,
        "isLocked": False,
        "opacity": 1,
        "meta": {
            "isFlowNode": True,
            "nodeInfo": {
                "type": node_type,
                "strokeColor": node.style.stroke_color,
                "fillColor": node.style.fill_color,
                "strokeWidth": node.style.stroke_width,
                "text": node.text,
                "formValues": {},
                "isOCIFNode": True,
            },
        },
        "id": group_id,
        "type": "group",
        "parentId": PAGE_ID,
        "index": index_key(index),
        "props": {},
        "typeName": "shape",
    }
    shape = {
        "x": 0,
        "y": 0,
        "rotation": 0,
        "isLocked": False,
        "opacity": 1,
        "meta": {},
        "id": f"shape:{node.id}",
        "type": "geo",
        "props": {
            "w": node.width,
            "h": node.height,
            "geo": "ellipse" if node.kind == NodeKind.OVAL else "rectangle",
            "color": "black",
            "labelColor": "black",
            "fill": "none",
            "dash": "draw",
            "size": "s",
            "font": "draw",
            "text": node.text,
            "align": "middle",
            "verticalAlign": "middle",
            "growY": 0,
            "url": "",
        },
        "parentId": group_id,
        "index": "a1",
        "typeName": "shape",
    }
    return [group, shape]


def _binding(arrow_id: str, node_id: str, terminal: str) -> dict[str, Any]:
    return {
        "meta": {},
        "id": f"binding:{arrow_id.removeprefix('shape:')}_binding_{terminal}",
        "type": "arrow",
        "fromId": arrow_id,
        "toId": f"shape:{node_id}",
        "props": {
            "isPrecise": True,
            "isExact": False,
            "normalizedAnchor": {"x": 0.5, "y": 0.5},
            "terminal": terminal,
        },
        "typeName": "binding",
    }


def _relation_records(
    relation: DiagramRelation, index: int, arrow_id: str
) -> list[dict[str, Any]]:
    arrow = {
        "x": relation.start.x,
        "y": relation.start.y,
        "rotation": 0,
        "isLocked": False,
        "opacity": 1,
        "meta": {
            "nodeInfo": {
                "type": relation.semantic_type,
                "rel": relation.relation_role,
                "group": relation.group_id,
            }
        },
        "id": arrow_id,
        "type": "arrow",
        "parentId": PAGE_ID,
        "index": index_key(index),
        "props": {
            "dash": "draw",
            "size": "m",
            "fill": "none",
            "color": "black",
            "labelColor": "black",
            "bend": 0,
            "start": {"x": 0, "y": 0},
            "end": {
                "x": relation.end.x - relation.start.x,
                "y": relation.end.y - relation.start.y,
            },
            "arrowheadStart": "none",
            "arrowheadEnd": "arrow",
            "text": "",
            "labelPosition": 0.5,
            "font": "draw",
        },
        "typeName": "shape",
    }
    return [
        arrow,
        _binding(arrow_id, relation.from_node_id, "start"),
        _binding(arrow_id, relation.to_node_id, "end"),
    ]


def build_tldraw_document(
    nodes: Sequence[DiagramNode],
    relations: Sequence[DiagramRelation],
    *,
    timestamp: int = 0,
) -> dict[str, Any]:
    """Build the tldraw file structure as plain dicts."""
    records = _base_records(timestamp)
    # Arrows take the low index keys so they sit below the node groups
    used = {node.id for node in nodes}
    for i, relation in enumerate(relations):
        arrow_id = unique_id(relation.node or f"relation_{i}", i, used)
        records.extend(_relation_records(relation, i, f"shape:{arrow_id}"))
    offset = len(relations)
    for i, node in enumerate(nodes):
        records.extend(_node_records(node, offset + i))
    return {
        "tldrawFileFormatVersion": FILE_FORMAT_VERSION,
        "schema": {"schemaVersion": 2, "sequences": dict(SCHEMA_SEQUENCES)},
        "records": records,
    }


@RendererRegistry.register
class TldrawRenderer(Renderer):
    """Whiteboard import file for tldraw."""

    def __init__(self, *, timestamp: int = 0) -> None:
        self.timestamp = timestamp

    @property
    def name(self) -> str:
        return "tldraw"

    @property
    def media_type(self) -> str:
        return "application/json"

    @property
    def file_extension(self) -> str:
        return ".tldr"

    def render(
        self,
        nodes: Sequence[DiagramNode],
        relations: Sequence[DiagramRelation],
        bounds: Bounds,
    ) -> str:
        document = build_tldraw_document(nodes, relations, timestamp=self.timestamp)
        return json.dumps(document, indent=2)
