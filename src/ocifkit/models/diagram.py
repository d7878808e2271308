"""Diagram model types: laid-out nodes, relations and canvas bounds."""

from __future__ import annotations

from enum import StrEnum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class NodeKind(StrEnum):
    RECTANGLE = "rectangle"
    OVAL = "oval"


class Point(NamedTuple):
    x: float
    y: float


class NodeStyle(BaseModel):
    """Stroke and fill of a rendered shape."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    stroke_width: float = Field(2, ge=0)
    stroke_color: str = "#64748b"
    fill_color: str = "#f8fafc"


class DiagramNode(BaseModel):
    """A shape with resolved text, size, position and style."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str
    kind: NodeKind = NodeKind.RECTANGLE
    x: float
    y: float
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    text: str = "Node"
    style: NodeStyle = NodeStyle()

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


class RawRelation(BaseModel):
    """A relation entry that still references its endpoints by node id."""

    model_config = ConfigDict(frozen=True)

    start: str
    end: str
    type: str = ""
    rel: str = ""
    node: str | None = None
    group_id: str | None = None


def format_number(value: float) -> str:
    """Compact decimal text for coordinates (``100`` rather than ``100.0``)."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


class DiagramRelation(BaseModel):
    """A resolved connector between two existing nodes."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    from_node_id: str
    to_node_id: str
    semantic_type: str = ""
    relation_role: str = ""
    start: Point
    end: Point
    node: str | None = None
    group_id: str | None = None

    @property
    def path(self) -> str:
        """SVG path data for the connector segment."""
        return (
            f"M {format_number(self.start.x)} {format_number(self.start.y)} "
            f"L {format_number(self.end.x)} {format_number(self.end.y)}"
        )


class Bounds(BaseModel):
    """Axis-aligned canvas box containing every node, plus padding."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


class DiagramModel(BaseModel):
    """Normalized graph built from a validated document."""

    nodes: list[DiagramNode] = []
    relations: list[RawRelation] = []

    def get_node(self, node_id: str) -> DiagramNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None
