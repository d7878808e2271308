"""Canvas bounds and connector geometry.

Connectors are straight segments between node centers, clipped so that each
end sits exactly on the boundary of its shape (rectangle or ellipse).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

from ocifkit.models.diagram import (
    Bounds,
    DiagramNode,
    DiagramRelation,
    NodeKind,
    Point,
    RawRelation,
)

logger = logging.getLogger("ocifkit.layout")

BOUNDS_PADDING = 50.0
DEFAULT_CANVAS = Bounds(min_x=0, min_y=0, max_x=800, max_y=600)

# Direction components below this are treated as parallel to that axis
_AXIS_EPSILON = 0.01


def compute_bounds(nodes: Sequence[DiagramNode], padding: float = BOUNDS_PADDING) -> Bounds:
    """Smallest box containing every node, grown by *padding* on each side."""
    if not nodes:
        return DEFAULT_CANVAS
    return Bounds(
        min_x=min(n.x for n in nodes) - padding,
        min_y=min(n.y for n in nodes) - padding,
        max_x=max(n.right for n in nodes) + padding,
        max_y=max(n.bottom for n in nodes) + padding,
    )


def rectangle_intersection(
    center: Point, half_width: float, half_height: float, dx: float, dy: float
) -> Point:
    """Where a ray from *center* along ``(dx, dy)`` leaves an axis-aligned rectangle."""
    length = math.hypot(dx, dy)
    if length == 0:
        return center
    dir_x, dir_y = dx / length, dy / length
    tx = math.inf if abs(dir_x) < _AXIS_EPSILON else half_width / abs(dir_x)
    ty = math.inf if abs(dir_y) < _AXIS_EPSILON else half_height / abs(dir_y)
    t = min(tx, ty)
    return Point(center.x + dir_x * t, center.y + dir_y * t)


def ellipse_intersection(center: Point, a: float, b: float, dx: float, dy: float) -> Point:
    """Where a ray from *center* along ``(dx, dy)`` leaves an ellipse with semi-axes a, b."""
    if dx == 0 and dy == 0:
        return center
    angle = math.atan2(dy, dx)
    cos_t, sin_t = math.cos(angle), math.sin(angle)
    t = 1 / math.sqrt((cos_t / a) ** 2 + (sin_t / b) ** 2)
    return Point(center.x + cos_t * t, center.y + sin_t * t)


def boundary_point(node: DiagramNode, dx: float, dy: float) -> Point:
    """Point on *node*'s outline in direction ``(dx, dy)`` from its center."""
    half_w, half_h = node.width / 2, node.height / 2
    if node.kind == NodeKind.OVAL:
        return ellipse_intersection(node.center, half_w, half_h, dx, dy)
    return rectangle_intersection(node.center, half_w, half_h, dx, dy)


def connector_endpoints(source: DiagramNode, target: DiagramNode) -> tuple[Point, Point]:
    """Clip the center-to-center segment to both shape outlines."""
    dx = target.center.x - source.center.x
    dy = target.center.y - source.center.y
    # The end-side ray points outward from the target's own center
    return boundary_point(source, dx, dy), boundary_point(target, -dx, -dy)


def resolve_relations(
    raw_relations: Iterable[RawRelation], nodes: Sequence[DiagramNode]
) -> list[DiagramRelation]:
    """Attach geometry to relations; those with an unknown endpoint are dropped."""
    by_id: dict[str, DiagramNode] = {}
    for node in nodes:
        by_id.setdefault(node.id, node)

    resolved: list[DiagramRelation] = []
    for raw in raw_relations:
        source, target = by_id.get(raw.start), by_id.get(raw.end)
        if source is None or target is None:
            logger.debug(
                "Dropping relation %s -> %s: unresolved endpoint", raw.start, raw.end
            )
            continue
        start, end = connector_endpoints(source, target)
        resolved.append(
            DiagramRelation(
                from_node_id=raw.start,
                to_node_id=raw.end,
                semantic_type=raw.type,
                relation_role=raw.rel,
                start=start,
                end=end,
                node=raw.node,
                group_id=raw.group_id,
            )
        )
    return resolved
