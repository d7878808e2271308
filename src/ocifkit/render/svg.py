"""SVG renderer for laid-out OCIF diagrams."""

from __future__ import annotations

from collections.abc import Sequence
from xml.sax.saxutils import escape, quoteattr

from ocifkit.models.diagram import (
    Bounds,
    DiagramNode,
    DiagramRelation,
    NodeKind,
    format_number as _n,
)
from ocifkit.render.base import Renderer
from ocifkit.render.registry import RendererRegistry

SVG_NS = "http://www.w3.org/2000/svg"

BACKGROUND = "#ffffff"
CONNECTOR_COLOR = "#94a3b8"
TEXT_COLOR = "#1e293b"
FONT_FAMILY = "Arial"
FONT_SIZE = 14
CORNER_RADIUS = 8


def render_svg(
    nodes: Sequence[DiagramNode],
    relations: Sequence[DiagramRelation],
    bounds: Bounds,
    *,
    escape_text: bool = False,
) -> str:
    """Render nodes and connectors as a standalone SVG document.

    Connectors are drawn first so that shapes sit on top of them. Node text is
    emitted verbatim unless *escape_text* is set, so markup-like labels
    (``<``, ``&``) only produce well-formed XML with escaping enabled.
    """
    w, h = _n(bounds.width), _n(bounds.height)
    min_x, min_y = _n(bounds.min_x), _n(bounds.min_y)

    def text(value: str) -> str:
        return escape(value) if escape_text else value

    def attr(value: str) -> str:
        return quoteattr(value) if escape_text else f'"{value}"'

    lines: list[str] = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg width="{w}" height="{h}" viewBox="{min_x} {min_y} {w} {h}" xmlns="{SVG_NS}">',
        "  <!-- Background -->",
        f'  <rect x="{min_x}" y="{min_y}" width="100%" height="100%" fill="{BACKGROUND}"/>',
        "",
        "  <!-- Arrow marker definition -->",
        "  <defs>",
        '    <marker id="arrowhead" markerWidth="10" markerHeight="7" refX="9" refY="3.5" orient="auto">',
        f'      <polygon points="0 0, 10 3.5, 0 7" fill="{CONNECTOR_COLOR}"/>',
        "    </marker>",
        "  </defs>",
        "",
        "  <!-- Relations (drawn first so they appear behind nodes) -->",
    ]

    for rel in relations:
        title = f"{rel.semantic_type} ({rel.relation_role})"
        lines.append(
            f'  <path d="{rel.path}" stroke="{CONNECTOR_COLOR}" stroke-width="2" fill="none" '
            f'marker-end="url(#arrowhead)" title={attr(title)}/>'
        )

    lines.append("")
    lines.append("  <!-- Nodes -->")
    for node in nodes:
        style = node.style
        paint = (
            f'fill="{style.fill_color}" stroke="{style.stroke_color}" '
            f'stroke-width="{_n(style.stroke_width)}"'
        )
        cx, cy = node.center
        lines.append(f"  <!-- {node.kind.value} node -->")
        if node.kind == NodeKind.OVAL:
            lines.append(
                f'  <ellipse cx="{_n(cx)}" cy="{_n(cy)}" rx="{_n(node.width / 2)}" '
                f'ry="{_n(node.height / 2)}" {paint}/>'
            )
        else:
            lines.append(
                f'  <rect x="{_n(node.x)}" y="{_n(node.y)}" width="{_n(node.width)}" '
                f'height="{_n(node.height)}" {paint} rx="{CORNER_RADIUS}" ry="{CORNER_RADIUS}"/>'
            )
        lines.append(
            f'  <text x="{_n(cx)}" y="{_n(cy)}" font-family="{FONT_FAMILY}" '
            f'font-size="{FONT_SIZE}" fill="{TEXT_COLOR}" text-anchor="middle" '
            f'dominant-baseline="middle">{text(node.text)}</text>'
        )

    lines.append("</svg>")
    return "\n".join(lines) + "\n"


@RendererRegistry.register
class SVGRenderer(Renderer):
    """Vector drawing of the diagram."""

    def __init__(self, *, escape_text: bool = False) -> None:
        self.escape_text = escape_text

    @property
    def name(self) -> str:
        return "svg"

    @property
    def media_type(self) -> str:
        return "image/svg+xml"

    @property
    def file_extension(self) -> str:
        return ".svg"

    def render(
        self,
        nodes: Sequence[DiagramNode],
        relations: Sequence[DiagramRelation],
        bounds: Bounds,
    ) -> str:
        return render_svg(nodes, relations, bounds, escape_text=self.escape_text)
