"""Output renderers for laid-out diagrams."""

# Import renderers to trigger registration
import ocifkit.render.jsoncanvas as _jsoncanvas  # noqa: F401
import ocifkit.render.svg as _svg  # noqa: F401
import ocifkit.render.tldraw as _tldraw  # noqa: F401
from ocifkit.render.base import Renderer
from ocifkit.render.registry import RendererRegistry, UnsupportedFormatError

__all__ = [
    "Renderer",
    "RendererRegistry",
    "UnsupportedFormatError",
]
