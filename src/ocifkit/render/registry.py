"""Renderer plugin registry: register and look up output formats by name."""

from __future__ import annotations

from typing import Any

from ocifkit.render.base import Renderer


class UnsupportedFormatError(Exception):
    """Raised when a requested output format is not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.format_name = name
        self.available = available
        super().__init__(f"Unsupported format '{name}'. Available: {', '.join(available)}")


class RendererRegistry:
    """Registry for output format renderers."""

    _renderers: dict[str, type[Renderer]] = {}

    @classmethod
    def register(cls, renderer_class: type[Renderer]) -> type[Renderer]:
        """Register a renderer class. Can be used as a decorator."""
        # Instantiate to read the name property
        instance = renderer_class()
        cls._renderers[instance.name] = renderer_class
        return renderer_class

    @classmethod
    def get(cls, name: str, **options: Any) -> Renderer:
        """Get an instance of the named renderer, passing *options* to it."""
        if name not in cls._renderers:
            raise UnsupportedFormatError(name, available=cls.available())
        return cls._renderers[name](**options)

    @classmethod
    def available(cls) -> list[str]:
        """List registered format names."""
        return sorted(cls._renderers.keys())
