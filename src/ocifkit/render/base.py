"""Abstract renderer: laid-out diagram → output artifact text."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ocifkit.models.diagram import Bounds, DiagramNode, DiagramRelation


class Renderer(ABC):
    """Base for all output formats.

    Renderers are pure: the same nodes, relations and bounds always produce
    the same text.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def media_type(self) -> str: ...

    @property
    @abstractmethod
    def file_extension(self) -> str: ...

    @abstractmethod
    def render(
        self,
        nodes: Sequence[DiagramNode],
        relations: Sequence[DiagramRelation],
        bounds: Bounds,
    ) -> str:
        """Serialize the diagram."""


def unique_id(candidate: str, index: int, used: set[str]) -> str:
    """Return *candidate*, suffixed with *index* if an earlier shape already took it."""
    result = candidate
    while result in used:
        result = f"{candidate}_{index}"
        index += 1
    used.add(result)
    return result
