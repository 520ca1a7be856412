import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Protocol

from llm_tags.parsing.models import PartialSegment, Segment, TextSegment
from llm_tags.registry.base import Registry

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    def __call__(
        self,
        segment: Segment | PartialSegment,
        *,
        index: int,
        streaming: bool = False,
    ) -> str: ...


class TextRenderer(Protocol):
    def __call__(
        self,
        segment: TextSegment,
        *,
        index: int,
        streaming: bool = False,
    ) -> str: ...


class Catalog:
    """Maps registered tag names to the callables that render them."""

    def __init__(
        self,
        registry: Registry,
        renderers: Mapping[str, Renderer],
        text_renderer: TextRenderer | None = None,
    ) -> None:
        components: dict[str, Renderer] = {}
        for name, renderer in renderers.items():
            if name.lower() not in registry.tag_names():
                raise ValueError(f"Cannot add renderer, tag '{name}' not registered")
            components[name.lower()] = renderer
            logger.debug("Added renderer for tag: %s", name)

        self.registry = registry
        self._renderers = MappingProxyType(components)
        self._text_renderer = text_renderer

    def get_renderer(self, name: str) -> Renderer | None:
        return self._renderers.get(name.lower())

    def get_text_renderer(self) -> TextRenderer | None:
        return self._text_renderer

    def has_renderer(self, name: str) -> bool:
        if name == "text":
            return self._text_renderer is not None
        return name.lower() in self._renderers
