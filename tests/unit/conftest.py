from typing import Literal

import pytest
from pydantic import BaseModel

from llm_tags.parsing.parser import TagParser, create_parser
from llm_tags.registry.tag import TagDefinition
from llm_tags.registry.tag_registry import TagRegistry, create_registry


class CalloutAttrs(BaseModel):
    type: Literal["info", "warning", "error"]


class ImageAttrs(BaseModel):
    src: str
    alt: str | None = None


class ChartAttrs(BaseModel):
    kind: Literal["bar", "line", "pie"]
    height: int = 300


@pytest.fixture
def registry() -> TagRegistry:
    """callout (content), image (self-closing), chart (content, typed attrs)."""
    return create_registry(
        [
            TagDefinition(name="callout", schema=CalloutAttrs),
            TagDefinition(
                name="image", schema=ImageAttrs, self_closing=True, has_content=False
            ),
            TagDefinition(name="chart", schema=ChartAttrs),
        ]
    )


@pytest.fixture
def parser(registry: TagRegistry) -> TagParser:
    return create_parser(registry)
