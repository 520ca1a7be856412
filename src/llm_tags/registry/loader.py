import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, create_model

from .tag import TagDefinition
from .tag_registry import TagRegistry

logger = logging.getLogger(__name__)

_PYTHON_TYPES: dict[str, type] = {
    "string": str,
    "integer": int,
    "number": float,
    "boolean": bool,
}


class AttributeSpec(BaseModel):
    type: Literal["string", "integer", "number", "boolean"] = "string"
    enum: list[str] | None = None
    required: bool = True
    default: Any = None

    class Config:
        extra = "forbid"


class TagSpec(BaseModel):
    has_content: bool = True
    self_closing: bool = False
    attributes: dict[str, AttributeSpec] = {}

    class Config:
        extra = "forbid"


class RegistrySpec(BaseModel):
    tags: dict[str, TagSpec]

    class Config:
        extra = "forbid"


def load_registry(path: str | Path) -> TagRegistry:
    """Load tag definitions from a YAML file.

    Each tag gets a generated pydantic model for its attributes, so the
    resulting registry validates exactly like one built from hand-written
    schemas.
    """
    logger.info("Loading tag registry from: %s", path)
    with open(path) as f:
        data = yaml.safe_load(f)

    registry = registry_from_dict(data or {})
    logger.info("Loaded %d tags", len(registry))
    return registry


def registry_from_dict(data: dict[str, Any]) -> TagRegistry:
    spec = RegistrySpec(**data)
    return TagRegistry(
        _build_definition(name, tag_spec) for name, tag_spec in spec.tags.items()
    )


def _build_definition(name: str, spec: TagSpec) -> TagDefinition:
    schema = None
    if spec.attributes:
        fields = {
            attr_name: _build_field(attr_spec)
            for attr_name, attr_spec in spec.attributes.items()
        }
        schema = create_model(f"{name.title()}Attributes", **fields)

    logger.debug("Built tag definition: %s", name)
    return TagDefinition(
        name=name,
        schema=schema,
        has_content=spec.has_content,
        self_closing=spec.self_closing,
    )


def _build_field(spec: AttributeSpec) -> tuple[Any, Any]:
    annotation: Any = _PYTHON_TYPES[spec.type]
    if spec.enum:
        annotation = Literal[tuple(spec.enum)]

    if spec.required:
        return (annotation, ...)
    return (annotation | None, spec.default)
