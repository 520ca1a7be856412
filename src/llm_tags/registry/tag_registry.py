import logging
from collections.abc import Iterable
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel

from .base import ValidationResult
from .tag import TagDefinition

logger = logging.getLogger(__name__)


class TagRegistry:
    """Immutable set of tag definitions keyed by lower-cased name.

    Implements the Registry protocol used by the parser. Attribute schemas are
    pydantic models; a definition without a schema accepts any attributes.
    """

    def __init__(self, definitions: Iterable[TagDefinition]) -> None:
        tags: dict[str, TagDefinition] = {}
        for definition in definitions:
            name = definition.name.lower()
            if name in tags:
                raise ValueError(f"Tag '{name}' already registered")
            tags[name] = definition
            logger.debug("Registered tag: %s", name)

        self._tags = MappingProxyType(tags)
        self._names = tuple(tags)

    def tag_names(self) -> tuple[str, ...]:
        return self._names

    def get(self, name: str) -> TagDefinition:
        try:
            return self._tags[name.lower()]
        except KeyError:
            logger.error("Tag not found: %s", name)
            raise KeyError(f"Tag '{name}' not found")

    def has_tag(self, name: str) -> bool:
        return name.lower() in self._tags

    def get_schema(self, name: str) -> type[BaseModel] | None:
        definition = self._tags.get(name.lower())
        return definition.schema if definition else None

    def is_self_closing(self, name: str) -> bool:
        definition = self._tags.get(name.lower())
        return definition.self_closing if definition else False

    def has_content(self, name: str) -> bool:
        definition = self._tags.get(name.lower())
        return definition.has_content if definition else True

    def validate_attributes(
        self, name: str, attributes: dict[str, Any]
    ) -> ValidationResult:
        definition = self._tags.get(name.lower())
        if definition is None:
            return ValidationResult.fail(KeyError(f"Unknown tag: {name}"))

        if definition.schema is None:
            return ValidationResult.ok(dict(attributes))

        # Any error raised by schema code is a failed validation
        try:
            model = definition.schema.model_validate(
                _match_fields(definition.schema, attributes)
            )
            return ValidationResult.ok(model.model_dump())
        except Exception as exc:
            return ValidationResult.fail(exc)

    def list(self) -> dict[str, TagDefinition]:
        # return a shallow copy to avoid mutation
        return dict(self._tags)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_tag(name)

    def __len__(self) -> int:
        return len(self._tags)


def _match_fields(
    schema: type[BaseModel], attributes: dict[str, Any]
) -> dict[str, Any]:
    """Rename parsed keys to the schema's field names or aliases.

    Markup keys arrive lower-cased, so `alttext` must find `altText`.
    Keys with no matching field pass through for the schema to judge.
    """
    lookup: dict[str, str] = {}
    for field_name, info in schema.model_fields.items():
        lookup[field_name.lower()] = field_name
        if info.alias:
            lookup[info.alias.lower()] = info.alias
    return {lookup.get(key.lower(), key): value for key, value in attributes.items()}


def create_registry(definitions: Iterable[TagDefinition]) -> TagRegistry:
    """Build an immutable registry from tag definitions.

    Example:
        >>> class CalloutAttrs(BaseModel):
        ...     type: Literal["info", "warning", "error"]
        >>> registry = create_registry([
        ...     TagDefinition(name="callout", schema=CalloutAttrs),
        ...     TagDefinition(name="image", self_closing=True, has_content=False),
        ... ])
        >>> registry.tag_names()
        ('callout', 'image')
    """
    return TagRegistry(definitions)
