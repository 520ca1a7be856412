import logging
from typing import Any

from llm_tags.registry.base import Registry, ValidationResult

logger = logging.getLogger(__name__)


def resolve_attributes(
    registry: Registry, name: str, raw: dict[str, str]
) -> tuple[dict[str, Any], bool]:
    """Validate raw attributes against the registry.

    Returns the validated attributes and True on success. On failure the raw
    strings come back unchanged with False; parsing never aborts on
    attribute errors, even when a registry raises instead of returning a
    failed result.
    """
    try:
        result = registry.validate_attributes(name, raw)
    except Exception as exc:
        result = ValidationResult.fail(exc)

    if result.success and result.data is not None:
        return result.data, True

    logger.debug("Attribute validation failed for <%s>: %s", name, result.error)
    return dict(raw), False
