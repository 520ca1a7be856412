from .base import Registry, ValidationResult
from .loader import load_registry, registry_from_dict
from .tag import TagDefinition
from .tag_registry import TagRegistry, create_registry

__all__ = [
    "Registry",
    "TagDefinition",
    "TagRegistry",
    "ValidationResult",
    "create_registry",
    "load_registry",
    "registry_from_dict",
]
