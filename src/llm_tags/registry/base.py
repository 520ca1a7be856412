# src/llm_tags/registry/base.py

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class ValidationResult:
    """Normalized outcome of attribute validation.

    Never raised. A failed validation is a value, not an exception.
    """

    success: bool
    data: dict[str, Any] | None = None
    error: Exception | None = None

    @classmethod
    def ok(cls, data: dict[str, Any]) -> "ValidationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: Exception) -> "ValidationResult":
        return cls(success=False, error=error)


class Registry(Protocol):
    """Catalog of recognized tag names consumed by the parser.

    Design principles:
    - Immutable: the set of names never changes after construction
    - Lower-cased names: lookups use the normalized tag name
    - Non-fatal validation: validate_attributes returns a result, never raises
    """

    def tag_names(self) -> tuple[str, ...]: ...

    def is_self_closing(self, name: str) -> bool: ...

    def has_content(self, name: str) -> bool: ...

    def validate_attributes(
        self, name: str, attributes: dict[str, str]
    ) -> ValidationResult: ...
