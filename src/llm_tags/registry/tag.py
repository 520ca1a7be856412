import re
from dataclasses import dataclass

from pydantic import BaseModel

_INVALID_NAME = re.compile(r"[\s<>/=\"']")


@dataclass(frozen=True)
class TagDefinition:
    name: str
    schema: type[BaseModel] | None = None
    has_content: bool = True
    self_closing: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Tag name must not be empty")
        if _INVALID_NAME.search(self.name):
            raise ValueError(f"Invalid tag name: {self.name!r}")
