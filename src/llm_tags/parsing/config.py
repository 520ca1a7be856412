# src/llm_tags/parsing/config.py

from dataclasses import dataclass


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for TagParser.

    Immutable. Explicit. No magic defaults from environment.
    """

    # How far back from the end of the buffer a possibly-incomplete opening
    # tag is held instead of being emitted as text.
    lookback_window: int = 64

    def __post_init__(self) -> None:
        if self.lookback_window <= 0:
            raise ValueError("lookback_window must be > 0")
