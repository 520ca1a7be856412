# src/llm_tags/rendering/config.py

from dataclasses import dataclass


@dataclass(frozen=True)
class RenderConfig:
    """Configuration for SegmentRenderer.

    Immutable. Explicit. No magic defaults from environment.
    """

    debug: bool = False  # show render errors and warn about missing renderers
