from .catalog import Catalog, Renderer, TextRenderer
from .config import RenderConfig
from .renderer import SegmentRenderer

__all__ = [
    "Catalog",
    "RenderConfig",
    "Renderer",
    "SegmentRenderer",
    "TextRenderer",
]
