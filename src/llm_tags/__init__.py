# Observability
from .observability import LoggingMetricsHook, MetricsHook, NoOpMetricsHook

# Parsing
from .parsing import (
    ParserConfig,
    ParserState,
    PartialSegment,
    Segment,
    StreamingParseResult,
    TagParser,
    TagSegment,
    TextSegment,
    astream_segments,
    coalesce_segments,
    create_parser,
    is_segment_type,
    iter_results,
    stream_segments,
)

# Registry
from .registry import (
    Registry,
    TagDefinition,
    TagRegistry,
    ValidationResult,
    create_registry,
    load_registry,
)

# Rendering
from .rendering import Catalog, RenderConfig, SegmentRenderer

__all__ = [
    # Observability
    "LoggingMetricsHook",
    "MetricsHook",
    "NoOpMetricsHook",
    # Parsing
    "ParserConfig",
    "ParserState",
    "PartialSegment",
    "Segment",
    "StreamingParseResult",
    "TagParser",
    "TagSegment",
    "TextSegment",
    "astream_segments",
    "coalesce_segments",
    "create_parser",
    "is_segment_type",
    "iter_results",
    "stream_segments",
    # Registry
    "Registry",
    "TagDefinition",
    "TagRegistry",
    "ValidationResult",
    "create_registry",
    "load_registry",
    # Rendering
    "Catalog",
    "RenderConfig",
    "SegmentRenderer",
]
