from .attributes import parse_attributes
from .config import ParserConfig
from .entities import decode_entities
from .matcher import TagMatch, TagMatcher
from .models import (
    ParserState,
    PartialSegment,
    Segment,
    StreamingParseResult,
    TagSegment,
    TextSegment,
    coalesce_segments,
    is_segment_type,
)
from .parser import TagParser, create_parser
from .stream import astream_segments, iter_results, stream_segments
from .validation import resolve_attributes

__all__ = [
    # Parser
    "TagParser",
    "create_parser",
    "ParserConfig",
    # Streaming
    "astream_segments",
    "iter_results",
    "stream_segments",
    # Types
    "ParserState",
    "PartialSegment",
    "Segment",
    "StreamingParseResult",
    "TagSegment",
    "TextSegment",
    "coalesce_segments",
    "is_segment_type",
    # Building blocks
    "TagMatch",
    "TagMatcher",
    "decode_entities",
    "parse_attributes",
    "resolve_attributes",
]
