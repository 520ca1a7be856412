# src/llm_tags/parsing/models.py

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias


@dataclass(frozen=True)
class TextSegment:
    """A run of plain text. Never carries attributes."""

    content: str
    type: Literal["text"] = field(default="text", init=False)
    attributes: None = field(default=None, init=False)


@dataclass(frozen=True)
class TagSegment:
    """A recognized tag with its inner content and resolved attributes.

    Attributes are the schema-validated values when validation succeeded,
    otherwise the raw strings from the markup.
    """

    type: str
    content: str
    attributes: dict[str, Any] = field(default_factory=dict)


Segment: TypeAlias = TextSegment | TagSegment


@dataclass(frozen=True)
class PartialSegment:
    """Preview of a tag that is still being streamed.

    Advisory only. Never part of the final segment list.
    """

    type: str
    content: str
    attributes: dict[str, Any] = field(default_factory=dict)
    streaming: Literal[True] = True


@dataclass(frozen=True)
class ParserState:
    """Snapshot of a stream between two parse_chunk calls.

    Immutable. Each call consumes one state and returns a new one, so the
    same parser can serve any number of streams.
    """

    buffer: str = ""
    in_tag: bool = False
    current_tag_name: str | None = None
    current_attr_string: str = ""
    tag_start_offset: int = 0
    open_tag_text: str = ""
    offset: int = 0  # stream offset of buffer[0]

    def __post_init__(self) -> None:
        if self.in_tag != (self.current_tag_name is not None):
            raise ValueError("current_tag_name must be set if and only if in_tag")


@dataclass(frozen=True)
class StreamingParseResult:
    segments: list[Segment]
    state: ParserState
    is_buffering: bool
    buffering_tag: str | None = None
    partial_segment: PartialSegment | None = None


def is_segment_type(segment: Segment | PartialSegment, name: str) -> bool:
    return segment.type == name


def coalesce_segments(segments: Iterable[Segment]) -> list[Segment]:
    """Merge adjacent text segments.

    Streaming emits text as soon as it is safe to, so one run of text may
    arrive split over several chunks. Coalescing makes streamed output
    comparable with the output of TagParser.parse.
    """
    merged: list[Segment] = []
    for segment in segments:
        if (
            isinstance(segment, TextSegment)
            and merged
            and isinstance(merged[-1], TextSegment)
        ):
            merged[-1] = TextSegment(merged[-1].content + segment.content)
        else:
            merged.append(segment)
    return merged
