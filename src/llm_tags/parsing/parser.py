import logging
from time import monotonic
from typing import Any

from llm_tags.observability import names
from llm_tags.observability.base import MetricsHook, NoOpMetricsHook
from llm_tags.registry.base import Registry

from .attributes import parse_attributes
from .config import ParserConfig
from .entities import decode_entities, partial_entity_start
from .matcher import TagMatch, TagMatcher
from .models import (
    ParserState,
    PartialSegment,
    Segment,
    StreamingParseResult,
    TagSegment,
    TextSegment,
    coalesce_segments,
)
from .validation import resolve_attributes

logger = logging.getLogger(__name__)


class TagParser:
    """Converts text containing registered tags into typed segments.

    Holds no per-stream state: streaming callers thread a ParserState
    through parse_chunk themselves, so one parser serves many streams.
    Malformed, unknown or unclosed markup always degrades to text.
    """

    def __init__(
        self,
        registry: Registry,
        config: ParserConfig = ParserConfig(),
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.registry = registry
        self.config = config
        self.metrics_hook = metrics_hook
        self._matcher = TagMatcher(registry.tag_names())
        logger.debug(
            "Initialized TagParser with tags=%s, lookback_window=%d",
            self._matcher.tag_names,
            config.lookback_window,
        )

    def parse(self, text: str) -> list[Segment]:
        """Parse a complete string into segments, in input order."""
        start = monotonic()
        segments = self._parse_segments(text)

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.PARSE_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.PARSE_SEGMENTS_TOTAL, len(segments))
        logger.debug("Parsed %d chars into %d segments", len(text), len(segments))
        return segments

    def _parse_segments(self, text: str) -> list[Segment]:
        segments: list[Segment] = []
        pending: list[str] = []
        pos = 0

        while pos < len(text):
            match = self._matcher.search(text, pos)
            if match is None:
                pending.append(text[pos:])
                break

            pending.append(text[pos : match.start])

            if self._is_self_closing(match):
                self._flush_text(segments, pending)
                segments.append(self._build_segment(match.name, match.attr_string, ""))
                pos = match.end
                continue

            close = self._matcher.find_close(text, match.name, match.end)
            if close is None:
                # Unclosed: the opening tag is literal text and is not retried
                pending.append(match.text)
                pos = match.end
                continue

            self._flush_text(segments, pending)
            segments.append(
                self._build_segment(
                    match.name, match.attr_string, text[match.end : close[0]]
                )
            )
            pos = close[1]

        self._flush_text(segments, pending)
        return segments

    def create_state(self) -> ParserState:
        return ParserState()

    def parse_chunk(self, chunk: str, state: ParserState) -> StreamingParseResult:
        """Feed one chunk of a stream.

        Returns only the segments completed by this chunk together with the
        state to pass to the next call.
        """
        start = monotonic()
        buffer = state.buffer + chunk
        segments: list[Segment] = []

        tag_name = state.current_tag_name
        attr_string = state.current_attr_string
        open_tag_text = state.open_tag_text
        tag_start_offset = state.tag_start_offset
        pos = 0

        # A body carried over from earlier calls is known not to hold the
        # close tag, except where it could straddle the old buffer end.
        close_search_from = 0
        if tag_name is not None:
            close_search_from = max(
                0, len(state.buffer) - self._matcher.close_tag_length(tag_name) + 1
            )

        while pos < len(buffer):
            if tag_name is not None:
                close = self._matcher.find_close(
                    buffer, tag_name, max(pos, close_search_from)
                )
                if close is None:
                    break

                segments.append(
                    self._build_segment(tag_name, attr_string, buffer[pos : close[0]])
                )
                logger.debug("Closed <%s> opened at offset %d", tag_name, tag_start_offset)
                pos = close[1]
                tag_name, attr_string, open_tag_text = None, "", ""
                tag_start_offset = 0
                close_search_from = 0
                continue

            match = self._matcher.search(buffer, pos)
            if match is None:
                hold = self._hold_back_start(buffer, pos)
                self._emit_text(segments, buffer[pos:hold])
                pos = hold
                break

            self._emit_text(segments, buffer[pos : match.start])

            if self._is_self_closing(match):
                segments.append(self._build_segment(match.name, match.attr_string, ""))
                pos = match.end
                continue

            tag_name = match.name
            attr_string = match.attr_string
            open_tag_text = match.text
            tag_start_offset = state.offset + match.start
            pos = match.end
            logger.debug("Opened <%s> at offset %d", tag_name, tag_start_offset)

        remaining = buffer[pos:]
        new_state = ParserState(
            buffer=remaining,
            in_tag=tag_name is not None,
            current_tag_name=tag_name,
            current_attr_string=attr_string,
            tag_start_offset=tag_start_offset,
            open_tag_text=open_tag_text,
            offset=state.offset + pos,
        )

        partial_segment = None
        if tag_name is not None:
            partial_segment = PartialSegment(
                type=tag_name,
                content=decode_entities(remaining),
                attributes=self._resolve(tag_name, attr_string, record=False),
            )

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.PARSE_CHUNK_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.STREAM_CHUNKS_TOTAL)
        if segments:
            self.metrics_hook.increment(names.PARSE_SEGMENTS_TOTAL, len(segments))
        self.metrics_hook.record_gauge(names.STREAM_BUFFERED_CHARS, len(remaining))

        return StreamingParseResult(
            segments=segments,
            state=new_state,
            is_buffering=new_state.in_tag or bool(remaining),
            buffering_tag=tag_name,
            partial_segment=partial_segment,
        )

    def finalize(self, state: ParserState) -> list[Segment]:
        """Flush whatever a finished stream left buffered.

        An unterminated tag loses its name and attributes: its opening text
        becomes literal text and its body is parsed like complete text, which
        is what parse does with an unclosed tag.
        """
        segments: list[Segment] = []
        if state.in_tag:
            logger.debug(
                "Stream ended inside <%s>; emitting it as text",
                state.current_tag_name,
            )
            self._emit_text(segments, state.open_tag_text)
        if state.buffer:
            segments.extend(self._parse_segments(state.buffer))
        return coalesce_segments(segments)

    def _hold_back_start(self, buffer: str, pos: int) -> int:
        tag_start = self._matcher.incomplete_tag_start(
            buffer, pos, self.config.lookback_window
        )
        if tag_start != -1:
            logger.debug("Holding back %d chars of a possible tag", len(buffer) - tag_start)
            return tag_start

        entity_start = partial_entity_start(buffer[pos:])
        if entity_start != -1:
            return pos + entity_start
        return len(buffer)

    def _is_self_closing(self, match: TagMatch) -> bool:
        return match.self_closing or self.registry.is_self_closing(match.name)

    def _build_segment(self, name: str, attr_string: str, content: str) -> TagSegment:
        return TagSegment(
            type=name,
            content=decode_entities(content),
            attributes=self._resolve(name, attr_string),
        )

    def _resolve(self, name: str, attr_string: str, record: bool = True) -> dict[str, Any]:
        attributes, valid = resolve_attributes(
            self.registry, name, parse_attributes(attr_string)
        )
        if not valid and record:
            self.metrics_hook.increment(
                names.ATTRIBUTE_FALLBACKS_TOTAL, labels={"tag": name}
            )
        return attributes

    def _emit_text(self, segments: list[Segment], text: str) -> None:
        if text:
            segments.append(TextSegment(decode_entities(text)))

    def _flush_text(self, segments: list[Segment], pending: list[str]) -> None:
        self._emit_text(segments, "".join(pending))
        pending.clear()


def create_parser(
    registry: Registry,
    config: ParserConfig = ParserConfig(),
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> TagParser:
    """Create a parser bound to a registry.

    The tag pattern is compiled once here; the parser can then be shared by
    any number of streams.

    Example:
        >>> parser = create_parser(registry)
        >>> parser.parse('Hello <callout type="info">Important!</callout> World')
        [TextSegment(content='Hello '), TagSegment(type='callout', ...), ...]
    """
    return TagParser(registry, config=config, metrics_hook=metrics_hook)
