import random
from collections.abc import Iterable

import pytest

from llm_tags.parsing.config import ParserConfig
from llm_tags.parsing.models import (
    ParserState,
    PartialSegment,
    Segment,
    TagSegment,
    TextSegment,
    coalesce_segments,
)
from llm_tags.parsing.parser import TagParser, create_parser
from llm_tags.registry.tag_registry import TagRegistry

DOCUMENTS = [
    'Hello <callout type="info">Important!</callout> World',
    'See <image src="a.png" alt="A"/> and <IMAGE SRC="b.png"/>.',
    "a <foo>b</foo> c &amp; d &lt; e",
    'Hi <callout type="info">oops',
    '<callout type="warning">A &amp; B</callout><chart kind="bar" height="5">1,2</chart>',
    '1 < 2 and 3 > 2 <callout type="error">x</callout>',
    '<callout type="info">a <image src="x.png"/> b',
    'x <callout type="info">a</callout',
    "tail <call",
    "AT&T &amp",
    "<Callout type='info'>&quot;quoted&quot;</CALLOUT>&gt;",
]


def _stream(parser: TagParser, chunks: Iterable[str]) -> list[Segment]:
    state = parser.create_state()
    segments: list[Segment] = []
    for chunk in chunks:
        result = parser.parse_chunk(chunk, state)
        segments.extend(result.segments)
        state = result.state
    segments.extend(parser.finalize(state))
    return coalesce_segments(segments)


class TestStreamingExample:
    CHUNKS = ["Hello <call", 'out type="info">Imp', "ortant!</callout> World"]

    def test_final_segments(self, parser: TagParser) -> None:
        assert _stream(parser, self.CHUNKS) == [
            TextSegment("Hello "),
            TagSegment(type="callout", content="Important!", attributes={"type": "info"}),
            TextSegment(" World"),
        ]

    def test_first_chunk_emits_text_and_holds_tag_start(self, parser: TagParser) -> None:
        result = parser.parse_chunk(self.CHUNKS[0], parser.create_state())

        assert result.segments == [TextSegment("Hello ")]
        assert result.state.buffer == "<call"
        assert result.is_buffering is True
        assert result.buffering_tag is None
        assert result.partial_segment is None

    def test_second_chunk_reports_buffering_tag(self, parser: TagParser) -> None:
        first = parser.parse_chunk(self.CHUNKS[0], parser.create_state())
        second = parser.parse_chunk(self.CHUNKS[1], first.state)

        assert second.segments == []
        assert second.is_buffering is True
        assert second.buffering_tag == "callout"
        assert second.partial_segment == PartialSegment(
            type="callout", content="Imp", attributes={"type": "info"}
        )
        assert second.state.in_tag is True
        assert second.state.current_tag_name == "callout"
        assert second.state.current_attr_string == 'type="info"'
        assert second.state.tag_start_offset == 6

    def test_third_chunk_completes_tag_and_trailing_text(self, parser: TagParser) -> None:
        state = parser.create_state()
        for chunk in self.CHUNKS[:2]:
            state = parser.parse_chunk(chunk, state).state

        result = parser.parse_chunk(self.CHUNKS[2], state)

        assert result.segments == [
            TagSegment(type="callout", content="Important!", attributes={"type": "info"}),
            TextSegment(" World"),
        ]
        assert result.is_buffering is False
        assert result.state == ParserState(offset=len("".join(self.CHUNKS)))


class TestChunkInvariance:
    @pytest.mark.parametrize("text", DOCUMENTS)
    def test_every_single_split(self, parser: TagParser, text: str) -> None:
        expected = parser.parse(text)

        for i in range(len(text) + 1):
            assert _stream(parser, [text[:i], text[i:]]) == expected, i

    @pytest.mark.parametrize("text", DOCUMENTS)
    def test_character_by_character(self, parser: TagParser, text: str) -> None:
        assert _stream(parser, list(text)) == parser.parse(text)

    @pytest.mark.parametrize("seed", range(5))
    def test_random_splits(self, parser: TagParser, seed: int) -> None:
        rng = random.Random(seed)
        text = "".join(DOCUMENTS)
        cuts = sorted(rng.sample(range(1, len(text)), 25))
        chunks = [text[i:j] for i, j in zip([0, *cuts], [*cuts, len(text)])]

        assert _stream(parser, chunks) == parser.parse(text)

    def test_empty_chunks_are_harmless(self, parser: TagParser) -> None:
        text = DOCUMENTS[0]

        assert _stream(parser, ["", text[:8], "", text[8:], ""]) == parser.parse(text)


class TestScanning:
    def test_plain_text_is_emitted_immediately(self, parser: TagParser) -> None:
        result = parser.parse_chunk("Hello world", parser.create_state())

        assert result.segments == [TextSegment("Hello world")]
        assert result.is_buffering is False
        assert result.state.buffer == ""

    def test_stray_angle_bracket_is_not_held(self, parser: TagParser) -> None:
        result = parser.parse_chunk("a < b", parser.create_state())

        assert result.segments == [TextSegment("a < b")]
        assert result.is_buffering is False

    def test_trailing_angle_bracket_is_held(self, parser: TagParser) -> None:
        result = parser.parse_chunk("a <", parser.create_state())

        assert result.segments == [TextSegment("a ")]
        assert result.state.buffer == "<"

    def test_trailing_partial_entity_is_held(self, parser: TagParser) -> None:
        first = parser.parse_chunk("A &am", parser.create_state())
        second = parser.parse_chunk("p; B", first.state)

        assert first.segments == [TextSegment("A ")]
        assert second.segments == [TextSegment("& B")]

    def test_self_closing_tag_is_emitted_without_entering_tag(
        self, parser: TagParser
    ) -> None:
        result = parser.parse_chunk('x<image src="a.png"/>y', parser.create_state())

        assert result.segments == [
            TextSegment("x"),
            TagSegment(type="image", content="", attributes={"src": "a.png", "alt": None}),
            TextSegment("y"),
        ]
        assert result.state.in_tag is False

    def test_opening_tag_longer_than_window_is_emitted_as_text(
        self, registry: TagRegistry
    ) -> None:
        parser = create_parser(registry, config=ParserConfig(lookback_window=8))

        result = parser.parse_chunk('<callout type="info"', parser.create_state())

        assert result.segments == [TextSegment('<callout type="info"')]
        assert result.is_buffering is False


class TestInTag:
    def test_several_tags_in_one_chunk(self, parser: TagParser) -> None:
        result = parser.parse_chunk(
            '<callout type="info">a</callout>-<callout type="error">b</callout>',
            parser.create_state(),
        )

        assert [s.content for s in result.segments] == ["a", "-", "b"]
        assert result.state.in_tag is False

    def test_close_tag_split_across_chunks(self, parser: TagParser) -> None:
        state = parser.parse_chunk('<callout type="info">body</cal', parser.create_state()).state
        result = parser.parse_chunk("lout>", state)

        assert result.segments == [
            TagSegment(type="callout", content="body", attributes={"type": "info"})
        ]

    def test_partial_segment_grows(self, parser: TagParser) -> None:
        state = parser.create_state()
        previews = []
        for chunk in ['<callout type="info">A', " &amp;", " B"]:
            result = parser.parse_chunk(chunk, state)
            state = result.state
            previews.append(result.partial_segment.content)

        assert previews == ["A", "A &", "A & B"]

    def test_partial_segment_keeps_raw_attributes_on_rejection(
        self, parser: TagParser
    ) -> None:
        result = parser.parse_chunk('<callout type="odd">x', parser.create_state())

        assert result.partial_segment == PartialSegment(
            type="callout", content="x", attributes={"type": "odd"}
        )

    def test_tag_start_offset_is_stream_offset(self, parser: TagParser) -> None:
        state = parser.parse_chunk("0123", parser.create_state()).state
        result = parser.parse_chunk('45<chart kind="bar">', state)

        assert result.state.tag_start_offset == 6
        assert result.state.open_tag_text == '<chart kind="bar">'
        assert result.state.buffer == ""


class TestFinalize:
    def test_fresh_state_yields_nothing(self, parser: TagParser) -> None:
        assert parser.finalize(parser.create_state()) == []

    def test_unterminated_tag_becomes_text(self, parser: TagParser) -> None:
        result = parser.parse_chunk('Hi <callout type="info">A &amp; B', parser.create_state())

        assert result.segments == [TextSegment("Hi ")]
        assert parser.finalize(result.state) == [
            TextSegment('<callout type="info">A & B')
        ]

    def test_held_back_fragment_becomes_text(self, parser: TagParser) -> None:
        result = parser.parse_chunk("tail <call", parser.create_state())

        assert parser.finalize(result.state) == [TextSegment("<call")]

    def test_tags_inside_unterminated_body_are_recognized(self, parser: TagParser) -> None:
        result = parser.parse_chunk(
            '<callout type="info">a <image src="x.png"/> b', parser.create_state()
        )

        assert result.segments == []
        assert parser.finalize(result.state) == [
            TextSegment('<callout type="info">a '),
            TagSegment(type="image", content="", attributes={"src": "x.png", "alt": None}),
            TextSegment(" b"),
        ]


class TestState:
    def test_state_is_replaced_not_mutated(self, parser: TagParser) -> None:
        state = parser.create_state()
        result = parser.parse_chunk("Hello <call", state)

        assert state == ParserState()
        assert result.state is not state

    def test_state_rejects_inconsistent_tag_fields(self) -> None:
        with pytest.raises(ValueError, match="in_tag"):
            ParserState(in_tag=True)
        with pytest.raises(ValueError, match="in_tag"):
            ParserState(current_tag_name="callout")

    def test_one_parser_serves_interleaved_streams(self, parser: TagParser) -> None:
        a_chunks = ["<callout type='info'>first", " stream</callout>"]
        b_chunks = ["second <ima", "ge src='b.png'/> stream"]
        a_state = parser.create_state()
        b_state = parser.create_state()
        a_segments: list[Segment] = []
        b_segments: list[Segment] = []

        for a_chunk, b_chunk in zip(a_chunks, b_chunks):
            a_result = parser.parse_chunk(a_chunk, a_state)
            b_result = parser.parse_chunk(b_chunk, b_state)
            a_state, b_state = a_result.state, b_result.state
            a_segments.extend(a_result.segments)
            b_segments.extend(b_result.segments)

        assert coalesce_segments(a_segments) == parser.parse("".join(a_chunks))
        assert coalesce_segments(b_segments) == parser.parse("".join(b_chunks))
