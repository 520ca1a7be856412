import pytest

from llm_tags.parsing.entities import decode_entities, partial_entity_start


class TestDecodeEntities:
    def test_decodes_the_four_entities(self) -> None:
        assert decode_entities("&lt;a&gt; &amp; &quot;b&quot;") == '<a> & "b"'

    def test_text_without_entities_is_unchanged(self) -> None:
        assert decode_entities("plain text") == "plain text"

    def test_decoded_output_is_not_rescanned(self) -> None:
        assert decode_entities("&amp;lt;") == "&lt;"
        assert decode_entities("&amp;quot;") == "&quot;"

    def test_unknown_and_numeric_entities_pass_through(self) -> None:
        assert decode_entities("&apos; &#60; &#x3C; &nbsp;") == "&apos; &#60; &#x3C; &nbsp;"

    def test_entities_are_case_sensitive(self) -> None:
        assert decode_entities("&LT;") == "&LT;"

    @pytest.mark.parametrize("text", ["a < b", "x > y", 'say "hi"', "AT&T", ""])
    def test_decoding_is_idempotent_without_entities(self, text: str) -> None:
        once = decode_entities(text)
        assert decode_entities(once) == once


class TestPartialEntityStart:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("AT&", 2),
            ("AT&am", 2),
            ("x &quo", 2),
            ("&lt", 0),
        ],
    )
    def test_trailing_prefix_is_found(self, text: str, expected: int) -> None:
        assert partial_entity_start(text) == expected

    @pytest.mark.parametrize("text", ["", "plain", "AT&T", "&amp;", "& b", "&ltx"])
    def test_no_prefix(self, text: str) -> None:
        assert partial_entity_start(text) == -1
