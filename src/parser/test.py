"""Unit tests for the incremental parser."""

import json

import pytest
from hypothesis import given, settings, strategies as st

from src.parser import IncrementalParser, parse_incremental

DOCUMENT = (
    '{"version": "1.0", "root": {"id": "root", "type": "Container", '
    '"props": {"gap": 4, "ratio": -1.5e2, "on": true, "off": false, "x": null}, '
    '"children": ["hi \\"there\\"", {"id": "b", "type": "Button", '
    '"props": {"label": "caf\\u00e9 \\ud83d\\ude00"}}]}}'
)


class TestOneShot:
    """Tests for parse_incremental on whole and truncated text."""

    @pytest.mark.unit
    def test_complete_document(self):
        result = parse_incremental(DOCUMENT)
        assert result.partial is False
        assert result.error is None
        assert result.complete
        assert result.value == json.loads(DOCUMENT)

    @pytest.mark.unit
    def test_empty_buffer(self):
        result = parse_incremental("")
        assert result.partial is True
        assert result.value is None
        assert result.error is None

    @pytest.mark.unit
    def test_whitespace_only(self):
        assert parse_incremental("  \n ").partial is True

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("42", 42),
            ("-0.5", -0.5),
            ("1e3", 1000.0),
            ('"text"', "text"),
            ("true", True),
            ("null", None),
            ("[]", []),
            ("{}", {}),
        ],
    )
    def test_top_level_scalars(self, text, expected):
        result = parse_incremental(text)
        assert result.complete
        assert result.value == expected

    @pytest.mark.unit
    def test_truncated_object_closes_open_containers(self):
        result = parse_incremental('{"root": {"id": "a", "children": [{"id": "b"')
        assert result.partial is True
        assert result.error is None
        assert result.value == {"root": {"id": "a", "children": [{"id": "b"}]}}

    @pytest.mark.unit
    def test_truncated_string_value(self):
        result = parse_incremental('{"type": "Butt')
        assert result.value == {"type": "Butt"}
        assert result.pending_path == "$.type"

    @pytest.mark.unit
    def test_truncated_key_omitted(self):
        result = parse_incremental('{"id": "a", "ty')
        assert result.value == {"id": "a"}

    @pytest.mark.unit
    def test_key_without_value_omitted(self):
        assert parse_incremental('{"id": "a", "type":').value == {"id": "a"}
        assert parse_incremental('{"id": "a", "type"').value == {"id": "a"}

    @pytest.mark.unit
    def test_dangling_escape_dropped(self):
        assert parse_incremental('["ab\\').value == ["ab"]

    @pytest.mark.unit
    def test_incomplete_unicode_escape_dropped(self):
        assert parse_incremental('["ab\\u00').value == ["ab"]

    @pytest.mark.unit
    def test_unpaired_high_surrogate_dropped_while_partial(self):
        assert parse_incremental('["\\ud83d').value == [""]

    @pytest.mark.unit
    def test_truncated_number_uses_valid_prefix(self):
        assert parse_incremental("[1.").value == [1]
        assert parse_incremental("[2e").value == [2]
        assert parse_incremental("[-").value == []

    @pytest.mark.unit
    def test_truncated_literal(self):
        assert parse_incremental('{"on": tr').value == {"on": True}

    @pytest.mark.unit
    def test_trailing_whitespace_is_complete(self):
        assert parse_incremental('{"a": 1}\n  ').complete


class TestErrors:
    """Malformed input is an error, not a partial result."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text,fragment",
        [
            ('{"a": 1}}', "after end of document"),
            ("}", "Unexpected character"),
            ('{"a" 1}', "Expected ':'"),
            ('{"a": 1 "b": 2}', "Expected ','"),
            ("[1, 2}", "Expected ','"),
            ('{"a": "\\x"}', "Invalid escape"),
            ('{"a": "\\u12g4"}', "Invalid unicode"),
            ("[01]", "Invalid number"),
            ("[1.]", "Invalid number"),
            ("[1, ]", "Unexpected character"),
            ("[tru]", "Invalid literal"),
            ("{1: 2}", "Expected property name"),
            ("[nulL]", "Invalid literal"),
        ],
    )
    def test_malformed(self, text, fragment):
        result = parse_incremental(text)
        assert result.partial is False
        assert result.error is not None
        assert fragment in result.error.message

    @pytest.mark.unit
    def test_error_position(self):
        result = parse_incremental('{\n  "a": 1,\n  }')
        assert result.error.line == 3
        assert result.error.column == 3
        assert result.error.position == 14

    @pytest.mark.unit
    def test_error_path(self):
        result = parse_incremental('{"root": {"children": [{"id": ]}}')
        assert result.error.path == "$.root.children[0].id"

    @pytest.mark.unit
    def test_max_depth(self):
        parser = IncrementalParser(max_depth=3)
        result = parser.feed("[[[[1]]]]")
        assert result.error is not None
        assert "depth" in result.error.message

    @pytest.mark.unit
    def test_max_depth_boundary(self):
        assert IncrementalParser(max_depth=3).feed("[[[1]]]").complete


class TestSession:
    """Tests for the resumable feed/resume/finish session."""

    @pytest.mark.unit
    def test_feed_accumulates(self):
        parser = IncrementalParser()
        assert parser.feed('{"version": "1.').value == {"version": "1."}
        result = parser.feed('0"}')
        assert result.complete
        assert result.value == {"version": "1.0"}

    @pytest.mark.unit
    def test_resume_alias(self):
        parser = IncrementalParser()
        parser.feed("[1, ")
        assert parser.resume("2]").value == [1, 2]

    @pytest.mark.unit
    def test_top_level_number_needs_finish(self):
        parser = IncrementalParser()
        assert parser.feed("12").partial is True
        assert parser.feed("3").value == 123
        result = parser.finish()
        assert result.complete
        assert result.value == 123

    @pytest.mark.unit
    def test_error_is_sticky(self):
        parser = IncrementalParser()
        parser.feed("]")
        result = parser.feed("[1]")
        assert result.error is not None
        assert parser.state.failed

    @pytest.mark.unit
    def test_reset_clears_error(self):
        parser = IncrementalParser()
        parser.feed("]")
        parser.reset()
        assert parser.feed("[1]").complete
        assert parser.buffer == "[1]"

    @pytest.mark.unit
    def test_reset_idempotent(self):
        parser = IncrementalParser()
        parser.reset()
        parser.reset()
        assert parser.state.position == 0

    @pytest.mark.unit
    def test_state_tracks_position(self):
        parser = IncrementalParser()
        parser.feed('{"a": [\n1')
        state = parser.state
        assert state.position == 9
        assert state.line == 2
        assert state.column == 2
        assert state.depth == 2
        assert state.pending_path == "$.a[0]"
        assert not state.complete

    @pytest.mark.unit
    def test_provisional_value_replaced(self):
        parser = IncrementalParser()
        parser.feed('["ab')
        parser.feed("c")
        result = parser.feed('", "d"]')
        assert result.value == ["abc", "d"]

    @pytest.mark.unit
    def test_buffer_kept(self):
        parser = IncrementalParser()
        parser.feed('{"a"')
        parser.feed(": 1}")
        assert parser.buffer == '{"a": 1}'


def _chunks(text: str, cuts: list[int]) -> list[str]:
    points = sorted({c % (len(text) + 1) for c in cuts})
    bounds = [0, *points, len(text)]
    return [text[a:b] for a, b in zip(bounds, bounds[1:])]


_json_values = st.recursive(
    st.none()
    | st.booleans()
    | st.integers(min_value=-(10**6), max_value=10**6)
    | st.floats(allow_nan=False, allow_infinity=False, width=32)
    | st.text(max_size=8),
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=6), children, max_size=4),
    max_leaves=20,
)


class TestChunkingProperties:
    """Chunked parsing equals one-shot parsing."""

    @pytest.mark.unit
    @settings(max_examples=200, deadline=None)
    @given(_json_values, st.lists(st.integers(min_value=0), max_size=12), st.booleans())
    def test_chunked_equals_one_shot(self, value, cuts, ensure_ascii):
        text = json.dumps(value, ensure_ascii=ensure_ascii)
        parser = IncrementalParser()
        for chunk in _chunks(text, cuts):
            parser.feed(chunk)
        result = parser.finish()
        assert result.complete
        assert result.value == parse_incremental(text).value == json.loads(text)

    @pytest.mark.unit
    @settings(max_examples=100, deadline=None)
    @given(_json_values, st.integers(min_value=0))
    def test_every_prefix_is_partial_or_complete(self, value, cut):
        text = json.dumps(value)
        prefix = text[: cut % (len(text) + 1)]
        result = parse_incremental(prefix)
        assert result.error is None
