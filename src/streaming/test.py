"""Unit tests for streaming module."""

import json

import pytest
from hypothesis import given, settings, strategies as st

from src.catalog import build_default_catalog
from src.diagnostics import DiagnosticCode, Severity
from src.streaming import (
    StreamingValidator,
    StreamingWarning,
    WarningKind,
    stream_validate,
)
from src.validation import SchemaValidator

BOUTON = '{"version": "1.0", "root": {"id": "a", "type": "Bouton", "props": {}}}'
BUTTON = '{"version": "1.0", "root": {"id": "a", "type": "Button", "props": {}}}'


def _chunks(text: str, cuts: list[int]) -> list[str]:
    points = sorted({c % (len(text) + 1) for c in cuts})
    bounds = [0, *points, len(text)]
    return [text[a:b] for a, b in zip(bounds, bounds[1:])]


@pytest.fixture
def session(catalog):
    return StreamingValidator(catalog, overlap=64)


class TestFeed:
    """Type declarations detected while streaming."""

    @pytest.mark.unit
    def test_unknown_type_warns(self, session):
        new = session.feed(BOUTON)

        assert [w.value for w in new] == ["Bouton"]
        warning = new[0]
        assert warning.kind is WarningKind.UNKNOWN_COMPONENT
        assert warning.position == BOUTON.index('"type"')
        assert warning.message == 'Unknown component type "Bouton" detected in stream'

    @pytest.mark.unit
    @pytest.mark.parametrize("type_name", ["Button", "btn", "BTN", "div"])
    def test_resolvable_types_never_warn(self, session, type_name):
        session.feed(json.dumps({"root": {"type": type_name}}))
        assert session.get_warnings() == []

    @pytest.mark.unit
    def test_single_quotes_and_spacing(self, session):
        session.feed("{'type'  :   'Bouton'}")

        warnings = session.get_warnings()
        unknown = [w.value for w in warnings if w.kind is WarningKind.UNKNOWN_COMPONENT]
        assert unknown == ["Bouton"]

    @pytest.mark.unit
    def test_declaration_split_across_chunks(self, session):
        session.feed('{"root": {"type": "Bou')
        assert session.get_warnings() == []

        session.feed('ton"}}')
        assert [w.value for w in session.get_warnings()] == ["Bouton"]

    @pytest.mark.unit
    def test_no_overlap_misses_split_declaration(self, catalog):
        session = StreamingValidator(catalog, overlap=0)
        session.feed('{"root": {"type": "Bou')
        session.feed('ton"}}')
        assert session.get_warnings() == []

    @pytest.mark.unit
    def test_deduplicated_by_position(self, session):
        text = '[{"type": "Bouton"}, {"type": "Bouton"}]'
        for ch in text:
            session.feed(ch)

        warnings = session.get_warnings()
        assert [w.value for w in warnings] == ["Bouton", "Bouton"]
        assert warnings[0].position != warnings[1].position

    @pytest.mark.unit
    def test_empty_chunk(self, session):
        assert session.feed("") == []
        assert session.buffer == ""

    @pytest.mark.unit
    def test_callback_once_per_warning(self, catalog):
        seen = []
        session = StreamingValidator(catalog, on_warning=seen.append)
        for ch in BOUTON:
            session.feed(ch)
        assert [w.value for w in seen] == ["Bouton"]

    @pytest.mark.unit
    def test_structural_warning_once(self, session):
        session.feed('{"root": }')
        session.feed(', "more": ]')

        warnings = session.get_warnings()
        assert [w.kind for w in warnings] == [WarningKind.INVALID_STRUCTURE]
        assert warnings[0].position == 9
        assert "Malformed JSON" in warnings[0].message

    @pytest.mark.unit
    def test_negative_overlap_rejected(self, catalog):
        with pytest.raises(ValueError, match="overlap"):
            StreamingValidator(catalog, overlap=-1)


class TestSessionState:
    """Snapshot and reset semantics."""

    @pytest.mark.unit
    def test_get_warnings_is_snapshot(self, session):
        session.feed(BOUTON)
        snapshot = session.get_warnings()
        snapshot.clear()
        assert len(session.get_warnings()) == 1
        assert session.get_warnings() == session.get_warnings()

    @pytest.mark.unit
    def test_buffer_accumulates(self, session):
        session.feed('{"a"')
        session.feed(": 1}")
        assert session.buffer == '{"a": 1}'

    @pytest.mark.unit
    def test_reset(self, session):
        session.feed(BOUTON)
        session.reset()

        assert session.get_warnings() == []
        assert session.buffer == ""

        session.feed(BOUTON)
        assert len(session.get_warnings()) == 1
        assert session.finalize().codes() == ["UNKNOWN_COMPONENT"]

    @pytest.mark.unit
    def test_reset_is_idempotent(self, session):
        session.reset()
        session.reset()
        assert session.get_warnings() == []


class TestFinalize:
    """Definitive results once the stream ends."""

    @pytest.mark.unit
    def test_valid_document(self, session, valid_document):
        session.feed(json.dumps(valid_document))

        result = session.finalize()

        assert result.valid
        assert result.warnings == []
        assert result.parsed == valid_document

    @pytest.mark.unit
    def test_property_type_values_not_merged(self, session, valid_document):
        """An Input's ``"type": "email"`` warns mid-stream but not at the end."""
        session.feed(json.dumps(valid_document))

        assert [w.value for w in session.get_warnings()] == ["email"]
        assert session.finalize().warnings == []

    @pytest.mark.unit
    def test_unknown_type_reported_by_validator(self, session):
        session.feed(BOUTON)

        result = session.finalize()

        assert result.codes() == ["UNKNOWN_COMPONENT"]
        assert result.errors[0].path == "root.type"
        assert "Button" in result.errors[0].suggestion

    @pytest.mark.unit
    def test_declaration_outside_tree_merged(self, session):
        document = {
            "version": "1.0",
            "root": {"id": "a", "type": "Container", "props": {}},
            "meta": {"type": "Widget"},
        }
        session.feed(json.dumps(document))

        result = session.finalize()

        assert result.valid
        assert [d.code for d in result.warnings] == [DiagnosticCode.UNKNOWN_COMPONENT]
        assert result.warnings[0].suggestion == 'Check component type "Widget"'

    @pytest.mark.unit
    def test_truncated_stream(self, session):
        session.feed('{"root": {"type": "Bouton"')

        result = session.finalize()

        assert not result.valid
        assert [d.code for d in result.errors] == [DiagnosticCode.INVALID_JSON]
        assert "stream ended" in result.errors[0].message
        assert [d.code for d in result.warnings] == [DiagnosticCode.UNKNOWN_COMPONENT]
        assert result.warnings[0].severity is Severity.WARNING
        assert result.parsed == {"root": {"type": "Bouton"}}

    @pytest.mark.unit
    def test_malformed_stream(self, session):
        session.feed('{"root": }')

        result = session.finalize()

        assert [d.code for d in result.errors] == [DiagnosticCode.INVALID_JSON]
        assert result.errors[0].message.startswith("Invalid JSON:")
        assert result.warnings == []

    @pytest.mark.unit
    def test_empty_stream(self, session):
        result = session.finalize()

        assert result.codes() == ["INVALID_JSON"]
        assert "before any content" in result.errors[0].message

    @pytest.mark.unit
    def test_strict_validator_is_used(self, catalog):
        session = StreamingValidator(catalog, SchemaValidator(catalog, strict=True))
        session.feed('{"root": {"id": "a", "type": "Container"}}')

        result = session.finalize()

        assert result.codes() == ["MISSING_VERSION"]
        assert not result.valid


class TestStreamValidate:
    """One-call helper."""

    @pytest.mark.unit
    def test_chunked(self, catalog):
        seen = []
        result = stream_validate(BOUTON, catalog, chunk_size=3, on_warning=seen.append)

        assert result.codes() == ["UNKNOWN_COMPONENT"]
        assert [w.value for w in seen] == ["Bouton"]

    @pytest.mark.unit
    def test_whole_text(self, catalog):
        assert stream_validate(BUTTON, catalog).valid

    @pytest.mark.unit
    def test_invalid_chunk_size(self, catalog):
        with pytest.raises(ValueError, match="chunk_size"):
            stream_validate(BUTTON, catalog, chunk_size=0)


class TestStreamingWarning:
    """Warning records."""

    @pytest.mark.unit
    def test_to_dict(self):
        warning = StreamingWarning(WarningKind.UNKNOWN_COMPONENT, "m", "X", 4)
        assert warning.to_dict() == {
            "kind": "unknown_component",
            "message": "m",
            "value": "X",
            "position": 4,
        }

    @pytest.mark.unit
    def test_structural_diagnostic(self):
        warning = StreamingWarning(WarningKind.INVALID_STRUCTURE, "bad", "", 0)
        diagnostic = warning.to_diagnostic()
        assert diagnostic.code is DiagnosticCode.INVALID_JSON
        assert diagnostic.severity is Severity.WARNING


# =============================================================================
# Properties
# =============================================================================

_CATALOG = build_default_catalog()


class TestChunkingProperties:
    """Warnings do not depend on how the stream is chunked."""

    @pytest.mark.unit
    @settings(deadline=None)
    @given(st.lists(st.integers(min_value=0), max_size=20))
    def test_unknown_type_warns_under_any_chunking(self, cuts):
        session = StreamingValidator(_CATALOG, overlap=64)
        for chunk in _chunks(BOUTON, cuts):
            session.feed(chunk)

        warnings = session.get_warnings()
        assert [w.value for w in warnings] == ["Bouton"]
        assert warnings[0].position == BOUTON.index('"type"')

    @pytest.mark.unit
    @settings(deadline=None)
    @given(st.lists(st.integers(min_value=0), max_size=20))
    def test_registered_type_never_warns(self, cuts):
        session = StreamingValidator(_CATALOG, overlap=64)
        for chunk in _chunks(BUTTON, cuts):
            session.feed(chunk)

        assert session.get_warnings() == []
        assert session.finalize().valid

    @pytest.mark.unit
    @settings(deadline=None)
    @given(st.sampled_from(_CATALOG.get_valid_types()), st.lists(st.integers(0), max_size=10))
    def test_finalize_matches_one_shot(self, type_name, cuts):
        text = json.dumps({"version": "1.0", "root": {"id": "x", "type": type_name}})
        session = StreamingValidator(_CATALOG, overlap=64)
        for chunk in _chunks(text, cuts):
            session.feed(chunk)

        assert session.finalize().codes() == stream_validate(text, _CATALOG).codes()
