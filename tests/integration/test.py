"""Integration tests for the validate, stream and repair pipeline.

These tests wire the default catalog through every component the way a
generation service would: stream tokens, finalize, repair what is broken
and validate again.
"""

import copy
import json

import pytest

from src.catalog import build_default_catalog
from src.diagnostics import Confidence, FixKind
from src.fixer import FixerConfig, fix_ui_description
from src.pipeline import SchemaEngine
from src.streaming import StreamingValidator, stream_validate
from src.validation import SchemaValidator


@pytest.fixture(scope="module")
def engine():
    return SchemaEngine(
        build_default_catalog(), fixer_config=FixerConfig(id_suffix=""), strict=False
    )


class TestTypoRepair:
    """A misspelled root type is repaired end to end."""

    @pytest.mark.unit
    def test_containr_document(self, engine):
        raw = {"root": {"type": "Containr", "props": {}}}

        before = engine.validate(raw)
        assert not before.valid
        assert {"MISSING_VERSION", "UNKNOWN_COMPONENT", "MISSING_ID"} <= set(
            before.codes()
        )

        fix = engine.fix(raw)
        assert [(c.kind, c.confidence) for c in fix.changes] == [
            (FixKind.ADD_VERSION, Confidence.HIGH),
            (FixKind.FIX_TYPE, Confidence.HIGH),
            (FixKind.ADD_ID, Confidence.HIGH),
        ]
        assert fix.fixed["root"]["type"] == "Container"
        assert engine.validate(fix.fixed).valid

    @pytest.mark.unit
    def test_input_not_mutated(self, engine):
        raw = {"root": {"type": "Containr", "props": {}}}
        snapshot = copy.deepcopy(raw)
        engine.repair(raw)
        assert raw == snapshot

    @pytest.mark.unit
    def test_module_function_matches_engine(self, engine):
        raw = {"root": {"type": "btn", "children": [{"type": "Txt"}]}}
        config = FixerConfig(id_suffix="")
        assert fix_ui_description(raw, engine.catalog, config) == engine.fix(raw)


class TestStreamingSession:
    """Streaming warnings agree with the final verdict."""

    BOUTON = '{"version": "1.0", "root": {"id": "b", "type": "Bouton"}}'

    @pytest.mark.unit
    @pytest.mark.parametrize("chunk_size", [1, 2, 5, 17, 1000])
    def test_bouton_warns_once_under_any_chunking(self, engine, chunk_size):
        seen = []
        result = stream_validate(
            self.BOUTON, engine.catalog, chunk_size=chunk_size, on_warning=seen.append
        )

        assert [w.value for w in seen] == ["Bouton"]
        assert seen[0].position == self.BOUTON.index('"type"')
        assert "UNKNOWN_COMPONENT" in result.codes()

    @pytest.mark.unit
    def test_stream_then_repair(self, engine):
        session = engine.open_stream()
        for start in range(0, len(self.BOUTON), 4):
            session.feed(self.BOUTON[start : start + 4])
        assert not session.finalize().valid

        outcome = engine.repair(session.buffer)
        assert outcome.valid
        assert outcome.document["root"]["type"] == "Button"

    @pytest.mark.unit
    def test_truncated_stream_repaired_from_prefix(self, engine):
        text = '{"version": "1.0", "root": {"id": "card", "type": "Card", "children": ['
        session = StreamingValidator(engine.catalog, engine.validator)
        session.feed(text)

        assert session.finalize().codes() == ["INVALID_JSON"]
        outcome = engine.repair(text)
        assert outcome.valid
        assert outcome.document["root"]["children"] == []


class TestLoginForm:
    """The shared login form survives every stage unchanged."""

    @pytest.mark.unit
    def test_strict_validation(self, valid_document):
        validator = SchemaValidator(build_default_catalog(), strict=True)
        assert validator.validate(valid_document).valid

    @pytest.mark.unit
    def test_streamed_in_small_chunks(self, engine, valid_document):
        text = json.dumps(valid_document)
        result = stream_validate(text, engine.catalog, chunk_size=7)

        assert result.valid
        assert result.warnings == []

    @pytest.mark.unit
    def test_repair_is_noop(self, engine, valid_document):
        outcome = engine.repair(json.dumps(valid_document))

        assert outcome.valid
        assert outcome.fix is None
        assert not engine.can_fix(valid_document)
