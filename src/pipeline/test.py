"""Unit tests for pipeline module."""

import json

import pytest

from src.diagnostics import Confidence, DiagnosticCode, FixKind, ValidationResult
from src.fixer import FixerConfig
from src.pipeline import RepairOutcome, SchemaEngine
from src.streaming import StreamingValidator


@pytest.fixture
def engine(catalog):
    return SchemaEngine(catalog, fixer_config=FixerConfig(id_suffix=""), strict=False)


class TestSchemaEngine:
    """Pass-through operations share one catalog."""

    @pytest.mark.unit
    def test_default_catalog(self):
        engine = SchemaEngine(strict=False)
        assert "Button" in engine.catalog
        assert engine.validator.catalog is engine.catalog
        assert engine.fixer.catalog is engine.catalog

    @pytest.mark.unit
    def test_validator_follows_fixer_config(self, catalog):
        config = FixerConfig(medium_threshold=0.9, high_threshold=0.95, max_depth=7)
        engine = SchemaEngine(catalog, fixer_config=config, strict=False)
        raw = {
            "version": "1.0",
            "root": {"id": "a", "type": "Button", "props": {"variant": "outlin"}},
        }

        assert engine.validator.max_depth == 7
        assert engine.validator.enum_threshold == 0.9
        suggestion = engine.validate(raw).errors[0].suggestion
        assert not suggestion.startswith("Did you mean")
        assert not engine.can_fix(raw)

    @pytest.mark.unit
    def test_validate(self, engine, valid_document):
        assert engine.validate(valid_document).valid

    @pytest.mark.unit
    def test_fix_and_can_fix(self, engine):
        raw = {"root": {"type": "btn"}}
        assert engine.can_fix(raw)
        assert engine.fix(raw).fixed["root"]["type"] == "Button"

    @pytest.mark.unit
    def test_parse(self, engine):
        result = engine.parse('{"root": {"type": "Card"')
        assert result.partial
        assert result.value == {"root": {"type": "Card"}}

    @pytest.mark.unit
    def test_open_stream_uses_engine_validator(self, catalog):
        engine = SchemaEngine(catalog, strict=True)
        session = engine.open_stream()

        assert isinstance(session, StreamingValidator)
        session.feed('{"root": {"id": "a", "type": "Card"}}')
        assert session.finalize().codes() == ["MISSING_VERSION"]

    @pytest.mark.unit
    def test_open_stream_callback(self, engine):
        seen = []
        session = engine.open_stream(on_warning=seen.append)
        session.feed('{"type": "Bouton"}')
        assert [w.value for w in seen] == ["Bouton"]


class TestRepair:
    """Validate, fix, re-validate."""

    @pytest.mark.unit
    def test_repairs_text(self, engine):
        outcome = engine.repair('{"root": {"type": "Containr", "props": {}}}')

        assert not outcome.result.valid
        assert outcome.valid
        assert [c.kind for c in outcome.fix.changes] == [
            FixKind.ADD_VERSION,
            FixKind.FIX_TYPE,
            FixKind.ADD_ID,
        ]
        assert all(c.confidence is Confidence.HIGH for c in outcome.fix.changes)
        assert outcome.document["root"]["type"] == "Container"

    @pytest.mark.unit
    def test_valid_input_not_fixed(self, engine, valid_document):
        outcome = engine.repair(valid_document)

        assert outcome.valid
        assert outcome.fix is None
        assert outcome.revalidated is None
        assert outcome.document is valid_document

    @pytest.mark.unit
    def test_valid_text_not_fixed(self, engine, valid_document):
        outcome = engine.repair(json.dumps(valid_document))

        assert outcome.valid
        assert outcome.fix is None
        assert outcome.document == valid_document

    @pytest.mark.unit
    def test_malformed_text(self, engine):
        outcome = engine.repair('{"root": }')

        assert not outcome.valid
        assert outcome.fix is None
        assert outcome.document is None
        assert outcome.result.codes() == ["INVALID_JSON"]

    @pytest.mark.unit
    def test_empty_text(self, engine):
        outcome = engine.repair("   ")

        assert not outcome.valid
        assert "input ended before any content" in outcome.result.errors[0].message

    @pytest.mark.unit
    def test_truncated_text_repaired_from_prefix(self, engine):
        outcome = engine.repair('{"version": "1.0", "root": {"id": "a", "type": "btn"')

        assert outcome.result.codes() == ["INVALID_JSON"]
        assert "input ended while parsing" in outcome.result.errors[0].message
        assert outcome.valid
        assert outcome.document == {
            "version": "1.0",
            "root": {"id": "a", "type": "Button", "props": {}},
        }

    @pytest.mark.unit
    def test_strict_missing_version(self, catalog):
        engine = SchemaEngine(catalog, strict=True)
        outcome = engine.repair({"root": {"id": "a", "type": "Card"}})

        assert outcome.result.codes() == ["MISSING_VERSION"]
        assert outcome.valid
        assert outcome.document["version"] == "1.0"

    @pytest.mark.unit
    def test_unfixable_residue(self, engine):
        outcome = engine.repair({"version": "1.0", "root": {"id": "a", "type": "Zzzzzzzz"}})

        assert not outcome.valid
        assert [d.code for d in outcome.fix.unfixable] == [DiagnosticCode.UNKNOWN_COMPONENT]
        assert outcome.revalidated.codes() == ["UNKNOWN_COMPONENT"]


class TestRepairOutcome:
    """Outcome serialization."""

    @pytest.mark.unit
    def test_to_dict_is_json(self, engine):
        outcome = engine.repair({"root": {"type": "Buton"}})
        data = json.loads(json.dumps(outcome.to_dict()))

        assert data["valid"] is True
        assert data["document"]["root"]["type"] == "Button"
        assert data["result"]["valid"] is False
        assert data["fix"]["changes"][0]["kind"] == "add_version"
        assert data["revalidated"]["errors"] == []

    @pytest.mark.unit
    def test_to_dict_without_fix(self, minimal_document):
        outcome = RepairOutcome(result=ValidationResult(parsed=minimal_document))
        data = outcome.to_dict()

        assert data["fix"] is None
        assert data["revalidated"] is None
        assert data["document"] == minimal_document
