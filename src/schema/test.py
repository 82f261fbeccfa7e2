"""Unit tests for the Schema module."""

import json

import pytest

from src.catalog import PropertySchema, ValueKind
from src.schema import (
    JSON_TYPES,
    UIDocumentSchema,
    UINodeSchema,
    component_props_schema,
    export_component_enum_schema,
    export_json_schema,
    export_llm_schema,
    property_json_schema,
)
from src.validation import SchemaValidator


class TestSchemaModels:
    """Tests for the pydantic wire-shape models."""

    @pytest.mark.unit
    def test_document_model_accepts_valid_document(self, valid_document):
        model = UIDocumentSchema.model_validate(valid_document)
        assert model.root.type == "Card"
        assert model.root.children[0].children == ["Sign in"]

    @pytest.mark.unit
    def test_node_defaults(self):
        node = UINodeSchema(id="a", type="Card")
        assert node.props == {}
        assert node.children is None

    @pytest.mark.unit
    def test_empty_id_rejected(self):
        with pytest.raises(ValueError):
            UINodeSchema(id="", type="Card")


class TestPropertySchemas:
    """Tests for per-property JSON Schema fragments."""

    @pytest.mark.unit
    def test_every_kind_mapped(self):
        assert set(JSON_TYPES) == set(ValueKind)

    @pytest.mark.unit
    def test_enum_fragment(self):
        schema = PropertySchema(
            value_kind=ValueKind.STRING,
            allowed_values=("single", "multiple"),
            default_value="single",
            description="Selection mode",
        )
        assert property_json_schema(schema) == {
            "type": "string",
            "enum": ["single", "multiple"],
            "default": "single",
            "description": "Selection mode",
        }

    @pytest.mark.unit
    def test_function_is_string_reference(self):
        fragment = property_json_schema(PropertySchema(value_kind=ValueKind.FUNCTION))
        assert fragment == {"type": "string"}

    @pytest.mark.unit
    def test_required_properties_listed(self, catalog):
        schema = component_props_schema(catalog.get_entry("Image"))
        assert schema["required"] == ["src"]
        assert schema["properties"]["alt"]["type"] == "string"

    @pytest.mark.unit
    def test_no_required_key_when_none_required(self, catalog):
        assert "required" not in component_props_schema(catalog.get_entry("Card"))


class TestJsonSchemaExport:
    """Tests for export_json_schema."""

    @pytest.mark.unit
    def test_document_fields_required(self, catalog):
        schema = export_json_schema(catalog)
        assert set(schema["required"]) == {"version", "root"}

    @pytest.mark.unit
    def test_type_enum_is_catalog(self, catalog):
        node = export_json_schema(catalog)["$defs"]["UINodeSchema"]
        assert node["properties"]["type"]["enum"] == catalog.get_valid_types()

    @pytest.mark.unit
    def test_props_clause_per_component(self, catalog):
        node = export_json_schema(catalog)["$defs"]["UINodeSchema"]
        clauses = {c["if"]["properties"]["type"]["const"]: c["then"] for c in node["allOf"]}

        assert set(clauses) == set(catalog.get_valid_types())
        button = clauses["Button"]["properties"]["props"]["properties"]
        assert "outline" in button["variant"]["enum"]

    @pytest.mark.unit
    def test_serializable(self, catalog):
        assert json.loads(json.dumps(export_json_schema(catalog)))


class TestLlmSchemaExport:
    """Tests for export_llm_schema."""

    @pytest.mark.unit
    def test_sections(self, catalog):
        schema = export_llm_schema(catalog)
        assert set(schema) == {
            "schema",
            "component_types",
            "categories",
            "properties",
            "aliases",
            "deprecated",
            "constraints",
            "examples",
        }

    @pytest.mark.unit
    def test_component_descriptions(self, catalog):
        types = export_component_enum_schema(catalog)
        assert list(types) == catalog.get_valid_types()
        assert all(types.values())

    @pytest.mark.unit
    def test_aliases_and_deprecations(self, catalog):
        schema = export_llm_schema(catalog)
        assert schema["aliases"]["btn"] == "Button"
        assert schema["deprecated"] == {
            "Spacer": "Use Container with the gap property instead"
        }

    @pytest.mark.unit
    def test_categories(self, catalog):
        categories = export_llm_schema(catalog)["categories"]
        assert "Button" in categories["input"]
        assert "Container" in categories["layout"]

    @pytest.mark.unit
    def test_examples_are_valid(self, catalog):
        """Examples shown to the generator pass validation."""
        validator = SchemaValidator(catalog, strict=True)
        for name, example in export_llm_schema(catalog)["examples"].items():
            result = validator.validate(example)
            assert result.valid, (name, result.codes())
