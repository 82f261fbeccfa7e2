"""JSON Schema exports of the UI description format.

The pydantic models here describe the wire shape of a UI description for
schema generation and prompt injection only. Validation works on raw data
(see src.validation) so that malformed documents can be diagnosed instead
of rejected.
"""

from typing import Any

from pydantic import BaseModel, Field

from src.catalog import CatalogEntry, ComponentCatalog, PropertySchema, ValueKind

# JSON Schema type for each property value kind. Functions cannot travel
# through JSON, so handlers are referenced by name.
JSON_TYPES: dict[ValueKind, str] = {
    ValueKind.STRING: "string",
    ValueKind.NUMBER: "number",
    ValueKind.BOOLEAN: "boolean",
    ValueKind.OBJECT: "object",
    ValueKind.ARRAY: "array",
    ValueKind.FUNCTION: "string",
}


# === SCHEMA MODELS ===


class UINodeSchema(BaseModel):
    """Pydantic model for UINode JSON Schema generation."""

    id: str = Field(
        ...,
        min_length=1,
        description="Unique identifier within the document (e.g., 'header', 'submit-btn')",
        examples=["root", "header", "login-card", "submit"],
    )
    type: str = Field(
        ...,
        description="Registered component type name",
        examples=["Container", "Card", "Button", "Input"],
    )
    props: dict[str, Any] = Field(
        default_factory=dict,
        description="Component properties; see the component's property schema",
    )
    children: list["UINodeSchema | str"] | None = Field(
        default=None,
        description="Ordered child nodes or literal text",
    )


class UIDocumentSchema(BaseModel):
    """Pydantic model for a complete UI description."""

    version: str = Field(
        ...,
        description="Description format version",
        examples=["1.0"],
    )
    root: UINodeSchema = Field(..., description="Top-level component")


UINodeSchema.model_rebuild()


# === SCHEMA GENERATION ===


def property_json_schema(schema: PropertySchema) -> dict[str, Any]:
    """Convert a PropertySchema to a JSON Schema fragment."""
    fragment: dict[str, Any] = {"type": JSON_TYPES[schema.value_kind]}
    if schema.allowed_values:
        fragment["enum"] = list(schema.allowed_values)
    if schema.default_value is not None:
        fragment["default"] = schema.default_value
    if schema.description:
        fragment["description"] = schema.description
    return fragment


def component_props_schema(entry: CatalogEntry) -> dict[str, Any]:
    """JSON Schema of the ``props`` object for one component."""
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {
            name: property_json_schema(prop) for name, prop in entry.property_schemas.items()
        },
    }
    if entry.required_properties:
        schema["required"] = entry.required_properties
    return schema


def export_json_schema(catalog: ComponentCatalog) -> dict[str, Any]:
    """Export the UI description JSON Schema.

    The node ``type`` is constrained to the catalog's canonical names, and
    each component's ``props`` schema is attached with an ``if``/``then``
    clause keyed on ``type``. Aliases are accepted by the validator but are
    deliberately absent here so generators emit canonical names.

    Args:
        catalog: Catalog supplying component types and property schemas.

    Returns:
        JSON Schema dict suitable for validation or LLM prompts.
    """
    schema = UIDocumentSchema.model_json_schema()
    node = schema["$defs"]["UINodeSchema"]
    node["properties"]["type"]["enum"] = catalog.get_valid_types()
    node["allOf"] = [
        {
            "if": {"properties": {"type": {"const": entry.canonical_name}}},
            "then": {"properties": {"props": component_props_schema(entry)}},
        }
        for entry in catalog.entries()
    ]
    return schema


def export_component_enum_schema(catalog: ComponentCatalog) -> dict[str, str]:
    """Map each component type to its description."""
    return {entry.canonical_name: entry.description for entry in catalog.entries()}


def export_llm_schema(catalog: ComponentCatalog) -> dict[str, Any]:
    """Export an LLM-optimized schema with examples and constraints.

    This schema is designed for injection into LLM prompts to guide
    structured JSON output generation.

    Args:
        catalog: Catalog supplying component types and property schemas.

    Returns:
        Dict with schema, component descriptions, and usage examples.
    """
    entries = catalog.entries()
    return {
        "schema": export_json_schema(catalog),
        "component_types": export_component_enum_schema(catalog),
        "categories": catalog.get_by_category(),
        "properties": {
            entry.canonical_name: {
                name: property_json_schema(prop)
                for name, prop in entry.property_schemas.items()
            }
            for entry in entries
        },
        "aliases": catalog.get_aliases(),
        "deprecated": {
            entry.canonical_name: entry.deprecation_message or "Deprecated"
            for entry in entries
            if entry.deprecated
        },
        "constraints": {
            "id": "Must be a non-empty string, unique within the tree",
            "type": "Must be one of component_types; aliases are normalized",
            "props": "Required properties must be present; enum values must match exactly",
        },
        "examples": {
            "login_form": {
                "version": "1.0",
                "root": {
                    "id": "login-card",
                    "type": "Card",
                    "props": {},
                    "children": [
                        {"id": "title", "type": "CardTitle", "props": {}, "children": ["Sign in"]},
                        {
                            "id": "email",
                            "type": "Input",
                            "props": {"type": "email", "placeholder": "Email"},
                        },
                        {
                            "id": "submit",
                            "type": "Button",
                            "props": {"variant": "default"},
                            "children": ["Sign in"],
                        },
                    ],
                },
            },
        },
    }


__all__ = [
    "JSON_TYPES",
    "UIDocumentSchema",
    "UINodeSchema",
    "component_props_schema",
    "export_component_enum_schema",
    "export_json_schema",
    "export_llm_schema",
    "property_json_schema",
]
