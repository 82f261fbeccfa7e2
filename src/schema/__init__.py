"""Schema module - JSON Schema exports of the UI description format.

This module provides:
- Pydantic models of the document and node wire shape
- JSON Schema generation constrained by a component catalog
- LLM-optimized schema exports for prompt injection

Example usage:
    >>> from src.catalog import build_default_catalog
    >>> from src.schema import export_llm_schema
    >>> schema = export_llm_schema(build_default_catalog())  # For LLM prompt injection
"""

from .lib import (
    JSON_TYPES,
    UIDocumentSchema,
    UINodeSchema,
    component_props_schema,
    export_component_enum_schema,
    export_json_schema,
    export_llm_schema,
    property_json_schema,
)

__all__ = [
    # Models
    "UIDocumentSchema",
    "UINodeSchema",
    # Schema generation
    "JSON_TYPES",
    "component_props_schema",
    "export_component_enum_schema",
    "export_json_schema",
    "export_llm_schema",
    "property_json_schema",
]
