"""Component Catalog - canonical registry of legal component types.

This module provides:
- Component and property definitions (pydantic models)
- A read-only catalog with alias resolution
- The bundled default component set

Example usage:
    >>> from src.catalog import build_default_catalog
    >>> catalog = build_default_catalog()
    >>> catalog.resolve("div")
    'Container'
"""

from .defaults import COMMON_PROPS, DEFAULT_COMPONENTS
from .lib import (
    CatalogEntry,
    CatalogError,
    ComponentCatalog,
    ComponentCategory,
    ComponentDefinition,
    PropertySchema,
    ValueKind,
    build_default_catalog,
    validate_component_definition,
)

__all__ = [
    # Definitions
    "ComponentCategory",
    "ComponentDefinition",
    "PropertySchema",
    "ValueKind",
    "validate_component_definition",
    # Catalog
    "CatalogEntry",
    "CatalogError",
    "ComponentCatalog",
    "build_default_catalog",
    # Defaults
    "COMMON_PROPS",
    "DEFAULT_COMPONENTS",
]
