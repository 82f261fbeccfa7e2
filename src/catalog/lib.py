"""Component Catalog: the single source of truth for legal component types.

The catalog is built once from a sequence of ComponentDefinition objects and
is read-only afterwards. It answers three questions for the rest of the
engine:
- Is this type name legal (directly or through an alias)?
- What is its canonical name?
- Which properties does it accept, with which value kinds and enums?

Lookups never raise. Construction does: a definition set with duplicate
canonical names or colliding aliases is a configuration error.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class CatalogError(ValueError):
    """Raised when component definitions cannot form a consistent catalog."""


class ValueKind(str, Enum):
    """Value kinds a component property may declare."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    FUNCTION = "function"


class ComponentCategory(str, Enum):
    """High-level component groupings."""

    LAYOUT = "layout"
    INPUT = "input"
    DISPLAY = "display"
    FEEDBACK = "feedback"
    NAVIGATION = "navigation"
    UNCATEGORIZED = "uncategorized"


# =============================================================================
# Definitions (collaborator input)
# =============================================================================


class PropertySchema(BaseModel):
    """Schema for a single component property."""

    model_config = ConfigDict(frozen=True)

    value_kind: ValueKind = Field(..., description="Expected value kind")
    required: bool = Field(default=False, description="Property must be present")
    default_value: Any = Field(
        default=None, description="Value used by the fixer for missing required props"
    )
    allowed_values: tuple[str, ...] | None = Field(
        default=None, description="Ordered enum of legal string values"
    )
    description: str = Field(default="", description="Human-readable description")

    @field_validator("allowed_values")
    @classmethod
    def _non_empty_enum(cls, value: tuple[str, ...] | None) -> tuple[str, ...] | None:
        if value is not None and not value:
            raise ValueError("allowed_values must not be empty")
        return value


class ComponentDefinition(BaseModel):
    """A component as registered by a collaborator."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Canonical component type name")
    aliases: tuple[str, ...] = Field(
        default_factory=tuple, description="Alternative names (case-insensitive)"
    )
    property_schemas: dict[str, PropertySchema] = Field(default_factory=dict)
    category: ComponentCategory = ComponentCategory.UNCATEGORIZED
    description: str = ""
    deprecated: bool = False
    deprecation_message: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("component name must not be blank")
        return value

    @field_validator("aliases")
    @classmethod
    def _aliases_not_blank(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not alias.strip() for alias in value):
            raise ValueError("aliases must not be blank")
        return value


def validate_component_definition(data: Mapping[str, Any]) -> list[str]:
    """Check raw definition data without registering it.

    Args:
        data: Mapping in the ComponentDefinition shape.

    Returns:
        Problems as ``"<location>: <message>"`` strings; empty when valid.
    """
    try:
        ComponentDefinition.model_validate(data)
    except ValidationError as exc:
        return [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
    return []


# =============================================================================
# Catalog
# =============================================================================


@dataclass(frozen=True)
class CatalogEntry:
    """A registered component, keyed by canonical name."""

    canonical_name: str
    aliases: frozenset[str] = field(default_factory=frozenset)
    property_schemas: Mapping[str, PropertySchema] = field(
        default_factory=lambda: MappingProxyType({})
    )
    category: ComponentCategory = ComponentCategory.UNCATEGORIZED
    description: str = ""
    deprecated: bool = False
    deprecation_message: str | None = None

    @classmethod
    def from_definition(cls, definition: ComponentDefinition) -> "CatalogEntry":
        return cls(
            canonical_name=definition.name,
            aliases=frozenset(a.strip().lower() for a in definition.aliases),
            property_schemas=MappingProxyType(dict(definition.property_schemas)),
            category=definition.category,
            description=definition.description,
            deprecated=definition.deprecated,
            deprecation_message=definition.deprecation_message,
        )

    @property
    def required_properties(self) -> list[str]:
        """Names of required properties, in declaration order."""
        return [name for name, s in self.property_schemas.items() if s.required]


class ComponentCatalog:
    """Read-only registry of component types, aliases and property schemas.

    Resolution is exact canonical match first, then case-insensitive alias
    lookup. No fuzzy matching happens here.

    Example:
        >>> catalog = build_default_catalog()
        >>> catalog.resolve("btn")
        'Button'
        >>> catalog.is_valid_type("Buton")
        False
    """

    def __init__(self, definitions: Iterable[ComponentDefinition]):
        self._entries: dict[str, CatalogEntry] = {}
        self._aliases: dict[str, str] = {}
        self._lower_names: dict[str, str] = {}

        for definition in definitions:
            self._register(CatalogEntry.from_definition(definition))

        # Aliases may not shadow another entry's canonical name
        for alias, owner in self._aliases.items():
            other = self._lower_names.get(alias)
            if other is not None and other != owner:
                raise CatalogError(
                    f"Alias '{alias}' of '{owner}' collides with component '{other}'"
                )

    def _register(self, entry: CatalogEntry) -> None:
        name = entry.canonical_name
        if name in self._entries:
            raise CatalogError(f"Duplicate component name: {name}")
        for alias in entry.aliases:
            owner = self._aliases.get(alias)
            if owner is not None and owner != name:
                raise CatalogError(
                    f"Alias '{alias}' registered for both '{owner}' and '{name}'"
                )
            self._aliases[alias] = name
        self._entries[name] = entry
        self._lower_names.setdefault(name.lower(), name)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def resolve(self, name: str) -> str | None:
        """Resolve a type name or alias to its canonical name."""
        if not isinstance(name, str):
            return None
        if name in self._entries:
            return name
        return self.resolve_alias(name)

    def resolve_alias(self, name: str) -> str | None:
        """Resolve an alias (case-insensitive) to its canonical name."""
        if not isinstance(name, str):
            return None
        return self._aliases.get(name.strip().lower())

    def is_valid_type(self, name: str) -> bool:
        """True if `name` is a canonical name or a registered alias."""
        return self.resolve(name) is not None

    def find_case_insensitive(self, name: str) -> str | None:
        """Canonical name equal to `name` ignoring case, if any."""
        if not isinstance(name, str):
            return None
        return self._lower_names.get(name.lower())

    def get_entry(self, name: str) -> CatalogEntry | None:
        """Entry for a canonical name or alias."""
        canonical = self.resolve(name)
        return self._entries.get(canonical) if canonical else None

    def get_property_schema(
        self, canonical_name: str
    ) -> Mapping[str, PropertySchema] | None:
        """Property schemas of a canonical component, or None if unknown."""
        entry = self._entries.get(canonical_name)
        return entry.property_schemas if entry else None

    def get_valid_types(self) -> list[str]:
        """Canonical names, sorted. This order is the fixer's tie-break order."""
        return sorted(self._entries)

    def get_aliases(self) -> dict[str, str]:
        """Alias to canonical name mapping."""
        return dict(self._aliases)

    def get_by_category(self) -> dict[str, list[str]]:
        """Canonical names grouped by category value."""
        grouped: dict[str, list[str]] = {}
        for name in self.get_valid_types():
            category = self._entries[name].category.value
            grouped.setdefault(category, []).append(name)
        return grouped

    def entries(self) -> list[CatalogEntry]:
        """All entries in valid-type order."""
        return [self._entries[name] for name in self.get_valid_types()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_valid_type(name)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ComponentCatalog({len(self._entries)} components)"


def build_default_catalog() -> ComponentCatalog:
    """Construct a fresh catalog from the bundled component definitions."""
    from .defaults import DEFAULT_COMPONENTS

    return ComponentCatalog(DEFAULT_COMPONENTS)


__all__ = [
    "CatalogEntry",
    "CatalogError",
    "ComponentCatalog",
    "ComponentCategory",
    "ComponentDefinition",
    "PropertySchema",
    "ValueKind",
    "build_default_catalog",
    "validate_component_definition",
]
