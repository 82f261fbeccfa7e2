"""Unit tests for the Component Catalog."""

import string

import pytest
from hypothesis import given, strategies as st

from src.catalog import (
    DEFAULT_COMPONENTS,
    CatalogError,
    ComponentCatalog,
    ComponentCategory,
    ComponentDefinition,
    PropertySchema,
    ValueKind,
    build_default_catalog,
    validate_component_definition,
)


def _definition(name: str, *aliases: str, **kwargs) -> ComponentDefinition:
    return ComponentDefinition(name=name, aliases=aliases, **kwargs)


class TestDefaultCatalog:
    """Tests for the bundled component set."""

    @pytest.mark.unit
    def test_all_defaults_registered(self, catalog):
        """Every bundled definition is listed as a valid type."""
        valid = catalog.get_valid_types()
        for definition in DEFAULT_COMPONENTS:
            assert definition.name in valid

    @pytest.mark.unit
    def test_all_aliases_resolve(self, catalog):
        """Every bundled alias resolves to its component."""
        for definition in DEFAULT_COMPONENTS:
            for alias in definition.aliases:
                assert catalog.resolve(alias) == definition.name, alias

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "alias,canonical",
        [
            ("div", "Container"),
            ("DIV", "Container"),
            ("span", "Text"),
            ("h3", "Text"),
            ("img", "Image"),
            ("a", "Link"),
            ("btn", "Button"),
            ("textfield", "Input"),
            ("dropdown", "Select"),
            ("chk", "Checkbox"),
            ("tbl", "Table"),
        ],
    )
    def test_known_aliases(self, catalog, alias, canonical):
        assert catalog.resolve_alias(alias) == canonical

    @pytest.mark.unit
    def test_fresh_instance_each_call(self):
        assert build_default_catalog() is not build_default_catalog()

    @pytest.mark.unit
    def test_all_entries_have_descriptions(self, catalog):
        for entry in catalog.entries():
            assert entry.description, entry.canonical_name

    @pytest.mark.unit
    def test_common_props_present(self, catalog):
        schema = catalog.get_property_schema("Button")
        assert "className" in schema
        assert schema["variant"].allowed_values[0] == "default"


class TestResolution:
    """Tests for lookup semantics."""

    @pytest.mark.unit
    def test_exact_canonical(self, catalog):
        assert catalog.resolve("Button") == "Button"
        assert catalog.is_valid_type("Button")

    @pytest.mark.unit
    def test_case_mismatch_does_not_resolve(self, catalog):
        """Canonical names are case-sensitive; only aliases are not."""
        assert catalog.resolve("button") is None
        assert not catalog.is_valid_type("BUTTON")
        assert catalog.find_case_insensitive("BUTTON") == "Button"

    @pytest.mark.unit
    def test_no_fuzzy_matching(self, catalog):
        assert catalog.resolve("Buton") is None

    @pytest.mark.unit
    def test_unknown_never_raises(self, catalog):
        assert catalog.resolve("Nope") is None
        assert catalog.resolve(None) is None
        assert catalog.resolve(42) is None
        assert catalog.get_property_schema("Nope") is None
        assert catalog.get_entry("Nope") is None

    @pytest.mark.unit
    def test_contains(self, catalog):
        assert "btn" in catalog
        assert "Bouton" not in catalog
        assert 3 not in catalog

    @pytest.mark.unit
    def test_get_entry_via_alias(self, catalog):
        entry = catalog.get_entry("btn")
        assert entry.canonical_name == "Button"

    @pytest.mark.unit
    def test_valid_types_sorted(self, catalog):
        valid = catalog.get_valid_types()
        assert valid == sorted(valid)

    @pytest.mark.unit
    def test_get_by_category(self, catalog):
        grouped = catalog.get_by_category()
        assert "Button" in grouped[ComponentCategory.INPUT.value]
        assert "Container" in grouped[ComponentCategory.LAYOUT.value]

    @pytest.mark.unit
    def test_deprecated_entry(self, catalog):
        entry = catalog.get_entry("Spacer")
        assert entry.deprecated is True
        assert entry.deprecation_message

    @pytest.mark.unit
    def test_required_properties(self, catalog):
        assert catalog.get_entry("Link").required_properties == ["href"]


class TestConstruction:
    """Tests for catalog invariants enforced at construction."""

    @pytest.mark.unit
    def test_duplicate_name_rejected(self):
        with pytest.raises(CatalogError, match="Duplicate"):
            ComponentCatalog([_definition("Box"), _definition("Box")])

    @pytest.mark.unit
    def test_alias_owned_twice_rejected(self):
        with pytest.raises(CatalogError, match="registered for both"):
            ComponentCatalog([_definition("A", "x"), _definition("B", "X")])

    @pytest.mark.unit
    def test_alias_shadowing_other_canonical_rejected(self):
        with pytest.raises(CatalogError, match="collides"):
            ComponentCatalog([_definition("Panel", "card"), _definition("Card")])

    @pytest.mark.unit
    def test_alias_equal_to_own_name_allowed(self):
        catalog = ComponentCatalog([_definition("Checkbox", "checkbox")])
        assert catalog.resolve("CHECKBOX") == "Checkbox"

    @pytest.mark.unit
    def test_empty_catalog(self):
        catalog = ComponentCatalog([])
        assert len(catalog) == 0
        assert catalog.get_valid_types() == []

    @pytest.mark.unit
    def test_entries_are_read_only(self):
        catalog = ComponentCatalog(
            [
                _definition(
                    "Box",
                    property_schemas={"gap": PropertySchema(value_kind=ValueKind.NUMBER)},
                )
            ]
        )
        schema = catalog.get_property_schema("Box")
        with pytest.raises(TypeError):
            schema["extra"] = PropertySchema(value_kind=ValueKind.STRING)


class TestDefinitionValidation:
    """Tests for definition model validation."""

    @pytest.mark.unit
    def test_valid_definition(self):
        assert validate_component_definition({"name": "Box"}) == []

    @pytest.mark.unit
    def test_blank_name(self):
        problems = validate_component_definition({"name": "  "})
        assert problems and problems[0].startswith("name")

    @pytest.mark.unit
    def test_blank_alias(self):
        problems = validate_component_definition({"name": "Box", "aliases": [""]})
        assert problems and problems[0].startswith("aliases")

    @pytest.mark.unit
    def test_bad_value_kind(self):
        problems = validate_component_definition(
            {"name": "Box", "property_schemas": {"gap": {"value_kind": "integer"}}}
        )
        assert problems
        assert "property_schemas.gap.value_kind" in problems[0]

    @pytest.mark.unit
    def test_empty_enum_rejected(self):
        problems = validate_component_definition(
            {
                "name": "Box",
                "property_schemas": {
                    "mode": {"value_kind": "string", "allowed_values": []}
                },
            }
        )
        assert problems


_names = st.text(alphabet=string.ascii_letters, min_size=1, max_size=12)


class TestCatalogProperties:
    """Property-based tests over arbitrary definition sets."""

    @pytest.mark.unit
    @given(st.lists(_names, min_size=1, max_size=8, unique_by=str.lower))
    def test_registered_names_listed_and_aliases_resolve(self, names):
        definitions = [
            _definition(name, f"{name.lower()}-alias") for name in names
        ]
        catalog = ComponentCatalog(definitions)
        valid = catalog.get_valid_types()
        for name in names:
            assert name in valid
            assert catalog.resolve(f"{name.lower()}-alias") == name
            assert catalog.resolve(f"{name.upper()}-ALIAS") == name
