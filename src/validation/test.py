"""Unit tests for validation module."""

import copy
import string

import pytest
from hypothesis import assume, given, strategies as st

from src.catalog import DEFAULT_COMPONENTS, build_default_catalog
from src.diagnostics import DiagnosticCode, Severity
from src.validation import (
    SchemaValidator,
    is_valid,
    kind_of,
    matches_kind,
    validate_ui_description,
)


def _doc(root, version="1.0"):
    document = {"root": root}
    if version is not None:
        document["version"] = version
    return document


def _node(node_id="n", node_type="Container", props=None, children=None):
    node = {"id": node_id, "type": node_type, "props": props if props is not None else {}}
    if children is not None:
        node["children"] = children
    return node


@pytest.fixture
def validator(catalog):
    return SchemaValidator(catalog, strict=False)


class TestWellFormed:
    """Well-formed descriptions validate cleanly."""

    @pytest.mark.unit
    def test_valid_document(self, validator, valid_document):
        result = validator.validate(valid_document)
        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    @pytest.mark.unit
    def test_minimal_document(self, validator, minimal_document):
        assert validator.validate(minimal_document).valid

    @pytest.mark.unit
    def test_alias_type_is_valid(self, validator):
        assert validator.validate(_doc(_node(node_type="btn"))).valid

    @pytest.mark.unit
    def test_missing_props_treated_as_empty(self, validator):
        assert validator.validate(_doc({"id": "a", "type": "Card"})).valid

    @pytest.mark.unit
    def test_unknown_props_ignored(self, validator):
        node = _node(node_type="Button", props={"data-test": 1})
        assert validator.validate(_doc(node)).valid

    @pytest.mark.unit
    def test_null_optional_prop_allowed(self, validator):
        node = _node(node_type="Button", props={"variant": None})
        assert validator.validate(_doc(node)).valid

    @pytest.mark.unit
    def test_function_prop_accepts_handler_name(self, validator):
        node = _node(node_type="Button", props={"onClick": "handleSubmit"})
        assert validator.validate(_doc(node)).valid

    @pytest.mark.unit
    def test_input_not_mutated(self, validator, valid_document):
        before = copy.deepcopy(valid_document)
        validator.validate(valid_document)
        assert valid_document == before

    @pytest.mark.unit
    def test_parsed_attached(self, validator, minimal_document):
        assert validator.validate(minimal_document).parsed is minimal_document


class TestDocumentLevel:
    """Version and root checks."""

    @pytest.mark.unit
    def test_missing_version_is_warning(self, validator):
        result = validator.validate(_doc(_node(), version=None))
        assert result.valid
        assert [d.code for d in result.warnings] == [DiagnosticCode.MISSING_VERSION]
        assert result.warnings[0].severity is Severity.WARNING
        assert result.warnings[0].suggestion == 'Add "version": "1.0" to your schema'

    @pytest.mark.unit
    def test_version_not_string(self, validator):
        result = validator.validate(_doc(_node(), version=1))
        assert result.codes() == ["INVALID_TYPE"]

    @pytest.mark.unit
    def test_version_blank(self, validator):
        result = validator.validate(_doc(_node(), version="  "))
        assert result.codes() == ["INVALID_VALUE"]

    @pytest.mark.unit
    @pytest.mark.parametrize("document", [None, [], "text", 3, True])
    def test_non_object_document(self, validator, document):
        result = validator.validate(document)
        assert not result.valid
        assert result.codes() == ["INVALID_TYPE"]

    @pytest.mark.unit
    def test_missing_root(self, validator):
        result = validator.validate({"version": "1.0"})
        assert result.codes() == ["MISSING_FIELD"]
        assert result.errors[0].path == "root"

    @pytest.mark.unit
    def test_root_not_object(self, validator):
        result = validator.validate({"version": "1.0", "root": ["a"]})
        assert result.codes() == ["INVALID_TYPE"]


class TestNodeChecks:
    """Per-node id, type, props and children checks."""

    @pytest.mark.unit
    def test_missing_id(self, validator):
        result = validator.validate(_doc({"type": "Container"}))
        assert result.codes() == ["MISSING_ID"]
        assert result.errors[0].path == "root"

    @pytest.mark.unit
    def test_empty_id(self, validator):
        assert validator.validate(_doc(_node(node_id=""))).codes() == ["MISSING_ID"]

    @pytest.mark.unit
    def test_non_string_id(self, validator):
        result = validator.validate(_doc(_node(node_id=7)))
        assert result.codes() == ["INVALID_TYPE"]
        assert result.errors[0].path == "root.id"

    @pytest.mark.unit
    def test_duplicate_id(self, validator):
        root = _node("root", children=[_node("a"), _node("a")])
        result = validator.validate(_doc(root))
        assert result.codes() == ["DUPLICATE_ID"]
        assert result.errors[0].path == "root.children[1].id"

    @pytest.mark.unit
    def test_deeply_nested_duplicate(self, validator):
        root = _node("root", children=[_node("l1", children=[_node("root")])])
        result = validator.validate(_doc(root))
        assert result.codes() == ["DUPLICATE_ID"]
        assert result.errors[0].path == "root.children[0].children[0].id"

    @pytest.mark.unit
    def test_missing_type(self, validator):
        assert validator.validate(_doc({"id": "a"})).codes() == ["MISSING_FIELD"]

    @pytest.mark.unit
    def test_non_string_type(self, validator):
        assert validator.validate(_doc(_node(node_type=5))).codes() == ["INVALID_TYPE"]

    @pytest.mark.unit
    def test_empty_type(self, validator):
        assert validator.validate(_doc(_node(node_type=""))).codes() == ["INVALID_VALUE"]

    @pytest.mark.unit
    def test_unknown_component(self, validator):
        result = validator.validate(_doc(_node(node_type="Buton")))
        assert result.codes() == ["UNKNOWN_COMPONENT"]
        diag = result.errors[0]
        assert diag.path == "root.type"
        assert diag.suggestion.startswith("Did you mean: Button")

    @pytest.mark.unit
    def test_unknown_component_without_close_match(self, validator):
        result = validator.validate(_doc(_node(node_type="Zzzzzzzzzzzzzz")))
        assert result.errors[0].suggestion.startswith("Valid types: ")

    @pytest.mark.unit
    def test_case_mismatch(self, validator):
        result = validator.validate(_doc(_node(node_type="button")))
        assert result.codes() == ["CASE_MISMATCH"]
        assert result.errors[0].suggestion == 'Use "Button"'

    @pytest.mark.unit
    def test_deprecated_component_is_warning(self, validator):
        result = validator.validate(_doc(_node(node_type="Spacer")))
        assert result.valid
        assert [d.code for d in result.warnings] == [DiagnosticCode.DEPRECATED_COMPONENT]
        assert "gap" in result.warnings[0].suggestion

    @pytest.mark.unit
    def test_props_not_object(self, validator):
        result = validator.validate(_doc(_node(props=["x"])))
        assert result.codes() == ["INVALID_TYPE"]
        assert result.errors[0].path == "root.props"

    @pytest.mark.unit
    def test_children_not_array(self, validator):
        result = validator.validate(_doc(_node(children="text")))
        assert result.codes() == ["INVALID_TYPE"]
        assert result.errors[0].path == "root.children"

    @pytest.mark.unit
    def test_text_children_allowed(self, validator):
        assert validator.validate(_doc(_node(children=["hello", "world"]))).valid

    @pytest.mark.unit
    def test_invalid_child_shape(self, validator):
        result = validator.validate(_doc(_node(children=["ok", 3, None])))
        assert result.codes() == ["INVALID_TYPE", "INVALID_TYPE"]
        assert [d.path for d in result.errors] == [
            "root.children[1]",
            "root.children[2]",
        ]


class TestPropertyChecks:
    """Required, kind and enum checks."""

    @pytest.mark.unit
    def test_missing_required_prop(self, validator):
        result = validator.validate(_doc(_node(node_type="Link")))
        assert result.codes() == ["MISSING_REQUIRED_PROP"]
        assert result.errors[0].path == "root.props.href"

    @pytest.mark.unit
    def test_required_prop_null_is_missing(self, validator):
        result = validator.validate(_doc(_node(node_type="Link", props={"href": None})))
        assert result.codes() == ["MISSING_REQUIRED_PROP"]

    @pytest.mark.unit
    def test_invalid_prop_type(self, validator):
        result = validator.validate(
            _doc(_node(node_type="Button", props={"disabled": "yes"}))
        )
        assert result.codes() == ["INVALID_PROP_TYPE"]
        diag = result.errors[0]
        assert diag.path == "root.props.disabled"
        assert "expected boolean, got string" in diag.message

    @pytest.mark.unit
    def test_bool_is_not_number(self, validator):
        result = validator.validate(_doc(_node(node_type="Textarea", props={"rows": True})))
        assert result.codes() == ["INVALID_PROP_TYPE"]

    @pytest.mark.unit
    def test_invalid_enum_with_close_match(self, validator):
        result = validator.validate(
            _doc(_node(node_type="Button", props={"variant": "outlin"}))
        )
        assert result.codes() == ["INVALID_ENUM_VALUE"]
        assert result.errors[0].suggestion.startswith('Did you mean "outline"?')

    @pytest.mark.unit
    def test_invalid_enum_without_close_match(self, validator):
        result = validator.validate(
            _doc(_node(node_type="Separator", props={"orientation": "diagonal"}))
        )
        assert result.errors[0].suggestion == "Valid values: horizontal, vertical"

    @pytest.mark.unit
    def test_enum_threshold_override(self, catalog):
        validator = SchemaValidator(catalog, strict=False, enum_threshold=0.9)
        result = validator.validate(
            _doc(_node(node_type="Button", props={"variant": "outlin"}))
        )
        assert result.errors[0].suggestion.startswith("Valid values:")

    @pytest.mark.unit
    def test_nested_prop_path(self, validator):
        root = _node("root", children=[_node("b", "Button", {"size": "huge"})])
        result = validator.validate(_doc(root))
        assert result.errors[0].path == "root.children[0].props.size"


class TestTotality:
    """Validation terminates on hostile input."""

    @pytest.mark.unit
    def test_cycle_reported(self, validator):
        node = _node("a")
        node["children"] = [node]
        result = validator.validate(_doc(node))
        assert result.codes() == ["INVALID_STRUCTURE"]
        assert result.errors[0].path == "root.children[0]"

    @pytest.mark.unit
    def test_depth_limit(self, catalog):
        validator = SchemaValidator(catalog, max_depth=3)
        root = _node("n0")
        current = root
        for i in range(1, 6):
            child = _node(f"n{i}")
            current["children"] = [child]
            current = child
        result = validator.validate(_doc(root))
        assert result.codes() == ["INVALID_STRUCTURE"]

    @pytest.mark.unit
    def test_shared_subtree_is_not_a_cycle(self, validator):
        shared = {"type": "Text", "props": {}}
        root = _node("root", children=[shared, shared])
        result = validator.validate(_doc(root))
        assert "INVALID_STRUCTURE" not in result.codes()


class TestStrictMode:
    """Strict mode promotes warnings."""

    @pytest.mark.unit
    def test_warnings_promoted(self, catalog):
        result = SchemaValidator(catalog, strict=True).validate(
            _doc(_node(), version=None)
        )
        assert not result.valid
        assert result.codes() == ["MISSING_VERSION"]
        assert result.warnings == []

    @pytest.mark.unit
    def test_strict_from_environment(self, catalog, monkeypatch):
        monkeypatch.setenv("UISCHEMA_STRICT", "true")
        assert SchemaValidator(catalog).strict is True


class TestHelpers:
    """Module-level helpers."""

    @pytest.mark.unit
    def test_is_valid(self, catalog, minimal_document):
        assert is_valid(minimal_document, catalog)
        assert not is_valid({}, catalog)

    @pytest.mark.unit
    def test_validate_ui_description(self, catalog):
        result = validate_ui_description(_doc(_node(node_type="Nope")), catalog)
        assert result.codes() == ["UNKNOWN_COMPONENT"]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,kind",
        [
            (None, "null"),
            (True, "boolean"),
            (1.5, "number"),
            ("s", "string"),
            ({}, "object"),
            ([], "array"),
            (print, "function"),
        ],
    )
    def test_kind_of(self, value, kind):
        assert kind_of(value) == kind

    @pytest.mark.unit
    def test_matches_kind_function(self):
        from src.catalog import ValueKind

        assert matches_kind(lambda: None, ValueKind.FUNCTION)
        assert matches_kind("onSave", ValueKind.FUNCTION)
        assert not matches_kind(3, ValueKind.FUNCTION)


_CATALOG = build_default_catalog()
_LONG_NAMES = [d.name for d in DEFAULT_COMPONENTS if len(d.name) >= 5]


class TestNearMissProperty:
    """A one-letter typo of a real type is suggested back."""

    @pytest.mark.unit
    @given(
        st.sampled_from(_LONG_NAMES),
        st.integers(min_value=0),
        st.sampled_from(string.ascii_lowercase),
    )
    def test_typo_suggests_real_type(self, name, position, letter):
        index = position % len(name)
        typo = name[:index] + letter + name[index + 1 :]
        assume(typo.lower() != name.lower())
        assume(_CATALOG.resolve(typo) is None)
        assume(_CATALOG.find_case_insensitive(typo) is None)

        result = SchemaValidator(_CATALOG).validate(_doc(_node(node_type=typo)))
        unknown = [d for d in result.errors if d.code is DiagnosticCode.UNKNOWN_COMPONENT]
        assert unknown
        assert name in unknown[0].suggestion
