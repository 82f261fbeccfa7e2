"""Unit tests for fixer module."""

import copy

import pytest
from hypothesis import given, strategies as st

from src.catalog import build_default_catalog
from src.diagnostics import Confidence, DiagnosticCode, FixKind
from src.fixer import FixerConfig, SchemaFixer, fix_ui_description, needs_fix
from src.validation import SchemaValidator


def _config(**overrides) -> FixerConfig:
    values = {
        "default_version": "1.0",
        "medium_threshold": 0.6,
        "high_threshold": 0.8,
        "id_suffix": "",
        "default_root_type": "Container",
    }
    values.update(overrides)
    return FixerConfig(**values)


def _doc(root, version="1.0"):
    document = {"root": root}
    if version is not None:
        document["version"] = version
    return document


@pytest.fixture
def fixer(catalog):
    return SchemaFixer(catalog, _config())


@pytest.fixture
def validator(catalog):
    return SchemaValidator(catalog, strict=False)


class TestEndToEnd:
    """Typical generator mistakes are repaired into valid documents."""

    @pytest.mark.unit
    def test_misspelled_root(self, fixer, validator):
        result = fixer.fix({"root": {"type": "Containr", "props": {}}})

        assert result.fixed["version"] == "1.0"
        assert result.fixed["root"]["type"] == "Container"
        assert result.fixed["root"]["id"] == "container-1"
        assert [c.kind for c in result.changes] == [
            FixKind.ADD_VERSION,
            FixKind.FIX_TYPE,
            FixKind.ADD_ID,
        ]
        assert [c.confidence for c in result.changes] == [Confidence.HIGH] * 3
        assert result.unfixable == []
        assert validator.validate(result.fixed).valid

    @pytest.mark.unit
    def test_valid_document_unchanged(self, fixer, valid_document):
        result = fixer.fix(valid_document)
        assert result.changes == []
        assert result.unfixable == []
        assert result.fixed == valid_document

    @pytest.mark.unit
    def test_input_never_mutated(self, fixer):
        raw = {
            "root": {
                "type": "div",
                "props": {"direction": "colum"},
                "children": [{"type": "Buton", "props": {"variant": "outlin"}}],
            }
        }
        snapshot = copy.deepcopy(raw)

        result = fixer.fix(raw)

        assert raw == snapshot
        assert result.fixed is not raw
        assert result.fixed["root"]["props"] is not raw["root"]["props"]
        assert result.fixed["root"]["children"] is not raw["root"]["children"]

    @pytest.mark.unit
    def test_unknown_keys_preserved(self, fixer):
        raw = _doc({"id": "a", "type": "Card", "label": "x"})
        raw["metadata"] = {"model": "m"}

        fixed = fixer.fix(raw).fixed

        assert fixed["metadata"] == {"model": "m"}
        assert fixed["root"]["label"] == "x"


class TestDocumentLevel:
    """Version and root repairs."""

    @pytest.mark.unit
    @pytest.mark.parametrize("version", [None, 1, "", "   "])
    def test_version_replaced(self, fixer, minimal_document, version):
        raw = dict(minimal_document, version=version)
        result = fixer.fix(raw)

        assert result.fixed["version"] == "1.0"
        assert len(result.changes) == 1
        change = result.changes[0]
        assert change.kind is FixKind.ADD_VERSION
        assert change.old_value == version
        assert change.confidence is Confidence.HIGH

    @pytest.mark.unit
    def test_configured_default_version(self, catalog):
        fixer = SchemaFixer(catalog, _config(default_version="2.0"))
        assert fixer.fix({"root": {"id": "a", "type": "Card"}}).fixed["version"] == "2.0"

    @pytest.mark.unit
    @pytest.mark.parametrize("root", [None, "nope", ["x"]])
    def test_root_synthesized(self, fixer, validator, root):
        raw = {"version": "1.0"}
        if root is not None:
            raw["root"] = root

        result = fixer.fix(raw)

        assert result.fixed["root"] == {"id": "root", "type": "Container", "props": {}}
        assert [c.kind for c in result.changes] == [FixKind.ADD_ROOT]
        assert result.changes[0].confidence is Confidence.HIGH
        assert validator.validate(result.fixed).valid

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", [None, 42, "text", [1, 2]])
    def test_non_object_input(self, fixer, raw):
        result = fixer.fix(raw)

        assert result.fixed == {
            "version": "1.0",
            "root": {"id": "root", "type": "Container", "props": {}},
        }
        assert result.changes == []
        assert [d.code for d in result.unfixable] == [DiagnosticCode.INVALID_TYPE]
        assert not fixer.can_fix(raw)


class TestTypes:
    """Component type repairs."""

    @pytest.mark.unit
    def test_alias_resolved(self, fixer):
        result = fixer.fix(_doc({"id": "a", "type": "btn", "props": {}}))

        assert result.fixed["root"]["type"] == "Button"
        change = result.changes[0]
        assert change.kind is FixKind.RESOLVE_ALIAS
        assert change.path == "root.type"
        assert change.confidence is Confidence.HIGH

    @pytest.mark.unit
    def test_alias_kept_when_disabled(self, catalog):
        fixer = SchemaFixer(catalog, _config(resolve_aliases=False))
        raw = _doc({"id": "a", "type": "btn", "props": {}})

        result = fixer.fix(raw)

        assert result.fixed["root"]["type"] == "btn"
        assert result.changes == []
        assert not fixer.can_fix(raw)

    @pytest.mark.unit
    def test_case_mismatch_fixed(self, fixer):
        result = fixer.fix(_doc({"id": "a", "type": "button"}))

        assert result.fixed["root"]["type"] == "Button"
        assert result.changes[0].kind is FixKind.FIX_TYPE
        assert result.changes[0].confidence is Confidence.HIGH

    @pytest.mark.unit
    def test_medium_confidence_type(self, fixer):
        result = fixer.fix(_doc({"id": "a", "type": "Bttn"}))

        change = result.changes[0]
        assert change.new_value == "Button"
        assert change.confidence is Confidence.MEDIUM
        assert "67%" in change.description

    @pytest.mark.unit
    def test_unrecognizable_type_unfixable(self, fixer):
        result = fixer.fix(_doc({"id": "a", "type": "Zzzzzzzz"}))

        assert result.fixed["root"]["type"] == "Zzzzzzzz"
        assert result.changes == []
        assert [d.code for d in result.unfixable] == [DiagnosticCode.UNKNOWN_COMPONENT]
        assert result.unfixable[0].path == "root.type"

    @pytest.mark.unit
    def test_missing_type_unfixable(self, fixer):
        result = fixer.fix(_doc({"id": "a", "props": {}}))

        assert "type" not in result.fixed["root"]
        assert [d.code for d in result.unfixable] == [DiagnosticCode.MISSING_FIELD]

    @pytest.mark.unit
    def test_non_string_type_unfixable(self, fixer):
        result = fixer.fix(_doc({"id": "a", "type": 5}))

        assert result.fixed["root"]["type"] == 5
        assert [d.code for d in result.unfixable] == [DiagnosticCode.INVALID_TYPE]

    @pytest.mark.unit
    def test_tie_broken_by_catalog_order(self, catalog):
        """Equal scores keep the first type in get_valid_types() order."""
        fixer = SchemaFixer(catalog, _config(medium_threshold=0.0, high_threshold=0.0))
        result = fixer.fix(_doc({"id": "a", "type": "#"}))

        # Every candidate scores 0.0 against a single foreign character
        assert result.fixed["root"]["type"] == catalog.get_valid_types()[0]


class TestIds:
    """Id synthesis and de-duplication."""

    @pytest.mark.unit
    def test_counter_shared_across_types(self, fixer):
        raw = _doc({"type": "Container", "children": [{"type": "Text"}, {"type": "Text"}]})
        fixed = fixer.fix(raw).fixed

        assert fixed["root"]["id"] == "container-1"
        assert [c["id"] for c in fixed["root"]["children"]] == ["text-2", "text-3"]

    @pytest.mark.unit
    def test_deterministic_between_calls(self, fixer):
        raw = _doc({"type": "Card", "children": [{"type": "Text"}]})
        assert fixer.fix(raw).fixed == fixer.fix(raw).fixed

    @pytest.mark.unit
    def test_skips_existing_ids(self, fixer):
        raw = _doc(
            {
                "type": "Container",
                "children": [{"type": "Text"}, {"id": "text-2", "type": "Text"}],
            }
        )
        fixed = fixer.fix(raw).fixed

        assert fixed["root"]["id"] == "container-1"
        assert [c["id"] for c in fixed["root"]["children"]] == ["text-3", "text-2"]

    @pytest.mark.unit
    def test_id_suffix(self, catalog):
        fixer = SchemaFixer(catalog, _config(id_suffix="gen"))
        assert fixer.fix(_doc({"type": "Card"})).fixed["root"]["id"] == "card-1-gen"

    @pytest.mark.unit
    def test_id_uses_fixed_type(self, fixer):
        fixed = fixer.fix(_doc({"type": "btn"})).fixed
        assert fixed["root"]["id"] == "button-1"

    @pytest.mark.unit
    def test_id_without_type(self, fixer):
        fixed = fixer.fix(_doc({"props": {}})).fixed
        assert fixed["root"]["id"] == "component-1"

    @pytest.mark.unit
    @pytest.mark.parametrize("node_id", ["", "  ", 7])
    def test_invalid_id_replaced(self, fixer, node_id):
        result = fixer.fix(_doc({"id": node_id, "type": "Card"}))

        assert result.fixed["root"]["id"] == "card-1"
        assert result.changes[0].kind is FixKind.ADD_ID
        assert result.changes[0].old_value == node_id

    @pytest.mark.unit
    def test_duplicate_id_regenerated(self, fixer, validator):
        raw = _doc({"id": "a", "type": "Container", "children": [{"id": "a", "type": "Text"}]})

        result = fixer.fix(raw)

        assert result.fixed["root"]["id"] == "a"
        assert result.fixed["root"]["children"][0]["id"] == "text-1"
        change = result.changes[0]
        assert change.kind is FixKind.FIX_DUPLICATE_ID
        assert change.path == "root.children[0].id"
        assert change.confidence is Confidence.MEDIUM
        assert validator.validate(result.fixed).valid


class TestProps:
    """Property normalization and repairs."""

    @pytest.mark.unit
    @pytest.mark.parametrize("props", [None, "oops", ["x"]])
    def test_non_object_props_normalized_silently(self, fixer, props):
        raw = _doc({"id": "a", "type": "Card", "props": props})

        result = fixer.fix(raw)

        assert result.fixed["root"]["props"] == {}
        assert result.changes == []

    @pytest.mark.unit
    def test_enum_high_confidence(self, fixer):
        result = fixer.fix(_doc({"id": "a", "type": "Button", "props": {"variant": "outlin"}}))

        assert result.fixed["root"]["props"]["variant"] == "outline"
        change = result.changes[0]
        assert change.kind is FixKind.FIX_ENUM
        assert change.path == "root.props.variant"
        assert change.confidence is Confidence.HIGH

    @pytest.mark.unit
    def test_enum_medium_confidence(self, fixer):
        result = fixer.fix(_doc({"id": "a", "type": "Button", "props": {"variant": "secndry"}}))

        assert result.fixed["root"]["props"]["variant"] == "secondary"
        assert result.changes[0].confidence is Confidence.MEDIUM

    @pytest.mark.unit
    def test_enum_without_match_left_for_validator(self, fixer, validator):
        result = fixer.fix(_doc({"id": "a", "type": "Button", "props": {"variant": "zzzz"}}))

        assert result.fixed["root"]["props"]["variant"] == "zzzz"
        assert result.changes == []
        assert result.unfixable == []
        assert validator.validate(result.fixed).codes() == ["INVALID_ENUM_VALUE"]

    @pytest.mark.unit
    def test_enum_fixed_on_alias_type(self, fixer):
        result = fixer.fix(_doc({"id": "a", "type": "btn", "props": {"size": "smm"}}))
        assert result.fixed["root"]["props"]["size"] == "sm"

    @pytest.mark.unit
    def test_default_for_missing_required_prop(self, fixer, validator):
        result = fixer.fix(_doc({"id": "a", "type": "Image", "props": {"alt": "logo"}}))

        assert result.fixed["root"]["props"] == {"alt": "logo", "src": ""}
        change = result.changes[0]
        assert change.kind is FixKind.ADD_DEFAULT_PROP
        assert change.path == "root.props.src"
        assert change.confidence is Confidence.MEDIUM
        assert validator.validate(result.fixed).valid

    @pytest.mark.unit
    def test_required_without_default_untouched(self, fixer):
        result = fixer.fix(_doc({"id": "a", "type": "Icon", "props": {}}))
        assert result.fixed["root"]["props"] == {}
        assert result.changes == []


class TestChildren:
    """Recursion into children."""

    @pytest.mark.unit
    def test_nested_paths(self, fixer):
        raw = _doc(
            {
                "id": "a",
                "type": "Container",
                "children": [{"id": "b", "type": "Card", "children": [{"id": "c", "type": "Txt"}]}],
            }
        )
        result = fixer.fix(raw)
        assert result.changes[0].path == "root.children[0].children[0].type"

    @pytest.mark.unit
    def test_text_children_kept(self, fixer):
        raw = _doc({"id": "a", "type": "Text", "children": ["hello"]})
        assert fixer.fix(raw).fixed["root"]["children"] == ["hello"]

    @pytest.mark.unit
    def test_invalid_children_reported(self, fixer):
        raw = _doc({"id": "a", "type": "Container", "children": ["ok", 3]})

        result = fixer.fix(raw)

        assert result.fixed["root"]["children"] == ["ok", 3]
        assert [d.path for d in result.unfixable] == ["root.children[1]"]
        assert result.unfixable[0].code is DiagnosticCode.INVALID_TYPE

    @pytest.mark.unit
    def test_children_not_array_reported(self, fixer):
        result = fixer.fix(_doc({"id": "a", "type": "Container", "children": "x"}))

        assert result.fixed["root"]["children"] == "x"
        assert [d.path for d in result.unfixable] == ["root.children"]

    @pytest.mark.unit
    def test_cycle_reported_and_removed(self, fixer):
        node = {"id": "a", "type": "Container", "props": {}}
        node["children"] = [node]

        result = fixer.fix(_doc(node))

        assert result.fixed["root"]["children"] == []
        assert [d.code for d in result.unfixable] == [DiagnosticCode.INVALID_STRUCTURE]

    @pytest.mark.unit
    def test_depth_limit(self, catalog):
        fixer = SchemaFixer(catalog, _config(max_depth=2))
        deep = {"type": "Containr"}
        inner = {"id": "b", "type": "Container", "children": [deep]}
        raw = _doc({"id": "a", "type": "Container", "children": [inner]})

        result = fixer.fix(raw)

        assert result.changes == []
        assert [d.code for d in result.unfixable] == [DiagnosticCode.INVALID_STRUCTURE]
        assert result.fixed["root"]["children"][0]["children"] == [deep]

    @pytest.mark.unit
    def test_null_children_treated_as_absent(self, fixer, validator):
        raw = _doc({"id": "a", "type": "Container", "props": {}, "children": None})

        result = fixer.fix(raw)

        assert validator.validate(raw).valid
        assert result.unfixable == []
        assert result.changes == []
        assert result.fixed["root"]["children"] is None

    @pytest.mark.unit
    def test_chain_deeper_than_stack(self, catalog):
        """Subtrees past max_depth are copied without recursion."""
        raw = _doc(_chain(400))
        validator = SchemaValidator(catalog, strict=False, max_depth=100)

        result = SchemaFixer(catalog, _config(max_depth=100)).fix(raw)

        assert [d.code for d in result.unfixable] == [DiagnosticCode.INVALID_STRUCTURE]
        assert _chain_depth(result.fixed["root"]) == 400
        assert validator.validate(result.fixed).codes() == ["INVALID_STRUCTURE"]

    @pytest.mark.unit
    def test_deep_prop_value_copied(self, fixer):
        value = []
        for _ in range(5000):
            value = [value]
        raw = _doc({"id": "a", "type": "Container", "props": {}, "data": value})

        fixed = fixer.fix(raw).fixed["root"]["data"]

        assert fixed is not value
        assert fixed[0] is not value[0]

    @pytest.mark.unit
    def test_shared_values_stay_shared(self, fixer):
        shared = {"k": [1, 2]}
        raw = _doc({"id": "a", "type": "Container", "props": {}, "x": shared, "y": shared})

        fixed = fixer.fix(raw).fixed["root"]

        assert fixed["x"] == shared
        assert fixed["x"] is fixed["y"]
        assert fixed["x"] is not shared


def _chain(depth):
    """A Container chain `depth` nodes deep, built without recursion."""
    node = {"id": f"n{depth}", "type": "Container", "props": {}}
    for level in range(depth - 1, 0, -1):
        node = {"id": f"n{level}", "type": "Container", "props": {}, "children": [node]}
    return node


def _chain_depth(node):
    depth = 1
    while node.get("children"):
        node = node["children"][0]
        depth += 1
    return depth


class TestCanFix:
    """The read-only pre-check agrees with fix()."""

    @pytest.mark.unit
    def test_valid_document(self, fixer, valid_document):
        assert not fixer.can_fix(valid_document)

    @pytest.mark.unit
    def test_fixable_document(self, fixer):
        raw = {"root": {"type": "Containr", "props": {}}}
        snapshot = copy.deepcopy(raw)

        assert fixer.can_fix(raw)
        assert raw == snapshot

    @pytest.mark.unit
    def test_unfixable_only(self, fixer):
        assert not fixer.can_fix(_doc({"id": "a", "type": "Zzzzzzzz"}))

    @pytest.mark.unit
    def test_deep_documents(self, fixer):
        chain = _chain(400)
        assert not fixer.can_fix(_doc(chain))

        chain["type"] = "Containr"
        assert fixer.can_fix(_doc(chain))
        assert chain["type"] == "Containr"


class TestConfig:
    """FixerConfig validation."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "medium,high", [(0.9, 0.8), (-0.1, 0.8), (0.6, 1.5)]
    )
    def test_invalid_thresholds(self, medium, high):
        with pytest.raises(ValueError, match="thresholds"):
            _config(medium_threshold=medium, high_threshold=high)

    @pytest.mark.unit
    def test_blank_default_version(self):
        with pytest.raises(ValueError, match="default_version"):
            _config(default_version=" ")

    @pytest.mark.unit
    def test_environment_defaults(self, monkeypatch):
        monkeypatch.setenv("UISCHEMA_SIMILARITY_HIGH", "0.9")
        monkeypatch.setenv("UISCHEMA_ID_SUFFIX", "env")

        config = FixerConfig()

        assert config.high_threshold == 0.9
        assert config.medium_threshold == 0.6
        assert config.id_suffix == "env"

    @pytest.mark.unit
    def test_confidence_for(self):
        config = _config()
        assert config.confidence_for(0.8) is Confidence.HIGH
        assert config.confidence_for(0.6) is Confidence.MEDIUM
        assert config.confidence_for(0.59) is Confidence.LOW


class TestModuleFunctions:
    """Convenience wrappers."""

    @pytest.mark.unit
    def test_fix_ui_description(self, catalog):
        result = fix_ui_description({"root": {"type": "btn"}}, catalog, _config())
        assert result.fixed["root"]["type"] == "Button"

    @pytest.mark.unit
    def test_needs_fix(self, catalog, valid_document):
        assert needs_fix({"root": {"type": "btn"}}, catalog)
        assert not needs_fix(valid_document, catalog)


# =============================================================================
# Properties
# =============================================================================

_CATALOG = build_default_catalog()
_FREE_TYPES = [
    entry.canonical_name
    for entry in _CATALOG.entries()
    if not entry.required_properties and not entry.deprecated
]
_FREE_NAMES = _FREE_TYPES + sorted(
    alias for alias, owner in _CATALOG.get_aliases().items() if owner in _FREE_TYPES
)

_loose_nodes = st.fixed_dictionaries(
    {"type": st.sampled_from(_FREE_NAMES)},
    optional={"id": st.sampled_from(["a", "b", "c", "", "text-1"])},
)


@st.composite
def _loose_documents(draw):
    """Documents with only fixable problems: missing version, aliases, bad ids."""
    children = draw(st.lists(_loose_nodes, max_size=6))
    document = {"root": {"type": "Container", "children": children}}
    if draw(st.booleans()):
        document["version"] = "1.0"
    return document


class TestProperties:
    """Repair invariants over generated documents."""

    @pytest.mark.unit
    @given(_loose_documents())
    def test_fixable_documents_validate_after_fix(self, document):
        fixed = SchemaFixer(_CATALOG, _config()).fix(document).fixed
        result = SchemaValidator(_CATALOG, strict=False).validate(fixed)
        assert result.valid, result.codes()

    @pytest.mark.unit
    @given(_loose_documents())
    def test_fix_is_idempotent(self, document):
        fixer = SchemaFixer(_CATALOG, _config())
        once = fixer.fix(document)
        twice = fixer.fix(once.fixed)

        assert twice.changes == []
        assert twice.fixed == once.fixed

    @pytest.mark.unit
    @given(_loose_documents())
    def test_can_fix_agrees_with_fix(self, document):
        fixer = SchemaFixer(_CATALOG, _config())
        assert fixer.can_fix(document) == fixer.fix(document).changed
