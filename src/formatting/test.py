"""Unit tests for formatting module."""

import pytest

from src.diagnostics import Diagnostic, DiagnosticCode, Severity
from src.formatting import (
    DEFAULT_MESSAGES,
    ErrorFormatter,
    FormattedDiagnostic,
    Language,
    MessageTemplate,
    extract_values,
    fill_template,
    format_diagnostics,
)
from src.validation import SchemaValidator

UNKNOWN = Diagnostic(
    DiagnosticCode.UNKNOWN_COMPONENT,
    'Unknown component type "Bouton" at "root"',
    "root.type",
    suggestion="Did you mean: Button, Badge?",
)
ENUM_NO_MATCH = Diagnostic(
    DiagnosticCode.INVALID_ENUM_VALUE,
    'Invalid enum value "diagonal" for property "orientation" at "root"',
    "root.props.orientation",
    suggestion="Valid values: horizontal, vertical",
)
PARSE_FAILURE = Diagnostic(
    DiagnosticCode.INVALID_JSON,
    "Invalid JSON: Unexpected character 'x' at line 2, column 5 ($.root)",
    "$.root",
    suggestion="Check for missing brackets, quotes, or commas",
)


@pytest.fixture
def formatter():
    return ErrorFormatter(Language.EN)


class TestTemplates:
    """Bundled templates and placeholder filling."""

    @pytest.mark.unit
    @pytest.mark.parametrize("language", list(Language))
    def test_every_code_translated(self, formatter, language):
        for code in DiagnosticCode:
            assert formatter.has_translation(code, language), (language, code)

    @pytest.mark.unit
    def test_supported_codes(self, formatter):
        assert set(formatter.supported_codes()) == set(DiagnosticCode)

    @pytest.mark.unit
    def test_fill_template(self):
        filled = fill_template('Bad "{{name}}" at {{path}}', {"name": "x", "path": "root"})
        assert filled == 'Bad "x" at root'

    @pytest.mark.unit
    def test_fill_template_joins_lists(self):
        assert fill_template("{{types}}", {"types": ["Button", "Badge"]}) == "Button, Badge"

    @pytest.mark.unit
    @pytest.mark.parametrize("values", [{}, {"name": ""}, {"name": None}])
    def test_fill_template_missing_value(self, values):
        assert fill_template("{{name}}", values) is None

    @pytest.mark.unit
    def test_no_placeholders(self):
        assert fill_template("plain", {}) == "plain"


class TestExtractValues:
    """Template values recovered from diagnostics."""

    @pytest.mark.unit
    def test_unknown_component(self):
        values = extract_values(UNKNOWN)
        assert values["component_type"] == "Bouton"
        assert values["suggestions"] == "Button, Badge"
        assert values["path"] == "root.type"

    @pytest.mark.unit
    def test_enum_value(self):
        values = extract_values(ENUM_NO_MATCH)
        assert values["actual_value"] == "diagonal"
        assert values["prop_name"] == "orientation"
        assert "suggestions" not in values

    @pytest.mark.unit
    def test_quoted_enum_suggestion(self):
        diagnostic = Diagnostic(
            DiagnosticCode.INVALID_ENUM_VALUE,
            'Invalid enum value "outlin" for property "variant" at "root"',
            "root.props.variant",
            suggestion='Did you mean "outline"? Valid values: default, outline',
        )
        assert extract_values(diagnostic)["suggestions"] == "outline"

    @pytest.mark.unit
    def test_parse_position(self):
        values = extract_values(PARSE_FAILURE)
        assert (values["line"], values["column"]) == ("2", "5")

    @pytest.mark.unit
    def test_prop_kinds(self):
        diagnostic = Diagnostic(
            DiagnosticCode.INVALID_PROP_TYPE,
            'Invalid type for property "disabled" at "root": expected boolean, got string',
            "root.props.disabled",
        )
        values = extract_values(diagnostic)
        assert values["prop_name"] == "disabled"
        assert values["expected_kind"] == "boolean"
        assert values["actual_kind"] == "string"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "message,field",
        [
            ("Missing required field: root", "root"),
            ('Field "version" must be a string', "version"),
        ],
    )
    def test_field(self, message, field):
        diagnostic = Diagnostic(DiagnosticCode.MISSING_FIELD, message, "root")
        assert extract_values(diagnostic)["field"] == field


class TestFormat:
    """Rendering single diagnostics."""

    @pytest.mark.unit
    def test_english(self, formatter):
        formatted = formatter.format(UNKNOWN)

        assert formatted.code is DiagnosticCode.UNKNOWN_COMPONENT
        assert formatted.message == 'Unknown component type "Bouton"'
        assert formatted.location == "Path: root.type"
        assert formatted.suggestion == "Did you mean: Button, Badge?"
        assert formatted.severity is Severity.ERROR

    @pytest.mark.unit
    def test_chinese(self):
        formatted = ErrorFormatter(Language.ZH).format(UNKNOWN)

        assert formatted.message == '未知的组件类型 "Bouton"'
        assert formatted.location == "路径: root.type"
        assert formatted.suggestion == "您是否想使用：Button, Badge？"

    @pytest.mark.unit
    def test_language_override_per_call(self, formatter):
        formatted = formatter.format(UNKNOWN, language="zh")
        assert formatted.message.startswith("未知的组件类型")
        assert formatter.language is Language.EN

    @pytest.mark.unit
    def test_suggestion_falls_back_to_diagnostic(self):
        formatted = ErrorFormatter(Language.ZH).format(ENUM_NO_MATCH)

        assert formatted.message == '属性 "orientation" 的值 "diagonal" 无效'
        assert formatted.suggestion == "Valid values: horizontal, vertical"

    @pytest.mark.unit
    def test_message_falls_back_when_unfillable(self, formatter):
        diagnostic = Diagnostic(
            DiagnosticCode.INVALID_TYPE, "Schema must be an object, got null", ""
        )
        formatted = formatter.format(diagnostic)

        assert formatted.message == "Schema must be an object, got null"
        assert formatted.location is None

    @pytest.mark.unit
    def test_location_with_position(self):
        formatted = ErrorFormatter(Language.ZH).format(PARSE_FAILURE)

        assert formatted.message == "JSON 格式错误，位于第 2 行第 5 列"
        assert formatted.location == "路径: $.root | 第 2 行, 第 5 列"

    @pytest.mark.unit
    def test_options_disable_parts(self):
        formatter = ErrorFormatter(Language.EN, include_location=False)

        formatted = formatter.format(UNKNOWN, include_suggestion=False)

        assert formatted.location is None
        assert formatted.suggestion is None

    @pytest.mark.unit
    def test_warning_severity_kept(self, formatter):
        formatted = formatter.format(UNKNOWN.as_warning())
        assert formatted.severity is Severity.WARNING

    @pytest.mark.unit
    def test_unknown_language_rejected(self):
        with pytest.raises(ValueError):
            ErrorFormatter("fr")

    @pytest.mark.unit
    def test_language_from_environment(self, monkeypatch):
        monkeypatch.setenv("UISCHEMA_LANGUAGE", "zh")
        assert ErrorFormatter().language is Language.ZH

    @pytest.mark.unit
    def test_english_fallback_for_missing_language(self):
        templates = {
            Language.EN: {
                DiagnosticCode.MISSING_ID: MessageTemplate("No id"),
            }
        }
        formatter = ErrorFormatter(Language.ZH, templates=templates)
        diagnostic = Diagnostic(DiagnosticCode.MISSING_ID, "Missing id", "root")

        assert not formatter.has_translation(DiagnosticCode.MISSING_ID)
        assert formatter.format(diagnostic).message == "No id"

    @pytest.mark.unit
    def test_to_dict_omits_empty_parts(self, formatter):
        diagnostic = Diagnostic(DiagnosticCode.INVALID_STRUCTURE, "Cycle detected", "")
        data = formatter.format(diagnostic).to_dict()

        assert data == {
            "code": "INVALID_STRUCTURE",
            "message": "Invalid document structure",
            "severity": "error",
        }


class TestFormatValidatorOutput:
    """Rendering what the validator actually produces."""

    @pytest.mark.unit
    def test_validator_diagnostics(self, catalog):
        document = {
            "root": {
                "id": "a",
                "type": "Container",
                "children": [
                    {"id": "a", "type": "Bouton"},
                    {"id": "b", "type": "Separator", "props": {"orientation": "diagonal"}},
                ],
            }
        }
        result = SchemaValidator(catalog, strict=False).validate(document)

        formatted = format_diagnostics(result.diagnostics, Language.ZH)

        assert [f.code for f in formatted] == [d.code for d in result.diagnostics]
        assert all(isinstance(f, FormattedDiagnostic) for f in formatted)
        messages = {f.code: f.message for f in formatted}
        assert messages[DiagnosticCode.DUPLICATE_ID] == '组件 id "a" 重复'
        assert messages[DiagnosticCode.UNKNOWN_COMPONENT] == '未知的组件类型 "Bouton"'
        assert messages[DiagnosticCode.MISSING_VERSION] == "Schema 缺少 version 字段"

    @pytest.mark.unit
    def test_format_all(self, formatter):
        formatted = formatter.format_all([UNKNOWN, PARSE_FAILURE], language=Language.ZH)
        assert [f.code for f in formatted] == [
            DiagnosticCode.UNKNOWN_COMPONENT,
            DiagnosticCode.INVALID_JSON,
        ]

    @pytest.mark.unit
    def test_bundled_tables_cover_same_codes(self):
        assert set(DEFAULT_MESSAGES[Language.EN]) == set(DEFAULT_MESSAGES[Language.ZH])
