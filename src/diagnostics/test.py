"""Unit tests for diagnostic result types."""

import pytest

from src.diagnostics import (
    Confidence,
    Diagnostic,
    DiagnosticCode,
    FixChange,
    FixKind,
    FixResult,
    Severity,
    ValidationResult,
    child_path,
    prop_path,
)


class TestDiagnosticCode:
    """Tests for code stability."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "code",
        [
            "UNKNOWN_COMPONENT",
            "MISSING_REQUIRED_PROP",
            "INVALID_PROP_TYPE",
            "INVALID_ENUM_VALUE",
            "MISSING_ID",
            "MISSING_VERSION",
            "DEPRECATED_COMPONENT",
            "DUPLICATE_ID",
            "CASE_MISMATCH",
        ],
    )
    def test_code_values_are_their_names(self, code):
        assert DiagnosticCode(code).value == code
        assert DiagnosticCode[code] == code


class TestPaths:
    """Tests for path helpers."""

    @pytest.mark.unit
    def test_child_path(self):
        assert child_path("root", 0) == "root.children[0]"
        assert child_path("root.children[0]", 3) == "root.children[0].children[3]"

    @pytest.mark.unit
    def test_prop_path(self):
        assert prop_path("root.children[1]", "variant") == "root.children[1].props.variant"


class TestDiagnostic:
    """Tests for Diagnostic."""

    @pytest.mark.unit
    def test_defaults_to_error(self):
        diag = Diagnostic(DiagnosticCode.MISSING_ID, "Missing id", "root")
        assert diag.severity is Severity.ERROR
        assert diag.suggestion is None

    @pytest.mark.unit
    def test_as_warning_copies(self):
        diag = Diagnostic(DiagnosticCode.UNKNOWN_COMPONENT, "x", "root", suggestion="y")
        warning = diag.as_warning()
        assert warning.severity is Severity.WARNING
        assert warning.suggestion == "y"
        assert diag.severity is Severity.ERROR

    @pytest.mark.unit
    def test_frozen(self):
        diag = Diagnostic(DiagnosticCode.MISSING_ID, "Missing id")
        with pytest.raises(AttributeError):
            diag.message = "changed"

    @pytest.mark.unit
    def test_to_dict_omits_empty_suggestion(self):
        data = Diagnostic(DiagnosticCode.MISSING_ID, "Missing id", "root").to_dict()
        assert data == {
            "code": "MISSING_ID",
            "message": "Missing id",
            "path": "root",
            "severity": "error",
        }


class TestValidationResult:
    """Tests for ValidationResult."""

    @pytest.mark.unit
    def test_empty_is_valid(self):
        assert ValidationResult().valid is True

    @pytest.mark.unit
    def test_warnings_do_not_invalidate(self):
        result = ValidationResult()
        result.add(
            Diagnostic(DiagnosticCode.MISSING_VERSION, "m", severity=Severity.WARNING)
        )
        assert result.valid is True
        assert len(result.warnings) == 1

    @pytest.mark.unit
    def test_errors_invalidate(self):
        result = ValidationResult()
        result.add(Diagnostic(DiagnosticCode.DUPLICATE_ID, "d", "root.children[1]"))
        assert result.valid is False
        assert result.codes() == ["DUPLICATE_ID"]

    @pytest.mark.unit
    def test_to_dict(self):
        result = ValidationResult()
        result.add(Diagnostic(DiagnosticCode.MISSING_ID, "m", "root"))
        data = result.to_dict()
        assert data["valid"] is False
        assert data["errors"][0]["code"] == "MISSING_ID"
        assert data["warnings"] == []


class TestFixResult:
    """Tests for FixResult."""

    @pytest.mark.unit
    def test_changes_at_or_above(self):
        high = FixChange(FixKind.ADD_ID, "root", None, "a", Confidence.HIGH, "")
        medium = FixChange(FixKind.FIX_ENUM, "root", "x", "y", Confidence.MEDIUM, "")
        result = FixResult(fixed={}, changes=[high, medium])
        assert result.changes_at_or_above(Confidence.HIGH) == [high]
        assert result.changes_at_or_above(Confidence.MEDIUM) == [high, medium]
        assert result.changed is True

    @pytest.mark.unit
    def test_to_dict(self):
        change = FixChange(
            FixKind.ADD_VERSION, "version", None, "1.0", Confidence.HIGH, "Added"
        )
        data = FixResult(fixed={"version": "1.0"}, changes=[change]).to_dict()
        assert data["changes"][0]["kind"] == "add_version"
        assert data["changes"][0]["confidence"] == "high"
        assert data["unfixable"] == []
