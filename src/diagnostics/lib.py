"""Result types for validation and repair.

All records here are created fresh per call and never mutated after they
are emitted; collections on the result objects are plain lists owned by
the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DiagnosticCode(str, Enum):
    """Stable diagnostic codes."""

    # Schema violations
    UNKNOWN_COMPONENT = "UNKNOWN_COMPONENT"
    MISSING_REQUIRED_PROP = "MISSING_REQUIRED_PROP"
    INVALID_PROP_TYPE = "INVALID_PROP_TYPE"
    INVALID_ENUM_VALUE = "INVALID_ENUM_VALUE"
    MISSING_ID = "MISSING_ID"
    MISSING_VERSION = "MISSING_VERSION"
    DEPRECATED_COMPONENT = "DEPRECATED_COMPONENT"
    DUPLICATE_ID = "DUPLICATE_ID"
    CASE_MISMATCH = "CASE_MISMATCH"

    # Structural problems
    INVALID_JSON = "INVALID_JSON"
    INVALID_TYPE = "INVALID_TYPE"
    INVALID_VALUE = "INVALID_VALUE"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_STRUCTURE = "INVALID_STRUCTURE"


class Severity(str, Enum):
    """Diagnostic severity. Only errors affect validity."""

    ERROR = "error"
    WARNING = "warning"


class Confidence(str, Enum):
    """Certainty that an automatic correction matches generator intent."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FixKind(str, Enum):
    """Kinds of change the fixer records."""

    ADD_VERSION = "add_version"
    ADD_ROOT = "add_root"
    FIX_TYPE = "fix_type"
    RESOLVE_ALIAS = "resolve_alias"
    ADD_ID = "add_id"
    FIX_DUPLICATE_ID = "fix_duplicate_id"
    FIX_ENUM = "fix_enum"
    ADD_DEFAULT_PROP = "add_default_prop"


def child_path(path: str, index: int) -> str:
    """Address a child node, e.g. ``root.children[2]``."""
    return f"{path}.children[{index}]"


def prop_path(path: str, name: str) -> str:
    """Address a node property, e.g. ``root.props.variant``."""
    return f"{path}.props.{name}"


@dataclass(frozen=True)
class Diagnostic:
    """A single validation finding.

    Attributes:
        code: Stable machine-readable code.
        message: Human-readable description.
        path: Dot/bracket address of the offending value (``root...``).
        severity: Error or warning.
        suggestion: Optional correction hint.
    """

    code: DiagnosticCode
    message: str
    path: str = ""
    severity: Severity = Severity.ERROR
    suggestion: str | None = None

    def as_warning(self) -> "Diagnostic":
        """Return a copy downgraded to warning severity."""
        return Diagnostic(
            code=self.code,
            message=self.message,
            path=self.path,
            severity=Severity.WARNING,
            suggestion=self.suggestion,
        )

    def as_error(self) -> "Diagnostic":
        """Return a copy promoted to error severity."""
        return Diagnostic(
            code=self.code,
            message=self.message,
            path=self.path,
            severity=Severity.ERROR,
            suggestion=self.suggestion,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        data: dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "path": self.path,
            "severity": self.severity.value,
        }
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data


@dataclass
class ValidationResult:
    """Outcome of a validation pass.

    Attributes:
        errors: Error-severity diagnostics.
        warnings: Warning-severity diagnostics.
        parsed: The document that was validated, when one was available.
    """

    errors: list[Diagnostic] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)
    parsed: Any = None

    @property
    def valid(self) -> bool:
        """True iff there are no errors. Warnings never affect validity."""
        return not self.errors

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Errors followed by warnings."""
        return [*self.errors, *self.warnings]

    def add(self, diagnostic: Diagnostic) -> None:
        """File a diagnostic under errors or warnings by its severity."""
        if diagnostic.severity is Severity.ERROR:
            self.errors.append(diagnostic)
        else:
            self.warnings.append(diagnostic)

    def codes(self) -> list[str]:
        """Codes of all diagnostics, errors first."""
        return [d.code.value for d in self.diagnostics]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "valid": self.valid,
            "errors": [d.to_dict() for d in self.errors],
            "warnings": [d.to_dict() for d in self.warnings],
        }


@dataclass(frozen=True)
class FixChange:
    """One correction applied by the fixer.

    Attributes:
        kind: What was changed.
        path: Address of the changed value.
        old_value: Value before the change (None when absent).
        new_value: Value after the change.
        confidence: Certainty of the correction.
        description: Human-readable summary.
    """

    kind: FixKind
    path: str
    old_value: Any
    new_value: Any
    confidence: Confidence
    description: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "kind": self.kind.value,
            "path": self.path,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "confidence": self.confidence.value,
            "description": self.description,
        }


@dataclass
class FixResult:
    """Outcome of a repair attempt.

    Attributes:
        fixed: The corrected document (a new object, never the input).
        changes: Corrections applied, in the order they were made.
        unfixable: Problems the fixer could not resolve.
    """

    fixed: dict[str, Any]
    changes: list[FixChange] = field(default_factory=list)
    unfixable: list[Diagnostic] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """True if at least one correction was applied."""
        return bool(self.changes)

    def changes_at_or_above(self, confidence: Confidence) -> list[FixChange]:
        """Changes whose confidence is at least `confidence`."""
        order = [Confidence.LOW, Confidence.MEDIUM, Confidence.HIGH]
        floor = order.index(confidence)
        return [c for c in self.changes if order.index(c.confidence) >= floor]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "fixed": self.fixed,
            "changes": [c.to_dict() for c in self.changes],
            "unfixable": [d.to_dict() for d in self.unfixable],
        }
