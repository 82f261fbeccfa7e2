"""Diagnostic types shared by the validator, fixer and streaming session.

Diagnostic codes are a stable contract: consumers match on the code string,
never on message text.
"""

from .lib import (
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

__all__ = [
    "Confidence",
    "Diagnostic",
    "DiagnosticCode",
    "FixChange",
    "FixKind",
    "FixResult",
    "Severity",
    "ValidationResult",
    "child_path",
    "prop_path",
]
