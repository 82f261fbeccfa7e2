"""Formatting module - localized rendering of diagnostics.

This module provides:
- Per-language message templates keyed by diagnostic code
- An ErrorFormatter with location and suggestion rendering
- Bundled English and Simplified Chinese messages

Example usage:
    >>> from src.formatting import ErrorFormatter, Language
    >>> formatter = ErrorFormatter(Language.ZH)
    >>> rendered = formatter.format_all(result.diagnostics)
"""

from .lib import (
    PLACEHOLDER,
    ErrorFormatter,
    FormattedDiagnostic,
    Language,
    LocationLabels,
    MessageTemplate,
    TemplateTable,
    extract_values,
    fill_template,
    format_diagnostics,
)
from .messages import DEFAULT_LABELS, DEFAULT_MESSAGES

__all__ = [
    # Templates
    "DEFAULT_LABELS",
    "DEFAULT_MESSAGES",
    "Language",
    "LocationLabels",
    "MessageTemplate",
    "PLACEHOLDER",
    "TemplateTable",
    "fill_template",
    # Formatting
    "ErrorFormatter",
    "FormattedDiagnostic",
    "extract_values",
    "format_diagnostics",
]
