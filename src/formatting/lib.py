"""Localized rendering of diagnostics.

Diagnostics carry English messages built at the point of detection. The
ErrorFormatter re-renders them for people through per-language templates
keyed by DiagnosticCode. Template values (component type, property name,
line and column, ...) are recovered from the diagnostic itself, so the
validator, fixer and parser need no knowledge of languages.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.config import EnvVar, get_environment
from src.diagnostics import Diagnostic, DiagnosticCode, Severity

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")

# (placeholder names, pattern) pairs matched against the diagnostic message
_MESSAGE_VALUES: tuple[tuple[tuple[str, ...], re.Pattern[str]], ...] = (
    (("component_type",), re.compile(r'(?:type|Component) "([^"]+)"')),
    (("prop_name",), re.compile(r'property "([^"]+)"')),
    (("actual_value",), re.compile(r'value "([^"]+)"')),
    (("component_id",), re.compile(r'id "([^"]+)"')),
    (("field",), re.compile(r'[Ff]ield:? "?(\w+)')),
    (("expected_kind", "actual_kind"), re.compile(r"expected (\w+), got (\w+)")),
    (("line", "column"), re.compile(r"line (\d+), column (\d+)")),
)

# Same, matched against the diagnostic suggestion
_SUGGESTION_VALUES: tuple[tuple[tuple[str, ...], re.Pattern[str]], ...] = (
    (("suggestions",), re.compile(r'Did you mean:? "?([^"?]+)"?\?')),
    (("expected_type",), re.compile(r'^Use "([^"]+)"')),
)


class Language(str, Enum):
    """Languages diagnostics can be rendered in."""

    EN = "en"
    ZH = "zh"


@dataclass(frozen=True)
class MessageTemplate:
    """Message and optional suggestion template for one diagnostic code.

    Attributes:
        message: Template with ``{{name}}`` placeholders.
        suggestion: Suggestion template. When None, the diagnostic's own
            suggestion is shown.
    """

    message: str
    suggestion: str | None = None


@dataclass(frozen=True)
class LocationLabels:
    """Per-language labels for the location line."""

    path: str
    position: str


@dataclass(frozen=True)
class FormattedDiagnostic:
    """A diagnostic rendered for display.

    Attributes:
        code: Stable diagnostic code, never translated.
        message: Rendered message.
        severity: Severity of the source diagnostic.
        location: Rendered path and position, if requested and known.
        suggestion: Rendered suggestion, if requested and known.
    """

    code: DiagnosticCode
    message: str
    severity: Severity
    location: str | None = None
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.location is not None:
            data["location"] = self.location
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data


TemplateTable = Mapping[Language, Mapping[DiagnosticCode, MessageTemplate]]


def fill_template(template: str, values: Mapping[str, Any]) -> str | None:
    """Substitute ``{{name}}`` placeholders.

    Args:
        template: Template text.
        values: Placeholder values. Empty strings count as missing.

    Returns:
        The filled text, or None if any placeholder has no value.
    """
    missing = False

    def substitute(match: re.Match[str]) -> str:
        nonlocal missing
        value = values.get(match.group(1))
        if value is None or value == "":
            missing = True
            return match.group(0)
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        return str(value)

    filled = PLACEHOLDER.sub(substitute, template)
    return None if missing else filled


def extract_values(diagnostic: Diagnostic) -> dict[str, str]:
    """Recover template values from a diagnostic's path, message and suggestion."""
    values: dict[str, str] = {}
    if diagnostic.path:
        values["path"] = diagnostic.path

    sources = [(diagnostic.message, _MESSAGE_VALUES)]
    if diagnostic.suggestion:
        sources.append((diagnostic.suggestion, _SUGGESTION_VALUES))
    for text, patterns in sources:
        for names, pattern in patterns:
            match = pattern.search(text)
            if match is None:
                continue
            for name, value in zip(names, match.groups()):
                values.setdefault(name, value.strip())
    return values


class ErrorFormatter:
    """Render diagnostics through per-language templates.

    Lookup falls back from the requested language to English, then to the
    diagnostic's own message. A template is used only when every one of its
    placeholders can be filled.

    Args:
        language: Output language. Defaults to UISCHEMA_LANGUAGE.
        include_location: Add a location line built from path, line and column.
        include_suggestion: Add the rendered suggestion.
        templates: Template table. Defaults to the bundled messages.
        labels: Location labels per language. Defaults to the bundled labels.

    Example:
        >>> formatter = ErrorFormatter(Language.ZH)
        >>> formatter.format(diagnostic).message
        '未知的组件类型 "Bouton"'
    """

    def __init__(
        self,
        language: Language | str | None = None,
        *,
        include_location: bool = True,
        include_suggestion: bool = True,
        templates: TemplateTable | None = None,
        labels: Mapping[Language, LocationLabels] | None = None,
    ):
        self.language = Language(get_environment(EnvVar.UISCHEMA_LANGUAGE, language))
        self.include_location = include_location
        self.include_suggestion = include_suggestion
        if templates is None or labels is None:
            from .messages import DEFAULT_LABELS, DEFAULT_MESSAGES

            templates = DEFAULT_MESSAGES if templates is None else templates
            labels = DEFAULT_LABELS if labels is None else labels
        self.templates = templates
        self.labels = labels

    def format(
        self,
        diagnostic: Diagnostic,
        *,
        language: Language | str | None = None,
        include_location: bool | None = None,
        include_suggestion: bool | None = None,
    ) -> FormattedDiagnostic:
        """Render one diagnostic.

        Keyword arguments override the formatter's settings for this call.
        """
        lang = Language(language) if language is not None else self.language
        if include_location is None:
            include_location = self.include_location
        if include_suggestion is None:
            include_suggestion = self.include_suggestion

        values = extract_values(diagnostic)
        template = self._template(diagnostic.code, lang)

        message = None
        if template is not None:
            message = fill_template(template.message, values)
        if message is None:
            logger.debug(f"No usable {lang.value} template for {diagnostic.code.value}")
            message = diagnostic.message

        suggestion = None
        if include_suggestion:
            if template is not None and template.suggestion is not None:
                suggestion = fill_template(template.suggestion, values)
            if suggestion is None:
                suggestion = diagnostic.suggestion

        location = self._location(values, lang) if include_location else None

        return FormattedDiagnostic(
            code=diagnostic.code,
            message=message,
            severity=diagnostic.severity,
            location=location,
            suggestion=suggestion,
        )

    def format_all(
        self, diagnostics: Iterable[Diagnostic], **options: Any
    ) -> list[FormattedDiagnostic]:
        """Render several diagnostics with the same options."""
        return [self.format(d, **options) for d in diagnostics]

    def has_translation(
        self, code: DiagnosticCode, language: Language | str | None = None
    ) -> bool:
        """Check for a template in exactly this language, without fallback."""
        lang = Language(language) if language is not None else self.language
        return code in self.templates.get(lang, {})

    def supported_codes(self) -> list[DiagnosticCode]:
        """Codes with an English template."""
        return list(self.templates.get(Language.EN, {}))

    def _template(self, code: DiagnosticCode, language: Language) -> MessageTemplate | None:
        for lang in (language, Language.EN):
            template = self.templates.get(lang, {}).get(code)
            if template is not None:
                return template
        return None

    def _location(self, values: Mapping[str, str], language: Language) -> str | None:
        labels = self.labels.get(language) or self.labels[Language.EN]
        parts = []
        if "path" in values:
            parts.append(labels.path.format(path=values["path"]))
        if "line" in values and "column" in values:
            parts.append(labels.position.format(line=values["line"], column=values["column"]))
        return " | ".join(parts) or None


def format_diagnostics(
    diagnostics: Iterable[Diagnostic], language: Language | str | None = None
) -> list[FormattedDiagnostic]:
    """Render diagnostics with a one-off ErrorFormatter."""
    return ErrorFormatter(language).format_all(diagnostics)


__all__ = [
    "ErrorFormatter",
    "FormattedDiagnostic",
    "Language",
    "LocationLabels",
    "MessageTemplate",
    "PLACEHOLDER",
    "TemplateTable",
    "extract_values",
    "fill_template",
    "format_diagnostics",
]
