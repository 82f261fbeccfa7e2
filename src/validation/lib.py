"""Authoritative validation of complete UI descriptions.

This module walks a parsed UI description and produces typed,
severity-tagged diagnostics with suggestions, using a ComponentCatalog as
ground truth. Validation is total: any input, including non-objects, cyclic
in-memory structures and absurdly deep trees, yields a ValidationResult.
"""

import logging
from collections.abc import Mapping
from typing import Any

from src.catalog import ComponentCatalog, PropertySchema, ValueKind
from src.config import EnvVar, get_environment
from src.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    Severity,
    ValidationResult,
    child_path,
    prop_path,
)
from src.similarity import find_closest, rank_similar

logger = logging.getLogger(__name__)

# Candidates below this score are not worth suggesting for unknown types
SUGGESTION_FLOOR = 0.3
MAX_SUGGESTIONS = 3


def kind_of(value: Any) -> str:
    """Name the value kind of a JSON-like Python value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    if callable(value):
        return "function"
    return type(value).__name__


def matches_kind(value: Any, kind: ValueKind) -> bool:
    """Check a property value against its declared kind.

    Booleans are not numbers. Functions cannot travel through JSON, so a
    string handler reference is accepted for the ``function`` kind.
    """
    if kind is ValueKind.STRING:
        return isinstance(value, str)
    if kind is ValueKind.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if kind is ValueKind.BOOLEAN:
        return isinstance(value, bool)
    if kind is ValueKind.OBJECT:
        return isinstance(value, Mapping)
    if kind is ValueKind.ARRAY:
        return isinstance(value, (list, tuple))
    if kind is ValueKind.FUNCTION:
        return callable(value) or isinstance(value, str)
    return False


class SchemaValidator:
    """Validate UI descriptions against a component catalog.

    Checks run in this order: version, root, then for every node
    depth-first: id, type, props, required props, value kinds, enum values,
    children.

    Args:
        catalog: Catalog used as ground truth.
        strict: Promote warnings to errors. Defaults to UISCHEMA_STRICT.
        max_depth: Deepest node nesting walked. Defaults to UISCHEMA_MAX_DEPTH.
        enum_threshold: Minimum similarity for an enum value suggestion.
            Defaults to UISCHEMA_SIMILARITY_MEDIUM.

    Example:
        >>> validator = SchemaValidator(build_default_catalog())
        >>> result = validator.validate({"root": {"id": "a", "type": "Buton"}})
        >>> [d.code.value for d in result.errors]
        ['UNKNOWN_COMPONENT']
    """

    def __init__(
        self,
        catalog: ComponentCatalog,
        *,
        strict: bool | None = None,
        max_depth: int | None = None,
        enum_threshold: float | None = None,
    ):
        self.catalog = catalog
        self.strict = get_environment(EnvVar.UISCHEMA_STRICT, strict)
        self.max_depth = get_environment(EnvVar.UISCHEMA_MAX_DEPTH, max_depth)
        self.enum_threshold = get_environment(
            EnvVar.UISCHEMA_SIMILARITY_MEDIUM, enum_threshold
        )
        self.default_version = get_environment(EnvVar.UISCHEMA_DEFAULT_VERSION)

    def validate(self, document: Any) -> ValidationResult:
        """Validate a complete UI description.

        Args:
            document: Parsed description; any value is accepted.

        Returns:
            ValidationResult whose ``valid`` is True iff there are no errors.
        """
        result = ValidationResult(parsed=document)
        walk = _Walk(self, result)
        walk.document(document)

        if self.strict and result.warnings:
            result.errors.extend(d.as_error() for d in result.warnings)
            result.warnings = []

        logger.debug(
            f"Validated document: {len(result.errors)} error(s), "
            f"{len(result.warnings)} warning(s)"
        )
        return result


class _Walk:
    """State for a single validation pass."""

    def __init__(self, validator: SchemaValidator, result: ValidationResult):
        self.validator = validator
        self.catalog = validator.catalog
        self.result = result
        self.seen_ids: set[str] = set()
        self.ancestors: set[int] = set()

    def error(
        self,
        code: DiagnosticCode,
        message: str,
        path: str,
        suggestion: str | None = None,
    ) -> None:
        self.result.add(Diagnostic(code, message, path, Severity.ERROR, suggestion))

    def warning(
        self,
        code: DiagnosticCode,
        message: str,
        path: str,
        suggestion: str | None = None,
    ) -> None:
        self.result.add(Diagnostic(code, message, path, Severity.WARNING, suggestion))

    # -------------------------------------------------------------------------
    # Document level
    # -------------------------------------------------------------------------

    def document(self, document: Any) -> None:
        if not isinstance(document, Mapping):
            self.error(
                DiagnosticCode.INVALID_TYPE,
                f"Schema must be an object, got {kind_of(document)}",
                "",
            )
            return

        if "version" not in document or document["version"] is None:
            self.warning(
                DiagnosticCode.MISSING_VERSION,
                "Missing required field: version",
                "version",
                f'Add "version": "{self.validator.default_version}" to your schema',
            )
        elif not isinstance(document["version"], str):
            self.error(
                DiagnosticCode.INVALID_TYPE, 'Field "version" must be a string', "version"
            )
        elif not document["version"].strip():
            self.error(
                DiagnosticCode.INVALID_VALUE, 'Field "version" cannot be empty', "version"
            )

        if "root" not in document:
            self.error(DiagnosticCode.MISSING_FIELD, "Missing required field: root", "root")
            return
        if not isinstance(document["root"], Mapping):
            self.error(
                DiagnosticCode.INVALID_TYPE,
                f'Field "root" must be an object, got {kind_of(document["root"])}',
                "root",
            )
            return

        self.node(document["root"], "root", 1)

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def node(self, node: Mapping[str, Any], path: str, depth: int) -> None:
        if depth > self.validator.max_depth:
            self.error(
                DiagnosticCode.INVALID_STRUCTURE,
                f"Maximum nesting depth {self.validator.max_depth} exceeded at \"{path}\"",
                path,
            )
            return
        if id(node) in self.ancestors:
            self.error(
                DiagnosticCode.INVALID_STRUCTURE,
                f'Cycle detected: component at "{path}" contains itself',
                path,
            )
            return

        self.check_id(node, path)
        canonical = self.check_type(node, path)

        props = node.get("props")
        if props is not None and not isinstance(props, Mapping):
            self.error(
                DiagnosticCode.INVALID_TYPE,
                f'Field "props" must be an object at "{path}"',
                f"{path}.props",
            )
        elif canonical is not None:
            schemas = self.catalog.get_property_schema(canonical) or {}
            self.check_props(props or {}, schemas, path)

        self.ancestors.add(id(node))
        try:
            self.children(node, path, depth)
        finally:
            self.ancestors.discard(id(node))

    def check_id(self, node: Mapping[str, Any], path: str) -> None:
        node_id = node.get("id")
        if node_id is None:
            self.error(
                DiagnosticCode.MISSING_ID,
                f'Missing required field: id at "{path}"',
                path,
                "Add a unique string id to the component",
            )
        elif not isinstance(node_id, str):
            self.error(
                DiagnosticCode.INVALID_TYPE,
                f'Field "id" must be a string at "{path}"',
                f"{path}.id",
            )
        elif not node_id.strip():
            self.error(
                DiagnosticCode.MISSING_ID,
                f'Field "id" cannot be empty at "{path}"',
                path,
                "Add a unique string id to the component",
            )
        elif node_id in self.seen_ids:
            self.error(
                DiagnosticCode.DUPLICATE_ID,
                f'Duplicate component id "{node_id}" at "{path}"',
                f"{path}.id",
                "Component ids must be unique within the document",
            )
        else:
            self.seen_ids.add(node_id)

    def check_type(self, node: Mapping[str, Any], path: str) -> str | None:
        """Validate the node type and return its canonical name if it resolves."""
        if "type" not in node:
            self.error(
                DiagnosticCode.MISSING_FIELD, f'Missing required field: type at "{path}"', path
            )
            return None
        component_type = node["type"]
        if not isinstance(component_type, str):
            self.error(
                DiagnosticCode.INVALID_TYPE,
                f'Field "type" must be a string at "{path}"',
                f"{path}.type",
            )
            return None
        if not component_type.strip():
            self.error(
                DiagnosticCode.INVALID_VALUE,
                f'Field "type" cannot be empty at "{path}"',
                f"{path}.type",
            )
            return None

        canonical = self.catalog.resolve(component_type)
        if canonical is None:
            cased = self.catalog.find_case_insensitive(component_type)
            if cased is not None:
                self.error(
                    DiagnosticCode.CASE_MISMATCH,
                    f'Component type "{component_type}" has incorrect casing at "{path}"',
                    f"{path}.type",
                    f'Use "{cased}"',
                )
            else:
                self.error(
                    DiagnosticCode.UNKNOWN_COMPONENT,
                    f'Unknown component type "{component_type}" at "{path}"',
                    f"{path}.type",
                    self.type_suggestion(component_type),
                )
            return None

        entry = self.catalog.get_entry(canonical)
        if entry.deprecated:
            self.warning(
                DiagnosticCode.DEPRECATED_COMPONENT,
                f'Component "{canonical}" is deprecated at "{path}"',
                f"{path}.type",
                entry.deprecation_message or "Consider using an alternative component",
            )
        return canonical

    def type_suggestion(self, component_type: str) -> str:
        valid_types = self.catalog.get_valid_types()
        matches = rank_similar(
            component_type, valid_types, limit=MAX_SUGGESTIONS, threshold=SUGGESTION_FLOOR
        )
        if matches:
            return f"Did you mean: {', '.join(m.candidate for m in matches)}?"
        more = "..." if len(valid_types) > 5 else ""
        return f"Valid types: {', '.join(valid_types[:5])}{more}"

    def check_props(
        self,
        props: Mapping[str, Any],
        schemas: Mapping[str, PropertySchema],
        path: str,
    ) -> None:
        for name, schema in schemas.items():
            at = prop_path(path, name)
            value = props.get(name)

            if value is None:
                if schema.required:
                    self.error(
                        DiagnosticCode.MISSING_REQUIRED_PROP,
                        f'Missing required property "{name}" at "{path}"',
                        at,
                        f"{name}: {schema.description}"
                        if schema.description
                        else f'Property "{name}" is required (type: {schema.value_kind.value})',
                    )
                continue

            if not matches_kind(value, schema.value_kind):
                self.error(
                    DiagnosticCode.INVALID_PROP_TYPE,
                    f'Invalid type for property "{name}" at "{path}": '
                    f"expected {schema.value_kind.value}, got {kind_of(value)}",
                    at,
                    f"Expected type: {schema.value_kind.value}",
                )
                continue

            allowed = schema.allowed_values
            if allowed and isinstance(value, str) and value not in allowed:
                self.error(
                    DiagnosticCode.INVALID_ENUM_VALUE,
                    f'Invalid enum value "{value}" for property "{name}" at "{path}"',
                    at,
                    self.enum_suggestion(value, allowed),
                )

    def enum_suggestion(self, value: str, allowed: tuple[str, ...]) -> str:
        match = find_closest(value, allowed, self.validator.enum_threshold)
        if match is not None:
            return f'Did you mean "{match.candidate}"? Valid values: {", ".join(allowed)}'
        return f"Valid values: {', '.join(allowed)}"

    def children(self, node: Mapping[str, Any], path: str, depth: int) -> None:
        children = node.get("children")
        if children is None:
            return
        if not isinstance(children, (list, tuple)):
            self.error(
                DiagnosticCode.INVALID_TYPE,
                f'Field "children" must be an array at "{path}"',
                f"{path}.children",
            )
            return
        for index, child in enumerate(children):
            at = child_path(path, index)
            if isinstance(child, Mapping):
                self.node(child, at, depth + 1)
            elif not isinstance(child, str):
                self.error(
                    DiagnosticCode.INVALID_TYPE,
                    f'Child at "{at}" must be a component object or text, '
                    f"got {kind_of(child)}",
                    at,
                )


def validate_ui_description(
    document: Any, catalog: ComponentCatalog, *, strict: bool | None = None
) -> ValidationResult:
    """Validate a UI description with a one-off SchemaValidator.

    Args:
        document: Parsed description.
        catalog: Catalog used as ground truth.
        strict: Promote warnings to errors.

    Returns:
        ValidationResult for the document.
    """
    return SchemaValidator(catalog, strict=strict).validate(document)


def is_valid(document: Any, catalog: ComponentCatalog) -> bool:
    """Check if a UI description has no validation errors.

    Example:
        >>> if is_valid(document, catalog):
        ...     render(document)
    """
    return validate_ui_description(document, catalog).valid


__all__ = [
    "SchemaValidator",
    "is_valid",
    "kind_of",
    "matches_kind",
    "validate_ui_description",
]
