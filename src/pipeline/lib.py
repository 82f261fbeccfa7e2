"""SchemaEngine facade over catalog, parser, validator, fixer and streaming.

Wires one catalog into every component so callers configure the engine
once and use a single object for validation and repair.
"""

import logging
from dataclasses import dataclass
from typing import Any

from src.catalog import ComponentCatalog, build_default_catalog
from src.diagnostics import FixResult, ValidationResult
from src.fixer import FixerConfig, SchemaFixer
from src.parser import ParseResult, parse_incremental
from src.streaming import StreamingValidator, WarningCallback, invalid_json_diagnostic
from src.validation import SchemaValidator

logger = logging.getLogger(__name__)


@dataclass
class RepairOutcome:
    """Complete output from a repair run.

    Attributes:
        result: Validation of the input as given.
        fix: Fixer output, when the input was invalid and a document was
            available to repair.
        revalidated: Validation of the fixed document.
    """

    result: ValidationResult
    fix: FixResult | None = None
    revalidated: ValidationResult | None = None

    @property
    def valid(self) -> bool:
        """True if the input was valid or was repaired to a valid document."""
        if self.revalidated is not None:
            return self.revalidated.valid
        return self.result.valid

    @property
    def document(self) -> Any:
        """The best document available: the fixed one if a fix ran."""
        if self.fix is not None:
            return self.fix.fixed
        return self.result.parsed

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "valid": self.valid,
            "document": self.document,
            "result": self.result.to_dict(),
            "fix": self.fix.to_dict() if self.fix is not None else None,
            "revalidated": (
                self.revalidated.to_dict() if self.revalidated is not None else None
            ),
        }


class SchemaEngine:
    """Validate, stream and repair UI descriptions against one catalog.

    Pipeline (`repair`):
        1. Parse text input with the incremental parser
        2. Validate the document
        3. If invalid, fix it
        4. Re-validate the fixed document

    Example:
        >>> engine = SchemaEngine()
        >>> outcome = engine.repair('{"root": {"type": "Containr", "props": {}}}')
        >>> outcome.valid
        True
        >>> [c.kind.value for c in outcome.fix.changes]
        ['add_version', 'fix_type', 'add_id']
    """

    def __init__(
        self,
        catalog: ComponentCatalog | None = None,
        *,
        fixer_config: FixerConfig | None = None,
        strict: bool | None = None,
    ):
        """Initialize SchemaEngine.

        Args:
            catalog: Catalog shared by every component. Builds the default
                catalog if None.
            fixer_config: Repair policy. Defaults to values from the environment.
            strict: Promote validator warnings to errors. Defaults to
                UISCHEMA_STRICT.
        """
        self._catalog = catalog or build_default_catalog()
        self._fixer = SchemaFixer(self._catalog, fixer_config)
        # Suggest only what the fixer would apply, over the same depth
        self._validator = SchemaValidator(
            self._catalog,
            strict=strict,
            max_depth=self._fixer.config.max_depth,
            enum_threshold=self._fixer.config.medium_threshold,
        )

    @property
    def catalog(self) -> ComponentCatalog:
        return self._catalog

    @property
    def validator(self) -> SchemaValidator:
        return self._validator

    @property
    def fixer(self) -> SchemaFixer:
        return self._fixer

    def validate(self, document: Any) -> ValidationResult:
        """Validate a parsed UI description."""
        return self._validator.validate(document)

    def fix(self, raw: Any) -> FixResult:
        """Repair a parsed UI description."""
        return self._fixer.fix(raw)

    def can_fix(self, raw: Any) -> bool:
        """Check whether `fix` would change a parsed UI description."""
        return self._fixer.can_fix(raw)

    def parse(self, text: str) -> ParseResult:
        """Parse possibly truncated JSON text in one call."""
        return parse_incremental(text, max_depth=self._validator.max_depth)

    def open_stream(self, on_warning: WarningCallback | None = None) -> StreamingValidator:
        """Start a streaming session that finalizes with this engine's validator."""
        return StreamingValidator(self._catalog, self._validator, on_warning=on_warning)

    def repair(self, source: Any) -> RepairOutcome:
        """Validate a description and repair it if it is invalid.

        Args:
            source: JSON text (possibly truncated) or an already parsed
                description.

        Returns:
            RepairOutcome. Malformed text has no document to repair, so its
            outcome carries only the INVALID_JSON result. Truncated text is
            repaired from its deepest parseable prefix.
        """
        if isinstance(source, str):
            parsed = self.parse(source)
            if not parsed.complete:
                result = ValidationResult(parsed=parsed.value)
                result.add(invalid_json_diagnostic(parsed, source, source="input"))
                if parsed.value is None:
                    logger.debug("Nothing to repair: input did not parse")
                    return RepairOutcome(result=result)
                return self._fix_and_revalidate(result, parsed.value)
            document = parsed.value
        else:
            document = source

        result = self._validator.validate(document)
        if result.valid:
            return RepairOutcome(result=result)
        return self._fix_and_revalidate(result, document)

    def _fix_and_revalidate(self, result: ValidationResult, document: Any) -> RepairOutcome:
        fix = self._fixer.fix(document)
        revalidated = self._validator.validate(fix.fixed)
        logger.debug(
            f"Repair applied {len(fix.changes)} change(s), "
            f"{len(fix.unfixable)} unfixable, valid={revalidated.valid}"
        )
        return RepairOutcome(result=result, fix=fix, revalidated=revalidated)


__all__ = ["RepairOutcome", "SchemaEngine"]
