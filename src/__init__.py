"""uischema-guard: validation and auto-repair for LLM-generated UI descriptions."""

from src.catalog import ComponentCatalog, build_default_catalog
from src.diagnostics import Diagnostic, DiagnosticCode, FixResult, ValidationResult
from src.fixer import SchemaFixer, fix_ui_description
from src.formatting import ErrorFormatter, Language
from src.pipeline import RepairOutcome, SchemaEngine
from src.streaming import StreamingValidator
from src.validation import SchemaValidator

__all__ = [
    # Catalog
    "ComponentCatalog",
    "build_default_catalog",
    # Results
    "Diagnostic",
    "DiagnosticCode",
    "FixResult",
    "ValidationResult",
    # Components
    "SchemaValidator",
    "SchemaFixer",
    "StreamingValidator",
    "fix_ui_description",
    "ErrorFormatter",
    "Language",
    # Engine
    "RepairOutcome",
    "SchemaEngine",
]
