"""Schema validation for UI descriptions."""

from src.validation.lib import (
    SchemaValidator,
    is_valid,
    kind_of,
    matches_kind,
    validate_ui_description,
)

__all__ = [
    "SchemaValidator",
    "is_valid",
    "kind_of",
    "matches_kind",
    "validate_ui_description",
]
