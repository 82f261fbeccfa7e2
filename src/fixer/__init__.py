"""Automatic repair of malformed UI descriptions.

Example usage:
    >>> from src.catalog import build_default_catalog
    >>> from src.fixer import SchemaFixer
    >>> result = SchemaFixer(build_default_catalog()).fix(raw)
    >>> result.fixed, result.changes, result.unfixable
"""

from .lib import FixerConfig, SchemaFixer, fix_ui_description, needs_fix

__all__ = [
    "FixerConfig",
    "SchemaFixer",
    "fix_ui_description",
    "needs_fix",
]
