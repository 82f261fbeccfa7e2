"""Pipeline facade wiring one catalog into every validation component.

Example usage:
    >>> from src.pipeline import SchemaEngine
    >>> engine = SchemaEngine()
    >>> outcome = engine.repair(llm_output)
    >>> outcome.valid, outcome.document
"""

from .lib import RepairOutcome, SchemaEngine

__all__ = ["RepairOutcome", "SchemaEngine"]
