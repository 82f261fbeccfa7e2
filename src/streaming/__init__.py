"""Streaming validation of UI descriptions while they are generated.

Example usage:
    >>> from src.streaming import StreamingValidator
    >>> session = StreamingValidator(catalog, on_warning=print)
    >>> for chunk in llm_stream:
    ...     session.feed(chunk)
    >>> result = session.finalize()
"""

from .lib import (
    TYPE_DECLARATION,
    StreamingValidator,
    StreamingWarning,
    WarningCallback,
    WarningKind,
    invalid_json_diagnostic,
    stream_validate,
)

__all__ = [
    "StreamingValidator",
    "StreamingWarning",
    "TYPE_DECLARATION",
    "WarningCallback",
    "WarningKind",
    "invalid_json_diagnostic",
    "stream_validate",
]
