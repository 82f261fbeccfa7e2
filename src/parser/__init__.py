"""Incremental parser for partially generated JSON documents."""

from .lib import (
    IncrementalParser,
    ParseError,
    ParseResult,
    ParserState,
    parse_incremental,
)

__all__ = [
    "IncrementalParser",
    "ParseError",
    "ParseResult",
    "ParserState",
    "parse_incremental",
]
