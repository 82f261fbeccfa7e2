"""Incremental JSON parser for documents that are still being generated.

The parser is a push scanner: each call to `feed()` examines only the new
characters, advancing a small state machine (container stack, pending key,
in-progress token). At any point it can report the deepest value that can be
closed off, so a caller sees `{"root": {"type": "Butt` as
``{"root": {"type": "Butt"}}`` with ``partial=True``.

Truncation is never an error. Malformed syntax is: a stray closing bracket,
a missing colon, an invalid escape or trailing content after a complete
document produce a ParseError, and the session stays failed until `reset()`.

Example:
    >>> parser = IncrementalParser()
    >>> parser.feed('{"version": "1.').value
    {'version': '1.'}
    >>> parser.feed('0"}').partial
    False
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.config import EnvVar, get_environment

logger = logging.getLogger(__name__)

_WHITESPACE = frozenset(" \t\n\r")
_NUMBER_CHARS = frozenset("0123456789+-.eE")
_NUMBER_START = frozenset("-0123456789")
_LITERALS: dict[str, tuple[str, Any]] = {
    "t": ("true", True),
    "f": ("false", False),
    "n": ("null", None),
}
_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# A number token must stay a prefix of this while it grows...
_NUMBER_PREFIX = re.compile(r"-?(?:(?:0|[1-9]\d*)(?:\.\d*)?(?:[eE][+-]?\d*)?)?")
# ...and match this once it ends.
_NUMBER_FULL = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")


class _Expect(Enum):
    VALUE = "value"
    VALUE_OR_END = "value_or_end"
    KEY = "key"
    KEY_OR_END = "key_or_end"
    COLON = "colon"
    COMMA_OR_END = "comma_or_end"
    DONE = "done"


class _TokenKind(Enum):
    STRING = "string"
    NUMBER = "number"
    LITERAL = "literal"


@dataclass
class _Frame:
    """An open object or array."""

    container: dict[str, Any] | list[Any]
    path: str
    expect: _Expect
    key: str | None = None
    # Last slot holds a provisional value for the in-progress token
    provisional: bool = False

    @property
    def is_object(self) -> bool:
        return isinstance(self.container, dict)


@dataclass
class _Token:
    """A scalar that has started but not yet ended."""

    kind: _TokenKind
    chars: list[str] = field(default_factory=list)
    is_key: bool = False
    escape: bool = False
    unicode_digits: str | None = None
    pending_high: int | None = None
    literal: str = ""
    literal_value: Any = None


@dataclass(frozen=True)
class ParseError:
    """A syntax error that is not explained by truncation.

    Attributes:
        message: Human-readable description.
        position: Zero-based character offset of the offending character.
        line: One-based line number.
        column: One-based column number.
        path: JSONPath-style location (``$.root.children[0]``).
    """

    message: str
    position: int
    line: int
    column: int
    path: str

    def __str__(self) -> str:
        return f"{self.message} at line {self.line}, column {self.column} ({self.path})"


@dataclass(frozen=True)
class ParserState:
    """Snapshot of a parser session's bookkeeping."""

    position: int
    line: int
    column: int
    depth: int
    pending_path: str
    complete: bool
    failed: bool


@dataclass
class ParseResult:
    """Outcome of feeding text to the parser.

    Attributes:
        partial: True while the document is truncated.
        value: The complete value, or the deepest value that can be closed
            off. None for an empty buffer or after an error. For sessions the
            value is the parser's live tree: copy it before mutating.
        error: Set when the text is malformed.
        pending_path: Where the parser currently is in the document.
    """

    partial: bool
    value: Any = None
    error: ParseError | None = None
    pending_path: str = "$"

    @property
    def complete(self) -> bool:
        """True when the value is a whole, well-formed document."""
        return not self.partial and self.error is None


class IncrementalParser:
    """Resumable JSON parser session.

    Not safe for concurrent use: callers serialize `feed()` calls on a given
    session.

    Args:
        max_depth: Maximum container nesting. Defaults to UISCHEMA_MAX_DEPTH.
    """

    def __init__(self, max_depth: int | None = None):
        self.max_depth = get_environment(EnvVar.UISCHEMA_MAX_DEPTH, max_depth)
        self.reset()

    def reset(self) -> None:
        """Clear all state so the session can be reused."""
        self._chunks: list[str] = []
        self._stack: list[_Frame] = []
        self._token: _Token | None = None
        self._top_expect = _Expect.VALUE
        self._root: Any = None
        self._has_root = False
        self._error: ParseError | None = None
        self._position = 0
        self._line = 1
        self._column = 1

    # =========================================================================
    # Public API
    # =========================================================================

    @property
    def buffer(self) -> str:
        """All text fed since the last reset."""
        return "".join(self._chunks)

    @property
    def state(self) -> ParserState:
        return ParserState(
            position=self._position,
            line=self._line,
            column=self._column,
            depth=len(self._stack),
            pending_path=self._pending_path(),
            complete=self._is_complete(),
            failed=self._error is not None,
        )

    def feed(self, chunk: str) -> ParseResult:
        """Consume the next chunk and report the current parse.

        A trailing top-level number is treated as possibly incomplete; call
        `finish()` to declare the end of input.
        """
        self._chunks.append(chunk)
        if self._error is None:
            for ch in chunk:
                self._step(ch)
                if self._error is not None:
                    break
                self._advance(ch)
        return self._result()

    resume = feed

    def finish(self) -> ParseResult:
        """Declare end of input and report the final parse."""
        token = self._token
        if (
            self._error is None
            and token is not None
            and token.kind is _TokenKind.NUMBER
            and not self._stack
            and _NUMBER_FULL.fullmatch("".join(token.chars))
        ):
            self._end_number()
        return self._result()

    # =========================================================================
    # Scanner
    # =========================================================================

    def _advance(self, ch: str) -> None:
        self._position += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

    def _fail(self, message: str) -> None:
        self._error = ParseError(
            message=message,
            position=self._position,
            line=self._line,
            column=self._column,
            path=self._pending_path(),
        )
        logger.debug(f"Parse error: {self._error}")

    def _step(self, ch: str) -> None:
        token = self._token
        if token is not None:
            if token.kind is _TokenKind.STRING:
                self._string_char(token, ch)
                return
            if token.kind is _TokenKind.LITERAL:
                self._literal_char(token, ch)
                return
            if ch in _NUMBER_CHARS:
                self._number_char(token, ch)
                return
            self._end_number()
            if self._error is not None:
                return

        if ch in _WHITESPACE:
            return

        frame = self._stack[-1] if self._stack else None
        expect = frame.expect if frame else self._top_expect

        if expect is _Expect.DONE:
            self._fail(f"Unexpected '{ch}' after end of document")
        elif expect in (_Expect.KEY, _Expect.KEY_OR_END):
            if ch == '"':
                self._token = _Token(_TokenKind.STRING, is_key=True)
            elif ch == "}" and expect is _Expect.KEY_OR_END:
                self._close()
            else:
                self._fail(f"Expected property name, got '{ch}'")
        elif expect is _Expect.COLON:
            if ch == ":":
                frame.expect = _Expect.VALUE
            else:
                self._fail(f"Expected ':' after property name, got '{ch}'")
        elif expect is _Expect.COMMA_OR_END:
            closer = "}" if frame.is_object else "]"
            if ch == ",":
                frame.expect = _Expect.KEY if frame.is_object else _Expect.VALUE
            elif ch == closer:
                self._close()
            else:
                self._fail(f"Expected ',' or '{closer}', got '{ch}'")
        elif expect is _Expect.VALUE_OR_END and ch == "]":
            self._close()
        else:
            self._start_value(ch)

    def _start_value(self, ch: str) -> None:
        if ch == "{":
            self._open({})
        elif ch == "[":
            self._open([])
        elif ch == '"':
            self._token = _Token(_TokenKind.STRING)
        elif ch in _NUMBER_START:
            self._token = _Token(_TokenKind.NUMBER, chars=[ch])
        elif ch in _LITERALS:
            literal, value = _LITERALS[ch]
            self._token = _Token(
                _TokenKind.LITERAL, literal=literal, literal_value=value, chars=[ch]
            )
        else:
            self._fail(f"Unexpected character '{ch}'")

    # -------------------------------------------------------------------------
    # Containers
    # -------------------------------------------------------------------------

    def _open(self, container: dict[str, Any] | list[Any]) -> None:
        if len(self._stack) >= self.max_depth:
            self._fail(f"Maximum nesting depth {self.max_depth} exceeded")
            return
        path = self._child_path()
        self._attach(container)
        expect = _Expect.KEY_OR_END if isinstance(container, dict) else _Expect.VALUE_OR_END
        self._stack.append(_Frame(container=container, path=path, expect=expect))

    def _close(self) -> None:
        self._stack.pop()

    def _attach(self, value: Any) -> None:
        if not self._stack:
            self._root = value
            self._has_root = True
            self._top_expect = _Expect.DONE
            return
        frame = self._stack[-1]
        if frame.is_object:
            frame.container[frame.key] = value
            frame.key = None
        elif frame.provisional:
            frame.container[-1] = value
        else:
            frame.container.append(value)
        frame.provisional = False
        frame.expect = _Expect.COMMA_OR_END

    # -------------------------------------------------------------------------
    # Scalars
    # -------------------------------------------------------------------------

    def _string_char(self, token: _Token, ch: str) -> None:
        if token.unicode_digits is not None:
            if ch not in _HEX_DIGITS:
                self._fail(f"Invalid unicode escape character '{ch}'")
                return
            token.unicode_digits += ch
            if len(token.unicode_digits) == 4:
                self._add_code_point(token, int(token.unicode_digits, 16))
                token.unicode_digits = None
            return

        if token.escape:
            token.escape = False
            if ch == "u":
                token.unicode_digits = ""
            elif ch in _ESCAPES:
                self._flush_surrogate(token)
                token.chars.append(_ESCAPES[ch])
            else:
                self._fail(f"Invalid escape sequence '\\{ch}'")
            return

        if ch == "\\":
            token.escape = True
        elif ch == '"':
            self._flush_surrogate(token)
            self._token = None
            text = "".join(token.chars)
            if token.is_key:
                frame = self._stack[-1]
                frame.key = text
                frame.expect = _Expect.COLON
            else:
                self._attach(text)
        else:
            self._flush_surrogate(token)
            token.chars.append(ch)

    @staticmethod
    def _flush_surrogate(token: _Token) -> None:
        if token.pending_high is not None:
            token.chars.append(chr(token.pending_high))
            token.pending_high = None

    def _add_code_point(self, token: _Token, code: int) -> None:
        if token.pending_high is not None and 0xDC00 <= code <= 0xDFFF:
            combined = 0x10000 + ((token.pending_high - 0xD800) << 10) + (code - 0xDC00)
            token.chars.append(chr(combined))
            token.pending_high = None
            return
        self._flush_surrogate(token)
        if 0xD800 <= code <= 0xDBFF:
            token.pending_high = code
        else:
            token.chars.append(chr(code))

    def _literal_char(self, token: _Token, ch: str) -> None:
        token.chars.append(ch)
        text = "".join(token.chars)
        if not token.literal.startswith(text):
            self._fail(f"Invalid literal '{text}'")
            return
        if text == token.literal:
            self._token = None
            self._attach(token.literal_value)

    def _number_char(self, token: _Token, ch: str) -> None:
        token.chars.append(ch)
        text = "".join(token.chars)
        if _NUMBER_PREFIX.fullmatch(text) is None:
            self._fail(f"Invalid number '{text}'")

    def _end_number(self) -> None:
        token = self._token
        text = "".join(token.chars)
        if _NUMBER_FULL.fullmatch(text) is None:
            self._fail(f"Invalid number '{text}'")
            return
        self._token = None
        self._attach(_to_number(text))

    # =========================================================================
    # Results
    # =========================================================================

    def _is_complete(self) -> bool:
        return (
            self._error is None
            and self._has_root
            and not self._stack
            and self._token is None
        )

    def _child_path(self) -> str:
        if not self._stack:
            return "$"
        frame = self._stack[-1]
        if frame.is_object:
            return f"{frame.path}.{frame.key}"
        index = len(frame.container) - (1 if frame.provisional else 0)
        return f"{frame.path}[{index}]"

    def _pending_path(self) -> str:
        if not self._stack:
            return "$"
        frame = self._stack[-1]
        if frame.is_object and frame.key is None:
            return frame.path
        return self._child_path()

    def _provisional_value(self) -> tuple[bool, Any]:
        """Closed-off value of the in-progress token, if it has one."""
        token = self._token
        if token.kind is _TokenKind.STRING:
            # Dangling escapes and unpaired surrogates are dropped
            return True, "".join(token.chars)
        if token.kind is _TokenKind.LITERAL:
            return True, token.literal_value
        match = _NUMBER_FULL.match("".join(token.chars))
        if match is None:
            return False, None
        return True, _to_number(match.group(0))

    def _result(self) -> ParseResult:
        if self._error is not None:
            return ParseResult(
                partial=False, value=None, error=self._error, pending_path=self._error.path
            )

        value = self._root
        if self._token is not None and not self._token.is_key:
            ok, provisional = self._provisional_value()
            if ok and not self._stack:
                value = provisional
            elif ok:
                frame = self._stack[-1]
                if frame.is_object:
                    frame.container[frame.key] = provisional
                elif frame.provisional:
                    frame.container[-1] = provisional
                else:
                    frame.container.append(provisional)
                frame.provisional = True

        return ParseResult(
            partial=not self._is_complete(),
            value=value,
            pending_path=self._pending_path(),
        )


def _to_number(text: str) -> int | float:
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)


def parse_incremental(text: str, max_depth: int | None = None) -> ParseResult:
    """Parse `text` in one call, treating its end as the end of input.

    Args:
        text: Possibly truncated JSON text.
        max_depth: Maximum container nesting.

    Returns:
        ParseResult; ``partial`` is False only for a whole document.
    """
    parser = IncrementalParser(max_depth=max_depth)
    parser.feed(text)
    return parser.finish()


__all__ = [
    "IncrementalParser",
    "ParseError",
    "ParseResult",
    "ParserState",
    "parse_incremental",
]
