"""Early warnings for UI descriptions that are still being generated.

A StreamingValidator is fed the generator's output chunk by chunk. Each
feed scans only the new text plus a short overlap for ``"type": "<name>"``
declarations and warns once per unresolvable declaration. The same chunks
drive an IncrementalParser session, so `finalize()` never reparses the
whole buffer before handing the document to the SchemaValidator.
"""

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.catalog import ComponentCatalog
from src.config import EnvVar, get_environment
from src.diagnostics import Diagnostic, DiagnosticCode, Severity, ValidationResult
from src.parser import IncrementalParser, ParseResult
from src.validation import SchemaValidator

logger = logging.getLogger(__name__)

TYPE_DECLARATION = re.compile(r"""["']type["']\s*:\s*["']([^"']+)["']""")


class WarningKind(str, Enum):
    """Kinds of streaming warning."""

    UNKNOWN_COMPONENT = "unknown_component"
    INVALID_STRUCTURE = "invalid_structure"


@dataclass(frozen=True)
class StreamingWarning:
    """An early, possibly redundant signal raised mid-stream.

    Attributes:
        kind: What was detected.
        message: Human-readable description.
        value: The offending type name (empty for structural warnings).
        position: Character offset in the stream where it was detected.
    """

    kind: WarningKind
    message: str
    value: str
    position: int

    def to_diagnostic(self) -> Diagnostic:
        """Express this warning as a warning-severity Diagnostic."""
        if self.kind is WarningKind.UNKNOWN_COMPONENT:
            return Diagnostic(
                DiagnosticCode.UNKNOWN_COMPONENT,
                self.message,
                severity=Severity.WARNING,
                suggestion=f'Check component type "{self.value}"',
            )
        return Diagnostic(DiagnosticCode.INVALID_JSON, self.message, severity=Severity.WARNING)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "value": self.value,
            "position": self.position,
        }


WarningCallback = Callable[[StreamingWarning], None]


class StreamingValidator:
    """Stateful validation session over a growing text buffer.

    Not safe for concurrent use: callers serialize `feed()` calls on a given
    session, which a single token stream does naturally.

    Args:
        catalog: Catalog used to resolve declared types.
        validator: Validator used by `finalize()`. Defaults to a
            SchemaValidator over `catalog`.
        overlap: Characters before the new text re-scanned on each feed.
            Defaults to UISCHEMA_STREAM_OVERLAP.
        on_warning: Called once for every new warning.

    Example:
        >>> session = StreamingValidator(build_default_catalog())
        >>> for chunk in ['{"root": {"type": "Bou', 'ton"}}']:
        ...     session.feed(chunk)
        >>> [w.value for w in session.get_warnings()]
        ['Bouton']
    """

    def __init__(
        self,
        catalog: ComponentCatalog,
        validator: SchemaValidator | None = None,
        *,
        overlap: int | None = None,
        on_warning: WarningCallback | None = None,
    ):
        self.catalog = catalog
        self.validator = validator or SchemaValidator(catalog)
        self.overlap = get_environment(EnvVar.UISCHEMA_STREAM_OVERLAP, overlap)
        if self.overlap < 0:
            raise ValueError(f"overlap must be non-negative, got {self.overlap}")
        self.on_warning = on_warning
        self._parser = IncrementalParser(max_depth=self.validator.max_depth)
        self.reset()

    def reset(self) -> None:
        """Clear buffer, warnings and dedupe state so the session can be reused."""
        self._parser.reset()
        self._chunks: list[str] = []
        self._length = 0
        self._tail = ""
        self._warnings: list[StreamingWarning] = []
        self._seen: set[tuple[str, int]] = set()
        self._structure_reported = False

    @property
    def buffer(self) -> str:
        """All text fed since the last reset."""
        return "".join(self._chunks)

    def get_warnings(self) -> list[StreamingWarning]:
        """Snapshot of the warnings raised so far."""
        return list(self._warnings)

    def feed(self, chunk: str) -> list[StreamingWarning]:
        """Append a chunk and scan the unprocessed text.

        Args:
            chunk: Next piece of generator output.

        Returns:
            Warnings raised by this chunk.
        """
        if not chunk:
            return []

        window = self._tail + chunk
        offset = self._length - len(self._tail)
        self._chunks.append(chunk)
        self._length += len(chunk)
        self._tail = window[-self.overlap :] if self.overlap else ""

        new: list[StreamingWarning] = []
        for match in TYPE_DECLARATION.finditer(window):
            value = match.group(1)
            position = offset + match.start()
            if (value, position) in self._seen:
                continue
            self._seen.add((value, position))
            if self.catalog.resolve(value) is None:
                new.append(
                    StreamingWarning(
                        kind=WarningKind.UNKNOWN_COMPONENT,
                        message=f'Unknown component type "{value}" detected in stream',
                        value=value,
                        position=position,
                    )
                )

        parsed = self._parser.feed(chunk)
        if parsed.error is not None and not self._structure_reported:
            self._structure_reported = True
            new.append(
                StreamingWarning(
                    kind=WarningKind.INVALID_STRUCTURE,
                    message=f"Malformed JSON in stream: {parsed.error}",
                    value="",
                    position=parsed.error.position,
                )
            )

        for warning in new:
            self._emit(warning)
        return new

    def _emit(self, warning: StreamingWarning) -> None:
        self._warnings.append(warning)
        logger.debug(f"Stream warning at {warning.position}: {warning.message}")
        if self.on_warning is not None:
            self.on_warning(warning)

    def finalize(self) -> ValidationResult:
        """Declare the stream finished and return the definitive result.

        Malformed or truncated text yields one INVALID_JSON error plus the
        accumulated type warnings. A complete document is validated by the
        SchemaValidator; streaming warnings that the authoritative result
        does not already account for are appended as warnings.
        """
        parsed = self._parser.finish()
        if not parsed.complete:
            return self._structural_failure(parsed)

        result = self.validator.validate(parsed.value)
        node_types, prop_types = _declared_types(parsed.value, self.validator.max_depth)
        for warning in self._warnings:
            if warning.kind is not WarningKind.UNKNOWN_COMPONENT:
                continue
            if warning.value in node_types:
                # The validator has already judged this node
                continue
            if warning.value in prop_types:
                logger.debug(f'Dropping stream warning for property value "{warning.value}"')
                continue
            result.add(warning.to_diagnostic())
        return result

    def _structural_failure(self, parsed: ParseResult) -> ValidationResult:
        result = ValidationResult(parsed=parsed.value)
        result.add(invalid_json_diagnostic(parsed, self.buffer))
        for warning in self._warnings:
            if warning.kind is WarningKind.UNKNOWN_COMPONENT:
                result.add(warning.to_diagnostic())
        return result


def invalid_json_diagnostic(
    parsed: ParseResult, text: str, source: str = "stream"
) -> Diagnostic:
    """Describe why `text` did not parse to a complete document.

    Args:
        parsed: The parser's final result for `text`.
        text: The text that was parsed.
        source: What produced the text, used in the message.

    Returns:
        An INVALID_JSON error.
    """
    if parsed.error is not None:
        message = f"Invalid JSON: {parsed.error}"
        path = parsed.error.path
    elif not text.strip():
        message = f"Invalid JSON: {source} ended before any content"
        path = "$"
    else:
        message = f"Invalid JSON: {source} ended while parsing {parsed.pending_path}"
        path = parsed.pending_path
    logger.debug(message)
    return Diagnostic(
        DiagnosticCode.INVALID_JSON,
        message,
        path,
        suggestion="Check for missing brackets, quotes, or commas",
    )


def _declared_types(document: Any, max_depth: int) -> tuple[set[str], set[str]]:
    """Collect node types and ``type`` property values reachable from root."""
    node_types: set[str] = set()
    prop_types: set[str] = set()
    if not isinstance(document, Mapping) or not isinstance(document.get("root"), Mapping):
        return node_types, prop_types

    pending: list[tuple[Mapping[str, Any], int]] = [(document["root"], 1)]
    while pending:
        node, depth = pending.pop()
        if depth > max_depth:
            continue
        if isinstance(node.get("type"), str):
            node_types.add(node["type"])
        props = node.get("props")
        if isinstance(props, Mapping) and isinstance(props.get("type"), str):
            prop_types.add(props["type"])
        children = node.get("children")
        if isinstance(children, list):
            pending.extend((c, depth + 1) for c in children if isinstance(c, Mapping))
    return node_types, prop_types


def stream_validate(
    text: str,
    catalog: ComponentCatalog,
    chunk_size: int | None = None,
    on_warning: WarningCallback | None = None,
) -> ValidationResult:
    """Run a whole text through a streaming session.

    Args:
        text: Complete or truncated generator output.
        catalog: Catalog used as ground truth.
        chunk_size: Feed the text in pieces of this size; all at once if None.
        on_warning: Called for every streaming warning.

    Returns:
        The session's finalize() result.
    """
    if chunk_size is not None and chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    session = StreamingValidator(catalog, on_warning=on_warning)
    step = chunk_size or max(len(text), 1)
    for start in range(0, len(text), step):
        session.feed(text[start : start + step])
    return session.finalize()


__all__ = [
    "StreamingValidator",
    "StreamingWarning",
    "TYPE_DECLARATION",
    "WarningCallback",
    "WarningKind",
    "invalid_json_diagnostic",
    "stream_validate",
]
