"""CLI entry point for uischema-guard.

Validates, repairs and stream-checks LLM-generated UI descriptions.
Results are printed to stdout as JSON; logs go to stderr.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from src.catalog import ComponentCategory
from src.config import get_log_level
from src.core.log import get_logger, setup_logging
from src.diagnostics import ValidationResult
from src.formatting import ErrorFormatter, Language
from src.pipeline import SchemaEngine
from src.schema import export_json_schema, export_llm_schema
from src.streaming import StreamingWarning, invalid_json_diagnostic

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


def _read_input(source: str) -> str:
    """Read a document from a file path, or from stdin when source is '-'."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _write_json(data: Any, output: Path | None = None) -> None:
    text = json.dumps(data, indent=2)
    if output is None:
        print(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    logger.info(f"Wrote {output}")


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "file",
        type=str,
        help="UI description JSON file ('-' reads stdin)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Treat validator warnings as errors (default: UISCHEMA_STRICT)",
    )


# =============================================================================
# Validate Command
# =============================================================================


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle the validate command."""
    try:
        text = _read_input(args.file)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read {args.file}: {e}")
        return 1

    engine = SchemaEngine(strict=args.strict)
    parsed = engine.parse(text)
    if parsed.complete:
        result = engine.validate(parsed.value)
    else:
        result = ValidationResult(parsed=parsed.value)
        result.add(invalid_json_diagnostic(parsed, text, source="input"))

    report = result.to_dict()
    if args.language is not None:
        formatter = ErrorFormatter(args.language)
        report["formatted"] = [f.to_dict() for f in formatter.format_all(result.diagnostics)]

    _write_json(report)
    if result.valid:
        logger.info(f"{args.file}: valid ({len(result.warnings)} warning(s))")
        return 0
    logger.error(f"{args.file}: {len(result.errors)} error(s)")
    return 1


def handle_validate_command(argv: list[str]) -> int:
    """Handle validate-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="python . validate",
        description="Validate a UI description against the component catalog",
    )
    _add_input_arguments(parser)
    parser.add_argument(
        "--language",
        "-l",
        type=str,
        default=None,
        choices=[lang.value for lang in Language],
        help="Also emit diagnostics rendered in this language",
    )
    return cmd_validate(parser.parse_args(argv))


# =============================================================================
# Fix Command
# =============================================================================


def cmd_fix(args: argparse.Namespace) -> int:
    """Handle the fix command."""
    try:
        text = _read_input(args.file)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read {args.file}: {e}")
        return 1

    engine = SchemaEngine(strict=args.strict)
    outcome = engine.repair(text)

    if outcome.fix is not None:
        for change in outcome.fix.changes:
            logger.info(f"[{change.confidence.value}] {change.description}")
        for diagnostic in outcome.fix.unfixable:
            logger.warning(f"Unfixable: {diagnostic.message} at {diagnostic.path}")

    try:
        if args.document_only:
            _write_json(outcome.document, args.output)
        else:
            _write_json(outcome.to_dict(), args.output)
    except OSError as e:
        logger.error(f"Cannot write {args.output}: {e}")
        return 1

    if outcome.valid:
        return 0
    logger.error(f"{args.file}: could not be repaired to a valid document")
    return 1


def handle_fix_command(argv: list[str]) -> int:
    """Handle fix-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="python . fix",
        description="Repair a UI description and re-validate it",
    )
    _add_input_arguments(parser)
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    parser.add_argument(
        "--document-only",
        "-d",
        action="store_true",
        help="Emit only the repaired document instead of the full report",
    )
    return cmd_fix(parser.parse_args(argv))


# =============================================================================
# Stream Command
# =============================================================================


def cmd_stream(args: argparse.Namespace) -> int:
    """Handle the stream command."""
    if args.chunk_size < 1:
        logger.error(f"--chunk-size must be positive, got {args.chunk_size}")
        return 1
    try:
        text = _read_input(args.file)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read {args.file}: {e}")
        return 1

    def report(warning: StreamingWarning) -> None:
        logger.warning(f"@{warning.position}: {warning.message}")

    engine = SchemaEngine(strict=args.strict)
    session = engine.open_stream(on_warning=report)
    for start in range(0, len(text), args.chunk_size):
        session.feed(text[start : start + args.chunk_size])
    result = session.finalize()

    _write_json(
        {
            "warnings": [w.to_dict() for w in session.get_warnings()],
            "result": result.to_dict(),
        }
    )
    return 0 if result.valid else 1


def handle_stream_command(argv: list[str]) -> int:
    """Handle stream-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="python . stream",
        description="Replay a UI description as a token stream and report early warnings",
    )
    _add_input_arguments(parser)
    parser.add_argument(
        "--chunk-size",
        "-c",
        type=int,
        default=16,
        help="Characters per simulated chunk (default: 16)",
    )
    return cmd_stream(parser.parse_args(argv))


# =============================================================================
# Catalog Commands
# =============================================================================


def cmd_types(args: argparse.Namespace) -> int:
    """Handle the types command."""
    engine = SchemaEngine()
    grouped = engine.catalog.get_by_category()
    if args.category:
        _write_json(grouped.get(args.category, []))
    else:
        _write_json(grouped)
    return 0


def cmd_schema(args: argparse.Namespace) -> int:
    """Handle the schema command."""
    catalog = SchemaEngine().catalog
    if args.format == "json":
        schema = export_json_schema(catalog)
    else:
        schema = export_llm_schema(catalog)

    try:
        _write_json(schema, args.output)
    except OSError as e:
        logger.error(f"Cannot write {args.output}: {e}")
        return 1
    return 0


def handle_types_command(argv: list[str]) -> int:
    """Handle types-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="python . types",
        description="List the component types known to the catalog",
    )
    parser.add_argument(
        "--category",
        type=str,
        default=None,
        choices=[c.value for c in ComponentCategory],
        help="Only list one category",
    )
    return cmd_types(parser.parse_args(argv))


def handle_schema_command(argv: list[str]) -> int:
    """Handle schema-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="python . schema",
        description="Export the UI description schema",
    )
    parser.add_argument(
        "--format",
        "-f",
        type=str,
        default="llm",
        choices=["llm", "json"],
        help="llm: prompt-oriented export, json: JSON Schema (default: llm)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    return cmd_schema(parser.parse_args(argv))


# =============================================================================
# Entry Point
# =============================================================================


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Documents ===")
    print("  validate   Validate a UI description")
    print("  fix        Repair a UI description and re-validate it")
    print("  stream     Replay a description in chunks and report early warnings")
    print("\n=== Catalog ===")
    print("  types      List known component types")
    print("  schema     Export the JSON Schema or the LLM prompt schema")
    print("\nExamples:")
    print("  python . validate layout.json")
    print("  python . validate layout.json --language zh")
    print("  python . fix layout.json -o fixed.json --document-only")
    print("  cat layout.json | python . stream - --chunk-size 8")
    print("  python . types --category input")
    print("  python . schema --format json")
    print("\nExit status is 0 when the document is valid (or was repaired to valid).")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "validate": lambda: handle_validate_command(rest_args),
        "fix": lambda: handle_fix_command(rest_args),
        "stream": lambda: handle_stream_command(rest_args),
        "types": lambda: handle_types_command(rest_args),
        "schema": lambda: handle_schema_command(rest_args),
    }

    if command in commands:
        setup_logging(get_log_level())
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
