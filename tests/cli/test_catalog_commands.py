"""Tests for catalog CLI commands and top-level dispatch."""

import json
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
        timeout=60,
    )


def test_help_lists_commands():
    """--help should list every command and exit 0."""
    result = _run("--help")

    assert result.returncode == 0
    for command in ("validate", "fix", "stream", "types", "schema"):
        assert command in result.stdout


def test_no_arguments_shows_help():
    """Running without a command should print help and exit 1."""
    result = _run()

    assert result.returncode == 1
    assert "Usage:" in result.stdout


def test_unknown_command():
    """An unknown command should fail with exit code 1."""
    result = _run("frobnicate")

    assert result.returncode == 1
    assert "Unknown command" in result.stderr


def test_types_grouped_by_category():
    """types should print canonical names grouped by category."""
    result = _run("types")

    assert result.returncode == 0
    grouped = json.loads(result.stdout)
    assert "Button" in grouped["input"]
    assert "Container" in grouped["layout"]


def test_types_single_category():
    """types --category should print one sorted list."""
    result = _run("types", "--category", "input")

    names = json.loads(result.stdout)
    assert "Button" in names
    assert names == sorted(names)


def test_schema_llm_export():
    """schema should default to the LLM export."""
    result = _run("schema")

    assert result.returncode == 0
    schema = json.loads(result.stdout)
    assert schema["aliases"]["btn"] == "Button"


def test_schema_json_export(tmp_path):
    """schema --format json -o should write a JSON Schema file."""
    output = tmp_path / "schema.json"
    result = _run("schema", "--format", "json", "-o", str(output))

    assert result.returncode == 0
    schema = json.loads(output.read_text(encoding="utf-8"))
    assert set(schema["required"]) == {"version", "root"}
