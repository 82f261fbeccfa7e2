"""Tests for validate, fix and stream CLI commands."""

import json
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]

TYPO_DOCUMENT = '{"root": {"type": "Containr", "props": {}}}'
VALID_DOCUMENT = (
    '{"version": "1.0", "root": {"id": "card", "type": "Card", "props": {},'
    ' "children": ["Hello"]}}'
)


def _run(*args: str, stdin: str | None = None) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        input=stdin,
        cwd=REPO_ROOT,
        timeout=60,
    )


def _write(tmp_path: Path, text: str) -> str:
    path = tmp_path / "layout.json"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_validate_valid_document(tmp_path):
    """validate should exit 0 and report no errors for a valid document."""
    result = _run("validate", _write(tmp_path, VALID_DOCUMENT))

    assert result.returncode == 0
    report = json.loads(result.stdout)
    assert report["valid"] is True
    assert report["errors"] == []


def test_validate_reports_errors(tmp_path):
    """validate should exit 1 and list stable error codes."""
    result = _run("validate", _write(tmp_path, TYPO_DOCUMENT))

    assert result.returncode == 1
    report = json.loads(result.stdout)
    codes = {d["code"] for d in report["errors"] + report["warnings"]}
    assert {"MISSING_VERSION", "UNKNOWN_COMPONENT", "MISSING_ID"} <= codes


def test_validate_localized_messages(tmp_path):
    """validate --language should add rendered diagnostics next to the raw ones."""
    result = _run("validate", _write(tmp_path, TYPO_DOCUMENT), "--language", "zh")

    assert result.returncode == 1
    report = json.loads(result.stdout)
    raw = report["errors"] + report["warnings"]
    assert len(report["formatted"]) == len(raw)
    messages = [f["message"] for f in report["formatted"]]
    assert '未知的组件类型 "Containr"' in messages


def test_validate_without_language_has_no_rendering(tmp_path):
    """validate should leave the report unchanged without --language."""
    result = _run("validate", _write(tmp_path, TYPO_DOCUMENT))
    assert "formatted" not in json.loads(result.stdout)


def test_validate_reads_stdin():
    """validate - should read the document from stdin."""
    result = _run("validate", "-", stdin=VALID_DOCUMENT)
    assert result.returncode == 0


def test_validate_truncated_input(tmp_path):
    """validate should report truncated JSON as INVALID_JSON."""
    result = _run("validate", _write(tmp_path, VALID_DOCUMENT[:30]))

    assert result.returncode == 1
    errors = json.loads(result.stdout)["errors"]
    assert [e["code"] for e in errors] == ["INVALID_JSON"]


def test_validate_missing_file(tmp_path):
    """validate should fail cleanly when the file does not exist."""
    result = _run("validate", str(tmp_path / "missing.json"))

    assert result.returncode == 1
    assert "Cannot read" in result.stderr


def test_undecodable_file_fails_cleanly(tmp_path):
    """Commands should report a file that is not UTF-8 instead of crashing."""
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"root": "\xff"}')

    for command in ("validate", "fix", "stream"):
        result = _run(command, str(path))

        assert result.returncode == 1
        assert "Cannot read" in result.stderr
        assert "Traceback" not in result.stderr


def test_fix_repairs_document(tmp_path):
    """fix should repair the typo and exit 0."""
    result = _run("fix", _write(tmp_path, TYPO_DOCUMENT))

    assert result.returncode == 0
    report = json.loads(result.stdout)
    assert report["valid"] is True
    assert report["document"]["root"]["type"] == "Container"
    assert [c["kind"] for c in report["fix"]["changes"]] == [
        "add_version",
        "fix_type",
        "add_id",
    ]


def test_fix_document_only_to_file(tmp_path):
    """fix --document-only -o should write just the repaired document."""
    output = tmp_path / "fixed.json"
    result = _run(
        "fix", _write(tmp_path, TYPO_DOCUMENT), "--document-only", "-o", str(output)
    )

    assert result.returncode == 0
    assert result.stdout == ""
    fixed = json.loads(output.read_text(encoding="utf-8"))
    assert fixed["version"] == "1.0"
    assert fixed["root"]["id"]


def test_fix_unrepairable(tmp_path):
    """fix should exit 1 when the residue is unfixable."""
    text = '{"version": "1.0", "root": {"id": "a", "type": "Zzzzzzzz"}}'
    result = _run("fix", _write(tmp_path, text))

    assert result.returncode == 1
    assert json.loads(result.stdout)["valid"] is False


def test_stream_reports_early_warning(tmp_path):
    """stream should surface an unknown type seen mid-stream."""
    text = '{"version": "1.0", "root": {"id": "b", "type": "Bouton"}}'
    result = _run("stream", _write(tmp_path, text), "--chunk-size", "3")

    assert result.returncode == 1
    report = json.loads(result.stdout)
    assert [w["value"] for w in report["warnings"]] == ["Bouton"]
    assert "UNKNOWN_COMPONENT" in {e["code"] for e in report["result"]["errors"]}


def test_stream_rejects_bad_chunk_size(tmp_path):
    """stream should refuse a non-positive chunk size."""
    result = _run("stream", _write(tmp_path, VALID_DOCUMENT), "--chunk-size", "0")
    assert result.returncode == 1
