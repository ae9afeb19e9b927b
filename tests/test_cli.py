"""Tests for the CLI."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from playbook_outline.cli import app

runner = CliRunner()

PAYLOAD = {"phases": [{"id": 3, "title": "Fase 1", "items": [{"text": "Definir objetivo", "items": ["Público"]}, "Validar mercado"]}]}


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "phases.json"
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


def test_normalize_writes_canonical_json(tmp_path: Path) -> None:
    """It should write the canonical phases to --output."""

    out = tmp_path / "out" / "canonical.json"
    result = runner.invoke(app, ["normalize", str(_write(tmp_path, PAYLOAD)), "--output", str(out)])

    assert result.exit_code == 0, result.output
    phases = json.loads(out.read_text(encoding="utf-8"))
    assert phases[0]["id"] == 1
    assert phases[0]["items"][0]["children"][0] == {"id": "p3-n1_1", "text": "Público", "children": []}


def test_flatten_prints_task_rows(tmp_path: Path) -> None:
    """It should print one JSON row per node."""

    result = runner.invoke(app, ["flatten", str(_write(tmp_path, PAYLOAD["phases"]))])

    assert result.exit_code == 0, result.output
    rows = [json.loads(line) for line in result.output.splitlines() if line.startswith("{")]
    assert [r["positionPath"] for r in rows] == ["1.1", "1.1.1", "1.2"]
    assert [r["itemIndex"] for r in rows] == [0, 1, 2]


def test_outline_prints_headings_and_items(tmp_path: Path) -> None:
    """It should print numbered headings and dotted items."""

    result = runner.invoke(app, ["outline", str(_write(tmp_path, PAYLOAD))])

    assert result.exit_code == 0, result.output
    assert "1. Fase 1" in result.output
    assert "  1.1 Público" in result.output
    assert "  2 Validar mercado" in result.output


def test_invalid_json_is_a_usage_error(tmp_path: Path) -> None:
    """It should fail with a usage error on unparseable input."""

    path = tmp_path / "bad.json"
    path.write_text("{nope", encoding="utf-8")

    result = runner.invoke(app, ["normalize", str(path)])

    assert result.exit_code != 0
