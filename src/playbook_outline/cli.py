"""CLI entrypoints for the playbook outline engine."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from playbook_outline.config import load_settings
from playbook_outline.logging import configure_logging, get_logger
from playbook_outline.tree.flatten import flatten_items_as_text, flatten_playbook_phases
from playbook_outline.tree.normalize import normalize_phases
from playbook_outline.tree.serialize import phases_to_payload

app = typer.Typer(add_completion=False, help="Normalize, flatten and render playbook outlines")
logger = get_logger(__name__)


@app.callback()
def main() -> None:
    """Configure logging for every command."""

    configure_logging(load_settings().log_level)


def _read_payload(path: Path) -> Any:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc
    # Accept either a bare phases array or an object wrapping it
    if isinstance(payload, dict) and "phases" in payload:
        return payload["phases"]
    return payload


@app.command()
def normalize(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with phases"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write canonical JSON here"),
) -> None:
    """Print (or write) the canonical form of a phases file."""

    phases = normalize_phases(_read_payload(source))
    logger.info("Normalized %d phases from %s", len(phases), source)
    text = json.dumps(phases_to_payload(phases), ensure_ascii=False, indent=2)
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    typer.echo(str(output))


@app.command()
def flatten(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with phases"),
) -> None:
    """Print the task rows of a phases file, one JSON object per line."""

    for row in flatten_playbook_phases(normalize_phases(_read_payload(source))):
        typer.echo(json.dumps(row.model_dump(by_alias=True), ensure_ascii=False))


@app.command()
def outline(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with phases"),
) -> None:
    """Print phases as numbered headings followed by their dotted items."""

    for phase in normalize_phases(_read_payload(source)):
        typer.echo(f"{phase.id}. {phase.title}")
        for line in flatten_items_as_text(phase.items):
            typer.echo(f"  {line}")


if __name__ == "__main__":
    app()
