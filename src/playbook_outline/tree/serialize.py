"""JSON blob round-trip for stored phases."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from playbook_outline.logging import get_logger
from playbook_outline.models.tree import PlaybookPhase
from playbook_outline.tree.normalize import normalize_phases

logger = get_logger(__name__)


def phases_to_payload(phases: Sequence[PlaybookPhase]) -> list[dict[str, Any]]:
    """Plain JSON-compatible values for a list of phases."""

    return [phase.model_dump(mode="json") for phase in phases]


def dump_phases_json(phases: Sequence[PlaybookPhase]) -> str:
    """Serialize phases to the opaque text blob stored per playbook."""

    return json.dumps(phases_to_payload(phases), ensure_ascii=False, separators=(",", ":"))


def load_phases_json(text: str | bytes | None) -> list[PlaybookPhase]:
    """Parse and normalize a stored blob.

    Malformed JSON reads as an empty playbook rather than failing the read.
    """

    if not text:
        return []
    try:
        payload = json.loads(text)
    except (TypeError, ValueError):
        logger.debug("load_phases_json: stored blob is not valid JSON")
        return []
    return normalize_phases(payload)
