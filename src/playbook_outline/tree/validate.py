"""Acceptance checks applied to client-submitted phase edits."""

from __future__ import annotations

from typing import Any

from playbook_outline.errors import EmptyPlaybookError
from playbook_outline.models.tree import PlaybookPhase
from playbook_outline.tree.normalize import normalize_phases


def validate_phases_edit(payload: Any) -> list[PlaybookPhase]:
    """Normalize an edit and reject it if nothing usable is left.

    Raises:
        EmptyPlaybookError: No phases survive, or a phase has no items.
    """

    phases = normalize_phases(payload)
    if not phases or any(not phase.items for phase in phases):
        raise EmptyPlaybookError()
    return phases
