"""Pydantic models used across the project."""

from __future__ import annotations

from playbook_outline.models.tree import FlattenedRow, FlattenedTaskRow, PlaybookNode, PlaybookPhase

__all__ = [
    "FlattenedRow",
    "FlattenedTaskRow",
    "PlaybookNode",
    "PlaybookPhase",
]
