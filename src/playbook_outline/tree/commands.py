"""Single-node edit commands.

A command targets one node of one phase, runs the matching editing primitive
and re-normalizes the playbook so fallback ids and text are re-derived.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from playbook_outline.errors import PhaseNotFoundError
from playbook_outline.models.tree import PlaybookNode, PlaybookPhase
from playbook_outline.tree.edit import (
    DEFAULT_NEW_NODE_LABEL,
    add_child_node,
    add_sibling_node,
    build_new_node,
    delete_node,
    update_node_text,
)
from playbook_outline.tree.normalize import normalize_phases
from playbook_outline.tree.serialize import phases_to_payload

EditOp = Literal["update_text", "add_child", "add_sibling", "delete"]


class NodeEdit(BaseModel):
    """An edit-in-place request for one node."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    op: EditOp
    phase_id: int = Field(ge=1)
    node_id: str
    text: str | None = None


def _edit_items(items: list[PlaybookNode], edit: NodeEdit, new_node_label: str) -> list[PlaybookNode]:
    if edit.op == "update_text":
        return update_node_text(items, edit.node_id, edit.text or "")
    if edit.op == "add_child":
        return add_child_node(items, edit.node_id, build_new_node(edit.text or new_node_label))
    if edit.op == "add_sibling":
        return add_sibling_node(items, edit.node_id, build_new_node(edit.text or new_node_label))
    return delete_node(items, edit.node_id)


def apply_node_edit(
    phases: Sequence[PlaybookPhase],
    edit: NodeEdit,
    *,
    new_node_label: str = DEFAULT_NEW_NODE_LABEL,
) -> list[PlaybookPhase]:
    """Apply ``edit`` and return re-normalized phases.

    An unknown ``node_id`` leaves the phase unchanged.

    Raises:
        PhaseNotFoundError: ``edit.phase_id`` is not one of the phases.
    """

    if not any(phase.id == edit.phase_id for phase in phases):
        raise PhaseNotFoundError(edit.phase_id)

    edited = [
        phase.model_copy(update={"items": _edit_items(phase.items, edit, new_node_label)})
        if phase.id == edit.phase_id
        else phase
        for phase in phases
    ]
    return normalize_phases(phases_to_payload(edited))
