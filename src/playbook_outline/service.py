"""Playbook service: the read/edit/sync cycle around the outline engine.

Every read re-normalizes the stored blob. Every write replaces the phases
wholesale, persists the canonical blob and reconciles the task records
against a fresh flatten pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from playbook_outline.config import Settings
from playbook_outline.logging import get_logger, playbook_context, set_step
from playbook_outline.models.tree import FlattenedTaskRow, PlaybookPhase
from playbook_outline.store import PlaybookRecord, PlaybookStore, check_playbook_id
from playbook_outline.sync.tasks import TaskRecord, TaskSyncPlan, apply_task_sync, plan_task_sync
from playbook_outline.tree.commands import NodeEdit, apply_node_edit
from playbook_outline.tree.edit import DEFAULT_NEW_NODE_LABEL
from playbook_outline.tree.flatten import flatten_items_as_text, flatten_playbook_phases
from playbook_outline.tree.serialize import dump_phases_json, load_phases_json
from playbook_outline.tree.validate import validate_phases_edit

logger = get_logger(__name__)


@dataclass(frozen=True)
class PlaybookUpdate:
    """Result of a write."""

    playbook_id: str
    phases: list[PlaybookPhase]
    rows: list[FlattenedTaskRow]
    sync: TaskSyncPlan


class PlaybookService:
    """Coordinates normalization, persistence and task sync for playbooks."""

    def __init__(self, store: PlaybookStore, *, new_node_label: str = DEFAULT_NEW_NODE_LABEL) -> None:
        self._store = store
        self._new_node_label = new_node_label

    @classmethod
    def from_settings(cls, settings: Settings) -> PlaybookService:
        return cls(PlaybookStore(settings.data_dir), new_node_label=settings.new_node_label)

    @property
    def store(self) -> PlaybookStore:
        return self._store

    def get_phases(self, playbook_id: str) -> list[PlaybookPhase]:
        """Canonical phases of a stored playbook."""

        return load_phases_json(self._store.get(playbook_id).phases_json)

    def list_tasks(self, playbook_id: str, *, include_archived: bool = False) -> list[TaskRecord]:
        tasks = self._store.get(playbook_id).tasks
        if include_archived:
            return list(tasks)
        return [task for task in tasks if not task.archived]

    def outline_text(self, playbook_id: str) -> list[str]:
        """Heading and item lines for export-style rendering."""

        lines: list[str] = []
        for phase in self.get_phases(playbook_id):
            lines.append(f"{phase.id}. {phase.title}")
            lines.extend(flatten_items_as_text(phase.items))
        return lines

    def save_phases(self, playbook_id: str, payload: Any) -> PlaybookUpdate:
        """Create or replace a playbook from a raw phases payload.

        Raises:
            EmptyPlaybookError: The payload normalizes to nothing usable.
        """

        check_playbook_id(playbook_id)
        with self._store.lock, playbook_context(playbook_id=playbook_id, step="normalize"):
            phases = validate_phases_edit(payload)
            return self._commit(playbook_id, phases)

    def replace_phases(self, playbook_id: str, payload: Any) -> PlaybookUpdate:
        """Replace the phases of an existing playbook.

        Raises:
            PlaybookNotFoundError: Unknown playbook.
            EmptyPlaybookError: The payload normalizes to nothing usable.
        """

        with self._store.lock:
            self._store.get(playbook_id)
            return self.save_phases(playbook_id, payload)

    def apply_edit(self, playbook_id: str, edit: NodeEdit) -> PlaybookUpdate:
        """Apply a single-node edit to a stored playbook.

        Raises:
            PlaybookNotFoundError: Unknown playbook.
            PhaseNotFoundError: Unknown phase.
            EmptyPlaybookError: The edit would leave a phase empty.
        """

        with self._store.lock, playbook_context(playbook_id=playbook_id, step="edit"):
            phases = apply_node_edit(self.get_phases(playbook_id), edit, new_node_label=self._new_node_label)
            logger.info("Applied %s on node %s of phase %d", edit.op, edit.node_id, edit.phase_id)
            phases = validate_phases_edit([phase.model_dump(mode="json") for phase in phases])
            return self._commit(playbook_id, phases)

    def _commit(self, playbook_id: str, phases: list[PlaybookPhase]) -> PlaybookUpdate:
        existing = self._store.get(playbook_id).tasks if self._store.exists(playbook_id) else []

        set_step("sync")
        rows = flatten_playbook_phases(phases)
        plan = plan_task_sync(existing, rows)
        tasks = apply_task_sync(existing, plan)

        self._store.save(PlaybookRecord(playbook_id=playbook_id, phases_json=dump_phases_json(phases), tasks=tasks))
        logger.info("Saved %d phases, %d rows; task sync %s", len(phases), len(rows), plan.summary())
        return PlaybookUpdate(playbook_id=playbook_id, phases=phases, rows=rows, sync=plan)
