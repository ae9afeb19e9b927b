"""Task synchronization planning.

The tracking store keys its records by ``(phase_id, item_index)``. After every
edit the new flattened rows are matched against the existing records by that
key: unmatched rows become new records, matched records are refreshed, and
records whose key disappeared are archived (never deleted, so completion state,
comments and attachments survive if the position comes back).
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, Field

from playbook_outline.models.tree import FlattenedTaskRow

TaskStatus = Literal["pending", "in_progress", "blocked", "completed"]
TaskKey = tuple[int, int]


class TaskRecord(BaseModel):
    """A per-item tracking record."""

    task_id: str
    phase_id: int = Field(ge=1)
    phase_title: str
    item_index: int = Field(ge=0)
    item_text: str
    node_id: str | None = None
    position_path: str | None = None
    checked: bool = False
    status: TaskStatus = "pending"
    archived: bool = False

    @property
    def key(self) -> TaskKey:
        return (self.phase_id, self.item_index)


@dataclass
class TaskSyncPlan:
    """Outcome of matching flattened rows against existing records."""

    created: list[FlattenedTaskRow] = field(default_factory=list)
    updated: list[tuple[TaskRecord, FlattenedTaskRow]] = field(default_factory=list)
    unchanged: list[TaskRecord] = field(default_factory=list)
    archived: list[TaskRecord] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.created or self.updated or self.archived)

    def summary(self) -> dict[str, int]:
        return {
            "created": len(self.created),
            "updated": len(self.updated),
            "unchanged": len(self.unchanged),
            "archived": len(self.archived),
        }


def _differs(record: TaskRecord, row: FlattenedTaskRow) -> bool:
    return (
        record.archived
        or record.phase_title != row.phase_title
        or record.item_text != row.item_text
        or record.node_id != row.node_id
        or record.position_path != row.position_path
    )


def plan_task_sync(existing: Iterable[TaskRecord], rows: Sequence[FlattenedTaskRow]) -> TaskSyncPlan:
    """Match ``rows`` against ``existing`` records by ``(phase_id, item_index)``.

    Archived records whose key reappears are revived as updates. Already
    archived records whose key is still absent are left alone.
    """

    by_key: dict[TaskKey, TaskRecord] = {}
    for record in existing:
        # A live record wins over an archived one for the same key
        current = by_key.get(record.key)
        if current is None or (current.archived and not record.archived):
            by_key[record.key] = record

    plan = TaskSyncPlan()
    row_keys: set[TaskKey] = set()
    for row in sorted(rows, key=lambda r: r.key):
        row_keys.add(row.key)
        record = by_key.get(row.key)
        if record is None:
            plan.created.append(row)
        elif _differs(record, row):
            plan.updated.append((record, row))
        else:
            plan.unchanged.append(record)

    for key in sorted(by_key):
        record = by_key[key]
        if key not in row_keys and not record.archived:
            plan.archived.append(record)

    return plan


def _record_from_row(task_id: str, row: FlattenedTaskRow) -> TaskRecord:
    return TaskRecord(
        task_id=task_id,
        phase_id=row.phase_id,
        phase_title=row.phase_title,
        item_index=row.item_index,
        item_text=row.item_text,
        node_id=row.node_id,
        position_path=row.position_path,
    )


def apply_task_sync(existing: Iterable[TaskRecord], plan: TaskSyncPlan) -> list[TaskRecord]:
    """Materialize ``plan`` over ``existing``.

    Tracking state (``checked``, ``status``) is kept on updated records.

    Returns:
        All records, live and archived, ordered by key then task id.
    """

    records: dict[str, TaskRecord] = {record.task_id: record for record in existing}

    for record, row in plan.updated:
        records[record.task_id] = record.model_copy(
            update={
                "phase_title": row.phase_title,
                "item_text": row.item_text,
                "node_id": row.node_id,
                "position_path": row.position_path,
                "archived": False,
            }
        )
    for record in plan.archived:
        records[record.task_id] = record.model_copy(update={"archived": True})
    for row in plan.created:
        task_id = str(uuid.uuid4())
        records[task_id] = _record_from_row(task_id, row)

    return sorted(records.values(), key=lambda r: (r.phase_id, r.item_index, r.task_id))
