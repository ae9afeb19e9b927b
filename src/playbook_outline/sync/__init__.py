"""Reconciliation of flattened rows with per-item tracking records."""

from __future__ import annotations

from playbook_outline.sync.tasks import TaskRecord, TaskSyncPlan, apply_task_sync, plan_task_sync

__all__ = ["TaskRecord", "TaskSyncPlan", "apply_task_sync", "plan_task_sync"]
