"""Playbook store.

Holds one opaque phases blob plus the task records per playbook. Kept in
memory, with optional one-file-per-playbook JSON persistence so it can be
swapped with a DB-backed implementation later.
"""

from __future__ import annotations

import re
import threading
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from playbook_outline.errors import PlaybookNotFoundError, PlaybookValidationError
from playbook_outline.logging import get_logger
from playbook_outline.sync.tasks import TaskRecord

logger = get_logger(__name__)

_PLAYBOOK_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


class PlaybookRecord(BaseModel):
    """Stored state of one playbook."""

    playbook_id: str
    phases_json: str = "[]"
    tasks: list[TaskRecord] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


def check_playbook_id(playbook_id: str) -> str:
    """Validate a playbook id (it doubles as a file name)."""

    if not _PLAYBOOK_ID_RE.match(playbook_id or ""):
        raise PlaybookValidationError(f"invalid playbook id: {playbook_id!r}")
    return playbook_id


class PlaybookStore:
    """In-memory playbook store with optional JSON-file persistence."""

    def __init__(self, root_dir: Path | None = None) -> None:
        self._root = root_dir
        self._records: dict[str, PlaybookRecord] = {}
        # Held by writers across read, sync and save of one playbook
        self.lock = threading.RLock()
        if self._root is not None:
            self._root.mkdir(parents=True, exist_ok=True)
            self._load_existing()

    def _path(self, playbook_id: str) -> Path:
        assert self._root is not None
        return self._root / f"{playbook_id}.json"

    def _load_existing(self) -> None:
        assert self._root is not None
        for path in sorted(self._root.glob("*.json")):
            record = PlaybookRecord.model_validate_json(path.read_text(encoding="utf-8"))
            self._records[record.playbook_id] = record
        logger.info("Loaded %d playbooks from %s", len(self._records), self._root)

    def exists(self, playbook_id: str) -> bool:
        return playbook_id in self._records

    def get(self, playbook_id: str) -> PlaybookRecord:
        """Fetch a record.

        Raises:
            PlaybookNotFoundError: Unknown id.
        """

        record = self._records.get(playbook_id)
        if record is None:
            raise PlaybookNotFoundError(playbook_id)
        return record

    def save(self, record: PlaybookRecord) -> PlaybookRecord:
        """Insert or replace a record, stamping ``updated_at``."""

        check_playbook_id(record.playbook_id)
        record = record.model_copy(update={"updated_at": datetime.now(UTC)})
        self._records[record.playbook_id] = record
        if self._root is not None:
            self._path(record.playbook_id).write_text(record.model_dump_json(indent=2), encoding="utf-8")
        return record

    def delete(self, playbook_id: str) -> None:
        self.get(playbook_id)
        del self._records[playbook_id]
        if self._root is not None:
            self._path(playbook_id).unlink(missing_ok=True)

    def ids(self) -> list[str]:
        return sorted(self._records)

    def count(self) -> int:
        return len(self._records)
