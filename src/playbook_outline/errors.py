"""Exceptions raised by the playbook service layer.

The outline engine itself never raises for malformed input; these errors are
raised by callers that act on its output.
"""

from __future__ import annotations


class PlaybookError(Exception):
    """Base class for playbook errors."""


class PlaybookValidationError(PlaybookError):
    """A submitted edit cannot be accepted."""


class EmptyPlaybookError(PlaybookValidationError):
    """Normalization left no phases, or a phase without items."""

    message = "Debes conservar al menos un ítem principal con subítems válidos."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class PlaybookNotFoundError(PlaybookError):
    """No playbook is stored under the requested id."""

    def __init__(self, playbook_id: str) -> None:
        super().__init__(f"playbook not found: {playbook_id}")
        self.playbook_id = playbook_id


class PhaseNotFoundError(PlaybookError):
    """An edit targets a phase id that does not exist."""

    def __init__(self, phase_id: int) -> None:
        super().__init__(f"phase not found: {phase_id}")
        self.phase_id = phase_id
