"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


_playbook_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("playbook_id", default="-")
_step_var: contextvars.ContextVar[str] = contextvars.ContextVar("playbook_step", default="-")


class _ContextFilter(logging.Filter):
    """Inject playbook context into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.playbook_id = _playbook_id_var.get()  # type: ignore[attr-defined]
        record.step = _step_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def playbook_context(*, playbook_id: str, step: str | None = None) -> Any:
    """Temporarily bind playbook context for structured logging.

    Args:
        playbook_id: Playbook identifier.
        step: Optional step name (``normalize``, ``sync``...).
    """

    token_playbook = _playbook_id_var.set(playbook_id)
    token_step = _step_var.set(step or _step_var.get())
    try:
        yield
    finally:
        _playbook_id_var.reset(token_playbook)
        _step_var.reset(token_step)


def set_step(step: str) -> None:
    """Update current step in context."""

    _step_var.set(step)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Logging level name.
    """

    root = logging.getLogger()
    root.setLevel(level)

    # Runs once per CLI command and once per app factory; reuse the handler
    handler = next((h for h in root.handlers if isinstance(h, RichHandler)), None)
    if handler is None:
        # stdout is reserved for command output
        handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_time=True, show_level=True)
        root.addHandler(handler)
    if not any(isinstance(f, _ContextFilter) for f in handler.filters):
        handler.addFilter(_ContextFilter())
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s playbook=%(playbook_id)s step=%(step)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)

