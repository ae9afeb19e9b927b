"""Uvicorn server launcher.

Console scripts must point to a callable, not an ASGI app object.
"""

from __future__ import annotations

from typing import Annotated

import typer
import uvicorn

from playbook_outline.config import load_settings


def main(
    host: Annotated[str | None, typer.Option(help="Bind host (overrides PLAYBOOK_API_HOST)")] = None,
    port: Annotated[int | None, typer.Option(help="Bind port (overrides PLAYBOOK_API_PORT)")] = None,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload (dev)")] = False,
) -> None:
    """Start the playbook outline API server."""

    settings = load_settings()
    uvicorn.run(
        "playbook_outline.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level="info",
    )


def run() -> None:
    typer.run(main)


if __name__ == "__main__":
    run()
