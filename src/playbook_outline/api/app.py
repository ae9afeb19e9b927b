"""FastAPI app exposing the outline engine and the playbook edit cycle."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from playbook_outline import __version__
from playbook_outline.config import Settings, load_settings
from playbook_outline.errors import PhaseNotFoundError, PlaybookNotFoundError, PlaybookValidationError
from playbook_outline.logging import configure_logging, get_logger
from playbook_outline.service import PlaybookService, PlaybookUpdate
from playbook_outline.tree.commands import NodeEdit
from playbook_outline.tree.flatten import flatten_playbook_phases
from playbook_outline.tree.normalize import normalize_phases
from playbook_outline.tree.serialize import phases_to_payload


class PhasesRequest(BaseModel):
    """Raw phases payload, in any accepted shape."""

    phases: Any = None


def _update_response(update: PlaybookUpdate) -> dict[str, Any]:
    return {
        "playbookId": update.playbook_id,
        "phases": phases_to_payload(update.phases),
        "sync": update.sync.summary(),
    }


def create_app(settings: Settings | None = None, service: PlaybookService | None = None) -> FastAPI:
    """Create FastAPI app."""

    settings = settings or load_settings()
    configure_logging(settings.log_level)
    logger = get_logger(__name__)
    service = service or PlaybookService.from_settings(settings)

    app = FastAPI(title="Playbook Outline", version=__version__)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/outline/normalize")
    def outline_normalize(req: PhasesRequest) -> dict[str, Any]:
        return {"phases": phases_to_payload(normalize_phases(req.phases))}

    @app.post("/outline/flatten")
    def outline_flatten(req: PhasesRequest) -> dict[str, Any]:
        rows = flatten_playbook_phases(normalize_phases(req.phases))
        return {"rows": [row.model_dump(by_alias=True) for row in rows]}

    @app.put("/playbooks/{playbook_id}")
    def playbook_put(playbook_id: str, req: PhasesRequest) -> dict[str, Any]:
        logger.info("API playbook save requested: %s", playbook_id)
        try:
            return _update_response(service.save_phases(playbook_id, req.phases))
        except PlaybookValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.get("/playbooks/{playbook_id}")
    def playbook_get(playbook_id: str) -> dict[str, Any]:
        try:
            phases = service.get_phases(playbook_id)
        except PlaybookNotFoundError as exc:
            raise HTTPException(status_code=404, detail="playbook not found") from exc
        return {"playbookId": playbook_id, "phases": phases_to_payload(phases)}

    @app.patch("/playbooks/{playbook_id}/content")
    def playbook_content(playbook_id: str, req: PhasesRequest) -> dict[str, Any]:
        logger.info("API content edit requested: %s", playbook_id)
        try:
            return _update_response(service.replace_phases(playbook_id, req.phases))
        except PlaybookNotFoundError as exc:
            raise HTTPException(status_code=404, detail="playbook not found") from exc
        except PlaybookValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.post("/playbooks/{playbook_id}/edits")
    def playbook_edit(playbook_id: str, edit: NodeEdit) -> dict[str, Any]:
        logger.info("API node edit requested: %s", playbook_id, extra={"op": edit.op})
        try:
            return _update_response(service.apply_edit(playbook_id, edit))
        except PlaybookNotFoundError as exc:
            raise HTTPException(status_code=404, detail="playbook not found") from exc
        except PhaseNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except PlaybookValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.get("/playbooks/{playbook_id}/tasks")
    def playbook_tasks(playbook_id: str) -> list[dict[str, Any]]:
        try:
            tasks = service.list_tasks(playbook_id)
        except PlaybookNotFoundError as exc:
            raise HTTPException(status_code=404, detail="playbook not found") from exc
        return [task.model_dump(mode="json") for task in tasks]

    return app
