"""API routes for running an import batch from the browser.

Flow:
    POST /api/import            start a batch (runs in the background)
    GET  /api/import/pending    what to ask the user, plus failures so far
    POST /api/import/submit     hand the user's sources to the batch
    GET  /api/import            overall status, poll until state == committed
"""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field, model_validator

from agentkit.collaborators.web import WebCollaborator
from agentkit.errors import NoPendingRequestError
from agentkit.models.batch import BatchRequest, BatchState, SlotFailure
from agentkit.sdk.importer import AgentImporter

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Request/Response Models ---


class StartImportRequest(BaseModel):
    """Request body for starting an import batch."""

    slot_count: int = Field(ge=1)
    function_names: list[str] = Field(min_length=1)
    labels: list[str] = Field(default_factory=list)
    first_slot: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_labels(self) -> "StartImportRequest":
        if len(self.labels) > self.slot_count:
            raise ValueError("more labels than slots")
        return self


class SubmitSourcesRequest(BaseModel):
    """Request body carrying one source per slot."""

    sources: list[str]


class ImportStatus(BaseModel):
    """Where the current (or last) import stands."""

    active: bool
    state: BatchState | None
    pending: BatchRequest | None
    failures: list[SlotFailure]


# --- Helper Functions ---


def _importer(request: Request) -> AgentImporter:
    return request.app.state.importer


def _collaborator(request: Request) -> WebCollaborator:
    return request.app.state.collaborator


def _status(request: Request) -> ImportStatus:
    importer = _importer(request)
    collaborator = _collaborator(request)
    return ImportStatus(
        active=importer.active,
        state=importer.state,
        pending=collaborator.pending,
        failures=list(collaborator.failures),
    )


def _log_batch_result(task: asyncio.Task) -> None:
    if task.cancelled():
        logger.info("Import batch cancelled")
    elif task.exception() is not None:
        logger.error("Import batch crashed", exc_info=task.exception())


# --- Routes ---


@router.get("/import")
async def import_status(request: Request) -> ImportStatus:
    """status of the current or last import."""
    return _status(request)


@router.post("/import", status_code=202)
async def start_import(body: StartImportRequest, request: Request) -> ImportStatus:
    """start an import batch; sources are collected via /import/submit."""
    task: asyncio.Task | None = request.app.state.import_task
    if _importer(request).active or (task is not None and not task.done()):
        raise HTTPException(status_code=409, detail="An import is already in progress")

    task = asyncio.create_task(
        _importer(request).request_batch(
            body.slot_count,
            body.function_names,
            body.labels,
            first_slot=body.first_slot,
        )
    )
    task.add_done_callback(_log_batch_result)
    request.app.state.import_task = task

    # let the batch reach its first suspension point so the request is pending
    await asyncio.sleep(0)
    return _status(request)


@router.get("/import/pending")
async def pending_import(request: Request) -> ImportStatus:
    """the request waiting for sources, with failures of the last submit."""
    status = _status(request)
    if not status.active:
        raise HTTPException(status_code=404, detail="No import in progress")
    return status


@router.post("/import/submit")
async def submit_sources(body: SubmitSourcesRequest, request: Request) -> ImportStatus:
    """hand the user's sources to the waiting batch."""
    try:
        _collaborator(request).submit(body.sources)
    except NoPendingRequestError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return _status(request)
