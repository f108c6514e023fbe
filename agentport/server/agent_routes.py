"""API routes for the agent registry and the known-source list."""

from fastapi import APIRouter, HTTPException, Request

from agentkit.models.batch import AgentSummary
from agentkit.sdk.registry import AgentRegistry

router = APIRouter()


def _registry(request: Request) -> AgentRegistry:
    return request.app.state.registry


@router.get("/agents")
def list_agents(request: Request) -> list[AgentSummary]:
    """list all committed agents."""
    return _registry(request).summaries()


@router.get("/agents/{slot}")
def get_agent(slot: int, request: Request) -> AgentSummary:
    """get a single slot's agent."""
    handle = _registry(request).slot(slot)
    if handle is None:
        raise HTTPException(status_code=404, detail=f"No agent in slot {slot}")
    return AgentSummary(
        slot=slot,
        source_id=handle.source_id,
        function_names=handle.function_names,
        loaded_at=handle.loaded_at,
    )


@router.get("/sources")
def list_sources(request: Request) -> list[str]:
    """known sources, most recently used first."""
    return _registry(request).known_sources.sources


@router.delete("/sources")
def clear_sources(request: Request) -> dict:
    """forget every known source.

    Refused while an import runs, since its suggestions come from this list.
    """
    if request.app.state.importer.active:
        raise HTTPException(status_code=409, detail="An import is in progress")
    registry = _registry(request)
    removed = len(registry.known_sources)
    registry.known_sources.clear()
    return {"cleared": removed}
