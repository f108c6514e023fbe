"""FastAPI application hosting an agent registry and its web import flow."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agentkit import __version__
from agentkit.collaborators.web import WebCollaborator
from agentkit.config import Settings
from agentkit.sdk.importer import AgentImporter
from agentkit.sdk.loader import AgentLoader
from agentkit.sdk.registry import AgentRegistry, open_registry
from agentkit.utils.log_config import setup_logging
from server.agent_routes import router as agent_router
from server.import_routes import router as import_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cancel an unfinished import when the server stops."""
    yield
    task: asyncio.Task | None = app.state.import_task
    if task is not None and not task.done():
        logger.info("Cancelling unfinished import on shutdown")
        task.cancel()


def create_app(
    settings: Settings | None = None,
    registry: AgentRegistry | None = None,
    loader: AgentLoader | None = None,
) -> FastAPI:
    """Build the app around one registry, one web collaborator and one importer."""
    settings = settings or Settings.from_env()
    registry = registry if registry is not None else open_registry(settings)
    collaborator = WebCollaborator()
    importer = AgentImporter(
        registry,
        collaborator,
        loader or AgentLoader(timeout=settings.fetch_timeout),
    )

    app = FastAPI(
        title="agentport API",
        description="Import agents from user-supplied sources and inspect the registry",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.collaborator = collaborator
    app.state.importer = importer
    app.state.import_task = None

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # include routes
    app.include_router(agent_router, prefix="/api")
    app.include_router(import_router, prefix="/api")

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {
            "status": "ok",
            "version": __version__,
            "store": str(settings.store_path),
            "endpoints": {
                "agents": "/api/agents",
                "sources": "/api/sources",
                "import": "/api/import",
            },
        }

    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    setup_logging(settings.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000)
