"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agent_builder.api.chat import router as chat_router
from agent_builder.api.knowledge import router as knowledge_router
from agent_builder.api.scrape import router as scrape_router
from agent_builder.api.state import AppState

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Expires stale knowledge on startup and discards every in-memory store
    on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    state: AppState = app.state.rag

    # Startup
    logger.info("Starting Agent Builder API...")
    removed = state.startup_cleanup()
    if removed:
        logger.info(f"Removed {len(removed)} stale knowledge sessions")
    yield
    # Shutdown
    logger.info("Shutting down Agent Builder API...")
    state.shutdown()


def create_app(state: AppState | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        state: Optional pre-built state; built from environment if omitted.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Agent Builder API",
        description=(
            "Backend for a chatbot agent builder. Ingests files, pasted text and "
            "web pages into a per-session knowledge base, embeds them into an "
            "in-memory vector index and grounds chat answers with "
            "retrieval-augmented generation."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.rag = state or AppState.create()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(knowledge_router)
    application.include_router(scrape_router)
    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "agent-builder"}

    return application


app = create_app()
