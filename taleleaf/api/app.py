"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taleleaf.api.dependencies import close_store, get_config
from taleleaf.api.routes import ask, context_window
from taleleaf.logging_setup import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    The store is opened lazily on first request and closed on shutdown.
    """
    config = get_config()
    setup_logging(config.logging.level, config.logging.log_file)
    logger.info("TaleLeaf API started")

    yield

    await close_store()
    logger.info("TaleLeaf API shutdown complete")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    config = get_config()

    app = FastAPI(
        title="TaleLeaf Context Window API",
        description="Spoiler-safe retrieval for reading-companion questions",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(context_window.router)
    app.include_router(ask.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
