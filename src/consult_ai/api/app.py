"""FastAPI application with lifespan management."""

from __future__ import annotations

import importlib.metadata
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Depends, FastAPI

from consult_ai.api.auth import require_auth
from consult_ai.api.middleware.error_handler import register_error_handlers
from consult_ai.api.routes import compare, doctors, extract, health, sessions, synthesize
from consult_ai.core.config import APIConfig, AppSettings
from consult_ai.core.logging_config import setup_logging
from consult_ai.core.startup_checks import validate_settings
from consult_ai.providers.embeddings import EmbeddingClient
from consult_ai.providers.llm import LLMClient
from consult_ai.services.session_store import SessionStore


def _get_version() -> str:
    """Read package version from installed metadata, with dev fallback."""
    try:
        return importlib.metadata.version("consult-ai")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup/shutdown lifecycle.

    Components already placed on ``app.state`` (tests, embedding hosts) are
    kept; anything missing is built from settings.
    """
    settings: AppSettings = getattr(app.state, "settings", None) or AppSettings()
    validate_settings(settings)
    setup_logging(settings.observability)

    app.state.settings = settings
    if getattr(app.state, "session_store", None) is None:
        app.state.session_store = SessionStore.from_config(settings.persistence)
    if getattr(app.state, "llm_client", None) is None:
        app.state.llm_client = LLMClient(settings.llm)
    if getattr(app.state, "embedding_client", None) is None:
        app.state.embedding_client = EmbeddingClient(settings.embedding, settings.llm)
    yield


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Build the application; ``settings`` overrides environment-derived config."""
    api_config = settings.api if settings is not None else APIConfig()
    app = FastAPI(
        title=api_config.title,
        description=api_config.description,
        version=_get_version(),
        lifespan=lifespan,
    )
    if settings is not None:
        app.state.settings = settings

    register_error_handlers(app)

    app.include_router(health.router)
    for module in (compare, synthesize, sessions, extract, doctors):
        app.include_router(module.router, prefix="/api", dependencies=[Depends(require_auth)])
    return app


app = create_app()
