"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from consult_ai.core.config import AppSettings

log = logging.getLogger(__name__)

# Local providers do not require an API key
_NO_KEY_PROVIDERS = frozenset({"ollama"})


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_api_key(settings)
    _check_persistence(settings)
    _check_auth(settings)


def _check_api_key(settings: AppSettings) -> None:
    """Reject placeholder API keys for providers that need real ones."""
    if settings.llm.provider not in _NO_KEY_PROVIDERS:
        if settings.llm.api_key in ("no-key", ""):
            raise ValueError(
                f"CONSULT_LLM_API_KEY is required for provider '{settings.llm.provider}'. "
                f"Set it via environment variable or secrets manager."
            )


def _check_persistence(settings: AppSettings) -> None:
    """Warn about non-durable session storage."""
    if settings.persistence.backend == "memory":
        log.warning(
            "CONSULT_PERSISTENCE_BACKEND=memory: sessions and reports are lost on restart."
        )
        return
    is_container = bool(
        os.environ.get("ECS_CONTAINER_METADATA_URI")
        or os.environ.get("KUBERNETES_SERVICE_HOST")
    )
    if is_container:
        log.warning(
            "CONSULT_PERSISTENCE_BACKEND=file in a container environment. "
            "Mount %s on a persistent volume.",
            settings.persistence.store_path,
        )


def _check_auth(settings: AppSettings) -> None:
    """Reject auth enabled with no keys: every request would be refused."""
    if settings.auth.enabled and not settings.auth.api_keys:
        raise ValueError(
            "CONSULT_AUTH_ENABLED=true but no API keys configured. "
            "Set CONSULT_AUTH_API_KEYS or disable auth."
        )
