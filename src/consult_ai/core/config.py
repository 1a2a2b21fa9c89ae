"""Nested pydantic-settings configuration for the application.

Each sub-config reads its own ``CONSULT_<GROUP>_*`` env vars, so a deployment
can override a single knob without touching the rest::

    export CONSULT_LLM_MODEL=openrouter/google/gemini-2.0-flash-001
    export CONSULT_EMBEDDING_MODEL=openrouter/openai/text-embedding-3-small
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class LLMConfig(BaseSettings):
    """Chat-completion backend configuration.

    Env vars use ``CONSULT_LLM_`` prefix::

        export CONSULT_LLM_PROVIDER=openrouter
        export CONSULT_LLM_API_KEY=sk-or-...
    """

    model_config = {"env_prefix": "CONSULT_LLM_"}

    provider: Literal["openrouter", "openai", "ollama", "litellm", "anthropic"] = "openrouter"
    base_url: str = ""
    api_key: str = "no-key"
    model: str = "openrouter/google/gemini-2.0-flash-001"
    temperature: float = 0.0
    timeout: float = 60.0
    report_max_tokens: int = 1400
    retry_max_tokens: int = 900


class EmbeddingConfig(BaseSettings):
    """Embedding backend configuration.

    Env vars use ``CONSULT_EMBEDDING_`` prefix. Empty ``base_url`` / ``api_key``
    fall back to the LLM settings.
    """

    model_config = {"env_prefix": "CONSULT_EMBEDDING_"}

    model: str = "openrouter/openai/text-embedding-3-small"
    base_url: str = ""
    api_key: str = ""
    timeout: float = 30.0


class ComparisonConfig(BaseSettings):
    """Report comparison knobs.

    Env vars use ``CONSULT_COMPARISON_`` prefix.
    """

    model_config = {"env_prefix": "CONSULT_COMPARISON_"}

    min_doctor_text_chars: int = Field(default=10, ge=1)
    max_sentences: int = Field(default=300, ge=1)
    top_matches: int = Field(default=8, ge=1)
    enable_summary: bool = True
    summary_max_tokens: int = 800


class PersistenceConfig(BaseSettings):
    """Session store configuration.

    Env vars use ``CONSULT_PERSISTENCE_`` prefix.
    """

    model_config = {"env_prefix": "CONSULT_PERSISTENCE_"}

    backend: Literal["file", "memory"] = "memory"
    store_path: Path = Path("./sessions")


class UploadConfig(BaseSettings):
    """Doctor report upload limits.

    Env vars use ``CONSULT_UPLOAD_`` prefix.
    """

    model_config = {"env_prefix": "CONSULT_UPLOAD_"}

    max_bytes: int = 12 * 1024 * 1024
    ocr_language: str = "eng"


class ObservabilityConfig(BaseSettings):
    """Observability configuration.

    Env vars use ``CONSULT_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "CONSULT_OBSERVABILITY_"}

    service_name: str = "consult-ai"
    log_level: str = "INFO"


class AuthConfig(BaseSettings):
    """API-key authentication.

    Env vars use ``CONSULT_AUTH_`` prefix; ``CONSULT_AUTH_API_KEYS`` is a JSON list.
    """

    model_config = {"env_prefix": "CONSULT_AUTH_"}

    enabled: bool = False
    api_keys: list[str] = Field(default_factory=list)


class APIConfig(BaseSettings):
    """OpenAPI metadata.

    Env vars use ``CONSULT_API_`` prefix.
    """

    model_config = {"env_prefix": "CONSULT_API_"}

    title: str = "consult-ai"
    description: str = "Consultation report synthesis and doctor-report comparison"


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs."""

    llm: LLMConfig = LLMConfig()
    embedding: EmbeddingConfig = EmbeddingConfig()
    comparison: ComparisonConfig = ComparisonConfig()
    persistence: PersistenceConfig = PersistenceConfig()
    upload: UploadConfig = UploadConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
    auth: AuthConfig = AuthConfig()
    api: APIConfig = APIConfig()
