"""Tests for startup validation checks."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from consult_ai.core.config import AppSettings, AuthConfig, LLMConfig, PersistenceConfig
from consult_ai.core.startup_checks import validate_settings


class TestApiKeyValidation:
    """Placeholder API keys are rejected for hosted providers."""

    @pytest.mark.parametrize("provider", ["openrouter", "openai", "anthropic", "litellm"])
    def test_rejects_placeholder_key(self, provider: str) -> None:
        settings = AppSettings(llm=LLMConfig(provider=provider, api_key="no-key"))
        with pytest.raises(ValueError, match="CONSULT_LLM_API_KEY is required"):
            validate_settings(settings)

    def test_rejects_empty_key(self) -> None:
        settings = AppSettings(llm=LLMConfig(provider="openrouter", api_key=""))
        with pytest.raises(ValueError, match="CONSULT_LLM_API_KEY is required"):
            validate_settings(settings)

    def test_accepts_no_key_for_ollama(self) -> None:
        """Ollama runs locally, no API key needed."""
        validate_settings(AppSettings(llm=LLMConfig(provider="ollama", api_key="no-key")))

    def test_accepts_real_key(self) -> None:
        validate_settings(AppSettings(llm=LLMConfig(api_key="sk-or-real")))


class TestPersistenceWarnings:
    def test_memory_backend_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        settings = AppSettings(llm=LLMConfig(api_key="k"), persistence=PersistenceConfig(backend="memory"))
        with caplog.at_level(logging.WARNING, logger="consult_ai.core.startup_checks"):
            validate_settings(settings)
        assert "lost on restart" in caplog.text

    def test_file_backend_in_container_warns(self, caplog: pytest.LogCaptureFixture, tmp_path: Path) -> None:
        settings = AppSettings(
            llm=LLMConfig(api_key="k"),
            persistence=PersistenceConfig(backend="file", store_path=tmp_path),
        )
        with patch.dict(os.environ, {"KUBERNETES_SERVICE_HOST": "10.0.0.1"}):
            with caplog.at_level(logging.WARNING, logger="consult_ai.core.startup_checks"):
                validate_settings(settings)
        assert "persistent volume" in caplog.text


class TestAuthValidation:
    def test_enabled_without_keys_rejected(self) -> None:
        settings = AppSettings(llm=LLMConfig(api_key="k"), auth=AuthConfig(enabled=True, api_keys=[]))
        with pytest.raises(ValueError, match="no API keys configured"):
            validate_settings(settings)

    def test_enabled_with_keys_accepted(self) -> None:
        settings = AppSettings(llm=LLMConfig(api_key="k"), auth=AuthConfig(enabled=True, api_keys=["secret"]))
        validate_settings(settings)
