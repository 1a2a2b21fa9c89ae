"""Shared fixtures for consult-ai tests."""

from __future__ import annotations

from typing import Any

import pytest

from consult_ai.core.config import AppSettings, LLMConfig
from consult_ai.models import StructuredReport
from consult_ai.persistence.memory_backend import MemoryPersistenceBackend
from consult_ai.services.session_store import SessionStore


@pytest.fixture
def settings() -> AppSettings:
    """Default test settings (fake key, in-memory persistence)."""
    settings = AppSettings()
    settings.llm = LLMConfig(api_key="test-key", model="test-model")
    return settings


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore(MemoryPersistenceBackend())


@pytest.fixture
def fever_report() -> StructuredReport:
    """AI report from a short fever consultation."""
    return StructuredReport(
        session_id="sess-1",
        agent="General Physician",
        user="Anonymous",
        timestamp="2024-05-01T10:00:00.000Z",
        chief_complaint="fever",
        summary="Patient reports fever for two days.",
        symptoms=["fever", "headache"],
        duration="2 days",
        severity="mild",
        recommendations=["rest", "fluids"],
        tests=["CBC"],
        medications_recommended=["paracetamol (demo only)"],
    )


@pytest.fixture
def transcript() -> list[dict[str, str]]:
    return [
        {"role": "assistant", "text": "Hello, what brings you in today?"},
        {"role": "user", "text": "I have had a cough for three days."},
        {"role": "assistant", "text": "Any fever or shortness of breath?"},
        {"role": "user", "text": "A little short of breath at night."},
    ]


@pytest.fixture
def session_details() -> dict[str, Any]:
    return {
        "id": 1,
        "notes": "cough for three days",
        "selectedDoctor": {"id": 5, "specialist": "Pulmonologist"},
    }
