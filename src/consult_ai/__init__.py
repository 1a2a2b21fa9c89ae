"""consult-ai: structured reports from AI voice consultations, compared against doctor reports.

Public API::

    from consult_ai import (
        AppSettings,
        StructuredReport, ComparisonResult, SynthesisResult, SessionRecord,
        ReportComparator, ReportSynthesizer, SessionStore,
        LLMClient, EmbeddingClient,
        compare_medications,
    )
"""

from __future__ import annotations

from consult_ai.comparison import ReportComparator, compare_medications
from consult_ai.core.config import AppSettings
from consult_ai.exceptions import ConsultError
from consult_ai.models import (
    ComparisonResult,
    MedicationComparison,
    SessionRecord,
    StructuredReport,
    SynthesisMeta,
    SynthesisResult,
)
from consult_ai.providers.embeddings import EmbeddingClient
from consult_ai.providers.llm import LLMClient
from consult_ai.services.session_store import SessionStore
from consult_ai.synthesis import ReportSynthesizer

__all__ = [
    "AppSettings",
    "ComparisonResult",
    "ConsultError",
    "EmbeddingClient",
    "LLMClient",
    "MedicationComparison",
    "ReportComparator",
    "ReportSynthesizer",
    "SessionRecord",
    "SessionStore",
    "StructuredReport",
    "SynthesisMeta",
    "SynthesisResult",
    "compare_medications",
]
