"""Pydantic data models for consult-ai.

Wire names are camelCase (``chiefComplaint``); Python attribute names are
snake_case. Models accept either on input and serialize by alias.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEMO_MARKER = "(demo only)"


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Consultation report ──────────────────────────────────────────────


class TranscriptTurn(BaseModel):
    """A single utterance of the voice consultation."""

    model_config = ConfigDict(extra="allow")

    role: str
    text: str = ""


class StructuredReport(CamelModel):
    """Canonical output of report synthesis.

    Every field has a default so a partially known report (e.g. one pasted
    into a comparison request) still exposes all 13 keys.
    """

    session_id: str = ""
    agent: str = ""
    user: str = "Anonymous"
    timestamp: str = ""
    chief_complaint: str = ""
    summary: str = ""
    symptoms: list[str] = Field(default_factory=list)
    duration: str = ""
    severity: str = ""
    medications_mentioned: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    tests: list[str] = Field(default_factory=list)
    medications_recommended: list[str] = Field(default_factory=list)


# ── Comparison ───────────────────────────────────────────────────────


class SentenceMatch(CamelModel):
    """A doctor-report sentence scored against the AI report (0-1)."""

    sentence: str
    similarity: float


class ComparisonResult(CamelModel):
    """Similarity between an AI report and a doctor report. Never persisted."""

    similarity: float = Field(ge=0.0, le=100.0)
    matches: list[SentenceMatch] = Field(default_factory=list)
    summary: str = ""
    ai_text: str = ""
    mode: Literal["embedding", "lexical"] = "embedding"


class MedicationComparison(CamelModel):
    """Jaccard comparison of two normalized medication lists."""

    jaccard_score: float = 0.0
    intersection: list[str] = Field(default_factory=list)
    ai_only: list[str] = Field(default_factory=list)
    doctor_only: list[str] = Field(default_factory=list)


class SynthesisMeta(CamelModel):
    """Diagnostics returned alongside a synthesized report."""

    used_retry: bool = False
    used_fallback_for_tests: bool = False
    used_fallback_for_medications: bool = False
    medication_comparison: MedicationComparison = Field(default_factory=MedicationComparison)


class SynthesisResult(BaseModel):
    """A synthesized report plus its metadata envelope."""

    report: StructuredReport
    meta: SynthesisMeta

    def to_payload(self) -> dict[str, Any]:
        """Flatten into the ``{...report, _meta}`` wire shape."""
        payload = self.report.model_dump(by_alias=True)
        payload["_meta"] = self.meta.model_dump(by_alias=True)
        return payload


# ── Sessions ─────────────────────────────────────────────────────────


class SessionRecord(CamelModel):
    """One consultation session as held by the session store."""

    session_id: str
    notes: str = ""
    selected_doctor: dict[str, Any] = Field(default_factory=dict)
    conversation: Optional[list[dict[str, Any]]] = None
    report: Optional[StructuredReport] = None
    created_by: str = "unknown"
    created_on: str = ""
