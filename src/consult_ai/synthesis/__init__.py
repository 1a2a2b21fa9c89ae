"""Report synthesis from consultation transcripts."""

from __future__ import annotations

from consult_ai.synthesis.fallbacks import (
    DOMAIN_FALLBACKS,
    DomainFallback,
    choose_fallback,
    ensure_demo_label,
    is_refusal,
)
from consult_ai.synthesis.pipeline import ReportSynthesizer

__all__ = [
    "DOMAIN_FALLBACKS",
    "DomainFallback",
    "ReportSynthesizer",
    "choose_fallback",
    "ensure_demo_label",
    "is_refusal",
]
