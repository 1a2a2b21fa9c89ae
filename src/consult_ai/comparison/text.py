"""Text normalization helpers shared by the comparison engines."""

from __future__ import annotations

import re

from consult_ai.models import StructuredReport

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.?!])\s+")
_DEMO_MARKER = re.compile(r"\(demo only\)", re.IGNORECASE)
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")

MAX_SENTENCES = 300


def flatten(report: StructuredReport) -> str:
    """Build the AI-side comparison text from a report.

    Order is fixed: chief complaint, summary, recommendations, tests,
    recommended medications. Empty parts are omitted.
    """
    parts = [
        report.chief_complaint,
        report.summary,
        ". ".join(report.recommendations),
        ". ".join(report.tests),
        ". ".join(report.medications_recommended),
    ]
    return "\n\n".join(p for p in parts if p)


def split_sentences(text: str, limit: int = MAX_SENTENCES) -> list[str]:
    """Split on whitespace following ``.``, ``?`` or ``!``; capped at ``limit``."""
    pieces = (s.strip() for s in _SENTENCE_BOUNDARY.split(text))
    return [s for s in pieces if s][:limit]


def normalize_med_name(name: str) -> str:
    """Canonical medication token: lower-case, no demo marker, no punctuation."""
    lowered = str(name or "").lower()
    return _NON_ALNUM.sub("", _DEMO_MARKER.sub("", lowered)).strip()
