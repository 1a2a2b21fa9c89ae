"""Demo fallback content for tests and medications, plus refusal detection.

``DOMAIN_FALLBACKS`` is an immutable table built at import time.
``FALLBACK_RULES`` is evaluated top to bottom and the first match wins, so
the order of the tuple is part of the behaviour.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from consult_ai.models import DEMO_MARKER, StructuredReport


@dataclass(frozen=True)
class DomainFallback:
    """Placeholder tests and demo-labeled medication classes for one domain."""

    tests: tuple[str, ...]
    meds: tuple[str, ...]


DOMAIN_FALLBACKS: Mapping[str, DomainFallback] = MappingProxyType({
    "general": DomainFallback(
        tests=("CBC", "CRP"),
        meds=("Analgesic (e.g., paracetamol) (demo only)", "Antipyretic (demo only)"),
    ),
    "respiratory": DomainFallback(
        tests=("Chest X-ray", "CBC"),
        meds=("Expectorant (demo only)", "Bronchodilator (demo only)", "Analgesic (demo only)"),
    ),
    "infection": DomainFallback(
        tests=("CBC", "CRP", "Blood culture (if indicated)"),
        meds=("Analgesic (e.g., paracetamol) (demo only)", "Antibiotic (class example) (demo only)"),
    ),
    "uti": DomainFallback(
        tests=("Urine analysis", "Urine culture"),
        meds=(
            "Nitrofurantoin (example) (demo only)",
            "Trimethoprim-sulfamethoxazole (example) (demo only)",
        ),
    ),
    "gastro": DomainFallback(
        tests=("Stool routine", "CBC"),
        meds=("Oral rehydration (demo only)", "Antiemetic (demo only)"),
    ),
    "cardio": DomainFallback(
        tests=("ECG", "Troponin (if indicated)"),
        meds=("Antiplatelet (demo only)", "Analgesic (demo only)"),
    ),
    "hypertension": DomainFallback(
        tests=("BP monitoring", "Basic metabolic panel"),
        meds=("ACE inhibitor (class example) (demo only)", "Calcium channel blocker (demo only)"),
    ),
    "diabetes": DomainFallback(
        tests=("Fasting blood glucose", "HbA1c"),
        meds=("Metformin (example) (demo only)", "Insulin (type-specific) (demo only)"),
    ),
})


@dataclass(frozen=True)
class FallbackRule:
    """Maps specialty / chief-complaint keywords to a fallback domain."""

    domain: str
    specialty_keywords: tuple[str, ...] = ()
    complaint_keywords: tuple[str, ...] = ()

    def matches(self, specialty: str, complaint: str) -> bool:
        return any(k in specialty for k in self.specialty_keywords) or any(
            k in complaint for k in self.complaint_keywords
        )


FALLBACK_RULES: tuple[FallbackRule, ...] = (
    FallbackRule("respiratory", ("respir",), ("cough", "breath")),
    FallbackRule("infection", (), ("fever", "infection")),
    FallbackRule("uti", (), ("urine", "burning", "dysuria")),
    FallbackRule("gastro", (), ("diarr", "vomit", "nausea")),
    FallbackRule("cardio", ("cardio",), ("chest",)),
    FallbackRule("hypertension", ("hyper",), ("blood pressure",)),
    FallbackRule("diabetes", ("diabet",), ("sugar", "glucose")),
)

_REFUSAL_PATTERN = re.compile(
    r"cannot recommend|can't recommend|cannot provide|unable to (?:recommend|provide)"
    r"|consult a doctor|no recommendations|cannot advise",
    re.IGNORECASE,
)
_DEMO_MARKER_PATTERN = re.compile(re.escape(DEMO_MARKER), re.IGNORECASE)


def is_refusal(value: Any) -> bool:
    """True when ``value`` is not a usable list of suggestions.

    Non-lists and empty lists count as refusals, as does any list whose
    joined text contains a refusal phrase.
    """
    if not isinstance(value, list) or not value:
        return True
    joined = " ".join(str(v) for v in value)
    return _REFUSAL_PATTERN.search(joined) is not None


def _chief_complaint(report: StructuredReport | Mapping[str, Any]) -> str:
    if isinstance(report, StructuredReport):
        return report.chief_complaint
    return str(report.get("chiefComplaint") or report.get("chief_complaint") or "")


def _specialty(session_details: Mapping[str, Any] | None) -> str:
    doctor = (session_details or {}).get("selectedDoctor") or {}
    if not isinstance(doctor, Mapping):
        return ""
    return str(doctor.get("specialist") or "")


def choose_fallback(
    report: StructuredReport | Mapping[str, Any],
    session_details: Mapping[str, Any] | None,
) -> DomainFallback:
    """Pick the fallback domain from the doctor's specialty and the chief complaint."""
    specialty = _specialty(session_details).lower()
    complaint = _chief_complaint(report).lower()
    for rule in FALLBACK_RULES:
        if rule.matches(specialty, complaint):
            return DOMAIN_FALLBACKS[rule.domain]
    return DOMAIN_FALLBACKS["general"]


def ensure_demo_label(meds: list[str]) -> list[str]:
    """Append the demo-only marker to entries that lack it."""
    return [m if _DEMO_MARKER_PATTERN.search(m) else f"{m} {DEMO_MARKER}" for m in meds]
