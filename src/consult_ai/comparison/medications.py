"""Set comparison of AI-recommended and doctor-prescribed medication names."""

from __future__ import annotations

from typing import Iterable

from consult_ai.comparison.text import normalize_med_name
from consult_ai.models import MedicationComparison


def _distinct_normalized(names: Iterable[str] | None) -> list[str]:
    """Normalized, non-empty names in first-seen order without duplicates."""
    seen: dict[str, None] = {}
    for name in names or []:
        token = normalize_med_name(name)
        if token:
            seen.setdefault(token, None)
    return list(seen)


def compare_medications(
    ai_meds: Iterable[str] | None,
    doctor_meds: Iterable[str] | None,
) -> MedicationComparison:
    """Jaccard score (percent, 2 decimals) plus the three set partitions."""
    ai = _distinct_normalized(ai_meds)
    doctor = _distinct_normalized(doctor_meds)
    ai_set = set(ai)
    doctor_set = set(doctor)

    intersection = [m for m in ai if m in doctor_set]
    union_size = len(ai_set | doctor_set)
    jaccard = len(intersection) / union_size if union_size else 0.0

    return MedicationComparison(
        jaccard_score=round(jaccard * 100, 2),
        intersection=intersection,
        ai_only=[m for m in ai if m not in doctor_set],
        doctor_only=[m for m in doctor if m not in ai_set],
    )
