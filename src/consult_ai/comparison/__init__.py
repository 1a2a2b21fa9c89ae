"""Report comparison: lexical and embedding engines, medication lists."""

from __future__ import annotations

from consult_ai.comparison.comparator import FALLBACK_SUMMARY, ReportComparator
from consult_ai.comparison.medications import compare_medications
from consult_ai.comparison.text import flatten, normalize_med_name, split_sentences

__all__ = [
    "FALLBACK_SUMMARY",
    "ReportComparator",
    "compare_medications",
    "flatten",
    "normalize_med_name",
    "split_sentences",
]
