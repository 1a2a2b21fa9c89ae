"""Prompt for the free-text contrast of an AI report and a doctor report."""

from __future__ import annotations

_PROMPT_DATA: dict[str, str] = {
    "COMPARISON_SUMMARY_PROMPT": """Compare these reports. List 3 similarities and 3 differences:

AI Report:
{ai_text}

Doctor Report:
{doctor_text}""",
}
