"""Prompts for suggesting specialist agents from a symptom description."""

from __future__ import annotations

_PROMPT_DATA: dict[str, str] = {
    "SUGGEST_SYSTEM_PROMPT": """Here is a list of all available doctor agents:
{catalog}
Only suggest doctors from this list.""",
    "SUGGEST_USER_PROMPT": """User Notes/Symptoms: {notes}. Based on these notes and symptoms, \
suggest a list of matching doctors from the provided list. Return ONLY a JSON array of doctor \
objects, with no wrapping object and no markdown formatting.""",
}
