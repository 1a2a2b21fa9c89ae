"""Extracts a JSON object from free-form LLM output."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from consult_ai.exceptions import JSONParseError

log = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def first_balanced_object(content: str) -> str | None:
    """Return the first balanced ``{...}`` substring, ignoring braces inside strings."""
    idx = content.find("{")
    if idx == -1:
        return None
    depth = 0
    in_string = False
    escape = False
    for i in range(idx, len(content)):
        ch = content[i]
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return content[idx : i + 1]
    return None


def extract_json_object(content: str) -> dict[str, Any]:
    """Parse the first JSON object in ``content``, stripping code fences.

    Raises:
        JSONParseError: If no object can be found or it does not decode
            to a dict.
    """
    if not content or not content.strip():
        raise JSONParseError("Empty LLM response", raw_response=content or "")

    cleaned = _FENCE.sub("", content).strip()
    candidate = first_balanced_object(cleaned)
    if candidate is None:
        raise JSONParseError("No JSON object found in LLM response", raw_response=content)

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        # Trailing comma fix
        try:
            parsed = json.loads(re.sub(r",\s*([}\]])", r"\1", candidate))
        except json.JSONDecodeError as exc:
            log.debug(
                "JSON decode failed",
                extra={"response_length": len(content), "response_preview": content[:200]},
            )
            raise JSONParseError(f"Invalid JSON in LLM response: {exc}", raw_response=content) from exc

    if not isinstance(parsed, dict):
        raise JSONParseError("LLM response JSON is not an object", raw_response=content)
    return parsed


def extract_json_array(content: str) -> list[Any]:
    """Parse a JSON array from ``content`` (fences stripped).

    Raises:
        JSONParseError: If the content is not a JSON array.
    """
    cleaned = _FENCE.sub("", content or "").strip()
    start = cleaned.find("[")
    end = cleaned.rfind("]")
    if start == -1 or end <= start:
        raise JSONParseError("No JSON array found in LLM response", raw_response=content or "")
    try:
        parsed = json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as exc:
        raise JSONParseError(f"Invalid JSON in LLM response: {exc}", raw_response=content) from exc
    if not isinstance(parsed, list):
        raise JSONParseError("LLM response JSON is not an array", raw_response=content)
    return parsed
