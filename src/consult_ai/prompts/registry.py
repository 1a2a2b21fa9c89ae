"""Prompt registry backed by template modules on disk.

Usage::

    prompt = get_prompt("report", "synthesis", "REPORT_SYSTEM_PROMPT")

Module path convention: ``consult_ai.prompts.templates.{domain}.{category}``.
Each module exposes a ``_PROMPT_DATA: dict[str, str]`` mapping constant
names to template strings.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

logger = logging.getLogger(__name__)

_modules: dict[tuple[str, str], Any] = {}


def get_prompt(domain: str, category: str, name: str) -> str:
    """Look up a prompt template by domain, category, and name.

    Raises:
        KeyError: If the module or the named prompt does not exist.
    """
    key = (domain, category)
    if key not in _modules:
        module_path = f"consult_ai.prompts.templates.{domain}.{category}"
        try:
            _modules[key] = importlib.import_module(module_path)
        except ModuleNotFoundError as exc:
            raise KeyError(f"Prompt module not found: {module_path}") from exc
        logger.debug("Loaded prompt module %s", module_path)

    data: dict[str, str] | None = getattr(_modules[key], "_PROMPT_DATA", None)
    if data is not None and name in data:
        return data[name]

    raise KeyError(f"Prompt {name!r} not found in {domain}/{category}")


def reset() -> None:
    """Drop cached template modules (for testing)."""
    _modules.clear()
