"""Prompt management: registry and domain-specific templates."""

from __future__ import annotations

from consult_ai.prompts.registry import get_prompt, reset

__all__ = ["get_prompt", "reset"]
