"""Async chat-completion client routed through LiteLLM.

Supports ``openrouter/``, ``openai/``, ``anthropic/`` and ``ollama/`` model
prefixes transparently. Provider responses are decoded through explicit
schemas; anything that does not fit is a ``ChatProviderError``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from consult_ai.core.config import LLMConfig
from consult_ai.exceptions import ChatProviderError

log = logging.getLogger(__name__)


class _ChatMessage(BaseModel):
    content: Optional[str] = None


class _ChatChoice(BaseModel):
    message: _ChatMessage
    finish_reason: Optional[str] = None


class ChatCompletionPayload(BaseModel):
    """The slice of a chat-completion response the application relies on."""

    choices: list[_ChatChoice] = Field(min_length=1)


class LLMClient:
    """Single-shot async chat completions. Transport failures are not retried."""

    def __init__(self, config: LLMConfig) -> None:
        self._config = config

    @property
    def model(self) -> str:
        return self._config.model

    def _provider_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"timeout": self._config.timeout}
        if self._config.api_key and self._config.api_key != "no-key":
            kwargs["api_key"] = self._config.api_key
        if self._config.base_url:
            kwargs["api_base"] = self._config.base_url
        return kwargs

    async def complete(
        self,
        prompt: str | None = None,
        *,
        system_prompt: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Single completion, returns the content string.

        Args:
            prompt: User message content. May be omitted when the whole
                instruction lives in ``system_prompt``.
            system_prompt: Optional system message.
            model: Override model ID (LiteLLM prefixes supported).
            temperature: Override temperature.
            max_tokens: Upper bound on generated tokens.

        Raises:
            ChatProviderError: On transport/HTTP failure, a malformed payload,
                or empty content.
        """
        from litellm import acompletion

        messages: list[dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        if prompt:
            messages.append({"role": "user", "content": prompt})
        if not messages:
            raise ValueError("complete() needs a prompt or a system_prompt")

        kwargs: dict[str, Any] = {
            "model": model or self._config.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self._config.temperature,
            **self._provider_kwargs(),
        }
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            log.warning("Chat completion failed: %s", e, extra={"model": kwargs["model"]})
            raise ChatProviderError(f"Chat completion failed: {e}") from e

        try:
            payload = ChatCompletionPayload.model_validate(response, from_attributes=True)
        except PydanticValidationError as e:
            raise ChatProviderError(f"Malformed chat completion payload: {e}") from e

        content = payload.choices[0].message.content or ""
        if not content.strip():
            raise ChatProviderError("Chat completion returned empty content")
        if payload.choices[0].finish_reason == "length":
            log.warning("Chat completion truncated at max_tokens", extra={"model": kwargs["model"]})
        return content
