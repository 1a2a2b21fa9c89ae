"""Async embedding client routed through LiteLLM."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from consult_ai.core.config import EmbeddingConfig, LLMConfig
from consult_ai.exceptions import EmbeddingProviderError

log = logging.getLogger(__name__)


class _EmbeddingItem(BaseModel):
    embedding: list[float] = Field(min_length=1)
    index: Optional[int] = None


class EmbeddingPayload(BaseModel):
    """The slice of an embedding response the application relies on."""

    data: list[_EmbeddingItem]


class EmbeddingClient:
    """Vectorizes text batches. One provider call per ``embed`` invocation.

    Vectors live in a provider-specific space: they are only ever compared
    within a single request and never persisted.
    """

    def __init__(self, config: EmbeddingConfig, llm_config: LLMConfig | None = None) -> None:
        self._config = config
        self._llm_config = llm_config

    @property
    def model(self) -> str:
        return self._config.model

    def _provider_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"timeout": self._config.timeout}
        api_key = self._config.api_key or (self._llm_config.api_key if self._llm_config else "")
        base_url = self._config.base_url or (self._llm_config.base_url if self._llm_config else "")
        if api_key and api_key != "no-key":
            kwargs["api_key"] = api_key
        if base_url:
            kwargs["api_base"] = base_url
        return kwargs

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed ``texts`` in one batch, returning vectors in input order.

        Raises:
            EmbeddingProviderError: On provider failure, a malformed payload,
                or a vector count that does not match the input.
        """
        from litellm import aembedding

        if not texts:
            return []

        try:
            response = await aembedding(
                model=self._config.model,
                input=list(texts),
                **self._provider_kwargs(),
            )
        except Exception as e:
            raise EmbeddingProviderError(f"Embedding request failed: {e}") from e

        try:
            payload = EmbeddingPayload.model_validate(response, from_attributes=True)
        except PydanticValidationError as e:
            raise EmbeddingProviderError(f"Malformed embedding payload: {e}") from e

        items = payload.data
        if all(item.index is not None for item in items):
            items = sorted(items, key=lambda item: item.index)  # type: ignore[arg-type, return-value]

        if len(items) != len(texts):
            raise EmbeddingProviderError(
                f"Embedding count mismatch: sent {len(texts)} texts, got {len(items)} vectors"
            )

        log.debug("Embedded %d texts", len(texts), extra={"model": self._config.model})
        return [item.embedding for item in items]
