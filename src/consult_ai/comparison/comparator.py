"""Report comparator: embedding similarity with a deterministic lexical fallback."""

from __future__ import annotations

import asyncio
import logging

from consult_ai.comparison import lexical
from consult_ai.comparison.text import flatten, split_sentences
from consult_ai.comparison.vectors import cosine
from consult_ai.core.config import ComparisonConfig
from consult_ai.exceptions import UpstreamProviderError, ValidationError
from consult_ai.models import ComparisonResult, SentenceMatch, StructuredReport
from consult_ai.prompts import get_prompt
from consult_ai.providers.embeddings import EmbeddingClient
from consult_ai.providers.llm import LLMClient

log = logging.getLogger(__name__)

FALLBACK_SUMMARY = "Embedding provider unavailable. Using simple local similarity."


class ReportComparator:
    """Compares a stored AI report against a doctor-authored report.

    The comparison works in two tiers:
    1. **Embedding**: cosine similarity of whole-report vectors, plus each
       doctor sentence ranked against the AI vector, plus an LLM summary
    2. **Lexical**: token-set Jaccard for the same outputs, used whenever
       any step of tier 1 fails

    Once the doctor text passes the length precondition, ``compare`` never
    raises because of the embedding provider.
    """

    def __init__(
        self,
        embeddings: EmbeddingClient,
        llm: LLMClient | None = None,
        config: ComparisonConfig | None = None,
    ) -> None:
        self._embeddings = embeddings
        self._llm = llm
        self._config = config or ComparisonConfig()

    async def compare(self, ai_report: StructuredReport, doctor_text: str) -> ComparisonResult:
        """Score ``doctor_text`` against ``ai_report``.

        Raises:
            ValidationError: If the doctor text is shorter than the configured
                minimum after trimming. No provider is called in that case.
        """
        doctor_text = (doctor_text or "").strip()
        if len(doctor_text) < self._config.min_doctor_text_chars:
            raise ValidationError("doctor text too short")

        ai_text = flatten(ai_report)
        if not ai_text.strip():
            log.info("AI report has no comparable text; using lexical comparison")
            return self._lexical(ai_text, doctor_text)

        try:
            return await self._semantic(ai_text, doctor_text)
        except Exception as e:
            log.warning(
                "Embedding comparison failed, falling back to lexical similarity: %s",
                e,
                extra={"error_type": type(e).__name__},
            )
            return self._lexical(ai_text, doctor_text)

    async def _semantic(self, ai_text: str, doctor_text: str) -> ComparisonResult:
        ai_vecs, doc_vecs = await asyncio.gather(
            self._embeddings.embed([ai_text]),
            self._embeddings.embed([doctor_text]),
        )
        ai_vec = ai_vecs[0]
        overall = cosine(ai_vec, doc_vecs[0]) * 100

        sentences = split_sentences(doctor_text, self._config.max_sentences)
        sentence_vecs = await self._embeddings.embed(sentences)
        matches = [
            SentenceMatch(sentence=s, similarity=round(_clamp(cosine(ai_vec, v), 0.0, 1.0), 4))
            for s, v in zip(sentences, sentence_vecs)
        ]

        summary = await self._summarize(ai_text, doctor_text)

        return ComparisonResult(
            similarity=round(_clamp(overall, 0.0, 100.0), 2),
            matches=self._top(matches),
            summary=summary,
            ai_text=ai_text,
            mode="embedding",
        )

    def _lexical(self, ai_text: str, doctor_text: str) -> ComparisonResult:
        sentences = split_sentences(doctor_text, self._config.max_sentences)
        matches = [
            SentenceMatch(sentence=s, similarity=round(lexical.similarity(ai_text, s) / 100, 4))
            for s in sentences
        ]
        return ComparisonResult(
            similarity=round(lexical.similarity(ai_text, doctor_text), 2),
            matches=self._top(matches),
            summary=FALLBACK_SUMMARY,
            ai_text=ai_text,
            mode="lexical",
        )

    def _top(self, matches: list[SentenceMatch]) -> list[SentenceMatch]:
        ranked = sorted(matches, key=lambda m: m.similarity, reverse=True)
        return ranked[: self._config.top_matches]

    async def _summarize(self, ai_text: str, doctor_text: str) -> str:
        """Free-text contrast of the two reports; empty string on any failure."""
        if self._llm is None or not self._config.enable_summary:
            return ""
        prompt = get_prompt("report", "comparison", "COMPARISON_SUMMARY_PROMPT").format(
            ai_text=ai_text,
            doctor_text=doctor_text,
        )
        try:
            return await self._llm.complete(prompt, max_tokens=self._config.summary_max_tokens)
        except UpstreamProviderError as e:
            log.warning("Comparison summary unavailable: %s", e)
            return ""


def _clamp(value: float, low: float, high: float) -> float:
    # Cosine can be slightly negative, or exceed 1 from float error
    return max(low, min(high, value))
