"""Report synthesis: turns a consultation transcript into a ``StructuredReport``."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from consult_ai.comparison.medications import compare_medications
from consult_ai.core.config import LLMConfig
from consult_ai.exceptions import JSONParseError, PersistenceError, SynthesisSchemaError, ValidationError
from consult_ai.models import StructuredReport, SynthesisMeta, SynthesisResult
from consult_ai.prompts import get_prompt
from consult_ai.providers.json_parser import extract_json_object
from consult_ai.providers.llm import LLMClient
from consult_ai.services.session_store import SessionStore
from consult_ai.synthesis.fallbacks import choose_fallback, ensure_demo_label, is_refusal

log = logging.getLogger(__name__)

STRING_FIELDS: tuple[str, ...] = (
    "sessionId",
    "agent",
    "user",
    "timestamp",
    "chiefComplaint",
    "summary",
    "duration",
    "severity",
)
LIST_FIELDS: tuple[str, ...] = (
    "symptoms",
    "medicationsMentioned",
    "recommendations",
    "tests",
    "medicationsRecommended",
)
REPAIRABLE_FIELDS = frozenset({
    "tests",
    "medicationsRecommended",
    "tests (should be array)",
    "medicationsRecommended (should be array)",
})
MAX_FALLBACK_ITEMS = 3


def find_schema_problems(obj: Any) -> list[str]:
    """List missing or mistyped report keys, e.g. ``"tests (should be array)"``."""
    if not isinstance(obj, dict):
        return ["entire object"]

    problems: list[str] = []
    for key in STRING_FIELDS:
        if key not in obj:
            problems.append(key)
        elif not isinstance(obj[key], str):
            problems.append(f"{key} (should be string)")
    for key in LIST_FIELDS:
        if key not in obj:
            problems.append(key)
        elif not isinstance(obj[key], list):
            problems.append(f"{key} (should be array)")
    return problems


_DATETIME = TypeAdapter(datetime)


def normalize_timestamp(value: Any, now: datetime | None = None) -> str:
    """ISO-8601 UTC form of ``value``, or of ``now`` when it does not parse."""
    fallback = now or datetime.now(timezone.utc)
    parsed: datetime | None = None
    if isinstance(value, str) and value.strip():
        try:
            parsed = _DATETIME.validate_python(value.strip())
        except PydanticValidationError:
            parsed = None
    if parsed is None:
        parsed = fallback
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None and str(v).strip()]


def _turns(transcript: Sequence[Any]) -> list[dict[str, Any]]:
    return [t.model_dump() if isinstance(t, BaseModel) else dict(t) for t in transcript]


class ReportSynthesizer:
    """Drives the chat model to produce a validated ``StructuredReport``.

    The pipeline works in three phases:
    1. **Generate**: strict JSON-only prompt; one corrective retry, with a
       different prompt, when the output does not parse
    2. **Validate**: all 13 keys with the right types; only ``tests`` and
       ``medicationsRecommended`` problems are repairable
    3. **Repair**: timestamp normalization, refusal fallback, demo labels,
       list coercion, medication comparison

    Transport failures from the chat model are not retried and propagate as
    ``ChatProviderError``. When a ``SessionStore`` is attached, the report is
    persisted and storage failures surface as ``PersistenceError``.
    """

    def __init__(
        self,
        client: LLMClient,
        config: LLMConfig | None = None,
        store: SessionStore | None = None,
    ) -> None:
        self._client = client
        self._config = config or LLMConfig()
        self._store = store

    async def synthesize(
        self,
        transcript: Sequence[Any],
        session_details: Mapping[str, Any],
        session_id: str,
        doctor_medications: Sequence[str] | None = None,
    ) -> SynthesisResult:
        """Produce a structured report for one finished consultation.

        Args:
            transcript: Conversation turns, each with ``role`` and ``text``.
            session_details: Agent/session info (``selectedDoctor`` etc.).
            session_id: Id of the consultation the report belongs to.
            doctor_medications: Optional doctor-prescribed medication names
                to compare against the recommended ones.

        Raises:
            ValidationError: Missing transcript, session details, or id.
            SynthesisSchemaError: Unparseable output after the retry, or
                required keys missing.
            ChatProviderError: The chat model could not be reached.
            PersistenceError: The session store rejected the write.
        """
        if not transcript or not session_id or session_details is None:
            raise ValidationError("Missing required fields: message, sessionId, sessionDetails")
        if self._store is not None:
            self._store.validate_session_id(session_id)

        conversation = _turns(transcript)
        user_prompt = get_prompt("report", "synthesis", "REPORT_USER_PROMPT").format(
            session_details=json.dumps(dict(session_details), ensure_ascii=False, default=str),
            conversation=json.dumps(conversation, ensure_ascii=False, default=str),
        )

        raw = await self._client.complete(
            user_prompt,
            system_prompt=get_prompt("report", "synthesis", "REPORT_SYSTEM_PROMPT"),
            temperature=0.0,
            max_tokens=self._config.report_max_tokens,
        )
        parsed, used_retry = await self._parse_with_retry(raw)

        problems = find_schema_problems(parsed)
        if problems:
            log.warning("Report validation problems", extra={"problems": problems})
            if not all(p in REPAIRABLE_FIELDS for p in problems):
                raise SynthesisSchemaError("missing required fields", problems)

        report, meta = self._repair(parsed, session_details, session_id, doctor_medications)
        meta.used_retry = used_retry

        if self._store is not None:
            self._persist(session_id, report, conversation)

        log.info(
            "Report synthesized",
            extra={
                "session_id": session_id,
                "used_retry": meta.used_retry,
                "used_fallback_for_tests": meta.used_fallback_for_tests,
                "used_fallback_for_medications": meta.used_fallback_for_medications,
            },
        )
        return SynthesisResult(report=report, meta=meta)

    async def _parse_with_retry(self, raw: str) -> tuple[dict[str, Any], bool]:
        """Parse the model output, re-asking once with the corrective prompt."""
        try:
            return extract_json_object(raw), False
        except JSONParseError:
            log.warning("Initial report parse failed; retrying", extra={"response_preview": raw[:200]})

        retry_prompt = get_prompt("report", "synthesis", "REPORT_RETRY_PROMPT").format(
            previous_response=raw,
        )
        retry_raw = await self._client.complete(
            system_prompt=retry_prompt,
            temperature=0.0,
            max_tokens=self._config.retry_max_tokens,
        )
        try:
            return extract_json_object(retry_raw), True
        except JSONParseError as e:
            log.error("Retry parse failed", extra={"response_preview": retry_raw[:200]})
            raise SynthesisSchemaError("invalid JSON from model") from e

    def _repair(
        self,
        parsed: dict[str, Any],
        session_details: Mapping[str, Any],
        session_id: str,
        doctor_medications: Sequence[str] | None,
    ) -> tuple[StructuredReport, SynthesisMeta]:
        data = dict(parsed)
        data["sessionId"] = session_id
        if not str(data.get("user") or "").strip():
            data["user"] = "Anonymous"
        data["timestamp"] = normalize_timestamp(data.get("timestamp"))

        # Non-lists become [] here, which is_refusal then treats as a refusal
        for key in LIST_FIELDS:
            data[key] = _as_str_list(data.get(key))

        fallback = choose_fallback(data, session_details)
        used_fallback_for_tests = is_refusal(data["tests"])
        if used_fallback_for_tests:
            data["tests"] = list(fallback.tests[:MAX_FALLBACK_ITEMS])
        used_fallback_for_meds = is_refusal(data["medicationsRecommended"])
        if used_fallback_for_meds:
            data["medicationsRecommended"] = list(fallback.meds[:MAX_FALLBACK_ITEMS])
        data["medicationsRecommended"] = ensure_demo_label(data["medicationsRecommended"])

        report = StructuredReport.model_validate({k: data[k] for k in (*STRING_FIELDS, *LIST_FIELDS)})

        doctor_meds = doctor_medications
        if doctor_meds is None:
            reported = session_details.get("doctorReportedMedications")
            doctor_meds = reported if isinstance(reported, list) else []

        meta = SynthesisMeta(
            used_fallback_for_tests=used_fallback_for_tests,
            used_fallback_for_medications=used_fallback_for_meds,
            medication_comparison=compare_medications(report.medications_recommended, doctor_meds),
        )
        return report, meta

    def _persist(self, session_id: str, report: StructuredReport, conversation: list[dict[str, Any]]) -> None:
        assert self._store is not None
        try:
            self._store.update_report(session_id, report, conversation)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to persist report for session {session_id}") from e
