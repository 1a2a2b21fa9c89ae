"""Tests for ReportSynthesizer: retry, validation, repair, fallbacks, persistence."""

from __future__ import annotations

import json
from typing import Any

import pytest

from consult_ai.exceptions import ChatProviderError, PersistenceError, SynthesisSchemaError, ValidationError
from consult_ai.services.session_store import SessionStore
from consult_ai.synthesis.fallbacks import DOMAIN_FALLBACKS
from consult_ai.synthesis.pipeline import ReportSynthesizer, find_schema_problems, normalize_timestamp
from tests.fakes.fake_llm import FakeLLMClient
from tests.fakes.fake_persistence import FailingPersistenceBackend
from tests.fakes.reports import model_json, model_report

REPORT_KEYS = {
    "sessionId",
    "agent",
    "user",
    "timestamp",
    "chiefComplaint",
    "summary",
    "symptoms",
    "duration",
    "severity",
    "medicationsMentioned",
    "recommendations",
    "tests",
    "medicationsRecommended",
}


class TestHappyPath:
    @pytest.mark.asyncio
    async def test_all_keys_present_and_typed(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        client = FakeLLMClient(model_json())
        result = await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-42")

        payload = result.to_payload()
        assert REPORT_KEYS <= set(payload)
        assert payload["sessionId"] == "sess-42"
        assert payload["timestamp"] == "2024-05-01T10:00:00.000Z"
        assert payload["medicationsRecommended"] == ["Expectorant (demo only)"]
        assert payload["_meta"]["usedRetry"] is False
        assert payload["_meta"]["usedFallbackForTests"] is False
        assert len(client.calls) == 1

    @pytest.mark.asyncio
    async def test_prompt_carries_transcript_and_details(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        client = FakeLLMClient(model_json())
        await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-42")

        call = client.calls[0]
        assert "I have had a cough for three days." in call["prompt"]
        assert "Pulmonologist" in call["prompt"]
        assert "medicationsRecommended" in call["system_prompt"]
        assert call["temperature"] == 0.0

    @pytest.mark.asyncio
    async def test_fenced_output_parsed(self, transcript: list[dict[str, str]], session_details: dict[str, Any]) -> None:
        client = FakeLLMClient(f"```json\n{model_json()}\n```")
        result = await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-1")
        assert result.meta.used_retry is False

    @pytest.mark.asyncio
    async def test_blank_user_becomes_anonymous(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        client = FakeLLMClient(model_json(user=""))
        result = await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-1")
        assert result.report.user == "Anonymous"

    @pytest.mark.asyncio
    async def test_medication_comparison_uses_doctor_meds(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        client = FakeLLMClient(model_json(medicationsRecommended=["Paracetamol"]))
        result = await ReportSynthesizer(client).synthesize(
            transcript, session_details, "sess-1", doctor_medications=["paracetamol", "ORS"]
        )
        comparison = result.meta.medication_comparison
        assert comparison.intersection == ["paracetamol"]
        assert comparison.doctor_only == ["ors"]
        assert comparison.jaccard_score == 50.0

    @pytest.mark.asyncio
    async def test_doctor_meds_from_session_details(self, transcript: list[dict[str, str]]) -> None:
        details = {"selectedDoctor": {}, "doctorReportedMedications": ["Expectorant"]}
        result = await ReportSynthesizer(FakeLLMClient(model_json())).synthesize(transcript, details, "sess-1")
        assert result.meta.medication_comparison.jaccard_score == 100.0


class TestRetry:
    @pytest.mark.asyncio
    async def test_prose_then_valid_json(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        client = FakeLLMClient("Sure! Here's the report you asked for.", model_json())
        result = await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-1")

        assert result.meta.used_retry is True
        assert len(client.calls) == 2
        retry = client.calls[1]
        assert retry["prompt"] is None
        assert "Sure! Here's the report you asked for." in retry["system_prompt"]

    @pytest.mark.asyncio
    async def test_double_failure_raises(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        client = FakeLLMClient("not json", "still not json")
        with pytest.raises(SynthesisSchemaError, match="invalid JSON"):
            await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-1")
        assert len(client.calls) == 2

    @pytest.mark.asyncio
    async def test_transport_failure_not_retried(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        client = FakeLLMClient(ChatProviderError("timeout"))
        with pytest.raises(ChatProviderError):
            await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-1")
        assert len(client.calls) == 1


class TestFallbacks:
    @pytest.mark.asyncio
    async def test_missing_tests_and_meds_use_domain_fallback(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        report = model_report()
        del report["tests"]
        del report["medicationsRecommended"]
        client = FakeLLMClient(json.dumps(report))

        result = await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-1")

        respiratory = DOMAIN_FALLBACKS["respiratory"]
        assert result.report.tests == list(respiratory.tests)
        assert result.report.medications_recommended == list(respiratory.meds)
        assert result.meta.used_fallback_for_tests is True
        assert result.meta.used_fallback_for_medications is True

    @pytest.mark.asyncio
    async def test_refusal_replaced(self, transcript: list[dict[str, str]], session_details: dict[str, Any]) -> None:
        client = FakeLLMClient(
            model_json(
                tests=["I cannot recommend tests, please consult a doctor"],
                medicationsRecommended=["I am unable to provide medication advice"],
            )
        )
        result = await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-1")

        assert result.report.tests == ["Chest X-ray", "CBC"]
        assert all(m.endswith("(demo only)") for m in result.report.medications_recommended)
        assert result.meta.used_fallback_for_tests is True

    @pytest.mark.asyncio
    async def test_non_list_tests_repaired(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        client = FakeLLMClient(model_json(tests="Chest X-ray"))
        result = await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-1")
        assert result.report.tests == ["Chest X-ray", "CBC"]
        assert result.meta.used_fallback_for_tests is True

    @pytest.mark.asyncio
    async def test_blank_entries_count_as_refusal(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        client = FakeLLMClient(model_json(tests=["", "  "]))
        result = await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-1")
        assert result.meta.used_fallback_for_tests is True

    @pytest.mark.asyncio
    async def test_infection_fallback_tests(self, transcript: list[dict[str, str]]) -> None:
        details = {"selectedDoctor": {"specialist": "General Physician"}}
        client = FakeLLMClient(model_json(chiefComplaint="fever", tests=[]))
        result = await ReportSynthesizer(client).synthesize(transcript, details, "sess-1")
        assert result.report.tests == ["CBC", "CRP", "Blood culture (if indicated)"]


class TestValidation:
    @pytest.mark.asyncio
    async def test_missing_critical_field(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        report = model_report()
        del report["summary"]
        client = FakeLLMClient(json.dumps(report))
        with pytest.raises(SynthesisSchemaError) as exc_info:
            await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-1")
        assert exc_info.value.missing == ["summary"]

    @pytest.mark.asyncio
    async def test_mistyped_critical_field(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        client = FakeLLMClient(model_json(symptoms="cough"))
        with pytest.raises(SynthesisSchemaError) as exc_info:
            await ReportSynthesizer(client).synthesize(transcript, session_details, "sess-1")
        assert exc_info.value.missing == ["symptoms (should be array)"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("transcript_arg", "details", "session_id"),
        [([], {"a": 1}, "sess-1"), ([{"role": "user", "text": "hi"}], None, "sess-1"), ([{"role": "user"}], {}, "")],
    )
    async def test_missing_inputs(self, transcript_arg: list[Any], details: Any, session_id: str) -> None:
        client = FakeLLMClient(model_json())
        with pytest.raises(ValidationError, match="Missing required fields"):
            await ReportSynthesizer(client).synthesize(transcript_arg, details, session_id)
        assert client.calls == []


class TestPersistence:
    @pytest.mark.asyncio
    async def test_report_saved_with_conversation(
        self,
        transcript: list[dict[str, str]],
        session_details: dict[str, Any],
        session_store: SessionStore,
    ) -> None:
        session = session_store.create_session("cough", selected_doctor=session_details["selectedDoctor"])
        synthesizer = ReportSynthesizer(FakeLLMClient(model_json()), store=session_store)

        await synthesizer.synthesize(transcript, session_details, session.session_id)

        stored = session_store.read_session(session.session_id)
        assert stored is not None
        assert stored.report is not None
        assert stored.report.session_id == session.session_id
        assert stored.conversation is not None
        assert stored.conversation[1]["text"] == "I have had a cough for three days."

    @pytest.mark.asyncio
    async def test_write_failure_surfaces(
        self, transcript: list[dict[str, str]], session_details: dict[str, Any]
    ) -> None:
        store = SessionStore(FailingPersistenceBackend())
        synthesizer = ReportSynthesizer(FakeLLMClient(model_json()), store=store)
        with pytest.raises(PersistenceError):
            await synthesizer.synthesize(transcript, session_details, "sess-1")

    @pytest.mark.asyncio
    async def test_invalid_session_id_rejected_before_model_call(
        self,
        transcript: list[dict[str, str]],
        session_details: dict[str, Any],
        session_store: SessionStore,
    ) -> None:
        client = FakeLLMClient(model_json())
        with pytest.raises(ValidationError, match="Invalid session id"):
            await ReportSynthesizer(client, store=session_store).synthesize(
                transcript, session_details, "../etc/passwd"
            )
        assert client.calls == []


class TestHelpers:
    def test_find_schema_problems_on_non_object(self) -> None:
        assert find_schema_problems(["not", "a", "dict"]) == ["entire object"]

    def test_find_schema_problems_clean(self) -> None:
        assert find_schema_problems(model_report()) == []

    def test_normalize_timestamp_parses_offset(self) -> None:
        assert normalize_timestamp("2024-05-01T12:00:00+02:00") == "2024-05-01T10:00:00.000Z"

    def test_normalize_timestamp_short_fraction(self) -> None:
        assert normalize_timestamp("2024-05-01T10:00:00.5Z") == "2024-05-01T10:00:00.500Z"
        assert normalize_timestamp("2024-05-01T10:00:00.25") == "2024-05-01T10:00:00.250Z"

    def test_normalize_timestamp_falls_back_to_now(self) -> None:
        from datetime import datetime, timezone

        now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert normalize_timestamp("yesterday", now=now) == "2024-01-02T03:04:05.000Z"
        assert normalize_timestamp(None, now=now) == "2024-01-02T03:04:05.000Z"
