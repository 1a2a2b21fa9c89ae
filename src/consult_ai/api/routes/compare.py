"""Doctor-report comparison endpoint."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request

from consult_ai.comparison.comparator import ReportComparator
from consult_ai.exceptions import NotFoundError, ValidationError
from consult_ai.models import CamelModel, ComparisonResult, StructuredReport

router = APIRouter(tags=["comparison"])


class CompareRequest(CamelModel):
    """An AI report (inline, or by session id) and the doctor's report text."""

    ai_report: Optional[StructuredReport] = None
    session_id: Optional[str] = None
    doctor_report: str = ""


@router.post("/compare", response_model=ComparisonResult)
async def compare(request: CompareRequest, req: Request) -> ComparisonResult:
    """Score a doctor report against an AI consultation report.

    Falls back to lexical similarity when the embedding provider fails;
    ``mode`` in the response says which engine was used.
    """
    state = req.app.state
    ai_report = request.ai_report
    if ai_report is None:
        if not request.session_id:
            raise ValidationError("Missing required fields: aiReport or sessionId")
        record = state.session_store.read_session(request.session_id)
        if record is None or record.report is None:
            raise NotFoundError(f"No report for session {request.session_id}")
        ai_report = record.report

    comparator = ReportComparator(
        embeddings=state.embedding_client,
        llm=state.llm_client,
        config=state.settings.comparison,
    )
    return await comparator.compare(ai_report, request.doctor_report)
