"""Report synthesis endpoint, called when a voice consultation ends."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Request

from consult_ai.models import CamelModel, TranscriptTurn
from consult_ai.synthesis.pipeline import ReportSynthesizer

router = APIRouter(tags=["synthesis"])


class SynthesizeRequest(CamelModel):
    """Transcript plus session context.

    Fields are optional here so that missing ones yield a 400 with a
    readable message from the synthesizer rather than a schema error.
    """

    message: Optional[list[TranscriptTurn]] = None
    session_details: Optional[dict[str, Any]] = None
    session_id: Optional[str] = None
    doctor_medications: Optional[list[str]] = None


@router.post("/synthesize")
async def synthesize(request: SynthesizeRequest, req: Request) -> dict[str, Any]:
    """Generate, repair, and persist the structured report for a session.

    Returns the report keys plus a ``_meta`` envelope with retry/fallback
    flags and the medication comparison.
    """
    state = req.app.state
    synthesizer = ReportSynthesizer(
        state.llm_client,
        config=state.settings.llm,
        store=state.session_store,
    )
    result = await synthesizer.synthesize(
        request.message or [],
        request.session_details,  # type: ignore[arg-type]
        request.session_id or "",
        doctor_medications=request.doctor_medications,
    )
    return result.to_payload()
