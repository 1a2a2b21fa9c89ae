"""Specialist catalog and suggestion endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

from consult_ai.doctors import DoctorAgent, DoctorSuggester, list_agents

router = APIRouter(tags=["doctors"])


class SuggestRequest(BaseModel):
    notes: str = ""


@router.get("/doctors", response_model=list[DoctorAgent])
async def doctors() -> list[DoctorAgent]:
    return list_agents()


@router.post("/suggest-doctors", response_model=list[DoctorAgent])
async def suggest_doctors(request: SuggestRequest, req: Request) -> list[DoctorAgent]:
    """Specialists from the catalog that match the user's symptom notes."""
    return await DoctorSuggester(req.app.state.llm_client).suggest(request.notes)
