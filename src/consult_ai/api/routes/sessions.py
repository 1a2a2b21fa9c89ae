"""Consultation session endpoints."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Query, Request
from pydantic import Field

from consult_ai.exceptions import NotFoundError
from consult_ai.models import CamelModel, SessionRecord

router = APIRouter(tags=["sessions"])


class CreateSessionRequest(CamelModel):
    """Symptoms noted by the user and the agent they picked."""

    notes: str = ""
    selected_doctor: dict[str, Any] = Field(default_factory=dict)
    created_by: str = "unknown"


@router.post("/sessions", response_model=SessionRecord, status_code=201)
async def create_session(request: CreateSessionRequest, req: Request) -> SessionRecord:
    return req.app.state.session_store.create_session(
        notes=request.notes,
        selected_doctor=request.selected_doctor,
        created_by=request.created_by,
    )


@router.get("/sessions", response_model=list[SessionRecord])
async def list_sessions(
    req: Request,
    created_by: Optional[str] = Query(default=None, alias="createdBy"),
) -> list[SessionRecord]:
    """Session history, newest first."""
    return req.app.state.session_store.list_sessions(created_by=created_by)


@router.get("/sessions/{session_id}", response_model=SessionRecord)
async def get_session(session_id: str, req: Request) -> SessionRecord:
    record = req.app.state.session_store.read_session(session_id)
    if record is None:
        raise NotFoundError(f"Session not found: {session_id}")
    return record
