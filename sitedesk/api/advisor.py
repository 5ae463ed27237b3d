from __future__ import annotations

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from pydantic import BaseModel, Field

from ..state import AppState, get_state

router = APIRouter(prefix="/advisor", tags=["advisor"])


class AdvisorAskPayload(BaseModel):
    # An empty question is still forwarded; the client answers or falls back.
    q: str = Field(default="", max_length=600)


@router.get("/status")
def get_advisor_status(state: AppState = Depends(get_state)) -> dict[str, Any]:
    return {
        "can_use_ai": bool(state.advisory_client.enabled),
        "model": state.settings.gemini_model,
    }


@router.post("/ask")
def ask_advisor(payload: AdvisorAskPayload, state: AppState = Depends(get_state)) -> dict[str, Any]:
    snapshot = state.store.snapshot()
    outcome = state.advisory_client.consult(snapshot.projects, snapshot.materials, payload.q)
    return {
        "answer": outcome.text,
        "ok": outcome.ok,
        "usage": outcome.usage,
    }


@router.post("/requests", status_code=status.HTTP_202_ACCEPTED)
def submit_advisor_request(
    payload: AdvisorAskPayload,
    background_tasks: BackgroundTasks,
    state: AppState = Depends(get_state),
) -> dict[str, Any]:
    request = state.advisory_requests.submit(state.store.snapshot(), payload.q)
    state.controller.track_advisory(request.id)
    background_tasks.add_task(state.advisory_requests.run, request.id, state.advisory_client)
    return request.to_dict()


@router.get("/requests/{request_id}")
def get_advisor_request(request_id: str, state: AppState = Depends(get_state)) -> dict[str, Any]:
    request = state.advisory_requests.get(request_id)
    if request is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Advisory request not found.")
    return request.to_dict()
