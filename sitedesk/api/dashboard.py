from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from ..core.aggregation import compute_dashboard
from ..state import AppState, get_state

router = APIRouter(tags=["dashboard"])


class ViewPayload(BaseModel):
    view: str = Field(..., min_length=1, max_length=32)


@router.get("/dashboard")
def get_dashboard(state: AppState = Depends(get_state)) -> dict[str, Any]:
    return compute_dashboard(state.store.list_projects())


@router.get("/view")
def get_view(state: AppState = Depends(get_state)) -> dict[str, Any]:
    return state.controller.render()


@router.put("/view")
def set_view(payload: ViewPayload, state: AppState = Depends(get_state)) -> dict[str, Any]:
    try:
        state.controller.set_active_view(payload.view)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return state.controller.render()
