from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from ..core.record_store import RecordNotFoundError
from ..state import AppState, get_state

router = APIRouter(prefix="/projects", tags=["projects"])


class ProjectPayload(BaseModel):
    name: str = Field(default="", max_length=180)
    client: str = Field(default="", max_length=180)
    location: str = Field(default="", max_length=180)
    # Numbers arrive as typed by the user; coercion happens in the form mapper.
    budget: Optional[Any] = 0
    spent: Optional[Any] = 0
    start_date: str = Field(default="", max_length=32)
    end_date: str = Field(default="", max_length=32)
    progress: Optional[Any] = 0
    status: Optional[str] = Field(default=None, max_length=32)
    manager: str = Field(default="", max_length=180)


def _rejected(state: AppState) -> HTTPException:
    detail = "\n".join(state.controller.last_rejection) or "Project data is incomplete."
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


@router.get("")
def list_projects(state: AppState = Depends(get_state)) -> list[dict[str, Any]]:
    return [project.to_dict() for project in state.store.list_projects()]


@router.get("/{project_id}")
def get_project(project_id: str, state: AppState = Depends(get_state)) -> dict[str, Any]:
    try:
        return state.store.get_project(project_id).to_dict()
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("", status_code=status.HTTP_201_CREATED)
def create_project(payload: ProjectPayload, state: AppState = Depends(get_state)) -> dict[str, Any]:
    project = state.controller.submit_project(payload.model_dump())
    if project is None:
        raise _rejected(state)
    return project.to_dict()


@router.put("/{project_id}")
def update_project(
    project_id: str,
    payload: ProjectPayload,
    state: AppState = Depends(get_state),
) -> dict[str, Any]:
    try:
        project = state.controller.submit_project(payload.model_dump(), project_id=project_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if project is None:
        raise _rejected(state)
    return project.to_dict()


@router.delete("/{project_id}")
def delete_project(
    project_id: str,
    confirm: bool = False,
    state: AppState = Depends(get_state),
) -> dict[str, Any]:
    if not confirm:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=state.controller.delete_prompt("project"))
    if not state.controller.delete_project(project_id, confirmed=True):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Project not found: {project_id}")
    return {"deleted": True, "id": project_id}
