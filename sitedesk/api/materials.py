from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from ..core.aggregation import compute_inventory_summary
from ..core.record_store import RecordNotFoundError
from ..state import AppState, get_state

router = APIRouter(tags=["materials"])


class MaterialPayload(BaseModel):
    name: str = Field(default="", max_length=180)
    category: str = Field(default="", max_length=120)
    quantity: Optional[Any] = 0
    unit: str = Field(default="", max_length=32)
    unit_price: Optional[Any] = 0
    last_updated: str = Field(default="", max_length=32)


def _rejected(state: AppState) -> HTTPException:
    detail = "\n".join(state.controller.last_rejection) or "Material data is incomplete."
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


@router.get("/inventory")
def get_inventory(state: AppState = Depends(get_state)) -> dict[str, Any]:
    return compute_inventory_summary(state.store.list_materials())


@router.get("/materials")
def list_materials(state: AppState = Depends(get_state)) -> list[dict[str, Any]]:
    return [material.to_dict() for material in state.store.list_materials()]


@router.get("/materials/{material_id}")
def get_material(material_id: str, state: AppState = Depends(get_state)) -> dict[str, Any]:
    try:
        return state.store.get_material(material_id).to_dict()
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("/materials", status_code=status.HTTP_201_CREATED)
def create_material(payload: MaterialPayload, state: AppState = Depends(get_state)) -> dict[str, Any]:
    material = state.controller.submit_material(payload.model_dump())
    if material is None:
        raise _rejected(state)
    return material.to_dict()


@router.put("/materials/{material_id}")
def update_material(
    material_id: str,
    payload: MaterialPayload,
    state: AppState = Depends(get_state),
) -> dict[str, Any]:
    try:
        material = state.controller.submit_material(payload.model_dump(), material_id=material_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if material is None:
        raise _rejected(state)
    return material.to_dict()


@router.delete("/materials/{material_id}")
def delete_material(
    material_id: str,
    confirm: bool = False,
    state: AppState = Depends(get_state),
) -> dict[str, Any]:
    if not confirm:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=state.controller.delete_prompt("material"))
    if not state.controller.delete_material(material_id, confirmed=True):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Material not found: {material_id}")
    return {"deleted": True, "id": material_id}
