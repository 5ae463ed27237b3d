from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ..core.report import (
    PDF_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    build_report_excel_bytes,
    build_report_pdf_bytes,
    report_filename,
)
from ..state import AppState, get_state

router = APIRouter(prefix="/reports", tags=["reports"])


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/projects.pdf")
def export_projects_pdf(state: AppState = Depends(get_state)) -> Response:
    content = build_report_pdf_bytes(
        state.store.list_projects(),
        title=state.settings.report_title,
        generated_at=datetime.now(),
    )
    return _attachment(content, PDF_MEDIA_TYPE, report_filename(state.settings.report_filename, "pdf"))


@router.get("/projects.xlsx")
def export_projects_excel(state: AppState = Depends(get_state)) -> Response:
    content = build_report_excel_bytes(
        state.store.list_projects(),
        title=state.settings.report_title,
        generated_at=datetime.now(),
    )
    return _attachment(content, XLSX_MEDIA_TYPE, report_filename(state.settings.report_filename, "xlsx"))
