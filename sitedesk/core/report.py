from __future__ import annotations

import html
from collections.abc import Iterable
from datetime import datetime
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..models import Project
from .formatting import format_long_date, format_percent, format_rupiah

REPORT_HEADERS = ["Project Name", "Client", "Location", "Budget", "Spent", "Progress", "Status"]
PRINTED_ON_LABEL = "Printed on"

PDF_MEDIA_TYPE = "application/pdf"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Slate / blue palette of the dashboard.
TITLE_COLOR = colors.HexColor("#0F172A")
SUBTITLE_COLOR = colors.HexColor("#64748B")
HEADER_BG = colors.HexColor("#3B82F6")
ALT_ROW_BG = colors.HexColor("#F8FAFC")
GRID_COLOR = colors.HexColor("#CBD5E1")
BODY_COLOR = colors.HexColor("#111827")

BOLD_COLUMNS = (0, 6)
AMOUNT_COLUMNS = (3, 4)

PDF_PAGE_SIZE = landscape(A4)
PDF_MARGIN = 14 * mm
# Share of the frame width per column, in REPORT_HEADERS order.
PDF_COLUMN_SHARES = (0.22, 0.16, 0.14, 0.15, 0.15, 0.08, 0.10)

SHEET_TITLE = "Projects"
XLSX_HEADER_ROW = 4
XLSX_DATA_START_ROW = 5
XLSX_COLUMN_WIDTHS = [30, 24, 22, 20, 20, 12, 14]
XLSX_TITLE_FONT = Font(name="Helvetica", bold=True, size=14, color="0F172A")
XLSX_SUBTITLE_FONT = Font(name="Helvetica", size=10, color="64748B")
XLSX_HEADER_FILL = PatternFill(fill_type="solid", fgColor="3B82F6")
XLSX_HEADER_FONT = Font(name="Helvetica", bold=True, size=10, color="FFFFFF")
XLSX_ALT_ROW_FILL = PatternFill(fill_type="solid", fgColor="F8FAFC")
XLSX_BODY_FONT = Font(name="Helvetica", size=9, color="111827")
XLSX_BOLD_BODY_FONT = Font(name="Helvetica", bold=True, size=9, color="111827")
XLSX_CURRENCY_FORMAT = '"Rp" #,##0'


def report_filename(base: str, extension: str) -> str:
    stem = (base or "").strip() or "project-report"
    return f"{stem}.{extension.lstrip('.')}"


def printed_on_line(generated_at: datetime) -> str:
    return f"{PRINTED_ON_LABEL}: {format_long_date(generated_at)}"


def build_report_row(project: Project) -> list[str]:
    return [
        project.name,
        project.client,
        project.location,
        format_rupiah(project.budget),
        format_rupiah(project.spent),
        format_percent(project.progress),
        project.status.value,
    ]


def build_report_table(projects: Iterable[Project]) -> list[list[str]]:
    """Header row followed by one row per project, in the given order."""
    return [list(REPORT_HEADERS), *(build_report_row(project) for project in projects)]


def _cell_markup(value: str) -> str:
    return html.escape(value).replace("\u00a0", "&nbsp;")


def pdf_column_widths(total_width: float) -> list[float]:
    return [total_width * share for share in PDF_COLUMN_SHARES]


def _pdf_cell_styles() -> dict[str, ParagraphStyle]:
    body = ParagraphStyle("ReportCell", fontName="Helvetica", fontSize=8, leading=10, textColor=BODY_COLOR)
    return {
        "header": ParagraphStyle("ReportHeaderCell", parent=body, fontName="Helvetica-Bold", textColor=colors.white),
        "body": body,
        "bold": ParagraphStyle("ReportBoldCell", parent=body, fontName="Helvetica-Bold"),
        "amount": ParagraphStyle("ReportAmountCell", parent=body, alignment=TA_RIGHT),
    }


def _pdf_table_style(row_count: int) -> TableStyle:
    commands = [
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BG),
        ("GRID", (0, 0), (-1, -1), 0.25, GRID_COLOR),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("PADDING", (0, 0), (-1, -1), 3),
    ]
    if row_count > 1:
        commands.append(("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, ALT_ROW_BG]))
    return TableStyle(commands)


def build_pdf_table(rows: list[list[str]], width: float) -> Table:
    """Wrap every cell in a Paragraph so long text breaks inside its column."""
    styles = _pdf_cell_styles()
    header, body = rows[0], rows[1:]
    cells = [[Paragraph(_cell_markup(value), styles["header"]) for value in header]]
    for row in body:
        line = []
        for column, value in enumerate(row):
            if column in AMOUNT_COLUMNS:
                style = styles["amount"]
            elif column in BOLD_COLUMNS:
                style = styles["bold"]
            else:
                style = styles["body"]
            line.append(Paragraph(_cell_markup(value), style))
        cells.append(line)

    table = Table(cells, colWidths=pdf_column_widths(width), repeatRows=1)
    table.setStyle(_pdf_table_style(len(cells)))
    return table


def build_report_story(
    projects: Iterable[Project],
    *,
    title: str,
    generated_at: datetime,
    frame_width: float,
) -> list:
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("ReportTitle", parent=styles["Title"], fontSize=18, alignment=0, textColor=TITLE_COLOR)
    meta_style = ParagraphStyle("ReportMeta", parent=styles["Normal"], fontSize=10, textColor=SUBTITLE_COLOR)
    return [
        Paragraph(html.escape(title), title_style),
        Paragraph(html.escape(printed_on_line(generated_at)), meta_style),
        Spacer(1, 8 * mm),
        build_pdf_table(build_report_table(projects), frame_width),
    ]


def build_report_pdf_bytes(
    projects: Iterable[Project],
    *,
    title: str,
    generated_at: datetime,
) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=PDF_PAGE_SIZE,
        leftMargin=PDF_MARGIN,
        rightMargin=PDF_MARGIN,
        topMargin=PDF_MARGIN,
        bottomMargin=PDF_MARGIN,
        title=title,
    )
    doc.build(build_report_story(projects, title=title, generated_at=generated_at, frame_width=doc.width))
    return buffer.getvalue()


def build_report_excel_bytes(
    projects: Iterable[Project],
    *,
    title: str,
    generated_at: datetime,
) -> bytes:
    items = list(projects)
    max_col = len(REPORT_HEADERS)

    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=max_col)
    title_cell = ws.cell(row=1, column=1, value=title)
    title_cell.font = XLSX_TITLE_FONT
    title_cell.alignment = Alignment(horizontal="left", vertical="center")
    ws.row_dimensions[1].height = 24

    ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=max_col)
    meta_cell = ws.cell(row=2, column=1, value=printed_on_line(generated_at))
    meta_cell.font = XLSX_SUBTITLE_FONT

    for index, header in enumerate(REPORT_HEADERS, start=1):
        cell = ws.cell(row=XLSX_HEADER_ROW, column=index, value=header)
        cell.fill = XLSX_HEADER_FILL
        cell.font = XLSX_HEADER_FONT
        cell.alignment = Alignment(horizontal="center", vertical="center")
    ws.row_dimensions[XLSX_HEADER_ROW].height = 20

    for offset, project in enumerate(items):
        row_idx = XLSX_DATA_START_ROW + offset
        values = [
            project.name,
            project.client,
            project.location,
            project.budget,
            project.spent,
            format_percent(project.progress),
            project.status.value,
        ]
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row_idx, column=col, value=value)
            cell.font = XLSX_BOLD_BODY_FONT if (col - 1) in BOLD_COLUMNS else XLSX_BODY_FONT
            if (col - 1) in AMOUNT_COLUMNS:
                cell.number_format = XLSX_CURRENCY_FORMAT
                cell.alignment = Alignment(horizontal="right", vertical="center")
            else:
                cell.alignment = Alignment(horizontal="left", vertical="center")
            if offset % 2 == 1:
                cell.fill = XLSX_ALT_ROW_FILL

    row_end = XLSX_DATA_START_ROW + len(items) - 1 if items else XLSX_HEADER_ROW
    ws.freeze_panes = f"A{XLSX_DATA_START_ROW}"
    ws.auto_filter.ref = f"A{XLSX_HEADER_ROW}:{get_column_letter(max_col)}{row_end}"
    for index, width in enumerate(XLSX_COLUMN_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(index)].width = width

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
