from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path
from typing import List, Sequence

from ..config import settings
from ..core.report import build_report_excel_bytes, build_report_pdf_bytes, report_filename
from ..core.seed import demo_projects
from ..models import Project, ProjectStatus


def _filter_by_status(projects: Sequence[Project], statuses: Sequence[str]) -> List[Project]:
    wanted = set()
    for value in statuses:
        for token in str(value).split(","):
            token = token.strip()
            if token:
                wanted.add(ProjectStatus.parse(token))
    if not wanted:
        return list(projects)
    return [project for project in projects if project.status in wanted]


def export_reports(
    projects: Sequence[Project],
    output_dir: Path,
    *,
    formats: Sequence[str],
    title: str,
    filename: str,
    generated_at: datetime,
) -> List[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for fmt in formats:
        if fmt == "pdf":
            content = build_report_pdf_bytes(projects, title=title, generated_at=generated_at)
        else:
            content = build_report_excel_bytes(projects, title=title, generated_at=generated_at)
        path = output_dir / report_filename(filename, fmt)
        path.write_bytes(content)
        written.append(path)
    return written


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Export the project report from demo data.")
    parser.add_argument(
        "--format",
        choices=["pdf", "xlsx", "both"],
        default="both",
        help="Report format.",
    )
    parser.add_argument(
        "--output-dir",
        default=".",
        help="Directory the report files are written to.",
    )
    parser.add_argument(
        "--status",
        action="append",
        default=[],
        help="Only include projects with this status (repeatable or comma-separated).",
    )
    parser.add_argument(
        "--title",
        default=settings.report_title,
        help="Report title.",
    )

    args = parser.parse_args(argv)

    try:
        projects = _filter_by_status(demo_projects(), args.status)
    except ValueError as exc:
        print(f"[export_report] {exc}")
        return 2

    formats = ["pdf", "xlsx"] if args.format == "both" else [args.format]
    written = export_reports(
        projects,
        Path(args.output_dir),
        formats=formats,
        title=args.title,
        filename=settings.report_filename,
        generated_at=datetime.now(),
    )
    for path in written:
        print(f"[export_report] rows={len(projects)} -> {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
