from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from ..models import Material, Project, ProjectStatus
from .formatting import format_rupiah

LABEL_MAX_CHARS = 15
LABEL_ELLIPSIS = "..."

STATUS_COLORS = {
    ProjectStatus.ONGOING: "#3b82f6",
    ProjectStatus.COMPLETED: "#10b981",
    ProjectStatus.PLANNING: "#f59e0b",
    ProjectStatus.ON_HOLD: "#ef4444",
}


@dataclass(frozen=True)
class DashboardTotals:
    total_budget: float
    total_spent: float
    active_count: int
    completed_count: int
    pending_count: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BudgetSeriesPoint:
    label: str
    budget: float
    spent: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class StatusCount:
    status: ProjectStatus
    count: int
    color: str

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status.value, "count": self.count, "color": self.color}


def truncate_label(name: str, max_chars: int = LABEL_MAX_CHARS) -> str:
    text = str(name or "")
    if len(text) > max_chars:
        return text[:max_chars] + LABEL_ELLIPSIS
    return text


def count_by_status(projects: Iterable[Project]) -> dict[ProjectStatus, int]:
    counts = {status: 0 for status in ProjectStatus}
    for project in projects:
        counts[project.status] += 1
    return counts


def compute_totals(projects: Iterable[Project]) -> DashboardTotals:
    items = list(projects)
    counts = count_by_status(items)
    return DashboardTotals(
        total_budget=sum((project.budget for project in items), 0.0),
        total_spent=sum((project.spent for project in items), 0.0),
        active_count=counts[ProjectStatus.ONGOING],
        completed_count=counts[ProjectStatus.COMPLETED],
        pending_count=counts[ProjectStatus.PLANNING],
    )


def compute_budget_series(projects: Iterable[Project]) -> list[BudgetSeriesPoint]:
    return [
        BudgetSeriesPoint(label=truncate_label(project.name), budget=project.budget, spent=project.spent)
        for project in projects
    ]


def compute_status_distribution(projects: Iterable[Project]) -> list[StatusCount]:
    counts = count_by_status(projects)
    return [
        StatusCount(status=status, count=counts[status], color=STATUS_COLORS[status])
        for status in ProjectStatus
    ]


def compute_dashboard(projects: Iterable[Project]) -> dict[str, Any]:
    items = list(projects)
    totals = compute_totals(items)
    series = compute_budget_series(items)
    return {
        "totals": totals.to_dict(),
        "cards": {
            "total_budget": format_rupiah(totals.total_budget),
            "total_spent": format_rupiah(totals.total_spent),
            "active_count": str(totals.active_count),
            "pending_count": str(totals.pending_count),
        },
        "budget_series": [point.to_dict() for point in series],
        "status_distribution": [entry.to_dict() for entry in compute_status_distribution(items)],
        "total_projects": len(items),
    }


def compute_inventory_summary(materials: Iterable[Material]) -> dict[str, Any]:
    cards = []
    total_value = 0.0
    for material in materials:
        stock_value = material.quantity * material.unit_price
        total_value += stock_value
        cards.append(
            {
                **material.to_dict(),
                "unit_price_display": format_rupiah(material.unit_price),
                "stock_value": stock_value,
                "stock_value_display": format_rupiah(stock_value),
            }
        )
    return {
        "items": cards,
        "item_count": len(cards),
        "total_stock_value": total_value,
        "total_stock_value_display": format_rupiah(total_value),
    }
