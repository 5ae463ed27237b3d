from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


def _enum_key(value: str) -> str:
    return re.sub(r"[\s_\-]+", "", (value or "").strip().lower())


class ProjectStatus(str, Enum):
    """Project lifecycle status. Declaration order is the chart order."""

    PLANNING = "Planning"
    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"

    @classmethod
    def parse(cls, value: Any) -> "ProjectStatus":
        if isinstance(value, cls):
            return value
        key = _enum_key(str(value or ""))
        for member in cls:
            if key in {_enum_key(member.value), _enum_key(member.name)}:
                return member
        if key in _LEGACY_STATUS_LABELS:
            return _LEGACY_STATUS_LABELS[key]
        raise ValueError(f"Unsupported status: {value}")


# Labels used by the Indonesian dashboard this service replaced.
_LEGACY_STATUS_LABELS = {
    "perencanaan": ProjectStatus.PLANNING,
    "sedangberjalan": ProjectStatus.ONGOING,
    "selesai": ProjectStatus.COMPLETED,
    "tertunda": ProjectStatus.ON_HOLD,
}


class ViewState(str, Enum):
    DASHBOARD = "DASHBOARD"
    PROJECTS = "PROJECTS"
    INVENTORY = "INVENTORY"
    ADVISORY_PANEL = "ADVISORY_PANEL"

    @classmethod
    def parse(cls, value: Any) -> "ViewState":
        if isinstance(value, cls):
            return value
        key = _enum_key(str(value or ""))
        if key in {"aiinsights", "advisory", "advisor"}:
            return cls.ADVISORY_PANEL
        for member in cls:
            if key == _enum_key(member.value):
                return member
        raise ValueError(f"Unsupported view: {value}")


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    client: str
    location: str = ""
    budget: float = 0.0
    spent: float = 0.0
    start_date: str = ""
    end_date: str = ""
    progress: int = 0
    status: ProjectStatus = ProjectStatus.PLANNING
    manager: str = ""

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["status"] = self.status.value
        return payload


@dataclass(frozen=True)
class Material:
    id: str
    name: str
    category: str = ""
    quantity: float = 0.0
    unit: str = ""
    unit_price: float = 0.0
    last_updated: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
