from __future__ import annotations

import math
import re
from typing import Any, Mapping

from ..models import Material, Project, ProjectStatus

PROGRESS_MIN = 0
PROGRESS_MAX = 100


class RecordValidationError(ValueError):
    def __init__(self, errors: list[str]):
        self.errors = [str(item) for item in (errors or []) if str(item).strip()]
        super().__init__("\n".join(self.errors) if self.errors else "Record validation failed.")


_CURRENCY_PREFIX_RE = re.compile(r"^(-?)\s*rp\.?\s*", re.IGNORECASE)
# Grouped with dots, optional decimal comma: "1.500.000" or "1.250,5".
_ID_GROUPED_RE = re.compile(r"^-?\d{1,3}(?:\.\d{3})+(?:,\d+)?$")


def _normalize_number_text(value: str) -> str:
    text = str(value).replace("\u00a0", " ").strip()
    text = _CURRENCY_PREFIX_RE.sub(r"\1", text).replace(" ", "")
    if _ID_GROUPED_RE.match(text):
        return text.replace(".", "").replace(",", ".")
    return text.replace(",", "")


def to_number(value) -> float:  # noqa: ANN001
    if value in (None, ""):
        return 0.0
    if isinstance(value, (bool, int, float)):
        number = float(value)
    else:
        try:
            number = float(_normalize_number_text(value))
        except Exception:  # noqa: BLE001
            return 0.0
    # nan and inf parse as floats but cannot be stored or rounded.
    return number if math.isfinite(number) else 0.0


def _text(form: Mapping[str, Any], key: str) -> str:
    return str(form.get(key) or "").strip()


def _apply_range_policy(
    values: dict[str, float],
    *,
    policy: str,
    upper_bounds: dict[str, float] | None = None,
) -> dict[str, float]:
    """Apply the configured numeric range policy.

    `off` leaves every value as submitted; `clamp` pulls values into range;
    `reject` raises with one message per offending field.
    """
    upper_bounds = upper_bounds or {}
    if policy == "off":
        return values

    adjusted = dict(values)
    errors: list[str] = []
    for field, value in values.items():
        upper = upper_bounds.get(field)
        if value < 0:
            if policy == "reject":
                errors.append(f"{field} must not be negative")
            adjusted[field] = 0.0 if policy == "clamp" else value
        elif upper is not None and value > upper:
            if policy == "reject":
                errors.append(f"{field} must not exceed {upper:g}")
            adjusted[field] = upper if policy == "clamp" else value
    if errors:
        raise RecordValidationError(errors)
    return adjusted


def project_from_form(
    form: Mapping[str, Any],
    *,
    project_id: str | None = None,
    policy: str = "off",
) -> Project:
    name = _text(form, "name")
    client = _text(form, "client")
    errors = []
    if not name:
        errors.append("name is required")
    if not client:
        errors.append("client is required")

    raw_status = form.get("status")
    status = ProjectStatus.PLANNING
    if raw_status not in (None, ""):
        try:
            status = ProjectStatus.parse(raw_status)
        except ValueError as exc:
            errors.append(str(exc))
    if errors:
        raise RecordValidationError(errors)

    numbers = _apply_range_policy(
        {
            "budget": to_number(form.get("budget")),
            "spent": to_number(form.get("spent")),
            "progress": float(round(to_number(form.get("progress")))),
        },
        policy=policy,
        upper_bounds={"progress": float(PROGRESS_MAX)},
    )

    return Project(
        id=project_id or _text(form, "id"),
        name=name,
        client=client,
        location=_text(form, "location"),
        budget=numbers["budget"],
        spent=numbers["spent"],
        start_date=_text(form, "start_date"),
        end_date=_text(form, "end_date"),
        progress=int(numbers["progress"]),
        status=status,
        manager=_text(form, "manager"),
    )


def material_from_form(
    form: Mapping[str, Any],
    *,
    material_id: str | None = None,
    policy: str = "off",
) -> Material:
    name = _text(form, "name")
    if not name:
        raise RecordValidationError(["name is required"])

    numbers = _apply_range_policy(
        {
            "quantity": to_number(form.get("quantity")),
            "unit_price": to_number(form.get("unit_price")),
        },
        policy=policy,
    )
    return Material(
        id=material_id or _text(form, "id"),
        name=name,
        category=_text(form, "category"),
        quantity=numbers["quantity"],
        unit=_text(form, "unit"),
        unit_price=numbers["unit_price"],
        last_updated=_text(form, "last_updated"),
    )
