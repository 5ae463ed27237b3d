from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Mapping

from ..models import Material, Project, ViewState
from .advisory import AdvisoryRequests
from .aggregation import compute_dashboard, compute_inventory_summary
from .formatting import format_percent, format_rupiah
from .forms import RecordValidationError, material_from_form, project_from_form
from .record_store import RecordStore

VIEW_TITLES = {
    ViewState.DASHBOARD: "Dashboard Overview",
    ViewState.PROJECTS: "Project Management",
    ViewState.INVENTORY: "Material Stock",
    ViewState.ADVISORY_PANEL: "AI Intelligence",
}

DELETE_PROMPTS = {
    "project": "Are you sure you want to delete this project record?",
    "material": "Are you sure you want to delete this material record?",
}

EMPTY_PROJECTS_MESSAGE = 'No project data yet. Click "Add Project" to get started.'


@dataclass(frozen=True)
class PendingDelete:
    kind: str
    record_id: str


class ViewController:
    """Active screen plus routing of user actions to the record store.

    The controller validates nothing itself; forms are mapped by
    `project_from_form` / `material_from_form`, and a refused submission
    leaves the store untouched.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        advisory_requests: AdvisoryRequests | None = None,
        range_policy: str = "off",
    ):
        self.store = store
        self.advisory_requests = advisory_requests
        self.range_policy = range_policy
        self.active_view = ViewState.DASHBOARD
        self.pending_delete: PendingDelete | None = None
        self._delete_lock = threading.Lock()
        self.advisory_request_id: str | None = None
        self.last_rejection: list[str] = []

    def set_active_view(self, view: ViewState | str) -> ViewState:
        target = ViewState.parse(view)
        if self.active_view == ViewState.ADVISORY_PANEL and target != ViewState.ADVISORY_PANEL:
            # The call keeps running; only our interest in its result is dropped.
            self.advisory_request_id = None
        self.active_view = target
        return target

    # Submissions

    def submit_project(self, form: Mapping[str, Any], project_id: str | None = None) -> Project | None:
        try:
            project = project_from_form(form, project_id=project_id, policy=self.range_policy)
        except RecordValidationError as exc:
            self.last_rejection = list(exc.errors)
            return None
        self.last_rejection = []
        if project_id:
            return self.store.update_project(project)
        return self.store.create_project(project)

    def submit_material(self, form: Mapping[str, Any], material_id: str | None = None) -> Material | None:
        try:
            material = material_from_form(form, material_id=material_id, policy=self.range_policy)
        except RecordValidationError as exc:
            self.last_rejection = list(exc.errors)
            return None
        self.last_rejection = []
        if material_id:
            return self.store.update_material(material)
        return self.store.create_material(material)

    # Deletion with confirmation

    def delete_prompt(self, kind: str = "project") -> str:
        if kind not in DELETE_PROMPTS:
            raise ValueError(f"Unsupported record kind: {kind}")
        return DELETE_PROMPTS[kind]

    def request_delete(self, record_id: str, kind: str = "project") -> str:
        prompt = self.delete_prompt(kind)
        with self._delete_lock:
            self.pending_delete = PendingDelete(kind=kind, record_id=record_id)
        return prompt

    def resolve_delete(self, confirmed: bool, record_id: str | None = None) -> bool:
        """Answer the open confirmation prompt.

        With `record_id`, the answer only applies when the prompt is still for
        that record; a prompt opened for another record in the meantime is
        left open and nothing is deleted.
        """
        with self._delete_lock:
            pending = self.pending_delete
            if pending is None or (record_id is not None and pending.record_id != record_id):
                return False
            self.pending_delete = None
        if not confirmed:
            return False
        return self._delete(pending.kind, pending.record_id)

    def delete_project(self, project_id: str, *, confirmed: bool) -> bool:
        if not confirmed:
            return False
        return self._delete("project", project_id)

    def delete_material(self, material_id: str, *, confirmed: bool) -> bool:
        if not confirmed:
            return False
        return self._delete("material", material_id)

    def _delete(self, kind: str, record_id: str) -> bool:
        if kind == "material":
            return self.store.delete_material(record_id)
        return self.store.delete_project(record_id)

    # Advisory panel

    def track_advisory(self, request_id: str) -> None:
        self.advisory_request_id = request_id

    # Rendering

    def render(self) -> dict[str, Any]:
        view = self.active_view
        payload: dict[str, Any] = {"view": view.value, "title": VIEW_TITLES[view]}
        if view == ViewState.DASHBOARD:
            payload.update(compute_dashboard(self.store.list_projects()))
        elif view == ViewState.PROJECTS:
            payload.update(render_project_rows(self.store.list_projects()))
        elif view == ViewState.INVENTORY:
            payload.update(compute_inventory_summary(self.store.list_materials()))
        else:
            payload.update(self._render_advisory())
        return payload

    def _render_advisory(self) -> dict[str, Any]:
        request = None
        if self.advisory_request_id and self.advisory_requests is not None:
            request = self.advisory_requests.get(self.advisory_request_id)
        return {
            "request": request.to_dict() if request is not None else None,
            "pending": bool(request is not None and not request.finished),
        }


def render_project_rows(projects: list[Project]) -> dict[str, Any]:
    rows = [
        {
            **project.to_dict(),
            "budget_display": format_rupiah(project.budget),
            "spent_display": format_rupiah(project.spent),
            "progress_display": format_percent(project.progress),
        }
        for project in projects
    ]
    return {
        "rows": rows,
        "empty_message": EMPTY_PROJECTS_MESSAGE if not rows else "",
    }
