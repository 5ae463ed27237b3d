import unittest

from fastapi import BackgroundTasks, HTTPException

from sitedesk.api.advisor import (
    AdvisorAskPayload,
    ask_advisor,
    get_advisor_request,
    get_advisor_status,
    submit_advisor_request,
)
from sitedesk.api.dashboard import ViewPayload, get_dashboard, get_view, set_view
from sitedesk.api.materials import MaterialPayload, create_material, delete_material, get_inventory
from sitedesk.api.projects import (
    ProjectPayload,
    create_project,
    delete_project,
    get_project,
    list_projects,
    update_project,
)
from sitedesk.api.reports import export_projects_excel, export_projects_pdf
from sitedesk.config import Settings
from sitedesk.core.advisory import ADVISORY_ERROR_TEXT, AdvisoryClient
from sitedesk.core.gemini_client import GeminiGenerateResult
from sitedesk.state import build_state


class _StubGenerator:
    def __init__(self, text="Watch the bridge budget.", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def generate(self, *, prompt, max_output_tokens=700):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return GeminiGenerateResult(text=self.text, usage={"totalTokenCount": 10})


def _state(generator=None, **settings_overrides):
    config = Settings(seed_demo_data=False, **settings_overrides)
    return build_state(config, advisory_client=AdvisoryClient(generator or _StubGenerator()))


class ProjectEndpointTests(unittest.TestCase):
    def setUp(self):
        self.state = _state()

    def _create(self, **fields):
        payload = {"name": "Tower A", "client": "PT Graha", "budget": "1,500", "progress": 40, "status": "Ongoing"}
        payload.update(fields)
        return create_project(ProjectPayload(**payload), state=self.state)

    def test_create_and_fetch(self):
        created = self._create()
        self.assertTrue(created["id"].startswith("PRJ-"))
        self.assertEqual(created["budget"], 1500.0)
        self.assertEqual(get_project(created["id"], state=self.state), created)
        self.assertEqual(list_projects(state=self.state), [created])

    def test_non_finite_numbers_do_not_reach_the_dashboard(self):
        created = self._create(budget="nan", spent="inf", progress="nan")
        self.assertEqual((created["budget"], created["spent"], created["progress"]), (0.0, 0.0, 0))

        totals = get_dashboard(state=self.state)["totals"]
        self.assertEqual(totals["total_budget"], 0.0)
        self.assertEqual(totals["total_spent"], 0.0)

    def test_invalid_project_returns_400(self):
        with self.assertRaises(HTTPException) as ctx:
            self._create(name="")
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertIn("name is required", ctx.exception.detail)
        self.assertEqual(list_projects(state=self.state), [])

    def test_update_unknown_returns_404(self):
        with self.assertRaises(HTTPException) as ctx:
            update_project("PRJ-MISSING", ProjectPayload(name="X", client="Y"), state=self.state)
        self.assertEqual(ctx.exception.status_code, 404)

    def test_update_keeps_position(self):
        first = self._create(name="First")
        second = self._create(name="Second")
        update_project(first["id"], ProjectPayload(name="First v2", client="PT Graha"), state=self.state)
        names = [item["name"] for item in list_projects(state=self.state)]
        self.assertEqual(names, ["First v2", "Second"])
        self.assertEqual(list_projects(state=self.state)[1]["id"], second["id"])

    def test_delete_requires_confirm_flag(self):
        created = self._create()
        with self.assertRaises(HTTPException) as ctx:
            delete_project(created["id"], confirm=False, state=self.state)
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(len(list_projects(state=self.state)), 1)

        self.assertEqual(
            delete_project(created["id"], confirm=True, state=self.state),
            {"deleted": True, "id": created["id"]},
        )
        with self.assertRaises(HTTPException) as ctx:
            delete_project(created["id"], confirm=True, state=self.state)
        self.assertEqual(ctx.exception.status_code, 404)

    def test_reject_policy_surfaces_as_400(self):
        state = _state(numeric_range_policy="reject")
        with self.assertRaises(HTTPException) as ctx:
            create_project(ProjectPayload(name="A", client="B", spent=-5), state=state)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertIn("spent must not be negative", ctx.exception.detail)


class MaterialEndpointTests(unittest.TestCase):
    def test_inventory_reflects_created_material(self):
        state = _state()
        created = create_material(
            MaterialPayload(name="Cement", quantity="10", unit="bag", unit_price=50_000),
            state=state,
        )
        self.assertTrue(created["id"].startswith("MAT-"))
        inventory = get_inventory(state=state)
        self.assertEqual(inventory["item_count"], 1)
        self.assertEqual(inventory["total_stock_value"], 500_000)

        with self.assertRaises(HTTPException) as ctx:
            delete_material(created["id"], confirm=False, state=state)
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertTrue(delete_material(created["id"], confirm=True, state=state)["deleted"])


class DashboardEndpointTests(unittest.TestCase):
    def test_dashboard_and_view_switching(self):
        state = _state()
        create_project(ProjectPayload(name="A", client="B", budget=100, spent=40, status="Planning"), state=state)

        dashboard = get_dashboard(state=state)
        self.assertEqual(dashboard["totals"]["pending_count"], 1)
        self.assertEqual(dashboard["total_projects"], 1)
        self.assertEqual(get_view(state=state)["view"], "DASHBOARD")

        rendered = set_view(ViewPayload(view="projects"), state=state)
        self.assertEqual(rendered["view"], "PROJECTS")
        self.assertEqual(len(rendered["rows"]), 1)

        with self.assertRaises(HTTPException) as ctx:
            set_view(ViewPayload(view="settings"), state=state)
        self.assertEqual(ctx.exception.status_code, 400)


class ReportEndpointTests(unittest.TestCase):
    def test_exports_are_attachments(self):
        state = _state(report_filename="site-report")
        create_project(ProjectPayload(name="A", client="B"), state=state)

        pdf = export_projects_pdf(state=state)
        self.assertEqual(pdf.media_type, "application/pdf")
        self.assertIn('filename="site-report.pdf"', pdf.headers["content-disposition"])
        self.assertTrue(pdf.body.startswith(b"%PDF"))

        xlsx = export_projects_excel(state=state)
        self.assertIn('filename="site-report.xlsx"', xlsx.headers["content-disposition"])
        self.assertTrue(xlsx.body.startswith(b"PK"))


class AdvisorEndpointTests(unittest.TestCase):
    def test_status_reports_configured_model(self):
        state = _state(gemini_model="gemini-test")
        self.assertEqual(get_advisor_status(state=state), {"can_use_ai": True, "model": "gemini-test"})

    def test_ask_returns_answer(self):
        generator = _StubGenerator()
        state = _state(generator)
        create_project(ProjectPayload(name="Bridge", client="Dinas"), state=state)

        response = ask_advisor(AdvisorAskPayload(q="Any risks?"), state=state)
        self.assertEqual(response["answer"], "Watch the bridge budget.")
        self.assertTrue(response["ok"])
        self.assertIn("Bridge", generator.prompts[0])

    def test_ask_falls_back_on_failure(self):
        state = _state(_StubGenerator(error=RuntimeError("boom")))
        response = ask_advisor(AdvisorAskPayload(q="Any risks?"), state=state)
        self.assertEqual(response["answer"], ADVISORY_ERROR_TEXT)
        self.assertFalse(response["ok"])

    def test_background_request_lifecycle(self):
        state = _state()
        tasks = BackgroundTasks()
        submitted = submit_advisor_request(AdvisorAskPayload(q="Summary?"), tasks, state=state)
        self.assertEqual(submitted["status"], "pending")
        self.assertEqual(state.controller.advisory_request_id, submitted["id"])
        self.assertEqual(len(tasks.tasks), 1)

        task = tasks.tasks[0]
        task.func(*task.args, **task.kwargs)

        finished = get_advisor_request(submitted["id"], state=state)
        self.assertEqual(finished["status"], "resolved")
        self.assertEqual(finished["text"], "Watch the bridge budget.")

        with self.assertRaises(HTTPException) as ctx:
            get_advisor_request("unknown", state=state)
        self.assertEqual(ctx.exception.status_code, 404)


class AppRoutesTests(unittest.TestCase):
    def test_root_and_health(self):
        from sitedesk.main import app, health_check, read_root

        paths = {route.path for route in app.routes}
        self.assertTrue({"/projects", "/inventory", "/reports/projects.pdf", "/advisor/ask"} <= paths)
        self.assertEqual(health_check(), {"status": "healthy"})
        self.assertIn("SiteDesk", read_root()["message"])


if __name__ == "__main__":
    unittest.main()
