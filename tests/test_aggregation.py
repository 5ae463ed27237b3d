import unittest

from sitedesk.core.aggregation import (
    STATUS_COLORS,
    compute_budget_series,
    compute_dashboard,
    compute_inventory_summary,
    compute_status_distribution,
    compute_totals,
    truncate_label,
)
from sitedesk.models import Material, Project, ProjectStatus


def _project(project_id, name, budget=0, spent=0, status=ProjectStatus.PLANNING):
    return Project(id=project_id, name=name, client="Client", budget=budget, spent=spent, status=status)


class AggregationTests(unittest.TestCase):
    def setUp(self):
        self.projects = [
            _project("PRJ-1", "Tower A", 1_000_000_000, 400_000_000, ProjectStatus.ONGOING),
            _project("PRJ-2", "Bridge B", 500_000_000, 500_000_000, ProjectStatus.COMPLETED),
        ]

    def test_compute_totals_for_mixed_statuses(self):
        totals = compute_totals(self.projects)
        self.assertEqual(totals.total_budget, 1_500_000_000)
        self.assertEqual(totals.total_spent, 900_000_000)
        self.assertEqual(totals.active_count, 1)
        self.assertEqual(totals.completed_count, 1)
        self.assertEqual(totals.pending_count, 0)

    def test_compute_totals_empty_list_is_all_zero(self):
        totals = compute_totals([])
        self.assertEqual(
            totals.to_dict(),
            {
                "total_budget": 0.0,
                "total_spent": 0.0,
                "active_count": 0,
                "completed_count": 0,
                "pending_count": 0,
            },
        )

    def test_compute_totals_does_not_filter_and_allows_overspend(self):
        projects = [
            _project("PRJ-1", "A", 100, 250, ProjectStatus.ON_HOLD),
            _project("PRJ-2", "B", 300, 0, ProjectStatus.PLANNING),
            _project("PRJ-3", "C", 50, 10, ProjectStatus.PLANNING),
        ]
        totals = compute_totals(projects)
        self.assertEqual(totals.total_budget, 450)
        self.assertEqual(totals.total_spent, 260)
        self.assertEqual(totals.pending_count, 2)
        self.assertEqual(totals.active_count, 0)

    def test_truncate_label(self):
        self.assertEqual(truncate_label("Short name"), "Short name")
        self.assertEqual(truncate_label("Exactly15Chars!"), "Exactly15Chars!")
        self.assertEqual(truncate_label("Sudirman Office Tower"), "Sudirman Office...")

    def test_budget_series_keeps_order_and_raw_values(self):
        projects = [
            _project("PRJ-9", "Cikarang Logistics Warehouse", 32, 30),
            _project("PRJ-1", "Tower A", 10, 5),
        ]
        series = compute_budget_series(projects)
        self.assertEqual([point.label for point in series], ["Cikarang Logist...", "Tower A"])
        self.assertEqual([(point.budget, point.spent) for point in series], [(32, 30), (10, 5)])

    def test_status_distribution_has_every_status_in_declared_order(self):
        distribution = compute_status_distribution(self.projects)
        self.assertEqual([entry.status for entry in distribution], list(ProjectStatus))
        self.assertEqual(
            [entry.count for entry in distribution],
            [0, 1, 1, 0],
        )
        self.assertEqual(distribution[0].color, STATUS_COLORS[ProjectStatus.PLANNING])

    def test_status_colors_are_keyed_by_status(self):
        colors = {entry.status: entry.color for entry in compute_status_distribution([])}
        self.assertEqual(colors[ProjectStatus.ONGOING], "#3b82f6")
        self.assertEqual(colors[ProjectStatus.COMPLETED], "#10b981")
        self.assertEqual(colors[ProjectStatus.PLANNING], "#f59e0b")
        self.assertEqual(colors[ProjectStatus.ON_HOLD], "#ef4444")

    def test_status_distribution_for_empty_list(self):
        distribution = compute_status_distribution([])
        self.assertEqual(len(distribution), len(ProjectStatus))
        self.assertTrue(all(entry.count == 0 for entry in distribution))

    def test_status_distribution_sum_equals_list_length(self):
        statuses = [ProjectStatus.ON_HOLD, ProjectStatus.ON_HOLD, ProjectStatus.ONGOING, ProjectStatus.PLANNING]
        projects = [_project(f"PRJ-{i}", f"P{i}", status=value) for i, value in enumerate(statuses)]
        distribution = compute_status_distribution(projects)
        self.assertEqual(sum(entry.count for entry in distribution), len(projects))
        self.assertEqual(distribution[-1].to_dict()["status"], "On Hold")
        self.assertEqual(distribution[-1].count, 2)

    def test_compute_dashboard_bundles_cards_and_charts(self):
        dashboard = compute_dashboard(self.projects)
        self.assertEqual(dashboard["total_projects"], 2)
        self.assertEqual(dashboard["cards"]["total_budget"], "Rp\u00a01.500.000.000")
        self.assertEqual(dashboard["cards"]["active_count"], "1")
        self.assertEqual(len(dashboard["budget_series"]), 2)
        self.assertEqual(len(dashboard["status_distribution"]), 4)

    def test_inventory_summary_values_stock(self):
        materials = [
            Material(id="MAT-1", name="Cement", quantity=10, unit="bag", unit_price=72_000),
            Material(id="MAT-2", name="Sand", quantity=2.5, unit="m3", unit_price=300_000),
        ]
        summary = compute_inventory_summary(materials)
        self.assertEqual(summary["item_count"], 2)
        self.assertEqual(summary["items"][0]["stock_value"], 720_000)
        self.assertEqual(summary["total_stock_value"], 1_470_000)
        self.assertEqual(summary["items"][1]["unit_price_display"], "Rp\u00a0300.000")


if __name__ == "__main__":
    unittest.main()
