from __future__ import annotations

from ..models import Material, Project, ProjectStatus


def demo_projects() -> list[Project]:
    return [
        Project(
            id="PRJ-0001",
            name="Sudirman Office Tower",
            client="PT Graha Nusantara",
            location="Jakarta Pusat",
            budget=125_000_000_000,
            spent=48_500_000_000,
            start_date="2025-02-01",
            end_date="2027-06-30",
            progress=38,
            status=ProjectStatus.ONGOING,
            manager="Budi Santoso",
        ),
        Project(
            id="PRJ-0002",
            name="Cikarang Logistics Warehouse",
            client="PT Logistik Prima",
            location="Bekasi",
            budget=32_000_000_000,
            spent=32_400_000_000,
            start_date="2024-05-15",
            end_date="2025-09-30",
            progress=100,
            status=ProjectStatus.COMPLETED,
            manager="Siti Rahmawati",
        ),
        Project(
            id="PRJ-0003",
            name="Kali Brantas Bridge",
            client="Dinas PUPR Jawa Timur",
            location="Kediri",
            budget=78_000_000_000,
            spent=5_200_000_000,
            start_date="2026-01-10",
            end_date="2027-12-20",
            progress=6,
            status=ProjectStatus.PLANNING,
            manager="Andi Wijaya",
        ),
        Project(
            id="PRJ-0004",
            name="Bandung Residential Cluster",
            client="PT Hunian Asri",
            location="Bandung",
            budget=54_000_000_000,
            spent=21_000_000_000,
            start_date="2025-04-01",
            end_date="2026-11-30",
            progress=41,
            status=ProjectStatus.ON_HOLD,
            manager="Dewi Lestari",
        ),
    ]


def demo_materials() -> list[Material]:
    return [
        Material(
            id="MAT-0001",
            name="Portland Cement 50kg",
            category="Structural",
            quantity=1_200,
            unit="bag",
            unit_price=72_000,
            last_updated="2026-10-01",
        ),
        Material(
            id="MAT-0002",
            name="Rebar D16",
            category="Steel",
            quantity=850,
            unit="rod",
            unit_price=145_000,
            last_updated="2026-10-03",
        ),
        Material(
            id="MAT-0003",
            name="Ready-mix Concrete K-350",
            category="Concrete",
            quantity=320,
            unit="m3",
            unit_price=1_150_000,
            last_updated="2026-09-28",
        ),
        Material(
            id="MAT-0004",
            name="Red Brick",
            category="Masonry",
            quantity=25_000,
            unit="pcs",
            unit_price=900,
            last_updated="2026-09-30",
        ),
    ]
