from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable

from ..models import Material, Project

PROJECT_ID_PREFIX = "PRJ"
MATERIAL_ID_PREFIX = "MAT"


class RecordNotFoundError(KeyError):
    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")

    def __str__(self) -> str:
        return self.args[0]


@dataclass(frozen=True)
class StoreSnapshot:
    projects: tuple[Project, ...]
    materials: tuple[Material, ...]


class RecordStore:
    """In-memory owner of project and material records.

    Every mutation swaps or appends a whole record under the lock, so readers
    never observe a partially applied change. Identifiers are never reissued,
    even after the record that held them is deleted.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._projects: list[Project] = []
        self._materials: list[Material] = []
        self._issued_ids: set[str] = set()

    def _new_id(self, prefix: str) -> str:
        while True:
            candidate = f"{prefix}-{uuid.uuid4().hex[:8].upper()}"
            if candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate

    def load(self, projects: Iterable[Project], materials: Iterable[Material]) -> None:
        with self._lock:
            self._projects = list(projects)
            self._materials = list(materials)
            self._issued_ids.update(item.id for item in self._projects)
            self._issued_ids.update(item.id for item in self._materials)

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(projects=tuple(self._projects), materials=tuple(self._materials))

    # Projects

    def list_projects(self) -> list[Project]:
        with self._lock:
            return list(self._projects)

    def get_project(self, project_id: str) -> Project:
        with self._lock:
            for project in self._projects:
                if project.id == project_id:
                    return project
        raise RecordNotFoundError("Project", project_id)

    def create_project(self, project: Project) -> Project:
        with self._lock:
            created = replace(project, id=self._new_id(PROJECT_ID_PREFIX))
            self._projects = [*self._projects, created]
        return created

    def update_project(self, project: Project) -> Project:
        with self._lock:
            index = _index_of(self._projects, project.id)
            if index is None:
                raise RecordNotFoundError("Project", project.id)
            updated = list(self._projects)
            updated[index] = project
            self._projects = updated
        return project

    def delete_project(self, project_id: str) -> bool:
        with self._lock:
            if _index_of(self._projects, project_id) is None:
                return False
            self._projects = [item for item in self._projects if item.id != project_id]
        return True

    # Materials

    def list_materials(self) -> list[Material]:
        with self._lock:
            return list(self._materials)

    def get_material(self, material_id: str) -> Material:
        with self._lock:
            for material in self._materials:
                if material.id == material_id:
                    return material
        raise RecordNotFoundError("Material", material_id)

    def create_material(self, material: Material) -> Material:
        with self._lock:
            created = replace(
                material,
                id=self._new_id(MATERIAL_ID_PREFIX),
                last_updated=material.last_updated or date.today().isoformat(),
            )
            self._materials = [*self._materials, created]
        return created

    def update_material(self, material: Material) -> Material:
        stamped = replace(material, last_updated=material.last_updated or date.today().isoformat())
        with self._lock:
            index = _index_of(self._materials, material.id)
            if index is None:
                raise RecordNotFoundError("Material", material.id)
            updated = list(self._materials)
            updated[index] = stamped
            self._materials = updated
        return stamped

    def delete_material(self, material_id: str) -> bool:
        with self._lock:
            if _index_of(self._materials, material_id) is None:
                return False
            self._materials = [item for item in self._materials if item.id != material_id]
        return True


def _index_of(records, record_id: str) -> int | None:  # noqa: ANN001
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    return None
