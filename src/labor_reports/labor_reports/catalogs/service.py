from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Tuple

from ..core.constants import ALL_CREWS
from ..core.exceptions import ValidationError
from .model import Crew, Employee, EmployeePosition, HourType, Phase, Project
from .repository import CatalogRepository


@dataclass(frozen=True)
class LegalTypes:
    """Type ids a project allows on its daily reports."""

    absence: Tuple[HourType, ...]
    special: Tuple[HourType, ...]
    unproductive: Tuple[HourType, ...]

    @property
    def absence_ids(self) -> set[str]:
        return {t.type_id for t in self.absence}

    @property
    def special_ids(self) -> set[str]:
        return {t.type_id for t in self.special}

    @property
    def unproductive_ids(self) -> set[str]:
        return {t.type_id for t in self.unproductive}


@dataclass(frozen=True)
class CatalogSnapshot:
    crews: Dict[str, Crew]
    employees: Dict[str, Employee]
    positions: Dict[str, EmployeePosition]
    phases: Dict[str, Phase]
    projects: Dict[str, Project]
    absence_types: Dict[str, HourType]
    special_hour_types: Dict[str, HourType]
    unproductive_hour_types: Dict[str, HourType]

    def crew(self, crew_id: str) -> Crew:
        crew = self.crews.get(crew_id)
        if not crew:
            raise ValidationError("Crew does not exist")
        return crew

    def project(self, project_id: str) -> Project:
        project = self.projects.get(project_id)
        if not project:
            raise ValidationError("Project does not exist")
        return project

    def employee_name(self, employee_id: Optional[str]) -> Optional[str]:
        if not employee_id:
            return None
        emp = self.employees.get(employee_id)
        return emp.display_name if emp else None

    def phase_name(self, phase_id: Optional[str]) -> Optional[str]:
        phase = self.phases.get(phase_id) if phase_id else None
        return phase.name if phase else None

    def crews_for_project(self, project_id: str) -> List[Crew]:
        return [c for c in self.crews.values() if c.project_id == project_id]

    def projects_with_crews(self) -> List[Project]:
        ids = {c.project_id for c in self.crews.values()}
        return [p for p in self.projects.values() if p.project_id in ids]

    def crew_options(self, project_id: str) -> List[dict]:
        crews = self.crews_for_project(project_id)
        options = [{"value": c.crew_id, "label": c.name} for c in crews]
        if len(crews) > 1:
            options.insert(0, {"value": ALL_CREWS, "label": "All crews"})
        return options

    def active_phases(self, crew: Crew, day: date) -> List[Phase]:
        phases = [self.phases[pid] for pid in crew.active_phase_ids(day) if pid in self.phases]
        return sorted(phases, key=lambda p: p.name)

    def legal_types(self, project: Optional[Project]) -> LegalTypes:
        if not project:
            return LegalTypes((), (), ())

        def pick(ids, catalog: Dict[str, HourType]) -> Tuple[HourType, ...]:
            return tuple(catalog[i] for i in ids if i in catalog)

        return LegalTypes(
            absence=pick(project.absence_type_ids, self.absence_types),
            special=pick(project.special_hour_type_ids, self.special_hour_types),
            unproductive=pick(project.unproductive_hour_type_ids, self.unproductive_hour_types),
        )


class CatalogService:
    """Use case: fetch every lookup collection in bulk at screen entry."""

    def __init__(self, catalogs: CatalogRepository):
        self._catalogs = catalogs

    def load(self) -> CatalogSnapshot:
        return CatalogSnapshot(
            crews={c.crew_id: c for c in self._catalogs.list_crews()},
            employees={e.employee_id: e for e in self._catalogs.list_employees()},
            positions={p.position_id: p for p in self._catalogs.list_positions()},
            phases={p.phase_id: p for p in self._catalogs.list_phases()},
            projects={p.project_id: p for p in self._catalogs.list_projects()},
            absence_types={t.type_id: t for t in self._catalogs.list_absence_types()},
            special_hour_types={t.type_id: t for t in self._catalogs.list_special_hour_types()},
            unproductive_hour_types={t.type_id: t for t in self._catalogs.list_unproductive_hour_types()},
        )
