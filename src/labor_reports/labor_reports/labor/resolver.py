"""Who belongs on a crew's report for a given date."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from ..catalogs.model import Crew, Phase, Project
from ..catalogs.service import CatalogSnapshot, LegalTypes
from ..core.enums import CrewDayStatus
from ..reports.model import DailyReport
from ..reports.repository import DailyReportRepository
from .model import LaborEntry


@dataclass(frozen=True)
class CrewDaySummary:
    crew_id: str
    crew_name: str
    status: CrewDayStatus
    report_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "crew_id": self.crew_id,
            "crew_name": self.crew_name,
            "status": self.status.value,
            "report_id": self.report_id,
        }


@dataclass(frozen=True)
class ResolvedPersonnel:
    crew: Crew
    project: Optional[Project]
    report: Optional[DailyReport]
    entries: Dict[str, LaborEntry]
    employee_ids: List[str]
    active_phases: List[Phase]
    legal: LegalTypes


def sort_by_last_name(catalog: CatalogSnapshot, employee_ids) -> List[str]:
    """Catalog employees by (last, first) name; unknown ids go last."""

    def key(emp_id: str):
        emp = catalog.employees.get(emp_id)
        if emp is None:
            return (1, "", "", emp_id)
        return (0, emp.last_name.lower(), emp.first_name.lower(), emp_id)

    return sorted(dict.fromkeys(employee_ids), key=key)


class PersonnelResolver:
    def __init__(self, reports: DailyReportRepository):
        self._reports = reports

    def day_overview(self, catalog: CatalogSnapshot, day: date, project_id: str) -> List[CrewDaySummary]:
        by_crew = {r.crew_id: r for r in self._reports.list_for_date(day)}
        out = []
        for crew in sorted(catalog.crews_for_project(project_id), key=lambda c: c.name):
            report = by_crew.get(crew.crew_id)
            if report is None:
                status = CrewDayStatus.NOT_STARTED
            elif report.is_notified:
                status = CrewDayStatus.NOTIFIED
            else:
                status = CrewDayStatus.PENDING
            out.append(CrewDaySummary(crew.crew_id, crew.name, status, report.report_id if report else None))
        return out

    def resolve(self, catalog: CatalogSnapshot, day: date, crew_id: str) -> ResolvedPersonnel:
        crew = catalog.crew(crew_id)
        report = self._reports.find_for_crew(day, crew.crew_id)

        entries: Dict[str, LaborEntry] = {}
        if report is not None:
            # Historical snapshot: whoever has an entry, regardless of current membership.
            for entry in self._reports.list_entries(report.report_id):
                entries[entry.employee_id] = entry
            employee_ids = list(entries)
            project = catalog.projects.get(report.project_id)
        else:
            employee_ids = list(crew.employee_ids)
            project = catalog.projects.get(crew.project_id)

        return ResolvedPersonnel(
            crew=crew,
            project=project,
            report=report,
            entries=entries,
            employee_ids=sort_by_last_name(catalog, employee_ids),
            active_phases=catalog.active_phases(crew, day),
            legal=catalog.legal_types(project),
        )
