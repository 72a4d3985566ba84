from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable

from ..auth.model import Capability, SessionPrincipal
from ..auth.service import Authorizer
from ..catalogs.service import CatalogService
from ..core.exceptions import ValidationError
from ..reports.repository import DailyReportRepository

logger = logging.getLogger(__name__)

SEX_LABELS = {"M": "Male", "F": "Female", "X": "Non-binary"}


@dataclass(frozen=True)
class LaborStatistics:
    start: date
    end: date
    report_count: int = 0
    total_hours: float = 0.0
    productive_hours: float = 0.0
    unproductive_hours: float = 0.0
    special_hours: float = 0.0
    absence_count: int = 0
    personnel_count: int = 0
    person_days: int = 0
    absences_by_type: Dict[str, int] = field(default_factory=dict)
    absences_by_crew: Dict[str, int] = field(default_factory=dict)
    sex_distribution: Dict[str, int] = field(default_factory=dict)
    position_distribution: Dict[str, int] = field(default_factory=dict)

    @property
    def attendance_percentage(self) -> float:
        """Share of person-days (one labor entry each) without an absence."""

        if self.person_days <= 0:
            return 0.0
        return (self.person_days - self.absence_count) / self.person_days * 100

    def to_dict(self) -> dict:
        return {
            "start": self.start.strftime("%Y-%m-%d"),
            "end": self.end.strftime("%Y-%m-%d"),
            "report_count": self.report_count,
            "total_hours": round(self.total_hours, 2),
            "productive_hours": round(self.productive_hours, 2),
            "unproductive_hours": round(self.unproductive_hours, 2),
            "special_hours": round(self.special_hours, 2),
            "absence_count": self.absence_count,
            "personnel_count": self.personnel_count,
            "person_days": self.person_days,
            "attendance_percentage": round(self.attendance_percentage, 2),
            "absences_by_type": dict(self.absences_by_type),
            "absences_by_crew": dict(self.absences_by_crew),
            "sex_distribution": dict(self.sex_distribution),
            "position_distribution": dict(self.position_distribution),
        }


class StatisticsService:
    """Aggregates labor entries of the reports in a date window."""

    def __init__(self, reports: DailyReportRepository, catalogs: CatalogService, *, authorizer: Authorizer):
        self._reports = reports
        self._catalogs = catalogs
        self._authorizer = authorizer

    def build(
        self,
        principal: SessionPrincipal,
        start: date,
        end: date,
        *,
        project_ids: Iterable[str] = (),
        crew_ids: Iterable[str] = (),
    ) -> LaborStatistics:
        self._authorizer.require(principal, Capability.STATISTICS)
        if start is None or end is None:
            raise ValidationError("Select a date range")
        if end < start:
            raise ValidationError("End date cannot be before start date")

        projects = set(project_ids or ())
        crews = set(crew_ids or ())
        catalog = self._catalogs.load()

        reports = [
            r
            for r in self._reports.list_between(start, end)
            if (not projects or r.project_id in projects) and (not crews or r.crew_id in crews)
        ]

        productive = unproductive = special = 0.0
        by_type: Counter = Counter()
        by_crew: Counter = Counter()
        people: set[str] = set()
        person_days = 0

        for report in reports:
            crew = catalog.crews.get(report.crew_id)
            for entry in self._reports.list_entries(report.report_id):
                people.add(entry.employee_id)
                person_days += 1
                if entry.absence_reason:
                    absence = catalog.absence_types.get(entry.absence_reason)
                    by_type[absence.name if absence else "Unknown"] += 1
                    by_crew[crew.name if crew else "Unknown"] += 1
                    continue
                state = entry.to_state()
                productive += state.productive_total
                unproductive += state.unproductive_total
                special += state.special_total

        sexes: Counter = Counter()
        positions: Counter = Counter()
        for employee_id in people:
            emp = catalog.employees.get(employee_id)
            if emp is None:
                continue
            sexes[SEX_LABELS.get(emp.sex, "Non-binary")] += 1
            position = catalog.positions.get(emp.position_id) if emp.position_id else None
            positions[position.name if position else "No position"] += 1

        stats = LaborStatistics(
            start=start,
            end=end,
            report_count=len(reports),
            total_hours=productive + unproductive,
            productive_hours=productive,
            unproductive_hours=unproductive,
            special_hours=special,
            absence_count=sum(by_type.values()),
            personnel_count=len(people),
            person_days=person_days,
            absences_by_type=dict(by_type),
            absences_by_crew=dict(by_crew),
            sex_distribution=dict(sexes),
            position_distribution=dict(positions),
        )
        logger.debug("Statistics %s..%s over %d reports", start, end, len(reports))
        return stats
