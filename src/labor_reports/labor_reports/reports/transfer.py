from __future__ import annotations

import logging
from datetime import date
from typing import List

from ..auth.model import Capability, SessionPrincipal
from ..auth.service import Authorizer
from ..catalogs.model import Crew
from ..catalogs.service import CatalogService
from ..core.exceptions import PreconditionError, ReportLockedError, ValidationError
from ..database.document_store import DocumentStore, begin
from ..database.unit_of_work import new_id
from ..labor.model import LaborEntry
from .model import DailyReport
from .repository import DailyReportRepository

logger = logging.getLogger(__name__)


class MoveEmployeeService:
    """Transfer one employee's participation between two crew reports of a date.

    Removal from the source, lazy creation of the destination report and the
    new blank entry land in a single commit.
    """

    def __init__(
        self,
        reports: DailyReportRepository,
        catalogs: CatalogService,
        store: DocumentStore,
        *,
        authorizer: Authorizer,
    ):
        self._reports = reports
        self._catalogs = catalogs
        self._store = store
        self._authorizer = authorizer

    def move_destinations(self, report_date: date, source_crew_id: str) -> List[Crew]:
        """Crews that may receive an employee: any other crew not yet notified that day."""

        catalog = self._catalogs.load()
        notified = {r.crew_id for r in self._reports.list_for_date(report_date) if r.is_notified}
        crews = [c for c in catalog.crews.values() if c.crew_id != source_crew_id and c.crew_id not in notified]
        return sorted(crews, key=lambda c: c.name)

    def move(
        self,
        principal: SessionPrincipal,
        report_date: date,
        source_crew_id: str,
        dest_crew_id: str,
        employee_id: str,
    ) -> DailyReport:
        self._authorizer.require(principal, Capability.DAILY_REPORTS_MOVE_EMPLOYEE)
        if not employee_id:
            raise ValidationError("Select an employee to move")
        if not dest_crew_id:
            raise ValidationError("Select a destination crew")
        if source_crew_id == dest_crew_id:
            raise ValidationError("Destination crew must differ from the source crew")

        catalog = self._catalogs.load()
        catalog.crew(source_crew_id)
        dest_crew = catalog.crew(dest_crew_id)
        name = catalog.employee_name(employee_id) or employee_id

        source = self._reports.find_for_crew(report_date, source_crew_id)
        if source is None:
            raise PreconditionError("Save the source report before moving employees")
        if source.is_notified:
            raise ReportLockedError("This report was notified and can no longer be modified")

        source_entries = [e for e in self._reports.list_entries(source.report_id) if e.employee_id == employee_id]
        if not source_entries:
            raise PreconditionError(f"{name} has no entry on the source report")

        dest = self._reports.find_for_crew(report_date, dest_crew_id)
        if dest is not None:
            if dest.is_notified:
                raise PreconditionError(f"The report of crew {dest_crew.name} was already notified")
            if any(e.employee_id == employee_id for e in self._reports.list_entries(dest.report_id)):
                raise PreconditionError(f"{name} is already on the report of crew {dest_crew.name}")

        uow = begin(self._store)
        for entry in source_entries:
            self._reports.delete_entry(uow, entry.entry_id)
        if dest is None:
            dest = DailyReport(
                report_id=new_id(),
                report_date=report_date,
                crew_id=dest_crew.crew_id,
                project_id=dest_crew.project_id,
                responsibles=dest_crew.role_snapshot(),
            )
            self._reports.add(uow, dest)
        self._reports.add_entry(
            uow,
            LaborEntry(entry_id="", daily_report_id=dest.report_id, employee_id=employee_id, manual=True),
        )
        uow.commit()

        logger.info(
            "Employee %s moved from crew %s to crew %s on %s", employee_id, source_crew_id, dest_crew_id, report_date
        )
        return dest
