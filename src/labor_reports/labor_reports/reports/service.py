from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from ..absences.linker import PermissionAbsenceLinker
from ..approvals.gate import ApprovalGate
from ..auth.model import Capability, SessionPrincipal
from ..auth.service import Authorizer
from ..catalogs.model import Crew, Employee, Phase, Project
from ..catalogs.service import CatalogService, CatalogSnapshot, LegalTypes
from ..common.datetime_utils import now_local
from ..core.constants import ALL_CREWS
from ..core.enums import ApprovalRole, ReportStatus
from ..core.exceptions import PreconditionError, ReportLockedError, ValidationError
from ..database.document_store import DocumentStore, begin
from ..database.unit_of_work import UnitOfWork, new_id
from ..labor.model import EntryState, LaborEntry
from ..labor.resolver import CrewDaySummary, PersonnelResolver, sort_by_last_name
from ..labor.sheet import LaborSheet
from ..labor.validator import HourAllocationValidator
from .guard import NotifyGuard
from .model import DailyReport
from .repository import DailyReportRepository

logger = logging.getLogger(__name__)

APPROVAL_CAPABILITIES = {
    ApprovalRole.CONTROL: Capability.DAILY_REPORTS_APPROVE_CONTROL,
    ApprovalRole.PROJECT_MANAGER: Capability.DAILY_REPORTS_APPROVE_PM,
}


@dataclass
class ReportWorkspace:
    """Working set selected by (date, project, crew).

    For the "all crews" selection only ``overview`` is filled in.
    """

    report_date: date
    project_id: str
    catalog: CatalogSnapshot
    crew: Optional[Crew] = None
    project: Optional[Project] = None
    report: Optional[DailyReport] = None
    active_phases: List[Phase] = field(default_factory=list)
    legal: Optional[LegalTypes] = None
    sheet: Optional[LaborSheet] = None
    overview: List[CrewDaySummary] = field(default_factory=list)

    @property
    def is_overview(self) -> bool:
        return self.crew is None

    @property
    def is_locked(self) -> bool:
        return bool(self.report and self.report.is_notified)

    @property
    def active_phase_ids(self) -> set[str]:
        return {p.phase_id for p in self.active_phases}

    @property
    def personnel(self) -> List[str]:
        if self.sheet is None:
            return []
        return sort_by_last_name(self.catalog, self.sheet.employee_ids)

    @property
    def eligible_for_manual(self) -> List[Employee]:
        if self.sheet is None or self.is_locked:
            return []
        candidates = [
            e for e in self.catalog.employees.values() if e.eligible_for_manual_add and e.employee_id not in self.sheet
        ]
        return sorted(candidates, key=lambda e: (e.last_name.lower(), e.first_name.lower()))


class DailyReportService:
    """Use case: enter, save, notify, approve and delete daily labor reports."""

    def __init__(
        self,
        reports: DailyReportRepository,
        catalogs: CatalogService,
        store: DocumentStore,
        *,
        resolver: PersonnelResolver,
        linker_factory: Callable[[], PermissionAbsenceLinker],
        validator: HourAllocationValidator,
        authorizer: Authorizer,
        gate: ApprovalGate,
        guard: NotifyGuard | None = None,
    ):
        self._reports = reports
        self._catalogs = catalogs
        self._store = store
        self._resolver = resolver
        self._linker_factory = linker_factory
        self._validator = validator
        self._authorizer = authorizer
        self._gate = gate
        self._guard = guard or NotifyGuard()

    # -------- Reads --------
    def open(self, principal: SessionPrincipal, report_date: date, project_id: str, crew_id: str) -> ReportWorkspace:
        self._authorizer.require(principal, Capability.DAILY_REPORTS_VIEW)
        if not project_id:
            raise ValidationError("Select a project")
        if not crew_id:
            raise ValidationError("Select a crew")

        catalog = self._catalogs.load()
        catalog.project(project_id)

        if crew_id == ALL_CREWS:
            return ReportWorkspace(
                report_date=report_date,
                project_id=project_id,
                catalog=catalog,
                overview=self._resolver.day_overview(catalog, report_date, project_id),
            )

        crew = catalog.crew(crew_id)
        if crew.project_id != project_id:
            raise ValidationError(f"Crew {crew.name} does not belong to the selected project")
        return self._workspace(catalog, report_date, crew)

    def _workspace(self, catalog: CatalogSnapshot, report_date: date, crew: Crew) -> ReportWorkspace:
        resolved = self._resolver.resolve(catalog, report_date, crew.crew_id)
        suggestions = self._linker_factory().suggested_absences(report_date)

        rows: Dict[str, EntryState] = {}
        for employee_id in resolved.employee_ids:
            entry = resolved.entries.get(employee_id)
            if entry is not None:
                rows[employee_id] = entry.to_state()
                continue
            suggested = suggestions.get(employee_id)
            if suggested and suggested in resolved.legal.absence_ids:
                rows[employee_id] = EntryState(absence_reason=suggested)
            else:
                rows[employee_id] = EntryState()

        sheet = LaborSheet(
            legal=resolved.legal,
            validator=self._validator,
            rows=rows,
            name_of=catalog.employee_name,
            locked=bool(resolved.report and resolved.report.is_notified),
            active_phase_ids=[p.phase_id for p in resolved.active_phases],
            phase_name_of=catalog.phase_name,
        )
        return ReportWorkspace(
            report_date=report_date,
            project_id=resolved.project.project_id if resolved.project else crew.project_id,
            catalog=catalog,
            crew=crew,
            project=resolved.project,
            report=resolved.report,
            active_phases=resolved.active_phases,
            legal=resolved.legal,
            sheet=sheet,
        )

    def approval_views(self, principal: SessionPrincipal, workspace: ReportWorkspace) -> Dict[str, dict]:
        report = workspace.report
        if report is None or not report.is_notified:
            return {}
        return {
            role.value: self._gate.view(
                principal,
                report.approval_slot(role, workspace.project),
                capability,
                name_of=workspace.catalog.employee_name,
            ).to_dict()
            for role, capability in APPROVAL_CAPABILITIES.items()
        }

    # -------- Personnel edits (in memory until the next save) --------
    def add_manual_employee(self, principal: SessionPrincipal, workspace: ReportWorkspace, employee_id: str) -> EntryState:
        self._authorizer.require(principal, Capability.DAILY_REPORTS_ADD_MANUAL)
        sheet = self._require_sheet(workspace)
        employee = workspace.catalog.employees.get(employee_id)
        if not employee:
            raise ValidationError("Employee does not exist")
        if not employee.eligible_for_manual_add:
            raise ValidationError(f"{employee.display_name} is not an active daily-paid employee")
        return sheet.add_employee(employee_id, manual=True)

    def remove_manual_employee(self, principal: SessionPrincipal, workspace: ReportWorkspace, employee_id: str) -> None:
        self._authorizer.require(principal, Capability.DAILY_REPORTS_ADD_MANUAL)
        self._require_sheet(workspace).remove_employee(employee_id)

    @staticmethod
    def _require_sheet(workspace: ReportWorkspace) -> LaborSheet:
        if workspace.sheet is None:
            raise ValidationError("Select a single crew to edit its report")
        return workspace.sheet

    # -------- Writes --------
    def _current_report(self, workspace: ReportWorkspace) -> Optional[DailyReport]:
        """Re-read the stored header; a report notified elsewhere must not be overwritten."""

        current = self._reports.find_for_crew(workspace.report_date, workspace.crew.crew_id)
        if current is not None and current.is_notified:
            raise ReportLockedError("This report was notified and can no longer be modified")
        return current

    def _stage_sheet(self, uow: UnitOfWork, workspace: ReportWorkspace, current: Optional[DailyReport]) -> DailyReport:
        crew = workspace.crew
        if current is None:
            report = DailyReport(
                report_id=new_id(),
                report_date=workspace.report_date,
                crew_id=crew.crew_id,
                project_id=crew.project_id,
                responsibles=crew.role_snapshot(),
            )
            self._reports.add(uow, report)
        else:
            report = current
            for entry in self._reports.list_entries(report.report_id):
                self._reports.delete_entry(uow, entry.entry_id)

        for employee_id, state in workspace.sheet.rows.items():
            self._reports.add_entry(
                uow,
                LaborEntry(
                    entry_id="",
                    daily_report_id=report.report_id,
                    employee_id=employee_id,
                    productive_hours=dict(state.productive_hours),
                    unproductive_hours=dict(state.unproductive_hours),
                    special_hours=dict(state.special_hours),
                    absence_reason=state.absence_reason,
                    manual=state.manual,
                ),
            )
        return report

    def save(self, principal: SessionPrincipal, workspace: ReportWorkspace) -> DailyReport:
        self._authorizer.require(principal, Capability.DAILY_REPORTS_SAVE)
        sheet = self._require_sheet(workspace)
        current = self._current_report(workspace)
        sheet.check()

        uow = begin(self._store)
        report = self._stage_sheet(uow, workspace, current)
        uow.commit()

        workspace.report = report
        logger.info(
            "Daily report %s saved (crew=%s date=%s rows=%d)",
            report.report_id,
            report.crew_id,
            report.report_date,
            len(sheet),
        )
        return report

    def notify(
        self,
        principal: SessionPrincipal,
        workspace: ReportWorkspace,
        *,
        now: datetime | None = None,
    ) -> DailyReport:
        self._authorizer.require(principal, Capability.DAILY_REPORTS_NOTIFY)
        sheet = self._require_sheet(workspace)
        current = self._current_report(workspace)
        sheet.check()
        self._guard.enforce(sheet, workspace.active_phase_ids)

        uow = begin(self._store)
        report = self._stage_sheet(uow, workspace, current)
        notified = replace(report, status=ReportStatus.NOTIFIED, notified_at=now or now_local())
        self._reports.mark_notified(uow, notified)
        uow.commit()

        workspace.report = notified
        workspace.sheet = LaborSheet(
            legal=workspace.legal,
            validator=self._validator,
            rows=sheet.rows,
            name_of=workspace.catalog.employee_name,
            locked=True,
            active_phase_ids=workspace.active_phase_ids,
            phase_name_of=workspace.catalog.phase_name,
        )
        logger.info("Daily report %s notified (crew=%s date=%s)", notified.report_id, notified.crew_id, notified.report_date)
        return notified

    def notify_report(self, principal: SessionPrincipal, report_id: str, *, now: datetime | None = None) -> DailyReport:
        """Notify a stored report using its persisted entries."""

        report = self._get(report_id)
        catalog = self._catalogs.load()
        workspace = self._workspace(catalog, report.report_date, catalog.crew(report.crew_id))
        return self.notify(principal, workspace, now=now)

    def delete(self, principal: SessionPrincipal, report_id: str) -> None:
        self._authorizer.require(principal, Capability.DAILY_REPORTS_DELETE)
        report = self._get(report_id)
        if report.is_notified:
            raise ReportLockedError("A notified report cannot be deleted")

        uow = begin(self._store)
        for entry in self._reports.list_entries(report.report_id):
            self._reports.delete_entry(uow, entry.entry_id)
        self._reports.delete(uow, report.report_id)
        uow.commit()
        logger.info("Daily report %s deleted", report.report_id)

    def approve(
        self,
        principal: SessionPrincipal,
        report_id: str,
        role: ApprovalRole,
        *,
        now: datetime | None = None,
    ) -> DailyReport:
        capability = APPROVAL_CAPABILITIES.get(role)
        if capability is None:
            raise ValidationError("Unknown approval role for daily reports")
        self._authorizer.require(principal, capability)

        report = self._get(report_id)
        if not report.is_notified:
            raise PreconditionError("Only notified reports can be approved")

        project = self._catalogs.load().projects.get(report.project_id)
        slot = self._gate.approve(principal, report.approval_slot(role, project), capability, now=now)
        approved = report.with_approval(slot)

        uow = begin(self._store)
        self._reports.record_approvals(uow, approved)
        uow.commit()
        return approved

    def _get(self, report_id: str) -> DailyReport:
        report = self._reports.get(str(report_id))
        if not report:
            raise ValidationError("Daily report does not exist")
        return report

    # -------- Presentation --------
    def selector_options(self, principal: SessionPrincipal, project_id: Optional[str] = None) -> dict:
        """Project and crew choices for the report screen selectors."""

        self._authorizer.require(principal, Capability.DAILY_REPORTS_VIEW)
        catalog = self._catalogs.load()
        projects = sorted(catalog.projects_with_crews(), key=lambda p: p.name)
        return {
            "projects": [{"value": p.project_id, "label": f"{p.identifier} - {p.name}"} for p in projects],
            "crews": catalog.crew_options(project_id) if project_id else [],
        }

    def to_ui(self, principal: SessionPrincipal, workspace: ReportWorkspace) -> dict:
        if workspace.is_overview:
            return {
                "date": workspace.report_date.strftime("%Y-%m-%d"),
                "project_id": workspace.project_id,
                "crew_id": ALL_CREWS,
                "crew_options": workspace.catalog.crew_options(workspace.project_id),
                "overview": [s.to_dict() for s in workspace.overview],
            }

        catalog = workspace.catalog
        legal = workspace.legal
        rows = []
        for employee_id in workspace.personnel:
            state = workspace.sheet.row(employee_id)
            emp = catalog.employees.get(employee_id)
            rows.append(
                {
                    "employee_id": employee_id,
                    "internal_number": emp.internal_number if emp else "",
                    "name": workspace.sheet.name(employee_id),
                    "productive_hours": dict(state.productive_hours),
                    "unproductive_hours": dict(state.unproductive_hours),
                    "special_hours": dict(state.special_hours),
                    "absence_reason": state.absence_reason,
                    "manual": state.manual,
                    "total_hours": state.worked_total,
                }
            )

        report = workspace.report
        return {
            "date": workspace.report_date.strftime("%Y-%m-%d"),
            "project_id": workspace.project_id,
            "crew_id": workspace.crew.crew_id,
            "crew_name": workspace.crew.name,
            "crew_options": catalog.crew_options(workspace.project_id),
            "report_id": report.report_id if report else None,
            "status": report.status.value if report else None,
            "notified_at": report.notified_at.strftime("%Y-%m-%d %H:%M") if report and report.notified_at else None,
            "locked": workspace.is_locked,
            "fully_approved": bool(report and report.is_fully_approved(workspace.project)),
            "active_phases": [{"id": p.phase_id, "name": p.name} for p in workspace.active_phases],
            "absence_types": [{"id": t.type_id, "name": t.name, "code": t.code} for t in legal.absence],
            "special_hour_types": [{"id": t.type_id, "name": t.name, "code": t.code} for t in legal.special],
            "unproductive_hour_types": [{"id": t.type_id, "name": t.name, "code": t.code} for t in legal.unproductive],
            "rows": rows,
            "warnings": [w.message for w in workspace.sheet.warnings()],
            "eligible_for_manual": [
                {"employee_id": e.employee_id, "name": e.display_name} for e in workspace.eligible_for_manual
            ],
            "approvals": self.approval_views(principal, workspace),
        }

    def export_rows(self, workspace: ReportWorkspace) -> List[dict]:
        """Flat rows for the spreadsheet export of one crew's report."""

        if workspace.is_overview:
            return [
                {"Crew": s.crew_name, "Status": s.status.value, "Report": s.report_id or ""}
                for s in workspace.overview
            ]

        catalog = workspace.catalog
        out = []
        for employee_id in workspace.personnel:
            state = workspace.sheet.row(employee_id)
            emp = catalog.employees.get(employee_id)
            row = {
                "Internal number": emp.internal_number if emp else "",
                "Employee": workspace.sheet.name(employee_id),
            }
            for phase in workspace.active_phases:
                row[phase.name] = state.productive_hours.get(phase.phase_id, 0.0)
            absence = catalog.absence_types.get(state.absence_reason) if state.absence_reason else None
            row["Unproductive"] = state.unproductive_total
            row["Special"] = state.special_total
            row["Absence"] = absence.name if absence else (state.absence_reason or "")
            row["Total"] = state.worked_total
            out.append(row)
        return out
