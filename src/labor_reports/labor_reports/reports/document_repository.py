from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import format_iso_date, parse_iso_date, parse_iso_datetime
from ..core import constants
from ..core.enums import CrewRole, ReportStatus
from ..database.document_store import DocumentStore
from ..database.unit_of_work import UnitOfWork
from ..labor.model import LaborEntry
from .model import DailyReport
from .repository import DailyReportRepository

_SNAPSHOT_FIELDS = {
    CrewRole.FOREMAN: "foremanId",
    CrewRole.TALLYMAN: "tallymanId",
    CrewRole.PROJECT_MANAGER: "projectManagerId",
    CrewRole.CONTROL_AND_MANAGEMENT: "controlAndManagementId",
}


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def report_from_doc(d: Dict[str, Any]) -> DailyReport:
    return DailyReport(
        report_id=str(d["id"]),
        report_date=parse_iso_date(d["date"]),
        crew_id=str(d["crewId"]),
        project_id=str(d.get("projectId", "")),
        responsibles={role: d.get(f) or None for role, f in _SNAPSHOT_FIELDS.items()},
        status=ReportStatus(d.get("status", ReportStatus.PENDING.value)),
        notified_at=parse_iso_datetime(d.get("notifiedAt")),
        control_approved_by=d.get("controlApprovedById") or None,
        control_approved_at=parse_iso_datetime(d.get("controlApprovedAt")),
        pm_approved_by=d.get("pmApprovedById") or None,
        pm_approved_at=parse_iso_datetime(d.get("pmApprovedAt")),
    )


def report_to_doc(r: DailyReport) -> Dict[str, Any]:
    doc = {
        "date": format_iso_date(r.report_date),
        "crewId": r.crew_id,
        "projectId": r.project_id,
        "status": r.status.value,
        "notifiedAt": _iso(r.notified_at),
        "controlApprovedById": r.control_approved_by,
        "controlApprovedAt": _iso(r.control_approved_at),
        "pmApprovedById": r.pm_approved_by,
        "pmApprovedAt": _iso(r.pm_approved_at),
    }
    for role, f in _SNAPSHOT_FIELDS.items():
        doc[f] = r.responsibles.get(role)
    return doc


def _hours(raw: Optional[Dict[str, Any]]) -> Dict[str, float]:
    return {k: float(v) for k, v in (raw or {}).items() if v is not None}


def entry_from_doc(d: Dict[str, Any]) -> LaborEntry:
    return LaborEntry(
        entry_id=str(d["id"]),
        daily_report_id=str(d["dailyReportId"]),
        employee_id=str(d["employeeId"]),
        productive_hours=_hours(d.get("productiveHours")),
        unproductive_hours=_hours(d.get("unproductiveHours")),
        special_hours=_hours(d.get("specialHours")),
        absence_reason=d.get("absenceReason") or None,
        manual=bool(d.get("manual", False)),
    )


def entry_to_doc(e: LaborEntry) -> Dict[str, Any]:
    return {
        "dailyReportId": e.daily_report_id,
        "employeeId": e.employee_id,
        "productiveHours": dict(e.productive_hours),
        "unproductiveHours": dict(e.unproductive_hours),
        "specialHours": dict(e.special_hours),
        "absenceReason": e.absence_reason,
        "manual": bool(e.manual),
    }


class DocumentDailyReportRepository(DailyReportRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get(self, report_id: str) -> Optional[DailyReport]:
        d = self._store.get(constants.DAILY_REPORTS, report_id)
        return report_from_doc(d) if d else None

    def find_for_crew(self, report_date: date, crew_id: str) -> Optional[DailyReport]:
        docs = self._store.find(constants.DAILY_REPORTS, date=format_iso_date(report_date), crewId=crew_id)
        if not docs:
            return None
        # (date, crew) uniqueness is application-level; pick deterministically if it was broken.
        return report_from_doc(sorted(docs, key=lambda d: d["id"])[0])

    def list_for_date(self, report_date: date) -> Sequence[DailyReport]:
        return [report_from_doc(d) for d in self._store.find(constants.DAILY_REPORTS, date=format_iso_date(report_date))]

    def list_between(self, start: date, end: date) -> Sequence[DailyReport]:
        reports = [report_from_doc(d) for d in self._store.list_all(constants.DAILY_REPORTS)]
        return [r for r in reports if start <= r.report_date <= end]

    def list_entries(self, report_id: str) -> Sequence[LaborEntry]:
        return [entry_from_doc(d) for d in self._store.find(constants.DAILY_LABOR, dailyReportId=report_id)]

    def add(self, uow: UnitOfWork, report: DailyReport) -> str:
        return uow.set(constants.DAILY_REPORTS, report_to_doc(report), doc_id=report.report_id)

    def mark_notified(self, uow: UnitOfWork, report: DailyReport) -> None:
        uow.update(
            constants.DAILY_REPORTS,
            report.report_id,
            {"status": report.status.value, "notifiedAt": _iso(report.notified_at)},
        )

    def record_approvals(self, uow: UnitOfWork, report: DailyReport) -> None:
        fields = {
            "controlApprovedById": report.control_approved_by,
            "controlApprovedAt": _iso(report.control_approved_at),
            "pmApprovedById": report.pm_approved_by,
            "pmApprovedAt": _iso(report.pm_approved_at),
        }
        uow.update(constants.DAILY_REPORTS, report.report_id, {k: v for k, v in fields.items() if v})

    def delete(self, uow: UnitOfWork, report_id: str) -> None:
        uow.delete(constants.DAILY_REPORTS, report_id)

    def add_entry(self, uow: UnitOfWork, entry: LaborEntry) -> str:
        return uow.set(constants.DAILY_LABOR, entry_to_doc(entry), doc_id=entry.entry_id or None)

    def delete_entry(self, uow: UnitOfWork, entry_id: str) -> None:
        uow.delete(constants.DAILY_LABOR, entry_id)
