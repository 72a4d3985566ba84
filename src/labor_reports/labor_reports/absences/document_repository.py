from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import format_iso_date, parse_iso_date, parse_iso_datetime
from ..core import constants
from ..database.document_store import DocumentStore
from ..database.unit_of_work import UnitOfWork
from .model import Permission
from .repository import PermissionRepository


def permission_from_doc(d: Dict[str, Any]) -> Permission:
    return Permission(
        permission_id=str(d["id"]),
        employee_id=str(d["employeeId"]),
        absence_type_id=str(d["absenceTypeId"]),
        start_date=parse_iso_date(d["startDate"]),
        end_date=parse_iso_date(d["endDate"]),
        observations=d.get("observations") or "",
        designated_supervisor_id=d.get("designatedApproverSupervisorId") or None,
        designated_hr_id=d.get("designatedApproverHumanResourceId") or None,
        supervisor_approved_by=d.get("approvedBySupervisorId") or None,
        supervisor_approved_at=parse_iso_datetime(d.get("approvedBySupervisorAt")),
        hr_approved_by=d.get("approvedByHumanResourceId") or None,
        hr_approved_at=parse_iso_datetime(d.get("approvedByHumanResourceAt")),
    )


def _approval_fields(p: Permission) -> Dict[str, Any]:
    return {
        "approvedBySupervisorId": p.supervisor_approved_by or "",
        "approvedBySupervisorAt": p.supervisor_approved_at.isoformat() if p.supervisor_approved_at else "",
        "approvedByHumanResourceId": p.hr_approved_by or "",
        "approvedByHumanResourceAt": p.hr_approved_at.isoformat() if p.hr_approved_at else "",
    }


def permission_to_doc(p: Permission) -> Dict[str, Any]:
    doc = {
        "employeeId": p.employee_id,
        "absenceTypeId": p.absence_type_id,
        "startDate": format_iso_date(p.start_date),
        "endDate": format_iso_date(p.end_date),
        "observations": p.observations or "",
        "designatedApproverSupervisorId": p.designated_supervisor_id or "",
        "designatedApproverHumanResourceId": p.designated_hr_id or "",
    }
    doc.update(_approval_fields(p))
    return doc


class DocumentPermissionRepository(PermissionRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get(self, permission_id: str) -> Optional[Permission]:
        d = self._store.get(constants.PERMISSIONS, permission_id)
        return permission_from_doc(d) if d else None

    def list_all(self) -> Sequence[Permission]:
        return [permission_from_doc(d) for d in self._store.list_all(constants.PERMISSIONS)]

    def list_for_employee(self, employee_id: str) -> Sequence[Permission]:
        return [permission_from_doc(d) for d in self._store.find(constants.PERMISSIONS, employeeId=employee_id)]

    def save(self, uow: UnitOfWork, permission: Permission) -> str:
        return uow.set(constants.PERMISSIONS, permission_to_doc(permission), doc_id=permission.permission_id or None)

    def record_approvals(self, uow: UnitOfWork, permission: Permission) -> None:
        fields = _approval_fields(permission)
        uow.update(constants.PERMISSIONS, permission.permission_id, {k: v for k, v in fields.items() if v})

    def delete(self, uow: UnitOfWork, permission_id: str) -> None:
        uow.delete(constants.PERMISSIONS, permission_id)
