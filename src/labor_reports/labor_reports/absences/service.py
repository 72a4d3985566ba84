from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import List, Optional

from ..approvals.gate import ApprovalGate
from ..auth.model import Capability, SessionPrincipal
from ..auth.service import Authorizer
from ..catalogs.service import CatalogService, CatalogSnapshot
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import ActivityFilter, ApprovalRole
from ..core.exceptions import ValidationError
from ..database.document_store import DocumentStore, begin
from .linker import PermissionAbsenceLinker
from .model import Permission
from .repository import PermissionRepository

logger = logging.getLogger(__name__)

APPROVAL_CAPABILITIES = {
    ApprovalRole.SUPERVISOR: Capability.PERMISSIONS_APPROVE_SUPERVISOR,
    ApprovalRole.HR: Capability.PERMISSIONS_APPROVE_HR,
}


@dataclass(frozen=True)
class PermissionInput:
    employee_id: str
    absence_type_id: str
    start_date: Optional[date]
    end_date: Optional[date]
    observations: str = ""
    designated_supervisor_id: Optional[str] = None
    designated_hr_id: Optional[str] = None


class PermissionService:
    """Use case: manage and approve absence permissions."""

    def __init__(
        self,
        permissions: PermissionRepository,
        catalogs: CatalogService,
        store: DocumentStore,
        *,
        authorizer: Authorizer,
        gate: ApprovalGate,
    ):
        self._permissions = permissions
        self._catalogs = catalogs
        self._store = store
        self._authorizer = authorizer
        self._gate = gate

    def linker(self) -> PermissionAbsenceLinker:
        return PermissionAbsenceLinker(self._permissions.list_all())

    # -------- Writes --------
    def _validate(self, data: PermissionInput, catalog: CatalogSnapshot, *, editing_id: Optional[str] = None) -> None:
        require_non_empty(data.employee_id, "Employee")
        require_non_empty(data.absence_type_id, "Absence type")
        if data.start_date is None or data.end_date is None:
            raise ValidationError("Start and end dates are required")
        if data.end_date < data.start_date:
            raise ValidationError("End date cannot be before start date")
        if data.employee_id not in catalog.employees:
            raise ValidationError("Employee does not exist")
        if data.absence_type_id not in catalog.absence_types:
            raise ValidationError("Absence type does not exist")

        for other in self._permissions.list_for_employee(data.employee_id):
            if other.permission_id == editing_id:
                continue
            if other.overlaps(data.start_date, data.end_date):
                raise ValidationError(
                    f"Dates overlap an existing absence for {catalog.employee_name(data.employee_id)} "
                    f"({other.start_date:%Y-%m-%d} - {other.end_date:%Y-%m-%d})"
                )

    def create(self, principal: SessionPrincipal, data: PermissionInput) -> str:
        self._authorizer.require(principal, Capability.PERMISSIONS_MANAGE)
        self._validate(data, self._catalogs.load())

        permission = Permission(
            permission_id="",
            employee_id=data.employee_id,
            absence_type_id=data.absence_type_id,
            start_date=data.start_date,
            end_date=data.end_date,
            observations=(data.observations or "").strip(),
            designated_supervisor_id=data.designated_supervisor_id or None,
            designated_hr_id=data.designated_hr_id or None,
        )
        uow = begin(self._store)
        permission_id = self._permissions.save(uow, permission)
        uow.commit()
        logger.info("Permission %s created for employee %s", permission_id, data.employee_id)
        return permission_id

    def update(self, principal: SessionPrincipal, permission_id: str, data: PermissionInput) -> None:
        self._authorizer.require(principal, Capability.PERMISSIONS_MANAGE)
        existing = self._get(permission_id)
        self._validate(data, self._catalogs.load(), editing_id=existing.permission_id)

        # Approvals survive an edit; only the request fields change.
        updated = replace(
            existing,
            employee_id=data.employee_id,
            absence_type_id=data.absence_type_id,
            start_date=data.start_date,
            end_date=data.end_date,
            observations=(data.observations or "").strip(),
            designated_supervisor_id=data.designated_supervisor_id or None,
            designated_hr_id=data.designated_hr_id or None,
        )
        uow = begin(self._store)
        self._permissions.save(uow, updated)
        uow.commit()
        logger.info("Permission %s updated", permission_id)

    def delete(self, principal: SessionPrincipal, permission_id: str) -> None:
        self._authorizer.require(principal, Capability.PERMISSIONS_MANAGE)
        self._get(permission_id)
        uow = begin(self._store)
        self._permissions.delete(uow, permission_id)
        uow.commit()
        logger.info("Permission %s deleted", permission_id)

    def approve(
        self,
        principal: SessionPrincipal,
        permission_id: str,
        role: ApprovalRole,
        *,
        now: datetime | None = None,
    ) -> Permission:
        capability = APPROVAL_CAPABILITIES.get(role)
        if capability is None:
            raise ValidationError("Unknown approval role for permissions")

        permission = self._get(permission_id)
        slot = self._gate.approve(principal, permission.approval_slot(role), capability, now=now or now_local())
        approved = permission.with_approval(slot)

        uow = begin(self._store)
        self._permissions.record_approvals(uow, approved)
        uow.commit()
        return approved

    def _get(self, permission_id: str) -> Permission:
        permission = self._permissions.get(str(permission_id))
        if not permission:
            raise ValidationError("Permission does not exist")
        return permission

    # -------- Reads --------
    def list(
        self,
        principal: SessionPrincipal,
        *,
        search: str = "",
        activity: ActivityFilter = ActivityFilter.ALL,
        today: Optional[date] = None,
    ) -> List[dict]:
        self._authorizer.require(principal, Capability.PERMISSIONS_VIEW)
        catalog = self._catalogs.load()
        today = today or now_local().date()
        needle = (search or "").strip().lower()

        out = []
        for perm in self._filtered(catalog, needle, activity, today):
            out.append(self._to_ui(principal, perm, catalog))
        return out

    def _filtered(self, catalog: CatalogSnapshot, needle: str, activity: ActivityFilter, today: date) -> List[Permission]:
        rows = []
        for perm in self._permissions.list_all():
            label = self._employee_label(catalog, perm.employee_id)
            if needle and needle not in label.lower():
                continue
            if activity != ActivityFilter.ALL:
                active = perm.covers(today)
                if (activity == ActivityFilter.ACTIVE) != active:
                    continue
            rows.append(perm)
        rows.sort(key=lambda p: p.start_date, reverse=True)
        return rows

    @staticmethod
    def _employee_label(catalog: CatalogSnapshot, employee_id: str) -> str:
        emp = catalog.employees.get(employee_id)
        if not emp:
            return ""
        return f"{emp.first_name} {emp.last_name} (No: {emp.internal_number})"

    def _to_ui(self, principal: SessionPrincipal, perm: Permission, catalog: CatalogSnapshot) -> dict:
        absence = catalog.absence_types.get(perm.absence_type_id)
        approvals = {
            role.value: self._gate.view(
                principal, perm.approval_slot(role), capability, name_of=catalog.employee_name
            ).to_dict()
            for role, capability in APPROVAL_CAPABILITIES.items()
        }
        return {
            "permission_id": perm.permission_id,
            "employee_id": perm.employee_id,
            "employee": self._employee_label(catalog, perm.employee_id) or "Employee not found",
            "absence_type_id": perm.absence_type_id,
            "absence_type": absence.name if absence else "N/A",
            "start_date": perm.start_date.strftime("%Y-%m-%d"),
            "end_date": perm.end_date.strftime("%Y-%m-%d"),
            "status": perm.status.value,
            "observations": perm.observations,
            "approvals": approvals,
        }

    def export_rows(
        self,
        principal: SessionPrincipal,
        *,
        search: str = "",
        activity: ActivityFilter = ActivityFilter.ALL,
        today: Optional[date] = None,
    ) -> List[dict]:
        """Rows for the spreadsheet export, same filters as the listing."""

        self._authorizer.require(principal, Capability.PERMISSIONS_VIEW)
        catalog = self._catalogs.load()
        today = today or now_local().date()

        def approver(approved_by: Optional[str]) -> str:
            if not approved_by:
                return "No"
            return catalog.employee_name(approved_by) or "Approved"

        rows = []
        for perm in self._filtered(catalog, (search or "").strip().lower(), activity, today):
            absence = catalog.absence_types.get(perm.absence_type_id)
            rows.append(
                {
                    "Employee": self._employee_label(catalog, perm.employee_id) or "N/A",
                    "Reason": absence.name if absence else "N/A",
                    "From": perm.start_date.strftime("%d/%m/%Y"),
                    "To": perm.end_date.strftime("%d/%m/%Y"),
                    "Approved by supervisor": approver(perm.supervisor_approved_by),
                    "Approved by HR": approver(perm.hr_approved_by),
                    "Observations": perm.observations,
                }
            )
        return rows
