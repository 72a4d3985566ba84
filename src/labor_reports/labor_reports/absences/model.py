from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..approvals.model import ApprovalSlot
from ..common.datetime_utils import date_in_window
from ..core.enums import ApprovalRole, PermissionStatus


@dataclass(frozen=True)
class Permission:
    """Approved-leave record for one employee over an inclusive date range."""

    permission_id: str
    employee_id: str
    absence_type_id: str
    start_date: date
    end_date: date
    observations: str = ""
    designated_supervisor_id: Optional[str] = None
    designated_hr_id: Optional[str] = None
    supervisor_approved_by: Optional[str] = None
    supervisor_approved_at: Optional[datetime] = None
    hr_approved_by: Optional[str] = None
    hr_approved_at: Optional[datetime] = None

    @property
    def is_approved(self) -> bool:
        return bool(self.supervisor_approved_by or self.hr_approved_by)

    @property
    def status(self) -> PermissionStatus:
        if self.hr_approved_by:
            return PermissionStatus.APPROVED_BY_HR
        if self.supervisor_approved_by:
            return PermissionStatus.APPROVED_BY_SUPERVISOR
        return PermissionStatus.NOT_APPROVED

    def covers(self, day: date) -> bool:
        return date_in_window(day, self.start_date, self.end_date)

    def overlaps(self, start: date, end: date) -> bool:
        """Closed intervals: sharing a boundary day counts as overlapping."""
        return self.start_date <= end and start <= self.end_date

    def approval_slot(self, role: ApprovalRole) -> ApprovalSlot:
        if role == ApprovalRole.SUPERVISOR:
            return ApprovalSlot(
                role=role,
                required=True,
                designated_approver_id=self.designated_supervisor_id,
                approved_by=self.supervisor_approved_by,
                approved_at=self.supervisor_approved_at,
            )
        if role == ApprovalRole.HR:
            return ApprovalSlot(
                role=role,
                required=True,
                designated_approver_id=self.designated_hr_id,
                approved_by=self.hr_approved_by,
                approved_at=self.hr_approved_at,
            )
        raise ValueError(f"{role.value} does not apply to permissions")

    def with_approval(self, slot: ApprovalSlot) -> "Permission":
        if slot.role == ApprovalRole.SUPERVISOR:
            return replace(self, supervisor_approved_by=slot.approved_by, supervisor_approved_at=slot.approved_at)
        return replace(self, hr_approved_by=slot.approved_by, hr_approved_at=slot.approved_at)
