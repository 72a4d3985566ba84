from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Dict, Optional

from ..approvals.model import ApprovalSlot
from ..catalogs.model import Project
from ..core.enums import ApprovalRole, CrewRole, ReportStatus


@dataclass(frozen=True)
class DailyReport:
    """Header of a crew's report for one date.

    ``responsibles`` is the crew's role snapshot taken at creation; later crew
    edits do not change it.
    """

    report_id: str
    report_date: date
    crew_id: str
    project_id: str
    responsibles: Dict[CrewRole, Optional[str]] = field(default_factory=dict)
    status: ReportStatus = ReportStatus.PENDING
    notified_at: Optional[datetime] = None
    control_approved_by: Optional[str] = None
    control_approved_at: Optional[datetime] = None
    pm_approved_by: Optional[str] = None
    pm_approved_at: Optional[datetime] = None

    @property
    def is_notified(self) -> bool:
        return self.status == ReportStatus.NOTIFIED

    def approval_slot(self, role: ApprovalRole, project: Optional[Project]) -> ApprovalSlot:
        if role == ApprovalRole.CONTROL:
            return ApprovalSlot(
                role=role,
                required=bool(project and project.requires_control_approval),
                designated_approver_id=self.responsibles.get(CrewRole.CONTROL_AND_MANAGEMENT),
                approved_by=self.control_approved_by,
                approved_at=self.control_approved_at,
            )
        if role == ApprovalRole.PROJECT_MANAGER:
            return ApprovalSlot(
                role=role,
                required=bool(project and project.requires_pm_approval),
                designated_approver_id=self.responsibles.get(CrewRole.PROJECT_MANAGER),
                approved_by=self.pm_approved_by,
                approved_at=self.pm_approved_at,
            )
        raise ValueError(f"{role.value} does not apply to daily reports")

    def with_approval(self, slot: ApprovalSlot) -> "DailyReport":
        if slot.role == ApprovalRole.CONTROL:
            return replace(self, control_approved_by=slot.approved_by, control_approved_at=slot.approved_at)
        return replace(self, pm_approved_by=slot.approved_by, pm_approved_at=slot.approved_at)

    def is_fully_approved(self, project: Optional[Project]) -> bool:
        slots = [self.approval_slot(r, project) for r in (ApprovalRole.CONTROL, ApprovalRole.PROJECT_MANAGER)]
        return self.is_notified and all(s.is_approved for s in slots if s.required)
