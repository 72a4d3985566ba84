from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional


class Capability(str, Enum):
    """One constant per guarded action; values are the identity provider's keys."""

    DAILY_REPORTS_VIEW = "dailyReports.view"
    DAILY_REPORTS_SAVE = "dailyReports.save"
    DAILY_REPORTS_NOTIFY = "dailyReports.notify"
    DAILY_REPORTS_ADD_MANUAL = "dailyReports.addManual"
    DAILY_REPORTS_MOVE_EMPLOYEE = "dailyReports.moveEmployee"
    DAILY_REPORTS_DELETE = "dailyReports.delete"
    DAILY_REPORTS_APPROVE_CONTROL = "dailyReports.approveControl"
    DAILY_REPORTS_APPROVE_PM = "dailyReports.approvePM"

    PERMISSIONS_VIEW = "permissions.view"
    PERMISSIONS_MANAGE = "permissions.manage"
    PERMISSIONS_APPROVE_SUPERVISOR = "permissions.approveSupervisor"
    PERMISSIONS_APPROVE_HR = "permissions.approveHR"

    STATISTICS = "statistics"


# A bare section key grants read access to that section.
SECTION_GRANTS = {
    "dailyReports": Capability.DAILY_REPORTS_VIEW,
    "permissions": Capability.PERMISSIONS_VIEW,
}


@dataclass(frozen=True)
class SessionPrincipal:
    """The signed-in caller, passed explicitly to every operation needing identity."""

    user_id: str
    email: str
    capabilities: FrozenSet[Capability] = field(default_factory=frozenset)
    employee_id: Optional[str] = None
    is_superuser: bool = False
    display_name: str = ""

    def is_identified_by(self, identity_id: Optional[str]) -> bool:
        if not identity_id:
            return False
        return identity_id in {self.user_id, self.employee_id}
