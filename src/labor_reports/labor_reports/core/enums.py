from __future__ import annotations

from enum import Enum


class ReportStatus(str, Enum):
    """Daily report lifecycle: PENDING -> NOTIFIED (terminal)."""

    PENDING = "PENDING"
    NOTIFIED = "NOTIFIED"


class CrewDayStatus(str, Enum):
    """Per-crew summary for the "all crews" list view."""

    NOT_STARTED = "NOT_STARTED"
    PENDING = "PENDING"
    NOTIFIED = "NOTIFIED"


class CrewRole(str, Enum):
    FOREMAN = "foreman"
    TALLYMAN = "tallyman"
    PROJECT_MANAGER = "projectManager"
    CONTROL_AND_MANAGEMENT = "controlAndManagement"


class ApprovalRole(str, Enum):
    # daily reports
    CONTROL = "control"
    PROJECT_MANAGER = "projectManager"
    # permissions
    SUPERVISOR = "supervisor"
    HR = "humanResources"


class ApprovalState(str, Enum):
    APPROVED = "APPROVED"
    AWAITING_CALLER = "AWAITING_CALLER"
    PENDING = "PENDING"
    NOT_REQUIRED = "NOT_REQUIRED"


class PermissionStatus(str, Enum):
    APPROVED_BY_HR = "APPROVED_BY_HR"
    APPROVED_BY_SUPERVISOR = "APPROVED_BY_SUPERVISOR"
    NOT_APPROVED = "NOT_APPROVED"


class EmployeeCondition(str, Enum):
    DAILY = "jornal"
    MONTHLY = "mensual"


class EmployeeStatus(str, Enum):
    ACTIVE = "activo"
    SUSPENDED = "suspendido"
    TERMINATED = "baja"


class GuardViolationKind(str, Enum):
    MISSING_NOVELTY = "MISSING_NOVELTY"
    NO_ACTIVE_PHASE = "NO_ACTIVE_PHASE"


class ActivityFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"
