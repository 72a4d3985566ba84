from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, Tuple

from ..common.datetime_utils import date_in_window
from ..core.enums import CrewRole, EmployeeCondition, EmployeeStatus


@dataclass(frozen=True)
class RoleSlot:
    titular_id: Optional[str]
    substitute_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PhaseAssignment:
    assignment_id: str
    phase_id: str
    start_date: date
    end_date: date

    def is_active_on(self, day: date) -> bool:
        return date_in_window(day, self.start_date, self.end_date)


@dataclass(frozen=True)
class Crew:
    crew_id: str
    name: str
    project_id: str
    roles: Dict[CrewRole, RoleSlot] = field(default_factory=dict)
    employee_ids: Tuple[str, ...] = ()
    assigned_phases: Tuple[PhaseAssignment, ...] = ()

    def titular(self, role: CrewRole) -> Optional[str]:
        slot = self.roles.get(role)
        return slot.titular_id if slot else None

    def role_snapshot(self) -> Dict[CrewRole, Optional[str]]:
        return {role: self.titular(role) for role in CrewRole}

    def active_phase_ids(self, day: date) -> set[str]:
        return {a.phase_id for a in self.assigned_phases if a.is_active_on(day)}


@dataclass(frozen=True)
class Employee:
    employee_id: str
    internal_number: str
    first_name: str
    last_name: str
    condition: EmployeeCondition
    status: EmployeeStatus
    sex: str = "X"
    position_id: Optional[str] = None
    project_id: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.last_name}, {self.first_name}"

    @property
    def eligible_for_manual_add(self) -> bool:
        return self.condition == EmployeeCondition.DAILY and self.status == EmployeeStatus.ACTIVE


@dataclass(frozen=True)
class Phase:
    phase_id: str
    name: str
    pep_element: str = ""


@dataclass(frozen=True)
class HourType:
    """Absence, special-hour and unproductive-hour types share this shape."""

    type_id: str
    name: str
    code: str


@dataclass(frozen=True)
class EmployeePosition:
    position_id: str
    name: str
    code: str = ""


@dataclass(frozen=True)
class Project:
    project_id: str
    identifier: str
    name: str
    absence_type_ids: Tuple[str, ...] = ()
    special_hour_type_ids: Tuple[str, ...] = ()
    unproductive_hour_type_ids: Tuple[str, ...] = ()
    requires_control_approval: bool = False
    requires_pm_approval: bool = False
