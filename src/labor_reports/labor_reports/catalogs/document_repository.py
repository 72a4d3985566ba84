from __future__ import annotations

from typing import Any, Dict, Sequence

from ..common.datetime_utils import parse_iso_date
from ..core import constants
from ..core.enums import CrewRole, EmployeeCondition, EmployeeStatus
from ..database.document_store import DocumentStore
from .model import Crew, Employee, EmployeePosition, HourType, Phase, PhaseAssignment, Project, RoleSlot
from .repository import CatalogRepository

_ROLE_FIELDS = {
    CrewRole.FOREMAN: ("foremanId", "substituteForemanIds"),
    CrewRole.TALLYMAN: ("tallymanId", "substituteTallymanIds"),
    CrewRole.PROJECT_MANAGER: ("projectManagerId", "substituteProjectManagerIds"),
    CrewRole.CONTROL_AND_MANAGEMENT: ("controlAndManagementId", "substituteControlAndManagementIds"),
}


def crew_from_doc(d: Dict[str, Any]) -> Crew:
    roles = {
        role: RoleSlot(titular_id=d.get(titular) or None, substitute_ids=tuple(d.get(substitutes) or ()))
        for role, (titular, substitutes) in _ROLE_FIELDS.items()
    }
    phases = tuple(
        PhaseAssignment(
            assignment_id=str(p.get("id") or ""),
            phase_id=str(p["phaseId"]),
            start_date=parse_iso_date(p["startDate"][:10]),
            end_date=parse_iso_date(p["endDate"][:10]),
        )
        for p in d.get("assignedPhases") or ()
    )
    return Crew(
        crew_id=str(d["id"]),
        name=d.get("name", ""),
        project_id=str(d.get("projectId", "")),
        roles=roles,
        employee_ids=tuple(d.get("employeeIds") or ()),
        assigned_phases=phases,
    )


def employee_from_doc(d: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=str(d["id"]),
        internal_number=str(d.get("internalNumber", "")),
        first_name=d.get("firstName", ""),
        last_name=d.get("lastName", ""),
        condition=EmployeeCondition(d.get("condition", EmployeeCondition.DAILY.value)),
        status=EmployeeStatus(d.get("status", EmployeeStatus.ACTIVE.value)),
        sex=d.get("sex", "X"),
        position_id=d.get("positionId"),
        project_id=d.get("projectId"),
    )


def project_from_doc(d: Dict[str, Any]) -> Project:
    return Project(
        project_id=str(d["id"]),
        identifier=d.get("identifier", ""),
        name=d.get("name", ""),
        absence_type_ids=tuple(d.get("absenceTypeIds") or ()),
        special_hour_type_ids=tuple(d.get("specialHourTypeIds") or ()),
        unproductive_hour_type_ids=tuple(d.get("unproductiveHourTypeIds") or ()),
        requires_control_approval=bool(d.get("requiresControlGestionApproval", False)),
        requires_pm_approval=bool(d.get("requiresJefeDeObraApproval", False)),
    )


def _hour_type(d: Dict[str, Any]) -> HourType:
    return HourType(type_id=str(d["id"]), name=d.get("name", ""), code=d.get("code", ""))


class DocumentCatalogRepository(CatalogRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def list_crews(self) -> Sequence[Crew]:
        return [crew_from_doc(d) for d in self._store.list_all(constants.CREWS)]

    def list_employees(self) -> Sequence[Employee]:
        return [employee_from_doc(d) for d in self._store.list_all(constants.EMPLOYEES)]

    def list_positions(self) -> Sequence[EmployeePosition]:
        return [
            EmployeePosition(position_id=str(d["id"]), name=d.get("name", ""), code=d.get("code", ""))
            for d in self._store.list_all(constants.POSITIONS)
        ]

    def list_phases(self) -> Sequence[Phase]:
        return [
            Phase(phase_id=str(d["id"]), name=d.get("name", ""), pep_element=d.get("pepElement", ""))
            for d in self._store.list_all(constants.PHASES)
        ]

    def list_projects(self) -> Sequence[Project]:
        return [project_from_doc(d) for d in self._store.list_all(constants.PROJECTS)]

    def list_absence_types(self) -> Sequence[HourType]:
        return [_hour_type(d) for d in self._store.list_all(constants.ABSENCE_TYPES)]

    def list_special_hour_types(self) -> Sequence[HourType]:
        return [_hour_type(d) for d in self._store.list_all(constants.SPECIAL_HOUR_TYPES)]

    def list_unproductive_hour_types(self) -> Sequence[HourType]:
        return [_hour_type(d) for d in self._store.list_all(constants.UNPRODUCTIVE_HOUR_TYPES)]
