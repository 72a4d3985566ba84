from __future__ import annotations

from typing import Protocol, Sequence

from .model import Crew, Employee, EmployeePosition, HourType, Phase, Project


class CatalogRepository(Protocol):
    """Bulk, read-only access to the lookup collections."""

    def list_crews(self) -> Sequence[Crew]:
        raise NotImplementedError

    def list_employees(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_positions(self) -> Sequence[EmployeePosition]:
        raise NotImplementedError

    def list_phases(self) -> Sequence[Phase]:
        raise NotImplementedError

    def list_projects(self) -> Sequence[Project]:
        raise NotImplementedError

    def list_absence_types(self) -> Sequence[HourType]:
        raise NotImplementedError

    def list_special_hour_types(self) -> Sequence[HourType]:
        raise NotImplementedError

    def list_unproductive_hour_types(self) -> Sequence[HourType]:
        raise NotImplementedError
