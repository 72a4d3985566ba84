from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..database.unit_of_work import UnitOfWork
from .model import Permission


class PermissionRepository(Protocol):
    def get(self, permission_id: str) -> Optional[Permission]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Permission]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> Sequence[Permission]:
        raise NotImplementedError

    def save(self, uow: UnitOfWork, permission: Permission) -> str:
        """Insert or overwrite the permission document."""

        raise NotImplementedError

    def record_approvals(self, uow: UnitOfWork, permission: Permission) -> None:
        raise NotImplementedError

    def delete(self, uow: UnitOfWork, permission_id: str) -> None:
        raise NotImplementedError
