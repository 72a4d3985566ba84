from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, Optional

from .model import Permission


class PermissionAbsenceLinker:
    """Suggest an absence code from approved permissions covering a date.

    A permission counts once either the supervisor or HR approval is recorded.
    """

    def __init__(self, permissions: Iterable[Permission]):
        self._permissions = [p for p in permissions if p.is_approved]

    def suggested_absences(self, day: date) -> Dict[str, str]:
        """Map employee id -> absence type id for ``day``."""

        suggestions: Dict[str, str] = {}
        for perm in sorted(self._permissions, key=lambda p: p.start_date):
            if perm.covers(day):
                suggestions[perm.employee_id] = perm.absence_type_id
        return suggestions

    def suggest(self, employee_id: str, day: date) -> Optional[str]:
        return self.suggested_absences(day).get(employee_id)
