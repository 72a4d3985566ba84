from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, List

from ..core.enums import GuardViolationKind
from ..core.exceptions import NotifyGuardError
from ..labor.sheet import LaborSheet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardViolation:
    kind: GuardViolationKind
    employee_id: str
    employee_name: str


class NotifyGuard:
    """Preconditions for PENDING -> NOTIFIED, evaluated over every row of the sheet."""

    def check(self, sheet: LaborSheet, active_phase_ids: AbstractSet[str]) -> List[GuardViolation]:
        violations: List[GuardViolation] = []
        for employee_id, state in sheet.rows.items():
            name = sheet.name(employee_id)
            if not state.has_hours and not state.has_absence:
                violations.append(GuardViolation(GuardViolationKind.MISSING_NOVELTY, employee_id, name))
            if state.productive_total > 0 and not active_phase_ids:
                violations.append(GuardViolation(GuardViolationKind.NO_ACTIVE_PHASE, employee_id, name))
        return violations

    def enforce(self, sheet: LaborSheet, active_phase_ids: AbstractSet[str]) -> None:
        violations = self.check(sheet, active_phase_ids)
        if violations:
            logger.warning("Notify blocked: %d violation(s)", len(violations))
            raise NotifyGuardError(violations)
