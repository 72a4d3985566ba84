"""Hour allocation rules for a single employee-day.

Every edit returns a new ``EntryState``; an edit that would break a rule raises
``ValidationError`` with the current totals so the caller can correct it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Mapping, Optional

from ..common.validators import parse_hours, total_hours
from ..core.constants import DEFAULT_OVERTIME_WARNING_HOURS
from ..core.exceptions import ValidationError
from .model import EntryState


@dataclass(frozen=True)
class HourWarning:
    employee_id: str
    total_hours: float
    message: str


def _fmt(hours: float) -> str:
    return f"{hours:g}h"


def _clean(hours: Mapping[str, Optional[float]]) -> Dict[str, float]:
    return {k: float(v) for k, v in hours.items() if v is not None}


class HourAllocationValidator:
    def __init__(self, *, overtime_warning_hours: float = DEFAULT_OVERTIME_WARNING_HOURS):
        self._overtime_warning_hours = float(overtime_warning_hours)

    @staticmethod
    def _parse_map(values: Mapping[str, object], label: str, allowed_ids: Optional[Iterable[str]]) -> Dict[str, Optional[float]]:
        allowed = set(allowed_ids) if allowed_ids is not None else None
        parsed: Dict[str, Optional[float]] = {}
        for type_id, raw in (values or {}).items():
            if allowed is not None and type_id not in allowed:
                raise ValidationError(f"{label} type {type_id!r} is not enabled for this project")
            parsed[type_id] = parse_hours(raw, f"{label} hours")
        return parsed

    @staticmethod
    def _settle_worked(state: EntryState, employee_name: str) -> EntryState:
        """Apply the consequences of a change to productive/unproductive hours."""

        if not state.has_hours:
            # Back to an absence-eligible state; special hours need worked hours.
            return replace(state, special_hours={})

        state = replace(state, absence_reason=None)
        if state.special_total > state.worked_total:
            raise ValidationError(
                f"{employee_name}: special hours ({_fmt(state.special_total)}) cannot exceed "
                f"worked hours ({_fmt(state.worked_total)}); lower the special hours first"
            )
        return state

    def set_productive(
        self,
        state: EntryState,
        phase_id: str,
        value: object,
        *,
        employee_name: str,
        allowed_ids: Optional[Iterable[str]] = None,
        phase_name: Optional[str] = None,
    ) -> EntryState:
        if not phase_id:
            raise ValidationError("Phase is required")
        if allowed_ids is not None and phase_id not in set(allowed_ids):
            raise ValidationError(f"Phase {phase_name or phase_id!r} is not active for this crew on this date")
        hours = parse_hours(value, "Productive hours")
        productive = dict(state.productive_hours)
        productive[phase_id] = hours
        return self._settle_worked(replace(state, productive_hours=_clean(productive)), employee_name)

    def set_unproductive(
        self,
        state: EntryState,
        values: Mapping[str, object],
        *,
        employee_name: str,
        allowed_ids: Optional[Iterable[str]] = None,
    ) -> EntryState:
        unproductive = _clean(self._parse_map(values, "Unproductive", allowed_ids))
        if state.has_absence and total_hours(unproductive) > 0:
            raise ValidationError(f"{employee_name}: clear the absence before entering unproductive hours")
        return self._settle_worked(replace(state, unproductive_hours=unproductive), employee_name)

    def set_special(
        self,
        state: EntryState,
        values: Mapping[str, object],
        *,
        employee_name: str,
        allowed_ids: Optional[Iterable[str]] = None,
    ) -> EntryState:
        special = _clean(self._parse_map(values, "Special", allowed_ids))
        special_total = total_hours(special)
        if special_total > state.worked_total:
            raise ValidationError(
                f"{employee_name}: special hours ({_fmt(special_total)}) cannot exceed "
                f"worked hours ({_fmt(state.worked_total)})"
            )
        return replace(state, special_hours=special)

    def set_absence(
        self,
        state: EntryState,
        absence_type_id: Optional[str],
        *,
        allowed_ids: Optional[Iterable[str]] = None,
    ) -> EntryState:
        if not absence_type_id:
            return replace(state, absence_reason=None)
        if allowed_ids is not None and absence_type_id not in set(allowed_ids):
            raise ValidationError(f"Absence type {absence_type_id!r} is not enabled for this project")
        return EntryState(absence_reason=absence_type_id, manual=state.manual)

    def check(self, state: EntryState, *, employee_name: str) -> List[str]:
        """Re-check a row before it is written; returns the list of violations."""

        problems = []
        all_hours = list(state.productive_hours.values()) + list(state.unproductive_hours.values()) + list(
            state.special_hours.values()
        )
        if any(h < 0 for h in all_hours):
            problems.append(f"{employee_name}: hours cannot be negative")
        if state.has_absence and (state.has_hours or state.special_total > 0):
            problems.append(f"{employee_name}: cannot have both hours and an absence")
        if state.special_total > state.worked_total:
            problems.append(
                f"{employee_name}: special hours ({_fmt(state.special_total)}) exceed "
                f"worked hours ({_fmt(state.worked_total)})"
            )
        return problems

    def warnings(self, employee_id: str, state: EntryState, *, employee_name: str) -> List[HourWarning]:
        if state.worked_total > self._overtime_warning_hours:
            return [
                HourWarning(
                    employee_id=employee_id,
                    total_hours=state.worked_total,
                    message=f"{employee_name}: more than {self._overtime_warning_hours:g} hours loaded "
                    f"({_fmt(state.worked_total)})",
                )
            ]
        return []
