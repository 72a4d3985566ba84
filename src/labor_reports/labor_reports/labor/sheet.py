from __future__ import annotations

from typing import Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional

from ..catalogs.service import LegalTypes
from ..core.exceptions import ReportLockedError, ValidationError
from .model import EntryState
from .validator import HourAllocationValidator, HourWarning

NameLookup = Callable[[str], Optional[str]]


class LaborSheet:
    """In-memory entry map keyed by employee id.

    Row-level edits go through the hour allocation rules; the sheet is what
    save and notify persist.
    """

    def __init__(
        self,
        *,
        legal: LegalTypes,
        validator: HourAllocationValidator,
        rows: Optional[Mapping[str, EntryState]] = None,
        name_of: Optional[NameLookup] = None,
        locked: bool = False,
        active_phase_ids: Optional[Iterable[str]] = None,
        phase_name_of: Optional[NameLookup] = None,
    ):
        self._legal = legal
        self._validator = validator
        self._rows: Dict[str, EntryState] = dict(rows or {})
        self._name_of = name_of or (lambda emp_id: None)
        self._locked = locked
        # None leaves productive phases unrestricted
        self._active_phase_ids: Optional[FrozenSet[str]] = (
            frozenset(active_phase_ids) if active_phase_ids is not None else None
        )
        self._phase_name_of = phase_name_of or (lambda phase_id: None)

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def employee_ids(self) -> List[str]:
        return list(self._rows)

    @property
    def rows(self) -> Dict[str, EntryState]:
        return dict(self._rows)

    def __contains__(self, employee_id: str) -> bool:
        return employee_id in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def name(self, employee_id: str) -> str:
        return self._name_of(employee_id) or employee_id

    def row(self, employee_id: str) -> EntryState:
        try:
            return self._rows[employee_id]
        except KeyError:
            raise ValidationError(f"Employee {self.name(employee_id)} is not on this report") from None

    def _ensure_editable(self) -> None:
        if self._locked:
            raise ReportLockedError("This report was notified and can no longer be modified")

    def _put(self, employee_id: str, state: EntryState) -> EntryState:
        self._rows[employee_id] = state
        return state

    # -------- Row edits --------
    def set_productive_hours(self, employee_id: str, phase_id: str, value: object) -> EntryState:
        self._ensure_editable()
        state = self._validator.set_productive(
            self.row(employee_id),
            phase_id,
            value,
            employee_name=self.name(employee_id),
            allowed_ids=self._active_phase_ids,
            phase_name=self._phase_name_of(phase_id),
        )
        return self._put(employee_id, state)

    def set_unproductive_hours(self, employee_id: str, values: Mapping[str, object]) -> EntryState:
        self._ensure_editable()
        state = self._validator.set_unproductive(
            self.row(employee_id),
            values,
            employee_name=self.name(employee_id),
            allowed_ids=self._legal.unproductive_ids,
        )
        return self._put(employee_id, state)

    def set_special_hours(self, employee_id: str, values: Mapping[str, object]) -> EntryState:
        self._ensure_editable()
        state = self._validator.set_special(
            self.row(employee_id),
            values,
            employee_name=self.name(employee_id),
            allowed_ids=self._legal.special_ids,
        )
        return self._put(employee_id, state)

    def set_absence(self, employee_id: str, absence_type_id: Optional[str]) -> EntryState:
        self._ensure_editable()
        state = self._validator.set_absence(
            self.row(employee_id), absence_type_id, allowed_ids=self._legal.absence_ids
        )
        return self._put(employee_id, state)

    def apply_row(self, employee_id: str, payload: Mapping[str, object]) -> EntryState:
        """Replay a whole row from a client payload through the rules.

        Order: absence, productive, unproductive, special.
        """

        self._ensure_editable()
        base = self.row(employee_id)
        self._put(employee_id, EntryState(manual=base.manual))
        try:
            absence = payload.get("absence_reason")
            if absence:
                self.set_absence(employee_id, str(absence))
            for phase_id, hours in dict(payload.get("productive_hours") or {}).items():
                self.set_productive_hours(employee_id, phase_id, hours)
            unproductive = dict(payload.get("unproductive_hours") or {})
            if unproductive:
                self.set_unproductive_hours(employee_id, unproductive)
            special = dict(payload.get("special_hours") or {})
            if special:
                self.set_special_hours(employee_id, special)
        except ValidationError:
            self._put(employee_id, base)
            raise
        return self.row(employee_id)

    # -------- Personnel edits --------
    def add_employee(self, employee_id: str, *, manual: bool = True, state: Optional[EntryState] = None) -> EntryState:
        self._ensure_editable()
        if employee_id in self._rows:
            raise ValidationError(f"{self.name(employee_id)} is already on this report")
        return self._put(employee_id, state or EntryState(manual=manual))

    def remove_employee(self, employee_id: str) -> None:
        self._ensure_editable()
        if not self.row(employee_id).manual:
            raise ValidationError(f"{self.name(employee_id)} belongs to the crew roster and cannot be removed")
        del self._rows[employee_id]

    # -------- Checks --------
    def check(self) -> None:
        problems: List[str] = []
        for employee_id, state in self._rows.items():
            problems.extend(self._validator.check(state, employee_name=self.name(employee_id)))
            # With no active phase at all the notify guard reports the row instead.
            if self._active_phase_ids:
                for phase_id, hours in state.productive_hours.items():
                    if hours and phase_id not in self._active_phase_ids:
                        problems.append(
                            f"{self.name(employee_id)}: phase {self._phase_name_of(phase_id) or phase_id!r} "
                            "is not active for this crew on this date"
                        )
        if problems:
            raise ValidationError("; ".join(problems))

    def warnings(self) -> List[HourWarning]:
        out: List[HourWarning] = []
        for employee_id, state in self._rows.items():
            out.extend(self._validator.warnings(employee_id, state, employee_name=self.name(employee_id)))
        return out

