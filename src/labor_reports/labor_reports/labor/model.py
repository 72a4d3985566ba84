from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..common.validators import total_hours


@dataclass(frozen=True)
class EntryState:
    """One employee's row on the report being edited.

    Exactly one of: hours present, absence reason set, or empty (pending input).
    """

    productive_hours: Dict[str, float] = field(default_factory=dict)
    unproductive_hours: Dict[str, float] = field(default_factory=dict)
    special_hours: Dict[str, float] = field(default_factory=dict)
    absence_reason: Optional[str] = None
    manual: bool = False

    @property
    def productive_total(self) -> float:
        return total_hours(self.productive_hours)

    @property
    def unproductive_total(self) -> float:
        return total_hours(self.unproductive_hours)

    @property
    def special_total(self) -> float:
        return total_hours(self.special_hours)

    @property
    def worked_total(self) -> float:
        return self.productive_total + self.unproductive_total

    @property
    def has_hours(self) -> bool:
        return self.worked_total > 0

    @property
    def has_absence(self) -> bool:
        return bool(self.absence_reason)

    @property
    def is_empty(self) -> bool:
        return not self.has_hours and not self.has_absence


@dataclass(frozen=True)
class LaborEntry:
    """Persisted row of the ``daily-labor`` collection."""

    entry_id: str
    daily_report_id: str
    employee_id: str
    productive_hours: Dict[str, float] = field(default_factory=dict)
    unproductive_hours: Dict[str, float] = field(default_factory=dict)
    special_hours: Dict[str, float] = field(default_factory=dict)
    absence_reason: Optional[str] = None
    manual: bool = False

    def to_state(self) -> EntryState:
        return EntryState(
            productive_hours=dict(self.productive_hours),
            unproductive_hours=dict(self.unproductive_hours),
            special_hours=dict(self.special_hours),
            absence_reason=self.absence_reason,
            manual=self.manual,
        )
