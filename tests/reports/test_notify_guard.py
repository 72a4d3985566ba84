from __future__ import annotations

import pytest

from src.labor_reports.labor_reports.catalogs.service import LegalTypes
from src.labor_reports.labor_reports.core.enums import GuardViolationKind
from src.labor_reports.labor_reports.core.exceptions import NotifyGuardError
from src.labor_reports.labor_reports.labor.model import EntryState
from src.labor_reports.labor_reports.labor.sheet import LaborSheet
from src.labor_reports.labor_reports.labor.validator import HourAllocationValidator
from src.labor_reports.labor_reports.reports.guard import NotifyGuard

NAMES = {"e1": "Alvarez, Ana", "e2": "Benitez, Bruno", "e3": "Castro, Carla"}


def _sheet(rows):
    return LaborSheet(
        legal=LegalTypes((), (), ()),
        validator=HourAllocationValidator(),
        rows=rows,
        name_of=NAMES.get,
    )


def test_passes_when_everyone_has_hours_or_absence():
    sheet = _sheet(
        {
            "e1": EntryState(productive_hours={"ph-p": 4.0}),
            "e2": EntryState(absence_reason="VAC"),
            "e3": EntryState(unproductive_hours={"UN": 2.0}),
        }
    )
    assert NotifyGuard().check(sheet, {"ph-p"}) == []


def test_unproductive_only_rows_do_not_need_an_active_phase():
    sheet = _sheet({"e3": EntryState(unproductive_hours={"UN": 8.0})})
    assert NotifyGuard().check(sheet, set()) == []


def test_zero_hours_count_as_missing():
    sheet = _sheet({"e1": EntryState(productive_hours={"ph-p": 0.0})})
    violations = NotifyGuard().check(sheet, {"ph-p"})
    assert [v.kind for v in violations] == [GuardViolationKind.MISSING_NOVELTY]


def test_enforce_aggregates_all_violations_in_message():
    sheet = _sheet(
        {
            "e1": EntryState(productive_hours={"ph-p": 5.0}),
            "e2": EntryState(),
            "e3": EntryState(),
        }
    )

    with pytest.raises(NotifyGuardError) as exc:
        NotifyGuard().enforce(sheet, set())

    assert len(exc.value.violations) == 3
    message = str(exc.value)
    assert "Benitez, Bruno; Castro, Carla" in message
    assert "no active phase: Alvarez, Ana" in message
