from __future__ import annotations

from datetime import datetime

import pytest

from src.labor_reports.labor_reports.approvals.gate import ApprovalGate
from src.labor_reports.labor_reports.approvals.model import ApprovalSlot
from src.labor_reports.labor_reports.auth.model import Capability
from src.labor_reports.labor_reports.auth.service import Authorizer, principal_from_claims
from src.labor_reports.labor_reports.core.enums import ApprovalRole, ApprovalState
from src.labor_reports.labor_reports.core.exceptions import AuthorizationError, PreconditionError

CAP = Capability.DAILY_REPORTS_APPROVE_CONTROL
NAMES = {"ctl-1": "Control, Carl", "ctl-2": "Other, Olga"}.get


@pytest.fixture
def gate():
    return ApprovalGate(Authorizer())


@pytest.fixture
def approver():
    return principal_from_claims(
        user_id="u-ctl", email="ctl@example.com", employee_id="ctl-1", permissions=[CAP.value]
    )


def _slot(**kwargs):
    kwargs.setdefault("required", True)
    return ApprovalSlot(role=ApprovalRole.CONTROL, **kwargs)


def test_view_offers_approve_to_designated_approver(gate, approver):
    view = gate.view(approver, _slot(designated_approver_id="ctl-1"), CAP, name_of=NAMES)
    assert view.state == ApprovalState.AWAITING_CALLER
    assert view.can_approve


def test_view_without_designated_approver_offers_to_any_capable_caller(gate, approver):
    assert gate.view(approver, _slot(), CAP, name_of=NAMES).can_approve


def test_view_shows_responsible_to_other_callers(gate, approver):
    view = gate.view(approver, _slot(designated_approver_id="ctl-2"), CAP, name_of=NAMES)
    assert view.state == ApprovalState.PENDING
    assert view.tooltip == "Responsible: Other, Olga"


def test_view_of_approved_slot_names_approver_and_time(gate, approver):
    slot = _slot(approved_by="ctl-1", approved_at=datetime(2026, 3, 11, 9, 30))
    view = gate.view(approver, slot, CAP, name_of=NAMES)
    assert view.state == ApprovalState.APPROVED
    assert view.label == "Control, Carl"
    assert view.tooltip == "Approved on 2026-03-11 09:30"


def test_view_of_slot_not_required(gate, approver):
    assert gate.view(approver, _slot(required=False), CAP, name_of=NAMES).state == ApprovalState.NOT_REQUIRED


def test_approve_records_identity_and_time(gate, approver):
    now = datetime(2026, 3, 11, 10, 0)
    slot = gate.approve(approver, _slot(designated_approver_id="ctl-1"), CAP, now=now)
    assert slot.approved_by == "ctl-1"
    assert slot.approved_at == now


def test_approve_rejections(gate, approver):
    with pytest.raises(PreconditionError):
        gate.approve(approver, _slot(required=False), CAP)
    with pytest.raises(PreconditionError):
        gate.approve(approver, _slot(approved_by="x"), CAP)
    with pytest.raises(AuthorizationError):
        gate.approve(approver, _slot(designated_approver_id="ctl-2"), CAP)
    with pytest.raises(AuthorizationError):
        gate.approve(approver, _slot(), Capability.DAILY_REPORTS_APPROVE_PM)


def test_missing_capability_wins_over_slot_state(gate):
    outsider = principal_from_claims(user_id="u-x", email="x@example.com", permissions=["dailyReports"])
    with pytest.raises(AuthorizationError):
        gate.approve(outsider, _slot(required=False), CAP)
    with pytest.raises(AuthorizationError):
        gate.approve(outsider, _slot(approved_by="ctl-1"), CAP)
