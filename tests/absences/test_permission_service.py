from __future__ import annotations

from datetime import date, datetime

import pytest

from src.labor_reports.labor_reports.absences.service import PermissionInput
from src.labor_reports.labor_reports.core.enums import ActivityFilter, ApprovalRole, ApprovalState, PermissionStatus
from src.labor_reports.labor_reports.core.exceptions import AuthorizationError, PreconditionError, ValidationError


@pytest.fixture
def service(container):
    return container.permission_service


def _input(employee_id="e1", start=(2026, 3, 1), end=(2026, 3, 5), **kwargs):
    return PermissionInput(
        employee_id=employee_id,
        absence_type_id=kwargs.pop("absence_type_id", "VAC"),
        start_date=date(*start),
        end_date=date(*end),
        **kwargs,
    )


def test_create_and_list(service, clerk):
    permission_id = service.create(clerk, _input(observations="  family trip "))

    rows = service.list(clerk, today=date(2026, 3, 3))
    assert len(rows) == 1
    assert rows[0]["permission_id"] == permission_id
    assert rows[0]["employee"] == "Ana Alvarez (No: 101)"
    assert rows[0]["absence_type"] == "Vacation"
    assert rows[0]["observations"] == "family trip"
    assert rows[0]["status"] == PermissionStatus.NOT_APPROVED.value


def test_shared_boundary_day_is_an_overlap(service, clerk):
    service.create(clerk, _input(start=(2026, 3, 1), end=(2026, 3, 5)))

    with pytest.raises(ValidationError) as exc:
        service.create(clerk, _input(start=(2026, 3, 5), end=(2026, 3, 8)))
    assert "overlap" in str(exc.value)


def test_contained_range_is_an_overlap(service, clerk):
    service.create(clerk, _input(start=(2026, 3, 1), end=(2026, 3, 31)))
    with pytest.raises(ValidationError):
        service.create(clerk, _input(start=(2026, 3, 10), end=(2026, 3, 12)))


def test_adjacent_ranges_and_other_employees_are_allowed(service, clerk):
    service.create(clerk, _input(start=(2026, 3, 1), end=(2026, 3, 5)))
    service.create(clerk, _input(start=(2026, 3, 6), end=(2026, 3, 8)))
    service.create(clerk, _input(employee_id="e2", start=(2026, 3, 1), end=(2026, 3, 5)))

    assert len(service.list(clerk, today=date(2026, 3, 1))) == 3


def test_update_excludes_the_record_being_edited(service, clerk):
    permission_id = service.create(clerk, _input(start=(2026, 3, 1), end=(2026, 3, 5)))

    service.update(clerk, permission_id, _input(start=(2026, 3, 2), end=(2026, 3, 7)))

    row = service.list(clerk, today=date(2026, 3, 2))[0]
    assert (row["start_date"], row["end_date"]) == ("2026-03-02", "2026-03-07")


def test_invalid_input_rejected(service, clerk):
    with pytest.raises(ValidationError):
        service.create(clerk, _input(start=(2026, 3, 5), end=(2026, 3, 1)))
    with pytest.raises(ValidationError):
        service.create(clerk, _input(employee_id="ghost"))
    with pytest.raises(ValidationError):
        service.create(clerk, _input(absence_type_id="NOPE"))
    with pytest.raises(ValidationError):
        service.create(clerk, _input(employee_id=""))


def test_delete(service, clerk):
    permission_id = service.create(clerk, _input())
    service.delete(clerk, permission_id)
    assert service.list(clerk) == []
    with pytest.raises(ValidationError):
        service.delete(clerk, permission_id)


def test_manage_capability_required(service, viewer):
    with pytest.raises(AuthorizationError):
        service.create(viewer, _input())


def test_supervisor_then_hr_approval(service, clerk, admin, controller_user):
    permission_id = service.create(clerk, _input(designated_hr_id="ctl-1"))

    approved = service.approve(admin, permission_id, ApprovalRole.SUPERVISOR, now=datetime(2026, 2, 20, 8, 0))
    assert approved.status == PermissionStatus.APPROVED_BY_SUPERVISOR
    assert approved.supervisor_approved_by == "u-admin"

    with pytest.raises(AuthorizationError):
        service.approve(admin, permission_id, ApprovalRole.HR)

    approved = service.approve(controller_user, permission_id, ApprovalRole.HR)
    assert approved.status == PermissionStatus.APPROVED_BY_HR
    assert approved.hr_approved_by == "ctl-1"

    with pytest.raises(PreconditionError):
        service.approve(controller_user, permission_id, ApprovalRole.HR)


def test_report_roles_do_not_apply_to_permissions(service, clerk, admin):
    permission_id = service.create(clerk, _input())
    with pytest.raises(ValidationError):
        service.approve(admin, permission_id, ApprovalRole.CONTROL)


def test_approval_views_follow_designated_approver(service, clerk, controller_user):
    service.create(clerk, _input(designated_hr_id="ctl-1", designated_supervisor_id="pm-1"))

    approvals = service.list(controller_user, today=date(2026, 3, 1))[0]["approvals"]
    assert approvals["humanResources"]["state"] == ApprovalState.AWAITING_CALLER.value
    assert approvals["supervisor"]["state"] == ApprovalState.PENDING.value
    assert approvals["supervisor"]["tooltip"] == "Responsible: Manager, Paula"


def test_search_and_activity_filters(service, clerk):
    service.create(clerk, _input(employee_id="e1", start=(2026, 3, 1), end=(2026, 3, 5)))
    service.create(clerk, _input(employee_id="e2", start=(2026, 3, 10), end=(2026, 3, 12)))

    today = date(2026, 3, 11)
    assert [r["employee_id"] for r in service.list(clerk, search="BENI", today=today)] == ["e2"]
    assert [r["employee_id"] for r in service.list(clerk, activity=ActivityFilter.ACTIVE, today=today)] == ["e2"]
    assert [r["employee_id"] for r in service.list(clerk, activity=ActivityFilter.INACTIVE, today=today)] == ["e1"]
    assert [r["employee_id"] for r in service.list(clerk, today=today)] == ["e2", "e1"]


def test_export_rows(service, clerk, admin):
    permission_id = service.create(clerk, _input())
    service.approve(admin, permission_id, ApprovalRole.SUPERVISOR)

    rows = service.export_rows(clerk, today=date(2026, 3, 1))
    assert rows == [
        {
            "Employee": "Ana Alvarez (No: 101)",
            "Reason": "Vacation",
            "From": "01/03/2026",
            "To": "05/03/2026",
            "Approved by supervisor": "Approved",
            "Approved by HR": "No",
            "Observations": "",
        }
    ]
