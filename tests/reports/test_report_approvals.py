from __future__ import annotations

from datetime import date, datetime

import pytest

from src.labor_reports.labor_reports.core.enums import ApprovalRole, ApprovalState
from src.labor_reports.labor_reports.core.exceptions import AuthorizationError, PreconditionError, ValidationError

DAY = date(2026, 3, 10)


@pytest.fixture
def service(container):
    return container.daily_report_service


def _notified_report(service, clerk):
    ws = service.open(clerk, DAY, "prj-1", "crew-c")
    ws.sheet.set_productive_hours("e1", "ph-p", 4)
    ws.sheet.set_absence("e2", "VAC")
    return service.notify(clerk, ws)


def test_designated_control_approver_records_approval(service, clerk, controller_user, container):
    report = _notified_report(service, clerk)

    approved = service.approve(controller_user, report.report_id, ApprovalRole.CONTROL, now=datetime(2026, 3, 11, 9, 30))

    assert approved.control_approved_by == "ctl-1"
    stored = container.reports_repo.get(report.report_id)
    assert stored.control_approved_by == "ctl-1"
    assert stored.control_approved_at == datetime(2026, 3, 11, 9, 30)
    assert stored.is_notified
    project = container.catalog_service.load().project("prj-1")
    assert stored.is_fully_approved(project)


def test_approval_is_one_way(service, clerk, controller_user):
    report = _notified_report(service, clerk)
    service.approve(controller_user, report.report_id, ApprovalRole.CONTROL)

    with pytest.raises(PreconditionError):
        service.approve(controller_user, report.report_id, ApprovalRole.CONTROL)


def test_role_not_enabled_by_project_cannot_be_approved(service, clerk, admin):
    report = _notified_report(service, clerk)

    with pytest.raises(PreconditionError):
        service.approve(admin, report.report_id, ApprovalRole.PROJECT_MANAGER)


def test_pending_reports_cannot_be_approved(service, clerk, controller_user):
    ws = service.open(clerk, DAY, "prj-1", "crew-c")
    report = service.save(clerk, ws)

    with pytest.raises(PreconditionError):
        service.approve(controller_user, report.report_id, ApprovalRole.CONTROL)


def test_only_designated_approver_may_approve(service, clerk, admin):
    report = _notified_report(service, clerk)

    with pytest.raises(AuthorizationError):
        service.approve(admin, report.report_id, ApprovalRole.CONTROL)


def test_permission_roles_do_not_apply_to_reports(service, clerk, admin):
    report = _notified_report(service, clerk)

    with pytest.raises(ValidationError):
        service.approve(admin, report.report_id, ApprovalRole.HR)


def test_approval_views_per_caller(service, clerk, controller_user):
    _notified_report(service, clerk)

    ws = service.open(controller_user, DAY, "prj-1", "crew-c")
    views = service.approval_views(controller_user, ws)
    assert views["control"]["state"] == ApprovalState.AWAITING_CALLER.value
    assert views["projectManager"]["state"] == ApprovalState.NOT_REQUIRED.value

    views = service.approval_views(clerk, ws)
    assert views["control"]["state"] == ApprovalState.PENDING.value
    assert views["control"]["tooltip"] == "Responsible: Control, Carl"


def test_caller_without_capability_is_forbidden_before_state_checks(service, clerk):
    ws = service.open(clerk, DAY, "prj-1", "crew-c")
    pending = service.save(clerk, ws)

    with pytest.raises(AuthorizationError):
        service.approve(clerk, pending.report_id, ApprovalRole.CONTROL)
    with pytest.raises(AuthorizationError):
        service.approve(clerk, pending.report_id, ApprovalRole.PROJECT_MANAGER)


def test_payload_reports_full_approval(service, clerk, controller_user):
    report = _notified_report(service, clerk)
    assert service.to_ui(clerk, service.open(clerk, DAY, "prj-1", "crew-c"))["fully_approved"] is False

    service.approve(controller_user, report.report_id, ApprovalRole.CONTROL)

    assert service.to_ui(clerk, service.open(clerk, DAY, "prj-1", "crew-c"))["fully_approved"] is True
