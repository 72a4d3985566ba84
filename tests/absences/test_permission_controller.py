from __future__ import annotations

import pytest

from src.labor_reports.labor_reports.main import create_app

MANAGER_SESSION = {
    "user_id": "u-hr",
    "email": "hr@example.com",
    "employee_id": "ctl-1",
    "permissions": ["permissions", "permissions.manage", "permissions.approveHR", "statistics"],
}


@pytest.fixture
def client(monkeypatch, store):
    monkeypatch.setenv("APP_ENV", "testing")
    client = create_app(store=store).test_client()
    with client.session_transaction() as sess:
        sess.update(MANAGER_SESSION)
    return client


def _create(client, start="2026-03-01", end="2026-03-05"):
    return client.post(
        "/api/permissions",
        json={"employee_id": "e1", "absence_type_id": "VAC", "start_date": start, "end_date": end},
    )


def test_create_list_approve_delete(client):
    resp = _create(client)
    assert resp.status_code == 201
    permission_id = resp.get_json()["permission_id"]

    rows = client.get("/api/permissions").get_json()["data"]
    assert [r["permission_id"] for r in rows] == [permission_id]

    resp = client.post(f"/api/permissions/{permission_id}/approve", json={"role": "humanResources"})
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "APPROVED_BY_HR"

    resp = client.put(
        f"/api/permissions/{permission_id}",
        json={"employee_id": "e1", "absence_type_id": "VAC", "start_date": "2026-03-01", "end_date": "2026-03-06"},
    )
    assert resp.status_code == 200

    assert client.delete(f"/api/permissions/{permission_id}").status_code == 200
    assert client.get("/api/permissions").get_json()["data"] == []


def test_overlap_is_rejected(client):
    _create(client)
    resp = _create(client, start="2026-03-05", end="2026-03-09")
    assert resp.status_code == 400


def test_unknown_filter_and_role_rejected(client):
    assert client.get("/api/permissions?activity=sometimes").status_code == 400
    permission_id = _create(client).get_json()["permission_id"]
    assert client.post(f"/api/permissions/{permission_id}/approve", json={"role": "boss"}).status_code == 400


def test_export_permissions_workbook(client):
    _create(client)
    resp = client.get("/api/permissions/export")
    assert resp.status_code == 200
    assert resp.data[:2] == b"PK"


def test_statistics_endpoint(client):
    resp = client.get("/api/statistics?start=2026-03-01&end=2026-03-31")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["report_count"] == 0
