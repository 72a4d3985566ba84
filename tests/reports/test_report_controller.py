from __future__ import annotations

import pytest

from src.labor_reports.labor_reports.main import create_app

CLERK_SESSION = {
    "user_id": "u-clerk",
    "email": "clerk@example.com",
    "employee_id": "e1",
    "permissions": ["dailyReports", "dailyReports.save", "dailyReports.notify", "dailyReports.moveEmployee"],
}


@pytest.fixture
def client(monkeypatch, store):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(store=store)
    return app.test_client()


def _login(client, **session_data):
    with client.session_transaction() as sess:
        sess.update(session_data)


def test_requires_signed_in_principal(client):
    resp = client.get("/api/daily-reports?date=2026-03-10&project_id=prj-1&crew_id=crew-c")
    assert resp.status_code == 401
    assert resp.get_json()["ok"] is False


def test_open_returns_rows(client):
    _login(client, **CLERK_SESSION)
    resp = client.get("/api/daily-reports?date=2026-03-10&project_id=prj-1&crew_id=crew-c")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert [r["employee_id"] for r in data["rows"]] == ["e1", "e2"]
    assert data["status"] is None


def test_bad_date_is_a_validation_error(client):
    _login(client, **CLERK_SESSION)
    resp = client.get("/api/daily-reports?date=10-03-2026&project_id=prj-1&crew_id=crew-c")
    assert resp.status_code == 400


def test_save_then_notify_round_trip(client):
    _login(client, **CLERK_SESSION)
    payload = {
        "date": "2026-03-10",
        "project_id": "prj-1",
        "crew_id": "crew-c",
        "rows": [
            {"employee_id": "e1", "productive_hours": {"ph-p": 4}},
            {"employee_id": "e2", "absence_reason": "VAC"},
        ],
    }

    resp = client.post("/api/daily-reports/save", json=payload)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "PENDING"

    resp = client.post("/api/daily-reports/notify", json=payload)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["locked"] is True


def test_notify_guard_failure_lists_violations(client):
    _login(client, **CLERK_SESSION)
    resp = client.post(
        "/api/daily-reports/notify",
        json={
            "date": "2026-03-10",
            "project_id": "prj-1",
            "crew_id": "crew-c",
            "rows": [{"employee_id": "e1", "productive_hours": {"ph-p": 4}}],
        },
    )

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["violations"] == [
        {"kind": "MISSING_NOVELTY", "employee_id": "e2", "employee_name": "Benitez, Bruno"}
    ]


def test_special_hours_over_worked_hours_rejected(client):
    _login(client, **CLERK_SESSION)
    resp = client.post(
        "/api/daily-reports/save",
        json={
            "date": "2026-03-10",
            "project_id": "prj-1",
            "crew_id": "crew-c",
            "rows": [{"employee_id": "e1", "productive_hours": {"ph-p": 4}, "special_hours": {"SP": 6}}],
        },
    )
    assert resp.status_code == 400
    assert "6h" in resp.get_json()["error"]


def test_missing_capability_is_forbidden(client):
    _login(client, user_id="u-view", email="view@example.com", permissions=["dailyReports"])
    resp = client.delete("/api/daily-reports/anything")
    assert resp.status_code == 403


def test_failed_commit_is_retryable_error(client, store):
    _login(client, **CLERK_SESSION)
    store.fail_next_commit()
    resp = client.post(
        "/api/daily-reports/save", json={"date": "2026-03-10", "project_id": "prj-1", "crew_id": "crew-c"}
    )
    assert resp.status_code == 503


def test_move_destinations_and_move(client):
    _login(client, **CLERK_SESSION)
    client.post(
        "/api/daily-reports/save",
        json={"date": "2026-03-10", "project_id": "prj-1", "crew_id": "crew-c"},
    )

    resp = client.get("/api/daily-reports/move-destinations?date=2026-03-10&crew_id=crew-c")
    assert [c["crew_id"] for c in resp.get_json()["data"]] == ["crew-d", "crew-n"]

    resp = client.post(
        "/api/daily-reports/move",
        json={"date": "2026-03-10", "source_crew_id": "crew-c", "dest_crew_id": "crew-d", "employee_id": "e2"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["report_id"]


def test_export_returns_workbook(client):
    _login(client, **CLERK_SESSION)
    resp = client.get("/api/daily-reports/export?date=2026-03-10&project_id=prj-1&crew_id=crew-c")

    assert resp.status_code == 200
    assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert resp.data[:2] == b"PK"


def test_selector_options(client):
    _login(client, **CLERK_SESSION)
    resp = client.get("/api/daily-reports/options?project_id=prj-1")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert [p["value"] for p in data["projects"]] == ["prj-1"]
    assert data["crews"][0] == {"value": "all", "label": "All crews"}


def test_hours_on_inactive_phase_rejected(client):
    _login(client, **CLERK_SESSION)
    resp = client.post(
        "/api/daily-reports/save",
        json={
            "date": "2026-03-10",
            "project_id": "prj-1",
            "crew_id": "crew-c",
            "rows": [{"employee_id": "e1", "productive_hours": {"ph-q": 8}}],
        },
    )
    assert resp.status_code == 400
    assert "Phase Q" in resp.get_json()["error"]
