from __future__ import annotations

from datetime import date

import pytest

from conftest import ALICE, BOB, MANAGER, ORG_ID

from timesheet_system.core.enums import TimesheetStatus
from timesheet_system.main import create_app


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, user_id: int, role: str) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role
        sess["organization_id"] = ORG_ID


def test_requests_without_session_are_unauthorized(client):
    resp = client.get("/api/timesheets/1")

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Unauthorized"


def test_update_entry_returns_recomputed_day(client, alice_week):
    _login(client, MANAGER, "manager")

    resp = client.put(
        f"/api/timesheets/entries/{ALICE}_2026-03-02",
        json={"clockInTime": "08:30", "note": "badge reader down"},
    )

    assert resp.status_code == 200
    entry = resp.get_json()["entry"]
    assert entry["id"] == f"{ALICE}_2026-03-02"
    assert entry["work_minutes"] == 480
    assert entry["break_count"] == 1


def test_update_entry_on_approved_timesheet_is_forbidden(client, timesheet_repo, alice_week):
    timesheet_repo.add(ALICE, date(2026, 3, 1), date(2026, 3, 15), TimesheetStatus.APPROVED)
    _login(client, ALICE, "employee")

    resp = client.put(f"/api/timesheets/entries/{ALICE}_2026-03-02", json={"clockInTime": "08:00", "note": "x"})

    assert resp.status_code == 403
    assert resp.get_json()["reason"] == "status_not_editable"


def test_malformed_entry_id_is_bad_request(client):
    _login(client, MANAGER, "manager")

    resp = client.put("/api/timesheets/entries/not-a-key", json={"clockInTime": "08:00", "note": "x"})

    assert resp.status_code == 400


def test_get_timesheet_returns_fresh_totals(client, timesheet_repo, alice_week):
    ts = timesheet_repo.add(ALICE, date(2026, 3, 1), date(2026, 3, 15), cached_total_hours=3.0)
    _login(client, ALICE, "employee")

    body = client.get(f"/api/timesheets/{ts.timesheet_id}").get_json()

    assert body["totals"]["total_hours"] == 15.5
    assert len(body["entries"]) == 2


def test_missing_timesheet_is_not_found(client):
    _login(client, MANAGER, "manager")

    assert client.get("/api/timesheets/404").status_code == 404


def test_status_change_and_bulk(client, timesheet_repo):
    first = timesheet_repo.add(ALICE, date(2026, 3, 1), date(2026, 3, 15), TimesheetStatus.PENDING)
    second = timesheet_repo.add(BOB, date(2026, 3, 1), date(2026, 3, 15), TimesheetStatus.DRAFT)
    _login(client, MANAGER, "manager")

    resp = client.put(f"/api/timesheets/{first.timesheet_id}/status", json={"status": "rejected"})
    assert resp.status_code == 400

    resp = client.put(
        "/api/timesheets/bulk-status",
        json={"timesheet_ids": [first.timesheet_id, second.timesheet_id], "status": "approved"},
    )
    body = resp.get_json()
    assert resp.status_code == 200
    assert (body["updated"], body["failed"]) == (1, 1)
    assert body["results"][1]["reason"] == "status_not_editable"


def test_delete_draft(client, timesheet_repo):
    ts = timesheet_repo.add(ALICE, date(2026, 3, 1), date(2026, 3, 15))
    _login(client, ALICE, "employee")

    assert client.delete(f"/api/timesheets/{ts.timesheet_id}").status_code == 200
    assert ts.timesheet_id not in timesheet_repo.timesheets


def test_range_export_csv(client, alice_week):
    _login(client, MANAGER, "manager")

    resp = client.get("/api/timesheets/export?start_date=2026-03-01&end_date=2026-03-15")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert resp.headers["Content-Disposition"].startswith("attachment;")
    assert resp.data.decode().splitlines()[1].startswith("Alice Nguyen,2026-03-02,HQ")


def test_timesheet_export_pdf_is_inline(client, timesheet_repo, alice_week):
    ts = timesheet_repo.add(ALICE, date(2026, 3, 1), date(2026, 3, 15))
    _login(client, ALICE, "employee")

    resp = client.get(f"/api/timesheets/{ts.timesheet_id}/export?format=pdf")

    assert resp.status_code == 200
    assert resp.mimetype == "application/pdf"
    assert resp.headers["Content-Disposition"] == 'inline; filename="timesheet-2026-03-01.pdf"'
    assert resp.data.startswith(b"%PDF")


def test_export_requires_dates(client):
    _login(client, MANAGER, "manager")

    assert client.get("/api/timesheets/export").status_code == 400
