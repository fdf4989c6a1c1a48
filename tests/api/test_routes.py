from __future__ import annotations

import pytest

from conftest import InMemoryAudit, InMemoryDirectoryStore
from src.kpt_attendance.kpt_attendance.attendance import service as attendance_service_module
from src.kpt_attendance.kpt_attendance.container import build_container
from src.kpt_attendance.kpt_attendance.core.enums import Branch, Role, StudentStatus
from src.kpt_attendance.kpt_attendance.core.exceptions import StorageUnavailableError
from src.kpt_attendance.kpt_attendance.main import create_app
from src.kpt_attendance.kpt_attendance.students.model import Student
from src.kpt_attendance.kpt_attendance.users.model import User

PASSWORD = "password123"


def _users():
    return [
        User(id="u-admin", username="admin", password=PASSWORD, role=Role.SUPER_ADMIN, name="Super Admin"),
        User(id="hod-cs", username="hodcs", password=PASSWORD, role=Role.HOD, name="Prof. R", department=Branch.CS),
        User(
            id="fac-cs-1",
            username="faccs1",
            password=PASSWORD,
            role=Role.FACULTY,
            name="Suresh Kumar",
            department=Branch.CS,
        ),
    ]


def _students():
    return [
        Student(id="s1", name="Aarav", roll_number="23001", reg_number="103CS23001", branch=Branch.CS, semester=6),
        Student(id="s2", name="Bhavya", roll_number="23002", reg_number="103CS23002", branch=Branch.CS, semester=1),
    ]


@pytest.fixture
def store():
    return InMemoryDirectoryStore(users=_users(), students=_students(), subjects=["Maths"])


@pytest.fixture
def client(monkeypatch, store, audit, fixed_now):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setattr(attendance_service_module, "now_local", lambda: fixed_now)
    app = create_app(build_container(store=store, audit=audit))
    return app.test_client()


def _login(client, username="admin"):
    resp = client.post("/api/login", json={"username": username, "password": PASSWORD})
    assert resp.status_code == 200
    return resp


def test_requires_login(client):
    assert client.get("/api/students").status_code == 401


def test_bad_login_is_generic(client):
    resp = client.post("/api/login", json={"username": "ghost", "password": "x"})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid username or password"


def test_hod_denial_carries_reset_branch(client):
    _login(client, "hodcs")

    resp = client.get("/api/reports", query_string={"branch": "EC", "semester": 1})

    assert resp.status_code == 403
    assert resp.get_json()["reset_branch"] == "CS"


def test_promotion_roundtrip_over_http(client, store):
    _login(client)

    resp = client.post("/api/promotion", json={"cycle": "ODD"})
    assert resp.status_code == 200
    log_id = resp.get_json()["log"]["id"]

    archived = client.get("/api/archive").get_json()["students"]
    assert [s["id"] for s in archived] == ["s1"]

    assert client.post(f"/api/promotion/logs/{log_id}/undo").status_code == 200
    assert store.get_students() == _students()


def test_faculty_cannot_open_recycle_bin_or_history(client, store):
    archived = Student(
        id="e9",
        name="Eshan",
        roll_number="23009",
        reg_number="103EC23009",
        branch=Branch.EC,
        semester=6,
        status=StudentStatus.ARCHIVED,
    )
    store.save_students([*store.get_students(), archived])
    _login(client, "faccs1")

    assert client.get("/api/archive").status_code == 403
    assert client.get("/api/promotion/logs").status_code == 403


def test_bulk_import_errors_are_listed(client, store):
    _login(client, "hodcs")

    resp = client.post("/api/students/import", json={"text": "A, 103CS23009, cse\nB, 103EC23001, ece"})

    assert resp.status_code == 400
    assert resp.get_json()["errors"] == [f"Row 2: Boundary Violation! You can only upload for {Branch.CS.value}"]
    assert len(store.get_students()) == 2


def test_attendance_save_and_csv_export(client, store):
    _login(client)

    resp = client.post(
        "/api/attendance/session",
        json={"branch": "CS", "semester": 1, "subject": "Maths", "marks": {"s2": "P"}},
    )
    assert resp.status_code == 200
    assert resp.get_json()["saved"] == 1

    csv_resp = client.get("/api/reports.csv", query_string={"branch": "CS", "semester": 1})
    assert csv_resp.status_code == 200
    assert "KPT_Report_CS_SEM1.csv" in csv_resp.headers["Content-Disposition"]
    assert csv_resp.data.decode("utf-8-sig").splitlines()[1] == "23002,Bhavya,1,1,100.00%,Eligible"


def test_storage_outage_maps_to_503(client, store, monkeypatch):
    _login(client)

    def boom():
        raise StorageUnavailableError("down")

    monkeypatch.setattr(store, "get_students", boom)

    assert client.get("/api/students").status_code == 503


def test_activity_log_lists_newest_first(client):
    _login(client)
    client.post("/api/promotion", json={"cycle": "EVEN"})

    entries = client.get("/api/activity").get_json()["activity"]

    assert entries[0]["action"] == "Performed Global SEM Promotion to EVEN Cycle"
