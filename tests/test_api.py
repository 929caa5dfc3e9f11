from __future__ import annotations

import base64
import io
from datetime import date
from types import SimpleNamespace

import cv2
import numpy as np
import pytest
from openpyxl import load_workbook
from werkzeug.security import generate_password_hash

from src.timeclock.timeclock.container import build_services
from src.timeclock.timeclock.core.enums import Role
from src.timeclock.timeclock.main import create_app
from src.timeclock.timeclock.users.model import User
from tests.helpers import InMemoryAttendance, InMemoryUsers


def _png_data_url() -> str:
    ok, buf = cv2.imencode(".png", np.full((24, 32, 3), 90, dtype=np.uint8))
    assert ok
    return "data:image/png;base64," + base64.b64encode(buf.tobytes()).decode("ascii")


@pytest.fixture
def repos():
    users = InMemoryUsers(
        [User("admin-1", "admin", "Ana Admin", Role.ADMIN, generate_password_hash("admin123"))]
    )
    return users, InMemoryAttendance()


@pytest.fixture
def client(monkeypatch, repos):
    monkeypatch.setenv("APP_ENV", "testing")
    users, attendance = repos
    settings = SimpleNamespace(EXPORT_TIMEZONE=None, GEO_TIMEOUT_SECONDS=1.0)
    app = create_app(build_services(users_repo=users, attendance_repo=attendance, settings=settings))
    app.config["TESTING"] = True
    return app.test_client()


def _register(client, cpf="123.456.789-09", name="Carla Souza"):
    return client.post("/api/register", json={"username": cpf, "password": "secret", "full_name": name})


def _login_admin(client):
    resp = client.post("/api/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200


def test_attendance_requires_login(client):
    resp = client.get("/api/attendance")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_register_logs_in_and_starts_with_clock_in(client):
    resp = _register(client)
    assert resp.status_code == 201
    assert resp.get_json()["user"]["username"] == "12345678909"

    me = client.get("/api/me").get_json()
    assert me["user"]["role"] == "EMPLOYEE"

    history = client.get("/api/attendance").get_json()
    assert history["next_kind"] == "IN"
    assert history["history"] == []


def test_duplicate_registration(client):
    _register(client)
    client.post("/api/logout")

    resp = _register(client, cpf="12345678909")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Este CPF/Usuário já está cadastrado"


def test_wrong_password(client):
    resp = client.post("/api/login", json={"username": "admin", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Usuário ou senha incorretos"


def test_clock_requires_photo_then_location(client, repos):
    _register(client)

    no_photo = client.post("/api/attendance/clock", json={"latitude": -23.5, "longitude": -46.6})
    assert no_photo.status_code == 400
    assert no_photo.get_json()["message"] == "Erro: Foto não encontrada."

    no_gps = client.post("/api/attendance/clock", json={"image": _png_data_url(), "location_error": 1})
    body = no_gps.get_json()
    assert no_gps.status_code == 400
    assert body["location_error"] == "PERMISSION_DENIED"
    assert body["message"] == "Erro: Localização necessária. Verifique seu GPS."

    assert repos[1].events == {}


def test_clock_in_then_out(client, repos):
    _register(client)
    payload = {"image": _png_data_url(), "latitude": -23.5, "longitude": -46.6}

    first = client.post("/api/attendance/clock", json=payload)
    assert first.status_code == 201
    assert first.get_json()["event"]["kind"] == "IN"
    assert first.get_json()["next_kind"] == "OUT"

    second = client.post("/api/attendance/clock", json=payload).get_json()
    assert second["event"]["kind"] == "OUT"
    assert sorted(h["kind"] for h in second["history"]) == ["IN", "OUT"]

    stored = next(iter(repos[1].events.values()))
    assert stored.photo.startswith("data:image/jpeg;base64,")


def test_admin_routes_reject_employees(client):
    _register(client)

    assert client.get("/api/admin/users").status_code == 403
    assert client.get("/api/admin/export").status_code == 403


def test_admin_cannot_toggle_own_role(client):
    _login_admin(client)

    resp = client.post("/api/admin/users/admin-1/role")

    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Você não pode alterar seu próprio nível de acesso."


def test_admin_promotes_employee(client, repos):
    _register(client)
    client.post("/api/logout")
    _login_admin(client)
    target = next(u for u in client.get("/api/admin/users").get_json()["users"] if u["role"] == "EMPLOYEE")

    resp = client.post(f"/api/admin/users/{target['user_id']}/role")

    assert resp.get_json()["user"]["role"] == "ADMIN"
    assert repos[0].get_by_id(target["user_id"]).role is Role.ADMIN


def test_admin_corrects_record_and_exports(client, repos):
    _register(client)
    client.post("/api/attendance/clock", json={"image": _png_data_url(), "latitude": -23.5, "longitude": -46.6})
    employee_id = client.get("/api/me").get_json()["user"]["user_id"]
    client.post("/api/logout")
    _login_admin(client)

    records = client.get(f"/api/admin/users/{employee_id}/records").get_json()["records"]
    assert len(records) == 1

    bad = client.post(f"/api/admin/records/{records[0]['event_id']}", json={"date": "2026-02-30", "time": "08:00", "kind": "IN"})
    assert bad.status_code == 400

    resp = client.post(
        f"/api/admin/records/{records[0]['event_id']}",
        json={"date": "2026-03-02", "time": "07:45", "kind": "IN"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["record"]["when"] == "02/03/2026 07:45:00"

    export = client.get("/api/admin/export?start=2026-03-01&end=2026-03-31")
    assert export.status_code == 200
    assert "Relatorio_2026-03-01_a_2026-03-31.xlsx" in export.headers["Content-Disposition"]
    ws = load_workbook(io.BytesIO(export.data)).active
    assert ws["A2"].value == "Carla Souza"
    assert ws["D2"].value == "07:45:00"


def test_export_of_empty_range_is_a_notice(client):
    _login_admin(client)

    resp = client.get("/api/admin/export?start=2020-01-01&end=2020-01-31")

    assert resp.status_code == 404
    assert resp.get_json()["notice"] is True


def test_export_with_bad_dates(client):
    _login_admin(client)

    assert client.get("/api/admin/export?start=garbage").status_code == 400
    assert client.get(f"/api/admin/export?start={date(2026, 3, 2)}&end=2026-03-01").status_code == 400


def test_read_outage_is_a_json_503(client, repos):
    _register(client)
    repos[1].fail_reads = True

    resp = client.get("/api/attendance")

    assert resp.status_code == 503
    assert resp.get_json()["success"] is False


def test_clock_reports_success_when_only_the_refresh_fails(client, repos, monkeypatch):
    _register(client)
    attendance = repos[1]
    store = attendance.insert_event

    def insert_then_lose_reads(event):
        store(event)
        attendance.fail_reads = True

    monkeypatch.setattr(attendance, "insert_event", insert_then_lose_reads)

    resp = client.post("/api/attendance/clock", json={"image": _png_data_url(), "latitude": -23.5, "longitude": -46.6})

    body = resp.get_json()
    assert resp.status_code == 201
    assert body["event"]["kind"] == "IN"
    assert body["history_stale"] is True
    assert body["next_kind"] == "OUT"
    assert len(attendance.events) == 1
