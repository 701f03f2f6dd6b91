from __future__ import annotations

import csv
import io

import pytest

from ulsconnect.core.enums import Role
from ulsconnect.main import create_app


@pytest.fixture
def app(settings, notifier):
    return create_app(overrides=settings, notifier=notifier)


@pytest.fixture
def services(app):
    return app.extensions["ulsconnect"]


@pytest.fixture
def accounts(services):
    def _create(email, role):
        return services.user_service.create_account(email=email, password="secret1", name=email.split("@")[0], role=role)

    return {
        "admin": _create("admin@userena.cl", Role.ADMIN),
        "staff": _create("staff@userena.cl", Role.STAFF),
        "ana": _create("ana@alumnouls.cl", Role.ESTUDIANTE),
        "beto": _create("beto@alumnouls.cl", Role.ESTUDIANTE),
    }


@pytest.fixture
def login(app, accounts):
    def _login(who):
        client = app.test_client()
        resp = client.post("/login", json={"correoUniversitario": accounts[who].email, "contrasena": "secret1"})
        assert resp.status_code == 200
        return client

    return _login


def _create_activity(client, activity_data, **kwargs):
    resp = client.post("/api/activities", json=activity_data(**kwargs))
    assert resp.status_code == 201
    return resp.get_json()["data"]["id"]


def test_protected_routes_require_session(app):
    client = app.test_client()

    resp = client.get("/api/activities")

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "error": "Unauthorized"}


def test_login_rejects_bad_password(app, accounts):
    resp = app.test_client().post("/login", json={"correoUniversitario": "ana@alumnouls.cl", "contrasena": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_login_accepts_form_aliases(app, accounts):
    client = app.test_client()

    resp = client.post("/login", data={"email": "staff@userena.cl", "password": "secret1"})

    assert resp.get_json()["data"]["rol"] == "staff"
    assert client.get("/me").get_json()["data"]["correoUniversitario"] == "staff@userena.cl"


def test_students_cannot_manage_activities(login, activity_data):
    resp = login("ana").post("/api/activities", json=activity_data())
    assert resp.status_code == 403


def test_blocked_session_is_cut_off(login, services, accounts):
    client = login("ana")
    services.user_service.set_blocked(accounts["ana"].user_id, True)

    assert client.get("/me").status_code == 403


def test_unknown_route_returns_json(app):
    resp = app.test_client().get("/does-not-exist")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_enroll_twice_conflicts(login, activity_data):
    staff = login("staff")
    activity_id = _create_activity(staff, activity_data, capacity=5)
    ana = login("ana")

    first = ana.post(f"/api/activities/{activity_id}/enroll")
    second = ana.post(f"/api/activities/{activity_id}/enroll")

    assert first.status_code == 201
    assert second.status_code == 409
    assert staff.get(f"/api/activities/{activity_id}").get_json()["data"]["capacidad"] == 4


def test_students_only_see_their_own_enrollments(login, accounts, activity_data):
    activity_id = _create_activity(login("staff"), activity_data)
    ana = login("ana")
    enrollment_id = ana.post(f"/api/activities/{activity_id}/enroll").get_json()["data"]["id"]
    beto = login("beto")

    assert beto.get(f"/api/inscripciones/{enrollment_id}").status_code == 403
    assert beto.get(f"/api/inscripciones/usuario/{accounts['ana'].user_id}").status_code == 403
    assert beto.delete(f"/api/inscripciones/{enrollment_id}").status_code == 403

    own = ana.get(f"/api/inscripciones/usuario/{accounts['ana'].user_id}/activas").get_json()["data"]
    assert [e["id"] for e in own] == [enrollment_id]

    cancelled = ana.delete(f"/api/inscripciones/{enrollment_id}", json={"motivo": "viaje"})
    assert cancelled.get_json()["data"]["estado"] == "cancelada"
    assert ana.delete(f"/api/inscripciones/{enrollment_id}").status_code == 409


def test_full_activity_flow(login, accounts, notifier, activity_data):
    staff = login("staff")
    activity_id = _create_activity(staff, activity_data, capacity=10, hours=2)
    for who in ("ana", "beto"):
        assert login(who).post(f"/api/activities/{activity_id}/enroll").status_code == 201

    att = staff.post("/attendance/create", json={"actividadId": activity_id}).get_json()["data"]
    assert len(att["inscripciones"]) == 2
    taken = staff.post(
        "/attendance/take",
        json={"attendanceId": att["id"], "presentes": [accounts["ana"].user_id]},
    ).get_json()["data"]
    marks = {e["usuario"]["id"]: e["asistencia"] for e in taken["inscripciones"]}
    assert marks == {accounts["ana"].user_id: "presente", accounts["beto"].user_id: "ausente"}

    closed = staff.post(f"/api/activities/{activity_id}/close", json={"motivo": "cupo_completo"})
    assert closed.status_code == 200
    body = closed.get_json()["data"]
    assert body["actividad"]["estado"] == "closed"
    assert body["inscritosPendientesNotificados"] == 2
    assert sorted(body["emailsEnviados"]) == ["ana@alumnouls.cl", "beto@alumnouls.cl"]
    assert {n[0] for n in notifier.sent} == {"activity_closed"}
    assert staff.post(f"/api/activities/{activity_id}/close").status_code == 400

    scored = staff.post(f"/api/activities/{activity_id}/puntuar", json={}).get_json()["data"]
    assert (scored["totalProcesados"], scored["totalAplicados"]) == (2, 2)
    again = staff.post(f"/api/activities/{activity_id}/puntuar", json={}).get_json()["data"]
    assert again["totalAplicados"] == 0
    assert login("ana").get("/volunteer/score").get_json()["data"]["puntos"] == 10

    report = staff.post("/admin/impact-reports", json={"actividadId": activity_id, "beneficiarios": 40})
    assert report.status_code == 201
    assert report.get_json()["reporte"]["metricas"]["horasTotales"] == 2
    duplicate = staff.post("/admin/impact-reports", json={"actividadId": activity_id})
    assert duplicate.status_code == 409
    assert duplicate.get_json()["error"] == "Ya existe un reporte de impacto para esta actividad"

    listed = staff.get("/admin/impact-reports").get_json()["data"]
    assert len(listed) == 1


def test_attendance_export_is_csv(login, accounts, activity_data):
    staff = login("staff")
    activity_id = _create_activity(staff, activity_data)
    login("ana").post(f"/api/activities/{activity_id}/enroll")
    att = staff.post("/attendance/create", json={"actividadId": activity_id}).get_json()["data"]
    staff.post("/attendance/take", json={"attendanceId": att["id"], "justificadas": [accounts["ana"].user_id]})

    resp = staff.get(f"/admin/panel/export/attendance?actividadId={activity_id}")

    assert resp.mimetype == "text/csv"
    assert "attachment" in resp.headers["Content-Disposition"]
    rows = list(csv.DictReader(io.StringIO(resp.data.decode("utf-8-sig"))))
    assert len(rows) == 1
    assert rows[0]["Correo Usuario"] == "ana@alumnouls.cl"
    assert rows[0]["Asistencia"] == "justificada"
    assert rows[0]["Registrado Por"] == "staff"


def test_registration_review_flow(app, login):
    public = app.test_client()
    created = public.post(
        "/auth/request",
        json={"correoUniversitario": "nuevo@alumnouls.cl", "contrasena": "secreta1", "nombre": "Nuevo"},
    )
    assert created.status_code == 201
    assert "contrasenaHash" not in created.get_json()["data"]

    assert login("ana").get("/auth/requests").status_code == 403

    admin = login("admin")
    (pending,) = admin.get("/auth/requests").get_json()["data"]
    assert admin.post(f"/auth/requests/{pending['id']}/approve").status_code == 200
    assert admin.post(f"/auth/requests/{pending['id']}/approve").status_code == 400

    resp = app.test_client().post("/login", json={"correoUniversitario": "nuevo@alumnouls.cl", "contrasena": "secreta1"})
    assert resp.status_code == 200


def test_admin_panel_summary(login, activity_data):
    staff = login("staff")
    _create_activity(staff, activity_data)

    panel = login("admin").get("/admin/panel").get_json()["panel"]

    assert panel["summary"]["totalActivities"] == 1
    assert login("ana").get("/admin/panel").status_code == 403
