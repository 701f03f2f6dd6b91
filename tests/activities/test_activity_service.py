from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from ulsconnect.core.enums import ActivityState
from ulsconnect.core.exceptions import NotFoundError, ValidationError


def test_create_defaults_state_location_and_end(container, activity_data):
    payload = activity_data(capacity=5)
    del payload["fechaFin"]
    payload["fechaTermino"] = "2030-01-01T14:00:00Z"
    payload["fechaInicio"] = "2030-01-01T10:00:00Z"

    activity = container.activity_service.create(payload, creator_id="staff-1")

    assert activity.state == ActivityState.ACTIVA.value
    assert activity.capacity == 5
    assert activity.location.lng == 0
    assert activity.location.region == "Región de Coquimbo"
    assert activity.end_at == datetime(2030, 1, 1, 14, 0)
    assert activity.created_by == "staff-1"


def test_end_falls_back_to_start(container, activity_data):
    payload = activity_data()
    del payload["fechaFin"]

    activity = container.activity_service.create(payload, creator_id="staff-1")

    assert activity.end_at == activity.start_at


@pytest.mark.parametrize("missing", ["titulo", "descripcion", "area", "tipo", "fechaInicio"])
def test_create_requires_fields(container, activity_data, missing):
    payload = activity_data()
    payload[missing] = ""
    with pytest.raises(ValidationError):
        container.activity_service.create(payload, creator_id="staff-1")


def test_create_requires_location_names(container, activity_data):
    payload = activity_data(ubicacion={"nombreComuna": "Coquimbo"})
    with pytest.raises(ValidationError):
        container.activity_service.create(payload, creator_id="staff-1")


def test_negative_capacity_rejected(container, activity_data):
    with pytest.raises(ValidationError):
        container.activity_service.create(activity_data(capacity=-1), creator_id="staff-1")


def test_list_filters_case_insensitive(container, make_activity):
    make_activity(titulo="Taller de Reciclaje", tipo="Taller", area="Educacion")
    make_activity(titulo="Limpieza", tipo="Voluntariado", area="Medioambiente")

    svc = container.activity_service
    assert [a.title for a in svc.list(title="reciclaje")] == ["Taller de Reciclaje"]
    assert [a.title for a in svc.list(type="VOLUNT")] == ["Limpieza"]
    assert [a.title for a in svc.list(area="Educacion")] == ["Taller de Reciclaje"]
    assert len(svc.list(state="activa")) == 2


def test_update_ignores_creator(container, make_activity):
    activity = make_activity()

    updated = container.activity_service.update(activity.activity_id, {"titulo": "Nuevo", "creadoPor": "intruso"})

    assert updated.title == "Nuevo"
    assert updated.created_by == "staff-1"


def test_update_start_keeps_stored_end(container, make_activity):
    activity = make_activity(hours=2)
    new_start = activity.start_at - timedelta(hours=1)

    updated = container.activity_service.update(activity.activity_id, {"fechaInicio": new_start.isoformat()})

    assert updated.start_at == new_start
    assert updated.end_at == activity.end_at


def test_update_start_after_stored_end_rejected(container, make_activity):
    activity = make_activity(hours=2)
    late_start = activity.end_at + timedelta(hours=1)

    with pytest.raises(ValidationError):
        container.activity_service.update(activity.activity_id, {"fechaInicio": late_start.isoformat()})
    assert container.activity_service.get(activity.activity_id).end_at == activity.end_at


def test_update_cannot_reopen_or_close(container, make_activity):
    activity = make_activity()

    with pytest.raises(ValidationError):
        container.activity_service.update(activity.activity_id, {"estado": ActivityState.CLOSED.value})

    container.enrollment_service.close_activity(activity.activity_id)
    with pytest.raises(ValidationError):
        container.activity_service.update(activity.activity_id, {"estado": ActivityState.ACTIVA.value})
    assert container.activity_service.get(activity.activity_id).state == ActivityState.CLOSED.value

    unchanged = container.activity_service.update(activity.activity_id, {"estado": "closed", "titulo": "Cerrada"})
    assert unchanged.title == "Cerrada"


def test_delete_cascades_enrollments_and_attendance(container, make_activity, make_user):
    activity = make_activity()
    user = make_user()
    container.enrollment_service.enroll(user.user_id, activity.activity_id)
    container.attendance_service.create_attendance_list(activity.activity_id, "staff-1")

    container.activity_service.delete(activity.activity_id)

    assert container.enrollments_repo.count_by_activity(activity.activity_id) == 0
    assert container.attendance_repo.get_by_activity(activity.activity_id) is None
    with pytest.raises(NotFoundError):
        container.activity_service.get(activity.activity_id)


def test_delete_unknown_raises(container):
    with pytest.raises(NotFoundError):
        container.activity_service.delete("nope")
