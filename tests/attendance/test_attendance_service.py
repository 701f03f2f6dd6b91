from __future__ import annotations

import pytest

from ulsconnect.attendance.service import EntryUpdate, parse_updates
from ulsconnect.core.enums import AttendanceMark, Role
from ulsconnect.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def roster(container, make_activity, make_user):
    activity = make_activity()
    users = [make_user() for _ in range(3)]
    for u in users:
        container.enrollment_service.enroll(u.user_id, activity.activity_id)
    return activity, users


def _marks(att):
    return {e.user_id: e.mark for e in att.entries}


def test_create_list_from_active_enrollments(container, roster):
    activity, users = roster

    att = container.attendance_service.create_attendance_list(activity.activity_id, "staff-1")

    assert {e.user_id for e in att.entries} == {u.user_id for u in users}
    assert set(_marks(att).values()) == {AttendanceMark.AUSENTE}
    assert att.recorded_by == "staff-1"


def test_create_is_find_or_create(container, roster, make_user):
    activity, _ = roster
    first = container.attendance_service.create_attendance_list(activity.activity_id, "staff-1")
    container.enrollment_service.enroll(make_user().user_id, activity.activity_id)

    second = container.attendance_service.create_attendance_list(activity.activity_id, "staff-2")

    assert second.attendance_id == first.attendance_id
    assert len(second.entries) == 3
    assert second.recorded_by == "staff-1"


def test_create_requires_existing_activity_and_actor(container):
    with pytest.raises(NotFoundError):
        container.attendance_service.create_attendance_list("missing", "staff-1")
    with pytest.raises(ValidationError):
        container.attendance_service.create_attendance_list("missing", "")


def test_take_overlays_in_order_and_ignores_strangers(container, roster):
    activity, (a, b, c) = roster
    att = container.attendance_service.create_attendance_list(activity.activity_id, "staff-1")

    taken = container.attendance_service.take_attendance(
        att.attendance_id,
        present=[a.user_id, b.user_id, "stranger"],
        absent=[b.user_id],
        excused=[a.user_id],
        actor_id="staff-2",
    )

    assert _marks(taken) == {
        a.user_id: AttendanceMark.JUSTIFICADA,
        b.user_id: AttendanceMark.AUSENTE,
        c.user_id: AttendanceMark.AUSENTE,
    }
    assert taken.recorded_by == "staff-2"
    assert "stranger" not in _marks(taken)


def test_take_then_take_resets_unlisted_entries(container, roster):
    activity, (a, b, c) = roster
    att = container.attendance_service.create_attendance_list(activity.activity_id, "staff-1")
    container.attendance_service.take_attendance(att.attendance_id, present=[a.user_id, b.user_id], actor_id="s")

    second = container.attendance_service.take_attendance(att.attendance_id, present=[c.user_id], actor_id="s")

    assert _marks(second) == {
        a.user_id: AttendanceMark.AUSENTE,
        b.user_id: AttendanceMark.AUSENTE,
        c.user_id: AttendanceMark.PRESENTE,
    }


def test_take_rejects_non_list(container, roster):
    activity, _ = roster
    att = container.attendance_service.create_attendance_list(activity.activity_id, "staff-1")
    with pytest.raises(ValidationError):
        container.attendance_service.take_attendance(att.attendance_id, present="abc", actor_id="s")


def test_update_patches_and_reports_skipped(container, roster):
    activity, (a, b, c) = roster
    att = container.attendance_service.create_attendance_list(activity.activity_id, "staff-1")
    container.attendance_service.take_attendance(att.attendance_id, present=[c.user_id], actor_id="s")

    updates = parse_updates(
        [
            {"usuario": a.user_id},
            {"usuario": b.user_id, "asistencia": "tarde"},
            {"usuario": "ghost", "asistencia": "justificada"},
            {"asistencia": "presente"},
        ]
    )
    result = container.attendance_service.update_attendance_entries(att.attendance_id, updates, actor_id="s")

    assert _marks(result.attendance) == {
        a.user_id: AttendanceMark.PRESENTE,
        b.user_id: AttendanceMark.AUSENTE,
        c.user_id: AttendanceMark.PRESENTE,
    }
    assert result.skipped == ("ghost",)


def test_parse_updates_requires_list():
    with pytest.raises(ValidationError):
        parse_updates({"usuario": "x"})
    assert parse_updates([{"usuario": "u1", "asistencia": "justificada"}]) == [
        EntryUpdate(user_id="u1", mark=AttendanceMark.JUSTIFICADA)
    ]


def test_roster_only_changes_on_refresh(container, roster, make_user):
    activity, (a, b, c) = roster
    att = container.attendance_service.create_attendance_list(activity.activity_id, "staff-1")
    container.attendance_service.take_attendance(att.attendance_id, present=[a.user_id], actor_id="s")

    late = make_user()
    container.enrollment_service.enroll(late.user_id, activity.activity_id)
    e_b = container.enrollments_repo.get_for_user_and_activity(b.user_id, activity.activity_id)
    container.enrollment_service.cancel(e_b.enrollment_id, actor_id=b.user_id, actor_role=Role.ESTUDIANTE)

    assert len(container.attendance_service.get(att.attendance_id).entries) == 3

    refreshed = container.attendance_service.refresh_attendance_list(att.attendance_id, actor_id="s")

    assert _marks(refreshed) == {
        a.user_id: AttendanceMark.AUSENTE,
        c.user_id: AttendanceMark.AUSENTE,
        late.user_id: AttendanceMark.AUSENTE,
    }


def test_unknown_list(container):
    with pytest.raises(NotFoundError):
        container.attendance_service.take_attendance("missing", actor_id="s")
    with pytest.raises(ValidationError):
        container.attendance_service.refresh_attendance_list("", actor_id="s")
    assert container.attendance_service.get_for_activity("missing") is None
