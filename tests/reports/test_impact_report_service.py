from __future__ import annotations

from datetime import timedelta

import pytest

from ulsconnect.common.datetime_utils import now_utc
from ulsconnect.core.enums import Role
from ulsconnect.core.exceptions import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def finished_activity(container, make_activity, make_user):
    """Closed 2h activity with 4 enrollments, 3 of them present."""
    activity = make_activity(hours=2)
    users = [make_user() for _ in range(4)]
    for u in users:
        container.enrollment_service.enroll(u.user_id, activity.activity_id)
    att = container.attendance_service.create_attendance_list(activity.activity_id, "staff-1")
    container.attendance_service.take_attendance(
        att.attendance_id, present=[u.user_id for u in users[:3]], actor_id="staff-1"
    )
    container.enrollment_service.close_activity(activity.activity_id)
    return activity


def test_report_metrics(container, finished_activity):
    report = container.report_service.create_report(
        finished_activity.activity_id, actor_id="staff-1", beneficiaries="120", notes="Buen trabajo"
    )

    m = report.metrics
    assert (m.invited, m.confirmed, m.attended) == (4, 0, 3)
    assert m.total_hours == 6
    assert m.beneficiaries == 120
    assert m.notes == "Buen trabajo"
    assert report.created_by == "staff-1"


def test_second_report_conflicts(container, finished_activity):
    container.report_service.create_report(finished_activity.activity_id, actor_id="staff-1")
    with pytest.raises(ConflictError):
        container.report_service.create_report(finished_activity.activity_id, actor_id="staff-2")


def test_activity_must_be_finished(container, make_activity, make_user):
    activity = make_activity()
    user = make_user()
    container.enrollment_service.enroll(user.user_id, activity.activity_id)
    container.attendance_service.create_attendance_list(activity.activity_id, "staff-1")

    with pytest.raises(ValidationError):
        container.report_service.create_report(activity.activity_id, actor_id="staff-1")


def test_past_end_date_counts_as_finished(container, make_activity, make_user):
    activity = make_activity(start=now_utc() - timedelta(days=2), hours=3)
    user = make_user()
    container.enrollment_service.enroll(user.user_id, activity.activity_id)
    att = container.attendance_service.create_attendance_list(activity.activity_id, "staff-1")
    container.attendance_service.take_attendance(att.attendance_id, present=[user.user_id], actor_id="staff-1")

    report = container.report_service.create_report(activity.activity_id, actor_id="staff-1")

    assert report.metrics.attended == 1
    assert report.metrics.total_hours == 3


def test_attendance_is_required(container, make_activity):
    activity = make_activity()
    container.enrollment_service.close_activity(activity.activity_id)

    with pytest.raises(ValidationError):
        container.report_service.create_report(activity.activity_id, actor_id="staff-1")


def test_unknown_activity(container):
    with pytest.raises(NotFoundError):
        container.report_service.create_report("missing", actor_id="staff-1")


@pytest.mark.parametrize("value", [-1, "abc", float("inf"), True])
def test_invalid_beneficiaries(container, finished_activity, value):
    with pytest.raises(ValidationError):
        container.report_service.create_report(
            finished_activity.activity_id, actor_id="staff-1", beneficiaries=value
        )
    assert container.reports_repo.get_by_activity(finished_activity.activity_id) is None


def test_list_reports_resolves_activity_and_creator(container, finished_activity, make_user):
    staff = make_user(Role.STAFF, name="Coordinadora")
    container.report_service.create_report(finished_activity.activity_id, actor_id=staff.user_id)

    (view,) = container.report_service.list_reports()

    assert view.activity.title == finished_activity.title
    assert view.creator.name == "Coordinadora"
