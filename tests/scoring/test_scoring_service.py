from __future__ import annotations

import pytest

from ulsconnect.core.exceptions import NotFoundError, ValidationError
from ulsconnect.scoring.rules.standard_rule import StandardScoringRule


@pytest.fixture
def scored_activity(container, make_activity, make_user):
    activity = make_activity()
    present, excused, absent = make_user(), make_user(), make_user()
    for u in (present, excused, absent):
        container.enrollment_service.enroll(u.user_id, activity.activity_id)
    att = container.attendance_service.create_attendance_list(activity.activity_id, "staff-1")
    container.attendance_service.take_attendance(
        att.attendance_id,
        present=[present.user_id],
        excused=[excused.user_id],
        actor_id="staff-1",
    )
    return activity, present, excused, absent


def _points(container, user):
    return container.users_repo.get_by_id(user.user_id).points


def test_adjust_score_prepends_history(container, make_user):
    user = make_user()

    container.scoring_service.adjust_score(user.user_id, 5, reason="bono", actor_id="admin-1")
    result = container.scoring_service.adjust_score(user.user_id, "-2", reason="falta")

    assert result.applied
    assert result.user.points == 3
    assert [h.reason for h in result.user.point_history] == ["falta", "bono"]
    assert result.user.point_history[1].recorded_by == "admin-1"


def test_adjust_score_rejects_non_numeric_delta(container, make_user):
    user = make_user()
    with pytest.raises(ValidationError):
        container.scoring_service.adjust_score(user.user_id, "mucho")


def test_adjust_score_unknown_user_is_not_applied(container):
    result = container.scoring_service.adjust_score("missing", 5)
    assert result.user is None
    assert not result.applied


def test_history_is_capped(container, make_user):
    user = make_user()
    for i in range(55):
        container.scoring_service.adjust_score(user.user_id, 1, reason=f"r{i}")

    stored = container.users_repo.get_by_id(user.user_id)

    assert stored.points == 55
    assert len(stored.point_history) == 50
    assert stored.point_history[0].reason == "r54"


def test_score_activity_applies_default_rules(container, scored_activity):
    activity, present, excused, absent = scored_activity

    scoring = container.scoring_service.score_activity(activity.activity_id, actor_id="staff-1")

    assert scoring.processed == 3
    assert scoring.applied == 3
    assert scoring.rules == {"presente": 10, "justificada": 2, "ausente": -5}
    assert _points(container, present) == 10
    assert _points(container, excused) == 2
    assert _points(container, absent) == -5


def test_score_activity_twice_applies_once(container, scored_activity):
    activity, present, _, _ = scored_activity
    container.scoring_service.score_activity(activity.activity_id)

    again = container.scoring_service.score_activity(activity.activity_id)

    assert again.processed == 3
    assert again.applied == 0
    assert all(r["puntosAplicados"] == 0 for r in again.results)
    assert _points(container, present) == 10
    assert len(container.users_repo.get_by_id(present.user_id).point_history) == 1


def test_zero_points_are_skipped(container, scored_activity):
    activity, present, excused, absent = scored_activity
    rule = StandardScoringRule.from_payload({"presente": 20, "ausente": 0, "justificada": "x"})

    scoring = container.scoring_service.score_activity(activity.activity_id, rule=rule)

    by_user = {r["usuario"]: r for r in scoring.results}
    assert by_user[absent.user_id]["aplicado"] is False
    assert by_user[absent.user_id]["motivo"] == "Puntaje configurado en 0 o no numerico"
    assert _points(container, absent) == 0
    assert _points(container, present) == 20
    assert _points(container, excused) == 2


def test_score_activity_without_attendance(container, make_activity):
    activity = make_activity()
    with pytest.raises(NotFoundError):
        container.scoring_service.score_activity(activity.activity_id)


def test_get_score_and_leaderboard(container, make_user):
    low, high, blocked = make_user(name="Ana"), make_user(name="Bruno"), make_user(name="Carla")
    container.scoring_service.adjust_score(low.user_id, 3)
    container.scoring_service.adjust_score(high.user_id, 30)
    container.scoring_service.adjust_score(blocked.user_id, 100)
    container.user_service.set_blocked(blocked.user_id, True)
    for _ in range(5):
        container.scoring_service.adjust_score(low.user_id, 1)

    summary = container.scoring_service.get_score(low.user_id, limit=2)
    board = container.scoring_service.leaderboard()

    assert summary.user.points == 8
    assert len(summary.history) == 2
    assert [u.user_id for u in board][:2] == [high.user_id, low.user_id]
    assert blocked.user_id not in [u.user_id for u in board]
    with pytest.raises(NotFoundError):
        container.scoring_service.get_score("missing")
