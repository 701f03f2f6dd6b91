from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..activities.model import Activity
from ..activities.repository import ActivityRepository
from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_CLOSE_REASON
from ..core.enums import ActivityState, EnrollmentStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..notifications.notifier import Notifier
from ..users.model import User
from ..users.repository import UserRepository
from .model import Enrollment, NewEnrollment
from .repository import EnrollmentRepository

logger = logging.getLogger(__name__)

# Statuses that still hold a seat and can be cancelled.
OPEN_STATUSES = (
    EnrollmentStatus.ACTIVA.value,
    EnrollmentStatus.INSCRITO.value,
    EnrollmentStatus.CONFIRMADO.value,
    EnrollmentStatus.PENDIENTE.value,
)


@dataclass(frozen=True)
class EnrollmentView:
    enrollment: Enrollment
    user: Optional[User] = None
    activity: Optional[Activity] = None


@dataclass(frozen=True)
class CloseResult:
    activity: Activity
    notified: int
    emails_sent: tuple[str, ...]
    reason: str


class EnrollmentService:
    def __init__(
        self,
        enrollments: EnrollmentRepository,
        activities: ActivityRepository,
        users: UserRepository,
        notifier: Notifier,
    ):
        self._enrollments = enrollments
        self._activities = activities
        self._users = users
        self._notifier = notifier

    def _views(self, enrollments: Sequence[Enrollment]) -> list[EnrollmentView]:
        users = self._users.get_many([e.user_id for e in enrollments])
        activities = self._activities.get_many([e.activity_id for e in enrollments])
        return [EnrollmentView(e, users.get(e.user_id), activities.get(e.activity_id)) for e in enrollments]

    @staticmethod
    def _check_owner(user_id: str, *, actor_id: str, actor_role: Role) -> None:
        if actor_role == Role.ESTUDIANTE and str(user_id) != str(actor_id):
            raise AuthorizationError("Forbidden")

    def enroll(self, user_id: str, activity_id: str, answers: Any = None) -> Enrollment:
        if not user_id:
            raise ValidationError("Usuario no autenticado")
        if not activity_id:
            raise ValidationError("actividadId requerido")

        activity = self._activities.get_by_id(activity_id)
        if not activity:
            raise NotFoundError("Actividad no encontrada")
        if activity.state != ActivityState.ACTIVA.value:
            raise ValidationError("La actividad no esta activa")
        if activity.capacity is not None and activity.capacity <= 0:
            raise ValidationError("No hay cupos disponibles")
        if self._enrollments.get_for_user_and_activity(user_id, activity_id):
            raise ConflictError("Ya estas inscrito en esta actividad")

        if not self._activities.reserve_seat(activity_id):
            # lost a race: re-read to report the accurate reason
            current = self._activities.get_by_id(activity_id)
            if not current:
                raise NotFoundError("Actividad no encontrada")
            if current.state != ActivityState.ACTIVA.value:
                raise ValidationError("La actividad no esta activa")
            raise ValidationError("No hay cupos disponibles")

        try:
            enrollment = self._enrollments.create(
                NewEnrollment(
                    user_id=str(user_id),
                    activity_id=str(activity_id),
                    status=EnrollmentStatus.ACTIVA.value,
                    answers=answers,
                )
            )
        except ConflictError:
            self._activities.release_seat(activity_id)
            raise
        logger.info("enrolled user=%s activity=%s", user_id, activity_id)
        return enrollment

    def cancel(
        self,
        enrollment_id: str,
        reason: Optional[str] = None,
        *,
        actor_id: str,
        actor_role: Role,
    ) -> Enrollment:
        current = self._enrollments.get_by_id(enrollment_id)
        if not current:
            raise NotFoundError("Inscripcion no encontrada")
        self._check_owner(current.user_id, actor_id=actor_id, actor_role=actor_role)

        cancelled = self._enrollments.cancel(
            enrollment_id,
            reason=(reason or "").strip() or None,
            cancellable=OPEN_STATUSES,
        )
        if not cancelled:
            raise ConflictError("La inscripcion no esta activa")
        self._activities.release_seat(cancelled.activity_id)
        logger.info("enrollment cancelled id=%s by=%s", enrollment_id, actor_id)
        return cancelled

    def get_by_id(self, enrollment_id: str, *, actor_id: str, actor_role: Role) -> EnrollmentView:
        enrollment = self._enrollments.get_by_id(enrollment_id)
        if not enrollment:
            raise NotFoundError("Inscripcion no encontrada")
        self._check_owner(enrollment.user_id, actor_id=actor_id, actor_role=actor_role)
        return self._views([enrollment])[0]

    def list_by_user(self, user_id: str, *, actor_id: str, actor_role: Role) -> list[EnrollmentView]:
        self._check_owner(user_id, actor_id=actor_id, actor_role=actor_role)
        return self._views(self._enrollments.list_by_user(user_id))

    def list_active_by_user(self, user_id: str, *, actor_id: str, actor_role: Role) -> list[EnrollmentView]:
        self._check_owner(user_id, actor_id=actor_id, actor_role=actor_role)
        return self._views(self._enrollments.list_by_user(user_id, [EnrollmentStatus.ACTIVA.value]))

    def list_by_activity(self, activity_id: str) -> list[EnrollmentView]:
        return self._views(self._enrollments.list_by_activity(activity_id))

    def close_activity(self, activity_id: str, reason: Optional[str] = None) -> CloseResult:
        """Close an activity once and finish its active enrollments.

        Users whose enrollment was active are notified; delivery problems
        are logged by the notifier and do not undo the close.
        """
        reason = (reason or "").strip() or DEFAULT_CLOSE_REASON
        activity = self._activities.get_by_id(activity_id)
        if not activity:
            raise NotFoundError("Actividad no encontrada")

        closed = self._activities.close(activity_id, reason=reason, closed_at=now_utc())
        if not closed:
            raise ValidationError("La actividad ya esta cerrada")

        finished = self._enrollments.close_active_for_activity(
            activity_id,
            active=EnrollmentStatus.ACTIVA.value,
            terminal=EnrollmentStatus.TERMINADA.value,
        )
        users = self._users.get_many([e.user_id for e in finished])

        sent = []
        for enrollment in finished:
            user = users.get(enrollment.user_id)
            if not user or not user.email:
                continue
            delivered = self._notifier.activity_closed(
                email=user.email,
                name=user.name,
                activity_title=closed.title,
                reason=reason,
            )
            if delivered:
                sent.append(user.email)

        logger.info("activity closed id=%s reason=%s enrollments_finished=%d", activity_id, reason, len(finished))
        return CloseResult(activity=closed, notified=len(finished), emails_sent=tuple(sent), reason=reason)
