from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..activities.model import Activity
from ..activities.repository import ActivityRepository
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_REPORTS_LIMIT
from ..core.enums import ActivityState, AttendanceMark, EnrollmentStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..enrollments.repository import EnrollmentRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import ImpactMetrics, ImpactReport, NewImpactReport
from .repository import ImpactReportRepository

logger = logging.getLogger(__name__)


def total_hours(activity: Activity, attended: int) -> float:
    """Activity duration in hours times attendees, rounded to 2 decimals."""
    if not activity.start_at or not activity.end_at or attended <= 0:
        return 0
    duration = (activity.end_at - activity.start_at).total_seconds() / 3600
    if duration <= 0:
        return 0
    return round(duration * attended, 2)


def _parse_beneficiaries(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if isinstance(value, bool) or not math.isfinite(number) or number < 0:
        raise ValidationError("beneficiarios debe ser un numero mayor o igual a cero")
    return int(number) if number.is_integer() else number


@dataclass(frozen=True)
class ReportView:
    report: ImpactReport
    activity: Optional[Activity] = None
    creator: Optional[User] = None


class ImpactReportService:
    def __init__(
        self,
        reports: ImpactReportRepository,
        activities: ActivityRepository,
        enrollments: EnrollmentRepository,
        attendance: AttendanceRepository,
        users: UserRepository,
    ):
        self._reports = reports
        self._activities = activities
        self._enrollments = enrollments
        self._attendance = attendance
        self._users = users

    def compute_metrics(self, activity: Activity) -> ImpactMetrics:
        attendance = self._attendance.get_by_activity(activity.activity_id)
        attended = len(
            {e.user_id for e in attendance.entries if e.mark == AttendanceMark.PRESENTE} if attendance else set()
        )
        return ImpactMetrics(
            invited=self._enrollments.count_by_activity(activity.activity_id),
            confirmed=self._enrollments.count_by_activity(
                activity.activity_id, EnrollmentStatus.CONFIRMADO.value
            ),
            attended=attended,
            total_hours=total_hours(activity, attended),
        )

    def create_report(
        self,
        activity_id: str,
        *,
        actor_id: str,
        beneficiaries: Any = None,
        notes: Any = None,
    ) -> ImpactReport:
        if not activity_id:
            raise ValidationError("actividadId requerido")
        activity = self._activities.get_by_id(activity_id)
        if not activity:
            raise NotFoundError("Actividad no encontrada")

        finished = activity.state == ActivityState.CLOSED.value or (
            activity.end_at is not None and activity.end_at <= now_utc()
        )
        if not finished:
            raise ValidationError("La actividad debe estar finalizada para generar el reporte de impacto")

        attendance = self._attendance.get_by_activity(activity_id)
        if not attendance or not attendance.entries:
            raise ValidationError("No hay registros de asistencia para esta actividad")

        if self._reports.get_by_activity(activity_id):
            raise ConflictError("Ya existe un reporte de impacto para esta actividad")

        beneficiaries = _parse_beneficiaries(beneficiaries)
        computed = self.compute_metrics(activity)
        metrics = ImpactMetrics(
            invited=computed.invited,
            confirmed=computed.confirmed,
            attended=computed.attended,
            total_hours=computed.total_hours,
            beneficiaries=beneficiaries,
            notes=None if notes is None else str(notes),
        )
        report = self._reports.create(
            NewImpactReport(activity_id=str(activity_id), metrics=metrics, created_by=str(actor_id))
        )
        logger.info("impact report created activity=%s hours=%s", activity_id, metrics.total_hours)
        return report

    def list_reports(self, limit: int = DEFAULT_REPORTS_LIMIT) -> list[ReportView]:
        reports: Sequence[ImpactReport] = self._reports.list_recent(limit)
        activities = self._activities.get_many([r.activity_id for r in reports])
        creators = self._users.get_many([r.created_by for r in reports])
        return [ReportView(r, activities.get(r.activity_id), creators.get(r.created_by)) for r in reports]
