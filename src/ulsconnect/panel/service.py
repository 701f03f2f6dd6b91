from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..activities.mapper import location_to_document
from ..activities.model import ActivityFilter
from ..activities.repository import ActivityRepository
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import isoformat, now_utc
from ..core.constants import DEFAULT_REPORTS_LIMIT
from ..core.enums import ActivityState
from ..enrollments.model import EnrollmentFilter
from ..enrollments.repository import EnrollmentRepository
from ..reports.mapper import to_json as report_to_json
from ..reports.service import ImpactReportService
from ..users.repository import UserRepository

LATEST_ENROLLMENTS = 10

ENROLLMENT_EXPORT_FIELDS = [
    "ID Inscripcion",
    "Estado",
    "Creado En",
    "Actividad ID",
    "Actividad",
    "Area",
    "Tipo",
    "Fecha Inicio",
    "Fecha Fin",
    "Usuario ID",
    "Nombre",
    "Correo",
    "Rol",
    "Telefono",
    "Carrera",
]

ATTENDANCE_EXPORT_FIELDS = [
    "ID Registro",
    "Actividad ID",
    "Actividad",
    "Area",
    "Tipo",
    "Usuario ID",
    "Usuario",
    "Correo Usuario",
    "Asistencia",
    "Fecha",
    "Registrado Por",
    "Correo Registrado Por",
]


@dataclass(frozen=True)
class ExportData:
    fieldnames: list[str]
    rows: list[dict[str, Any]]


@dataclass(frozen=True)
class VolunteerPanel:
    enrollments: list[dict[str, Any]]
    upcoming: list[dict[str, Any]]


def _is_upcoming(start: Optional[datetime], end: Optional[datetime], now: datetime) -> bool:
    if start and start >= now:
        return True
    if start and end and start <= now <= end:
        return True
    return bool(not start and end and end >= now)


class PanelService:
    """Read-only dashboards and CSV exports for admin/staff and volunteers."""

    def __init__(
        self,
        activities: ActivityRepository,
        enrollments: EnrollmentRepository,
        attendance: AttendanceRepository,
        users: UserRepository,
        reports: ImpactReportService,
    ):
        self._activities = activities
        self._enrollments = enrollments
        self._attendance = attendance
        self._users = users
        self._reports = reports

    def admin_summary(self) -> dict[str, Any]:
        now = now_utc()
        activities = list(self._activities.list(ActivityFilter()))
        by_status = self._enrollments.count_by_status()
        total_enrollments = sum(by_status.values())

        by_area: dict[str, dict[str, Any]] = {}
        for a in activities:
            bucket = by_area.setdefault(a.area or "Sin area", {"area": a.area or "Sin area", "total": 0, "activas": 0})
            bucket["total"] += 1
            if a.state != ActivityState.CLOSED.value:
                bucket["activas"] += 1
        by_type = Counter(a.type or "Sin tipo" for a in activities)
        by_month = Counter(a.start_at.strftime("%Y-%m") for a in activities if a.start_at)

        latest = list(self._enrollments.list_all(EnrollmentFilter()))[:LATEST_ENROLLMENTS]
        activity_map = {a.activity_id: a for a in activities}
        user_map = self._users.get_many([e.user_id for e in latest])

        return {
            "summary": {
                "totalActivities": len(activities),
                "activeActivities": sum(1 for a in activities if a.state != ActivityState.CLOSED.value),
                "upcomingActivities": sum(1 for a in activities if a.start_at and a.start_at >= now),
                "totalEnrollments": total_enrollments,
                "totalAttendance": self._attendance.count(),
            },
            "metrics": {
                "byArea": sorted(by_area.values(), key=lambda b: -b["total"]),
                "byType": [{"tipo": t, "total": n} for t, n in by_type.most_common()],
                "byMonth": [{"bucket": m, "total": by_month[m]} for m in sorted(by_month, reverse=True)[:12]],
            },
            "enrollments": {
                "total": total_enrollments,
                "byStatus": by_status,
                "latest": [
                    {
                        "enrollmentId": e.enrollment_id,
                        "status": e.status,
                        "createdAt": isoformat(e.created_at),
                        "activityId": e.activity_id,
                        "activityTitle": (
                            activity_map[e.activity_id].title
                            if e.activity_id in activity_map
                            else "Actividad no disponible"
                        ),
                        "userId": e.user_id,
                        "userName": user_map[e.user_id].name if e.user_id in user_map else "Usuario no disponible",
                    }
                    for e in latest
                ],
            },
            "impactReports": [
                report_to_json(v.report, activity=v.activity, creator=v.creator)
                for v in self._reports.list_reports(DEFAULT_REPORTS_LIMIT)
            ],
            "exports": {
                "enrollmentsCsv": "/admin/panel/export/enrollments",
                "attendanceCsv": "/admin/panel/export/attendance",
            },
        }

    def export_enrollments(self, *, status: Optional[str] = None, activity_id: Optional[str] = None) -> ExportData:
        enrollments = self._enrollments.list_all(EnrollmentFilter(status=status or None, activity_id=activity_id or None))
        activities = self._activities.get_many([e.activity_id for e in enrollments])
        users = self._users.get_many([e.user_id for e in enrollments])

        rows = []
        for e in enrollments:
            a = activities.get(e.activity_id)
            u = users.get(e.user_id)
            rows.append(
                {
                    "ID Inscripcion": e.enrollment_id,
                    "Estado": e.status,
                    "Creado En": isoformat(e.created_at) or "",
                    "Actividad ID": e.activity_id,
                    "Actividad": a.title if a else "",
                    "Area": a.area if a else "",
                    "Tipo": a.type if a else "",
                    "Fecha Inicio": (isoformat(a.start_at) if a else "") or "",
                    "Fecha Fin": (isoformat(a.end_at) if a else "") or "",
                    "Usuario ID": e.user_id,
                    "Nombre": u.name if u else "",
                    "Correo": u.email if u else "",
                    "Rol": u.role.value if u else "",
                    "Telefono": (u.phone if u else "") or "",
                    "Carrera": u.career if u else "",
                }
            )
        return ExportData(fieldnames=ENROLLMENT_EXPORT_FIELDS, rows=rows)

    def export_attendance(self, *, activity_id: Optional[str] = None, user_id: Optional[str] = None) -> ExportData:
        lists = self._attendance.list_all(activity_id or None)
        activities = self._activities.get_many([a.activity_id for a in lists])
        user_ids = {e.user_id for a in lists for e in a.entries} | {a.recorded_by for a in lists if a.recorded_by}
        users = self._users.get_many(list(user_ids))

        rows = []
        for att in lists:
            act = activities.get(att.activity_id)
            recorder = users.get(att.recorded_by) if att.recorded_by else None
            for entry in att.entries:
                if user_id and entry.user_id != str(user_id):
                    continue
                u = users.get(entry.user_id)
                rows.append(
                    {
                        "ID Registro": att.attendance_id,
                        "Actividad ID": att.activity_id,
                        "Actividad": act.title if act else "",
                        "Area": act.area if act else "",
                        "Tipo": act.type if act else "",
                        "Usuario ID": entry.user_id,
                        "Usuario": u.name if u else "",
                        "Correo Usuario": u.email if u else "",
                        "Asistencia": entry.mark.value,
                        "Fecha": isoformat(att.recorded_at) or "",
                        "Registrado Por": recorder.name if recorder else "",
                        "Correo Registrado Por": recorder.email if recorder else "",
                    }
                )
        return ExportData(fieldnames=ATTENDANCE_EXPORT_FIELDS, rows=rows)

    def volunteer_panel(self, user_id: str) -> VolunteerPanel:
        enrollments = self._enrollments.list_by_user(user_id)
        activities = self._activities.get_many([e.activity_id for e in enrollments])

        details = []
        for e in enrollments:
            a = activities.get(e.activity_id)
            details.append(
                {
                    "inscripcionId": e.enrollment_id,
                    "activityId": e.activity_id,
                    "activityTitle": a.title if a else "Actividad no disponible",
                    "activityType": a.type if a else None,
                    "area": a.area if a else None,
                    "location": location_to_document(a.location) if a else None,
                    "startDate": isoformat(a.start_at) if a else None,
                    "endDate": isoformat(a.end_at) if a else None,
                    "activityStatus": a.state if a else None,
                    "inscripcionStatus": e.status,
                    "_start": a.start_at if a else None,
                    "_end": a.end_at if a else None,
                }
            )

        now = now_utc()
        upcoming = [d for d in details if _is_upcoming(d["_start"], d["_end"], now)]
        upcoming.sort(key=lambda d: d["_start"] or d["_end"] or datetime.max)
        for d in details:
            d.pop("_start")
            d.pop("_end")
        return VolunteerPanel(enrollments=details, upcoming=upcoming)
