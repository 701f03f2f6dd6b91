from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from ..activities.repository import ActivityRepository
from ..core.enums import AttendanceMark, EnrollmentStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..enrollments.repository import EnrollmentRepository
from .model import AttendanceEntry, AttendanceList
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryUpdate:
    user_id: str
    mark: AttendanceMark


@dataclass(frozen=True)
class UpdateResult:
    attendance: AttendanceList
    skipped: tuple[str, ...]


def _ids(values: Any, field_name: str) -> list[str]:
    if values is None:
        return []
    if not isinstance(values, (list, tuple)):
        raise ValidationError(f"{field_name} debe ser un array")
    return [str(v) for v in values if v]


def parse_updates(raw: Any) -> list[EntryUpdate]:
    """Turn `[{usuario, asistencia}]` into updates; status defaults to presente, unknown ones are dropped."""
    if not isinstance(raw, list):
        raise ValidationError("updates debe ser un array")
    out = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("usuario"):
            continue
        try:
            mark = AttendanceMark(item.get("asistencia") or AttendanceMark.PRESENTE.value)
        except ValueError:
            continue
        out.append(EntryUpdate(user_id=str(item["usuario"]), mark=mark))
    return out


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        enrollments: EnrollmentRepository,
        activities: ActivityRepository,
    ):
        self._attendance = attendance
        self._enrollments = enrollments
        self._activities = activities

    def _roster(self, activity_id: str) -> list[AttendanceEntry]:
        active = self._enrollments.list_by_activity(activity_id, [EnrollmentStatus.ACTIVA.value])
        seen = set()
        entries = []
        # list_by_activity is newest first; the roster keeps enrollment order
        for enrollment in reversed(list(active)):
            if enrollment.user_id in seen:
                continue
            seen.add(enrollment.user_id)
            entries.append(AttendanceEntry(user_id=enrollment.user_id))
        return entries

    def _load(self, attendance_id: str, actor_id: str) -> AttendanceList:
        if not attendance_id:
            raise ValidationError("attendanceId requerido")
        if not actor_id:
            raise ValidationError("sessionUserId requerido")
        attendance = self._attendance.get_by_id(attendance_id)
        if not attendance:
            raise NotFoundError("Registro de asistencia no encontrado")
        return attendance

    def _save(self, attendance: AttendanceList, entries: Iterable[AttendanceEntry], actor_id: str) -> AttendanceList:
        saved = self._attendance.replace_entries(attendance.attendance_id, list(entries), str(actor_id))
        if not saved:
            raise NotFoundError("Registro de asistencia no encontrado")
        return saved

    def create_attendance_list(self, activity_id: str, actor_id: str) -> AttendanceList:
        if not activity_id:
            raise ValidationError("actividadId requerido")
        if not actor_id:
            raise ValidationError("sessionUserId requerido")
        if not self._activities.get_by_id(activity_id):
            raise NotFoundError("Actividad no encontrada")

        attendance, created = self._attendance.create_if_absent(activity_id, self._roster(activity_id), str(actor_id))
        if created:
            logger.info("attendance list created activity=%s entries=%d", activity_id, len(attendance.entries))
        return attendance

    def take_attendance(
        self,
        attendance_id: str,
        *,
        present: Any = None,
        absent: Any = None,
        excused: Any = None,
        actor_id: str,
    ) -> AttendanceList:
        """Reset every entry to ausente, then apply presentes, ausentes, justificadas in that order."""
        attendance = self._load(attendance_id, actor_id)

        marks: dict[str, AttendanceMark] = {}
        for ids, mark, name in (
            (present, AttendanceMark.PRESENTE, "presentes"),
            (absent, AttendanceMark.AUSENTE, "ausentes"),
            (excused, AttendanceMark.JUSTIFICADA, "justificadas"),
        ):
            for user_id in _ids(ids, name):
                marks[user_id] = mark

        entries = [
            AttendanceEntry(user_id=e.user_id, mark=marks.get(e.user_id, AttendanceMark.AUSENTE))
            for e in attendance.entries
        ]
        return self._save(attendance, entries, actor_id)

    def update_attendance_entries(
        self,
        attendance_id: str,
        updates: Sequence[EntryUpdate],
        *,
        actor_id: str,
    ) -> UpdateResult:
        attendance = self._load(attendance_id, actor_id)

        wanted = {u.user_id: u.mark for u in updates}
        roster = attendance.user_ids()
        entries = [AttendanceEntry(user_id=e.user_id, mark=wanted.get(e.user_id, e.mark)) for e in attendance.entries]
        skipped = tuple(uid for uid in wanted if uid not in roster)

        return UpdateResult(attendance=self._save(attendance, entries, actor_id), skipped=skipped)

    def refresh_attendance_list(self, attendance_id: str, *, actor_id: str) -> AttendanceList:
        attendance = self._load(attendance_id, actor_id)
        saved = self._save(attendance, self._roster(attendance.activity_id), actor_id)
        logger.info("attendance list refreshed id=%s entries=%d", attendance_id, len(saved.entries))
        return saved

    def get(self, attendance_id: str) -> AttendanceList:
        attendance = self._attendance.get_by_id(attendance_id)
        if not attendance:
            raise NotFoundError("Registro de asistencia no encontrado")
        return attendance

    def get_for_activity(self, activity_id: str) -> Optional[AttendanceList]:
        return self._attendance.get_by_activity(activity_id)
