from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..activities.mapper import to_summary_json
from ..activities.model import Activity
from ..common.datetime_utils import isoformat
from ..core.enums import AttendanceMark
from ..users.model import User
from .model import AttendanceEntry, AttendanceList


def entries_to_document(entries: Sequence[AttendanceEntry]) -> list[dict[str, Any]]:
    return [{"usuario": e.user_id, "asistencia": e.mark.value} for e in entries]


def _mark(value: Any) -> AttendanceMark:
    try:
        return AttendanceMark(value)
    except ValueError:
        return AttendanceMark.AUSENTE


def to_document(
    attendance_id: str,
    activity_id: str,
    entries: Sequence[AttendanceEntry],
    recorded_by: str,
    now: datetime,
) -> dict[str, Any]:
    return {
        "_id": attendance_id,
        "actividad": activity_id,
        "inscripciones": entries_to_document(entries),
        "fecha": now,
        "registradoPor": recorded_by,
        "createdAt": now,
        "updatedAt": now,
    }


def from_document(doc: dict[str, Any]) -> AttendanceList:
    return AttendanceList(
        attendance_id=str(doc["_id"]),
        activity_id=str(doc.get("actividad") or ""),
        entries=tuple(
            AttendanceEntry(user_id=str(e["usuario"]), mark=_mark(e.get("asistencia")))
            for e in doc.get("inscripciones") or []
            if e and e.get("usuario")
        ),
        recorded_by=str(doc["registradoPor"]) if doc.get("registradoPor") else None,
        recorded_at=doc.get("fecha"),
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


def to_json(
    attendance: AttendanceList,
    *,
    users: Optional[dict[str, User]] = None,
    activity: Optional[Activity] = None,
) -> dict[str, Any]:
    users = users or {}
    entries = []
    for entry in attendance.entries:
        item: dict[str, Any] = {"usuario": entry.user_id, "asistencia": entry.mark.value}
        user = users.get(entry.user_id)
        if user:
            item["usuario"] = {"id": user.user_id, "nombre": user.name, "correoUniversitario": user.email}
        entries.append(item)

    return {
        "id": attendance.attendance_id,
        "actividad": to_summary_json(activity) if activity else attendance.activity_id,
        "inscripciones": entries,
        "registradoPor": attendance.recorded_by,
        "fecha": isoformat(attendance.recorded_at),
        "createdAt": isoformat(attendance.created_at),
        "updatedAt": isoformat(attendance.updated_at),
    }
