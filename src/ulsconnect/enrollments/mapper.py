from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..activities.mapper import to_summary_json
from ..activities.model import Activity
from ..common.datetime_utils import isoformat
from ..users.model import User
from .model import Enrollment, NewEnrollment


def to_document(enrollment_id: str, new_enrollment: NewEnrollment, now: datetime) -> dict[str, Any]:
    return {
        "_id": enrollment_id,
        "usuario": new_enrollment.user_id,
        "actividad": new_enrollment.activity_id,
        "estado": new_enrollment.status,
        "motivoCancelacion": None,
        "respuestas": new_enrollment.answers,
        "creadoEn": now,
        "actualizadoEn": now,
    }


def from_document(doc: dict[str, Any]) -> Enrollment:
    return Enrollment(
        enrollment_id=str(doc["_id"]),
        user_id=str(doc.get("usuario") or ""),
        activity_id=str(doc.get("actividad") or ""),
        status=doc.get("estado") or "",
        cancel_reason=doc.get("motivoCancelacion"),
        answers=doc.get("respuestas"),
        created_at=doc.get("creadoEn"),
        updated_at=doc.get("actualizadoEn"),
    )


def to_json(
    enrollment: Enrollment,
    *,
    user: Optional[User] = None,
    activity: Optional[Activity] = None,
) -> dict[str, Any]:
    """JSON shape; user/activity are embedded as display projections when given."""
    out: dict[str, Any] = {
        "id": enrollment.enrollment_id,
        "usuario": enrollment.user_id,
        "actividad": enrollment.activity_id,
        "estado": enrollment.status,
        "motivoCancelacion": enrollment.cancel_reason,
        "respuestas": enrollment.answers,
        "creadoEn": isoformat(enrollment.created_at),
        "actualizadoEn": isoformat(enrollment.updated_at),
    }
    if user is not None:
        out["usuario"] = {
            "id": user.user_id,
            "nombre": user.name,
            "correoUniversitario": user.email,
            "carrera": user.career,
        }
    if activity is not None:
        out["actividad"] = to_summary_json(activity)
    return out
