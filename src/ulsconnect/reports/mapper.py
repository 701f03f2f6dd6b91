from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..activities.mapper import to_summary_json
from ..activities.model import Activity
from ..common.datetime_utils import isoformat
from ..users.model import User
from .model import ImpactMetrics, ImpactReport, NewImpactReport


def metrics_to_document(metrics: ImpactMetrics) -> dict[str, Any]:
    return {
        "voluntariosInvitados": metrics.invited,
        "voluntariosConfirmados": metrics.confirmed,
        "voluntariosAsistieron": metrics.attended,
        "horasTotales": metrics.total_hours,
        "beneficiarios": metrics.beneficiaries,
        "notas": metrics.notes,
    }


def to_document(report_id: str, new_report: NewImpactReport, now: datetime) -> dict[str, Any]:
    return {
        "_id": report_id,
        "idActividad": new_report.activity_id,
        "metricas": metrics_to_document(new_report.metrics),
        "creadoPor": new_report.created_by,
        "creadoEn": now,
        "actualizadoEn": now,
    }


def from_document(doc: dict[str, Any]) -> ImpactReport:
    m = doc.get("metricas") or {}
    return ImpactReport(
        report_id=str(doc["_id"]),
        activity_id=str(doc.get("idActividad") or ""),
        metrics=ImpactMetrics(
            invited=int(m.get("voluntariosInvitados") or 0),
            confirmed=int(m.get("voluntariosConfirmados") or 0),
            attended=int(m.get("voluntariosAsistieron") or 0),
            total_hours=m.get("horasTotales") or 0,
            beneficiaries=m.get("beneficiarios"),
            notes=m.get("notas"),
        ),
        created_by=str(doc.get("creadoPor") or ""),
        created_at=doc.get("creadoEn"),
        updated_at=doc.get("actualizadoEn"),
    )


def to_json(
    report: ImpactReport,
    *,
    activity: Optional[Activity] = None,
    creator: Optional[User] = None,
) -> dict[str, Any]:
    return {
        "id": report.report_id,
        "idActividad": report.activity_id,
        "actividad": to_summary_json(activity) if activity else None,
        "metricas": metrics_to_document(report.metrics),
        "creadoPor": (
            {"id": creator.user_id, "nombre": creator.name, "correo": creator.email, "rol": creator.role.value}
            if creator
            else report.created_by
        ),
        "creadoEn": isoformat(report.created_at),
        "actualizadoEn": isoformat(report.updated_at),
    }
