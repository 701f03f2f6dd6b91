from __future__ import annotations

from datetime import datetime
from typing import Any

from ..common.datetime_utils import isoformat
from .model import Activity, Location, NewActivity


def location_to_document(location: Location) -> dict[str, Any]:
    return {
        "nombreComuna": location.comuna,
        "nombreLugar": location.place,
        "direccion": location.address,
        "nombreRegion": location.region,
        "lng": location.lng,
    }


def to_document(activity_id: str, new_activity: NewActivity, now: datetime) -> dict[str, Any]:
    return {
        "_id": activity_id,
        "titulo": new_activity.title,
        "descripcion": new_activity.description,
        "area": new_activity.area,
        "tipo": new_activity.type,
        "fechaInicio": new_activity.start_at,
        "fechaFin": new_activity.end_at,
        "ubicacion": location_to_document(new_activity.location),
        "capacidad": new_activity.capacity,
        "estado": new_activity.state,
        "creadoPor": new_activity.created_by,
        "fechaCierre": None,
        "motivoCierre": None,
        "creadoEn": now,
        "actualizadoEn": now,
    }


def from_document(doc: dict[str, Any]) -> Activity:
    loc = doc.get("ubicacion") or {}
    return Activity(
        activity_id=str(doc["_id"]),
        title=doc.get("titulo", ""),
        description=doc.get("descripcion", ""),
        area=doc.get("area", ""),
        type=doc.get("tipo", ""),
        start_at=doc.get("fechaInicio"),
        end_at=doc.get("fechaFin"),
        location=Location(
            comuna=loc.get("nombreComuna", ""),
            place=loc.get("nombreLugar", ""),
            address=loc.get("direccion") or "",
            region=loc.get("nombreRegion") or "Región de Coquimbo",
            lng=loc.get("lng") or 0,
        ),
        capacity=doc.get("capacidad"),
        state=doc.get("estado") or "activa",
        created_by=str(doc.get("creadoPor") or ""),
        closed_at=doc.get("fechaCierre"),
        close_reason=doc.get("motivoCierre"),
        created_at=doc.get("creadoEn"),
        updated_at=doc.get("actualizadoEn"),
    )


def to_json(activity: Activity) -> dict[str, Any]:
    return {
        "id": activity.activity_id,
        "titulo": activity.title,
        "descripcion": activity.description,
        "area": activity.area,
        "tipo": activity.type,
        "fechaInicio": isoformat(activity.start_at),
        "fechaFin": isoformat(activity.end_at),
        "ubicacion": location_to_document(activity.location),
        "capacidad": activity.capacity,
        "estado": activity.state,
        "creadoPor": activity.created_by,
        "fechaCierre": isoformat(activity.closed_at),
        "motivoCierre": activity.close_reason,
        "creadoEn": isoformat(activity.created_at),
        "actualizadoEn": isoformat(activity.updated_at),
    }


def to_summary_json(activity: Activity) -> dict[str, Any]:
    """Compact shape embedded in enrollment/report listings."""
    return {
        "id": activity.activity_id,
        "titulo": activity.title,
        "area": activity.area,
        "tipo": activity.type,
        "fechaInicio": isoformat(activity.start_at),
        "fechaFin": isoformat(activity.end_at),
        "estado": activity.state,
    }
