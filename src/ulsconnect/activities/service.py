from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_datetime
from ..common.validators import require_non_empty
from ..core.enums import ActivityState
from ..core.exceptions import NotFoundError, ValidationError
from .mapper import location_to_document
from .model import Activity, ActivityFilter, Location, NewActivity
from .repository import ActivityRepository

logger = logging.getLogger(__name__)


def _parse_capacity(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        capacity = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Capacidad inválida")
    if capacity < 0:
        raise ValidationError("Capacidad inválida")
    return capacity


def _parse_location(raw: Any) -> Location:
    raw = raw if isinstance(raw, dict) else {}
    lng = raw.get("lng")
    return Location(
        comuna=require_non_empty(raw.get("nombreComuna"), "Comuna"),
        place=require_non_empty(raw.get("nombreLugar"), "Lugar"),
        address=str(raw.get("direccion") or ""),
        region=str(raw.get("nombreRegion") or "Región de Coquimbo"),
        # non-numeric longitudes are stored as 0
        lng=lng if isinstance(lng, (int, float)) and not isinstance(lng, bool) else 0,
    )


def _parse_dates(payload: dict[str, Any]) -> tuple[datetime, datetime]:
    start = parse_datetime(payload.get("fechaInicio"))
    if not start:
        raise ValidationError("fechaInicio inválida")
    raw_end = payload.get("fechaFin") or payload.get("fechaTermino")
    end = parse_datetime(raw_end) if raw_end else start
    if not end:
        raise ValidationError("fechaFin inválida")
    if end < start:
        raise ValidationError("fechaFin no puede ser anterior a fechaInicio")
    return start, end


class ActivityService:
    """Use cases: create, query, edit and delete activities."""

    def __init__(self, activities: ActivityRepository, enrollments=None, attendance=None):
        self._activities = activities
        self._enrollments = enrollments
        self._attendance = attendance

    def create(self, payload: dict[str, Any], *, creator_id: str) -> Activity:
        if not creator_id:
            raise ValidationError("Sesion no valida")
        start, end = _parse_dates(payload)
        activity = self._activities.create(
            NewActivity(
                title=require_non_empty(payload.get("titulo"), "Titulo"),
                description=require_non_empty(payload.get("descripcion"), "Descripcion"),
                area=require_non_empty(payload.get("area"), "Area"),
                type=require_non_empty(payload.get("tipo"), "Tipo"),
                start_at=start,
                end_at=end,
                location=_parse_location(payload.get("ubicacion")),
                capacity=_parse_capacity(payload.get("capacidad")),
                state=str(payload.get("estado") or ActivityState.ACTIVA.value),
                created_by=str(creator_id),
            )
        )
        logger.info("activity created id=%s by=%s", activity.activity_id, creator_id)
        return activity

    def get(self, activity_id: str) -> Activity:
        activity = self._activities.get_by_id(activity_id)
        if not activity:
            raise NotFoundError("Actividad no encontrada")
        return activity

    def list(
        self,
        *,
        title: Optional[str] = None,
        type: Optional[str] = None,
        area: Optional[str] = None,
        state: Optional[str] = None,
    ) -> Sequence[Activity]:
        return self._activities.list(
            ActivityFilter(
                title=(title or "").strip() or None,
                type=(type or "").strip() or None,
                area=area or None,
                state=state or None,
            )
        )

    def update(self, activity_id: str, payload: dict[str, Any]) -> Activity:
        current = self.get(activity_id)
        fields: dict[str, Any] = {}
        for key in ("titulo", "descripcion", "area", "tipo"):
            if key in payload:
                fields[key] = require_non_empty(payload.get(key), key.capitalize())
        if "estado" in payload and payload["estado"]:
            state = str(payload["estado"])
            if state != current.state:
                if current.state == ActivityState.CLOSED.value:
                    raise ValidationError("La actividad ya esta cerrada")
                if state == ActivityState.CLOSED.value:
                    raise ValidationError("Use el cierre de convocatoria para cerrar la actividad")
                fields["estado"] = state
        if "capacidad" in payload:
            fields["capacidad"] = _parse_capacity(payload.get("capacidad"))
        if "ubicacion" in payload:
            fields["ubicacion"] = location_to_document(_parse_location(payload.get("ubicacion")))
        if any(k in payload for k in ("fechaInicio", "fechaFin", "fechaTermino")):
            merged = {
                "fechaInicio": payload.get("fechaInicio") or current.start_at,
                "fechaFin": payload.get("fechaFin") or payload.get("fechaTermino") or current.end_at,
            }
            fields["fechaInicio"], fields["fechaFin"] = _parse_dates(merged)
        # creadoPor is never taken from the client

        if not fields:
            return current
        updated = self._activities.update(activity_id, fields)
        if not updated:
            raise NotFoundError("Actividad no encontrada")
        return updated

    def delete(self, activity_id: str) -> None:
        if not self._activities.delete(activity_id):
            raise NotFoundError("Actividad no encontrada")
        removed = self._enrollments.delete_for_activity(activity_id) if self._enrollments else 0
        if self._attendance:
            self._attendance.delete_for_activity(activity_id)
        logger.info("activity deleted id=%s enrollments_removed=%s", activity_id, removed)
