from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import isoformat
from ..core.enums import Role
from .model import NewUser, PointEntry, User

_ROLE_ALIASES = {
    "estudiante": Role.ESTUDIANTE,
    "student": Role.ESTUDIANTE,
    "staff": Role.STAFF,
    "coordinator": Role.STAFF,
    "coordinador": Role.STAFF,
    "admin": Role.ADMIN,
}


def normalize_role(value: Any) -> Optional[Role]:
    if isinstance(value, Role):
        return value
    if not value:
        return None
    return _ROLE_ALIASES.get(str(value).strip().lower())


def point_entry_to_document(entry: PointEntry) -> dict[str, Any]:
    return {
        "delta": entry.delta,
        "motivo": entry.reason,
        "actividad": entry.activity_id,
        "registradoPor": entry.recorded_by,
        "fecha": entry.recorded_at,
    }


def point_entry_from_document(doc: dict[str, Any]) -> PointEntry:
    return PointEntry(
        delta=doc.get("delta", 0),
        reason=doc.get("motivo"),
        activity_id=str(doc["actividad"]) if doc.get("actividad") else None,
        recorded_by=str(doc["registradoPor"]) if doc.get("registradoPor") else None,
        recorded_at=doc.get("fecha"),
    )


def to_document(user_id: str, new_user: NewUser, now: datetime) -> dict[str, Any]:
    return {
        "_id": user_id,
        "correoUniversitario": new_user.email,
        "contrasena": new_user.password_hash,
        "nombre": new_user.name,
        "rol": new_user.role.value,
        "bloqueado": False,
        "puntos": 0,
        "historialPuntos": [],
        "telefono": new_user.phone,
        "carrera": new_user.career,
        "intereses": list(new_user.interests),
        "comuna": new_user.comuna,
        "direccion": new_user.address,
        "edad": new_user.age,
        "status": new_user.status,
        "creadoEn": now,
        "actualizadoEn": now,
    }


def from_document(doc: dict[str, Any]) -> User:
    return User(
        user_id=str(doc["_id"]),
        email=doc.get("correoUniversitario", ""),
        password_hash=doc.get("contrasena", ""),
        name=doc.get("nombre", ""),
        role=normalize_role(doc.get("rol")) or Role.ESTUDIANTE,
        blocked=bool(doc.get("bloqueado", False)),
        points=doc.get("puntos") or 0,
        point_history=tuple(point_entry_from_document(e) for e in doc.get("historialPuntos") or []),
        phone=doc.get("telefono"),
        career=doc.get("carrera") or "",
        interests=tuple(doc.get("intereses") or ()),
        comuna=doc.get("comuna") or "",
        address=doc.get("direccion") or "",
        age=doc.get("edad"),
        status=doc.get("status") or "",
        created_at=doc.get("creadoEn"),
        updated_at=doc.get("actualizadoEn"),
    )


def to_json(user: User) -> dict[str, Any]:
    """Public shape of a user (never includes the password hash)."""
    return {
        "id": user.user_id,
        "nombre": user.name,
        "correoUniversitario": user.email,
        "telefono": user.phone,
        "carrera": user.career,
        "intereses": list(user.interests),
        "comuna": user.comuna,
        "direccion": user.address,
        "edad": user.age,
        "status": user.status,
        "rol": user.role.value,
        "bloqueado": user.blocked,
        "puntos": user.points,
        "creadoEn": isoformat(user.created_at),
        "actualizadoEn": isoformat(user.updated_at),
    }


def point_entry_to_json(entry: PointEntry) -> dict[str, Any]:
    return {
        "delta": entry.delta,
        "motivo": entry.reason,
        "actividad": entry.activity_id,
        "registradoPor": entry.recorded_by,
        "fecha": isoformat(entry.recorded_at),
    }
