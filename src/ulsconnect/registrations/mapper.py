from __future__ import annotations

from datetime import datetime
from typing import Any

from ..common.datetime_utils import isoformat
from ..core.enums import RegistrationStatus
from .model import NewRegistrationRequest, RegistrationRequest


def to_document(request_id: str, new_request: NewRegistrationRequest, now: datetime) -> dict[str, Any]:
    return {
        "_id": request_id,
        "correoUniversitario": new_request.email,
        "contrasenaHash": new_request.password_hash,
        "nombre": new_request.name,
        "telefono": new_request.phone,
        "carrera": new_request.career,
        "intereses": list(new_request.interests),
        "comuna": new_request.comuna,
        "direccion": new_request.address,
        "edad": new_request.age,
        "statusUsuario": new_request.user_status,
        "status": RegistrationStatus.PENDING.value,
        "reviewedBy": None,
        "reviewedAt": None,
        "reviewNotes": "",
        "createdAt": now,
        "updatedAt": now,
    }


def from_document(doc: dict[str, Any]) -> RegistrationRequest:
    try:
        status = RegistrationStatus(doc.get("status") or RegistrationStatus.PENDING.value)
    except ValueError:
        status = RegistrationStatus.PENDING
    return RegistrationRequest(
        request_id=str(doc["_id"]),
        email=doc.get("correoUniversitario", ""),
        password_hash=doc.get("contrasenaHash", ""),
        name=doc.get("nombre", ""),
        status=status,
        phone=doc.get("telefono"),
        career=doc.get("carrera") or "",
        interests=tuple(doc.get("intereses") or ()),
        comuna=doc.get("comuna") or "",
        address=doc.get("direccion") or "",
        age=doc.get("edad"),
        user_status=doc.get("statusUsuario") or "",
        reviewed_by=str(doc["reviewedBy"]) if doc.get("reviewedBy") else None,
        reviewed_at=doc.get("reviewedAt"),
        review_notes=doc.get("reviewNotes") or "",
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


def to_json(req: RegistrationRequest) -> dict[str, Any]:
    """Public shape; the password hash never leaves the server."""
    return {
        "id": req.request_id,
        "correoUniversitario": req.email,
        "nombre": req.name,
        "telefono": req.phone,
        "carrera": req.career,
        "intereses": list(req.interests),
        "comuna": req.comuna,
        "direccion": req.address,
        "edad": req.age,
        "status": req.status.value,
        "reviewedBy": req.reviewed_by,
        "reviewedAt": isoformat(req.reviewed_at),
        "reviewNotes": req.review_notes,
        "createdAt": isoformat(req.created_at),
        "updatedAt": isoformat(req.updated_at),
    }
