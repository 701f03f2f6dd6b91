from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization."""

    ESTUDIANTE = "estudiante"
    STAFF = "staff"
    ADMIN = "admin"


class ActivityState(str, Enum):
    ACTIVA = "activa"
    CLOSED = "closed"


class EnrollmentStatus(str, Enum):
    """Enrollment lifecycle as stored in the `inscripciones` collection.

    New enrollments are ACTIVA. INSCRITO, CONFIRMADO and PENDIENTE are kept for
    documents written by older clients.
    """

    ACTIVA = "activa"
    INSCRITO = "inscrito"
    CANCELADA = "cancelada"
    TERMINADA = "terminada"
    CONFIRMADO = "confirmado"
    PENDIENTE = "pendiente"


class AttendanceMark(str, Enum):
    PRESENTE = "presente"
    AUSENTE = "ausente"
    JUSTIFICADA = "justificada"


class RegistrationStatus(str, Enum):
    """Review workflow of a registration request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
