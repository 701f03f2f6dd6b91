from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.validators import require_institutional_email, require_min_length, require_non_empty
from ..core.constants import PASSWORD_MIN_LENGTH
from ..core.enums import RegistrationStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..notifications.notifier import Notifier
from ..users.model import User
from ..users.repository import UserRepository
from ..users.service import UserService
from .model import NewRegistrationRequest, RegistrationRequest
from .repository import RegistrationRepository

logger = logging.getLogger(__name__)


def _interests(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(v.strip() for v in value.split(",") if v.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(v).strip() for v in value if str(v).strip())
    return ()


def _age(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("Edad inválida")


class RegistrationService:
    """Account requests reviewed by admin/staff before a User exists."""

    def __init__(
        self,
        requests: RegistrationRepository,
        users: UserRepository,
        user_service: UserService,
        notifier: Notifier,
    ):
        self._requests = requests
        self._users = users
        self._user_service = user_service
        self._notifier = notifier

    def request_registration(self, payload: dict[str, Any]) -> RegistrationRequest:
        email = require_institutional_email(payload.get("correoUniversitario"))
        password = require_min_length(payload.get("contrasena"), "Contraseña", PASSWORD_MIN_LENGTH)
        name = require_non_empty(payload.get("nombre"), "Nombre")

        if self._users.get_by_email(email):
            raise ConflictError("Usuario ya registrado")
        if self._requests.get_by_email(email):
            raise ConflictError("Ya existe una solicitud para este correo")

        created = self._requests.create(
            NewRegistrationRequest(
                email=email,
                password_hash=generate_password_hash(password),
                name=name,
                phone=payload.get("telefono") or None,
                career=str(payload.get("carrera") or ""),
                interests=_interests(payload.get("intereses")),
                comuna=str(payload.get("comuna") or ""),
                address=str(payload.get("direccion") or ""),
                age=_age(payload.get("edad")),
                user_status=str(payload.get("status") or ""),
            )
        )
        logger.info("registration requested email=%s", email)
        self._notifier.registration_requested(email=created.email, name=created.name)
        return created

    def list_pending(self) -> Sequence[RegistrationRequest]:
        return self._requests.list_by_status(RegistrationStatus.PENDING)

    def _pending(self, request_id: str) -> RegistrationRequest:
        req = self._requests.get_by_id(request_id)
        if not req:
            raise NotFoundError("Solicitud no encontrada")
        if req.status != RegistrationStatus.PENDING:
            raise ValidationError("Request not pending")
        return req

    def approve(self, request_id: str, *, reviewer_id: Optional[str]) -> User:
        req = self._pending(request_id)
        if not self._requests.decide(request_id, status=RegistrationStatus.APPROVED, reviewer_id=reviewer_id):
            raise ValidationError("Request not pending")

        try:
            user = self._user_service.create_from_hash(
                email=req.email,
                password_hash=req.password_hash,
                name=req.name,
                phone=req.phone,
                career=req.career,
                interests=req.interests,
                comuna=req.comuna,
                address=req.address,
                age=req.age,
                status=req.user_status,
            )
        except Exception:
            # no user was created: the request goes back to review
            self._requests.reopen(request_id, status=RegistrationStatus.APPROVED)
            logger.warning("registration approval rolled back id=%s email=%s", request_id, req.email)
            raise
        logger.info("registration approved id=%s user=%s by=%s", request_id, user.user_id, reviewer_id)
        self._notifier.registration_approved(email=req.email, name=req.name)
        return user

    def reject(self, request_id: str, *, reviewer_id: Optional[str], notes: Optional[str] = None) -> RegistrationRequest:
        req = self._pending(request_id)
        decided = self._requests.decide(
            request_id,
            status=RegistrationStatus.REJECTED,
            reviewer_id=reviewer_id,
            notes=(notes or "").strip(),
        )
        if not decided:
            raise ValidationError("Request not pending")
        logger.info("registration rejected id=%s by=%s", request_id, reviewer_id)
        self._notifier.registration_rejected(email=req.email, name=req.name, notes=notes or None)
        return decided
