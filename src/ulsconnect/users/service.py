from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import parse_int, require_min_length, require_non_empty
from ..core.constants import DEFAULT_USERS_PAGE_SIZE, MAX_USERS_PAGE_SIZE, PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .mapper import normalize_role
from .model import NewUser, User, UserQuery
from .repository import UserRepository

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = {
    "nombre": "nombre",
    "telefono": "telefono",
    "carrera": "carrera",
    "intereses": "intereses",
    "comuna": "comuna",
    "direccion": "direccion",
    "edad": "edad",
}


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    name: str
    email: str
    role: Role


@dataclass(frozen=True)
class UserPage:
    users: Sequence[User]
    total: int
    page: int
    limit: int


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip().lower()
        if not email or not password:
            raise ValidationError("Correo y contraseña requeridos")

        user = self._users.get_by_email(email)
        if not user:
            raise AuthenticationError("Correo o contraseña inválidos")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError("Correo o contraseña inválidos")

        if user.blocked:
            raise AuthorizationError("Cuenta bloqueada")

        logger.info("login ok user=%s role=%s", user.user_id, user.role.value)
        return SessionUser(user_id=user.user_id, name=user.name, email=user.email, role=user.role)


class UserService:
    """Use case: manage users (admin) and profiles."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("Usuario no encontrado")
        return user

    def create_account(
        self,
        *,
        email: str,
        password: str,
        name: str,
        role: Role = Role.ESTUDIANTE,
        **profile: Any,
    ) -> User:
        email = require_non_empty(email, "Correo").lower()
        name = require_non_empty(name, "Nombre")
        require_min_length(password, "Contraseña", PASSWORD_MIN_LENGTH)
        return self.create_from_hash(
            email=email,
            password_hash=generate_password_hash(password),
            name=name,
            role=role,
            **profile,
        )

    def create_from_hash(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: Role = Role.ESTUDIANTE,
        phone: Optional[str] = None,
        career: str = "",
        interests: Sequence[str] = (),
        comuna: str = "",
        address: str = "",
        age: Optional[int] = None,
        status: str = "",
    ) -> User:
        """Create a user from an already hashed password (registration approval)."""

        return self._users.create(
            NewUser(
                email=email,
                password_hash=password_hash,
                name=name,
                role=role,
                phone=phone,
                career=career or "",
                interests=tuple(interests or ()),
                comuna=comuna or "",
                address=address or "",
                age=age,
                status=status or "",
            )
        )

    def list_users(
        self,
        *,
        search: str = "",
        role: Any = None,
        blocked: Optional[bool] = None,
        page: Any = 1,
        limit: Any = DEFAULT_USERS_PAGE_SIZE,
    ) -> UserPage:
        page_n = parse_int(page, 1)
        limit_n = parse_int(limit, DEFAULT_USERS_PAGE_SIZE, maximum=MAX_USERS_PAGE_SIZE)
        users, total = self._users.search(
            UserQuery(
                search=(search or "").strip(),
                role=normalize_role(role),
                blocked=blocked,
                limit=limit_n,
                skip=(page_n - 1) * limit_n,
            )
        )
        return UserPage(users=users, total=total, page=page_n, limit=limit_n)

    def list_students(self) -> Sequence[User]:
        return self._users.list_by_role(Role.ESTUDIANTE)

    def update_role(self, user_id: str, role: Any) -> User:
        normalized = normalize_role(role)
        if not normalized:
            raise ValidationError("Rol invalido. Use estudiante, staff/coordinator o admin")
        updated = self._users.update_fields(user_id, {"rol": normalized.value})
        if not updated:
            raise NotFoundError("Usuario no encontrado")
        logger.info("role changed user=%s role=%s", user_id, normalized.value)
        return updated

    def set_blocked(self, user_id: str, blocked: Optional[bool]) -> User:
        if blocked is None:
            raise ValidationError("Debe indicar blocked/bloqueado como true o false")
        updated = self._users.update_fields(user_id, {"bloqueado": bool(blocked)})
        if not updated:
            raise NotFoundError("Usuario no encontrado")
        logger.info("block flag changed user=%s blocked=%s", user_id, bool(blocked))
        return updated

    def update_profile(self, user_id: str, payload: dict[str, Any]) -> User:
        fields: dict[str, Any] = {}
        for key, stored in _PROFILE_FIELDS.items():
            if key in payload:
                fields[stored] = payload[key]

        if "nombre" in fields:
            fields["nombre"] = require_non_empty(fields["nombre"], "Nombre")
        if "intereses" in fields:
            value = fields["intereses"]
            if isinstance(value, str):
                value = [v.strip() for v in value.split(",") if v.strip()]
            fields["intereses"] = list(value or [])
        if "edad" in fields and fields["edad"] not in (None, ""):
            try:
                fields["edad"] = int(fields["edad"])
            except (TypeError, ValueError):
                raise ValidationError("Edad inválida")
        if not fields:
            raise ValidationError("No hay campos para actualizar")

        updated = self._users.update_fields(user_id, fields)
        if not updated:
            raise NotFoundError("Usuario no encontrado")
        return updated
