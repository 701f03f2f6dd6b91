from __future__ import annotations

import pytest

from ulsconnect.core.enums import Role
from ulsconnect.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


def test_authenticate(container, make_user):
    user = make_user(Role.STAFF, name="Coordinador")

    session_user = container.auth_service.authenticate(user.email.upper(), "secret1")

    assert session_user.user_id == user.user_id
    assert session_user.role == Role.STAFF


@pytest.mark.parametrize("email,password", [("nobody@alumnouls.cl", "secret1"), ("user1@alumnouls.cl", "wrong")])
def test_authenticate_rejects_bad_credentials(container, make_user, email, password):
    make_user()
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate(email, password)


def test_authenticate_requires_both_fields(container):
    with pytest.raises(ValidationError):
        container.auth_service.authenticate("", "")


def test_blocked_user_cannot_log_in(container, make_user):
    user = make_user()
    container.user_service.set_blocked(user.user_id, True)

    with pytest.raises(AuthorizationError):
        container.auth_service.authenticate(user.email, "secret1")


def test_duplicate_email(container, make_user):
    user = make_user()
    with pytest.raises(ConflictError):
        container.user_service.create_account(email=user.email, password="secret1", name="Otra")


def test_role_aliases(container, make_user):
    user = make_user()

    assert container.user_service.update_role(user.user_id, "coordinator").role == Role.STAFF
    assert container.user_service.update_role(user.user_id, "Student").role == Role.ESTUDIANTE
    with pytest.raises(ValidationError):
        container.user_service.update_role(user.user_id, "superuser")
    with pytest.raises(NotFoundError):
        container.user_service.update_role("missing", "admin")


def test_set_blocked_requires_a_flag(container, make_user):
    user = make_user()
    with pytest.raises(ValidationError):
        container.user_service.set_blocked(user.user_id, None)


def test_list_users_filters_and_pages(container, make_user):
    for _ in range(5):
        make_user()
    make_user(Role.ADMIN, name="Admin Central")

    page = container.user_service.list_users(role="estudiante", page=2, limit=2)
    search = container.user_service.list_users(search="central")

    assert page.total == 5
    assert page.page == 2
    assert len(page.users) == 2
    assert [u.name for u in search.users] == ["Admin Central"]


def test_update_profile(container, make_user):
    user = make_user()

    updated = container.user_service.update_profile(
        user.user_id, {"nombre": "Nuevo Nombre", "intereses": "arte, deporte", "edad": "22", "rol": "admin"}
    )

    assert updated.name == "Nuevo Nombre"
    assert updated.interests == ("arte", "deporte")
    assert updated.age == 22
    assert updated.role == Role.ESTUDIANTE
    with pytest.raises(ValidationError):
        container.user_service.update_profile(user.user_id, {"edad": "x"})
    with pytest.raises(ValidationError):
        container.user_service.update_profile(user.user_id, {})
