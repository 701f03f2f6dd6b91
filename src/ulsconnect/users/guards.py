from __future__ import annotations

from functools import wraps
from typing import Callable, Optional

from flask import g, jsonify, session

from ..core.enums import Role
from .model import User
from .repository import UserRepository


class Guards:
    """Session guards shared by every controller.

    The user is re-read on each request so role changes and blocks apply
    immediately, not on the next login.
    """

    def __init__(self, users: UserRepository):
        self._users = users

    def _load_session_user(self):
        user_id = session.get("user_id")
        if not user_id:
            return None, (jsonify({"success": False, "error": "Unauthorized"}), 401)

        user: Optional[User] = self._users.get_by_id(str(user_id))
        if not user:
            session.clear()
            return None, (jsonify({"success": False, "error": "Unauthorized"}), 401)
        if user.blocked:
            session.clear()
            return None, (jsonify({"success": False, "error": "Cuenta bloqueada"}), 403)

        g.current_user = user
        return user, None

    def login_required(self, view: Callable):
        @wraps(view)
        def wrapper(*args, **kwargs):
            _, denied = self._load_session_user()
            if denied:
                return denied
            return view(*args, **kwargs)

        return wrapper

    def roles_required(self, *roles: Role):
        allowed = {r.value for r in roles}

        def decorator(view: Callable):
            @wraps(view)
            def wrapper(*args, **kwargs):
                user, denied = self._load_session_user()
                if denied:
                    return denied
                if user.role.value not in allowed:
                    return jsonify({"success": False, "error": "Forbidden"}), 403
                return view(*args, **kwargs)

            return wrapper

        return decorator


def current_user() -> User:
    return g.current_user
