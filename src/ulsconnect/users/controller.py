from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.validators import parse_bool
from ..container import Container
from ..core.enums import Role
from .guards import current_user
from .mapper import point_entry_to_json, to_json

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    guards = container.guards

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        body = request.get_json(silent=True) or request.form
        s_user = container.auth_service.authenticate(
            body.get("correoUniversitario") or body.get("email") or "",
            body.get("contrasena") or body.get("password") or "",
        )
        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        return jsonify(
            {
                "success": True,
                "data": {"id": s_user.user_id, "nombre": s_user.name, "correo": s_user.email, "rol": s_user.role.value},
            }
        )

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/me", methods=["GET"], endpoint="me")
    @guards.login_required
    def me():
        return jsonify({"success": True, "data": to_json(current_user())})

    @app.route("/me", methods=["PATCH"], endpoint="me_update")
    @guards.login_required
    def me_update():
        updated = container.user_service.update_profile(current_user().user_id, request.get_json(silent=True) or {})
        return jsonify({"success": True, "data": to_json(updated)})

    @app.route("/admin/students", methods=["GET"], endpoint="admin_students")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def admin_students():
        students = [to_json(u) for u in container.user_service.list_students()]
        return jsonify({"success": True, "total": len(students), "estudiantes": students})

    @app.route("/admin/users", methods=["GET"], endpoint="admin_users")
    @guards.roles_required(Role.ADMIN)
    def admin_users():
        page = container.user_service.list_users(
            search=request.args.get("search", ""),
            role=request.args.get("role"),
            blocked=parse_bool(request.args.get("blocked")),
            page=request.args.get("page", 1),
            limit=request.args.get("limit", 50),
        )
        return jsonify(
            {
                "success": True,
                "total": page.total,
                "page": page.page,
                "pageSize": len(page.users),
                "usuarios": [to_json(u) for u in page.users],
            }
        )

    @app.route("/admin/users/<user_id>/role", methods=["PATCH"], endpoint="admin_user_role")
    @guards.roles_required(Role.ADMIN)
    def admin_user_role(user_id: str):
        body = request.get_json(silent=True) or {}
        updated = container.user_service.update_role(user_id, body.get("rol") or body.get("role"))
        return jsonify({"success": True, "message": "Rol actualizado correctamente", "usuario": to_json(updated)})

    @app.route("/admin/users/<user_id>/block", methods=["PATCH"], endpoint="admin_user_block")
    @guards.roles_required(Role.ADMIN)
    def admin_user_block(user_id: str):
        body = request.get_json(silent=True) or {}
        raw = body.get("bloqueado") if body.get("bloqueado") is not None else body.get("blocked")
        updated = container.user_service.set_blocked(user_id, parse_bool(raw))
        return jsonify(
            {
                "success": True,
                "message": "Usuario bloqueado" if updated.blocked else "Usuario desbloqueado",
                "usuario": to_json(updated),
            }
        )

    @app.route("/volunteer/score", methods=["GET"], endpoint="volunteer_score")
    @guards.login_required
    def volunteer_score():
        limit = request.args.get("limit", type=int) or 20
        summary = container.scoring_service.get_score(current_user().user_id, max(limit, 1))
        return jsonify(
            {
                "success": True,
                "data": {
                    "puntos": summary.user.points,
                    "historial": [point_entry_to_json(e) for e in summary.history],
                },
            }
        )

    @app.route("/leaderboard", methods=["GET"], endpoint="leaderboard")
    @guards.login_required
    def leaderboard():
        limit = request.args.get("limit", type=int) or 10
        users = container.scoring_service.leaderboard(max(limit, 1))
        return jsonify(
            {
                "success": True,
                "data": [{"id": u.user_id, "nombre": u.name, "puntos": u.points} for u in users],
            }
        )
