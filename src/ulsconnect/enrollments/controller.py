from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import Role
from ..users.guards import current_user
from .mapper import to_json
from .service import EnrollmentView


def _view_json(view: EnrollmentView) -> dict:
    return to_json(view.enrollment, user=view.user, activity=view.activity)


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    enrollments = container.enrollment_service

    def _actor() -> dict:
        user = current_user()
        return {"actor_id": user.user_id, "actor_role": user.role}

    @app.route("/api/inscripciones/usuario/<user_id>", methods=["GET"], endpoint="enrollments_by_user")
    @guards.login_required
    def enrollments_by_user(user_id: str):
        views = enrollments.list_by_user(user_id, **_actor())
        return jsonify({"success": True, "data": [_view_json(v) for v in views]})

    @app.route("/api/inscripciones/usuario/<user_id>/activas", methods=["GET"], endpoint="enrollments_active_by_user")
    @guards.login_required
    def enrollments_active_by_user(user_id: str):
        views = enrollments.list_active_by_user(user_id, **_actor())
        return jsonify({"success": True, "data": [_view_json(v) for v in views]})

    @app.route("/api/inscripciones/actividad/<activity_id>", methods=["GET"], endpoint="enrollments_by_activity")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def enrollments_by_activity(activity_id: str):
        views = enrollments.list_by_activity(activity_id)
        return jsonify({"success": True, "data": [_view_json(v) for v in views]})

    @app.route("/api/inscripciones/<enrollment_id>", methods=["GET"], endpoint="enrollments_get")
    @guards.login_required
    def enrollments_get(enrollment_id: str):
        return jsonify({"success": True, "data": _view_json(enrollments.get_by_id(enrollment_id, **_actor()))})

    @app.route("/api/inscripciones/<enrollment_id>", methods=["DELETE"], endpoint="enrollments_cancel")
    @guards.login_required
    def enrollments_cancel(enrollment_id: str):
        body = request.get_json(silent=True) or {}
        cancelled = enrollments.cancel(enrollment_id, body.get("motivo"), **_actor())
        return jsonify({"success": True, "message": "Inscripcion cancelada correctamente", "data": to_json(cancelled)})
