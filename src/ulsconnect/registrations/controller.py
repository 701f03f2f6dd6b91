from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import Role
from ..users.guards import current_user
from .mapper import to_json


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    registrations = container.registration_service

    @app.route("/auth/request", methods=["POST"], endpoint="registration_request")
    def registration_request():
        created = registrations.request_registration(request.get_json(silent=True) or {})
        return jsonify({"success": True, "message": "Solicitud enviada", "data": to_json(created)}), 201

    @app.route("/auth/requests", methods=["GET"], endpoint="registration_pending")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def registration_pending():
        return jsonify({"success": True, "data": [to_json(r) for r in registrations.list_pending()]})

    @app.route("/auth/requests/<request_id>/approve", methods=["POST"], endpoint="registration_approve")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def registration_approve(request_id: str):
        user = registrations.approve(request_id, reviewer_id=current_user().user_id)
        return jsonify(
            {
                "success": True,
                "message": "Approved",
                "data": {"id": user.user_id, "correoUniversitario": user.email},
            }
        )

    @app.route("/auth/requests/<request_id>/reject", methods=["POST"], endpoint="registration_reject")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def registration_reject(request_id: str):
        body = request.get_json(silent=True) or {}
        rejected = registrations.reject(request_id, reviewer_id=current_user().user_id, notes=body.get("notes"))
        return jsonify({"success": True, "message": "Rejected", "data": to_json(rejected)})
