from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import Role
from ..enrollments.mapper import to_json as enrollment_to_json
from ..scoring.rules.standard_rule import StandardScoringRule
from ..users.guards import current_user
from .mapper import to_json


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    activities = container.activity_service

    @app.route("/api/activities", methods=["GET"], endpoint="activities_list")
    @guards.login_required
    def activities_list():
        return jsonify({"success": True, "data": [to_json(a) for a in activities.list()]})

    @app.route("/api/activities", methods=["POST"], endpoint="activities_create")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def activities_create():
        created = activities.create(request.get_json(silent=True) or {}, creator_id=current_user().user_id)
        return jsonify({"success": True, "data": to_json(created)}), 201

    @app.route("/api/activities/search", methods=["GET"], endpoint="activities_search")
    @guards.login_required
    def activities_search():
        found = activities.list(title=request.args.get("titulo"), type=request.args.get("tipo"))
        return jsonify({"success": True, "data": [to_json(a) for a in found]})

    @app.route("/api/activities/area/<area>", methods=["GET"], endpoint="activities_by_area")
    @guards.login_required
    def activities_by_area(area: str):
        return jsonify({"success": True, "data": [to_json(a) for a in activities.list(area=area)]})

    @app.route("/api/activities/estado/<estado>", methods=["GET"], endpoint="activities_by_state")
    @guards.login_required
    def activities_by_state(estado: str):
        return jsonify({"success": True, "data": [to_json(a) for a in activities.list(state=estado)]})

    @app.route("/api/activities/<activity_id>", methods=["GET"], endpoint="activities_get")
    @guards.login_required
    def activities_get(activity_id: str):
        return jsonify({"success": True, "data": to_json(activities.get(activity_id))})

    @app.route("/api/activities/<activity_id>", methods=["PUT"], endpoint="activities_update")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def activities_update(activity_id: str):
        updated = activities.update(activity_id, request.get_json(silent=True) or {})
        return jsonify({"success": True, "data": to_json(updated)})

    @app.route("/api/activities/<activity_id>", methods=["DELETE"], endpoint="activities_delete")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def activities_delete(activity_id: str):
        activities.delete(activity_id)
        return jsonify({"success": True, "message": "Actividad eliminada correctamente"})

    @app.route("/api/activities/<activity_id>/enroll", methods=["POST"], endpoint="activities_enroll")
    @guards.login_required
    def activities_enroll(activity_id: str):
        body = request.get_json(silent=True) or {}
        enrollment = container.enrollment_service.enroll(
            current_user().user_id,
            activity_id,
            answers=body.get("respuestas"),
        )
        return jsonify({"success": True, "data": enrollment_to_json(enrollment)}), 201

    @app.route("/api/activities/<activity_id>/close", methods=["POST"], endpoint="activities_close")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def activities_close(activity_id: str):
        body = request.get_json(silent=True) or {}
        result = container.enrollment_service.close_activity(activity_id, body.get("motivo"))
        return jsonify(
            {
                "success": True,
                "message": "Convocatoria cerrada correctamente",
                "data": {
                    "actividad": to_json(result.activity),
                    "inscritosPendientesNotificados": result.notified,
                    "emailsEnviados": list(result.emails_sent),
                    "motivo": result.reason,
                },
            }
        )

    @app.route("/api/activities/<activity_id>/puntuar", methods=["POST"], endpoint="activities_score")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def activities_score(activity_id: str):
        body = request.get_json(silent=True) or {}
        scoring = container.scoring_service.score_activity(
            activity_id,
            actor_id=current_user().user_id,
            rule=StandardScoringRule.from_payload(body.get("reglas")),
        )
        return jsonify(
            {
                "success": True,
                "message": "Puntuaciones calculadas desde asistencia",
                "data": {
                    "reglas": scoring.rules,
                    "totalProcesados": scoring.processed,
                    "totalAplicados": scoring.applied,
                    "resultados": scoring.results,
                },
            }
        )
