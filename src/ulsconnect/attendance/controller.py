from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import Role
from ..users.guards import current_user
from .mapper import to_json
from .model import AttendanceList
from .service import parse_updates


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    attendance = container.attendance_service

    def _json(att: AttendanceList) -> dict:
        users = container.users_repo.get_many([e.user_id for e in att.entries])
        return to_json(att, users=users, activity=container.activities_repo.get_by_id(att.activity_id))

    @app.route("/attendance/create", methods=["POST"], endpoint="attendance_create")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def attendance_create():
        body = request.get_json(silent=True) or {}
        att = attendance.create_attendance_list(body.get("actividadId"), current_user().user_id)
        return jsonify({"success": True, "data": _json(att)}), 201

    @app.route("/attendance/take", methods=["POST"], endpoint="attendance_take")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def attendance_take():
        body = request.get_json(silent=True) or {}
        att = attendance.take_attendance(
            body.get("attendanceId"),
            present=body.get("presentes"),
            absent=body.get("ausentes"),
            excused=body.get("justificadas"),
            actor_id=current_user().user_id,
        )
        return jsonify({"success": True, "data": _json(att)})

    @app.route("/attendance/update", methods=["POST"], endpoint="attendance_update")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def attendance_update():
        body = request.get_json(silent=True) or {}
        result = attendance.update_attendance_entries(
            body.get("attendanceId"),
            parse_updates(body.get("updates")),
            actor_id=current_user().user_id,
        )
        return jsonify({"success": True, "data": _json(result.attendance), "skipped": list(result.skipped)})

    @app.route("/attendance/refresh", methods=["POST"], endpoint="attendance_refresh")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def attendance_refresh():
        body = request.get_json(silent=True) or {}
        att = attendance.refresh_attendance_list(body.get("attendanceId"), actor_id=current_user().user_id)
        return jsonify({"success": True, "data": _json(att)})

    @app.route("/attendance/<attendance_id>", methods=["GET"], endpoint="attendance_get")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def attendance_get(attendance_id: str):
        return jsonify({"success": True, "data": _json(attendance.get(attendance_id))})

    @app.route("/attendance/actividad/<activity_id>", methods=["GET"], endpoint="attendance_for_activity")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def attendance_for_activity(activity_id: str):
        att = attendance.get_for_activity(activity_id)
        if not att:
            return jsonify({"success": False, "error": "Registro de asistencia no encontrado"}), 404
        return jsonify({"success": True, "data": _json(att)})
