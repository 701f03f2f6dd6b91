from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..activities.mapper import to_json as activity_to_json
from ..container import Container
from ..core.enums import Role
from ..reports.mapper import to_json as report_to_json
from ..users.guards import current_user
from .service import ExportData


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    panel = container.panel_service

    def _write_csv(*, data: ExportData, filename: str):
        """Write export rows to a CSV attachment response."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=data.fieldnames)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.route("/admin/panel", methods=["GET"], endpoint="admin_panel")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def admin_panel():
        return jsonify({"success": True, "panel": panel.admin_summary()})

    @app.route("/admin/panel/export/enrollments", methods=["GET"], endpoint="admin_export_enrollments")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def admin_export_enrollments():
        data = panel.export_enrollments(
            status=request.args.get("estado"),
            activity_id=request.args.get("actividadId"),
        )
        return _write_csv(data=data, filename="enrollments.csv")

    @app.route("/admin/panel/export/attendance", methods=["GET"], endpoint="admin_export_attendance")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def admin_export_attendance():
        data = panel.export_attendance(
            activity_id=request.args.get("actividadId"),
            user_id=request.args.get("usuarioId"),
        )
        return _write_csv(data=data, filename="attendance.csv")

    @app.route("/admin/events", methods=["GET"], endpoint="admin_events")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def admin_events():
        events = [activity_to_json(a) for a in container.activity_service.list()]
        return jsonify({"success": True, "total": len(events), "eventos": events})

    @app.route("/admin/impact-reports", methods=["GET"], endpoint="impact_reports_list")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def impact_reports_list():
        limit = request.args.get("limit", type=int) or 20
        views = container.report_service.list_reports(max(limit, 1))
        return jsonify(
            {
                "success": True,
                "data": [report_to_json(v.report, activity=v.activity, creator=v.creator) for v in views],
            }
        )

    @app.route("/admin/impact-reports", methods=["POST"], endpoint="impact_reports_create")
    @guards.roles_required(Role.ADMIN, Role.STAFF)
    def impact_reports_create():
        body = request.get_json(silent=True) or {}
        report = container.report_service.create_report(
            body.get("actividadId"),
            actor_id=current_user().user_id,
            beneficiaries=body.get("beneficiarios"),
            notes=body.get("notas"),
        )
        return jsonify(
            {
                "success": True,
                "message": "Reporte de impacto generado correctamente",
                "reporte": report_to_json(report),
            }
        ), 201

    @app.route("/volunteer/panel", methods=["GET"], endpoint="volunteer_panel")
    @guards.login_required
    def volunteer_panel():
        vp = panel.volunteer_panel(current_user().user_id)
        return jsonify(
            {
                "success": True,
                "panel": {
                    "summary": {
                        "totalInscripciones": len(vp.enrollments),
                        "upcomingInscripciones": len(vp.upcoming),
                    },
                    "upcoming": vp.upcoming,
                    "inscripciones": vp.enrollments,
                },
            }
        )
