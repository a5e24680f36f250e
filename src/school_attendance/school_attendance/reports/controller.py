from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.http import ok
from ..container import Container
from ..core.enums import ExportFormat
from .service import parse_export_format


def register(app: Flask, container: Container) -> None:
    def _download(report):
        return send_file(
            io.BytesIO(report.content),
            mimetype=report.media_type,
            as_attachment=True,
            download_name=report.filename,
        )

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard_summary")
    def dashboard_summary():
        return ok(container.report_service.dashboard_summary().to_dict())

    @app.route("/api/export/attendance", methods=["GET"], endpoint="export_attendance")
    def export_attendance():
        fmt = parse_export_format(request.args.get("format_type"))
        export = container.report_service.attendance_export(
            period=request.args.get("period"),
            class_id=request.args.get("class_id"),
            student_id=request.args.get("student_id"),
        )
        if fmt == ExportFormat.JSON:
            return ok(**export.to_dict())
        return _download(container.report_service.render_attendance_report(export))

    @app.route("/api/export/students", methods=["GET"], endpoint="export_students")
    def export_students():
        fmt = parse_export_format(request.args.get("format_type"))
        export = container.report_service.student_export(
            period=request.args.get("period"),
            class_id=request.args.get("class_id"),
        )
        if fmt == ExportFormat.JSON:
            return ok(**export.to_dict())
        return _download(container.report_service.render_student_report(export))
