from __future__ import annotations

from flask import Flask, request

from ..common.http import ok, request_payload
from ..container import Container
from .service import build_attendance_filter


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    def attendance_list():
        args = request.args
        filters = build_attendance_filter(
            student_id=args.get("student_id"),
            class_id=args.get("class_id"),
            date=args.get("date"),
            start_date=args.get("start_date"),
            end_date=args.get("end_date"),
            status=args.get("status"),
            limit=args.get("limit"),
            offset=args.get("offset"),
        )
        page = container.attendance_service.list_attendance(filters)
        return ok(
            [r.to_dict() for r in page.rows],
            pagination={"limit": page.limit, "offset": page.offset},
        )

    @app.route("/api/attendance/charts", methods=["GET"], endpoint="attendance_charts")
    def attendance_charts():
        chart = container.report_service.chart_data(
            days=request.args.get("days"),
            class_id=request.args.get("class_id"),
            student_id=request.args.get("student_id"),
        )
        return ok(chart.to_dict())

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_record")
    def attendance_record():
        payload = request_payload()
        row = container.attendance_service.record_attendance(
            student_id=payload.get("student_id"),
            date=payload.get("date"),
            status=payload.get("status"),
        )
        return ok(row.to_dict(), status=201, message="Attendance recorded successfully")

    @app.route("/api/attendance/bulk", methods=["POST"], endpoint="attendance_bulk")
    def attendance_bulk():
        payload = request_payload()
        rows = container.attendance_service.record_bulk_attendance(
            date=payload.get("date"),
            records=payload.get("records"),
        )
        return ok(
            [r.to_dict() for r in rows],
            status=201,
            message=f"{len(rows)} attendance records processed successfully",
        )

    @app.route(
        "/api/attendance/class/<int:class_id>/date/<string:on_date>",
        methods=["GET"],
        endpoint="attendance_class_date",
    )
    def attendance_class_date(class_id: int, on_date: str):
        view = container.attendance_service.class_attendance(class_id=class_id, date=on_date)
        return ok(view.to_dict())
