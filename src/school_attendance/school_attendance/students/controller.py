from __future__ import annotations

from flask import Flask, request

from ..common.http import ok, request_payload
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _student_fields(payload: dict) -> dict:
        return {
            "name": payload.get("name"),
            "class_id": payload.get("class_id"),
            "gender": payload.get("gender"),
            "date_of_birth": payload.get("date_of_birth"),
        }

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    def students_list():
        students = container.student_service.list_students(class_id=request.args.get("class_id"))
        return ok([s.to_dict() for s in students])

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="students_get")
    def students_get(student_id: int):
        return ok(container.student_service.get_student(student_id).to_dict())

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    def students_create():
        created = container.student_service.create_student(**_student_fields(request_payload()))
        return ok(created.to_dict(), status=201, message="Student created successfully")

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="students_update")
    def students_update(student_id: int):
        updated = container.student_service.update_student(student_id, **_student_fields(request_payload()))
        return ok(updated.to_dict(), message="Student updated successfully")

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="students_delete")
    def students_delete(student_id: int):
        container.student_service.delete_student(student_id)
        return ok(message="Student deleted successfully")
