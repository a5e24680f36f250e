from __future__ import annotations

from flask import Flask

from ..common.http import ok, request_payload
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes", methods=["GET"], endpoint="classes_list")
    def classes_list():
        return ok([c.to_dict() for c in container.class_service.list_classes()])

    @app.route("/api/classes/<int:class_id>", methods=["GET"], endpoint="classes_get")
    def classes_get(class_id: int):
        return ok(container.class_service.get_class(class_id).to_dict())

    @app.route("/api/classes", methods=["POST"], endpoint="classes_create")
    def classes_create():
        payload = request_payload()
        created = container.class_service.create_class(
            class_name=payload.get("class_name"),
            grade=payload.get("grade"),
        )
        return ok(created.to_dict(), status=201, message="Class created successfully")

    @app.route("/api/classes/<int:class_id>", methods=["PUT"], endpoint="classes_update")
    def classes_update(class_id: int):
        payload = request_payload()
        updated = container.class_service.update_class(
            class_id,
            class_name=payload.get("class_name"),
            grade=payload.get("grade"),
        )
        return ok(updated.to_dict(), message="Class updated successfully")

    @app.route("/api/classes/<int:class_id>", methods=["DELETE"], endpoint="classes_delete")
    def classes_delete(class_id: int):
        container.class_service.delete_class(class_id)
        return ok(message="Class deleted successfully")
