from __future__ import annotations

from typing import Any

from flask import jsonify, request


def request_payload() -> dict:
    """JSON body, falling back to form fields for the HTML forms."""

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def ok(data: Any = None, *, status: int = 200, **extra: Any):
    body = {"success": True}
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "error": message}), status
