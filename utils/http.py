# utils/http.py
from flask import jsonify, request


def ok(data=None, message: str = "", status: int = 200):
    return jsonify({"success": True, "data": data, "message": message}), status


def json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object.")
    return body


def id_list(raw: str | None) -> list[int]:
    """'1, 2,3' -> [1, 2, 3]"""
    if not raw:
        return []
    try:
        return [int(x) for x in raw.split(",") if x.strip()]
    except ValueError:
        raise ValueError("Expected a comma separated list of ids.")
