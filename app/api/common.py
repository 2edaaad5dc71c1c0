from flask import jsonify, request

from app.utils.responses import error_response
from app.utils.validators import parse_positive_int


def get_json_body():
    """The request's JSON object, or None when absent or not an object."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def missing_body():
    result, status_code = error_response("Request body is required", 400)
    return jsonify(result), status_code


def parse_path_id(value, thing):
    """Parse a path id; returns (id, None) or (None, error response)."""
    parsed = parse_positive_int(value)
    if parsed is None:
        result, status_code = error_response(f"{thing} ID must be a positive integer", 400)
        return None, (jsonify(result), status_code)
    return parsed, None
