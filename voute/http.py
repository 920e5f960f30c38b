from typing import Any
from flask import jsonify

def jerror(status: int, code: str, message: str, details: Any = None):
    payload = {"code": code, "message": message}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def validation_error(e, status: int = 422):
    """Turns a pydantic ValidationError into the standard error payload."""
    errors = e.errors(include_url=False, include_context=False, include_input=False)
    first = errors[0]["msg"].removeprefix("Value error, ") if errors else "Invalid input."
    return jerror(status, "VALIDATION_ERROR", first, details=errors)
