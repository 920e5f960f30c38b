import hmac
from flask import current_app, request


def _provided_token() -> str:
    auth_header = request.headers.get("Authorization", "").strip()
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip()
    return request.headers.get("X-API-Key", "").strip()


def check_admin() -> bool:
    """
    Checks the Authorization bearer token (or X-API-Key header) against ADMIN_TOKEN.
    """
    expected_token = (current_app.config.get("ADMIN_TOKEN") or "").strip()
    if not expected_token:
        return False

    provided_token = _provided_token()
    if not provided_token:
        return False
    return hmac.compare_digest(provided_token, expected_token)
