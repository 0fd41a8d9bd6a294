"""Helpers shared by the HTTP blueprints."""
import json
from typing import Any, Dict, Optional

import azure.functions as func

from cineverse_catalog_service.exceptions import AuthenticationError

USER_ID_HEADER = "X-User-Id"


def json_response(body: Any, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body, default=str),  # default=str handles datetime
        status_code=status_code,
        mimetype="application/json"
    )


def error_response(message: str, status_code: int, **extra) -> func.HttpResponse:
    return json_response({"error": message, **extra}, status_code=status_code)


def get_user_id(req: func.HttpRequest) -> str:
    """
    Read the signed-in user's ID set by the identity provider gateway.

    Raises:
        AuthenticationError: If the header is missing
    """
    headers = req.headers or {}
    uid = headers.get(USER_ID_HEADER) or headers.get(USER_ID_HEADER.lower())
    if not uid:
        raise AuthenticationError("Sign in required")
    return uid


def get_json_body(req: func.HttpRequest) -> Optional[Dict]:
    """Parsed JSON object body, or None if the body is missing or not an object."""
    try:
        body = req.get_json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None
