"""
Posts API — Response Envelope Helpers
======================================

Every endpoint answers with the same shape:

    {"success": bool, "data": object | null, "error": string | null}

These helpers build that dict. They are stateless and safe to call from
anywhere, including exception handlers.
"""

from typing import Any, Dict, Optional

# ── Shared messages ───────────────────────────────────────────────────────
INVALID_POST_ID = "Invalid post ID"
POST_NOT_FOUND = "Post not found"
USER_ID_REQUIRED = "user_id is required"
USER_ID_NOT_INTEGER = "user_id must be an integer"
INVALID_JSON_BODY = "Request body is not valid JSON"
BODY_NOT_OBJECT = "Request body must be a JSON object"
INTERNAL_SERVER_ERROR = "Internal server error"
POST_DELETED = "Post deleted successfully"
SERVER_RUNNING = "API Server is running"


def create_response(
    success: bool,
    data: Any = None,
    error: Optional[str] = None,
) -> Dict[str, Any]:
    """Build the envelope dict."""
    return {"success": success, "data": data, "error": error}


def create_success_response(data: Any, message: Optional[str] = None) -> Dict[str, Any]:
    """
    Successful envelope. When `message` is given it is merged into `data`.

    >>> create_success_response({"id": 1}, "Created")
    {'success': True, 'data': {'id': 1, 'message': 'Created'}, 'error': None}
    """
    if message:
        data = {**(data or {}), "message": message}
    return create_response(True, data, None)


def create_error_response(error: str) -> Dict[str, Any]:
    """Failed envelope: no data, just the error message."""
    return create_response(False, None, error)


def route_not_found_message(method: str, path: str) -> str:
    return f"Route {method} {path} not found"
