"""
Posts API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for each error category the API reports.
Why:   Services raise these; global handlers in main.py turn them into the
       `{success, data, error}` envelope with the right status code.
How:   Each exception carries a client-facing message and an optional
       context dict that is logged but never returned.

Exception Hierarchy:
    PostsAPIError (base)
    ├── ValidationError       → 400 Bad Request (client can fix)
    ├── NotFoundError         → 404 Not Found (single-post get/update only)
    ├── DatabaseError         → 400 Bad Request (driver message passed through)
    └── InternalServerError   → 500 Internal Server Error (generic message)

Why DatabaseError is a 400:
    The hosted database is trusted infrastructure; its error text (constraint
    violations, type mismatches) is returned verbatim so the caller can act on it.
"""

from typing import Any, Dict, Optional

from posts_api.utils.responses import INTERNAL_SERVER_ERROR, POST_NOT_FOUND


class PostsAPIError(Exception):
    """
    Base exception for all Posts API errors.

    Attributes:
        message:      Client-facing error description (safe to return)
        context:      Debug info (logged, NOT returned)
        status_code:  HTTP status the global handler responds with
    """

    status_code = 500

    def __init__(
        self,
        message: str = INTERNAL_SERVER_ERROR,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PostsAPIError):
    """
    Raised when client input fails validation.

    When:  Invalid id, missing user_id, blank/oversized title or body, bad JSON.
    HTTP:  400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(PostsAPIError):
    """
    Raised when a single post lookup or update matches no row.

    Never raised by list or delete: an empty page and deleting a missing
    post are both successes.
    """

    status_code = 404

    def __init__(
        self,
        message: str = POST_NOT_FOUND,
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(PostsAPIError):
    """
    Raised when the database rejects a query, insert, update or delete.

    HTTP:  400 Bad Request, `message` is the driver's own error text.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Database request failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InternalServerError(PostsAPIError):
    """
    Raised when an operation fails for a reason we did not anticipate.

    The original exception is logged with its traceback by the service;
    the client only ever sees "Internal server error".
    """

    status_code = 500

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=INTERNAL_SERVER_ERROR, context=context)
