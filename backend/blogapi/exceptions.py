"""
Blog API Backend — Custom Exception Hierarchy
===============================================

What:  Defines application-specific exceptions for each error kind the API reports.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": <message>}` JSON bodies with the matching status code.
Who:   Raised by the query builder, services and store adapters.
When:  During request processing, before or instead of a successful response.

Exception Hierarchy:
    BlogAPIError (base)
    ├── MalformedIdentifierError → 400 Bad Request (id is not 24 hex chars)
    ├── MalformedBodyError       → 400 Bad Request (JSON body failed to decode)
    ├── NotFoundError            → 404 Not Found
    └── StoreFailureError        → 500 Internal Server Error
"""

from typing import Any, Dict, Iterable, Optional


class BlogAPIError(Exception):
    """
    Base exception for all Blog API errors.

    Attributes:
        message:  Text returned to the client in the `error` field
        context:  Additional debug info (logged, never returned)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class MalformedIdentifierError(BlogAPIError):
    """
    Raised when a path identifier is not a valid ObjectId.

    When:    GET/PUT/DELETE /api/posts/{id} with anything other than
             a 24-character hexadecimal string.
    HTTP:    400 Bad Request, raised before any store access.
    """

    status_code = 400

    def __init__(
        self,
        raw_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if raw_id is not None:
            ctx["raw_id"] = raw_id
        super().__init__(message="Invalid ID", context=ctx)
        self.raw_id = raw_id


class MalformedBodyError(BlogAPIError):
    """
    Raised when a request body cannot be decoded into a post payload.

    When:    Invalid JSON, missing body, or non-text title/content.
    HTTP:    400 Bad Request. The decode error text is returned as-is.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request body",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(BlogAPIError):
    """
    Raised when zero documents match on read, update or delete.

    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Post",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class StoreFailureError(BlogAPIError):
    """
    Raised when the document store fails for any reason other than "no match".

    What:    Connectivity loss, server selection timeout, write errors, or use
             of the store before connect().
    HTTP:    500 Internal Server Error

    The driver's own error text becomes the message. Whether it reaches the
    client is controlled by `settings.expose_store_errors`.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Document store operation failed",
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(message=message, context=ctx)
        self.operation = operation


def describe_validation_errors(errors: Iterable[Dict[str, Any]]) -> str:
    """
    Flatten Pydantic's error list into one line for the `error` field.

    Example: 'body.title: Input should be a valid string'
    """
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request body"
