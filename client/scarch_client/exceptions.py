"""
Scarch Client — Exception Hierarchy
=====================================

What:  Client-specific exceptions for every way a backend call can end badly.
How:   Each exception carries a message and an optional context dict. HTTP
       failures carry the status, decoded body, method and dispatched path.
Who:   Raised by the transport, the ApiClient state machine and the cascades;
       caught by call sites (UI, scripts).

Exception Hierarchy:
    ScarchClientError (base)
    ├── TransportError               → network failure or timeout, never retried
    ├── ApiError                     → backend answered with status >= 400
    │   ├── BadRequestError          → 400 (also a shape rejection)
    │   ├── UnauthorizedError        → 401 (token already cleared)
    │   ├── NotFoundError            → 404 (after prefix retries, if any)
    │   └── UnprocessableEntityError → 422 (also a shape rejection)
    └── FamilyRouteUnavailableError  → no candidate route of a family exists

    A NotFoundError means "this item does not exist"; a
    FamilyRouteUnavailableError means "the endpoint family could not be
    located at all" and should be shown as an unavailable feature.
"""

from typing import Any, Dict, Optional, Sequence


class ScarchClientError(Exception):
    """
    Base exception for all client errors.

    Attributes:
        message:  Human-readable description, safe to show to users
        context:  Additional debug info for logs
    """

    def __init__(
        self,
        message: str = "An unexpected client error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class TransportError(ScarchClientError):
    """
    Raised when no HTTP response was received at all.

    When:    DNS failure, refused connection, TLS error, read/connect timeout.
    Retry:   Never retried by the client. The original httpx exception is
             available as `__cause__`.
    """

    def __init__(
        self,
        message: str = "The server could not be reached",
        method: Optional[str] = None,
        path: Optional[str] = None,
        timed_out: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if method:
            ctx["method"] = method
        if path:
            ctx["path"] = path
        ctx["timed_out"] = timed_out
        super().__init__(message=message, context=ctx)
        self.method = method
        self.path = path
        self.timed_out = timed_out


def _extract_message(body: Any, fallback: str) -> str:
    """Picks the backend's own error text out of a decoded body, if any."""
    if isinstance(body, str) and body.strip():
        return body.strip()
    if not isinstance(body, dict):
        return fallback
    for key in ("error", "message", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    data = body.get("data")
    if isinstance(data, dict):
        for key in ("error", "message"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return fallback


class ApiError(ScarchClientError):
    """
    Raised when the backend responds with an HTTP error status.

    Attributes:
        status_code: HTTP status returned by the backend
        body:        Decoded response body (dict, list, str or None)
        method:      HTTP method of the dispatched request
        path:        Path actually dispatched (after prefix rewriting)
    """

    def __init__(
        self,
        status_code: int,
        body: Any = None,
        method: Optional[str] = None,
        path: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["status_code"] = status_code
        if method:
            ctx["method"] = method
        if path:
            ctx["path"] = path
        super().__init__(
            message=message or _extract_message(body, f"HTTP {status_code}"),
            context=ctx,
        )
        self.status_code = status_code
        self.body = body
        self.method = method
        self.path = path


class BadRequestError(ApiError):
    """400 Bad Request. Cascades treat it as a payload-shape rejection."""


class UnauthorizedError(ApiError):
    """
    401 Unauthorized.

    By the time this reaches the caller the stored token has been cleared.
    Re-login is the caller's job.
    """


class NotFoundError(ApiError):
    """404 Not Found, raised once every applicable prefix has been tried."""


class UnprocessableEntityError(ApiError):
    """422 Unprocessable Entity. Cascades treat it as a payload-shape rejection."""


_STATUS_ERRORS = {
    400: BadRequestError,
    401: UnauthorizedError,
    404: NotFoundError,
    422: UnprocessableEntityError,
}


def api_error_from_response(
    status_code: int,
    body: Any = None,
    method: Optional[str] = None,
    path: Optional[str] = None,
) -> ApiError:
    """Builds the most specific ApiError subclass for an HTTP status."""
    error_cls = _STATUS_ERRORS.get(status_code, ApiError)
    return error_cls(status_code=status_code, body=body, method=method, path=path)


class FamilyRouteUnavailableError(ScarchClientError):
    """
    Raised when every candidate route of a resource family returned 404.

    When:    All base paths (and nested suffixes, when the operation has them)
             of e.g. the form-fills family were tried without locating the
             endpoint.
    Cause:   The last NotFoundError is chained as `__cause__`.
    """

    def __init__(
        self,
        family: str,
        tried_paths: Sequence[str] = (),
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"No {family} route available on this server"
        ctx = context or {}
        ctx["family"] = family
        ctx["tried_paths"] = list(tried_paths)
        super().__init__(message=message, context=ctx)
        self.family = family
        self.tried_paths = list(tried_paths)
