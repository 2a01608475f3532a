"""
Scarch Client — Pydantic Request/Response Models
==================================================

What:  The data that flows between services, the ApiClient and the transport.
How:   Frozen models for requests (a logical call never mutates its input),
       plain models for responses and auth results.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Outgoing requests
# ══════════════════════════════════════════════════════════════════════════


class UploadPart(BaseModel):
    """One file part of a multipart body."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(description="Multipart field name, e.g. 'files' or 'images'")
    filename: str
    content: bytes
    content_type: Optional[str] = None


class RequestDescriptor(BaseModel):
    """
    The immutable input of one logical call.

    Retries never mutate a descriptor; they derive a new one with
    `with_path()`. The set of prefixes already tried is threaded through
    the ApiClient loop separately.

    Attributes:
        body:            JSON body (ignored when `form` or `files` is set)
        form:            Plain multipart / form fields
        files:           Multipart file parts
        timeout:         Per-request deadline in seconds, None for the default
        prefix_fallback: Whether a 404 may trigger retries under other prefixes
        pinned:          The prefix was picked by the retry machinery and must
                         not be replaced by the memoized prefix
    """

    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    params: Optional[Dict[str, Any]] = None
    body: Any = None
    form: Optional[Dict[str, Any]] = None
    files: Optional[List[UploadPart]] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout: Optional[float] = None
    prefix_fallback: bool = True
    pinned: bool = False

    @property
    def is_root_relative(self) -> bool:
        return self.path.startswith("/")

    def with_path(self, path: str, pinned: Optional[bool] = None) -> "RequestDescriptor":
        update: Dict[str, Any] = {"path": path}
        if pinned is not None:
            update["pinned"] = pinned
        return self.model_copy(update=update)


# ══════════════════════════════════════════════════════════════════════════
# Responses
# ══════════════════════════════════════════════════════════════════════════


class ApiResponse(BaseModel):
    """
    Normalized backend response.

    body is decoded JSON when the payload parses as JSON, the raw text
    otherwise, and None for an empty payload.
    """

    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Any = None

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def data(self) -> Any:
        """
        The payload with the backend's `{data: ...}` / `{result: ...}`
        envelope removed, when there is one.
        """
        if isinstance(self.body, dict):
            if "data" in self.body:
                return self.body["data"]
            if "result" in self.body:
                return self.body["result"]
        return self.body


class AuthSession(BaseModel):
    """Result of a successful login or registration."""

    token: str
    user: Dict[str, Any] = Field(default_factory=dict)
