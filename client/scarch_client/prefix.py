"""
Scarch Client — API Prefix Resolver
=====================================

What:  Classifies, strips and rebuilds the leading `/api` or `/api/v1` segment
       of a request path, and remembers which prefix the backend last accepted.
Who:   Used by the request interceptor (rewrite) and the response interceptor
       (memoize, retry on 404).

Prefix families:
    NONE    ""          /transcriptions
    API     "/api"      /api/transcriptions
    API_V1  "/api/v1"   /api/v1/transcriptions

Retry order after a 404 (fixed, matches the backend's known deployments):
    API_V1 → API, NONE
    API    → API_V1, NONE
    NONE   → API, API_V1
"""

import logging
from enum import Enum
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


class ApiPrefix(str, Enum):
    """A URL path prefix a backend deployment may or may not require."""

    NONE = ""
    API = "/api"
    API_V1 = "/api/v1"


_RETRY_ORDER = {
    ApiPrefix.API_V1: (ApiPrefix.API, ApiPrefix.NONE),
    ApiPrefix.API: (ApiPrefix.API_V1, ApiPrefix.NONE),
    ApiPrefix.NONE: (ApiPrefix.API, ApiPrefix.API_V1),
}


def normalize_path(path: Optional[str]) -> str:
    """Adds the leading slash if missing; empty input becomes `/`."""
    raw = str(path or "")
    if not raw:
        return "/"
    return raw if raw.startswith("/") else f"/{raw}"


def _has_prefix(path: str, prefix: ApiPrefix) -> bool:
    return path == prefix.value or path.startswith(f"{prefix.value}/")


def classify(path: Optional[str]) -> ApiPrefix:
    """
    Returns the prefix family a path belongs to.

    `/api/v1` is checked before `/api` since every `/api/v1/...` path also
    starts with `/api/`. `/apix` is NONE: only whole segments count.
    """
    normalized = normalize_path(path)
    if _has_prefix(normalized, ApiPrefix.API_V1):
        return ApiPrefix.API_V1
    if _has_prefix(normalized, ApiPrefix.API):
        return ApiPrefix.API
    return ApiPrefix.NONE


def strip_prefix(path: Optional[str]) -> str:
    """Removes a known prefix. The bare prefix itself maps to `/`."""
    normalized = normalize_path(path)
    prefix = classify(normalized)
    if prefix is ApiPrefix.NONE:
        return normalized
    if normalized == prefix.value:
        return "/"
    return normalized[len(prefix.value):]


def rebuild(path: Optional[str], prefix: ApiPrefix) -> str:
    """
    Re-adds a prefix to a stripped path.

    Examples:
        rebuild("/notes", ApiPrefix.API)    → "/api/notes"
        rebuild("/", ApiPrefix.API_V1)      → "/api/v1/"
        rebuild("/notes", ApiPrefix.NONE)   → "/notes"
    """
    clean = normalize_path(path)
    if prefix is ApiPrefix.NONE:
        return clean
    if clean == "/":
        return f"{prefix.value}/"
    return f"{prefix.value}{clean}"


def retry_order(prefix: ApiPrefix) -> Tuple[ApiPrefix, ApiPrefix]:
    """The two other prefixes, in the order they are tried after a 404."""
    return _RETRY_ORDER[prefix]


class PrefixState:
    """
    The prefix the backend most recently accepted.

    One instance is shared by every ApiClient call of a process; tests make
    their own. Reads and writes are unlocked: concurrent calls converge on
    the right value, and a stale read only costs one extra retry.
    """

    def __init__(self, initial: ApiPrefix = ApiPrefix.NONE):
        self._current = initial

    @property
    def current(self) -> ApiPrefix:
        return self._current

    def remember(self, prefix: ApiPrefix) -> None:
        """Stores the prefix of a path that just succeeded, NONE included."""
        if prefix is not self._current:
            logger.info(
                "API prefix changed: %r → %r",
                self._current.value,
                prefix.value,
            )
        self._current = prefix

    def reset(self) -> None:
        self._current = ApiPrefix.NONE
