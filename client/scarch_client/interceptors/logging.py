"""
Scarch Client — Exchange Logging & Call Correlation
=====================================================

What:  A short correlation id per logical call, and one log line per
       transport exchange.
How:   The id lives in a ContextVar so concurrent calls on the same event
       loop keep their own. Every retry of a logical call shares its id.
Who:   ApiClient opens a call scope and logs each exchange.

Log line:
    GET /api/v1/transcriptions 404 12.4ms [a1b2c3d4]

What we log vs what we DON'T log:
    ✅ method, dispatched path, status, duration, call id
    ❌ bodies, query values, Authorization header
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

logger = logging.getLogger("scarch_client.http")

call_id_var: ContextVar[str] = ContextVar("call_id", default="")


def new_call_id() -> str:
    return str(uuid.uuid4())[:8]


@contextmanager
def call_scope(call_id: Optional[str] = None) -> Iterator[str]:
    """Binds a correlation id for the duration of one logical call."""
    cid = call_id or new_call_id()
    token = call_id_var.set(cid)
    try:
        yield cid
    finally:
        call_id_var.reset(token)


def log_exchange(method: str, path: str, status: int, duration_ms: float) -> None:
    """Logs one request/response pair at a level chosen by status."""
    if status >= 500:
        log_level = logging.ERROR
    elif status >= 400:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO

    cid = call_id_var.get()
    logger.log(
        log_level,
        "%s %s %d %.1fms [%s]",
        method,
        path,
        status,
        duration_ms,
        cid,
        extra={
            "call_id": cid,
            "method": method,
            "path": path,
            "status": status,
            "duration_ms": round(duration_ms, 2),
        },
    )


def log_transport_failure(method: str, path: str, duration_ms: float, error: Exception) -> None:
    cid = call_id_var.get()
    logger.error(
        "%s %s failed after %.1fms [%s]: %s",
        method,
        path,
        duration_ms,
        cid,
        type(error).__name__,
        extra={
            "call_id": cid,
            "method": method,
            "path": path,
            "duration_ms": round(duration_ms, 2),
        },
    )
