"""
Scarch Client — Response/Error Interceptor
============================================

What:  Runs after every exchange and decides what happens next.
Who:   ApiClient's dispatch loop.

State machine per logical call:
    success              → memoize prefix of the dispatched path → return
    401                  → clear token (a failing store is logged) → propagate
    404 & root-relative  → next untried prefix? rebuild path → dispatch again
      & prefix fallback    none left?                         → propagate
    anything else        → propagate

The tried set starts as {classify(path)} and grows by one prefix per retry,
so a logical call makes at most 2 prefix retries.
"""

import logging
from typing import FrozenSet, Optional, Tuple

from scarch_client.exceptions import ApiError, NotFoundError, UnauthorizedError
from scarch_client.prefix import (
    ApiPrefix,
    PrefixState,
    classify,
    rebuild,
    retry_order,
    strip_prefix,
)
from scarch_client.schemas import RequestDescriptor
from scarch_client.token_store import TokenStore

logger = logging.getLogger(__name__)

TriedPrefixes = FrozenSet[ApiPrefix]


def next_prefix(path: str, tried: Optional[TriedPrefixes]) -> Tuple[Optional[ApiPrefix], TriedPrefixes]:
    """
    Picks the next prefix to try for a path that just returned 404.

    Returns:
        (prefix, tried) where prefix is None once every alternative is used,
        and tried is the set including the path's own prefix.
    """
    current = classify(path)
    already = tried if tried is not None else frozenset({current})
    for candidate in retry_order(current):
        if candidate not in already:
            return candidate, already
    return None, already


class ResponseInterceptor:
    def __init__(self, prefix_state: PrefixState, token_store: Optional[TokenStore]):
        self.prefix_state = prefix_state
        self.token_store = token_store

    def on_success(self, request: RequestDescriptor) -> None:
        """Memoizes the prefix of a dispatched path that worked, NONE included."""
        if request.is_root_relative:
            self.prefix_state.remember(classify(request.path))

    async def on_error(
        self,
        request: RequestDescriptor,
        error: ApiError,
        tried: Optional[TriedPrefixes],
    ) -> Optional[Tuple[RequestDescriptor, TriedPrefixes]]:
        """
        Handles an error response.

        Returns:
            (retry request, updated tried set) to dispatch again, or None when
            the error must propagate to the caller unchanged.
        """
        if isinstance(error, UnauthorizedError):
            await self._clear_token()
            return None

        if not isinstance(error, NotFoundError):
            return None
        if not request.prefix_fallback or not request.is_root_relative:
            return None

        candidate, already = next_prefix(request.path, tried)
        if candidate is None:
            logger.info(
                "%s %s: not found under any API prefix (tried %s)",
                request.method,
                strip_prefix(request.path),
                sorted(p.value or "<none>" for p in already),
            )
            return None

        retry_path = rebuild(strip_prefix(request.path), candidate)
        logger.info(
            "%s %s returned 404, retrying as %s",
            request.method,
            request.path,
            retry_path,
        )
        return request.with_path(retry_path, pinned=True), already | {candidate}

    async def _clear_token(self) -> None:
        if self.token_store is None:
            return
        logger.warning("401 received, clearing stored token")
        try:
            await self.token_store.clear()
        except Exception as e:
            logger.warning("Token clearing failed, propagating the 401 anyway: %s", e)
