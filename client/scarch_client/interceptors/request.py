"""
Scarch Client — Request Interceptor
=====================================

What:  Runs before every dispatch: applies the memoized API prefix and
       attaches the bearer token.
When:  Once per transport exchange, retries included.

Rewrite rule:
    /transcriptions  + memoized /api  → /api/transcriptions
    /api/v1/notes    + memoized /api  → unchanged (explicit prefix)
    transcriptions   + memoized /api  → unchanged (not root-relative)
    pinned retry     + anything       → unchanged
"""

import logging
from typing import Dict, Optional, Tuple

from scarch_client.prefix import ApiPrefix, PrefixState, classify
from scarch_client.schemas import RequestDescriptor
from scarch_client.token_store import TokenStore

logger = logging.getLogger(__name__)


class RequestInterceptor:
    def __init__(self, prefix_state: PrefixState, token_store: Optional[TokenStore]):
        self.prefix_state = prefix_state
        self.token_store = token_store

    def apply_prefix(self, request: RequestDescriptor) -> RequestDescriptor:
        memoized = self.prefix_state.current
        if (
            memoized is ApiPrefix.NONE
            or request.pinned
            or not request.is_root_relative
            or classify(request.path) is not ApiPrefix.NONE
        ):
            return request
        return request.with_path(f"{memoized.value}{request.path}")

    async def read_token(self) -> Optional[str]:
        """The stored token; a failing store reads as "no token"."""
        if self.token_store is None:
            return None
        try:
            return await self.token_store.get()
        except Exception as e:
            logger.warning("Token retrieval failed, sending request without it: %s", e)
            return None

    async def prepare(self, request: RequestDescriptor) -> Tuple[RequestDescriptor, Dict[str, str]]:
        """
        Returns the request as it will be dispatched, plus its final headers.
        A stored token overrides any Authorization header the caller set.
        """
        resolved = self.apply_prefix(request)
        headers = dict(request.headers)

        token = await self.read_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return resolved, headers
