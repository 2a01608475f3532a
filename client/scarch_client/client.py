"""
Scarch Client — ApiClient
===========================

What:  The adaptive client every service talks through.
How:   Each logical call runs an explicit loop over the interceptor chain:

           prepare (prefix + token) → Transport.send → success? memoize, return
                                                     → error?   retry or raise

       The loop carries the current request and the set of prefixes tried so
       far; a retry is a fresh pass through the whole chain, so a second 404
       continues the prefix cascade and a success updates the memoized prefix.
Who:   Services in `scarch_client.services`, and the ScarchApi facade.

Failure semantics:
    - TransportError propagates immediately (no retry).
    - 5xx and any status other than 404 propagate immediately.
    - 404 retries are capped by the three known prefixes.
"""

import logging
import time
from typing import Any, Dict, List, Optional

from scarch_client.config import settings
from scarch_client.exceptions import TransportError, api_error_from_response
from scarch_client.interceptors.logging import (
    call_scope,
    log_exchange,
    log_transport_failure,
)
from scarch_client.interceptors.request import RequestInterceptor
from scarch_client.interceptors.response import ResponseInterceptor, TriedPrefixes
from scarch_client.prefix import PrefixState
from scarch_client.schemas import ApiResponse, RequestDescriptor, UploadPart
from scarch_client.token_store import MemoryTokenStore, TokenStore
from scarch_client.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Adaptive request-routing client.

    Args:
        transport:    Single-request executor (default: HttpxTransport)
        token_store:  Bearer-token storage (default: in-memory)
        prefix_state: Memoized API prefix, shared by all calls of this client
        base_url:     Origin used by `absolute_url()` (default: settings.api_url)
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        token_store: Optional[TokenStore] = None,
        prefix_state: Optional[PrefixState] = None,
        base_url: Optional[str] = None,
    ):
        self.transport = transport or HttpxTransport()
        self.token_store = token_store if token_store is not None else MemoryTokenStore()
        self.prefix_state = prefix_state or PrefixState()
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.request_interceptor = RequestInterceptor(self.prefix_state, self.token_store)
        self.response_interceptor = ResponseInterceptor(self.prefix_state, self.token_store)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.transport.aclose()

    # ── Public entry points ───────────────────────────────────────────────

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
        form: Optional[Dict[str, Any]] = None,
        files: Optional[List[UploadPart]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        prefix_fallback: bool = True,
    ) -> ApiResponse:
        """
        Run one logical call.

        Args:
            method:          HTTP method
            path:            Logical path, usually root-relative and prefix-less
            prefix_fallback: Allow 404s to retry under the other API prefixes.
                             Family cascades turn this off because their
                             candidate lists already spell out the prefixes.

        Returns:
            ApiResponse with a status below 400.

        Raises:
            ApiError (or a status subclass): backend rejected the call
            TransportError: no response received
        """
        request = RequestDescriptor(
            method=method.upper(),
            path=path,
            params=params,
            body=body,
            form=form,
            files=files,
            headers=headers or {},
            timeout=timeout,
            prefix_fallback=prefix_fallback,
        )
        with call_scope():
            return await self._dispatch(request)

    async def get(self, path: str, **kwargs: Any) -> ApiResponse:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> ApiResponse:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> ApiResponse:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> ApiResponse:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> ApiResponse:
        return await self.request("DELETE", path, **kwargs)

    def absolute_url(self, path: str, with_prefix: bool = True) -> str:
        """
        Full URL for links handed to other components (image viewers,
        audio players) that fetch outside this client.
        """
        prefix = self.prefix_state.current.value if with_prefix else ""
        return f"{self.base_url}{prefix}{path}"

    # ── State machine ─────────────────────────────────────────────────────

    async def _dispatch(self, request: RequestDescriptor) -> ApiResponse:
        tried: Optional[TriedPrefixes] = None

        while True:
            prepared, headers = await self.request_interceptor.prepare(request)
            start_time = time.perf_counter()
            try:
                response = await self.transport.send(prepared, headers)
            except TransportError as e:
                log_transport_failure(
                    prepared.method,
                    prepared.path,
                    (time.perf_counter() - start_time) * 1000,
                    e,
                )
                raise

            log_exchange(
                prepared.method,
                prepared.path,
                response.status_code,
                (time.perf_counter() - start_time) * 1000,
            )

            if response.ok:
                self.response_interceptor.on_success(prepared)
                return response

            error = api_error_from_response(
                response.status_code,
                body=response.body,
                method=prepared.method,
                path=prepared.path,
            )
            retry = await self.response_interceptor.on_error(prepared, error, tried)
            if retry is None:
                raise error
            request, tried = retry
