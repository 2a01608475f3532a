"""
Scarch Client — Transport
===========================

What:  Executes exactly one HTTP request and returns the raw outcome.
How:   `Transport` is the abstract contract; `HttpxTransport` implements it on
       top of a shared `httpx.AsyncClient`.
Who:   Called only by `ApiClient`, which owns retries and error mapping.

Contract:
    - Redirects are followed; the final status (2xx, 4xx, 5xx) comes back
      as an ApiResponse.
    - No response at all (connect error, timeout) raises TransportError.
    - No retries, no body caching.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import httpx

from scarch_client.config import settings
from scarch_client.exceptions import TransportError
from scarch_client.schemas import ApiResponse, RequestDescriptor

logger = logging.getLogger(__name__)


class Transport(ABC):
    """
    Abstract single-request executor.

    Implementations:
        - HttpxTransport: real network I/O through httpx
        - Test doubles: scripted responses keyed by method and path
    """

    @abstractmethod
    async def send(self, request: RequestDescriptor, headers: Dict[str, str]) -> ApiResponse:
        """
        Dispatch one request.

        Args:
            request: Fully resolved request (path already rewritten).
            headers: Final headers, Authorization included when available.

        Returns:
            ApiResponse for any HTTP status.

        Raises:
            TransportError: No response was received.
        """
        ...

    async def aclose(self) -> None:
        """Release connections. Stateless transports need not override."""


def decode_body(response: httpx.Response) -> Any:
    """JSON when it parses, text otherwise, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpxTransport(Transport):
    """
    Transport over `httpx.AsyncClient`.

    The client is created lazily with `settings.api_url` as base URL, or
    injected (tests pass one wired to `httpx.ASGITransport`).
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            logger.debug("Opening HTTP client for %s", self.base_url)
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                follow_redirects=True,
            )
        return self._client

    @staticmethod
    def _files(request: RequestDescriptor) -> Optional[List[Tuple[str, Tuple[str, bytes, str]]]]:
        if not request.files:
            return None
        return [
            (
                part.field,
                (part.filename, part.content, part.content_type or "application/octet-stream"),
            )
            for part in request.files
        ]

    async def send(self, request: RequestDescriptor, headers: Dict[str, str]) -> ApiResponse:
        kwargs: Dict[str, Any] = {
            "params": request.params or None,
            "headers": headers,
            # injected clients follow redirects too
            "follow_redirects": True,
        }
        if request.timeout is not None:
            kwargs["timeout"] = request.timeout

        if request.files or request.form is not None:
            # httpx sets the multipart boundary itself
            kwargs["data"] = request.form or None
            kwargs["files"] = self._files(request)
        elif request.body is not None:
            kwargs["json"] = request.body

        try:
            response = await self.client.request(request.method, request.path, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(
                message="The request timed out.",
                method=request.method,
                path=request.path,
                timed_out=True,
                context={"error_type": type(e).__name__},
            ) from e
        except httpx.TransportError as e:
            raise TransportError(
                method=request.method,
                path=request.path,
                context={"error_type": type(e).__name__},
            ) from e

        return ApiResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=decode_body(response),
        )

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
