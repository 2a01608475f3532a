"""
Scarch Client — Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the client test suite.
How:   A scripted in-memory transport stands in for the network; each test
       declares which (method, path) pairs exist and what they answer.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── prefix_state:  Fresh memoized-prefix state (starts at NONE)
    ├── token_store:   In-memory token store holding "test-token"
    ├── transport:     ScriptedTransport, every route 404 until scripted
    └── api_client:    ApiClient wired to the three above
"""

import os
from typing import Any, Dict, List, Optional, Tuple, Union

import pytest

os.environ["LOG_LEVEL"] = "WARNING"
os.environ["API_URL"] = "https://api.test"

from scarch_client.client import ApiClient  # noqa: E402
from scarch_client.exceptions import TransportError  # noqa: E402
from scarch_client.prefix import PrefixState  # noqa: E402
from scarch_client.schemas import ApiResponse, RequestDescriptor  # noqa: E402
from scarch_client.token_store import MemoryTokenStore  # noqa: E402
from scarch_client.transport import Transport  # noqa: E402


Scripted = Union[ApiResponse, Exception, List[Union[ApiResponse, Exception]]]


class ScriptedTransport(Transport):
    """
    Transport double answering from a script.

    Usage:
        transport.route("GET", "/api/notes", 200, {"data": []})
        transport.route("PATCH", "/x", [response(400), response(200)])

    Unscripted routes answer 404. Every dispatched request is recorded in
    `calls` as (method, path, headers, request).
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Union[ApiResponse, Exception]]] = {}
        self.calls: List[Tuple[str, str, Dict[str, str], RequestDescriptor]] = []

    def route(self, method: str, path: str, status: Any = 200, body: Any = None) -> None:
        if isinstance(status, list):
            self.routes[(method, path)] = list(status)
        elif isinstance(status, Exception):
            self.routes[(method, path)] = [status]
        else:
            self.routes[(method, path)] = [ApiResponse(status_code=status, body=body)]

    @property
    def paths(self) -> List[str]:
        return [path for _, path, _, _ in self.calls]

    async def send(self, request: RequestDescriptor, headers: Dict[str, str]) -> ApiResponse:
        self.calls.append((request.method, request.path, dict(headers), request))
        script = self.routes.get((request.method, request.path))
        if not script:
            return ApiResponse(status_code=404, body={"detail": "Not Found"})
        # The last scripted outcome repeats once the script runs out.
        outcome = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def response(status: int, body: Any = None) -> ApiResponse:
    return ApiResponse(status_code=status, body=body)


def transport_failure(method: str = "GET", path: str = "/") -> TransportError:
    return TransportError(method=method, path=path)


@pytest.fixture
def prefix_state():
    return PrefixState()


@pytest.fixture
def token_store():
    return MemoryTokenStore("test-token")


@pytest.fixture
def transport():
    return ScriptedTransport()


@pytest.fixture
def api_client(transport, token_store, prefix_state):
    return ApiClient(
        transport=transport,
        token_store=token_store,
        prefix_state=prefix_state,
        base_url="https://api.test",
    )


@pytest.fixture
def make_client(prefix_state):
    """Factory for clients with a custom transport or token store."""

    def _make(transport: Transport, token_store: Optional[Any] = None) -> ApiClient:
        return ApiClient(
            transport=transport,
            token_store=token_store if token_store is not None else MemoryTokenStore(),
            prefix_state=prefix_state,
            base_url="https://api.test",
        )

    return _make
