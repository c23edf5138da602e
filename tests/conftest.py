"""Shared test fixtures for thoth."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from thoth.config.schema import ThothConfig
from thoth.providers.credentials import StaticTokenCredentials
from thoth.providers.vertex import VertexClient

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def last_json(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def make_config() -> Any:
    """Factory fixture for ThothConfig with a test project."""

    def _make(**overrides: Any) -> ThothConfig:
        data: dict[str, Any] = {"vertex": {"project_id": "test-project"}}
        data.update(overrides)
        return ThothConfig.model_validate(data)

    return _make


@pytest.fixture
def credentials() -> StaticTokenCredentials:
    return StaticTokenCredentials("test-token")


@pytest.fixture
def json_transport() -> Any:
    """Factory: transport answering every request with *body* / *status*."""

    def _make(body: Any, status: int = 200) -> RecordingTransport:
        def handler(_: httpx.Request) -> httpx.Response:
            if isinstance(body, str):
                return httpx.Response(status, text=body)
            return httpx.Response(status, json=body)

        return RecordingTransport(handler)

    return _make


@pytest.fixture
async def make_vertex(
    credentials: StaticTokenCredentials,
) -> AsyncIterator[Callable[[httpx.MockTransport], VertexClient]]:
    """Factory: VertexClient over a mock transport (clients closed after)."""
    clients: list[httpx.AsyncClient] = []

    def _make(transport: httpx.MockTransport, location: str = "us-central1") -> VertexClient:
        client = httpx.AsyncClient(transport=transport)
        clients.append(client)
        return VertexClient(
            project="test-project",
            location=location,
            credentials=credentials,
            client=client,
        )

    yield _make
    for client in clients:
        await client.aclose()
