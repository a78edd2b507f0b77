"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from oracle.config import settings
from oracle.main import app


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> str:
    """Configure a fake Anthropic key for the duration of a test."""
    monkeypatch.setattr(settings, "anthropic_api_key", "test-key")
    return "test-key"


@pytest.fixture
def client(api_key: str) -> TestClient:
    """Test client for the relay app with credentials configured."""
    return TestClient(app)


@pytest.fixture
def chunked_body() -> Callable[..., AsyncIterator[bytes]]:
    """Build a response body that arrives in exactly the given chunks."""

    def _make(*chunks: str) -> AsyncIterator[bytes]:
        async def _gen() -> AsyncIterator[bytes]:
            for chunk in chunks:
                yield chunk.encode()

        return _gen()

    return _make


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by ``handler``."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://relay"
        )

    return _make
