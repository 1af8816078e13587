"""Pytest configuration and fixtures for cognee-client tests."""

from typing import Callable, Optional

import httpx
import pytest

from cognee_client import ClientConfig


class FakeTransport:
    """Records requests and answers each one with a canned response."""

    def __init__(
        self,
        status_code: int = 200,
        json: object = None,
        content: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
        error: Optional[Exception] = None,
    ):
        self.status_code = status_code
        self.json = json
        self.content = content
        self.headers = headers
        self.error = error
        self.requests: list[httpx.Request] = []
        self.closed = False

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    async def send(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.json is not None:
            return httpx.Response(self.status_code, json=self.json, headers=self.headers, request=request)
        return httpx.Response(self.status_code, content=self.content or b"", headers=self.headers, request=request)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def base_url() -> str:
    """Test base URL."""
    return "https://api.example.com"


@pytest.fixture
def config(base_url: str) -> ClientConfig:
    """Config with no credentials."""
    return ClientConfig(base_url=base_url)


@pytest.fixture
def fake_transport() -> Callable[..., FakeTransport]:
    """Factory for fake transports."""
    return FakeTransport
