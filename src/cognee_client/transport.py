"""HTTP transport used by the request gateway."""

from typing import Optional, Protocol, runtime_checkable

import httpx


@runtime_checkable
class Transport(Protocol):
    """Anything that can send a prepared request and return the response."""

    async def send(self, request: httpx.Request) -> httpx.Response: ...

    async def aclose(self) -> None: ...


class HttpxTransport:
    """
    Transport backed by ``httpx.AsyncClient``.

    The client's cookie jar holds ambient credentials (for example the
    ``auth_token`` cookie set by ``/auth/login``). It is attached to every
    outgoing request, whether or not explicit credentials are configured.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    async def send(self, request: httpx.Request) -> httpx.Response:
        if "cookie" not in request.headers:
            self._client.cookies.set_cookie_header(request)
        return await self._client.send(request)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
