"""httpx transport that intercepts requests bound for a mock server.

Requests under the server's prefix and namespace are answered in-process
through ``httpx.ASGITransport``; everything else goes to an optional
passthrough transport (the real network) or is refused.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from rovermock.errors import UnhandledRequestError

if TYPE_CHECKING:
    from rovermock.provider.server import MockServer

logger = logging.getLogger("rovermock.provider")


class InterceptTransport(httpx.AsyncBaseTransport):
    """Route matching requests into a MockServer instead of the network.

    Usage::

        transport = InterceptTransport(server)
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get("http://rover/api/sense/lines")

    Concurrent requests are independent: each runs the server pipeline in
    the caller's task, so responses resolve in order of their sampled
    latency, not in the order they were sent.
    """

    def __init__(
        self,
        server: MockServer,
        *,
        passthrough: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.server = server
        self._mock = httpx.ASGITransport(app=server)
        self._passthrough = passthrough

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if self.server.handles(request.url):
            return await self._mock.handle_async_request(request)

        if self._passthrough is None:
            raise UnhandledRequestError(request.method, str(request.url))

        logger.debug("Passing through %s %s", request.method, request.url)
        return await self._passthrough.handle_async_request(request)

    async def aclose(self) -> None:
        await self._mock.aclose()
        if self._passthrough is not None:
            await self._passthrough.aclose()
