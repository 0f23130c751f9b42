"""Middleware protocol and the simulated fault injector.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class required. The server checks the shape, not the lineage.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from rovermock._internal.types import RandomSource
from rovermock.errors import ConfigurationError
from rovermock.http.request import Request
from rovermock.http.response import Response

logger = logging.getLogger("rovermock.provider")

# The next handler in the middleware chain
Next: TypeAlias = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for mock server middleware.

    Accepts both functions and callable objects::

        async def tag(request: Request, next: Next) -> Response:
            response = await next(request)
            return response.with_header("X-Rover", "mock")
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...


class FaultInjector:
    """Answer a fraction of requests with a simulated device failure.

    Mirrors the firmware's mapping of a driver error to
    ``500 text/plain``. The handler is skipped entirely for faulted
    requests, so no device state changes.
    """

    __slots__ = ("_rng", "detail", "rate")

    def __init__(
        self,
        rate: float,
        rng: RandomSource,
        *,
        detail: str = "Simulated device fault",
    ) -> None:
        if not 0.0 <= rate <= 1.0:
            msg = f"Fault rate must be within [0, 1], got {rate}"
            raise ConfigurationError(msg)
        self.rate = rate
        self.detail = detail
        self._rng = rng

    async def __call__(self, request: Request, next: Next) -> Response:
        if self._rng.random() < self.rate:
            logger.debug("Injecting fault into %s %s", request.method, request.path)
            return Response(body=self.detail, status=500)
        return await next(request)
