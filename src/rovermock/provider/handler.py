"""ASGI handler — translates ASGI scope/messages to rovermock types.

The only component that touches raw ASGI directly. Converts scope dicts
to Request objects, dispatches through routing and middleware, applies
the route's latency policy and sends the Response back through send().

Handler state changes happen at dispatch time, before the delay is
awaited: mutations follow request arrival order while deliveries follow
the sampled delays.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

import anyio

from rovermock._internal.asgi import Receive, Scope, Send
from rovermock._internal.invoke import invoke
from rovermock._internal.types import Factory, RandomSource
from rovermock.errors import HTTPError
from rovermock.http.request import Request
from rovermock.http.response import Response
from rovermock.provider.errors import handle_http_error, handle_internal_error
from rovermock.provider.middleware import Next
from rovermock.provider.negotiation import negotiate
from rovermock.provider.sender import send_response
from rovermock.routing.route import Route
from rovermock.routing.router import Router

logger = logging.getLogger("rovermock.provider")

LATENCY_HEADER = "x-mock-latency-ms"


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    providers: dict[type, Factory],
    rng: RandomSource,
    timing_scale: float,
) -> None:
    """Process a single intercepted HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    logger.debug("%s %s", request.method, request.path)

    delay_ms: int | None = None
    try:
        route = router.match(request.method, request.path)

        async def dispatch(req: Request) -> Response:
            return await _invoke_handler(route, req, providers)

        handler: Next = dispatch
        for mw in reversed(middleware):

            async def make_next(req: Request, _mw: Any = mw, _next: Next = handler) -> Response:
                return await _mw(req, _next)

            handler = make_next

        response = await handler(request)

        if route.latency is not None:
            delay_ms = route.latency.sample(rng)
    except HTTPError as exc:
        response = handle_http_error(exc, request)
    except Exception as exc:
        response = handle_internal_error(exc, request)

    if delay_ms is not None:
        response = response.with_header(LATENCY_HEADER, str(delay_ms))
        await anyio.sleep(delay_ms * timing_scale / 1000)

    await send_response(response, send)


async def _invoke_handler(
    route: Route,
    request: Request,
    providers: dict[type, Factory],
) -> Response:
    """Call the matched route handler and negotiate its return value."""
    handler = route.handler
    kwargs = _build_handler_kwargs(handler, request, providers)
    result = await invoke(handler, **kwargs)
    return negotiate(result)


def _build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    providers: dict[type, Factory],
) -> dict[str, Any]:
    """Inspect handler signature and build kwargs.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Providers (by type annotation via ``MockServer.provide()``)
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif param.annotation is not inspect.Parameter.empty and param.annotation in providers:
            kwargs[name] = providers[param.annotation]()

    return kwargs
