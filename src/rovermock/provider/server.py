"""The mock server — route registration plus an ASGI entry point.

Mutable during setup (route registration, providers, middleware).
Frozen once ``create_server()`` returns or the first request arrives.
"""

import logging
import random
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from rovermock._internal.asgi import Receive, Scope, Send
from rovermock._internal.types import Factory, Handler, RandomSource
from rovermock.errors import ConfigurationError, DuplicateRouteError
from rovermock.provider.handler import handle_request
from rovermock.provider.middleware import Middleware
from rovermock.routing.latency import LatencyPolicy
from rovermock.routing.route import Route
from rovermock.routing.router import Router, join_path, normalize_path

logger = logging.getLogger("rovermock.provider")


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    path: str
    handler: Handler
    methods: list[str]
    name: str | None
    latency: LatencyPolicy | None


class MockServer:
    """An in-process HTTP mock answering requests under one URL prefix.

    Routes are registered relative to ``namespace`` and reachable as
    ``{url_prefix}/{namespace}/{path}``::

        server = MockServer(url_prefix="http://rover", namespace="api")
        server.post("move", lambda: None)
        server.get("sense/lines", read_lines, latency=LatencyPolicy(max_ms=3000))

        async with server.client() as client:
            await client.post("http://rover/api/move")
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_list",
        "_pending_routes",
        "_providers",
        "_router",
        "namespace",
        "rng",
        "timing_scale",
        "url_prefix",
    )

    def __init__(
        self,
        *,
        url_prefix: str = "",
        namespace: str = "",
        rng: RandomSource | None = None,
        timing_scale: float = 1.0,
    ) -> None:
        if timing_scale < 0:
            msg = f"timing_scale cannot be negative, got {timing_scale}"
            raise ConfigurationError(msg)
        self.url_prefix = url_prefix.rstrip("/")
        self.namespace = namespace.strip("/")
        self.rng: RandomSource = rng or random.Random()
        self.timing_scale = timing_scale
        self._pending_routes: list[_PendingRoute] = []
        self._middleware_list: list[Middleware] = []
        self._providers: dict[type, Factory] = {}
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._router: Router | None = None
        self._middleware: tuple[Callable[..., Any], ...] = ()

    # -- Route registration --

    def route(
        self,
        path: str,
        handler: Handler | None = None,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
        latency: LatencyPolicy | None = None,
    ) -> Any:
        """Register a route handler, directly or as a decorator.

        Registering a (method, path) key that is already taken raises
        ``DuplicateRouteError``, before or after the table was compiled.
        Any other registration after compilation raises ``RuntimeError``.

        Args:
            path: Path relative to the namespace, e.g. ``"sense/distance"``.
            handler: The handler. When omitted a decorator is returned.
            methods: HTTP methods. Defaults to ``["GET"]``.
            name: Optional route name for introspection.
            latency: Delay applied before the response is delivered.
        """

        def decorator(func: Handler) -> Handler:
            full_path = join_path(self.namespace, path)
            route_methods = [m.upper() for m in (methods or ["GET"])]
            if self._router is not None:
                for method in route_methods:
                    if self._router.has(method, full_path):
                        raise DuplicateRouteError(method, full_path)
            self._check_not_frozen()
            for pending in self._pending_routes:
                if pending.path != full_path:
                    continue
                for method in route_methods:
                    if method in pending.methods:
                        raise DuplicateRouteError(method, full_path)
            self._pending_routes.append(
                _PendingRoute(
                    path=full_path,
                    handler=func,
                    methods=route_methods,
                    name=name,
                    latency=latency,
                )
            )
            return func

        if handler is not None:
            return decorator(handler)
        return decorator

    def get(self, path: str, handler: Handler | None = None, **kwargs: Any) -> Any:
        """Register a GET route."""
        return self.route(path, handler, methods=["GET"], **kwargs)

    def post(self, path: str, handler: Handler | None = None, **kwargs: Any) -> Any:
        """Register a POST route."""
        return self.route(path, handler, methods=["POST"], **kwargs)

    # -- Service injection --

    def provide(self, annotation: type, factory: Factory) -> None:
        """Register a provider factory for dependency injection.

        When a handler parameter's type annotation matches *annotation*,
        the server calls *factory* (with no arguments) at dispatch time
        and injects the result::

            server.provide(DeviceState, lambda: state)

            def read(state: DeviceState) -> int: ...
        """
        self._check_not_frozen()
        self._providers[annotation] = factory

    # -- Middleware --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware to the pipeline."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    # -- Interception --

    def handles(self, url: httpx.URL | str) -> bool:
        """Whether a request to *url* belongs to this server."""
        target = httpx.URL(url)
        if self.url_prefix:
            prefix = httpx.URL(self.url_prefix)
            if (target.scheme, target.host, target.port) != (
                prefix.scheme,
                prefix.host,
                prefix.port,
            ):
                return False
        if not self.namespace:
            return True
        path = normalize_path(target.path)
        root = normalize_path(self.namespace)
        return path == root or path.startswith(root + "/")

    def transport(
        self,
        passthrough: httpx.AsyncBaseTransport | None = None,
    ) -> httpx.AsyncBaseTransport:
        """An ``httpx`` transport that routes matching requests here."""
        from rovermock.provider.transport import InterceptTransport

        return InterceptTransport(self, passthrough=passthrough)

    def client(
        self,
        *,
        passthrough: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> httpx.AsyncClient:
        """An ``httpx.AsyncClient`` whose requests are intercepted by this server.

        Extra keyword arguments go to ``httpx.AsyncClient``; ``base_url``
        defaults to the server's prefix and namespace.
        """
        kwargs.setdefault("base_url", self.base_url)
        return httpx.AsyncClient(transport=self.transport(passthrough), **kwargs)

    @property
    def base_url(self) -> str:
        """``{url_prefix}/{namespace}`` with a trailing slash."""
        namespace = f"{self.namespace}/" if self.namespace else ""
        return f"{self.url_prefix}/{namespace}"

    @property
    def routes(self) -> list[Route]:
        """The compiled route table."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router.routes

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        self._ensure_frozen()

        assert self._router is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            providers=self._providers,
            rng=self.rng,
            timing_scale=self.timing_scale,
        )

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Freeze with double-check locking; exactly one caller compiles."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the server into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for pending in self._pending_routes:
            router.add(
                Route(
                    path=pending.path,
                    handler=pending.handler,
                    methods=frozenset(pending.methods),
                    name=pending.name,
                    latency=pending.latency,
                )
            )
        router.compile()
        self._router = router
        self._middleware = tuple(self._middleware_list)
        self._frozen = True
        logger.debug(
            "Mock server %s compiled with %d routes",
            self.base_url,
            len(router.routes),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the mock server after its route table was compiled. "
                "Register routes, providers and middleware inside create_server(routes=...)."
            )
            raise RuntimeError(msg)


def create_server(
    *,
    url_prefix: str = "",
    namespace: str = "",
    routes: Callable[[MockServer], None] | None = None,
    rng: RandomSource | None = None,
    timing_scale: float = 1.0,
) -> MockServer:
    """Build a mock server, register its routes and compile the table.

    The returned server is immediately ready to answer::

        def routes(server: MockServer) -> None:
            server.post("move", lambda: None)

        server = create_server(url_prefix="http://rover", namespace="api", routes=routes)
    """
    server = MockServer(
        url_prefix=url_prefix,
        namespace=namespace,
        rng=rng,
        timing_scale=timing_scale,
    )
    if routes is not None:
        routes(server)
    server._ensure_frozen()
    return server
