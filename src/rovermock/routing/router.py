"""Compiled router with exact path matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the mock server freezes.
"""

from rovermock.errors import DuplicateRouteError, MethodNotAllowed, NotFound
from rovermock.routing.route import Route


def normalize_path(path: str) -> str:
    """Collapse a path to its canonical ``/a/b`` form.

    Examples::

        "sense/distance"   -> "/sense/distance"
        "/api//move/"      -> "/api/move"
        ""                 -> "/"
    """
    parts = [p for p in path.split("/") if p]
    return "/" + "/".join(parts)


def join_path(*parts: str) -> str:
    """Join namespace and route fragments into one normalized path."""
    return normalize_path("/".join(parts))


class Router:
    """Route table keyed by normalized path, then HTTP method.

    Usage::

        router = Router()
        router.add(Route("/api/move", handler, frozenset({"POST"})))
        router.compile()
        route = router.match("POST", "/api/move")
    """

    __slots__ = ("_compiled", "_table")

    def __init__(self) -> None:
        self._table: dict[str, dict[str, Route]] = {}
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route. Must be called before compile().

        Raises ``DuplicateRouteError`` if any of the route's methods is
        already registered for the same path.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        path = normalize_path(route.path)
        by_method = self._table.setdefault(path, {})
        for method in route.methods:
            if method in by_method:
                raise DuplicateRouteError(method, path)
        for method in route.methods:
            by_method[method] = route

    @property
    def routes(self) -> list[Route]:
        """All registered routes, each listed once."""
        seen: set[int] = set()
        result: list[Route] = []
        for by_method in self._table.values():
            for route in by_method.values():
                if id(route) not in seen:
                    seen.add(id(route))
                    result.append(route)
        return result

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def has(self, method: str, path: str) -> bool:
        """Whether *method* is already registered for *path*."""
        return method.upper() in self._table.get(normalize_path(path), {})

    def match(self, method: str, path: str) -> Route:
        """Match a request method and path against the table.

        Raises ``NotFound`` if no route has this path.
        Raises ``MethodNotAllowed`` if the path exists but not for this method.
        """
        by_method = self._table.get(normalize_path(path))
        if not by_method:
            raise NotFound(f"No route matches {method} {path!r}")
        route = by_method.get(method.upper())
        if route is None:
            raise MethodNotAllowed(frozenset(by_method))
        return route
