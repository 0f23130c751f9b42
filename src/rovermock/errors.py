"""rovermock exception hierarchy.

Shared across Router, MockServer, bootstrap and the device layer so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class RoverMockError(Exception):
    """Base for all rovermock-specific errors."""


class ConfigurationError(RoverMockError):
    """Raised when a server or config is set up with invalid values."""


class DuplicateRouteError(ConfigurationError):
    """Raised when the same method and path are registered twice.

    Route tables are immutable once compiled; registering a second copy
    of a route (e.g. initializing the device server twice against one
    mock server) is rejected instead of silently overriding.
    """

    def __init__(self, method: str, path: str) -> None:
        self.method = method
        self.path = path
        super().__init__(f"Route {method} {path!r} is already registered.")


class ProviderLoadError(RoverMockError):
    """Raised when the interception provider cannot be loaded.

    Loading is attempted once per call; the original failure is chained
    as ``__cause__``.
    """


class UnhandledRequestError(RoverMockError):
    """Raised by the transport for a request outside the intercepted prefix."""

    def __init__(self, method: str, url: str) -> None:
        self.method = method
        self.url = url
        super().__init__(
            f"No mock route intercepts {method} {url} and passthrough is disabled."
        )


@dataclass(frozen=True, slots=True)
class HTTPError(RoverMockError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware or handlers. The request pipeline
    catches these and turns them into plain text responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
