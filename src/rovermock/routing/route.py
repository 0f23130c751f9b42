"""Route frozen dataclass."""

from dataclasses import dataclass

from rovermock._internal.types import Handler
from rovermock.routing.latency import LatencyPolicy


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created while the server is being set up, compiled into the router
    at freeze time.
    """

    path: str
    handler: Handler
    methods: frozenset[str]
    name: str | None = None
    latency: LatencyPolicy | None = None
