"""The request interception provider.

An in-process mock HTTP server plugged into ``httpx`` as a transport.
The module-level ``PROVIDER`` handle is what
``rovermock.bootstrap.install_provider()`` loads by default::

    from rovermock.provider import PROVIDER

    server = PROVIDER.create_server(
        url_prefix="http://rover",
        namespace="api",
        routes=lambda s: s.post("move", lambda: None),
    )
"""

from collections.abc import Callable
from dataclasses import dataclass

from rovermock.provider.middleware import FaultInjector, Middleware, Next
from rovermock.provider.server import MockServer, create_server
from rovermock.provider.transport import InterceptTransport


@dataclass(frozen=True, slots=True)
class Provider:
    """Handle on a loaded interception provider.

    Passed explicitly to whatever builds servers on top of it; there is
    no process-wide provider slot.
    """

    name: str
    create_server: Callable[..., MockServer]


PROVIDER = Provider(name="rovermock", create_server=create_server)

__all__ = [
    "PROVIDER",
    "FaultInjector",
    "InterceptTransport",
    "Middleware",
    "MockServer",
    "Next",
    "Provider",
    "create_server",
]
