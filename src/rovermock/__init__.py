"""rovermock — a simulated rover HTTP surface for client development.

Intercepts a client's outgoing ``httpx`` requests in-process and answers
them the way the rover would: acknowledged actuation, noisy sensor
readings, an accumulating odometer and variable latency.

Basic usage::

    from rovermock import MockConfig, initialize, install_provider

    provider = await install_provider()
    device = initialize(provider, MockConfig(timing_scale=0))

    async with device.client() as client:
        await client.post("move", json={"type": "Forward", "speed": 40})
        obstacles = (await client.get("sense/obstacles")).json()
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "DeviceServer",
    "DeviceState",
    "DuplicateRouteError",
    "HTTPError",
    "LatencyPolicy",
    "MethodNotAllowed",
    "MockConfig",
    "MockServer",
    "NotFound",
    "Provider",
    "ProviderLoadError",
    "Request",
    "Response",
    "RoverMockError",
    "UnhandledRequestError",
    "create_server",
    "initialize",
    "install_provider",
]

_ERRORS = (
    "ConfigurationError",
    "DuplicateRouteError",
    "HTTPError",
    "MethodNotAllowed",
    "NotFound",
    "ProviderLoadError",
    "RoverMockError",
    "UnhandledRequestError",
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import rovermock`` fast while providing a clean top-level API.
    """
    if name == "MockConfig":
        from rovermock.config import MockConfig

        return MockConfig

    if name in ("install_provider", "initialize"):
        from rovermock import bootstrap as _bootstrap

        return getattr(_bootstrap, name)

    if name in ("DeviceServer", "DeviceState"):
        from rovermock import device as _device

        return getattr(_device, name)

    if name in ("MockServer", "Provider", "create_server"):
        from rovermock import provider as _provider

        return getattr(_provider, name)

    if name == "LatencyPolicy":
        from rovermock.routing.latency import LatencyPolicy

        return LatencyPolicy

    if name == "Request":
        from rovermock.http.request import Request

        return Request

    if name == "Response":
        from rovermock.http.response import Response

        return Response

    if name in _ERRORS:
        from rovermock import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
