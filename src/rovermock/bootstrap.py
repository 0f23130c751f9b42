"""Interception bootstrap — load the provider, then build the rover on it.

Two steps, in order::

    provider = await install_provider()
    device = initialize(provider, MockConfig(timing_scale=0))

``install_provider`` returns an explicit handle instead of populating a
process-wide slot; ``initialize`` takes that handle. Each call to
``initialize`` builds an independent rover with its own route table.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

import anyio.to_thread

from rovermock._internal.invoke import invoke
from rovermock.config import MockConfig
from rovermock.errors import ProviderLoadError

if TYPE_CHECKING:
    from rovermock._internal.types import RandomSource
    from rovermock.device.server import DeviceServer
    from rovermock.provider import Provider

logger = logging.getLogger("rovermock.bootstrap")

DEFAULT_PROVIDER = "rovermock.provider:PROVIDER"

ProviderSource: TypeAlias = str | Callable[[], Any]


def _import_reference(reference: str) -> Any:
    """Resolve a ``module:attribute`` reference."""
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        msg = f"Expected 'module:attribute', got {reference!r}"
        raise ValueError(msg)
    module = importlib.import_module(module_name)
    return getattr(module, attribute)


async def install_provider(source: ProviderSource = DEFAULT_PROVIDER) -> Provider:
    """Load the interception provider and return a handle on it.

    *source* is a ``module:attribute`` reference, imported in a worker
    thread, or a zero-argument loader (sync or async) returning the
    provider. Resolves only once the provider is usable. One attempt per
    call; any failure raises ``ProviderLoadError`` with the cause chained.
    """
    from rovermock.provider import Provider

    try:
        if isinstance(source, str):
            loaded = await anyio.to_thread.run_sync(_import_reference, source)
        else:
            loaded = await invoke(source)
    except Exception as exc:
        msg = f"Could not load interception provider from {source!r}: {exc}"
        raise ProviderLoadError(msg) from exc

    if not isinstance(loaded, Provider):
        msg = f"{source!r} did not produce a Provider (got {type(loaded).__name__})"
        raise ProviderLoadError(msg)

    logger.info("Interception provider %r installed", loaded.name)
    return loaded


def initialize(
    provider: Provider,
    config: MockConfig | None = None,
    *,
    rng: RandomSource | None = None,
) -> DeviceServer:
    """Build the simulated rover on *provider*.

    The rover's routes are registered before this returns, so requests can
    be sent immediately.
    """
    from rovermock.device.server import DeviceServer

    return DeviceServer(provider, config, rng=rng)
