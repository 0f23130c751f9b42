"""The simulated rover HTTP surface.

Registers the rover route table against a provider-built mock server and
owns the only persistent simulation state: the cumulative distance and
the last actuation commands.

    Route              Method  Answer                         Latency
    move               POST    204, body ignored              none
    look               POST    204, body ignored              none
    move               GET     last move command or null      none
    look               GET     last look command or null      none
    sense/obstacles    GET     [bool, bool]                   [0, 3000) ms
    sense/lines        GET     [bool, bool]                   [0, 3000) ms
    sense/distance     GET     running distance total         [0, 3000) ms
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any

import httpx

from rovermock.config import MockConfig
from rovermock.device import handlers
from rovermock.device.sensors import SensorModel
from rovermock.device.state import DeviceState
from rovermock.provider.middleware import FaultInjector
from rovermock.routing.latency import LatencyPolicy

if TYPE_CHECKING:
    from rovermock._internal.types import RandomSource
    from rovermock.provider import Provider
    from rovermock.provider.server import MockServer

logger = logging.getLogger("rovermock.device")


class DeviceServer:
    """One simulated rover.

    Independent instances do not share state, so parallel tests can each
    run their own rover::

        device = DeviceServer(PROVIDER, MockConfig(timing_scale=0), rng=random.Random(1))

        async with device.client() as client:
            await client.post("move", json={"type": "Forward", "speed": 40})
            distance = (await client.get("sense/distance")).json()
    """

    __slots__ = ("config", "rng", "sensors", "server", "state")

    def __init__(
        self,
        provider: Provider,
        config: MockConfig | None = None,
        *,
        rng: RandomSource | None = None,
    ) -> None:
        self.config: MockConfig = config or MockConfig()
        self.rng: RandomSource = rng or random.Random()
        self.state = DeviceState()
        self.sensors = SensorModel(self.rng, max_distance_step=self.config.distance_step)
        self.server: MockServer = provider.create_server(
            url_prefix=self.config.url_prefix,
            namespace=self.config.namespace,
            routes=self.register_routes,
            rng=self.rng,
            timing_scale=self.config.timing_scale,
        )
        logger.info(
            "Simulated rover ready at %s (%d routes)",
            self.server.base_url,
            len(self.server.routes),
        )

    def register_routes(self, server: MockServer) -> None:
        """Register the rover route table on *server*.

        Registering twice on the same server raises ``DuplicateRouteError``,
        whether or not the server was already compiled. Routes go first so
        that the duplicate is reported before anything else is touched.
        """
        server.post("move", handlers.move, name="move")
        server.post("look", handlers.look, name="look")
        server.get("move", handlers.move_state, name="move_state")
        server.get("look", handlers.look_state, name="look_state")

        sense_latency = LatencyPolicy(max_ms=self.config.sense_latency_ms)
        server.get(
            "sense/obstacles", handlers.sense_obstacles, name="obstacles", latency=sense_latency
        )
        server.get("sense/lines", handlers.sense_lines, name="lines", latency=sense_latency)
        server.get(
            "sense/distance", handlers.sense_distance, name="distance", latency=sense_latency
        )

        server.provide(DeviceState, lambda: self.state)
        server.provide(SensorModel, lambda: self.sensors)
        server.provide(MockConfig, lambda: self.config)

        if self.config.fault_rate > 0:
            server.add_middleware(FaultInjector(self.config.fault_rate, self.rng))

    @property
    def distance(self) -> int:
        """Current cumulative distance."""
        return self.state.distance

    def client(self, **kwargs: Any) -> httpx.AsyncClient:
        """An ``httpx.AsyncClient`` talking to this rover.

        Requests outside the rover's URL prefix reach the real network only
        when ``config.passthrough`` is set.
        """
        passthrough = httpx.AsyncHTTPTransport() if self.config.passthrough else None
        return self.server.client(passthrough=passthrough, **kwargs)
