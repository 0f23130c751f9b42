"""Tests for rovermock.device: the simulated rover route table."""

import asyncio
import itertools
import random

import pytest

from rovermock.config import MockConfig
from rovermock.device.sensors import SensorModel
from rovermock.device.server import DeviceServer
from rovermock.errors import DuplicateRouteError
from rovermock.provider import PROVIDER, create_server
from rovermock.routing.latency import LatencyPolicy
from rovermock.testing import (
    assert_bool_pair,
    assert_distance_step,
    assert_latency_within,
    assert_no_content,
    reading,
)


class TestRouteTable:
    def test_routes(self, device: DeviceServer) -> None:
        table = {
            (method, route.path) for route in device.server.routes for method in route.methods
        }
        assert table == {
            ("POST", "/api/move"),
            ("POST", "/api/look"),
            ("GET", "/api/move"),
            ("GET", "/api/look"),
            ("GET", "/api/sense/obstacles"),
            ("GET", "/api/sense/lines"),
            ("GET", "/api/sense/distance"),
        }

    def test_latency_only_on_sense_routes(self, device: DeviceServer) -> None:
        for route in device.server.routes:
            if "/sense/" in route.path:
                assert route.latency is not None
                assert (route.latency.min_ms, route.latency.max_ms) == (0, 3000)
            else:
                assert route.latency is None

    def test_registering_twice_on_fresh_server(self, device: DeviceServer) -> None:
        def routes(server) -> None:
            device.register_routes(server)
            device.register_routes(server)

        with pytest.raises(DuplicateRouteError):
            create_server(url_prefix="http://rover", namespace="api", routes=routes)

    @pytest.mark.asyncio
    async def test_registering_twice_on_own_server(self, device: DeviceServer) -> None:
        with pytest.raises(DuplicateRouteError) as exc_info:
            device.register_routes(device.server)

        assert (exc_info.value.method, exc_info.value.path) == ("POST", "/api/move")
        async with device.client() as client:
            assert_no_content(await client.post("move"))


class TestActuation:
    @pytest.mark.asyncio
    async def test_move_no_content(self, device: DeviceServer) -> None:
        async with device.client() as client:
            response = await client.post("move", json={"type": "Forward", "speed": 50})

        assert response.status_code == 204
        assert_no_content(response)
        assert "x-mock-latency-ms" not in response.headers

    @pytest.mark.asyncio
    async def test_look_no_content(self, device: DeviceServer) -> None:
        async with device.client() as client:
            assert_no_content(await client.post("look", json={"h": 30, "v": -10}))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            b"",
            b"not json",
            b"[1, 2]",
            b"\xff\xfe",
            pytest.param(b"[" * 100_000 + b"]" * 100_000, id="deeply-nested"),
        ],
    )
    async def test_payload_never_rejected(self, device: DeviceServer, body: bytes) -> None:
        async with device.client() as client:
            assert_no_content(await client.post("move", content=body))
            assert_no_content(await client.post("look", content=body))

        assert device.state.last_move is None
        assert device.state.last_look is None

    @pytest.mark.asyncio
    async def test_last_commands_reported(self, device: DeviceServer) -> None:
        async with device.client() as client:
            assert (await client.get("move")).json() is None

            await client.post("move", json={"type": "CWSpin", "speed": 20})
            await client.post("look", json={"h": 5, "v": 6})

            move_state = await client.get("move")
            look_state = await client.get("look")

        assert move_state.json() == {"type": "CWSpin", "speed": 20}
        assert look_state.json() == {"h": 5, "v": 6}

    @pytest.mark.asyncio
    async def test_move_does_not_touch_distance(self, device: DeviceServer) -> None:
        async with device.client() as client:
            await client.post("move", json={"type": "Forward", "speed": 100})

        assert device.distance == 0


class TestSensing:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("route", ["obstacles", "lines"])
    async def test_bool_pairs(self, device: DeviceServer, route: str) -> None:
        async with device.client() as client:
            for _ in range(20):
                response = await client.get(f"sense/{route}")
                assert_bool_pair(reading(response))
                assert_latency_within(response, 3000)

    @pytest.mark.asyncio
    async def test_distance_is_running_sum(self, device: DeviceServer) -> None:
        values: list[int] = []
        async with device.client() as client:
            for _ in range(50):
                values.append(reading(await client.get("sense/distance")))

        previous = 0
        for value in values:
            assert_distance_step(previous, value)
            previous = value
        assert values[-1] == device.distance

    @pytest.mark.asyncio
    async def test_sensor_reads_do_not_touch_distance(self, device: DeviceServer) -> None:
        async with device.client() as client:
            await client.get("sense/obstacles")
            await client.get("sense/lines")

        assert device.distance == 0

    @pytest.mark.asyncio
    async def test_same_seed_same_session(self) -> None:
        async def session(seed: int) -> list:
            device = DeviceServer(PROVIDER, MockConfig(timing_scale=0.0), rng=random.Random(seed))
            async with device.client() as client:
                return [
                    (await client.get(path)).json()
                    for path in (
                        "sense/distance",
                        "sense/obstacles",
                        "sense/distance",
                        "sense/lines",
                    )
                ]

        assert await session(7) == await session(7)

    @pytest.mark.asyncio
    async def test_instances_do_not_share_distance(self) -> None:
        config = MockConfig(timing_scale=0.0)
        a = DeviceServer(PROVIDER, config, rng=random.Random(1))
        b = DeviceServer(PROVIDER, config, rng=random.Random(2))

        async with a.client() as client:
            for _ in range(5):
                await client.get("sense/distance")

        assert b.distance == 0

    @pytest.mark.asyncio
    async def test_value_envelope(self, rng: random.Random) -> None:
        device = DeviceServer(
            PROVIDER, MockConfig(timing_scale=0.0, value_envelope=True), rng=rng
        )

        async with device.client() as client:
            lines = reading(await client.get("sense/lines"), envelope=True)
            distance = reading(await client.get("sense/distance"), envelope=True)

        assert_bool_pair(lines)
        assert distance == device.distance

    @pytest.mark.asyncio
    async def test_custom_bounds(self, rng: random.Random) -> None:
        config = MockConfig(timing_scale=0.0, sense_latency_ms=10, distance_step=3)
        device = DeviceServer(PROVIDER, config, rng=rng)

        async with device.client() as client:
            previous = 0
            for _ in range(30):
                response = await client.get("sense/distance")
                assert_latency_within(response, 10)
                value = reading(response)
                assert_distance_step(previous, value, max_step=3)
                previous = value


class TestFaults:
    @pytest.mark.asyncio
    async def test_no_faults_by_default(self, device: DeviceServer) -> None:
        async with device.client() as client:
            statuses = {(await client.get("sense/lines")).status_code for _ in range(50)}
        assert statuses == {200}

    @pytest.mark.asyncio
    async def test_always_fault(self, rng: random.Random) -> None:
        device = DeviceServer(PROVIDER, MockConfig(timing_scale=0.0, fault_rate=1.0), rng=rng)

        async with device.client() as client:
            move = await client.post("move", json={"type": "Forward", "speed": 1})
            distance = await client.get("sense/distance")

        assert move.status_code == 500
        assert distance.status_code == 500
        assert distance.text == "Simulated device fault"
        assert device.distance == 0
        assert device.state.last_move is None

    @pytest.mark.asyncio
    async def test_partial_fault_rate(self, rng: random.Random) -> None:
        device = DeviceServer(PROVIDER, MockConfig(timing_scale=0.0, fault_rate=0.5), rng=rng)

        async with device.client() as client:
            statuses = [(await client.get("sense/obstacles")).status_code for _ in range(200)]

        assert set(statuses) == {200, 500}


class TestHttpxClient:
    @pytest.mark.asyncio
    async def test_end_to_end(self, device: DeviceServer) -> None:
        async with device.client() as client:
            move = await client.post("move", json={"type": "Forward", "speed": 40})
            assert 200 <= move.status_code < 300
            assert move.content == b""

            d1 = (await client.get("sense/distance")).json()
            d2 = (await client.get("sense/distance")).json()
            d3 = (await client.get("sense/distance")).json()

        assert_distance_step(0, d1)
        assert_distance_step(d1, d2)
        assert_distance_step(d2, d3)
        assert d3 == device.distance

    @pytest.mark.asyncio
    async def test_absolute_urls(self, device: DeviceServer) -> None:
        async with device.client() as client:
            response = await client.get("http://rover/api/sense/obstacles")

        assert_bool_pair(response.json())
        assert_latency_within(response)

    @pytest.mark.asyncio
    async def test_concurrent_distance_reads_are_running_totals(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        deltas: list[int] = []
        draw = SensorModel.distance_delta

        def recording_draw(self: SensorModel) -> int:
            delta = draw(self)
            deltas.append(delta)
            return delta

        monkeypatch.setattr(SensorModel, "distance_delta", recording_draw)
        device = DeviceServer(PROVIDER, MockConfig(sense_latency_ms=40), rng=random.Random(21))

        async with device.client() as client:
            responses = await asyncio.gather(
                *(client.get("sense/obstacles") for _ in range(5)),
                *(client.get("sense/distance") for _ in range(5)),
            )

        assert all(r.status_code == 200 for r in responses)
        distances = [r.json() for r in responses[5:]]

        # One odometer step per call, each a legal step, in dispatch order
        assert len(deltas) == 5
        assert all(-100 < d < 100 for d in deltas)
        assert sorted(distances) == sorted(itertools.accumulate(deltas))
        assert sum(deltas) == device.distance

    @pytest.mark.slow
    @pytest.mark.asyncio
    async def test_delivery_follows_latency_not_arrival(self) -> None:
        def routes(server) -> None:
            server.get("slow", lambda: "slow", latency=LatencyPolicy.fixed(150))
            server.get("fast", lambda: "fast", latency=LatencyPolicy.fixed(0))

        server = create_server(url_prefix="http://rover", namespace="api", routes=routes)
        finished: list[str] = []

        async with server.client() as client:

            async def fetch(path: str) -> None:
                finished.append((await client.get(path)).text)

            await asyncio.gather(fetch("slow"), fetch("fast"))

        assert finished == ["fast", "slow"]
