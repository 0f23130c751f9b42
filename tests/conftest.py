"""Shared fixtures: seeded, zero-latency rovers so tests are fast and repeatable."""

import random

import pytest

from rovermock.config import MockConfig
from rovermock.device.server import DeviceServer
from rovermock.provider import PROVIDER


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def config() -> MockConfig:
    return MockConfig(timing_scale=0.0)


@pytest.fixture
def device(config: MockConfig, rng: random.Random) -> DeviceServer:
    """A fresh simulated rover; state never leaks between tests."""
    return DeviceServer(PROVIDER, config, rng=rng)
