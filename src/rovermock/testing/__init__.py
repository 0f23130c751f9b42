"""Test utilities for rovermock.

Assertions for the response shapes of the simulated rover. Drive the
rover through ``DeviceServer.client()`` and check what comes back::

    from rovermock.testing import assert_no_content, reading

    async with device.client() as client:
        assert_no_content(await client.post("move", json={"type": "Forward"}))
"""

from rovermock.testing.assertions import (
    assert_bool_pair,
    assert_distance_step,
    assert_latency_within,
    assert_no_content,
    reading,
)

__all__ = [
    "assert_bool_pair",
    "assert_distance_step",
    "assert_latency_within",
    "assert_no_content",
    "reading",
]
