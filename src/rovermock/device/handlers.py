"""Route handlers of the simulated rover.

Collaborators are injected at dispatch time by annotation, so handlers
hold no state of their own.
"""

import logging
from typing import Any

from rovermock.config import MockConfig
from rovermock.device.sensors import SensorModel
from rovermock.device.state import DeviceState
from rovermock.http.request import Request
from rovermock.http.response import Response, empty_response, json_response

logger = logging.getLogger("rovermock.device")


async def _command(request: Request) -> dict[str, Any] | None:
    """The posted JSON object, or None. The body never affects the response."""
    try:
        payload = await request.json()
    except (ValueError, RecursionError):
        logger.debug("Ignoring non-JSON body on %s %s", request.method, request.path)
        return None
    return payload if isinstance(payload, dict) else None


def _reading(value: Any, config: MockConfig) -> Any:
    if config.value_envelope:
        return {"value": value}
    return value


async def move(request: Request, state: DeviceState) -> Response:
    command = await _command(request)
    if command is not None:
        logger.debug(
            "Requested to move %s with %s speed",
            command.get("type", "?"),
            command.get("speed", "?"),
        )
        state.last_move = command
    return empty_response(204)


async def look(request: Request, state: DeviceState) -> Response:
    command = await _command(request)
    if command is not None:
        logger.debug("Requested to look at (%s, %s)", command.get("h", "?"), command.get("v", "?"))
        state.last_look = command
    return empty_response(204)


def move_state(state: DeviceState) -> Response:
    """Last accepted move command (JSON ``null`` before the first one)."""
    return json_response(state.last_move)


def look_state(state: DeviceState) -> Response:
    """Last accepted look command (JSON ``null`` before the first one)."""
    return json_response(state.last_look)


def sense_obstacles(sensors: SensorModel, config: MockConfig) -> Any:
    obstacles = sensors.pair()
    logger.debug("Obstacles: %s", obstacles)
    return _reading(obstacles, config)


def sense_lines(sensors: SensorModel, config: MockConfig) -> Any:
    lines = sensors.pair()
    logger.debug("Lines: %s", lines)
    return _reading(lines, config)


def sense_distance(state: DeviceState, sensors: SensorModel, config: MockConfig) -> Any:
    """Advance the odometer by one random step and report the running total."""
    distance = state.advance_distance(sensors.distance_delta())
    logger.debug("Distance: %d", distance)
    return _reading(distance, config)
