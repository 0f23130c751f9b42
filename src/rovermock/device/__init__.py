"""Simulated rover device: state, sensor model, handlers and route table."""

from rovermock.device.sensors import SensorModel
from rovermock.device.server import DeviceServer
from rovermock.device.state import DeviceState

__all__ = ["DeviceServer", "DeviceState", "SensorModel"]
