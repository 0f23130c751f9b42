"""Mock configuration.

MockConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

from rovermock.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class MockConfig:
    """Simulated rover configuration. Immutable after creation.

    All fields default to the values of the real rover's HTTP surface.
    Override what you need::

        config = MockConfig(timing_scale=0.0, value_envelope=True)
    """

    # Endpoint
    url_prefix: str = "http://rover"
    namespace: str = "api"

    # Sensor model
    sense_latency_ms: int = 3000  # exclusive upper bound for sense/* delays
    distance_step: int = 100  # exclusive upper bound for one distance delta

    # Timing: multiplier on sampled delays; 0 delivers immediately
    timing_scale: float = 1.0

    # Wrap sense readings as {"value": ...} like the firmware's ValueResponse
    value_envelope: bool = False

    # Probability of answering any route with a simulated 500
    fault_rate: float = 0.0

    # Forward requests outside url_prefix/namespace to the real network
    passthrough: bool = False

    def __post_init__(self) -> None:
        if self.sense_latency_ms < 1:
            msg = f"sense_latency_ms must be positive, got {self.sense_latency_ms}"
            raise ConfigurationError(msg)
        if self.distance_step < 1:
            msg = f"distance_step must be positive, got {self.distance_step}"
            raise ConfigurationError(msg)
        if self.timing_scale < 0:
            msg = f"timing_scale cannot be negative, got {self.timing_scale}"
            raise ConfigurationError(msg)
        if not 0.0 <= self.fault_rate <= 1.0:
            msg = f"fault_rate must be within [0, 1], got {self.fault_rate}"
            raise ConfigurationError(msg)
