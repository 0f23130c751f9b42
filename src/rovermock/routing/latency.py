"""Latency policies — artificial delay applied before a response is delivered."""

from dataclasses import dataclass

from rovermock._internal.types import RandomSource
from rovermock.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class LatencyPolicy:
    """Uniform delay in ``[min_ms, max_ms)`` milliseconds.

    Sampled once per request from the server's random source::

        LatencyPolicy(max_ms=3000)   # 0..2999 ms
        LatencyPolicy.fixed(250)     # always 250 ms
    """

    max_ms: int
    min_ms: int = 0

    def __post_init__(self) -> None:
        if self.min_ms < 0:
            msg = f"Latency cannot be negative, got min_ms={self.min_ms}"
            raise ConfigurationError(msg)
        if self.max_ms <= self.min_ms:
            msg = f"Empty latency range [{self.min_ms}, {self.max_ms})"
            raise ConfigurationError(msg)

    @classmethod
    def fixed(cls, ms: int) -> "LatencyPolicy":
        """A policy that always yields *ms*."""
        return cls(max_ms=ms + 1, min_ms=ms)

    def sample(self, rng: RandomSource) -> int:
        """Draw one delay in milliseconds."""
        return rng.randrange(self.min_ms, self.max_ms)
