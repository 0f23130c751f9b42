"""Random sensor model.

Produces plausible-looking readings for UI exercising only; there is no
attempt to model real sensor noise.
"""

from rovermock._internal.types import RandomSource


class SensorModel:
    """Sample sensor readings from an injectable random source.

    Pass a seeded ``random.Random`` for reproducible sequences::

        sensors = SensorModel(random.Random(7))
        sensors.pair()            # [True, False]
        sensors.distance_delta()  # -42
    """

    __slots__ = ("max_distance_step", "rng")

    def __init__(self, rng: RandomSource, *, max_distance_step: int = 100) -> None:
        self.rng = rng
        self.max_distance_step = max_distance_step

    def pair(self) -> list[bool]:
        """Two independent fair booleans (left, right)."""
        return [self.rng.random() < 0.5, self.rng.random() < 0.5]

    def distance_delta(self) -> int:
        """Signed step: direction from {+1, -1}, magnitude in [0, max_distance_step)."""
        direction = self.rng.choice((1, -1))
        magnitude = self.rng.randrange(self.max_distance_step)
        return direction * magnitude
