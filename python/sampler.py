import math

import numpy as np

from errors import InvalidConfiguration

ENGINES = ("pcg64", "lcg")
LOW, HIGH = -1.0, 1.0
# Points drawn per numpy call by count_hits
BLOCK_SIZE = 1 << 16


# Linear Congruential Generator - same formula across all languages
class LCG:
    def __init__(self, seed):
        self.seed = seed & 0xFFFFFFFF

    def random(self):
        self.seed = (self.seed * 1664525 + 1013904223) & 0xFFFFFFFF
        return (self.seed & 0x7FFFFFFF) / 0x7FFFFFFF


class RandomStream:
    """
    A seeded generator plus a uniform distribution over [-1.0, 1.0].

    A stream belongs to the worker that built it and is never handed to
    another thread.
    """

    def __init__(self, seed, engine="pcg64"):
        if engine not in ENGINES:
            raise InvalidConfiguration(
                f"Unknown random engine {engine!r}, expected one of {ENGINES}")
        self.seed = seed
        self.engine = engine
        if engine == "pcg64":
            # SeedSequence only takes non-negative entropy
            self._rng = np.random.default_rng(seed % (1 << 64))
        else:
            self._rng = LCG(seed)

    @property
    def supports_blocks(self):
        return self.engine == "pcg64"

    def uniform(self):
        if self.engine == "pcg64":
            return float(self._rng.uniform(LOW, HIGH))
        return LOW + (HIGH - LOW) * self._rng.random()

    def uniform_block(self, size):
        if not self.supports_blocks:
            raise TypeError(f"{self.engine} streams only draw scalars")
        return self._rng.uniform(LOW, HIGH, size)

    def __repr__(self):
        return f"RandomStream(seed={self.seed!r}, engine={self.engine!r})"


def sample_point(stream):
    """Draw one point in the square and report whether it lies in the unit circle."""
    x = stream.uniform()
    y = stream.uniform()
    magnitude = math.sqrt(x * x + y * y)
    return bool(magnitude <= 1.0)


def count_hits(stream, iterations):
    """Run the circle test ``iterations`` times and return the number of hits."""
    inside = 0
    if not stream.supports_blocks:
        for _ in range(iterations):
            if sample_point(stream):
                inside += 1
        return inside

    remaining = iterations
    while remaining > 0:
        size = min(remaining, BLOCK_SIZE)
        # Consumed as x, y pairs like sample_point does
        points = stream.uniform_block(2 * size).reshape(size, 2)
        x = points[:, 0]
        y = points[:, 1]
        magnitude = np.sqrt(x * x + y * y)
        inside += int(np.count_nonzero(magnitude <= 1.0))
        remaining -= size
    return inside
