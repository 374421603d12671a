# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Injectable random number sources.

Every engine entry point takes a RandomProvider explicitly. The seeded
provider is bit-reproducible: the same seed and the same call sequence
always produce the same stream, on every platform.
"""

from __future__ import annotations

import math
import random
from typing import Optional, Protocol, Sequence

_MASK_32 = 0xFFFFFFFF


class RandomProvider(Protocol):
    def random(self) -> float: ...

    def random_int(self, lo: int, hi: int) -> int: ...

    def random_int_inclusive(self, lo: int, hi: int) -> int: ...

    def clone(self) -> RandomProvider: ...


class _IntHelpers:
    """Integer draws derived from random()."""

    def random_int(self, lo: int, hi: int) -> int:
        """Integer in [lo, hi)."""
        return math.floor(self.random() * (hi - lo)) + lo

    def random_int_inclusive(self, lo: int, hi: int) -> int:
        """Integer in [lo, hi]."""
        return math.floor(self.random() * (hi - lo + 1)) + lo


def hash_seed(seed: int) -> int:
    """32-bit avalanche mix so that sequential seeds give unrelated streams."""
    s = seed & _MASK_32
    s = ((s ^ (s >> 16)) * 0x85EBCA6B) & _MASK_32
    s = ((s ^ (s >> 13)) * 0xC2B2AE35) & _MASK_32
    s = s ^ (s >> 16)
    return s & _MASK_32


class SeededRandomProvider(_IntHelpers):
    """Linear congruential generator (Numerical Recipes constants)."""

    A = 1664525
    C = 1013904223
    M = 2 ** 32

    def __init__(self, seed: int = 0):
        self._state = hash_seed(seed)

    def random(self) -> float:
        self._state = (self.A * self._state + self.C) % self.M
        return self._state / self.M

    def get_seed(self) -> int:
        """Current internal state (already hashed)."""
        return self._state

    def set_seed(self, seed: int) -> None:
        self._state = hash_seed(seed)

    def clone(self) -> SeededRandomProvider:
        copy = SeededRandomProvider.__new__(SeededRandomProvider)
        copy._state = self._state
        return copy

    def __repr__(self) -> str:
        return f"SeededRandomProvider(state={self._state})"


class MockRandomProvider(_IntHelpers):
    """Cycles through a fixed list of values. Used to pin outcomes in tests."""

    def __init__(self, values: Sequence[float]):
        if len(values) == 0:
            raise ValueError("MockRandomProvider requires at least one value")
        self._values = list(values)
        self._index = 0

    def random(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value

    def reset(self) -> None:
        self._index = 0

    @property
    def call_count(self) -> int:
        return self._index

    def clone(self) -> MockRandomProvider:
        copy = MockRandomProvider(self._values)
        copy._index = self._index
        return copy


class SystemRandomProvider(_IntHelpers):
    """Wraps random.Random for unseeded play at the top level."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()

    def clone(self) -> SystemRandomProvider:
        copy = SystemRandomProvider.__new__(SystemRandomProvider)
        copy._rng = random.Random()
        copy._rng.setstate(self._rng.getstate())
        return copy
