"""Deterministic RNG built on top of random.Random.

Battle randomness is carried as an explicit integer seed. Every draw is a
pure transition ``seed -> (next_seed, value)`` so that replaying the same
sequence of calls from the same seed reproduces the same outcomes.
"""
from __future__ import annotations

from random import Random
from typing import Sequence, Tuple, TypeVar

T_co = TypeVar("T_co")

SEED_BITS = 32


def next_draw(seed: int) -> Tuple[int, float]:
    """Return ``(next_seed, value)`` where value is in the range [0.0, 1.0)."""
    generator = Random(seed)
    value = generator.random()
    return generator.getrandbits(SEED_BITS), value


def draw_index(seed: int, size: int) -> Tuple[int, int]:
    """Return ``(next_seed, index)`` with index uniformly drawn from ``range(size)``."""
    if size <= 0:
        raise ValueError("Cannot draw an index from an empty range.")
    next_seed, value = next_draw(seed)
    return next_seed, min(size - 1, int(value * size))


class RNG:
    """Stateful cursor over :func:`next_draw` for callers that own their seed."""

    def __init__(self, seed: int) -> None:
        self.seed = seed

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        self.seed, value = next_draw(self.seed)
        return value

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        if b < a:
            raise ValueError("randint upper bound must be >= lower bound.")
        self.seed, offset = draw_index(self.seed, b - a + 1)
        return a + offset

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        self.seed, index = draw_index(self.seed, len(seq))
        return seq[index]
