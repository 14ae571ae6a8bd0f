"""Seeded linear congruential sequence used for every permutation in SplitCraft.

All randomness in the pipeline flows through :func:`permute`. The generator
uses only integer arithmetic modulo 2**32, so a given seed yields the same
permutation on every platform and every run.
"""

from __future__ import annotations

from typing import Iterable, TypeVar

import numpy as np

from .exceptions import ConfigurationError

T = TypeVar("T")

MULTIPLIER = 1664525
INCREMENT = 1013904223
MODULUS = 2**32


def _check_seed(seed: int) -> int:
    seed = int(seed)
    if not 0 <= seed < MODULUS:
        raise ConfigurationError(f"Seed must be an unsigned 32-bit integer, got {seed}")
    return seed


def lcg_next(state: int) -> tuple[float, int]:
    """Advance the generator once.

    Returns:
        (value in [0, 1), new_state)
    """
    new_state = (int(state) * MULTIPLIER + INCREMENT) % MODULUS
    return new_state / MODULUS, new_state


class LCGSequence:
    """Stateful wrapper around :func:`lcg_next`."""

    def __init__(self, seed: int) -> None:
        self.state = _check_seed(seed)

    def next_value(self) -> float:
        value, self.state = lcg_next(self.state)
        return value

    def draw(self, n: int) -> np.ndarray:
        """Draw ``n`` consecutive values as a float64 array."""
        out = np.empty(int(n), dtype=np.float64)
        for i in range(int(n)):
            out[i] = self.next_value()
        return out

    def __iter__(self):
        return self

    def __next__(self) -> float:
        return self.next_value()


def permute(sequence: Iterable[T], seed: int) -> list[T]:
    """Return the elements of ``sequence`` in a seed-determined order.

    Each element gets one key drawn from a fresh generator started at ``seed``;
    elements are then stable-sorted by key.
    """
    items = list(sequence)
    keys = LCGSequence(seed).draw(len(items))
    order = np.argsort(keys, kind="stable")
    return [items[i] for i in order]


__all__ = ["LCGSequence", "lcg_next", "permute"]
