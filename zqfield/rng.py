"""Randomness sources for field sampling.

get_random_bytes() is the default byte source behind PrimeField.random().
DeterministicRNG is a 64-bit word source for PrimeField.from_rng(); seed it for
reproducible tests and transcripts.
"""

import os
import random as _random
from typing import Optional


def get_random_bytes(n: int) -> bytes:
    """Return n bytes from the OS CSPRNG."""
    return os.urandom(n)


class DeterministicRNG:
    """Seeded word source. When seed is None, uses os.urandom."""

    def __init__(self, seed: Optional[int] = None):
        self._seed = seed
        if seed is not None:
            self._rng = _random.Random(seed)
        else:
            self._rng = None  # Use os-level randomness

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def next_u64(self) -> int:
        if self._rng is not None:
            return self._rng.getrandbits(64)
        return int.from_bytes(os.urandom(8), "little")

    def random_bytes(self, n: int) -> bytes:
        if self._rng is not None:
            return self._rng.getrandbits(8 * n).to_bytes(n, "little") if n else b""
        return os.urandom(n)
