"""zqfield - prime field arithmetic, NTT and square roots over Z/pZ.

Usage:
    from zqfield import PrimeField, BN254_R

    F = PrimeField(BN254_R)
    evals = F.fft([1, 2, 3, 4])
    assert F.ifft(evals) == [1, 2, 3, 4]
    root = F.sqrt(F.square(5))
"""

from zqfield.batch_inverse import batch_inverse
from zqfield.field import (
    BN254_Q,
    BN254_R,
    GOLDILOCKS_PRIME,
    PrimeField,
)
from zqfield.ntt import NTT
from zqfield.rng import DeterministicRNG, get_random_bytes
from zqfield.sqrt import SqrtAlgorithm, SqrtStrategy, build_sqrt, classify

__version__ = "0.1.0"
__all__ = [
    # Field
    "PrimeField",
    "BN254_Q",
    "BN254_R",
    "GOLDILOCKS_PRIME",
    "batch_inverse",
    # NTT
    "NTT",
    # Square roots
    "SqrtAlgorithm",
    "SqrtStrategy",
    "build_sqrt",
    "classify",
    # Randomness
    "DeterministicRNG",
    "get_random_bytes",
]
