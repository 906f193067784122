"""Pytest configuration and shared fields for zqfield tests."""

import sys
from pathlib import Path

import pytest

# Add the repository root to the path so `import zqfield` works without installing
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from zqfield import BN254_Q, BN254_R, GOLDILOCKS_PRIME, PrimeField  # noqa: E402


@pytest.fixture(scope="session")
def f17() -> PrimeField:
    """p = 17 = 1 mod 16: Tonelli-Shanks, 2-adicity 4."""
    return PrimeField(17)


@pytest.fixture(scope="session")
def f11() -> PrimeField:
    """p = 11 = 3 mod 4: closed-form Shanks."""
    return PrimeField(11)


@pytest.fixture(scope="session")
def goldilocks() -> PrimeField:
    return PrimeField(GOLDILOCKS_PRIME)


@pytest.fixture(scope="session")
def bn254_r() -> PrimeField:
    return PrimeField(BN254_R)


@pytest.fixture(scope="session")
def bn254_q() -> PrimeField:
    return PrimeField(BN254_Q)
