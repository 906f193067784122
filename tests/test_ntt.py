"""Tests for NTT implementation.

Verifies fft/ifft against galois polynomial evaluation and the round-trip,
linearity and generic-group properties.
"""

import random
import threading
from typing import List

import galois
import numpy as np
import pytest

from zqfield import GOLDILOCKS_PRIME, NTT, PrimeField
from zqfield.ntt import MAX_PRECOMPUTED_BITS


def _random_vector(F: PrimeField, n: int, seed: int = 0) -> List[int]:
    rng = random.Random(seed)
    return [rng.randrange(0, F.p) for _ in range(n)]


class TestRootLadder:
    """Roots of unity built at field construction."""

    def test_p17_ladder(self, f17: PrimeField) -> None:
        """3 generates F_17^*, so w[4] = 3 and w[i] = w[i+1]^2."""
        assert f17.w == [1, 16, 13, 9, 3]
        for i in range(len(f17.w)):
            assert f17.mul(f17.w[i], f17.wi[i]) == 1

    @pytest.mark.parametrize("field_name", ["f17", "goldilocks", "bn254_r"])
    def test_primitive_orders(self, field_name: str, request) -> None:
        """w[i]^(2^i) == 1 and w[i]^(2^(i-1)) == -1."""
        F = request.getfixturevalue(field_name)
        assert F.w[0] == 1
        for i in range(1, len(F.w)):
            assert F.pow(F.w[i], 1 << i) == 1
            assert F.pow(F.w[i], 1 << (i - 1)) == F.negone

    def test_ladder_length_is_two_adicity(self, goldilocks: PrimeField) -> None:
        assert len(goldilocks.w) == goldilocks.s + 1
        assert len(goldilocks.wi) == goldilocks.s + 1

    def test_precomputed_roots_correct(self, f17: PrimeField) -> None:
        """roots[i][k] == w[i]^k."""
        for i, rootsi in f17.fft_engine.roots.items():
            assert len(rootsi) == 1 << i
            for k, r in enumerate(rootsi):
                assert r == f17.pow(f17.w[i], k)

    def test_eager_cache_bound(self, goldilocks: PrimeField) -> None:
        assert max(goldilocks.fft_engine.roots) >= MAX_PRECOMPUTED_BITS

    def test_cache_extends_on_demand(self) -> None:
        """A transform larger than the eager bound extends the cache."""
        F = PrimeField(GOLDILOCKS_PRIME)
        engine = F.fft_engine
        bits = MAX_PRECOMPUTED_BITS + 1
        assert bits not in engine.roots
        vec = [0] * (1 << bits)
        vec[1] = 1
        out = F.fft(vec)
        assert bits in engine.roots
        # fft of x is the list of evaluation points
        assert out[:4] == engine.roots[bits][:4]


class TestFFT:
    """Forward and inverse transforms over the field."""

    def test_scenario_1234(self, f17: PrimeField) -> None:
        vec = [1, 2, 3, 4]
        evals = f17.fft(vec)
        # P(x) = 1 + 2x + 3x^2 + 4x^3 at x = 13^i
        expected = [
            sum(c * pow(13, i * j, 17) for j, c in enumerate(vec)) % 17 for i in range(4)
        ]
        assert evals == expected
        assert f17.ifft(evals) == vec

    def test_small_sizes(self, f17: PrimeField) -> None:
        assert f17.fft([]) == []
        assert f17.fft([5]) == [5]
        assert f17.ifft([5]) == [5]
        assert f17.fft([3, 5]) == [8, f17.sub(3, 5)]

    @pytest.mark.parametrize("length", [3, 5, 6, 12])
    def test_non_power_of_two_raises(self, f17: PrimeField, length: int) -> None:
        with pytest.raises(ValueError):
            f17.fft(list(range(length)))
        with pytest.raises(ValueError):
            f17.ifft(list(range(length)))

    def test_larger_than_two_adicity_raises(self, f11: PrimeField) -> None:
        """p = 11 only has square roots of unity."""
        assert f11.ifft(f11.fft([1, 2])) == [1, 2]
        with pytest.raises(ValueError):
            f11.fft([1, 2, 3, 4])

    @pytest.mark.parametrize("n_bits", [1, 2, 3, 4])
    def test_roundtrip_p17(self, f17: PrimeField, n_bits: int) -> None:
        vec = _random_vector(f17, 1 << n_bits, seed=n_bits)
        assert f17.ifft(f17.fft(vec)) == vec
        assert f17.fft(f17.ifft(vec)) == vec

    @pytest.mark.parametrize("n_bits", [3, 4, 6, 8])
    def test_roundtrip_bn254(self, bn254_r: PrimeField, n_bits: int) -> None:
        vec = _random_vector(bn254_r, 1 << n_bits, seed=n_bits)
        assert bn254_r.ifft(bn254_r.fft(vec)) == vec

    @pytest.mark.parametrize("n_bits", [2, 3, 5])
    def test_matches_galois_evaluation(self, goldilocks: PrimeField, n_bits: int) -> None:
        """fft(c)[i] == P(w^i) with P evaluated by galois."""
        GF = galois.GF(GOLDILOCKS_PRIME)
        N = 1 << n_bits
        coeffs = _random_vector(goldilocks, N, seed=10 + n_bits)
        poly = galois.Poly(coeffs[::-1], field=GF)
        points = GF([goldilocks.pow(goldilocks.w[n_bits], i) for i in range(N)])
        expected = [int(v) for v in poly(points)]
        assert goldilocks.fft(coeffs) == expected

    def test_linearity(self, goldilocks: PrimeField) -> None:
        """fft(a*x + b*y) == a*fft(x) + b*fft(y)."""
        F = goldilocks
        x = _random_vector(F, 16, seed=20)
        y = _random_vector(F, 16, seed=21)
        a, b = 5, 7
        lhs = F.fft([F.add(F.mul(a, xi), F.mul(b, yi)) for xi, yi in zip(x, y)])
        rhs = [F.add(F.mul(a, u), F.mul(b, v)) for u, v in zip(F.fft(x), F.fft(y))]
        assert lhs == rhs

    def test_input_not_modified(self, f17: PrimeField) -> None:
        vec = [1, 2, 3, 4, 5, 6, 7, 8]
        f17.fft(vec)
        f17.ifft(vec)
        assert vec == [1, 2, 3, 4, 5, 6, 7, 8]


class _PairGroup:
    """F x F with componentwise addition, scaled by one field element."""

    def __init__(self, F: PrimeField) -> None:
        self.F = F

    def add(self, a, b):
        return (self.F.add(a[0], b[0]), self.F.add(a[1], b[1]))

    def sub(self, a, b):
        return (self.F.sub(a[0], b[0]), self.F.sub(a[1], b[1]))

    def mul_gf(self, a, f: int):
        return (self.F.mul(a[0], f), self.F.mul(a[1], f))


class TestGenericGroup:
    """The engine transforms elements of another group scaled by field elements."""

    def test_pair_group_matches_componentwise(self, bn254_r: PrimeField) -> None:
        F = bn254_r
        G = _PairGroup(F)
        engine = NTT(G, F, G.mul_gf)
        xs = _random_vector(F, 8, seed=30)
        ys = _random_vector(F, 8, seed=31)

        out = engine.fft(list(zip(xs, ys)))
        assert [u for u, _ in out] == F.fft(xs)
        assert [v for _, v in out] == F.fft(ys)
        assert engine.ifft(out) == list(zip(xs, ys))

    def test_shares_field_ladder(self, bn254_r: PrimeField) -> None:
        G = _PairGroup(bn254_r)
        engine = NTT(G, bn254_r, G.mul_gf)
        assert engine.w == bn254_r.w


class TestColumns:
    """numpy column interface."""

    @pytest.mark.parametrize("n_cols", [1, 2, 4])
    def test_roundtrip_multiple_columns(self, goldilocks: PrimeField, n_cols: int) -> None:
        engine = goldilocks.fft_engine
        N = 8
        coeffs = np.array(
            _random_vector(goldilocks, N * n_cols, seed=n_cols), dtype=object
        ).reshape(N, n_cols)

        evals = engine.ntt(coeffs, n_cols=n_cols)
        assert evals.shape == (N, n_cols)
        for col in range(n_cols):
            assert list(evals[:, col]) == goldilocks.fft(list(coeffs[:, col]))

        recovered = engine.intt(evals, n_cols=n_cols)
        assert np.array_equal(recovered, coeffs)

    def test_flat_input_keeps_shape(self, f17: PrimeField) -> None:
        engine = f17.fft_engine
        flat = np.array([1, 2, 3, 4], dtype=object)
        evals = engine.ntt(flat)
        assert evals.ndim == 1
        assert list(evals) == f17.fft([1, 2, 3, 4])
        assert list(engine.intt(evals)) == [1, 2, 3, 4]

    def test_column_mismatch_raises(self, f17: PrimeField) -> None:
        with pytest.raises(ValueError):
            f17.fft_engine.ntt(np.zeros((4, 2), dtype=object), n_cols=3)

    def test_empty(self, f17: PrimeField) -> None:
        assert f17.fft_engine.ntt(np.array([], dtype=object)).size == 0


class TestConcurrency:

    def test_parallel_cache_extension(self) -> None:
        """Threads racing to extend the cache all see consistent roots."""
        F = PrimeField(GOLDILOCKS_PRIME)
        engine = F.fft_engine
        bits = MAX_PRECOMPUTED_BITS + 1
        snapshots = []

        def worker() -> None:
            engine._set_roots(bits)
            snapshots.append(engine.roots[bits])

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(snapshots) == 4
        # Built once, never replaced
        for s in snapshots:
            assert s is engine.roots[bits]
        assert len(engine.roots[bits]) == 1 << bits
        assert engine.roots[bits][1] == F.w[bits]
