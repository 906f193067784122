"""Radix-2 Number Theoretic Transform over a prime field.

A polynomial P(x) = p0 + p1*x + ... + pn*x^n is represented by the list
[p0, p1, ..., pn]. fft() evaluates it at the powers of a primitive 2^k-th root
of unity and ifft() interpolates back.

The engine is generic: transformed values live in any additive group `G`
(add/sub) and are scaled by field elements through `op_mul_gf(g, f)`. Over the
field itself G is the field and op_mul_gf is field multiplication.
"""

import logging
import threading
from typing import Callable, Dict, List, Protocol, Sequence

import numpy as np

_logger = logging.getLogger(__name__)

# Root tables up to 2^15 entries are built eagerly; larger ones on first use.
MAX_PRECOMPUTED_BITS = 15


class Group(Protocol):
    def add(self, a, b): ...

    def sub(self, a, b): ...


OpMulGF = Callable[[object, int], object]


# --- NTT Engine ---

class NTT:
    """NTT engine bound to one field.

    Attributes:
        w: w[i] is a primitive 2^i-th root of unity, w[i] = w[i+1]^2.
        wi: wi[i] = w[i]^-1.
        roots: roots[i] = [1, w[i], w[i]^2, ..., w[i]^(2^i - 1)]. Grows on demand,
            never shrinks. Extension holds `_lock`, so engines may be shared
            between threads.
    """

    def __init__(self, G: Group, F, op_mul_gf: OpMulGF) -> None:
        self.F = F
        self.G = G
        self.op_mul_gf = op_mul_gf

        rem = F.sqrt_t or F.t
        s = F.sqrt_s if F.sqrt_s is not None else F.s
        self.max_bits = s

        # Independent of F.nqr: first element that is not a square
        nqr = F.one
        while F.eq(F.pow(nqr, F.half), F.one):
            nqr = F.add(nqr, F.one)

        self.w: List[int] = [F.one] * (s + 1)
        self.wi: List[int] = [F.one] * (s + 1)
        self.w[s] = F.pow(nqr, rem)
        self.wi[s] = F.inv(self.w[s])
        for n in range(s - 1, -1, -1):
            self.w[n] = F.square(self.w[n + 1])
            self.wi[n] = F.square(self.wi[n + 1])

        self.roots: Dict[int, List[int]] = {}
        self._inv_n: Dict[int, int] = {}
        self._lock = threading.Lock()
        self._set_roots(min(s, MAX_PRECOMPUTED_BITS))

    def _set_roots(self, n: int) -> None:
        """Make sure roots[i] exists for every i <= n."""
        if n in self.roots:
            return
        with self._lock:
            new_roots: Dict[int, List[int]] = {}
            for i in range(n, -1, -1):
                if i in self.roots:
                    break
                r = self.F.one
                rootsi = [self.F.one] * (1 << i)
                for j in range(1 << i):
                    rootsi[j] = r
                    r = self.F.mul(r, self.w[i])
                new_roots[i] = rootsi
            # Published together so lock-free readers never see roots[n] without roots[n-1]
            self.roots.update(new_roots)
            if new_roots:
                _logger.debug("NTT root cache extended to order 2^%d", n)

    def _check_size(self, length: int) -> int:
        bits = (length - 1).bit_length()
        if length != 1 << bits:
            raise ValueError(f"Size must be a power of 2, got {length}")
        if bits > self.max_bits:
            raise ValueError(
                f"Size 2^{bits} exceeds the field's largest power-of-two root order 2^{self.max_bits}"
            )
        return bits

    def fft(self, p: Sequence) -> list:
        """Forward transform: out[i] = sum_j p[j] * w^(i*j)."""
        if len(p) <= 1:
            return list(p)
        bits = self._check_size(len(p))
        self._set_roots(bits)
        return _fft(self, p, bits, 0, 1)

    def ifft(self, p: Sequence) -> list:
        """Inverse transform, computed as a forward pass read backwards.

        Uses w^-i = w^(n-i): result[i] = fft(p)[(n - i) % n] / n.
        """
        if len(p) <= 1:
            return list(p)
        bits = self._check_size(len(p))
        self._set_roots(bits)
        res = _fft(self, p, bits, 0, 1)

        m = 1 << bits
        twoinvm = self._inv_n.get(bits)
        if twoinvm is None:
            twoinvm = self.F.inv(self.F.mul_scalar(self.F.one, m))
            self._inv_n[bits] = twoinvm
        return [self.op_mul_gf(res[(m - i) % m], twoinvm) for i in range(m)]

    def ntt(self, coeffs, n_cols: int = 1) -> np.ndarray:
        """Forward transform of each column: coefficients -> evaluations."""
        return self._transform_columns(self.fft, coeffs, n_cols)

    def intt(self, evals, n_cols: int = 1) -> np.ndarray:
        """Inverse transform of each column: evaluations -> coefficients."""
        return self._transform_columns(self.ifft, evals, n_cols)

    def _transform_columns(self, transform, values, n_cols: int) -> np.ndarray:
        arr = np.asarray(values, dtype=object)
        if arr.size == 0:
            return arr

        input_is_1d = arr.ndim == 1
        arr_2d = _reshape_input(arr, n_cols)
        result = np.empty(arr_2d.shape, dtype=object)
        for col in range(n_cols):
            result[:, col] = transform(list(arr_2d[:, col]))

        return result.flatten() if input_is_1d else result


# --- Helpers ---

def _fft(PF: NTT, pall: Sequence, bits: int, offset: int, step: int) -> list:
    """Recursive Cooley-Tukey on pall[offset::step], without copying halves."""
    n = 1 << bits
    if n == 1:
        return [pall[offset]]
    if n == 2:
        return [
            PF.G.add(pall[offset], pall[offset + step]),
            PF.G.sub(pall[offset], pall[offset + step]),
        ]

    ndiv2 = n >> 1
    p1 = _fft(PF, pall, bits - 1, offset, step * 2)
    p2 = _fft(PF, pall, bits - 1, offset + step, step * 2)
    roots = PF.roots[bits]

    out = [None] * n
    for i in range(ndiv2):
        t = PF.op_mul_gf(p2[i], roots[i])
        out[i] = PF.G.add(p1[i], t)
        out[i + ndiv2] = PF.G.sub(p1[i], t)
    return out


def _reshape_input(arr: np.ndarray, n_cols: int) -> np.ndarray:
    """Reshape flat or 2D input to (N, n_cols) form."""
    if arr.ndim == 1:
        if len(arr) % n_cols != 0:
            raise ValueError(f"Length {len(arr)} is not a multiple of n_cols={n_cols}")
        N = len(arr) // n_cols
        return arr.reshape(N, n_cols)
    elif arr.ndim == 2:
        if arr.shape[1] != n_cols:
            raise ValueError(f"Column count mismatch: {arr.shape[1]} != {n_cols}")
        return arr
    else:
        raise ValueError(f"Expected 1D or 2D array, got {arr.ndim}D")
