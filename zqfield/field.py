"""Prime field GF(p) over canonical integer representatives.

Elements are plain Python ints in [0, p). All arithmetic works on these
representatives directly; the Montgomery constants R and Ri are only used to
move values into and out of Montgomery form when (de)serializing.

Ordering comparisons and to_string() use the centered view: a representative
above p//2 is read as the negative number a - p.

p must be prime. It is not checked; a composite p can make the nonresidue
search in the constructor loop forever.
"""

import logging
from typing import Callable, List, Optional, Sequence, Union

from zqfield import scalar
from zqfield.batch_inverse import batch_inverse
from zqfield.ntt import NTT
from zqfield.rng import get_random_bytes
from zqfield.sqrt import SqrtStrategy, build_sqrt

_logger = logging.getLogger(__name__)

# --- Well-known primes ---

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001
"""2^64 - 2^32 + 1, 2-adicity 32."""

BN254_R = 21888242871839275222246405745257275088548364400416034343698204186575808495617
"""BN254 scalar field modulus, 2-adicity 28."""

BN254_Q = 21888242871839275222246405745257275088696311157297823662689037894645226208583
"""BN254 base field modulus, p = 3 mod 4."""


# --- Field ---

class PrimeField:
    """The field Z/pZ with all derived constants.

    Attributes:
        p: Prime modulus.
        bit_length: Significant bits of p.
        n64, n32, n8: Words needed to hold p in 64-bit, 32-bit and byte units.
            n32 and n8 are multiples of n64, so serialized widths are 8-byte aligned.
        mask: (1 << bit_length) - 1.
        R, Ri: 2^(64*n64) mod p and its inverse (Montgomery serialization).
        nqr: Smallest quadratic nonresidue >= 2.
        s, t: p - 1 = t * 2^s with t odd.
        nqr_to_t: nqr^t.
        w, wi: Roots of unity ladder from the NTT engine, w[i] has order 2^i.
        sqrt_strategy: Square root algorithm selected for p.
    """

    def __init__(
        self,
        p: Union[int, str],
        random_bytes: Optional[Callable[[int], bytes]] = None,
    ) -> None:
        self.type = "F1"
        self.one = 1
        self.zero = 0
        self.p = scalar.from_string(p)
        self.m = 1
        self.negone = self.p - 1
        self.two = 2
        self.half = self.p >> 1
        self.bit_length = scalar.bit_length(self.p)
        self.mask = (1 << self.bit_length) - 1
        self._random_bytes = random_bytes or get_random_bytes

        self.n64 = (self.bit_length - 1) // 64 + 1
        self.n32 = self.n64 * 2
        self.n8 = self.n64 * 8
        self.R = self.e(1 << (self.n64 * 64))
        self.Ri = self.inv(self.R)

        e = self.negone >> 1
        self.nqr = self.two
        r = self.pow(self.nqr, e)
        while not self.eq(r, self.negone):
            self.nqr = self.nqr + 1
            r = self.pow(self.nqr, e)

        self.s = 0
        self.t = self.negone
        while self.t & 1 == 0:
            self.s += 1
            self.t >>= 1

        self.nqr_to_t = self.pow(self.nqr, self.t)

        self.sqrt_strategy: SqrtStrategy = build_sqrt(self)
        self.sqrt_q = self.sqrt_strategy.q
        self.sqrt_s = self.sqrt_strategy.s
        self.sqrt_t = self.sqrt_strategy.t
        self.sqrt_z = self.sqrt_strategy.z
        self.sqrt_tm1d2 = self.sqrt_strategy.tm1d2
        self.sqrt_e1 = self.sqrt_strategy.e1
        self.sqrt_e34 = self.sqrt_strategy.e34
        self.sqrt_e12 = self.sqrt_strategy.e12

        self.fft_engine = NTT(self, self, self.mul)
        self.w = self.fft_engine.w
        self.wi = self.fft_engine.wi

        self.shift = self.square(self.nqr)
        self.k = self.exp(self.nqr, 1 << self.s)

        _logger.debug(
            "PrimeField: %d bits, n64=%d, s=%d, nqr=%d, sqrt=%s",
            self.bit_length, self.n64, self.s, self.nqr, self.sqrt_strategy.algorithm.name,
        )

    def __repr__(self) -> str:
        return f"PrimeField(p={self.p})"

    # --- Construction of elements ---

    def e(self, a: Union[int, str], b: Optional[int] = None) -> int:
        """Element from an int or a decimal/hex string; b=16 parses bare hex."""
        res = scalar.from_string(a, 16) if b == 16 else scalar.from_string(a)
        return self.normalize(res)

    def normalize(self, a: int) -> int:
        if a < 0:
            na = -a
            if na >= self.p:
                na %= self.p
            return self.p - na if na else 0
        return a % self.p if a >= self.p else a

    # --- Arithmetic ---

    def add(self, a: int, b: int) -> int:
        res = a + b
        return res - self.p if res >= self.p else res

    def sub(self, a: int, b: int) -> int:
        return a - b if a >= b else self.p - b + a

    def neg(self, a: int) -> int:
        return self.p - a if a else a

    def mul(self, a: int, b: int) -> int:
        return (a * b) % self.p

    def mul_scalar(self, base: int, s: Union[int, str]) -> int:
        return (base * self.e(s)) % self.p

    def square(self, a: int) -> int:
        return (a * a) % self.p

    def div(self, a: int, b: int) -> int:
        return self.mul(a, self.inv(b))

    def idiv(self, a: int, b: int) -> int:
        """Integer division of the representatives (not a field operation)."""
        if not b:
            raise ZeroDivisionError("Division by zero")
        return a // b

    def inv(self, a: int) -> int:
        """Inverse by the extended Euclidean algorithm on (p, a mod p)."""
        if not a:
            raise ZeroDivisionError("Division by zero")

        t, newt = 0, 1
        r, newr = self.p, a % self.p
        while newr:
            q = r // newr
            t, newt = newt, t - q * newt
            r, newr = newr, r - q * newr
        if t < 0:
            t += self.p
        return t

    def batch_inv(self, values: Sequence[int]):
        return batch_inverse(self, values)

    def mod(self, a: int, b: int) -> int:
        return a % b

    def pow(self, b: int, e: int) -> int:
        if e < 0:
            return pow(self.inv(b), -e, self.p)
        return pow(b, e, self.p)

    exp = pow

    def sqrt(self, a: int) -> Optional[int]:
        """Canonical square root of a, or None if a is not a square.

        Raises:
            NotImplementedError: If p falls in a residue class whose algorithm
                is not implemented (p = 5 mod 8, p = 9 mod 16).
        """
        return self.sqrt_strategy.sqrt(self, a)

    # --- Comparison ---

    def _centered(self, a: int) -> int:
        return a - self.p if a > self.half else a

    def eq(self, a: int, b: int) -> bool:
        return a == b

    def neq(self, a: int, b: int) -> bool:
        return a != b

    def lt(self, a: int, b: int) -> bool:
        return self._centered(a) < self._centered(b)

    def gt(self, a: int, b: int) -> bool:
        return self._centered(a) > self._centered(b)

    def leq(self, a: int, b: int) -> bool:
        return self._centered(a) <= self._centered(b)

    def geq(self, a: int, b: int) -> bool:
        return self._centered(a) >= self._centered(b)

    def is_zero(self, a: int) -> bool:
        return a == self.zero

    # --- Bitwise ---
    # Operate on the representative as a bit_length-wide register, then reduce once.

    def _reduce_once(self, res: int) -> int:
        return res - self.p if res >= self.p else res

    def band(self, a: int, b: int) -> int:
        return self._reduce_once(a & b & self.mask)

    def bor(self, a: int, b: int) -> int:
        return self._reduce_once((a | b) & self.mask)

    def bxor(self, a: int, b: int) -> int:
        return self._reduce_once((a ^ b) & self.mask)

    def bnot(self, a: int) -> int:
        return self._reduce_once(a ^ self.mask)

    def shl(self, a: int, b: int) -> int:
        """Left shift; amounts near p are read as negative, i.e. a right shift by p - b."""
        if b < self.bit_length:
            return self._reduce_once((a << b) & self.mask)
        nb = self.p - b
        if nb < self.bit_length:
            return a >> nb
        return self.zero

    def shr(self, a: int, b: int) -> int:
        """Right shift; amounts near p are read as negative, i.e. a left shift by p - b."""
        if b < self.bit_length:
            return a >> b
        nb = self.p - b
        if nb < self.bit_length:
            return self._reduce_once((a << nb) & self.mask)
        return self.zero

    def land(self, a: int, b: int) -> int:
        return self.one if a and b else self.zero

    def lor(self, a: int, b: int) -> int:
        return self.one if a or b else self.zero

    def lnot(self, a: int) -> int:
        return self.zero if a else self.one

    # --- Sampling ---

    def random(self) -> int:
        """Uniform-ish element from 2*bit_length random bits. Not constant time."""
        n_bytes = (self.bit_length * 2 + 7) // 8
        res = int.from_bytes(self._random_bytes(n_bytes), "big")
        return res % self.p

    def from_rng(self, rng) -> int:
        """Sample from a word source exposing next_u64().

        Words are read as a little-endian Montgomery value, rejection-sampled
        below p, then converted out of Montgomery form.
        """
        while True:
            v = 0
            for i in range(self.n64):
                v += rng.next_u64() << (64 * i)
            v &= self.mask
            if v < self.p:
                break
        return (v * self.Ri) % self.p

    # --- Transforms ---

    def fft(self, a: Sequence[int]) -> List[int]:
        return self.fft_engine.fft(a)

    def ifft(self, a: Sequence[int]) -> List[int]:
        return self.fft_engine.ifft(a)

    # --- Formatting ---

    def to_string(self, a: int, base: int = 10) -> str:
        if a > self.half and base == 10:
            return "-" + scalar.to_string(self.p - a, base)
        return scalar.to_string(a, base)

    def to_object(self, a: int) -> int:
        return a

    # --- Serialization ---
    # Fixed n8-byte windows at offset o of a writable buffer.

    def to_rpr_le(self, buff: bytearray, o: int, e: int) -> None:
        scalar.to_rpr_le(buff, o, e, self.n8)

    def to_rpr_be(self, buff: bytearray, o: int, e: int) -> None:
        scalar.to_rpr_be(buff, o, e, self.n8)

    def to_rpr_lem(self, buff: bytearray, o: int, e: int) -> None:
        self.to_rpr_le(buff, o, self.mul(self.R, e))

    def to_rpr_bem(self, buff: bytearray, o: int, e: int) -> None:
        self.to_rpr_be(buff, o, self.mul(self.R, e))

    def from_rpr_le(self, buff, o: int = 0) -> int:
        return scalar.from_rpr_le(buff, o, self.n8)

    def from_rpr_be(self, buff, o: int = 0) -> int:
        return scalar.from_rpr_be(buff, o, self.n8)

    def from_rpr_lem(self, buff, o: int = 0) -> int:
        return self.mul(self.from_rpr_le(buff, o), self.Ri)

    def from_rpr_bem(self, buff, o: int = 0) -> int:
        return self.mul(self.from_rpr_be(buff, o), self.Ri)
