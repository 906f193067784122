"""Square root algorithm selection for prime fields.

The algorithm is chosen once per field from the residue class of p
(see https://eprint.iacr.org/2012/685.pdf for the numbering):

    p = 1 mod 16  -> Tonelli-Shanks        (alg. 5)
    p = 9 mod 16  -> Kong                  (alg. 4, not implemented)
    p = 5 mod 8   -> Atkin                 (alg. 3, not implemented)
    p = 3 mod 4   -> Shanks closed form    (alg. 2)

Even-degree extension fields are only classified (alg. 8, 9, 10); computing
their roots needs a conjugation supplied by the extension field itself, which
this package does not model.

Every implemented algorithm returns the root in the non-negative half under the
centered sign convention, so the result is canonical.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from zqfield.field import PrimeField

_logger = logging.getLogger(__name__)


# --- Algorithm kinds ---

class SqrtAlgorithm(Enum):
    """Square root algorithm kinds, tagged with their paper numbering."""

    SHANKS = 2
    ATKIN = 3
    KONG = 4
    TONELLI_SHANKS = 5
    COMPLEX = 8
    ADJ9 = 9
    ADJ10 = 10

    @property
    def implemented(self) -> bool:
        return self in (SqrtAlgorithm.SHANKS, SqrtAlgorithm.TONELLI_SHANKS)


def classify(p: int, m: int = 1) -> SqrtAlgorithm:
    """Select the square root algorithm for GF(p^m).

    Raises:
        ValueError: If p has no supported residue class (only possible for
            p = 2 or composite p).
    """
    if m % 2 == 1:
        if p % 4 == 1:
            if p % 8 == 1:
                if p % 16 == 1:
                    return SqrtAlgorithm.TONELLI_SHANKS
                if p % 16 == 9:
                    return SqrtAlgorithm.KONG
                raise ValueError("Field without sqrt")
            if p % 8 == 5:
                return SqrtAlgorithm.ATKIN
            raise ValueError("Field without sqrt")
        if p % 4 == 3:
            return SqrtAlgorithm.SHANKS
        raise ValueError("Field without sqrt")

    pm2mod4 = pow(p, m // 2, 4)
    if pm2mod4 == 1:
        return SqrtAlgorithm.ADJ10
    if pm2mod4 == 3:
        return SqrtAlgorithm.ADJ9
    return SqrtAlgorithm.COMPLEX


# --- Strategy ---

@dataclass(frozen=True)
class SqrtStrategy:
    """Selected algorithm plus the constants it needs.

    Only the constants used by `algorithm` are set; the rest stay None.
    """

    algorithm: SqrtAlgorithm
    q: Optional[int] = None
    s: Optional[int] = None
    t: Optional[int] = None
    z: Optional[int] = None
    tm1d2: Optional[int] = None
    e1: Optional[int] = None
    e34: Optional[int] = None
    e12: Optional[int] = None

    def sqrt(self, F: "PrimeField", a: int) -> Optional[int]:
        """Square root of a in F, or None if a is not a square.

        Raises:
            NotImplementedError: If the selected algorithm has no implementation.
        """
        if self.algorithm is SqrtAlgorithm.TONELLI_SHANKS:
            return self._tonelli_shanks(F, a)
        if self.algorithm is SqrtAlgorithm.SHANKS:
            return self._shanks(F, a)
        raise NotImplementedError(f"Sqrt alg {self.algorithm.value} not implemented")

    def _tonelli_shanks(self, F: "PrimeField", a: int) -> Optional[int]:
        if F.is_zero(a):
            return F.zero
        w = F.pow(a, self.tm1d2)
        a0 = F.pow(F.mul(F.square(w), a), 1 << (self.s - 1))
        if F.eq(a0, F.negone):
            return None

        v = self.s
        x = F.mul(a, w)
        b = F.mul(x, w)
        z = self.z
        while not F.eq(b, F.one):
            b2k = F.square(b)
            k = 1
            while not F.eq(b2k, F.one):
                b2k = F.square(b2k)
                k += 1

            w = z
            for _ in range(v - k - 1):
                w = F.square(w)
            z = F.square(w)
            b = F.mul(b, z)
            x = F.mul(x, w)
            v = k
        return x if F.geq(x, F.zero) else F.neg(x)

    def _shanks(self, F: "PrimeField", a: int) -> Optional[int]:
        if F.is_zero(a):
            return F.zero
        a1 = F.pow(a, self.e1)
        a0 = F.mul(F.square(a1), a)
        if F.eq(a0, F.negone):
            return None
        x = F.mul(a1, a)
        return x if F.geq(x, F.zero) else F.neg(x)


# --- Construction ---

def build_sqrt(F: "PrimeField") -> SqrtStrategy:
    """Classify F and compute the constants of its square root algorithm.

    Tonelli-Shanks draws random elements from F until it finds z whose order is
    exactly 2^s, so this must run after F can sample.
    """
    algorithm = classify(F.p, F.m)
    _logger.debug("sqrt algorithm for %d-bit field: %s", F.bit_length, algorithm.name)

    if algorithm is SqrtAlgorithm.TONELLI_SHANKS:
        return _build_tonelli_shanks(F)
    if algorithm is SqrtAlgorithm.SHANKS:
        q = F.p ** F.m
        return SqrtStrategy(algorithm, q=q, e1=(q - 3) // 4)
    if algorithm is SqrtAlgorithm.ADJ9:
        q = F.p ** (F.m // 2)
        return SqrtStrategy(algorithm, q=q, e34=(q - 3) // 4, e12=(q - 1) // 2)
    return SqrtStrategy(algorithm)


def _build_tonelli_shanks(F: "PrimeField") -> SqrtStrategy:
    q = F.p ** F.m
    s = 0
    t = q - 1
    while t % 2 == 0:
        s += 1
        t //= 2

    # z = c^t has order 2^s exactly iff z^(2^(s-1)) == -1
    c0 = F.one
    z = F.one
    while not F.eq(c0, F.negone):
        c = F.random()
        z = F.pow(c, t)
        c0 = F.pow(z, 1 << (s - 1))

    return SqrtStrategy(
        SqrtAlgorithm.TONELLI_SHANKS,
        q=q,
        s=s,
        t=t,
        z=z,
        tm1d2=(t - 1) // 2,
    )
