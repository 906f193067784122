"""Helpers over Python ints used by the field layer.

Python's ``int`` already provides arbitrary precision arithmetic, so this module
only covers what ``int`` does not do directly: radix conversion with the digit
conventions used by ``PrimeField.to_string`` and fixed-width byte windows.
"""

from typing import List, Union

ScalarInput = Union[int, str]

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


# --- Conversion ---

def from_string(s: ScalarInput, radix: int = 10) -> int:
    """Parse a decimal or hexadecimal string (``0x`` prefix optional for radix 16)."""
    if isinstance(s, int):
        return s
    if radix == 16:
        return int(s, 16)
    if s.startswith(("0x", "0X", "-0x", "-0X")):
        return int(s, 16)
    return int(s, radix)


def bit_length(a: int) -> int:
    return a.bit_length()


def to_array(s: int, radix: int) -> List[int]:
    """Digits of a non-negative integer, most significant first."""
    res: List[int] = []
    rem = s
    while rem:
        rem, d = divmod(rem, radix)
        res.append(d)
    res.reverse()
    return res


def to_string(a: int, radix: int = 10) -> str:
    if radix == 10:
        return str(a)
    if a < 0:
        return "-" + to_string(-a, radix)
    if a == 0:
        return "0"
    return "".join(_DIGITS[d] for d in to_array(a, radix))


# --- Fixed-width byte windows ---

def _check_window(buff, o: int, n8: int) -> None:
    if o < 0 or o + n8 > len(buff):
        raise ValueError(f"buffer of {len(buff)} bytes cannot hold {n8} bytes at offset {o}")


def to_rpr_le(buff: bytearray, o: int, e: int, n8: int) -> None:
    """Write e into buff[o:o+n8] little-endian, zero-padding the high bytes."""
    _check_window(buff, o, n8)
    buff[o:o + n8] = e.to_bytes(n8, "little")


def to_rpr_be(buff: bytearray, o: int, e: int, n8: int) -> None:
    """Write e into buff[o:o+n8] big-endian, zero-padding the high bytes."""
    _check_window(buff, o, n8)
    buff[o:o + n8] = e.to_bytes(n8, "big")


def from_rpr_le(buff, o: int = 0, n8: int = 0) -> int:
    n8 = n8 or len(buff)
    _check_window(buff, o, n8)
    return int.from_bytes(bytes(buff[o:o + n8]), "little")


def from_rpr_be(buff, o: int = 0, n8: int = 0) -> int:
    n8 = n8 or len(buff)
    _check_window(buff, o, n8)
    return int.from_bytes(bytes(buff[o:o + n8]), "big")


def to_le_buff(a: int) -> bytes:
    """Shortest little-endian encoding of a (at least one byte)."""
    n8 = (a.bit_length() - 1) // 8 + 1 if a else 1
    buff = bytearray(n8)
    to_rpr_le(buff, 0, a, n8)
    return bytes(buff)
