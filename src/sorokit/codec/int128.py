"""Integer ranges and the 128-bit hi/lo split used by Soroban XDR."""

from __future__ import annotations

MASK64 = (1 << 64) - 1
TWO_64 = 1 << 64

I32_MIN, I32_MAX = -(1 << 31), (1 << 31) - 1
U32_MAX = (1 << 32) - 1
I64_MIN, I64_MAX = -(1 << 63), (1 << 63) - 1
U64_MAX = MASK64
I128_MIN, I128_MAX = -(1 << 127), (1 << 127) - 1
U128_MAX = (1 << 128) - 1


def split_i128(n: int) -> tuple[int, int]:
    """Split into (hi, lo): hi is the signed upper half, lo the unsigned lower half."""
    return n >> 64, n & MASK64


def split_u128(n: int) -> tuple[int, int]:
    """Split into unsigned (hi, lo) halves.

    A negative hi (only reachable from a negative input) is normalized into
    the unsigned 64-bit range, which yields the two's-complement bit pattern.
    """
    hi = n >> 64
    lo = n & MASK64
    if hi < 0:
        hi += TWO_64
    return hi, lo


def join_i128(hi: int, lo: int) -> int:
    """Rebuild a signed 128-bit integer; the sign comes from hi."""
    return (hi << 64) | (lo & MASK64)


def join_u128(hi: int, lo: int) -> int:
    return ((hi & MASK64) << 64) | (lo & MASK64)
