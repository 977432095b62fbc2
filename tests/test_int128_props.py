"""Property tests for the 128-bit split and integer auto-detection."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from sorokit.codec import TypedValueCodec, to_typed
from sorokit.codec.int128 import (
    I32_MAX,
    I32_MIN,
    I64_MAX,
    I64_MIN,
    I128_MAX,
    I128_MIN,
    MASK64,
    U128_MAX,
    join_i128,
    join_u128,
    split_i128,
    split_u128,
)
from sorokit.models.values import ValueKind

CODEC = TypedValueCodec()

i128s = st.integers(min_value=I128_MIN, max_value=I128_MAX)
u128s = st.integers(min_value=0, max_value=U128_MAX)


@given(i128s)
def test_i128_split_halves_fit_xdr(n):
    hi, lo = split_i128(n)
    assert I64_MIN <= hi <= I64_MAX
    assert 0 <= lo <= MASK64
    assert join_i128(hi, lo) == n


@given(u128s)
def test_u128_split_never_normalizes_valid_input(n):
    """Non-negative inputs always have a non-negative high half."""
    hi, lo = split_u128(n)
    assert hi == n >> 64
    assert 0 <= hi <= MASK64
    assert join_u128(hi, lo) == n


@given(st.integers(min_value=-U128_MAX, max_value=-1))
def test_u128_split_of_negative_wraps(n):
    hi, lo = split_u128(n)
    assert 0 <= hi <= MASK64
    assert join_u128(hi, lo) == n & U128_MAX


@settings(max_examples=50)
@given(i128s)
def test_i128_codec_roundtrip(n):
    assert CODEC.decode(CODEC.encode(n, "i128")) == n


@settings(max_examples=50)
@given(u128s)
def test_u128_codec_roundtrip(n):
    assert CODEC.decode(CODEC.encode(n, "u128")) == n


@given(i128s)
def test_auto_detect_picks_narrowest_signed_kind(n):
    expected = ValueKind.I32 if I32_MIN <= n <= I32_MAX else ValueKind.I128
    assert to_typed(n).kind is expected
