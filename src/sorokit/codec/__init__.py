"""Typed value codec for Soroban contract arguments and return values."""

from sorokit.codec.codec import TypedValueCodec
from sorokit.codec.classify import looks_like_address, to_typed

__all__ = ["TypedValueCodec", "looks_like_address", "to_typed"]
