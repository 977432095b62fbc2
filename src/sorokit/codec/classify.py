"""Native value -> TypedValue classification.

With a hint, the value is coerced into exactly that kind. Without one, the
ordered predicates in _DETECTORS are evaluated and the first match wins:

    bool              -> Bool
    int beyond i32    -> I128
    int / whole float -> I32
    address-shaped str-> Address
    str               -> String
    bytes-like        -> Bytes
    Address object    -> Address
    TypedArg          -> its own hint
    EnumValue         -> Enum
    list / tuple      -> Vec
    Mapping           -> Map
    None              -> Void
    anything else     -> String(str(value))
"""

from __future__ import annotations

import logging
import operator
from typing import Any, Callable, Iterable, Mapping

from stellar_sdk import Address

from sorokit.codec.int128 import (
    I32_MAX,
    I32_MIN,
    I64_MAX,
    I64_MIN,
    I128_MAX,
    I128_MIN,
    U32_MAX,
    U64_MAX,
    U128_MAX,
)
from sorokit.errors import UnsupportedValue
from sorokit.models.values import EnumValue, TypedArg, TypedValue, TypeHint, ValueKind

log = logging.getLogger(__name__)

ADDRESS_LENGTH = 56
ADDRESS_PREFIXES = ("G", "C")

_INT_RANGES: dict[ValueKind, tuple[int, int]] = {
    ValueKind.I32: (I32_MIN, I32_MAX),
    ValueKind.U32: (0, U32_MAX),
    ValueKind.I64: (I64_MIN, I64_MAX),
    ValueKind.U64: (0, U64_MAX),
    ValueKind.I128: (I128_MIN, I128_MAX),
    ValueKind.U128: (0, U128_MAX),
    ValueKind.TIMEPOINT: (0, U64_MAX),
    ValueKind.DURATION: (0, U64_MAX),
}


# ── Structural predicates ───────────────────────────────────────


def looks_like_address(value: object) -> bool:
    """True for a 56-char string starting with G (account) or C (contract)."""
    return (
        isinstance(value, str)
        and len(value) == ADDRESS_LENGTH
        and value.startswith(ADDRESS_PREFIXES)
    )


def _is_bytes_like(value: object) -> bool:
    return isinstance(value, (bytes, bytearray, memoryview))


def _is_whole_number(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _is_wide_int(value: object) -> bool:
    return _is_whole_number(value) and not (I32_MIN <= int(value) <= I32_MAX)


def _typed_arg(value: object) -> TypedArg | None:
    if isinstance(value, TypedArg):
        return value
    if isinstance(value, Mapping):
        return TypedArg.from_mapping(value)
    return None


# ── Coercions ───────────────────────────────────────────────────


def _coerce_int(value: Any, kind: ValueKind) -> int:
    if isinstance(value, bool):
        raise UnsupportedValue(f"{kind.value} expects an integer, got bool", value=value, hint=kind.value)
    if isinstance(value, float):
        if not value.is_integer():
            raise UnsupportedValue(f"{kind.value} expects an integer, got {value!r}", value=value, hint=kind.value)
        n = int(value)
    elif isinstance(value, str):
        try:
            n = int(value.strip(), 10)
        except ValueError:
            raise UnsupportedValue(
                f"{kind.value} expects a decimal integer string, got {value!r}",
                value=value, hint=kind.value,
            ) from None
    else:
        try:
            n = operator.index(value)
        except TypeError:
            raise UnsupportedValue(
                f"{kind.value} expects an integer, got {type(value).__name__}",
                value=value, hint=kind.value,
            ) from None

    low, high = _INT_RANGES[kind]
    if not low <= n <= high:
        raise UnsupportedValue(f"{n} is out of range for {kind.value}", value=value, hint=kind.value)
    return n


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise UnsupportedValue(f"bool expects a boolean, got {value!r}", value=value, hint="bool")


def _coerce_text(value: Any) -> str | bytes:
    """Any value works as a string; bytes that are not UTF-8 stay raw."""
    if _is_bytes_like(value):
        raw = bytes(value)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return raw
    return str(value)


def _coerce_symbol(value: Any) -> str:
    if not isinstance(value, str):
        raise UnsupportedValue(
            f"symbol expects a string, got {type(value).__name__}", value=value, hint="symbol",
        )
    return value


def _coerce_address(value: Any) -> str:
    if isinstance(value, Address):
        return value.address
    if not isinstance(value, str):
        raise UnsupportedValue(
            f"address expects a string, got {type(value).__name__}", value=value, hint="address",
        )
    try:
        return Address(value).address
    except Exception as exc:
        raise UnsupportedValue(f"invalid address {value!r}: {exc}", value=value, hint="address") from exc


def _coerce_bytes(value: Any) -> bytes:
    if _is_bytes_like(value):
        return bytes(value)
    if isinstance(value, str):
        clean = value[2:] if value.startswith(("0x", "0X")) else value
        try:
            return bytes.fromhex(clean)
        except ValueError:
            raise UnsupportedValue(f"bytes expects hex text, got {value!r}", value=value, hint="bytes") from None
    raise UnsupportedValue(
        f"bytes expects raw bytes or hex text, got {type(value).__name__}", value=value, hint="bytes",
    )


def _sequence_items(value: Any, hint: str) -> list:
    if isinstance(value, (str, bytes, bytearray, memoryview, Mapping)) or not isinstance(value, Iterable):
        raise UnsupportedValue(
            f"{hint} expects an ordered sequence, got {type(value).__name__}", value=value, hint=hint,
        )
    return list(value)


def _map_pairs(value: Any) -> list[tuple[Any, Any]]:
    if isinstance(value, Mapping):
        return list(value.items())
    pairs = []
    for item in _sequence_items(value, "map"):
        try:
            key, val = item
        except (TypeError, ValueError):
            raise UnsupportedValue(f"map entry is not a (key, value) pair: {item!r}", value=value, hint="map") from None
        pairs.append((key, val))
    return pairs


def _enum_parts(value: Any) -> tuple[str, list]:
    if isinstance(value, EnumValue):
        tag, values = value.tag, list(value.values)
    elif isinstance(value, Mapping) and "tag" in value:
        tag = value["tag"]
        values = _sequence_items(value.get("values") or [], "enum")
    else:
        raise UnsupportedValue(
            f"enum expects EnumValue or {{tag, values}}, got {type(value).__name__}", value=value, hint="enum",
        )
    if not isinstance(tag, str):
        raise UnsupportedValue(f"enum tag must be a string, got {tag!r}", value=value, hint="enum")
    return tag, values


# ── Builders ────────────────────────────────────────────────────


def _vec(items: Iterable[Any]) -> TypedValue:
    return TypedValue(ValueKind.VEC, tuple(to_typed(item) for item in items))


def _map(pairs: Iterable[tuple[Any, Any]]) -> TypedValue:
    return TypedValue(ValueKind.MAP, tuple((to_typed(k), to_typed(v)) for k, v in pairs))


def _enum(tag: str, values: Iterable[Any]) -> TypedValue:
    return TypedValue(ValueKind.ENUM, (tag, tuple(to_typed(v) for v in values)))


def _from_typed_arg(arg: TypedArg) -> TypedValue:
    return _from_hint(arg.value, arg.type)


def _from_hint(value: Any, hint: TypeHint) -> TypedValue:
    kind = ValueKind(hint.value)
    if kind in _INT_RANGES:
        return TypedValue(kind, _coerce_int(value, kind))
    if kind is ValueKind.BOOL:
        return TypedValue(kind, _coerce_bool(value))
    if kind is ValueKind.STRING:
        return TypedValue(kind, _coerce_text(value))
    if kind is ValueKind.SYMBOL:
        return TypedValue(kind, _coerce_symbol(value))
    if kind is ValueKind.ADDRESS:
        return TypedValue(kind, _coerce_address(value))
    if kind is ValueKind.BYTES:
        return TypedValue(kind, _coerce_bytes(value))
    if kind is ValueKind.VEC:
        return _vec(_sequence_items(value, "vec"))
    if kind is ValueKind.MAP:
        return _map(_map_pairs(value))
    if kind is ValueKind.ENUM:
        return _enum(*_enum_parts(value))
    raise UnsupportedValue(f"unsupported hint {hint!r}", value=value, hint=str(hint))


_DETECTORS: tuple[tuple[Callable[[Any], bool], Callable[[Any], TypedValue]], ...] = (
    (lambda v: isinstance(v, bool), lambda v: TypedValue(ValueKind.BOOL, v)),
    (_is_wide_int, lambda v: TypedValue(ValueKind.I128, _coerce_int(v, ValueKind.I128))),
    (_is_whole_number, lambda v: TypedValue(ValueKind.I32, int(v))),
    (looks_like_address, lambda v: TypedValue(ValueKind.ADDRESS, _coerce_address(v))),
    (lambda v: isinstance(v, str), lambda v: TypedValue(ValueKind.STRING, v)),
    (_is_bytes_like, lambda v: TypedValue(ValueKind.BYTES, bytes(v))),
    (lambda v: isinstance(v, Address), lambda v: TypedValue(ValueKind.ADDRESS, v.address)),
    (lambda v: _typed_arg(v) is not None, lambda v: _from_typed_arg(_typed_arg(v))),
    (lambda v: isinstance(v, EnumValue), lambda v: _enum(v.tag, v.values)),
    (lambda v: isinstance(v, (list, tuple)), _vec),
    (lambda v: isinstance(v, Mapping), lambda v: _map(v.items())),
    (lambda v: v is None, lambda v: TypedValue(ValueKind.VOID)),
)


def to_typed(value: Any, hint: TypeHint | str | None = None) -> TypedValue:
    """Build the TypedValue for a native value, honoring an explicit hint.

    Raises UnsupportedValue when the value cannot take the hinted kind.
    """
    if isinstance(value, TypedValue) and hint is None:
        return value

    if hint is not None:
        try:
            hint = TypeHint(hint)
        except ValueError:
            raise UnsupportedValue(f"unknown type hint {hint!r}", value=value, hint=str(hint)) from None
        arg = _typed_arg(value)
        if arg is not None:
            value = arg.value
        return _from_hint(value, hint)

    for matches, build in _DETECTORS:
        if matches(value):
            return build(value)

    log.debug("No structural match for %s, encoding as string", type(value).__name__)
    return TypedValue(ValueKind.STRING, str(value))
