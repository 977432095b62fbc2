"""TypedValueCodec - native Python values <-> Soroban SCVal."""

from __future__ import annotations

import logging
from typing import Any

from stellar_sdk import scval, xdr

from sorokit.codec.classify import to_typed
from sorokit.codec.int128 import join_i128, join_u128, split_i128, split_u128
from sorokit.errors import UnsupportedValue
from sorokit.models.values import TypedValue, TypeHint, ValueKind

log = logging.getLogger(__name__)

_T = xdr.SCValType


def _text(raw: object) -> str:
    """SDK string/symbol payloads may come back as bytes."""
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return str(raw)


class TypedValueCodec:
    """Converts between native values and the SCVal wire representation.

    Stateless apart from the enum heuristic flag: a decoded vec whose first
    element is a symbol comes back as an EnumValue. That is a format
    convention, since such a vec is indistinguishable from an enum on the
    wire. Pass enum_heuristic=False to always get plain lists.
    """

    def __init__(self, enum_heuristic: bool = True) -> None:
        self.enum_heuristic = enum_heuristic

    # ── Encode ──────────────────────────────────────────────

    def encode(self, value: Any, hint: TypeHint | str | None = None) -> xdr.SCVal:
        """Encode a native value, honoring an explicit hint when given."""
        return self.to_scval(to_typed(value, hint))

    def encode_all(self, values: list[Any]) -> list[xdr.SCVal]:
        """Encode a list of call arguments, each auto-detected or a TypedArg."""
        return [self.encode(v) for v in values]

    def to_scval(self, tv: TypedValue) -> xdr.SCVal:
        kind = tv.kind
        if kind is ValueKind.BOOL:
            return scval.to_bool(tv.value)
        if kind is ValueKind.VOID:
            return scval.to_void()
        if kind is ValueKind.U32:
            return scval.to_uint32(tv.value)
        if kind is ValueKind.I32:
            return scval.to_int32(tv.value)
        if kind is ValueKind.U64:
            return scval.to_uint64(tv.value)
        if kind is ValueKind.I64:
            return scval.to_int64(tv.value)
        if kind is ValueKind.TIMEPOINT:
            return scval.to_timepoint(tv.value)
        if kind is ValueKind.DURATION:
            return scval.to_duration(tv.value)
        if kind is ValueKind.U128:
            hi, lo = split_u128(tv.value)
            parts = xdr.UInt128Parts(hi=xdr.Uint64(hi), lo=xdr.Uint64(lo))
            return xdr.SCVal(_T.SCV_U128, u128=parts)
        if kind is ValueKind.I128:
            hi, lo = split_i128(tv.value)
            parts = xdr.Int128Parts(hi=xdr.Int64(hi), lo=xdr.Uint64(lo))
            return xdr.SCVal(_T.SCV_I128, i128=parts)
        if kind is ValueKind.STRING:
            return scval.to_string(tv.value)
        if kind is ValueKind.SYMBOL:
            return scval.to_symbol(tv.value)
        if kind is ValueKind.ADDRESS:
            return scval.to_address(tv.value)
        if kind is ValueKind.BYTES:
            return scval.to_bytes(tv.value)
        if kind is ValueKind.VEC:
            return scval.to_vec([self.to_scval(item) for item in tv.value])
        if kind is ValueKind.MAP:
            entries = [
                xdr.SCMapEntry(key=self.to_scval(k), val=self.to_scval(v))
                for k, v in tv.value
            ]
            return xdr.SCVal(_T.SCV_MAP, map=xdr.SCMap(entries))
        if kind is ValueKind.ENUM:
            tag, values = tv.value
            return scval.to_vec(
                [scval.to_symbol(tag)] + [self.to_scval(v) for v in values]
            )
        raise UnsupportedValue(f"cannot encode kind {kind!r}", value=tv.value)

    # ── Decode ──────────────────────────────────────────────

    def decode(self, wire: xdr.SCVal | str) -> Any:
        """Decode an SCVal (or its base64 XDR) to a native value. Never raises
        on a well-formed value; unknown tags come back as text."""
        return self.decode_typed(wire).to_native()

    def decode_typed(self, wire: xdr.SCVal | str) -> TypedValue:
        if isinstance(wire, str):
            wire = xdr.SCVal.from_xdr(wire)

        t = wire.type
        if t == _T.SCV_BOOL:
            return TypedValue(ValueKind.BOOL, scval.from_bool(wire))
        if t == _T.SCV_VOID:
            return TypedValue(ValueKind.VOID)
        if t == _T.SCV_U32:
            return TypedValue(ValueKind.U32, scval.from_uint32(wire))
        if t == _T.SCV_I32:
            return TypedValue(ValueKind.I32, scval.from_int32(wire))
        if t == _T.SCV_U64:
            return TypedValue(ValueKind.U64, scval.from_uint64(wire))
        if t == _T.SCV_I64:
            return TypedValue(ValueKind.I64, scval.from_int64(wire))
        if t == _T.SCV_TIMEPOINT:
            return TypedValue(ValueKind.TIMEPOINT, scval.from_timepoint(wire))
        if t == _T.SCV_DURATION:
            return TypedValue(ValueKind.DURATION, scval.from_duration(wire))
        if t == _T.SCV_U128:
            parts = wire.u128
            return TypedValue(ValueKind.U128, join_u128(parts.hi.uint64, parts.lo.uint64))
        if t == _T.SCV_I128:
            parts = wire.i128
            return TypedValue(ValueKind.I128, join_i128(parts.hi.int64, parts.lo.uint64))
        if t == _T.SCV_STRING:
            return TypedValue(ValueKind.STRING, _text(scval.from_string(wire)))
        if t == _T.SCV_SYMBOL:
            return TypedValue(ValueKind.SYMBOL, _text(scval.from_symbol(wire)))
        if t == _T.SCV_BYTES:
            return TypedValue(ValueKind.BYTES, bytes(scval.from_bytes(wire)))
        if t == _T.SCV_ADDRESS:
            return TypedValue(ValueKind.ADDRESS, scval.from_address(wire).address)
        if t == _T.SCV_VEC:
            items = wire.vec.sc_vec if wire.vec is not None else []
            if self.enum_heuristic and items and items[0].type == _T.SCV_SYMBOL:
                tag = _text(scval.from_symbol(items[0]))
                return TypedValue(
                    ValueKind.ENUM,
                    (tag, tuple(self.decode_typed(v) for v in items[1:])),
                )
            return TypedValue(ValueKind.VEC, tuple(self.decode_typed(v) for v in items))
        if t == _T.SCV_MAP:
            entries = wire.map.sc_map if wire.map is not None else []
            return TypedValue(
                ValueKind.MAP,
                tuple((self.decode_typed(e.key), self.decode_typed(e.val)) for e in entries),
            )

        log.debug("Decoding unsupported SCVal type %s as text", t)
        return TypedValue(ValueKind.STRING, str(wire))
