"""Typed value models shared by the codec and its callers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class TypeHint(str, Enum):
    """Explicit encoding hints accepted by TypedValueCodec.encode()."""

    U32 = "u32"
    I32 = "i32"
    U64 = "u64"
    I64 = "i64"
    U128 = "u128"
    I128 = "i128"
    BOOL = "bool"
    STRING = "string"
    SYMBOL = "symbol"
    ADDRESS = "address"
    BYTES = "bytes"
    VEC = "vec"
    MAP = "map"
    ENUM = "enum"
    TIMEPOINT = "timepoint"
    DURATION = "duration"


class ValueKind(str, Enum):
    """Variant tag of a TypedValue."""

    BOOL = "bool"
    I32 = "i32"
    U32 = "u32"
    I64 = "i64"
    U64 = "u64"
    I128 = "i128"
    U128 = "u128"
    STRING = "string"
    SYMBOL = "symbol"
    ADDRESS = "address"
    BYTES = "bytes"
    VEC = "vec"
    MAP = "map"
    ENUM = "enum"
    TIMEPOINT = "timepoint"
    DURATION = "duration"
    VOID = "void"


HINT_NAMES = frozenset(h.value for h in TypeHint)


@dataclass(frozen=True)
class EnumValue:
    """A contract enum variant: a symbol tag plus zero or more payload values.

    On the wire this is a vec whose first element is the tag symbol.
    """

    tag: str
    values: tuple = ()

    def __post_init__(self) -> None:
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class TypedArg:
    """A native value paired with an explicit TypeHint."""

    value: Any
    type: TypeHint

    def __post_init__(self) -> None:
        if not isinstance(self.type, TypeHint):
            object.__setattr__(self, "type", TypeHint(self.type))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TypedArg | None:
        """Build from a ``{"value": ..., "type": ...}`` mapping.

        Returns None unless the mapping has exactly those two keys and the
        type names a known hint, so ordinary dicts still encode as maps.
        """
        if set(data.keys()) != {"value", "type"}:
            return None
        hint = data["type"]
        if isinstance(hint, TypeHint):
            return cls(data["value"], hint)
        if isinstance(hint, str) and hint in HINT_NAMES:
            return cls(data["value"], TypeHint(hint))
        return None


@dataclass(frozen=True)
class TypedValue:
    """Immutable tagged union over every supported contract value kind.

    Payload per kind:
        BOOL                          bool
        I32..U128, TIMEPOINT/DURATION int
        STRING                        str (bytes if not valid UTF-8)
        SYMBOL, ADDRESS               str
        BYTES                         bytes
        VEC                           tuple[TypedValue, ...]
        MAP                           tuple[tuple[TypedValue, TypedValue], ...]
        ENUM                          tuple[str, tuple[TypedValue, ...]]
        VOID                          None
    """

    kind: ValueKind
    value: Any = None

    def to_native(self) -> Any:
        """Convert back to the plain Python value returned by decode()."""
        if self.kind is ValueKind.VEC:
            return [item.to_native() for item in self.value]
        if self.kind is ValueKind.MAP:
            return [(k.to_native(), v.to_native()) for k, v in self.value]
        if self.kind is ValueKind.ENUM:
            tag, values = self.value
            return EnumValue(tag, tuple(v.to_native() for v in values))
        return self.value
