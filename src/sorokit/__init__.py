"""sorokit - typed value codec and resilient event polling for Soroban contracts."""

from sorokit.codec import TypedValueCodec
from sorokit.errors import (
    ConfigError,
    MalformedResponse,
    SorokitError,
    TransportFailure,
    UnsupportedValue,
)
from sorokit.models import EnumValue, EventRecord, TypedArg, TypedValue, TypeHint, ValueKind
from sorokit.stellar import ContractInvoker, EventStreamPoller, SorobanRpcEventSource

__version__ = "0.1.0"

__all__ = [
    "TypedValueCodec",
    "EventStreamPoller", "SorobanRpcEventSource", "ContractInvoker",
    "EnumValue", "EventRecord", "TypedArg", "TypedValue", "TypeHint", "ValueKind",
    "SorokitError", "UnsupportedValue", "TransportFailure", "MalformedResponse", "ConfigError",
]
