"""Data models for sorokit."""

from sorokit.models.values import EnumValue, TypedArg, TypedValue, TypeHint, ValueKind
from sorokit.models.events import EventQuery, EventRecord
from sorokit.models.snapshots import PollerSnapshot
from sorokit.models.config import ClientConfig, NetworkConfig, NETWORKS, PollerConfig

__all__ = [
    "EnumValue", "TypedArg", "TypedValue", "TypeHint", "ValueKind",
    "EventQuery", "EventRecord",
    "PollerSnapshot",
    "ClientConfig", "NetworkConfig", "NETWORKS", "PollerConfig",
]
