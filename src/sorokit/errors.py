"""Exception types raised by sorokit.

Hierarchy
---------
SorokitError
 ├─ UnsupportedValue  : encode-time hint/value mismatch, never retried
 ├─ TransportFailure  : network or remote error from the RPC service
 │   └─ MalformedResponse : response is missing expected fields
 └─ ConfigError       : invalid configuration values
"""

from __future__ import annotations


class SorokitError(Exception):
    """Base class for sorokit errors."""


class UnsupportedValue(SorokitError, ValueError):
    """A value cannot be encoded under the requested (or detected) kind."""

    def __init__(self, message: str, *, value: object = None, hint: str | None = None) -> None:
        super().__init__(message)
        self.value = value
        self.hint = hint


class TransportFailure(SorokitError):
    """The remote service failed or could not be reached."""


class MalformedResponse(TransportFailure):
    """The remote service answered, but not with the expected shape."""


class ConfigError(SorokitError, ValueError):
    """Configuration could not be loaded or validated."""
