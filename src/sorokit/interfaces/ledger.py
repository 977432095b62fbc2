"""LedgerClient protocol - builds and simulates contract invocations."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class LedgerClient(Protocol):
    """Consumes codec-encoded arguments and produces decoded return values."""

    def build_invoke_xdr(self, function_name: str, args: Sequence[Any] = ()) -> str:
        """Build an unsigned invocation envelope (base64 XDR)."""
        ...

    async def call_function(self, function_name: str, args: Sequence[Any] = ()) -> Any:
        """Simulate a read-only call and return the decoded result."""
        ...
