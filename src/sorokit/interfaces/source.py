"""EventSource protocol - answers getEvents queries for the poller."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EventSource(Protocol):
    """Fetches one page of contract events."""

    async def get_events(self, request: dict[str, Any]) -> dict[str, Any]:
        """Run a getEvents request.

        request:  {"filters": [{"type": "contract", "contractIds": [id], "topics"?: [...]}],
                   "cursor"?: str, "limit": int}
        returns:  {"events": [RawEvent, ...], "latestLedger": int}

        Raises TransportFailure (or any exception) on failure.
        """
        ...
