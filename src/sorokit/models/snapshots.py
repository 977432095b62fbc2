"""Read-only snapshots of poller state for callers."""

from __future__ import annotations

from dataclasses import dataclass

from sorokit.models.events import EventRecord


@dataclass(frozen=True)
class PollerSnapshot:
    """Point-in-time view of an EventStreamPoller."""

    contract_id: str
    cursor: str | None
    events: tuple[EventRecord, ...]
    consecutive_failures: int
    is_recovering: bool
    last_error: Exception | None
    loading: bool
    disposed: bool

    @property
    def event_count(self) -> int:
        return len(self.events)

    @property
    def healthy(self) -> bool:
        return self.last_error is None and not self.is_recovering
