"""Soroban event stream poller - live, deduplicated view of contract events."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Sequence

from sorokit.errors import MalformedResponse, TransportFailure
from sorokit.interfaces.source import EventSource
from sorokit.models.config import PollerConfig
from sorokit.models.events import EventQuery, EventRecord
from sorokit.models.snapshots import PollerSnapshot

log = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10.0  # seconds
DEFAULT_LIMIT = 100
MAX_RETRIES = 3
BACKOFF_BASE = 1.0  # seconds: 1s -> 3s -> 9s
ERROR_POLL_MULTIPLIER = 2  # poll at 2x the interval while recovering

Sleep = Callable[[float], Awaitable[Any]]


def _raw_events(response: Any) -> Sequence[Mapping[str, Any]]:
    """Pull the events list out of a getEvents response."""
    if not isinstance(response, Mapping) or "events" not in response:
        raise MalformedResponse("getEvents response has no 'events' field")
    events = response["events"]
    if events is None:
        return []
    if isinstance(events, (str, bytes)) or not isinstance(events, Sequence):
        raise MalformedResponse("getEvents 'events' is not a list")
    return events


def _as_transport_failure(exc: Exception) -> TransportFailure:
    if isinstance(exc, TransportFailure):
        return exc
    wrapped = TransportFailure(f"{type(exc).__name__}: {exc}")
    wrapped.__cause__ = exc
    return wrapped


class EventStreamPoller:
    """Polls an event source for one contract's events.

    Holds every event seen so far (deduplicated by id, arrival order) and a
    cursor pointing after the newest one. Each fetch cycle makes up to
    max_retries attempts, sleeping backoff_base * 3**(k-1) seconds after
    failed attempt k. When a cycle exhausts its retries the error is kept in
    last_error, is_recovering is set, and polling continues at
    poll_interval * error_multiplier. A later successful cycle clears both.

    At most one cycle is in flight; overlapping refresh() calls and timer
    ticks are ignored. dispose() is terminal: timers are cancelled and late
    responses are discarded without touching state.
    """

    def __init__(
        self,
        source: EventSource | Callable[[dict[str, Any]], Awaitable[Mapping[str, Any]]],
        contract_id: str,
        *,
        topics: list[list[str]] | None = None,
        limit: int = DEFAULT_LIMIT,
        poll_interval: float | None = DEFAULT_POLL_INTERVAL,
        from_cursor: str | None = None,
        max_retries: int = MAX_RETRIES,
        backoff_base: float = BACKOFF_BASE,
        error_multiplier: int = ERROR_POLL_MULTIPLIER,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._query = getattr(source, "get_events", source)
        self._contract_id = contract_id
        self._topics = topics
        self._limit = limit
        self._poll_interval = poll_interval or None
        self._max_retries = max(1, max_retries)
        self._backoff_base = backoff_base
        self._error_multiplier = error_multiplier
        self._sleep = sleep

        # State
        self._cursor: str | None = from_cursor
        self._events: list[EventRecord] = []
        self._seen: set[str] = set()
        self._consecutive_failures = 0
        self._is_recovering = False
        self._last_error: TransportFailure | None = None
        self._disposed = False

        # Scheduling
        self._fetching = False
        self._stopped = False
        self._timer: asyncio.Task | None = None
        self._timer_armed = False  # timer task still sleeping
        self._backoff: asyncio.Future | None = None

    @classmethod
    def from_config(
        cls,
        source: EventSource,
        contract_id: str,
        cfg: PollerConfig,
        **kwargs: Any,
    ) -> EventStreamPoller:
        return cls(
            source,
            contract_id,
            limit=cfg.limit,
            poll_interval=cfg.poll_interval,
            max_retries=cfg.max_retries,
            backoff_base=cfg.backoff_base,
            error_multiplier=cfg.error_multiplier,
            **kwargs,
        )

    # ── Read-only state ─────────────────────────────────────

    @property
    def contract_id(self) -> str:
        return self._contract_id

    @property
    def cursor(self) -> str | None:
        return self._cursor

    @property
    def events(self) -> tuple[EventRecord, ...]:
        return tuple(self._events)

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def is_recovering(self) -> bool:
        return self._is_recovering

    @property
    def last_error(self) -> TransportFailure | None:
        return self._last_error

    @property
    def loading(self) -> bool:
        return self._fetching and not self._disposed

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def polling(self) -> bool:
        """True while a poll timer is pending."""
        return self._timer_armed

    def snapshot(self) -> PollerSnapshot:
        return PollerSnapshot(
            contract_id=self._contract_id,
            cursor=self._cursor,
            events=tuple(self._events),
            consecutive_failures=self._consecutive_failures,
            is_recovering=self._is_recovering,
            last_error=self._last_error,
            loading=self.loading,
            disposed=self._disposed,
        )

    # ── Public operations ───────────────────────────────────

    async def subscribe(self) -> None:
        """Run the initial fetch and start polling.

        Failures end up in last_error / is_recovering rather than raising.
        """
        if self._disposed:
            log.warning("subscribe() on disposed poller for %s", self._contract_id[:16])
            return
        log.info(
            "Subscribing to events for %s (interval=%s, cursor=%s)",
            self._contract_id[:16], self._poll_interval, self._cursor,
        )
        try:
            await self.refresh()
        except TransportFailure as exc:
            log.warning("Initial event fetch for %s failed: %s", self._contract_id[:16], exc)

    async def refresh(self) -> None:
        """Fetch now, then reschedule like a normal poll tick.

        No-op while another fetch is in flight. Re-raises the final error if
        every retry failed; the error is also kept in last_error.
        """
        if self._disposed or self._fetching:
            return
        self._stopped = False
        self._cancel_timer()

        success = await self._run_cycle()
        if success is False and self._last_error is not None:
            raise self._last_error

    def stop_polling(self) -> None:
        """Cancel the pending poll timer. A later refresh() resumes polling."""
        self._stopped = True
        self._cancel_timer()

    def dispose(self) -> None:
        """Stop for good: cancel all timers and freeze state."""
        if self._disposed:
            return
        self._disposed = True
        self._cancel_timer()
        if self._backoff is not None:
            self._backoff.cancel()
        log.debug("Disposed event stream for %s", self._contract_id[:16])

    async def __aenter__(self) -> EventStreamPoller:
        await self.subscribe()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.dispose()

    # ── Fetch cycle ─────────────────────────────────────────

    async def _run_cycle(self) -> bool | None:
        """One fetch-with-retry cycle plus rescheduling. None if disposed."""
        self._fetching = True
        try:
            success = await self._fetch_with_retry()
        finally:
            self._fetching = False

        if self._disposed:
            return None

        if success:
            if self._is_recovering:
                log.info("Event stream for %s recovered", self._contract_id[:16])
            self._consecutive_failures = 0
            self._last_error = None
            self._is_recovering = False
        else:
            self._is_recovering = True

        self._schedule_next_poll(degraded=not success)
        return success

    async def _fetch_with_retry(self) -> bool:
        """Try _fetch_once up to max_retries times. True on success."""
        self._consecutive_failures = 0
        error: TransportFailure | None = None

        for attempt in range(1, self._max_retries + 1):
            try:
                await self._fetch_once()
                return True
            except Exception as exc:
                if self._disposed:
                    return False
                error = _as_transport_failure(exc)
                self._consecutive_failures = attempt
                delay = self._backoff_base * 3 ** (attempt - 1)
                log.warning(
                    "getEvents for %s failed (attempt %d/%d), backing off %.1fs: %s",
                    self._contract_id[:16], attempt, self._max_retries, delay, exc,
                )
                await self._backoff_sleep(delay)
                if self._disposed:
                    return False

        self._last_error = error
        log.error(
            "getEvents for %s failed after %d attempts, polling every %ss until it recovers",
            self._contract_id[:16],
            self._max_retries,
            self._poll_interval * self._error_multiplier if self._poll_interval else "-",
        )
        return False

    async def _fetch_once(self) -> None:
        """Fetch one page, append unseen events, advance the cursor."""
        query = EventQuery(
            contract_id=self._contract_id,
            topics=self._topics,
            cursor=self._cursor,
            limit=self._limit,
        )
        response = await self._query(query.to_request())
        if self._disposed:
            return

        records = [EventRecord.from_raw(raw) for raw in _raw_events(response)]

        fresh: list[EventRecord] = []
        for record in records:
            if record.id in self._seen:
                log.debug("Dropping duplicate event %s", record.id)
                continue
            self._seen.add(record.id)
            fresh.append(record)

        if not fresh:
            return

        self._events.extend(fresh)
        self._cursor = fresh[-1].cursor_token
        log.info(
            "Fetched %d new events for %s (cursor: %s)",
            len(fresh), self._contract_id[:16], self._cursor,
        )

    # ── Scheduling ──────────────────────────────────────────

    def _schedule_next_poll(self, degraded: bool) -> None:
        if self._disposed or self._stopped or not self._poll_interval:
            return
        interval = self._poll_interval * (self._error_multiplier if degraded else 1)
        self._cancel_timer()
        self._timer_armed = True
        self._timer = asyncio.ensure_future(self._tick(interval))
        log.debug("Next poll for %s in %.1fs", self._contract_id[:16], interval)

    async def _tick(self, interval: float) -> None:
        await self._sleep(interval)
        self._timer_armed = False
        if self._disposed or self._fetching:
            return
        try:
            await self._run_cycle()
        except Exception:
            log.exception("Unexpected error in poll cycle for %s", self._contract_id[:16])

    async def _backoff_sleep(self, delay: float) -> None:
        waiter = asyncio.ensure_future(self._sleep(delay))
        self._backoff = waiter
        try:
            await asyncio.wait({waiter})
        finally:
            self._backoff = None
            if not waiter.done():
                waiter.cancel()

    def _cancel_timer(self) -> None:
        """Cancel the timer if it has not fired yet; a fired tick runs to completion."""
        if self._timer is not None and self._timer_armed:
            self._timer.cancel()
            self._timer = None
        self._timer_armed = False
