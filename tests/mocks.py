"""Mock implementations of the RPC endpoint, event source, server and clock."""

from __future__ import annotations

import asyncio
import json
from typing import Any

from stellar_sdk.client.base_async_client import BaseAsyncClient
from stellar_sdk.client.response import Response

EMPTY_PAGE: dict[str, Any] = {"events": [], "latestLedger": 0}


async def _drain(rounds: int = 50) -> None:
    """Let ready callbacks and freshly woken tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class ScriptedEventSource:
    """Implements EventSource protocol. Replays queued pages or exceptions.

    Once the script runs out every call answers with an empty page.
    """

    def __init__(self, *responses: Any) -> None:
        self.responses: list[Any] = list(responses)
        self.requests: list[dict[str, Any]] = []
        self.gate: asyncio.Event | None = None

    async def get_events(self, request: dict[str, Any]) -> dict[str, Any]:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if not self.responses:
            return dict(EMPTY_PAGE)
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def enqueue(self, *responses: Any) -> None:
        """Test helper: stage pages or exceptions for the next calls."""
        self.responses.extend(responses)

    def hold(self) -> None:
        """Test helper: block calls until release()."""
        self.gate = asyncio.Event()

    def release(self) -> None:
        if self.gate is not None:
            self.gate.set()
            self.gate = None

    @property
    def calls(self) -> int:
        return len(self.requests)


class FakeClock:
    """Deterministic replacement for asyncio.sleep.

    sleep() parks the caller until advance() moves virtual time past its
    deadline. Cancelled sleepers are skipped.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []
        self._sleepers: list[tuple[float, asyncio.Future]] = []

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        fut = asyncio.get_running_loop().create_future()
        self._sleepers.append((self.now + delay, fut))
        await fut

    @property
    def pending(self) -> list[float]:
        """Remaining time for every live sleeper, soonest first."""
        return sorted(t - self.now for t, fut in self._sleepers if not fut.done())

    async def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            await _drain()
            self._sleepers = [(t, f) for t, f in self._sleepers if not f.done()]
            due = [(t, f) for t, f in self._sleepers if t <= target]
            if not due:
                break
            deadline, fut = min(due, key=lambda item: item[0])
            self._sleepers.remove((deadline, fut))
            self.now = deadline
            fut.set_result(None)
        self.now = target
        await _drain()

    async def settle(self) -> None:
        """Run ready tasks without moving time."""
        await _drain()


class StubSimulation:
    """Stand-in for SimulateTransactionResponse."""

    def __init__(self, result_xdr: str | None = None, error: str | None = None) -> None:
        self.error = error
        self.results = [StubResult(result_xdr)] if result_xdr is not None else []


class StubResult:
    def __init__(self, xdr: str) -> None:
        self.xdr = xdr


class MockSorobanServer:
    """Implements the simulate/close subset of SorobanServerAsync."""

    def __init__(self, simulation: StubSimulation | None = None, raises: Exception | None = None) -> None:
        self.simulation = simulation or StubSimulation()
        self.raises = raises
        self.simulated: list[Any] = []
        self.closed = False

    async def simulate_transaction(self, tx: Any) -> StubSimulation:
        self.simulated.append(tx)
        if self.raises is not None:
            raise self.raises
        return self.simulation

    async def close(self) -> None:
        self.closed = True


class MockRpcClient(BaseAsyncClient):
    """Implements the stellar_sdk async client behind SorobanServerAsync.

    results maps JSON-RPC method name to its result object; a list value is
    served one item per call. status/body replace the whole HTTP response and
    raises makes every post fail.
    """

    def __init__(
        self,
        results: dict[str, Any] | None = None,
        *,
        status: int = 200,
        error: dict[str, Any] | None = None,
        body: str | None = None,
        raises: BaseException | None = None,
    ) -> None:
        self.results = results or {}
        self.status = status
        self.error = error
        self.body = body
        self.raises = raises
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def post(self, url: str, data=None, json_data: dict[str, Any] | None = None) -> Response:
        payload = json_data or {}
        self.calls.append(payload)
        if self.raises is not None:
            raise self.raises
        if self.body is not None or self.status != 200:
            return Response(self.status, self.body or "Service Unavailable", {}, url)
        envelope: dict[str, Any] = {"jsonrpc": "2.0", "id": payload.get("id")}
        if self.error is not None:
            envelope["error"] = self.error
        else:
            result = self.results[payload["method"]]
            if isinstance(result, list):
                result = result.pop(0)
            envelope["result"] = result
        return Response(200, json.dumps(envelope), {}, url)

    async def get(self, url: str, params=None, max_content_size=None) -> Response:
        raise NotImplementedError

    def stream(self, url: str, params=None):
        raise NotImplementedError

    async def close(self) -> None:
        self.closed = True

    def methods(self) -> list[str]:
        return [c["method"] for c in self.calls]
