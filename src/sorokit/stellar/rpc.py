"""Soroban RPC event source - getEvents through SorobanServerAsync."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Mapping, TypeVar

from stellar_sdk import SorobanServerAsync
from stellar_sdk.client.aiohttp_client import AiohttpClient
from stellar_sdk.client.base_async_client import BaseAsyncClient
from stellar_sdk.exceptions import SdkError, SorobanRpcErrorResponse
from stellar_sdk.soroban_rpc import EventFilter, EventFilterType, EventInfo

from sorokit.errors import MalformedResponse, TransportFailure

log = logging.getLogger(__name__)

R = TypeVar("R")


def _event_filter(spec: Mapping[str, Any]) -> EventFilter:
    return EventFilter(
        event_type=EventFilterType(spec.get("type", "contract")),
        contract_ids=list(spec.get("contractIds") or []),
        topics=spec.get("topics"),
    )


def _raw_event(info: EventInfo) -> dict[str, Any]:
    """Back to the getEvents wire shape the poller parses."""
    return {
        "id": info.id,
        "type": info.event_type,
        "ledger": info.ledger,
        "ledgerClosedAt": info.ledger_close_at.isoformat(),
        "contractId": info.contract_id,
        "topic": list(info.topic),
        "value": info.value,
        "txHash": info.transaction_hash,
        "inSuccessfulContractCall": getattr(info, "in_successful_contract_call", True),
    }


class SorobanRpcEventSource:
    """Answers getEvents queries against a Soroban RPC endpoint.

    Takes requests in the poller's shape and hands them to
    SorobanServerAsync.get_events(). The RPC needs a start ledger when no
    cursor is given, so the first call uses start_ledger or, failing that,
    the latest ledger sequence. SDK errors surface as TransportFailure, and
    responses the SDK cannot parse as MalformedResponse.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        start_ledger: int | None = None,
        timeout: float = 30,
        client: BaseAsyncClient | None = None,
    ) -> None:
        if client is None:
            client = AiohttpClient(request_timeout=timeout, post_timeout=timeout)
        self._server = SorobanServerAsync(rpc_url, client=client)
        self._start_ledger = start_ledger
        self._timeout = timeout

    async def close(self) -> None:
        """Close the underlying aiohttp session."""
        await self._server.close()

    async def get_events(self, request: dict[str, Any]) -> dict[str, Any]:
        cursor = request.get("cursor") or None
        start: int | None = None
        if cursor is None:
            start = self._start_ledger
            if start is None:
                start = await self.get_latest_ledger()
                log.info("Event stream has no cursor yet, reading from ledger %d", start)

        response = await self._call(
            "getEvents",
            self._server.get_events(
                start_ledger=start,
                filters=[_event_filter(f) for f in request["filters"]],
                cursor=cursor,
                limit=request.get("limit", 100),
            ),
        )
        return {
            "events": [_raw_event(info) for info in response.events],
            "latestLedger": response.latest_ledger,
            "cursor": response.cursor,
        }

    async def get_latest_ledger(self) -> int:
        response = await self._call("getLatestLedger", self._server.get_latest_ledger())
        return response.sequence

    async def _call(self, method: str, pending: Awaitable[R]) -> R:
        """Await one SDK call, translating its failures."""
        try:
            return await pending
        except SorobanRpcErrorResponse as exc:
            raise TransportFailure(f"{method} failed: {exc.message} (code {exc.code})") from exc
        except asyncio.TimeoutError as exc:
            raise TransportFailure(f"{method} timed out after {self._timeout}s") from exc
        except (ValueError, AssertionError) as exc:
            # undecodable JSON or a body the SDK models reject
            raise MalformedResponse(f"{method} returned an unexpected response: {exc}") from exc
        except SdkError as exc:
            raise TransportFailure(f"{method} failed: {exc}") from exc
