"""Contract event records and the getEvents query shape."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from sorokit.errors import MalformedResponse

if TYPE_CHECKING:
    from sorokit.codec import TypedValueCodec

_REQUIRED_FIELDS = ("id", "ledger", "contractId", "topic", "value")


@dataclass(frozen=True)
class EventRecord:
    """One contract event as returned by getEvents.

    Topics and value stay as base64 XDR strings; use decoded_topics() /
    decoded_value() to get native values.
    """

    id: str
    kind: str
    ledger_sequence: int
    ledger_close_time: str
    contract_id: str
    topics: tuple[str, ...]
    value: str
    cursor_token: str  # opaque, ordered by the server only
    transaction_hash: str
    succeeded_in_call: bool

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> EventRecord:
        """Map a RawEvent mapping from the RPC response into a record.

        Raises MalformedResponse if a required field is missing.
        """
        if not isinstance(raw, Mapping):
            raise MalformedResponse(f"event is not an object: {raw!r}")
        missing = [k for k in _REQUIRED_FIELDS if k not in raw]
        if missing:
            raise MalformedResponse(
                f"event {raw.get('id', '?')} missing fields: {', '.join(missing)}"
            )
        try:
            ledger = int(raw["ledger"])
        except (TypeError, ValueError) as exc:
            raise MalformedResponse(f"event {raw['id']} has bad ledger: {raw['ledger']!r}") from exc

        topics = raw["topic"]
        if isinstance(topics, str) or not isinstance(topics, Sequence):
            raise MalformedResponse(f"event {raw['id']} topic is not a list")

        event_id = str(raw["id"])
        return cls(
            id=event_id,
            kind=str(raw.get("type", "contract")),
            ledger_sequence=ledger,
            ledger_close_time=str(raw.get("ledgerClosedAt", "")),
            contract_id=str(raw["contractId"] or ""),
            topics=tuple(str(t) for t in topics),
            value=str(raw["value"]),
            cursor_token=str(raw.get("pagingToken") or event_id),
            transaction_hash=str(raw.get("txHash", "")),
            succeeded_in_call=bool(raw.get("inSuccessfulContractCall", True)),
        )

    def decoded_topics(self, codec: TypedValueCodec) -> list[Any]:
        return [codec.decode(t) for t in self.topics]

    def decoded_value(self, codec: TypedValueCodec) -> Any:
        return codec.decode(self.value)


@dataclass
class EventQuery:
    """Parameters for a single getEvents page request."""

    contract_id: str
    topics: list[list[str]] | None = None
    cursor: str | None = None  # exclusive
    limit: int = 100

    def to_request(self) -> dict[str, Any]:
        """Build the request body in the getEvents wire shape."""
        event_filter: dict[str, Any] = {
            "type": "contract",
            "contractIds": [self.contract_id],
        }
        if self.topics:
            event_filter["topics"] = [list(segment) for segment in self.topics]

        request: dict[str, Any] = {"filters": [event_filter]}
        if self.cursor:
            request["cursor"] = self.cursor
        request["limit"] = self.limit
        return request
