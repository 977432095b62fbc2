"""EventRecord parsing and getEvents query shape."""

from __future__ import annotations

import pytest

from sorokit.errors import MalformedResponse, TransportFailure
from sorokit.models.events import EventQuery, EventRecord

from tests.conftest import CONTRACT_ID
from tests.factories import event_id, make_raw_event


def test_from_raw_maps_fields():
    record = EventRecord.from_raw(make_raw_event(4, ledger=123))

    assert record.id == event_id(4, 123)
    assert record.kind == "contract"
    assert record.ledger_sequence == 123
    assert record.ledger_close_time == "2026-01-01T00:00:00Z"
    assert record.contract_id == CONTRACT_ID
    assert len(record.topics) == 1
    assert record.transaction_hash == f"{4:064x}"
    assert record.succeeded_in_call is True


def test_cursor_token_falls_back_to_id():
    raw = make_raw_event(1)
    del raw["pagingToken"]

    assert EventRecord.from_raw(raw).cursor_token == raw["id"]


@pytest.mark.parametrize("field", ["id", "ledger", "contractId", "topic", "value"])
def test_missing_required_field(field):
    raw = make_raw_event(1)
    del raw[field]

    with pytest.raises(MalformedResponse, match=field):
        EventRecord.from_raw(raw)


def test_bad_ledger_and_topic_shapes():
    with pytest.raises(MalformedResponse):
        EventRecord.from_raw({**make_raw_event(1), "ledger": "not-a-number"})
    with pytest.raises(MalformedResponse):
        EventRecord.from_raw({**make_raw_event(1), "topic": "AAAA"})
    with pytest.raises(MalformedResponse):
        EventRecord.from_raw(["not", "a", "mapping"])


def test_malformed_is_a_transport_failure():
    assert issubclass(MalformedResponse, TransportFailure)


def test_query_request_shape():
    query = EventQuery(CONTRACT_ID, topics=[["AAAA", "*"]], cursor="c-1", limit=10)

    assert query.to_request() == {
        "filters": [{
            "type": "contract",
            "contractIds": [CONTRACT_ID],
            "topics": [["AAAA", "*"]],
        }],
        "cursor": "c-1",
        "limit": 10,
    }


def test_query_omits_empty_cursor_and_topics():
    assert EventQuery(CONTRACT_ID).to_request() == {
        "filters": [{"type": "contract", "contractIds": [CONTRACT_ID]}],
        "limit": 100,
    }
