"""Shared fixtures for sorokit tests."""

from __future__ import annotations

import pytest

from sorokit.codec import TypedValueCodec
from sorokit.stellar.poller import EventStreamPoller

from tests.mocks import FakeClock, ScriptedEventSource

TEST_PUBLIC = "GDNAG4KFFVF5HCSGRWZIXZNL2SR2KBGJSHW2A6FI6DZI62XF6IBLO4GD"

CONTRACT_ID = "CCEDYFIHUCJFITWEOT7BWUO2HBQQ72L244ZXQ4YNOC6FYRDN3MKDQFK7"

TESTNET_RPC = "https://soroban-testnet.stellar.org"
TESTNET_PASSPHRASE = "Test SDF Network ; September 2015"


@pytest.fixture
def codec():
    return TypedValueCodec()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def source():
    return ScriptedEventSource()


@pytest.fixture
async def make_poller(source, clock):
    """Build pollers wired to the scripted source and fake clock.

    Every poller built here is disposed at teardown.
    """
    built: list[EventStreamPoller] = []

    def _make(src=None, **overrides) -> EventStreamPoller:
        kwargs = dict(poll_interval=10.0, sleep=clock.sleep)
        kwargs.update(overrides)
        p = EventStreamPoller(src or source, CONTRACT_ID, **kwargs)
        built.append(p)
        return p

    yield _make
    for p in built:
        p.dispose()
    await clock.settle()
