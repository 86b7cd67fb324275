"""
conftest.py - Shared pytest fixtures for token ledger tests

Provides common fixtures used across unit, functional and conformance tests:
- Empty engine owned by OWNER, with an EventLog sink
- Funded engine (alice holds 1000)
- Recording store for write-level atomicity checks
"""

import pytest

from tokenledger import TransactionEngine, EventLog, InMemoryStore

from tests.fake_store import RecordingStore


OWNER = "owner"
ALICE = "alice"
BOB = "bob"
CAROL = "carol"
DAVE = "dave"
MALLORY = "mallory"


def make_engine(**kwargs) -> TransactionEngine:
    """Create a quiet engine owned by OWNER."""
    kwargs.setdefault("verbose", False)
    return TransactionEngine(OWNER, **kwargs)


@pytest.fixture
def log() -> EventLog:
    return EventLog()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def engine(store, log) -> TransactionEngine:
    """Empty engine owned by OWNER."""
    return make_engine(store=store, sink=log)


@pytest.fixture
def funded(engine, log) -> TransactionEngine:
    """Engine where alice holds 1000. The issuance event is cleared from the log."""
    engine.issue(OWNER, ALICE, 1000)
    log.clear()
    return engine


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()
