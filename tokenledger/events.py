"""
events.py - Ledger events and the sink they are emitted to

Events are just data: immutable records of a state change that has already
been committed. The engine emits exactly one event per successful
state-changing operation (pause and blacklist changes emit none) and never
waits on the sink.

Core concepts:
1. Issuance, Destruction, Transfer, Delegation: frozen event records
2. EventSink: Protocol for the host-supplied emission capability
3. EventLog: In-memory sink that records events in emission order
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar, Iterator, List, Protocol, Type, TypeVar, Union, runtime_checkable

from .core import AccountId, Amount


# ============================================================================
# EVENT RECORDS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Issuance:
    """New tokens credited to dest by the owner."""
    kind: ClassVar[str] = "issuance"
    dest: AccountId
    amount: Amount


@dataclass(frozen=True, slots=True)
class Destruction:
    """Tokens removed from source's own holdings."""
    kind: ClassVar[str] = "destruction"
    source: AccountId
    amount: Amount


@dataclass(frozen=True, slots=True)
class Transfer:
    """
    Tokens moved from source to dest.

    Emitted for both direct and delegated transfers. For a delegated
    transfer, source is the account whose balance was debited, not the
    spender who initiated the call.
    """
    kind: ClassVar[str] = "transfer"
    source: AccountId
    dest: AccountId
    amount: Amount

    def __repr__(self) -> str:
        return f"Transfer({self.amount}: {self.source}→{self.dest})"


@dataclass(frozen=True, slots=True)
class Delegation:
    """owner authorized spender to move up to amount (replacing any prior allowance)."""
    kind: ClassVar[str] = "delegation"
    owner: AccountId
    spender: AccountId
    amount: Amount


LedgerEvent = Union[Issuance, Destruction, Transfer, Delegation]

E = TypeVar("E", Issuance, Destruction, Transfer, Delegation)


# ============================================================================
# SINKS
# ============================================================================

@runtime_checkable
class EventSink(Protocol):
    """
    Protocol for the event sink.

    emit() is called after the state change is committed. Whatever the sink
    does with the event cannot undo the change.
    """

    def emit(self, event: LedgerEvent) -> None:
        ...


class EventLog:
    """
    EventSink that keeps every event in memory, in emission order.

    Example:
        log = EventLog()
        engine = TransactionEngine("owner", sink=log, verbose=False)
        engine.issue("owner", "alice", 100)
        log.events          # [Issuance(dest='alice', amount=100)]
    """

    def __init__(self):
        self.events: List[LedgerEvent] = []

    def emit(self, event: LedgerEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: Type[E]) -> List[E]:
        """Return the recorded events of one type, in order."""
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        self.events.clear()

    def __iter__(self) -> Iterator[LedgerEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def __repr__(self):
        return f"EventLog({len(self.events)} events)"
