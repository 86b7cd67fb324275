"""
tokenledger - Access-Controlled Token Ledger

Balances, allowances and owner-gated supply control over a pluggable
key-value store, with a supply-conservation check.

Usage:
    from tokenledger import TransactionEngine, EventLog, InsufficientBalance

    log = EventLog()
    engine = TransactionEngine("treasury", sink=log, verbose=False)

    # Only the owner can issue
    engine.issue("treasury", "alice", 1000)

    # Move tokens directly...
    engine.transfer("alice", "bob", 400)

    # ...or through an allowance
    engine.delegate("alice", "carol", 200)
    engine.delegated_transfer("carol", "alice", "dave", 150)

    try:
        engine.transfer("bob", "alice", 10_000)
    except InsufficientBalance:
        pass

    assert engine.verify_conservation()['valid']
"""

# Core types
from .core import (
    AccountId,
    Amount,
    StorageKey,
    MAX_AMOUNT,
    TokenError,
    Unauthorized,
    Paused,
    Blacklisted,
    InsufficientBalance,
    AllowanceExceeded,
    LengthMismatch,
    AlreadyInitialized,
    validate_amount,
    saturating_add,
)

# Storage
from .storage import KeyValueStore, InMemoryStore

# Events
from .events import (
    Issuance,
    Destruction,
    Transfer,
    Delegation,
    LedgerEvent,
    EventSink,
    EventLog,
)

# Components
from .ledger import Ledger
from .allowances import AllowanceRegistry
from .access import AccessControl

# Engine
from .engine import TransactionEngine

__all__ = [
    # Core
    'AccountId', 'Amount', 'StorageKey', 'MAX_AMOUNT',
    'TokenError', 'Unauthorized', 'Paused', 'Blacklisted',
    'InsufficientBalance', 'AllowanceExceeded', 'LengthMismatch',
    'AlreadyInitialized',
    'validate_amount', 'saturating_add',
    # Storage
    'KeyValueStore', 'InMemoryStore',
    # Events
    'Issuance', 'Destruction', 'Transfer', 'Delegation', 'LedgerEvent',
    'EventSink', 'EventLog',
    # Components
    'Ledger', 'AllowanceRegistry', 'AccessControl',
    # Engine
    'TransactionEngine',
]

__version__ = '1.0.0'
