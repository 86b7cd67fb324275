"""
storage.py - Keyed storage backing the token ledger

The ledger never owns its maps directly. Balances, allowances, the pause
flag, the blacklist and the owner all live in a single key-value store
supplied by the host, so the same components can run against memory,
a database, or a contract runtime.

Classes:
- KeyValueStore: Protocol defining the storage interface
- InMemoryStore: Dict-backed store for tests, simulations and demos

Keys are tuples whose first element is a namespace (see core.NS_*).
"""

from __future__ import annotations
from typing import Any, Dict, Iterator, Optional, Protocol, Tuple, runtime_checkable
import threading

from .core import StorageKey


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Protocol for ledger storage.

    A store maps tuple keys to values. Absent keys read as the supplied
    default. scan() enumerates every entry in one namespace; the ledger
    uses it for supply totals and audits, never on the hot path.

    lock is the re-entrant lock that serializes every engine opened over
    this store. Two engines sharing a store share its lock, so their
    read-modify-write sequences never interleave.
    """

    lock: threading.RLock

    def get(self, key: StorageKey, default: Any = None) -> Any:
        """Return the value stored under key, or default if absent."""
        ...

    def set(self, key: StorageKey, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def delete(self, key: StorageKey) -> None:
        """Remove key. Deleting an absent key is a no-op."""
        ...

    def scan(self, namespace: str) -> Iterator[Tuple[StorageKey, Any]]:
        """Yield (key, value) for every key whose first element is namespace."""
        ...


class InMemoryStore:
    """
    Dict-backed KeyValueStore.

    Example:
        store = InMemoryStore()
        store.set(("balance", "alice"), 100)
        store.get(("balance", "alice"))          # 100
        store.get(("balance", "bob"), 0)         # 0
        list(store.scan("balance"))              # [(("balance", "alice"), 100)]
    """

    def __init__(self, data: Optional[Dict[StorageKey, Any]] = None):
        self._data: Dict[StorageKey, Any] = dict(data) if data else {}
        self.lock = threading.RLock()

    def get(self, key: StorageKey, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: StorageKey, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: StorageKey) -> None:
        self._data.pop(key, None)

    def scan(self, namespace: str) -> Iterator[Tuple[StorageKey, Any]]:
        # Materialize first so callers may mutate the store while iterating.
        matches = [(k, v) for k, v in self._data.items() if k and k[0] == namespace]
        return iter(matches)

    def copy(self) -> InMemoryStore:
        """Return an independent copy of this store, with its own lock."""
        return InMemoryStore(self._data)

    def __contains__(self, key: StorageKey) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self):
        return f"InMemoryStore({len(self._data)} keys)"
