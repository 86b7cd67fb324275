"""
access.py - Owner authority, pause flag and blacklist

AccessControl is the single place where callers are authorized and
balance moves are gated. The engine consults it before touching any
balance or allowance.
"""

from __future__ import annotations
from typing import Set

from .core import (
    AccountId,
    NS_BLACKLIST, NS_OWNER, NS_PAUSED,
    AlreadyInitialized, Blacklisted, Paused, Unauthorized,
)
from .storage import KeyValueStore


_UNSET = object()


class AccessControl:
    """
    Owner identity, global pause flag and blacklist membership.

    The owner is bound once, at construction, and recorded in the store.
    Binding a store that already records a different owner raises
    AlreadyInitialized; binding it again with the same owner reopens it.
    Any hashable value, None included, is a valid owner.
    """

    def __init__(self, store: KeyValueStore, owner: AccountId):
        recorded = store.get((NS_OWNER,), _UNSET)
        if recorded is not _UNSET and recorded != owner:
            raise AlreadyInitialized(
                f"Store already initialized with owner {recorded!r}"
            )
        self.store = store
        self._owner = owner
        if recorded is _UNSET:
            store.set((NS_OWNER,), owner)

    @staticmethod
    def is_bound(store: KeyValueStore) -> bool:
        """True if store already records an owner."""
        return store.get((NS_OWNER,), _UNSET) is not _UNSET

    @property
    def owner(self) -> AccountId:
        return self._owner

    @property
    def paused(self) -> bool:
        return self.store.get((NS_PAUSED,), False)

    def is_blacklisted(self, account: AccountId) -> bool:
        return self.store.get((NS_BLACKLIST, account), False)

    def blacklisted(self) -> Set[AccountId]:
        """Return the current blacklist."""
        return {key[1] for key, _ in self.store.scan(NS_BLACKLIST)}

    def require_owner(self, caller: AccountId) -> None:
        """Raise Unauthorized unless caller is the owner."""
        if caller != self._owner:
            raise Unauthorized(f"{caller!r} is not the owner")

    def set_paused(self, caller: AccountId, state: bool) -> None:
        """Set the global pause flag. Owner only."""
        self.require_owner(caller)
        if state:
            self.store.set((NS_PAUSED,), True)
        else:
            self.store.delete((NS_PAUSED,))

    def set_blacklist(self, caller: AccountId, account: AccountId, state: bool) -> None:
        """Add account to (state=True) or remove it from the blacklist. Owner only."""
        self.require_owner(caller)
        if state:
            self.store.set((NS_BLACKLIST, account), True)
        else:
            self.store.delete((NS_BLACKLIST, account))

    def check_transfer_allowed(self, source: AccountId, dest: AccountId) -> None:
        """
        Gate a balance move from source to dest.

        Raises:
            Paused: If the ledger is paused (checked first).
            Blacklisted: If source or dest is on the blacklist.
        """
        if self.paused:
            raise Paused("Transfers are paused")
        if self.is_blacklisted(source):
            raise Blacklisted(f"Sender {source!r} is blacklisted")
        if self.is_blacklisted(dest):
            raise Blacklisted(f"Recipient {dest!r} is blacklisted")
