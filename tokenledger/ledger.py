"""
ledger.py - Account balances

The Ledger owns the balance map inside the shared store. It knows nothing
about callers, permissions or events: it only reads, credits and debits.

Balances are non-negative integers. Absent accounts read as zero and a
balance that drops to zero is removed from the store, so the store only
ever holds positive entries.
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Tuple

from .core import (
    AccountId, Amount,
    MAX_AMOUNT, NS_BALANCE, NS_SUPPLY, SUPPLY_CLAMPED,
    InsufficientBalance,
    saturating_add,
)
from .storage import KeyValueStore


class Ledger:
    """
    Balance map with saturating credit and checked debit.

    Credits clamp at max_amount instead of overflowing. Whatever is cut off
    is added to the store's clamped-supply counter so the supply can still
    be reconciled exactly.
    """

    def __init__(self, store: KeyValueStore, max_amount: int = MAX_AMOUNT):
        self.store = store
        self.max_amount = max_amount

    def balance_of(self, account: AccountId) -> Amount:
        """Return the balance of account (0 if it has none)."""
        return self.store.get((NS_BALANCE, account), 0)

    def _put(self, account: AccountId, balance: Amount) -> None:
        if balance:
            self.store.set((NS_BALANCE, account), balance)
        else:
            self.store.delete((NS_BALANCE, account))

    def credit(self, account: AccountId, amount: Amount) -> Amount:
        """
        Add amount to account's balance, saturating at max_amount.

        Returns:
            The amount actually credited. Less than amount only when the
            balance hit max_amount.
        """
        current = self.balance_of(account)
        new_balance, clamped = saturating_add(current, amount, self.max_amount)
        self._put(account, new_balance)
        if clamped:
            key = (NS_SUPPLY, SUPPLY_CLAMPED)
            self.store.set(key, self.store.get(key, 0) + clamped)
        return amount - clamped

    def check_debit(self, account: AccountId, amount: Amount) -> None:
        """
        Raise InsufficientBalance if account cannot cover amount.

        Never mutates; lets callers check every precondition before
        committing anything.
        """
        current = self.balance_of(account)
        if current < amount:
            raise InsufficientBalance(
                f"Not enough balance: {account!r} has {current}, needs {amount}"
            )

    def debit(self, account: AccountId, amount: Amount) -> None:
        """
        Subtract amount from account's balance.

        Raises:
            InsufficientBalance: If the balance is below amount (nothing changes).
        """
        self.check_debit(account, amount)
        self._put(account, self.balance_of(account) - amount)

    def items(self) -> Iterator[Tuple[AccountId, Amount]]:
        """Yield (account, balance) for every non-zero balance."""
        for key, balance in self.store.scan(NS_BALANCE):
            yield key[1], balance

    def accounts(self) -> List[AccountId]:
        """Return every account holding a non-zero balance."""
        return [account for account, _ in self.items()]

    def balances(self) -> Dict[AccountId, Amount]:
        return dict(self.items())

    def total_supply(self) -> Amount:
        """Sum of every balance. Exact; never saturates."""
        return sum(balance for _, balance in self.items())
