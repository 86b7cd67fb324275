"""
allowances.py - Spending allowances

An allowance is the amount an owner has authorized a spender to move out
of the owner's balance. Allowances are keyed by the ordered pair
(owner, spender): allowance(a, b) says nothing about allowance(b, a), and
nothing chains through a third account.

set() overwrites. Re-approving from N1 to N2 leaves N2, not N1 + N2, which
keeps the well-known re-approval race: a spender who sees the first
approval can spend it before the second lands and then spend the second
too. Owners who care should set the allowance to 0 before changing it.
"""

from __future__ import annotations
from typing import Dict, Iterator, Tuple

from .core import AccountId, Amount, NS_ALLOWANCE, AllowanceExceeded
from .storage import KeyValueStore


class AllowanceRegistry:
    """(owner, spender) -> amount map with overwrite-set and checked consume."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def allowance(self, owner: AccountId, spender: AccountId) -> Amount:
        return self.store.get((NS_ALLOWANCE, owner, spender), 0)

    def set(self, owner: AccountId, spender: AccountId, amount: Amount) -> None:
        """Replace the allowance for (owner, spender) with amount."""
        key = (NS_ALLOWANCE, owner, spender)
        if amount:
            self.store.set(key, amount)
        else:
            self.store.delete(key)

    def check(self, owner: AccountId, spender: AccountId, amount: Amount) -> None:
        """Raise AllowanceExceeded if spender may not move amount for owner."""
        current = self.allowance(owner, spender)
        if current < amount:
            raise AllowanceExceeded(
                f"Allowance exceeded: {spender!r} may spend {current} "
                f"of {owner!r}'s balance, requested {amount}"
            )

    def consume(self, owner: AccountId, spender: AccountId, amount: Amount) -> None:
        """
        Decrease the allowance for (owner, spender) by amount.

        Raises:
            AllowanceExceeded: If the allowance is below amount (nothing changes).
        """
        self.check(owner, spender, amount)
        self.set(owner, spender, self.allowance(owner, spender) - amount)

    def items(self) -> Iterator[Tuple[Tuple[AccountId, AccountId], Amount]]:
        """Yield ((owner, spender), amount) for every non-zero allowance."""
        for key, amount in self.store.scan(NS_ALLOWANCE):
            yield (key[1], key[2]), amount

    def allowances(self) -> Dict[Tuple[AccountId, AccountId], Amount]:
        return dict(self.items())
