"""
engine.py - Access-controlled token operations

The TransactionEngine is the only entry point that mutates token state.
It composes Ledger, AllowanceRegistry and AccessControl over one shared
store and turns them into the public operation set.

Key responsibilities:
    - Runs every gate (owner, pause, blacklist, allowance, balance) before
      the first write, so a failed operation leaves state untouched
    - Serializes calls: one operation at a time, under the store's lock,
      so engines reopened over the same store never interleave
    - Emits one event per successful state change, after it commits
    - Tracks issued/destroyed/clamped supply for conservation checks

The one deliberate exception to all-or-nothing is batch_transfer, which
commits element by element (see its docstring).
"""

from __future__ import annotations
from functools import wraps
from typing import Any, Dict, Optional, Sequence

from .core import (
    AccountId, Amount,
    MAX_AMOUNT, NS_OWNER, NS_SUPPLY,
    SUPPLY_CLAMPED, SUPPLY_DESTROYED, SUPPLY_ISSUED,
    TokenError, LengthMismatch,
    validate_amount,
)
from .storage import InMemoryStore, KeyValueStore
from .events import (
    EventLog, EventSink, LedgerEvent,
    Delegation, Destruction, Issuance, Transfer,
)
from .ledger import Ledger
from .allowances import AllowanceRegistry
from .access import AccessControl


def _operation(method):
    """Run method under the engine lock and trace rejections when verbose."""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            try:
                return method(self, *args, **kwargs)
            except (TokenError, ValueError) as exc:
                if self.verbose:
                    print(f"✗ REJECTED: {method.__name__}: {exc}")
                raise
    return wrapper


class TransactionEngine:
    """
    Token ledger with owner-gated issuance, pause, blacklist and allowances.

    Errors are raised, never returned. Every error except a batch_transfer
    failure leaves balances, allowances and flags exactly as they were.

    Thread Safety:
        Each public call holds the store's re-entrant lock for its full
        duration, so no two calls interleave their reads and writes, even
        when they come from different engines over the same store.

    Example:
        engine = TransactionEngine("treasury", verbose=False)
        engine.issue("treasury", "alice", 1000)
        engine.transfer("alice", "bob", 400)
        engine.delegate("alice", "carol", 200)
        engine.delegated_transfer("carol", "alice", "dave", 150)
        engine.balance_of("alice")             # 450
        engine.allowance("alice", "carol")     # 50
    """

    def __init__(
        self,
        owner: AccountId,
        store: Optional[KeyValueStore] = None,
        sink: Optional[EventSink] = None,
        name: str = "token",
        verbose: bool = True,
        max_amount: int = MAX_AMOUNT,
    ):
        """
        Create an engine, binding owner as the issuing authority.

        Args:
            owner: Caller creating the ledger; becomes the permanent owner
            store: Backing store (default: a fresh InMemoryStore)
            sink: Event sink (default: a fresh EventLog)
            name: Identifier used in traces
            verbose: Print a line for every applied or rejected operation
            max_amount: Saturation bound for balances and cap for amounts

        Raises:
            AlreadyInitialized: If store already records a different owner
        """
        self.name = name
        self.store = store if store is not None else InMemoryStore()
        self.sink = sink if sink is not None else EventLog()
        self.verbose = verbose
        self.max_amount = max_amount
        self._lock = self.store.lock

        with self._lock:
            self.access = AccessControl(self.store, owner)
        self.ledger = Ledger(self.store, max_amount)
        self.allowances = AllowanceRegistry(self.store)

    @classmethod
    def from_store(cls, store: KeyValueStore, **kwargs: Any) -> TransactionEngine:
        """
        Reopen an engine over a store created by an earlier engine.

        The owner is read back from the store.

        Raises:
            ValueError: If the store records no owner
        """
        if not AccessControl.is_bound(store):
            raise ValueError("Store has no recorded owner")
        return cls(store.get((NS_OWNER,)), store=store, **kwargs)

    # ========================================================================
    # READ-ONLY ACCESS
    # ========================================================================

    @property
    def owner(self) -> AccountId:
        return self.access.owner

    @property
    def paused(self) -> bool:
        with self._lock:
            return self.access.paused

    def is_blacklisted(self, account: AccountId) -> bool:
        with self._lock:
            return self.access.is_blacklisted(account)

    def balance_of(self, account: AccountId) -> Amount:
        """Balance of account; 0 if it never held tokens. Never fails."""
        with self._lock:
            return self.ledger.balance_of(account)

    def allowance(self, owner: AccountId, spender: AccountId) -> Amount:
        """Amount spender may still move out of owner's balance. Never fails."""
        with self._lock:
            return self.allowances.allowance(owner, spender)

    def _counter(self, name: str) -> Amount:
        return self.store.get((NS_SUPPLY, name), 0)

    def _bump(self, name: str, amount: Amount) -> None:
        if amount:
            self.store.set((NS_SUPPLY, name), self._counter(name) + amount)

    @property
    def total_issued(self) -> Amount:
        """Sum of every amount passed to a successful issue()."""
        with self._lock:
            return self._counter(SUPPLY_ISSUED)

    @property
    def total_destroyed(self) -> Amount:
        with self._lock:
            return self._counter(SUPPLY_DESTROYED)

    @property
    def total_clamped(self) -> Amount:
        """Value discarded by saturating credits at max_amount."""
        with self._lock:
            return self._counter(SUPPLY_CLAMPED)

    def total_supply(self) -> Amount:
        with self._lock:
            return self.ledger.total_supply()

    def verify_conservation(self) -> Dict[str, Any]:
        """
        Verify that the supply reconciles with issuance and destruction.

        The identity checked is:

            sum(balances) == total_issued - total_destroyed - total_clamped

        total_clamped is 0 unless some credit saturated, in which case it
        is exactly the value the cap cut off.

        Returns:
            Dict with keys:
            - 'valid': bool - True if the identity holds
            - 'total_supply': sum of all balances
            - 'expected_supply': issued - destroyed - clamped
            - 'difference': total_supply - expected_supply
            - 'total_issued', 'total_destroyed', 'total_clamped'

        Example:
            result = engine.verify_conservation()
            assert result['valid'], f"Supply drifted by {result['difference']}"
        """
        with self._lock:
            supply = self.ledger.total_supply()
            issued = self.total_issued
            destroyed = self.total_destroyed
            clamped = self.total_clamped
        expected = issued - destroyed - clamped
        return {
            'valid': supply == expected,
            'total_supply': supply,
            'expected_supply': expected,
            'difference': supply - expected,
            'total_issued': issued,
            'total_destroyed': destroyed,
            'total_clamped': clamped,
        }

    def snapshot(self) -> Dict[str, Any]:
        """
        Return an independent plain-dict copy of all token state.

        Two snapshots compare equal exactly when balances, allowances,
        flags, blacklist and supply counters are all equal.
        """
        with self._lock:
            return {
                'owner': self.access.owner,
                'paused': self.access.paused,
                'blacklist': self.access.blacklisted(),
                'balances': self.ledger.balances(),
                'allowances': self.allowances.allowances(),
                'total_issued': self.total_issued,
                'total_destroyed': self.total_destroyed,
                'total_clamped': self.total_clamped,
            }

    # ========================================================================
    # OPERATIONS (Mutating)
    # ========================================================================

    def _commit(self, event: LedgerEvent) -> None:
        if self.verbose:
            print(f"✓ APPLIED [{self.name}]: {event!r}")
        self.sink.emit(event)

    def _amount(self, amount: Any) -> Amount:
        return validate_amount(amount, self.max_amount)

    @_operation
    def issue(self, caller: AccountId, to: AccountId, amount: Amount) -> None:
        """
        Create amount new tokens in to's balance. Owner only.

        The credit saturates at max_amount; the excess is counted in
        total_clamped rather than raised as an error.

        Raises:
            Unauthorized: If caller is not the owner
        """
        amount = self._amount(amount)
        self.access.require_owner(caller)
        self.ledger.credit(to, amount)
        self._bump(SUPPLY_ISSUED, amount)
        self._commit(Issuance(dest=to, amount=amount))

    @_operation
    def destroy(self, caller: AccountId, amount: Amount) -> None:
        """
        Remove amount tokens from caller's own balance.

        Not gated by pause or blacklist.

        Raises:
            InsufficientBalance: If caller holds less than amount
        """
        amount = self._amount(amount)
        self.ledger.debit(caller, amount)
        self._bump(SUPPLY_DESTROYED, amount)
        self._commit(Destruction(source=caller, amount=amount))

    def _transfer(self, caller: AccountId, to: AccountId, amount: Amount) -> None:
        self.access.check_transfer_allowed(caller, to)
        self.ledger.debit(caller, amount)
        self.ledger.credit(to, amount)
        self._commit(Transfer(source=caller, dest=to, amount=amount))

    @_operation
    def transfer(self, caller: AccountId, to: AccountId, amount: Amount) -> None:
        """
        Move amount from caller to to.

        Checks run in order: pause, blacklist (sender, then recipient),
        balance. The credit only happens after the debit has succeeded.

        Raises:
            Paused: If transfers are paused
            Blacklisted: If caller or to is blacklisted
            InsufficientBalance: If caller holds less than amount
        """
        self._transfer(caller, to, self._amount(amount))

    @_operation
    def delegate(self, caller: AccountId, spender: AccountId, amount: Amount) -> None:
        """
        Allow spender to move up to amount of caller's tokens.

        Overwrites any previous allowance for (caller, spender); it does
        not add to it. The amount may exceed caller's current balance.
        Not gated by pause or blacklist.
        """
        amount = self._amount(amount)
        self.allowances.set(caller, spender, amount)
        self._commit(Delegation(owner=caller, spender=spender, amount=amount))

    @_operation
    def delegated_transfer(
        self,
        caller: AccountId,
        source: AccountId,
        to: AccountId,
        amount: Amount,
    ) -> None:
        """
        Move amount from source to to, spending caller's allowance from source.

        Checks run in order: pause, blacklist (source, then to), allowance,
        balance. An allowance failure is reported even when the balance
        would also be short. Only after every check passes are the
        allowance consumed and the balances moved.

        Raises:
            Paused: If transfers are paused
            Blacklisted: If source or to is blacklisted
            AllowanceExceeded: If allowance(source, caller) < amount
            InsufficientBalance: If source holds less than amount
        """
        amount = self._amount(amount)
        self.access.check_transfer_allowed(source, to)
        self.allowances.check(source, caller, amount)
        self.ledger.check_debit(source, amount)

        self.allowances.consume(source, caller, amount)
        self.ledger.debit(source, amount)
        self.ledger.credit(to, amount)
        self._commit(Transfer(source=source, dest=to, amount=amount))

    @_operation
    def set_paused(self, caller: AccountId, state: bool) -> None:
        """Pause (True) or resume (False) all transfers. Owner only."""
        self.access.set_paused(caller, state)
        if self.verbose:
            print(f"✓ APPLIED [{self.name}]: paused={bool(state)}")

    @_operation
    def set_blacklist(self, caller: AccountId, account: AccountId, state: bool) -> None:
        """Add account to (True) or remove it from (False) the blacklist. Owner only."""
        self.access.set_blacklist(caller, account, state)
        if self.verbose:
            print(f"✓ APPLIED [{self.name}]: blacklist {account!r}={bool(state)}")

    @_operation
    def batch_transfer(
        self,
        caller: AccountId,
        recipients: Sequence[AccountId],
        amounts: Sequence[Amount],
    ) -> None:
        """
        Transfer amounts[i] from caller to recipients[i], for i = 0, 1, ...

        NOT ATOMIC. Each element is an ordinary transfer() that commits on
        its own. Processing stops at the first element that fails and that
        element's error is raised, but every earlier element stays applied
        and its event stays emitted. Callers that need all-or-nothing must
        check balances and flags beforehand or issue compensating transfers.

        The lengths and all amounts are validated before the first element
        runs, so a malformed batch changes nothing.

        Raises:
            LengthMismatch: If len(recipients) != len(amounts) (nothing applied)
            ValueError: If any amount is malformed (nothing applied)
            Paused, Blacklisted, InsufficientBalance: From the first failing
                element, after the elements before it have committed
        """
        if len(recipients) != len(amounts):
            raise LengthMismatch(
                f"{len(recipients)} recipients but {len(amounts)} amounts"
            )
        checked = [self._amount(amount) for amount in amounts]

        for index, (to, amount) in enumerate(zip(recipients, checked)):
            try:
                self._transfer(caller, to, amount)
            except TokenError:
                if self.verbose:
                    print(f"✗ batch_transfer stopped at index {index} "
                          f"({index} of {len(checked)} applied)")
                raise

    def __repr__(self):
        return f"TransactionEngine({self.name!r}, owner={self.owner!r})"
