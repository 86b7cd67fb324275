"""
test_ledger_operations.py - Unit tests for the Ledger balance component

Tests:
- Balance reads
- Saturating credit and clamped accounting
- Checked debit
- Enumeration and total supply
"""

import pytest

from tokenledger import Ledger, InMemoryStore, InsufficientBalance, MAX_AMOUNT
from tokenledger.core import NS_SUPPLY, SUPPLY_CLAMPED


@pytest.fixture
def ledger(store):
    return Ledger(store)


class TestBalanceOf:

    def test_unknown_account_is_zero(self, ledger):
        assert ledger.balance_of("nobody") == 0

    def test_reads_store(self, store, ledger):
        store.set(("balance", "alice"), 42)
        assert ledger.balance_of("alice") == 42

    def test_any_hashable_identity(self, ledger):
        account = ("chain", 7, b"\x01\x02")
        ledger.credit(account, 5)
        assert ledger.balance_of(account) == 5


class TestCredit:

    def test_credit_adds(self, ledger):
        ledger.credit("alice", 100)
        ledger.credit("alice", 50)
        assert ledger.balance_of("alice") == 150

    def test_credit_returns_amount_applied(self, ledger):
        assert ledger.credit("alice", 100) == 100

    def test_credit_zero_creates_no_entry(self, store, ledger):
        ledger.credit("alice", 0)
        assert ("balance", "alice") not in store

    def test_credit_saturates_at_max(self, ledger):
        ledger.credit("alice", MAX_AMOUNT - 10)
        applied = ledger.credit("alice", 25)
        assert ledger.balance_of("alice") == MAX_AMOUNT
        assert applied == 10

    def test_clamped_excess_is_counted(self, store, ledger):
        ledger.credit("alice", MAX_AMOUNT)
        ledger.credit("alice", 7)
        ledger.credit("alice", 3)
        assert store.get((NS_SUPPLY, SUPPLY_CLAMPED)) == 10

    def test_no_clamp_counter_without_overflow(self, store, ledger):
        ledger.credit("alice", 100)
        assert (NS_SUPPLY, SUPPLY_CLAMPED) not in store

    def test_custom_bound(self):
        ledger = Ledger(InMemoryStore(), max_amount=100)
        ledger.credit("alice", 90)
        assert ledger.credit("alice", 20) == 10
        assert ledger.balance_of("alice") == 100


class TestDebit:

    def test_debit_subtracts(self, ledger):
        ledger.credit("alice", 100)
        ledger.debit("alice", 30)
        assert ledger.balance_of("alice") == 70

    def test_debit_exact_balance_removes_entry(self, store, ledger):
        ledger.credit("alice", 100)
        ledger.debit("alice", 100)
        assert ledger.balance_of("alice") == 0
        assert ("balance", "alice") not in store

    def test_debit_insufficient_raises(self, ledger):
        ledger.credit("alice", 10)
        with pytest.raises(InsufficientBalance, match="Not enough balance"):
            ledger.debit("alice", 11)
        assert ledger.balance_of("alice") == 10

    def test_debit_unknown_account(self, ledger):
        with pytest.raises(InsufficientBalance):
            ledger.debit("nobody", 1)

    def test_debit_zero_from_empty_account(self, ledger):
        ledger.debit("nobody", 0)
        assert ledger.balance_of("nobody") == 0

    def test_check_debit_does_not_mutate(self, ledger):
        ledger.credit("alice", 10)
        ledger.check_debit("alice", 10)
        assert ledger.balance_of("alice") == 10
        with pytest.raises(InsufficientBalance):
            ledger.check_debit("alice", 11)


class TestEnumeration:

    def test_items_and_accounts(self, ledger):
        ledger.credit("alice", 10)
        ledger.credit("bob", 20)
        assert dict(ledger.items()) == {"alice": 10, "bob": 20}
        assert sorted(ledger.accounts()) == ["alice", "bob"]
        assert ledger.balances() == {"alice": 10, "bob": 20}

    def test_zeroed_accounts_are_not_listed(self, ledger):
        ledger.credit("alice", 10)
        ledger.debit("alice", 10)
        assert ledger.accounts() == []

    def test_total_supply(self, ledger):
        ledger.credit("alice", 10)
        ledger.credit("bob", 20)
        ledger.debit("bob", 5)
        assert ledger.total_supply() == 25

    def test_total_supply_exceeds_max_across_accounts(self, ledger):
        ledger.credit("alice", MAX_AMOUNT)
        ledger.credit("bob", MAX_AMOUNT)
        assert ledger.total_supply() == 2 * MAX_AMOUNT
