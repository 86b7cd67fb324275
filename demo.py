#!/usr/bin/env python3
"""
demo.py - Walkthrough: Learn the Token Ledger Step by Step

Each step builds on the previous one. Press Enter to advance.

WHAT YOU'LL LEARN:
  1-3:  Foundation   - Owner, issuance, transfers and rejections
  4-5:  Allowances   - Delegation, delegated spend, overwrite semantics
  6-7:  Controls     - Pause and blacklist
  8:    Batches      - Partial commit when an element fails
  9:    Audit        - Event log and conservation check

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass
import sys

from tokenledger import (
    TransactionEngine, EventLog,
    TokenError, InsufficientBalance,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the walkthrough. Modify these to experiment."""
    owner: str = "treasury"
    initial_issue: int = 1_000
    payment: int = 400
    allowance: int = 200
    delegated_spend: int = 150


CONFIG = DemoConfig()
QUICK = "--quick" in sys.argv


def step(number: int, title: str) -> None:
    print()
    print("=" * 72)
    print(f" STEP {number}: {title}")
    print("=" * 72)
    if not QUICK:
        input("  (press Enter) ")


def show(engine: TransactionEngine, *accounts: str) -> None:
    for account in accounts:
        print(f"    {account:<10} {engine.balance_of(account):>8}")


def attempt(label: str, call) -> None:
    try:
        call()
    except TokenError as exc:
        print(f"    {label}: {type(exc).__name__}")


def main() -> None:
    cfg = CONFIG
    log = EventLog()
    engine = TransactionEngine(cfg.owner, sink=log, name="demo")

    step(1, "The owner issues tokens")
    engine.issue(cfg.owner, "alice", cfg.initial_issue)
    show(engine, "alice")

    step(2, "Alice pays Bob")
    engine.transfer("alice", "bob", cfg.payment)
    show(engine, "alice", "bob")

    step(3, "Rejections change nothing")
    attempt("bob overspends", lambda: engine.transfer("bob", "carol", 10_000))
    attempt("mallory issues", lambda: engine.issue("mallory", "mallory", 1))
    show(engine, "alice", "bob", "carol", "mallory")

    step(4, "Alice lets Carol spend on her behalf")
    engine.delegate("alice", "carol", cfg.allowance)
    engine.delegated_transfer("carol", "alice", "dave", cfg.delegated_spend)
    print(f"    allowance(alice, carol) = {engine.allowance('alice', 'carol')}")
    show(engine, "alice", "dave")

    step(5, "Re-delegating overwrites, it does not add")
    engine.delegate("alice", "carol", 30)
    print(f"    allowance(alice, carol) = {engine.allowance('alice', 'carol')}")

    step(6, "Pause stops every transfer")
    engine.set_paused(cfg.owner, True)
    attempt("alice -> bob", lambda: engine.transfer("alice", "bob", 1))
    engine.set_paused(cfg.owner, False)

    step(7, "Blacklisted accounts can neither send nor receive")
    engine.set_blacklist(cfg.owner, "dave", True)
    attempt("alice -> dave", lambda: engine.transfer("alice", "dave", 1))
    attempt("dave -> alice", lambda: engine.transfer("dave", "alice", 1))
    engine.set_blacklist(cfg.owner, "dave", False)

    step(8, "batch_transfer keeps the elements before a failure")
    before = engine.balance_of("bob")
    try:
        engine.batch_transfer("bob", ["carol", "erin"], [before - 1, 100])
    except InsufficientBalance:
        print("    second element failed; first element stays committed")
    show(engine, "bob", "carol", "erin")

    step(9, "Audit")
    for event in log:
        print(f"    {event!r}")
    report = engine.verify_conservation()
    print(f"    supply={report['total_supply']} issued={report['total_issued']} "
          f"destroyed={report['total_destroyed']} valid={report['valid']}")


if __name__ == "__main__":
    main()
