"""
Core types and pure functions for the token ledger.

This module provides the foundational pieces shared by every component:
1. Constants: the amount bound and the storage namespaces
2. Type aliases: AccountId, Amount, StorageKey
3. Exceptions: TokenError and the operation-specific error types
4. Amount arithmetic: validation and saturating addition

Nothing in this module touches ledger state.
"""

from __future__ import annotations
from typing import Any, Hashable, Tuple


# ============================================================================
# CONSTANTS
# ============================================================================

# Largest representable balance or allowance (unsigned 128-bit).
# Credits that would exceed it are clamped, never wrapped.
MAX_AMOUNT = 2**128 - 1

# Storage namespaces. Every key in the backing store is a tuple whose
# first element is one of these.
NS_OWNER = "owner"
NS_PAUSED = "paused"
NS_BALANCE = "balance"
NS_ALLOWANCE = "allowance"
NS_BLACKLIST = "blacklist"
NS_SUPPLY = "supply"

# Supply counters kept under NS_SUPPLY.
SUPPLY_ISSUED = "issued"
SUPPLY_DESTROYED = "destroyed"
SUPPLY_CLAMPED = "clamped"


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Opaque caller/account identity supplied by the host. Only hashed and compared.
AccountId = Hashable

# Non-negative integer quantity of tokens.
Amount = int

# Key into the backing store: (namespace, *parts).
StorageKey = Tuple[Any, ...]


# ============================================================================
# EXCEPTIONS
# ============================================================================

class TokenError(Exception):
    """Base exception for all token ledger errors."""
    pass


class Unauthorized(TokenError):
    """Raised when a non-owner attempts an owner-only operation."""
    pass


class Paused(TokenError):
    """Raised when a balance-moving operation is attempted while the ledger is paused."""
    pass


class Blacklisted(TokenError):
    """Raised when the sender or recipient of a balance move is on the blacklist."""
    pass


class InsufficientBalance(TokenError):
    """Raised when a debit exceeds the account's current balance."""
    pass


class AllowanceExceeded(TokenError):
    """Raised when a delegated spend exceeds the owner's allowance for the spender."""
    pass


class LengthMismatch(TokenError):
    """Raised when batch_transfer receives recipient and amount lists of different lengths."""
    pass


class AlreadyInitialized(TokenError):
    """Raised when a store already bound to one owner is claimed by another."""
    pass


# ============================================================================
# AMOUNT ARITHMETIC
# ============================================================================

def validate_amount(amount: Any, max_amount: int = MAX_AMOUNT) -> int:
    """
    Check that amount is an integer in [0, max_amount].

    Booleans are rejected even though bool subclasses int.

    Returns:
        The amount unchanged.

    Raises:
        ValueError: If amount is not an int, is negative, or exceeds max_amount.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"Amount must be int, got {type(amount).__name__}")
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")
    if amount > max_amount:
        raise ValueError(f"Amount {amount} exceeds maximum {max_amount}")
    return amount


def saturating_add(a: int, b: int, max_amount: int = MAX_AMOUNT) -> Tuple[int, int]:
    """
    Add two amounts, clamping the result at max_amount.

    Returns:
        (result, clamped) where clamped is the part of the sum that did
        not fit. clamped is 0 unless the sum exceeded max_amount.
    """
    total = a + b
    if total > max_amount:
        return max_amount, total - max_amount
    return total, 0
