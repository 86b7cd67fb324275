"""
test_core_types.py - Unit tests for core.py

Tests:
- Amount validation
- Saturating addition
- Exception hierarchy
"""

import pytest

from tokenledger import (
    MAX_AMOUNT, validate_amount, saturating_add,
    TokenError, Unauthorized, Paused, Blacklisted,
    InsufficientBalance, AllowanceExceeded, LengthMismatch, AlreadyInitialized,
)


class TestValidateAmount:
    """Tests for validate_amount()."""

    def test_zero_is_valid(self):
        assert validate_amount(0) == 0

    def test_max_is_valid(self):
        assert validate_amount(MAX_AMOUNT) == MAX_AMOUNT

    def test_max_amount_is_u128(self):
        assert MAX_AMOUNT == 340282366920938463463374607431768211455

    def test_negative_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            validate_amount(-1)

    def test_above_max_rejected(self):
        with pytest.raises(ValueError, match="exceeds maximum"):
            validate_amount(MAX_AMOUNT + 1)

    def test_custom_max(self):
        assert validate_amount(10, max_amount=10) == 10
        with pytest.raises(ValueError):
            validate_amount(11, max_amount=10)

    @pytest.mark.parametrize("bad", [1.0, "10", None, True, False])
    def test_non_int_rejected(self, bad):
        with pytest.raises(ValueError, match="must be int"):
            validate_amount(bad)


class TestSaturatingAdd:
    """Tests for saturating_add()."""

    def test_no_overflow(self):
        assert saturating_add(2, 3) == (5, 0)

    def test_exactly_max(self):
        assert saturating_add(MAX_AMOUNT - 1, 1) == (MAX_AMOUNT, 0)

    def test_overflow_clamps(self):
        assert saturating_add(MAX_AMOUNT, 1) == (MAX_AMOUNT, 1)

    def test_overflow_reports_excess(self):
        assert saturating_add(90, 25, max_amount=100) == (100, 15)


class TestExceptions:
    """All operation errors share the TokenError base."""

    @pytest.mark.parametrize("exc", [
        Unauthorized, Paused, Blacklisted, InsufficientBalance,
        AllowanceExceeded, LengthMismatch, AlreadyInitialized,
    ])
    def test_subclass_of_token_error(self, exc):
        assert issubclass(exc, TokenError)

    def test_token_error_is_exception(self):
        assert issubclass(TokenError, Exception)
        assert not issubclass(TokenError, ValueError)
