"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the token ledger.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. test_conservation.py - Supply reconciles with issuance and destruction
2. test_atomicity.py - Failed operations change nothing; batch_transfer
   commits element by element
3. test_authorization.py - Owner-only controls, pause and blacklist gating

These tests use hypothesis for property-based testing.
"""
