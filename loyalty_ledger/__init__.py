"""
Loyalty Ledger - Points Ledger & Rules Engine

A service layer that tracks per-customer loyalty point balances,
prices earn and redeem operations through configurable rules,
screens transactions for fraud and records an audit trail.
"""

__version__ = "0.1.0"
