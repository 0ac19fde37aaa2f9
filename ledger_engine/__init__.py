"""Double-entry ledger engine with derived balances."""

__version__ = "0.1.0"
