"""Bank ledger engine: balances, transfers and investment holdings."""

__version__ = "0.1.0"
