"""
Banking Simulator

An in-memory ledger of accounts with append-only transaction histories,
atomic transfers, and proper financial math using Decimal.
"""

__version__ = "1.0.0"
