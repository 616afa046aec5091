"""
Ledger Kernel

A double-entry ledger core with:
- Exact rational money, rounded only for presentation
- Accounts, transactions and splits in a relational store
- Atomic split mutation that keeps transactions balanced and flagged for export
- Balance aggregation over account sets and time windows
"""

__version__ = "0.1.0"
