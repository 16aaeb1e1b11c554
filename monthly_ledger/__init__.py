"""
Monthly Ledger - Source Package

Backend for a personal multi-currency finance ledger.
Transactions are partitioned by calendar month; totals, the
per-category breakdown and budget utilisation are derived from
the stored rows on every read.

DESIGN PRINCIPLES:
1. A transaction's month is always the month of its timestamp
2. Aggregates are recomputed, never trusted from the store
3. Fail visibly: every error reaches the caller as a message
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Monthly Ledger Team"
