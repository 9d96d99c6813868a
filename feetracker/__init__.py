"""
Fee Tracker - Source Package

Keeps a single tutor's classes, students, charges and payments, and
derives who owes what.

DESIGN PRINCIPLES:
1. Transactions are the only source of truth; balances are derived
2. Deleting a student deletes their transactions
3. Reads never fail on odd data (missing class, bad date)
4. Every change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Fee Tracker Team"
