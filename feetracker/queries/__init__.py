"""Ledger query package."""

from feetracker.queries.listing import (
    find_defaulters,
    recent_transactions,
    search_students,
    student_history,
)

__all__ = [
    "find_defaulters",
    "recent_transactions",
    "search_students",
    "student_history",
]
