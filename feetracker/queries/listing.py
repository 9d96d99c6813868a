"""
Ledger Queries

Read-only helpers the presentation layer uses to build its lists:
student search, the recent activity feed and a student's history.

Like the balance engine, these are deterministic functions over
whatever collections they are handed. They never touch the store.
"""

from typing import Optional, Sequence

from feetracker.engine.balances import recency_key
from feetracker.models.ledger import StudentBalanceView, Transaction, TransactionType


def search_students(
    views: Sequence[StudentBalanceView],
    term: Optional[str],
) -> list[StudentBalanceView]:
    """
    Case-insensitive match on student name or class name.

    An empty term matches everyone. Roster order is kept.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return list(views)
    return [
        v for v in views
        if needle in v.name.lower() or needle in v.class_name.lower()
    ]


def _newest_first(transactions: Sequence[Transaction]) -> list[Transaction]:
    # sorted() is stable, so same-instant transactions keep recording order
    return sorted(transactions, key=recency_key, reverse=True)


def recent_transactions(
    transactions: Sequence[Transaction],
    limit: int = 10,
) -> list[Transaction]:
    """The ``limit`` most recent transactions, newest first."""
    if limit <= 0:
        return []
    return _newest_first(transactions)[:limit]


def student_history(
    transactions: Sequence[Transaction],
    student_id: str,
    type: Optional[TransactionType] = None,
) -> list[Transaction]:
    """
    One student's transactions, newest first.

    Pass ``type`` to keep only charges or only payments.
    """
    own = [
        t for t in transactions
        if t.student_id == student_id and (type is None or t.type == type)
    ]
    return _newest_first(own)


def find_defaulters(views: Sequence[StudentBalanceView]) -> list[StudentBalanceView]:
    """Students who owe money, in roster order."""
    return [v for v in views if v.is_defaulter]
