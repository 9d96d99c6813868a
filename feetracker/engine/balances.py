"""
Balance Engine - per-student figures

DESIGN DECISION: Balances are NEVER stored.
They are derived from the transactions every time someone asks,
which guarantees a balance is correct as long as the transactions are.

For each student:
    balance = sum(payments) - sum(charges)

Negative means the student owes money. Everything here is pure:
no I/O, no caching, inputs are never modified.
"""

from collections import defaultdict
from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from feetracker.models.ledger import (
    UNKNOWN_CLASS_NAME,
    ClassGroup,
    Student,
    StudentBalanceView,
    Transaction,
    TransactionType,
)


ZERO = Decimal("0")


def _parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 date or date-time, keeping whatever offset it had."""
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    # UTC designator, either case
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_transaction_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a transaction date into an aware datetime for ordering.

    Plain dates and naive date-times are read as UTC.
    Returns None when the value is missing or not ISO-8601.
    """
    parsed = _parse_iso(value)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def transaction_day(value: Optional[str], tz: Optional[tzinfo] = None) -> Optional[date]:
    """
    Calendar day a transaction falls on.

    A plain date or naive date-time is taken as written. A date-time with
    an offset is converted to ``tz`` first (UTC when tz is None), so
    "2024-03-31T23:30:00-02:00" is April 1st in UTC.
    """
    parsed = _parse_iso(value)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.date()
    try:
        return parsed.astimezone(tz or timezone.utc).date()
    except OverflowError:
        # Offset pushes the instant past year 1 or 9999
        return None


def recency_key(transaction: Transaction) -> tuple[int, float]:
    """
    Sort key putting later transactions higher.

    Transactions with unparsable dates sort below every dated one.
    """
    parsed = parse_transaction_date(transaction.date)
    if parsed is None:
        return (0, 0.0)
    return (1, parsed.timestamp())


def sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), ZERO)


def student_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Payments minus charges over one student's transactions."""
    payments = ZERO
    charges = ZERO
    for t in transactions:
        if t.type == TransactionType.PAYMENT:
            payments += t.amount
        elif t.type == TransactionType.CHARGE:
            charges += t.amount
    return payments - charges


def last_payment_date(transactions: Iterable[Transaction]) -> Optional[str]:
    """
    Date string of the most recent payment, or None if there are none.

    Ties keep the payment recorded first.
    """
    payments = [t for t in transactions if t.type == TransactionType.PAYMENT]
    if not payments:
        return None
    # max() returns the first of several equal maxima
    return max(payments, key=recency_key).date


def compute_student_balances(
    students: Sequence[Student],
    transactions: Sequence[Transaction],
    classes: Sequence[ClassGroup],
) -> list[StudentBalanceView]:
    """
    Derive a balance view for every student.

    Args:
        students: Full student list
        transactions: Full transaction list
        classes: Full class list

    Returns:
        One StudentBalanceView per student, in the same order as ``students``.
        A student whose class no longer exists gets class_name "Unknown".
    """
    by_student: dict[str, list[Transaction]] = defaultdict(list)
    for t in transactions:
        by_student[t.student_id].append(t)

    class_names: dict[str, str] = {}
    for c in classes:
        # First match wins, as a linear find would
        class_names.setdefault(c.id, c.name)

    views = []
    for student in students:
        own = by_student.get(student.id, [])
        views.append(StudentBalanceView(
            **student.model_dump(include=set(Student.model_fields)),
            balance=student_balance(own),
            class_name=class_names.get(student.class_id, UNKNOWN_CLASS_NAME),
            last_payment_date=last_payment_date(own),
        ))

    return views
