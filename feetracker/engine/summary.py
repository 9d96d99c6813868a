"""
Balance Engine - dashboard aggregates

All figures are recomputed from the full transaction list on every call.

Calendar convention: "today" and "this month" come from ``now``
(default: the current UTC instant). Transaction dates are bucketed with
``transaction_day``, using now's timezone. A payment whose date cannot
be parsed still counts towards total income but is left out of every
dated figure.
"""

from collections import defaultdict
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from feetracker.engine.balances import ZERO, sum_amounts, transaction_day
from feetracker.models.ledger import StudentBalanceView, Transaction, TransactionType
from feetracker.models.summary import DashboardSummary, TrendBucket


TREND_MONTHS = 6


def _resolve_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """(year, month) moved by ``delta`` months."""
    index = year * 12 + (month - 1) + delta
    shifted_year, shifted_month = divmod(index, 12)
    return shifted_year, shifted_month + 1


def _payments_by_day(
    transactions: Sequence[Transaction],
    now: datetime,
) -> list[tuple[Transaction, Optional[date]]]:
    return [
        (t, transaction_day(t.date, now.tzinfo))
        for t in transactions
        if t.type == TransactionType.PAYMENT
    ]


def find_pending(
    student_balances: Sequence[StudentBalanceView],
) -> tuple[list[StudentBalanceView], Decimal]:
    """Students with a negative balance, and the total they owe."""
    defaulters = [s for s in student_balances if s.balance < 0]
    total_pending = sum((abs(s.balance) for s in defaulters), ZERO)
    return defaulters, total_pending


def average_daily_income(monthly_income: Decimal, day_of_month: int) -> int:
    """
    This month's income spread over the days elapsed, rounded half up.

    The divisor never drops below 1.
    """
    divisor = Decimal(max(day_of_month, 1))
    return int((monthly_income / divisor).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_trend(
    transactions: Sequence[Transaction],
    now: Optional[datetime] = None,
) -> list[TrendBucket]:
    """
    Payment totals for the six calendar months ending with the current one.

    Always returns exactly six buckets, oldest first; months without
    payments report 0.
    """
    now = _resolve_now(now)
    today = now.date()

    totals: dict[tuple[int, int], Decimal] = defaultdict(lambda: ZERO)
    for t, day in _payments_by_day(transactions, now):
        if day is not None:
            totals[(day.year, day.month)] += t.amount

    buckets = []
    for back in range(TREND_MONTHS - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, -back)
        buckets.append(TrendBucket(
            month=f"{year:04d}-{month:02d}",
            label=date(year, month, 1).strftime("%b"),
            income=totals.get((year, month), ZERO),
        ))
    return buckets


def compute_summary(
    transactions: Sequence[Transaction],
    student_balances: Sequence[StudentBalanceView],
    now: Optional[datetime] = None,
) -> DashboardSummary:
    """
    Build the dashboard figures.

    Args:
        transactions: Full transaction list
        student_balances: Output of compute_student_balances
        now: Reference instant; defaults to the current UTC time

    Returns:
        DashboardSummary with pending debt, defaulters, income for
        today / this month / all time, average daily income and the
        six-month trend.
    """
    now = _resolve_now(now)
    today = now.date()

    payments = _payments_by_day(transactions, now)

    total_income = sum_amounts(t for t, _ in payments)
    today_income = sum_amounts(t for t, day in payments if day == today)
    monthly_income = sum_amounts(
        t for t, day in payments
        if day is not None and (day.year, day.month) == (today.year, today.month)
    )

    defaulters, total_pending = find_pending(student_balances)

    return DashboardSummary(
        total_pending=total_pending,
        defaulters=defaulters,
        today_income=today_income,
        total_income=total_income,
        monthly_income=monthly_income,
        avg_daily_income=average_daily_income(monthly_income, today.day),
        trend=compute_trend(transactions, now),
    )
