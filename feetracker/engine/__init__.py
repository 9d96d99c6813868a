"""Balance engine package - pure derivations over the ledger."""

from feetracker.engine.balances import (
    compute_student_balances,
    last_payment_date,
    parse_transaction_date,
    recency_key,
    student_balance,
    transaction_day,
)
from feetracker.engine.summary import (
    TREND_MONTHS,
    average_daily_income,
    compute_summary,
    compute_trend,
    find_pending,
)

__all__ = [
    "TREND_MONTHS",
    "average_daily_income",
    "compute_student_balances",
    "compute_summary",
    "compute_trend",
    "find_pending",
    "last_payment_date",
    "parse_transaction_date",
    "recency_key",
    "student_balance",
    "transaction_day",
]
