"""
Dashboard summary models.

Produced by the balance engine from the ledger; nothing here is stored.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from feetracker.models.ledger import StudentBalanceView


class TrendBucket(BaseModel):
    """Payments received in one calendar month."""
    model_config = ConfigDict(frozen=True)

    month: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}$",
        description="Calendar month as YYYY-MM"
    )
    label: str = Field(
        ...,
        description="Short month name for chart axes, e.g. 'Oct'"
    )
    income: Decimal = Field(
        default=Decimal("0"),
        description="Sum of payments dated in this month"
    )


class DashboardSummary(BaseModel):
    """Aggregate income and debt figures for the dashboard."""
    model_config = ConfigDict(frozen=True)

    total_pending: Decimal = Field(
        default=Decimal("0"),
        description="Total owed across all students with a negative balance"
    )
    defaulters: list[StudentBalanceView] = Field(
        default_factory=list,
        description="Students with a negative balance, in roster order"
    )
    today_income: Decimal = Decimal("0")
    total_income: Decimal = Decimal("0")
    monthly_income: Decimal = Decimal("0")
    avg_daily_income: int = Field(
        default=0,
        description="This month's income divided by the day of the month, rounded"
    )
    trend: list[TrendBucket] = Field(
        default_factory=list,
        description="Six months of payment totals, oldest first"
    )

    @property
    def defaulter_count(self) -> int:
        return len(self.defaulters)
