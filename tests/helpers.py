"""Builders and fakes shared by the test modules."""

import itertools
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

from feetracker.models.ledger import StudentBalanceView, Transaction, TransactionType


FIXED_NOW = datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)


def sequential_ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


class FakeModel:
    """Stands in for a Gemini GenerativeModel."""

    def __init__(self, text=None, error=None, response=None):
        self.text = text
        self.error = error
        self.response = response
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response
        return SimpleNamespace(text=self.text)


class BlockedResponse:
    """A response whose .text raises, as Gemini does for blocked candidates."""

    @property
    def text(self):
        raise ValueError("The response was blocked")


def make_view(name, balance, class_name="Math", **kwargs):
    """A StudentBalanceView built by hand, for tests that don't need a store."""
    return StudentBalanceView(
        id=kwargs.pop("id", name.lower()),
        name=name,
        class_id=kwargs.pop("class_id", "c1"),
        joined_date=kwargs.pop("joined_date", "2024-01-01T00:00:00+00:00"),
        balance=Decimal(str(balance)),
        class_name=class_name,
        **kwargs,
    )


def payment(amount, date, student_id="s1", id=None):
    return Transaction(
        id=id or f"p-{date}-{amount}",
        student_id=student_id,
        type=TransactionType.PAYMENT,
        amount=Decimal(str(amount)),
        date=date,
    )


def charge(amount, date, student_id="s1", id=None):
    return Transaction(
        id=id or f"c-{date}-{amount}",
        student_id=student_id,
        type=TransactionType.CHARGE,
        amount=Decimal(str(amount)),
        date=date,
    )
