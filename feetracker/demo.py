"""
Demo dataset.

A small ledger for trying the app out: two classes, three students and
the October fees of each. Once loaded, Alice and Charlie are paid up and
Bob owes one month's fee.
"""

from decimal import Decimal

from feetracker.models.ledger import (
    ClassGroupCreate,
    FeeType,
    LedgerSnapshot,
    StudentCreate,
    TransactionType,
)
from feetracker.services.storage import LedgerStorageInterface


def load_demo_data(store: LedgerStorageInterface) -> LedgerSnapshot:
    """Append the demo classes, students and transactions to ``store``."""
    math = store.add_class(ClassGroupCreate(
        name="Grade 10 Math",
        fee_type=FeeType.MONTHLY,
        default_fee=Decimal("5000"),
        description="Tuesday & Thursday Group",
    ))
    physics = store.add_class(ClassGroupCreate(
        name="Physics Individual",
        fee_type=FeeType.PER_SESSION,
        default_fee=Decimal("3000"),
        description="Advanced Physics",
    ))

    roster = [
        (StudentCreate(name="Alice Johnson", class_id=math.id, email="alice@example.com"), "2023-09-01"),
        (StudentCreate(name="Bob Smith", class_id=math.id, phone="077-1234567"), "2023-09-05"),
        (StudentCreate(name="Charlie Brown", class_id=physics.id, email="charlie@example.com"), "2023-10-01"),
    ]
    alice, bob, charlie = [
        _enroll(store, data, joined_date) for data, joined_date in roster
    ]

    ledger = [
        (alice, TransactionType.CHARGE, "5000", "2023-10-01", "Oct Monthly Fee"),
        (alice, TransactionType.PAYMENT, "5000", "2023-10-05", "Paid via Cash"),
        (bob, TransactionType.CHARGE, "5000", "2023-10-01", "Oct Monthly Fee"),
        (charlie, TransactionType.CHARGE, "3000", "2023-10-02", "Session 1"),
        (charlie, TransactionType.CHARGE, "3000", "2023-10-09", "Session 2"),
        (charlie, TransactionType.PAYMENT, "6000", "2023-10-10", "Paid for 2 sessions"),
    ]
    for student_id, type_, amount, date, note in ledger:
        store.record_transaction(student_id, type_, Decimal(amount), note=note, date=date)

    return store.snapshot()


def _enroll(store: LedgerStorageInterface, data: StudentCreate, joined_date: str) -> str:
    # Backdate the join date the store stamped on creation
    student = store.add_student(data)
    store.update_student(student.model_copy(update={"joined_date": joined_date}))
    return student.id
