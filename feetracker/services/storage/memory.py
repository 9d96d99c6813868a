"""
In-Memory Storage

The ledger lives in process memory for the lifetime of the application.
Collections are tuples: every mutation builds a new tuple and swaps it
in, so readers holding an earlier snapshot are never affected.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Optional
from uuid import uuid4

from feetracker.models.audit import AuditEvent
from feetracker.models.ledger import (
    ClassGroup,
    ClassGroupCreate,
    LedgerSnapshot,
    Student,
    StudentCreate,
    Transaction,
    TransactionType,
)
from feetracker.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
)

if TYPE_CHECKING:
    from feetracker.audit.logger import AuditLogger


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryLedgerStore(LedgerStorageInterface):
    """
    Ledger store backed by immutable tuples.

    Args:
        id_factory: Returns a fresh unique id per call (uuid4 by default)
        clock: Returns the current instant; used for joined_date and
            for transactions recorded without a date
        audit_logger: If given, every mutation is reported to it
    """

    def __init__(
        self,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] = _utcnow,
        audit_logger: Optional["AuditLogger"] = None,
    ):
        self._new_id = id_factory
        self._clock = clock
        self._audit_logger = audit_logger

        self._classes: tuple[ClassGroup, ...] = ()
        self._students: tuple[Student, ...] = ()
        self._transactions: tuple[Transaction, ...] = ()

    def _now_iso(self) -> str:
        return self._clock().isoformat()

    # -------------------------------------------------------------------------
    # Classes
    # -------------------------------------------------------------------------

    def add_class(self, data: ClassGroupCreate) -> ClassGroup:
        class_group = ClassGroup(id=self._new_id(), **data.model_dump())
        self._classes = self._classes + (class_group,)

        if self._audit_logger:
            self._audit_logger.log_class_added(class_group)
        return class_group

    def delete_class(self, class_id: str) -> None:
        remaining = tuple(c for c in self._classes if c.id != class_id)
        if len(remaining) == len(self._classes):
            if self._audit_logger:
                self._audit_logger.log_integrity_noop("delete_class", "class", class_id)
            return

        self._classes = remaining

        if self._audit_logger:
            orphaned = sum(1 for s in self._students if s.class_id == class_id)
            self._audit_logger.log_class_deleted(class_id, orphaned)

    def list_classes(self) -> list[ClassGroup]:
        return list(self._classes)

    def get_class(self, class_id: str) -> Optional[ClassGroup]:
        return next((c for c in self._classes if c.id == class_id), None)

    # -------------------------------------------------------------------------
    # Students
    # -------------------------------------------------------------------------

    def add_student(self, data: StudentCreate) -> Student:
        student = Student(
            id=self._new_id(),
            joined_date=self._now_iso(),
            **data.model_dump(),
        )
        self._students = self._students + (student,)

        if self._audit_logger:
            self._audit_logger.log_student_added(student)
        return student

    def update_student(self, updated: Student) -> None:
        if not any(s.id == updated.id for s in self._students):
            if self._audit_logger:
                self._audit_logger.log_integrity_noop("update_student", "student", updated.id)
            return

        # A view carries derived fields; only the record itself is stored
        record = Student(**updated.model_dump(include=set(Student.model_fields)))
        self._students = tuple(
            record if s.id == updated.id else s for s in self._students
        )

        if self._audit_logger:
            self._audit_logger.log_student_updated(record)

    def delete_student(self, student_id: str) -> None:
        remaining_students = tuple(s for s in self._students if s.id != student_id)
        remaining_transactions = tuple(
            t for t in self._transactions if t.student_id != student_id
        )
        student_found = len(remaining_students) != len(self._students)
        removed = len(self._transactions) - len(remaining_transactions)

        # Both collections are swapped together; orphaned transactions of a
        # student that is already gone are cleaned up too
        self._students = remaining_students
        self._transactions = remaining_transactions

        if self._audit_logger:
            if student_found:
                self._audit_logger.log_student_deleted(student_id, removed)
            else:
                # Orphans of an already-missing student may still have been removed
                self._audit_logger.log_integrity_noop(
                    "delete_student",
                    "student",
                    student_id,
                    details={"removed_transactions": removed},
                )

    def list_students(self) -> list[Student]:
        return list(self._students)

    def get_student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self._students if s.id == student_id), None)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def record_transaction(
        self,
        student_id: str,
        type: TransactionType,
        amount: Decimal,
        note: Optional[str] = None,
        date: Optional[str] = None,
    ) -> Transaction:
        transaction = Transaction(
            id=self._new_id(),
            student_id=student_id,
            type=type,
            amount=amount,
            date=date or self._now_iso(),
            note=note,
        )
        self._transactions = self._transactions + (transaction,)

        if self._audit_logger:
            self._audit_logger.log_transaction_recorded(transaction)
        return transaction

    def list_transactions(self) -> list[Transaction]:
        return list(self._transactions)

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            classes=self._classes,
            students=self._students,
            transactions=self._transactions,
        )


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Audit trail kept in memory.

    Optionally bounded: once max_events is reached the oldest events
    are dropped.
    """

    def __init__(self, max_events: Optional[int] = None):
        self._events: list[AuditEvent] = []
        self._max_events = max_events

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        if self._max_events is not None and len(self._events) > self._max_events:
            del self._events[: len(self._events) - self._max_events]
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
