"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep everything in memory today (the tutor's data fits easily)
2. Swap in a file or database backend later without touching callers
3. Keep the balance engine decoupled from where records live

The interface is intentionally simple - we're not building an ORM.
Just the operations the ledger needs.

CONTRACT shared by every implementation:
- Operations are synchronous and never raise for business conditions.
  Updating or deleting an id that does not exist is a no-op.
- Deleting a student deletes all of that student's transactions.
- Deleting a class does NOT touch the students in it.
- Each mutation replaces the affected collection, so a snapshot taken
  before the call is never partially updated.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

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


class LedgerStorageInterface(ABC):
    """
    Abstract interface for the tutor's ledger.

    Holds three collections: classes, students and transactions.
    """

    # -------------------------------------------------------------------------
    # Classes
    # -------------------------------------------------------------------------

    @abstractmethod
    def add_class(self, data: ClassGroupCreate) -> ClassGroup:
        """
        Create a class with a fresh id and append it.

        No validation beyond the model's types; a negative fee is the
        caller's concern.
        """
        pass

    @abstractmethod
    def delete_class(self, class_id: str) -> None:
        """Remove a class. Students keep their (now dangling) class_id."""
        pass

    @abstractmethod
    def list_classes(self) -> list[ClassGroup]:
        """All classes in insertion order."""
        pass

    @abstractmethod
    def get_class(self, class_id: str) -> Optional[ClassGroup]:
        pass

    # -------------------------------------------------------------------------
    # Students
    # -------------------------------------------------------------------------

    @abstractmethod
    def add_student(self, data: StudentCreate) -> Student:
        """
        Enroll a student.

        The store assigns the id and sets joined_date to the current instant.
        """
        pass

    @abstractmethod
    def update_student(self, updated: Student) -> None:
        """
        Replace the student with the same id, keeping its position.

        Silently does nothing if no such student exists.
        """
        pass

    @abstractmethod
    def delete_student(self, student_id: str) -> None:
        """
        Remove a student and every transaction that references them.

        The cascade is mandatory: after this returns, no transaction
        with this student_id remains.
        """
        pass

    @abstractmethod
    def list_students(self) -> list[Student]:
        """All students in insertion order."""
        pass

    @abstractmethod
    def get_student(self, student_id: str) -> Optional[Student]:
        pass

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    @abstractmethod
    def record_transaction(
        self,
        student_id: str,
        type: TransactionType,
        amount: Decimal,
        note: Optional[str] = None,
        date: Optional[str] = None,
    ) -> Transaction:
        """
        Append a charge or payment.

        Args:
            student_id: Student the transaction belongs to. Not checked
                against the student list.
            type: CHARGE or PAYMENT
            amount: Positive amount
            note: Optional free text
            date: ISO-8601 date or date-time; defaults to now

        Returns:
            The created transaction
        """
        pass

    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        """All transactions in the order they were recorded."""
        pass

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    @abstractmethod
    def snapshot(self) -> LedgerSnapshot:
        """The three collections as they are right now, immutable."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events, newest first.
        """
        pass
