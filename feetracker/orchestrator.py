"""
Main Orchestrator for Fee Tracker

This module ties the components together into the one object the
presentation layer talks to:

1. Mutations (add/delete class, add/update/delete student, record a
   charge or payment) go to the ledger store, which audits them.
2. Reads (balances, dashboard summary, search, history) are recomputed
   from a fresh store snapshot every time. Nothing is cached.
3. Questions go to the insight assistant together with the freshly
   derived balances.

DESIGN DECISION: There is no module-level state. Each FeeTracker owns
its store, so two trackers never share a ledger.
"""

from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Optional

from feetracker.agents import InsightAgent, bulk_reminder_prompt, reminder_prompt
from feetracker.audit import AuditLogger
from feetracker.config import get_settings
from feetracker.demo import load_demo_data
from feetracker.engine import compute_student_balances, compute_summary
from feetracker.models.ledger import (
    ClassGroup,
    ClassGroupCreate,
    Student,
    StudentBalanceView,
    StudentCreate,
    Transaction,
    TransactionType,
)
from feetracker.models.summary import DashboardSummary
from feetracker.queries import (
    find_defaulters,
    recent_transactions,
    search_students,
    student_history,
)
from feetracker.services.storage import (
    InMemoryAuditStorage,
    InMemoryLedgerStore,
    LedgerStorageInterface,
)
from feetracker.validation import LedgerInputValidator


class FeeTracker:
    """
    The tutor's fee ledger plus everything derived from it.

    All collaborators are optional; defaults are an in-memory store,
    a lazily configured Gemini assistant and settings from the environment.
    """

    def __init__(
        self,
        store: Optional[LedgerStorageInterface] = None,
        insight_agent: Optional[InsightAgent] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[LedgerInputValidator] = None,
        timezone: Optional[tzinfo] = None,
    ):
        app_settings = get_settings().app

        self._audit_logger = audit_logger
        self._store = store or InMemoryLedgerStore(audit_logger=audit_logger)
        self._insight_agent = insight_agent or InsightAgent(audit_logger=audit_logger)
        self._validator = validator or LedgerInputValidator(app_settings)
        self._tz = timezone or app_settings.tzinfo
        self._currency_label = app_settings.currency_label
        self._recent_limit = app_settings.recent_transactions_limit

    @property
    def store(self) -> LedgerStorageInterface:
        return self._store

    @property
    def validator(self) -> LedgerInputValidator:
        return self._validator

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_class(self, data: ClassGroupCreate) -> ClassGroup:
        return self._store.add_class(data)

    def delete_class(self, class_id: str) -> None:
        self._store.delete_class(class_id)

    def add_student(self, data: StudentCreate) -> Student:
        return self._store.add_student(data)

    def update_student(self, updated: Student) -> None:
        self._store.update_student(updated)

    def delete_student(self, student_id: str) -> None:
        """Delete a student together with all their transactions."""
        self._store.delete_student(student_id)

    def record_transaction(
        self,
        student_id: str,
        type: TransactionType,
        amount: Decimal,
        note: Optional[str] = None,
        date: Optional[str] = None,
    ) -> Transaction:
        return self._store.record_transaction(student_id, type, amount, note=note, date=date)

    def charge_default_fee(
        self,
        student_id: str,
        note: Optional[str] = None,
        date: Optional[str] = None,
    ) -> Optional[Transaction]:
        """
        Charge a student their class's default fee.

        Returns None (and records nothing) when the student or their
        class no longer exists, since there is no fee to charge.
        """
        student = self._store.get_student(student_id)
        if student is None:
            return None
        class_group = self._store.get_class(student.class_id)
        if class_group is None:
            return None
        return self.record_transaction(
            student_id,
            TransactionType.CHARGE,
            class_group.default_fee,
            note=note,
            date=date,
        )

    # -------------------------------------------------------------------------
    # Derived reads
    # -------------------------------------------------------------------------

    def student_balances(self) -> list[StudentBalanceView]:
        snapshot = self._store.snapshot()
        return compute_student_balances(
            snapshot.students, snapshot.transactions, snapshot.classes
        )

    def summary(self, now: Optional[datetime] = None) -> DashboardSummary:
        """Dashboard figures as of ``now`` (default: the current time in the configured timezone)."""
        snapshot = self._store.snapshot()
        views = compute_student_balances(
            snapshot.students, snapshot.transactions, snapshot.classes
        )
        return compute_summary(
            snapshot.transactions,
            views,
            now=now or datetime.now(self._tz),
        )

    def defaulters(self) -> list[StudentBalanceView]:
        return find_defaulters(self.student_balances())

    def search_students(self, term: Optional[str]) -> list[StudentBalanceView]:
        return search_students(self.student_balances(), term)

    def recent_transactions(self, limit: Optional[int] = None) -> list[Transaction]:
        return recent_transactions(
            self._store.list_transactions(),
            limit=self._recent_limit if limit is None else limit,
        )

    def student_history(
        self,
        student_id: str,
        type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        return student_history(self._store.list_transactions(), student_id, type=type)

    # -------------------------------------------------------------------------
    # Insight assistant
    # -------------------------------------------------------------------------

    async def ask(self, query: str) -> str:
        """Ask the assistant a question about the current ledger. Never raises."""
        snapshot = self._store.snapshot()
        views = compute_student_balances(
            snapshot.students, snapshot.transactions, snapshot.classes
        )
        return await self._insight_agent.ask(query, views, snapshot.transactions)

    async def draft_reminder(self, student_id: str) -> str:
        """Ask the assistant for a payment reminder for one student."""
        view = next((v for v in self.student_balances() if v.id == student_id), None)
        if view is None:
            return f"No student found with id {student_id}."
        return await self.ask(
            reminder_prompt(view.name, view.balance, self._currency_label)
        )

    async def draft_bulk_reminder(self) -> str:
        """Ask the assistant for a reminder addressed to everyone with dues."""
        total_pending = self.summary().total_pending
        return await self.ask(bulk_reminder_prompt(total_pending, self._currency_label))


def create_app_components(seed_demo: bool = False) -> FeeTracker:
    """
    Factory function to create a ready-to-use tracker.

    Args:
        seed_demo: Load the demo classes, students and transactions.

    Returns:
        A FeeTracker whose audit trail is kept in memory.
    """
    audit_logger = AuditLogger(InMemoryAuditStorage())
    tracker = FeeTracker(audit_logger=audit_logger)

    if seed_demo:
        load_demo_data(tracker.store)

    return tracker
