"""
Audit Logger

DESIGN DECISION: Every change to the ledger is logged.
This provides:
1. Traceability (deleting a student removes their transactions for good)
2. Debugging capability for the insight assistant
3. Visibility of tolerated no-ops

The audit logger:
- Is synchronous, like the store it observes
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from feetracker.models.audit import AuditEvent, AuditEventBuilder
from feetracker.models.ledger import ClassGroup, Student, Transaction
from feetracker.services.storage.interface import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for the audit trail.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Appends to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_class_added(self, class_group: ClassGroup) -> None:
        """Log class creation."""
        self.log(AuditEventBuilder.class_added(
            class_id=class_group.id,
            name=class_group.name,
            fee_type=class_group.fee_type.value,
            default_fee=str(class_group.default_fee),
        ))

    def log_class_deleted(self, class_id: str, orphaned_students: int) -> None:
        """Log class deletion."""
        self.log(AuditEventBuilder.class_deleted(
            class_id=class_id,
            orphaned_students=orphaned_students,
        ))

    def log_student_added(self, student: Student) -> None:
        """Log student enrollment."""
        self.log(AuditEventBuilder.student_added(
            student_id=student.id,
            name=student.name,
            class_id=student.class_id,
        ))

    def log_student_updated(self, student: Student) -> None:
        """Log student record replacement."""
        self.log(AuditEventBuilder.student_updated(
            student_id=student.id,
            name=student.name,
        ))

    def log_student_deleted(self, student_id: str, removed_transactions: int) -> None:
        """Log student deletion and the size of the cascade."""
        self.log(AuditEventBuilder.student_deleted(
            student_id=student_id,
            removed_transactions=removed_transactions,
        ))

    def log_transaction_recorded(self, transaction: Transaction) -> None:
        """Log a charge or payment."""
        self.log(AuditEventBuilder.transaction_recorded(
            transaction_id=transaction.id,
            student_id=transaction.student_id,
            transaction_type=transaction.type.value,
            amount=str(transaction.amount),
        ))

    def log_integrity_noop(
        self,
        operation: str,
        entity_type: str,
        entity_id: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an update/delete that referenced a missing id."""
        self.log(AuditEventBuilder.integrity_noop(
            operation=operation,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details,
        ))

    def log_insight_requested(
        self,
        query_chars: int,
        student_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log that a question was sent to the assistant."""
        self.log(AuditEventBuilder.insight_requested(
            query_chars=query_chars,
            student_count=student_count,
            correlation_id=correlation_id,
        ))

    def log_insight_generated(self, response_chars: int, correlation_id: UUID) -> None:
        """Log the assistant's answer size."""
        self.log(AuditEventBuilder.insight_generated(
            response_chars=response_chars,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))

    def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log external service error."""
        self.log(AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., one assistant question).
    """
    return uuid4()
