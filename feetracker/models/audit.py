"""
Audit Models for Fee Tracker

Every change to the ledger and every call to the insight assistant is
recorded as an audit event. This provides:
1. A trail of who-owes-what changes (a deleted student takes their
   transactions with them, so the event is the only record left)
2. Debugging information when the assistant fails
3. Visibility of tolerated no-ops, such as updating a missing student

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Classes
    CLASS_ADDED = "class_added"
    CLASS_DELETED = "class_deleted"

    # Students
    STUDENT_ADDED = "student_added"
    STUDENT_UPDATED = "student_updated"
    STUDENT_DELETED = "student_deleted"

    # Transactions
    TRANSACTION_RECORDED = "transaction_recorded"

    # Update/delete that referenced an id the store does not hold
    INTEGRITY_NOOP = "integrity_noop"

    # Insight assistant
    INSIGHT_REQUESTED = "insight_requested"
    INSIGHT_GENERATED = "insight_generated"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity ('class', 'student', 'transaction', 'insight')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one insight request)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.student_added(student_id, name, class_id)
        event = AuditEventBuilder.insight_generated(query_chars, correlation_id)
    """

    @staticmethod
    def class_added(class_id: str, name: str, fee_type: str, default_fee: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CLASS_ADDED,
            entity_type="class",
            entity_id=class_id,
            description=f"Class added: {name}",
            details={
                "name": name,
                "fee_type": fee_type,
                "default_fee": default_fee,
            },
            is_user_action=True,
        )

    @staticmethod
    def class_deleted(class_id: str, orphaned_students: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CLASS_DELETED,
            entity_type="class",
            entity_id=class_id,
            description=f"Class deleted ({orphaned_students} students keep the old class id)",
            details={
                "orphaned_students": orphaned_students,
            },
            is_user_action=True,
        )

    @staticmethod
    def student_added(student_id: str, name: str, class_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STUDENT_ADDED,
            entity_type="student",
            entity_id=student_id,
            description=f"Student added: {name}",
            details={
                "name": name,
                "class_id": class_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def student_updated(student_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STUDENT_UPDATED,
            entity_type="student",
            entity_id=student_id,
            description=f"Student updated: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def student_deleted(student_id: str, removed_transactions: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STUDENT_DELETED,
            entity_type="student",
            entity_id=student_id,
            description=(
                f"Student deleted along with {removed_transactions} transactions"
            ),
            details={
                "removed_transactions": removed_transactions,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_recorded(
        transaction_id: str,
        student_id: str,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_RECORDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"{transaction_type.capitalize()} of {amount} recorded",
            details={
                "student_id": student_id,
                "transaction_type": transaction_type,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def integrity_noop(
        operation: str,
        entity_type: str,
        entity_id: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INTEGRITY_NOOP,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{operation} ignored: no {entity_type} with this id",
            details={"operation": operation, **(details or {})},
            is_user_action=True,
        )

    @staticmethod
    def insight_requested(
        query_chars: int,
        student_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHT_REQUESTED,
            entity_type="insight",
            correlation_id=correlation_id,
            description="Insight requested from assistant",
            details={
                "query_chars": query_chars,
                "student_count": student_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def insight_generated(
        response_chars: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHT_GENERATED,
            entity_type="insight",
            correlation_id=correlation_id,
            description="Assistant responded",
            details={"response_chars": response_chars},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
