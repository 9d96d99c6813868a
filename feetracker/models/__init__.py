"""
Data Models Package

This package contains all Pydantic models used in Fee Tracker.
All data flowing through the system must conform to these schemas.
"""

from feetracker.models.ledger import (
    NO_CONTACT_INFO,
    UNKNOWN_CLASS_NAME,
    ClassGroup,
    ClassGroupCreate,
    FeeType,
    LedgerSnapshot,
    Student,
    StudentBalanceView,
    StudentCreate,
    Transaction,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from feetracker.models.summary import DashboardSummary, TrendBucket
from feetracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "NO_CONTACT_INFO",
    "UNKNOWN_CLASS_NAME",
    "ClassGroup",
    "ClassGroupCreate",
    "FeeType",
    "LedgerSnapshot",
    "Student",
    "StudentBalanceView",
    "StudentCreate",
    "Transaction",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    # Summary models
    "DashboardSummary",
    "TrendBucket",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
