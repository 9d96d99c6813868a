"""
Core Data Models for Fee Tracker

These models define the schemas for everything the ledger holds:
classes, students and the transactions (charges and payments) between
the tutor and each student.

They are designed to:
1. Be immutable once created (a changed record is a new record)
2. Carry money as Decimal, never float
3. Separate what a caller supplies (the *Create models) from what
   the store assigns (ids, join dates)

DESIGN DECISION: Dates on transactions are kept as the ISO-8601 strings
the caller supplied. The balance engine parses them when it needs a
calendar day, and tolerates strings it cannot parse.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


UNKNOWN_CLASS_NAME = "Unknown"
NO_CONTACT_INFO = "No contact info"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class FeeType(str, Enum):
    """How a class is billed."""
    MONTHLY = "MONTHLY"
    PER_SESSION = "PER_SESSION"


class TransactionType(str, Enum):
    """
    Direction of a ledger transaction.

    A CHARGE accrues a fee (a session or a month); a PAYMENT is money
    received from the student.
    """
    PAYMENT = "PAYMENT"
    CHARGE = "CHARGE"


# =============================================================================
# CLASSES
# =============================================================================

class ClassGroupCreate(BaseModel):
    """Fields a caller supplies when creating a class."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(
        ...,
        description="Display name, e.g. 'Grade 10 Math'"
    )
    fee_type: FeeType = Field(
        ...,
        description="Monthly or per-session billing"
    )
    default_fee: Decimal = Field(
        ...,
        description="Fee pre-filled when charging a student of this class"
    )
    description: Optional[str] = Field(
        default=None,
        description="Free text, e.g. the weekly schedule"
    )


class ClassGroup(ClassGroupCreate):
    """A class (group or individual tuition) the tutor runs."""

    id: str = Field(
        ...,
        description="Opaque unique identifier assigned by the store"
    )


# =============================================================================
# STUDENTS
# =============================================================================

class StudentCreate(BaseModel):
    """
    Fields a caller supplies when enrolling a student.

    name and class_id are required; contact details are optional.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str
    class_id: str
    email: Optional[str] = None
    phone: Optional[str] = None


class Student(StudentCreate):
    """An enrolled student."""

    id: str = Field(
        ...,
        description="Opaque unique identifier assigned by the store"
    )
    joined_date: str = Field(
        ...,
        description="ISO-8601 instant the student was added"
    )

    @property
    def contact(self) -> str:
        """Best available contact: email, then phone."""
        return self.email or self.phone or NO_CONTACT_INFO


class StudentBalanceView(Student):
    """
    A student together with the figures derived from the ledger.

    Never stored. The balance engine rebuilds these on every read.
    """

    balance: Decimal = Field(
        default=Decimal("0"),
        description="Payments minus charges; negative means money is owed"
    )
    class_name: str = Field(
        default=UNKNOWN_CLASS_NAME,
        description="Name of the student's class, or 'Unknown' if it was deleted"
    )
    last_payment_date: Optional[str] = Field(
        default=None,
        description="Date string of the most recent payment, if any"
    )

    @property
    def is_defaulter(self) -> bool:
        return self.balance < 0

    @property
    def amount_due(self) -> Decimal:
        """What the student owes, as a positive number (0 if settled)."""
        return -self.balance if self.balance < 0 else Decimal("0")


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(BaseModel):
    """
    A single charge or payment.

    Append-only: there is no update. Transactions disappear only when
    their student is deleted.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str
    student_id: str
    type: TransactionType
    amount: Decimal = Field(
        ...,
        description="Positive amount; the type gives the direction"
    )
    date: Optional[str] = Field(
        default=None,
        description="ISO-8601 date or date-time the transaction happened"
    )
    note: Optional[str] = None


class LedgerSnapshot(BaseModel):
    """
    An immutable view of all three collections at one moment.

    The store replaces its collections on every mutation, so a snapshot
    taken earlier never sees a half-applied change.
    """
    model_config = ConfigDict(frozen=True)

    classes: tuple[ClassGroup, ...] = ()
    students: tuple[Student, ...] = ()
    transactions: tuple[Transaction, ...] = ()


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in caller input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'not_found')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Outcome of validating one form submission."""

    is_valid: bool = Field(
        ...,
        description="True when there are no error-level issues"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        """Messages of the non-blocking issues."""
        return [issue.message for issue in self.issues if issue.severity == "warning"]
