"""
Tests for Fee Tracker models

Test strategy:
1. Unit tests for individual components (models, engine, validators)
2. Flow tests through the orchestrator (with a fake AI model)
3. No real API calls in tests
"""

import pytest
from decimal import Decimal
from pydantic import ValidationError

from feetracker.models.ledger import (
    ClassGroup,
    ClassGroupCreate,
    FeeType,
    Student,
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

from tests.helpers import make_view


class TestLedgerModels:
    """Tests for class, student and transaction models."""

    def test_class_group_creation(self):
        """Test ClassGroup keeps the fields of its create payload."""
        group = ClassGroup(
            id="c1",
            name="  Grade 10 Math  ",
            fee_type=FeeType.MONTHLY,
            default_fee=5000,
        )
        assert group.name == "Grade 10 Math"
        assert group.default_fee == Decimal("5000")
        assert group.description is None

    def test_class_group_create_has_no_id(self):
        """Test the create payload does not accept an id field."""
        data = ClassGroupCreate(name="Physics", fee_type="PER_SESSION", default_fee="3000")
        assert data.fee_type == FeeType.PER_SESSION
        assert "id" not in data.model_dump()

    def test_models_are_frozen(self):
        """Test records cannot be edited in place."""
        student = Student(id="s1", name="Alice", class_id="c1", joined_date="2023-09-01")
        with pytest.raises(ValidationError):
            student.name = "Eve"

    def test_student_create_requires_class(self):
        """Test class_id is a required field."""
        with pytest.raises(ValidationError):
            StudentCreate(name="Alice")

    def test_student_contact_prefers_email(self):
        """Test contact falls back from email to phone to a fixed label."""
        both = Student(id="s1", name="A", class_id="c1", email="a@x.com", phone="1", joined_date="x")
        phone = Student(id="s2", name="B", class_id="c1", phone="077", joined_date="x")
        none = Student(id="s3", name="C", class_id="c1", joined_date="x")
        assert both.contact == "a@x.com"
        assert phone.contact == "077"
        assert none.contact == "No contact info"

    def test_transaction_amount_is_decimal(self):
        """Test float and string amounts become Decimal."""
        t = Transaction(id="t1", student_id="s1", type="PAYMENT", amount="1500.50")
        assert t.amount == Decimal("1500.50")
        assert t.type == TransactionType.PAYMENT
        assert t.date is None

    def test_transaction_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            Transaction(id="t1", student_id="s1", type="REFUND", amount=10)


class TestStudentBalanceView:
    """Tests for the derived view."""

    def test_defaulter_flags(self):
        """Test a negative balance marks a defaulter with a positive amount due."""
        view = make_view("Bob", -5000)
        assert view.is_defaulter is True
        assert view.amount_due == Decimal("5000")

    def test_settled_student(self):
        view = make_view("Alice", 0)
        assert view.is_defaulter is False
        assert view.amount_due == Decimal("0")

    def test_view_is_a_student(self):
        assert isinstance(make_view("Alice", 0), Student)


class TestSummaryModels:
    """Tests for dashboard models."""

    def test_trend_bucket_month_format(self):
        """Test month must be YYYY-MM."""
        with pytest.raises(ValidationError):
            TrendBucket(month="2024-3", label="Mar")

    def test_defaulter_count(self):
        summary = DashboardSummary(defaulters=[make_view("Bob", -1)])
        assert summary.defaulter_count == 1


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.CLASS_ADDED,
            description="Class added",
        )
        assert event.event_type == AuditEventType.CLASS_ADDED
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.student_deleted(student_id="s1", removed_transactions=3)
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "student_deleted"
        assert log_dict["entity_id"] == "s1"
        assert log_dict["details"]["removed_transactions"] == 3

    def test_integrity_noop_is_warning(self):
        event = AuditEventBuilder.integrity_noop("update_student", "student", "ghost")
        assert event.severity == AuditSeverity.WARNING
        assert event.is_user_action is True
        assert "update_student" in event.description

    def test_external_service_error(self):
        event = AuditEventBuilder.external_service_error("gemini", "timeout")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "timeout"
        assert event.details["service"] == "gemini"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message="Date in future",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0
        assert result.warnings == ["Date in future"]

    def test_issue_severity_is_restricted(self):
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")
