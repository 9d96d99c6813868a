"""
Input Validation for Ledger Forms

DESIGN DECISION: The ledger store does not validate. It assumes it is
handed well-typed values and records them as given (a negative fee or a
transaction for a missing student is stored without complaint).

Validation is therefore the caller's job, done here BEFORE calling the
store. Each check produces a ValidationIssue:
- "error" blocks the submission (non-numeric amount, missing name, ...)
- "warning" is shown but does not block (huge amount, future date, ...)

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for the user to correct.
"""

import re
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence

from feetracker.config import AppSettings, get_settings
from feetracker.engine.balances import transaction_day
from feetracker.models.ledger import (
    ClassGroup,
    FeeType,
    Student,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _to_decimal(value: Any) -> Optional[Decimal]:
    """Convert form input to a finite Decimal, or None if it isn't a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def _result(issues: list[ValidationIssue]) -> ValidationResult:
    return ValidationResult(
        is_valid=not any(issue.severity == "error" for issue in issues),
        issues=issues,
    )


class LedgerInputValidator:
    """
    Validates raw form input for classes, students and transactions.

    Every method returns a ValidationResult and never raises.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def _check_name(self, name: Optional[str], what: str) -> list[ValidationIssue]:
        if not name or not name.strip():
            return [ValidationIssue(
                field="name",
                issue_type="missing",
                message=f"{what} name is required",
                severity="error",
            )]
        return []

    def validate_class(
        self,
        name: Optional[str],
        fee_type: Any,
        default_fee: Any,
    ) -> ValidationResult:
        """Check a new-class form."""
        issues = self._check_name(name, "Class")

        try:
            FeeType(fee_type)
        except ValueError:
            issues.append(ValidationIssue(
                field="fee_type",
                issue_type="invalid_value",
                message=f"Unknown fee type: {fee_type}",
                severity="error",
                suggested_fix="Choose Monthly or Per Session",
            ))

        fee = _to_decimal(default_fee)
        if fee is None:
            issues.append(ValidationIssue(
                field="default_fee",
                issue_type="invalid_format",
                message="Default fee must be a number",
                severity="error",
            ))
        elif fee < 0:
            issues.append(ValidationIssue(
                field="default_fee",
                issue_type="invalid_value",
                message="Default fee cannot be negative",
                severity="error",
            ))

        return _result(issues)

    def validate_student(
        self,
        name: Optional[str],
        class_id: Optional[str],
        email: Optional[str] = None,
        phone: Optional[str] = None,
        classes: Sequence[ClassGroup] = (),
    ) -> ValidationResult:
        """Check a new- or edit-student form."""
        issues = self._check_name(name, "Student")

        if not class_id:
            issues.append(ValidationIssue(
                field="class_id",
                issue_type="missing",
                message="Please select a class",
                severity="error",
            ))
        elif not any(c.id == class_id for c in classes):
            issues.append(ValidationIssue(
                field="class_id",
                issue_type="not_found",
                message="The selected class no longer exists",
                severity="warning",
                suggested_fix="The student will be listed under 'Unknown'",
            ))

        if email and not _EMAIL_PATTERN.match(email.strip()):
            issues.append(ValidationIssue(
                field="email",
                issue_type="invalid_format",
                message=f"'{email}' doesn't look like an email address",
                severity="warning",
            ))

        if not email and not phone:
            issues.append(ValidationIssue(
                field="contact",
                issue_type="missing",
                message="No email or phone given; reminders can't be sent",
                severity="info",
            ))

        return _result(issues)

    def validate_transaction(
        self,
        student_id: Optional[str],
        type: Any,
        amount: Any,
        date: Optional[str] = None,
        students: Sequence[Student] = (),
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """
        Check a charge/payment form.

        The store would happily record a transaction for a student that
        does not exist, so an unknown student is an error here.
        """
        issues = []

        if not student_id:
            issues.append(ValidationIssue(
                field="student_id",
                issue_type="missing",
                message="Please select a student",
                severity="error",
            ))
        elif not any(s.id == student_id for s in students):
            issues.append(ValidationIssue(
                field="student_id",
                issue_type="not_found",
                message="The selected student no longer exists",
                severity="error",
            ))

        try:
            TransactionType(type)
        except ValueError:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message=f"Unknown transaction type: {type}",
                severity="error",
            ))

        value = _to_decimal(amount)
        if value is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Amount must be a number",
                severity="error",
            ))
        elif value <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
            ))
        elif value > Decimal(str(self._settings.max_transaction_amount)):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({value:,}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        if date:
            tz = self._settings.tzinfo
            day = transaction_day(date, tz)
            if day is None:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="invalid_format",
                    message=f"'{date}' is not a valid date",
                    severity="error",
                    suggested_fix="Use YYYY-MM-DD",
                ))
            else:
                if now is None:
                    now = datetime.now(tz)
                elif now.tzinfo is not None:
                    now = now.astimezone(tz)
                limit = now.date() + timedelta(days=self._settings.future_date_tolerance_days)
                if day > limit:
                    issues.append(ValidationIssue(
                        field="date",
                        issue_type="future_date",
                        message=f"Date ({day.isoformat()}) is in the future",
                        severity="warning",
                        suggested_fix="Please verify the date is correct",
                    ))

        return _result(issues)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Summary shown next to the form."""
        if result.is_valid and not result.warnings:
            return "✅ All checks passed."

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
