"""
Insight Assistant for Fee Tracker

Answers free-text questions about the tutor's fees ("who hasn't paid?",
"draft a reminder for Bob") by sending a compact snapshot of the
derived balances to Gemini.

CRITICAL BOUNDARIES:
- The assistant only READS. It never records or changes anything.
- It only sees a minimal snapshot: per student the name, class, balance
  and one contact, plus a count of transactions. Raw transactions are
  never sent, which keeps the payload small.
- It never raises to the caller. Any failure becomes a fixed,
  human-readable message, and the error is logged for diagnostics.

One request per question: no retry, no streaming, no cancellation.
"""

import json
from decimal import Decimal
from typing import Any, Optional, Sequence

import google.generativeai as genai
import structlog

from feetracker.audit import AuditLogger, create_correlation_id
from feetracker.config import get_settings
from feetracker.models.ledger import StudentBalanceView, Transaction


EMPTY_RESPONSE_MESSAGE = "I couldn't generate a response at this time."
SERVICE_ERROR_MESSAGE = (
    "Sorry, I encountered an error while communicating with the AI assistant."
)
BULK_REMINDER_NAME = "All Students"


def _json_number(value: Decimal) -> Any:
    """Decimal as a plain JSON number (int when it has no fraction)."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _format_amount(value: Decimal) -> str:
    amount = abs(value)
    if amount == amount.to_integral_value():
        return str(int(amount))
    return str(amount)


def build_snapshot(
    students: Sequence[StudentBalanceView],
    transactions: Sequence[Transaction],
) -> dict:
    """
    Build the read-only context sent with every question.

    Only a count of transactions is included, not the transactions.
    """
    return {
        "students": [
            {
                "name": s.name,
                "class": s.class_name,
                "balance": _json_number(s.balance),
                "contact": s.contact,
            }
            for s in students
        ],
        "recent_transactions_summary": f"Total transactions: {len(transactions)}",
    }


def build_prompt(query: str, snapshot: dict) -> str:
    """Combine the fixed instructions, the JSON context and the question."""
    context = json.dumps(snapshot, ensure_ascii=False)

    return f"""You are an intelligent assistant for a tutor's fee collection app.

Here is the current financial context (JSON). A negative balance means
the student owes that amount; zero or positive means they are paid up.
{context}

User Query: {query}

Instructions:
1. If asking for a reminder, draft a polite, professional message (WhatsApp/Email style) for the specific student or a general template.
2. If asking for analysis, summarize the debt status.
3. Keep responses concise and helpful.
4. Use ONLY the data above. Do not invent students or amounts."""


def reminder_prompt(
    student_name: str,
    amount_due: Decimal,
    currency_label: str = "Rs.",
) -> str:
    """Question asking the assistant to draft a payment reminder."""
    return (
        f"Draft a polite payment reminder for {student_name} "
        f"who owes {currency_label} {_format_amount(amount_due)}."
    )


def bulk_reminder_prompt(total_pending: Decimal, currency_label: str = "Rs.") -> str:
    """Reminder template addressed to every student with dues."""
    return reminder_prompt(BULK_REMINDER_NAME, total_pending, currency_label)


def _response_text(response: Any) -> str:
    try:
        return response.text or ""
    except ValueError:
        # Raised when the candidate was blocked or has no text parts
        return ""


class InsightAgent:
    """
    Single-shot question answering over the derived ledger view.

    Args:
        model: Anything with an async ``generate_content_async(prompt)``.
            When omitted, a Gemini model is created on first use from
            GeminiSettings.
        audit_logger: Records requests, responses and failures.
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._model = model
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger(__name__)

    def _get_model(self) -> Any:
        """Get or create the Gemini model."""
        if self._model is None:
            settings = get_settings().gemini
            genai.configure(api_key=settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=settings.model_name,
                generation_config={
                    "temperature": settings.temperature,
                    "max_output_tokens": settings.max_tokens,
                }
            )
        return self._model

    async def ask(
        self,
        query: str,
        students: Sequence[StudentBalanceView],
        transactions: Sequence[Transaction],
    ) -> str:
        """
        Send one question with the current snapshot and return the answer.

        Returns the model's text verbatim, EMPTY_RESPONSE_MESSAGE if the
        model returned nothing, or SERVICE_ERROR_MESSAGE on any failure
        (including a missing API key).
        """
        correlation_id = create_correlation_id()

        if self._audit_logger:
            self._audit_logger.log_insight_requested(
                query_chars=len(query),
                student_count=len(students),
                correlation_id=correlation_id,
            )

        try:
            model = self._get_model()
        except Exception as e:
            # Configuration problem (e.g. no GEMINI_API_KEY); nothing was sent
            self._logger.error(
                "insight_model_unavailable",
                error=str(e),
                error_type=type(e).__name__,
                correlation_id=str(correlation_id),
            )
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"component": "insight_agent"},
                    correlation_id=correlation_id,
                )
            return SERVICE_ERROR_MESSAGE

        try:
            prompt = build_prompt(query, build_snapshot(students, transactions))
            response = await model.generate_content_async(prompt)
            text = _response_text(response)
        except Exception as e:
            self._logger.error(
                "insight_request_failed",
                error=str(e),
                error_type=type(e).__name__,
                correlation_id=str(correlation_id),
            )
            if self._audit_logger:
                self._audit_logger.log_external_service_error(
                    service="gemini",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            return SERVICE_ERROR_MESSAGE

        if not text:
            return EMPTY_RESPONSE_MESSAGE

        if self._audit_logger:
            self._audit_logger.log_insight_generated(
                response_chars=len(text),
                correlation_id=correlation_id,
            )
        return text
