"""
Tests for the insight assistant.

The Gemini model is replaced by a fake; no network calls are made.
"""

import json
from decimal import Decimal

import pytest

from feetracker.agents import (
    EMPTY_RESPONSE_MESSAGE,
    SERVICE_ERROR_MESSAGE,
    InsightAgent,
    build_prompt,
    build_snapshot,
    bulk_reminder_prompt,
    reminder_prompt,
)
from feetracker.models.audit import AuditEventType

from tests.helpers import BlockedResponse, FakeModel, make_view


class TestSnapshot:
    """Tests for the context sent with each question."""

    def test_demo_snapshot(self, demo_store, demo_views):
        snapshot = build_snapshot(demo_views, demo_store.list_transactions())
        assert snapshot == {
            "students": [
                {"name": "Alice Johnson", "class": "Grade 10 Math", "balance": 0, "contact": "alice@example.com"},
                {"name": "Bob Smith", "class": "Grade 10 Math", "balance": -5000, "contact": "077-1234567"},
                {"name": "Charlie Brown", "class": "Physics Individual", "balance": 0, "contact": "charlie@example.com"},
            ],
            "recent_transactions_summary": "Total transactions: 6",
        }

    def test_fractional_balance_and_no_contact(self):
        snapshot = build_snapshot([make_view("Dana", "-12.5")], [])
        student = snapshot["students"][0]
        assert student["balance"] == -12.5
        assert student["contact"] == "No contact info"
        assert snapshot["recent_transactions_summary"] == "Total transactions: 0"

    def test_snapshot_is_json_serializable(self, demo_views):
        json.dumps(build_snapshot(demo_views, []))

    def test_prompt_contains_context_and_query(self, demo_views):
        snapshot = build_snapshot(demo_views, [])
        prompt = build_prompt("Who hasn't paid?", snapshot)
        assert "User Query: Who hasn't paid?" in prompt
        assert json.dumps(snapshot, ensure_ascii=False) in prompt


class TestReminderPrompts:
    def test_reminder_uses_absolute_amount(self):
        assert reminder_prompt("Bob Smith", Decimal("-5000")) == (
            "Draft a polite payment reminder for Bob Smith who owes Rs. 5000."
        )

    def test_reminder_keeps_fraction(self):
        assert reminder_prompt("Dana", Decimal("-12.50"), "$").endswith("owes $ 12.50.")

    def test_bulk_reminder(self):
        assert bulk_reminder_prompt(Decimal("5000")) == (
            "Draft a polite payment reminder for All Students who owes Rs. 5000."
        )


class TestAsk:
    """Tests for InsightAgent.ask."""

    @pytest.mark.asyncio
    async def test_returns_model_text_verbatim(self, demo_views, audit_logger, audit_storage):
        model = FakeModel(text="  Bob owes Rs. 5000.\n")
        agent = InsightAgent(model=model, audit_logger=audit_logger)

        answer = await agent.ask("Who owes?", demo_views, [])

        assert answer == "  Bob owes Rs. 5000.\n"
        assert len(model.prompts) == 1
        assert "Bob Smith" in model.prompts[0]

        # The demo store shares this audit trail; keep only the assistant's events
        events = [
            e for e in reversed(audit_storage.get_recent_events(limit=500))
            if e.entity_type == "insight"
        ]
        assert [e.event_type for e in events] == [
            AuditEventType.INSIGHT_REQUESTED,
            AuditEventType.INSIGHT_GENERATED,
        ]
        assert events[0].correlation_id == events[1].correlation_id

    @pytest.mark.asyncio
    async def test_empty_response(self, demo_views):
        agent = InsightAgent(model=FakeModel(text=""))
        assert await agent.ask("Anything?", demo_views, []) == EMPTY_RESPONSE_MESSAGE

    @pytest.mark.asyncio
    async def test_none_text(self, demo_views):
        agent = InsightAgent(model=FakeModel(text=None))
        assert await agent.ask("Anything?", demo_views, []) == EMPTY_RESPONSE_MESSAGE

    @pytest.mark.asyncio
    async def test_blocked_response(self, demo_views):
        agent = InsightAgent(model=FakeModel(response=BlockedResponse()))
        assert await agent.ask("Anything?", demo_views, []) == EMPTY_RESPONSE_MESSAGE

    @pytest.mark.asyncio
    async def test_service_error(self, demo_views, audit_logger, audit_storage):
        agent = InsightAgent(model=FakeModel(error=ConnectionError("network down")), audit_logger=audit_logger)

        answer = await agent.ask("Who owes?", demo_views, [])

        assert answer == SERVICE_ERROR_MESSAGE
        latest = audit_storage.get_recent_events(1)[0]
        assert latest.event_type == AuditEventType.EXTERNAL_SERVICE_ERROR
        assert latest.error_message == "network down"

    @pytest.mark.asyncio
    async def test_missing_api_key(self, demo_views, monkeypatch, audit_logger, audit_storage):
        """Test a missing key becomes the service error message and a system error event."""
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        agent = InsightAgent(audit_logger=audit_logger)

        assert await agent.ask("Who owes?", demo_views, []) == SERVICE_ERROR_MESSAGE

        requested, failed = audit_storage.get_recent_events(2)[::-1]
        assert requested.event_type == AuditEventType.INSIGHT_REQUESTED
        assert failed.event_type == AuditEventType.SYSTEM_ERROR
        assert failed.details["component"] == "insight_agent"
        assert failed.correlation_id == requested.correlation_id

    @pytest.mark.asyncio
    async def test_empty_ledger(self):
        model = FakeModel(text="No students yet.")
        agent = InsightAgent(model=model)
        assert await agent.ask("Summary?", [], []) == "No students yet."
        assert '"students": []' in model.prompts[0]
