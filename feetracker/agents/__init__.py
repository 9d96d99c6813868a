"""AI assistant package."""

from feetracker.agents.insight_agent import (
    EMPTY_RESPONSE_MESSAGE,
    SERVICE_ERROR_MESSAGE,
    InsightAgent,
    build_prompt,
    build_snapshot,
    bulk_reminder_prompt,
    reminder_prompt,
)

__all__ = [
    "EMPTY_RESPONSE_MESSAGE",
    "SERVICE_ERROR_MESSAGE",
    "InsightAgent",
    "build_prompt",
    "build_snapshot",
    "bulk_reminder_prompt",
    "reminder_prompt",
]
