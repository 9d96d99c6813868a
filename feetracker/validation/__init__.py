"""Input validation package."""

from feetracker.validation.validator import LedgerInputValidator

__all__ = ["LedgerInputValidator"]
