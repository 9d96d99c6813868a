"""Services package."""

from feetracker.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryLedgerStore,
    LedgerStorageInterface,
)

__all__ = [
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryLedgerStore",
    "LedgerStorageInterface",
]
