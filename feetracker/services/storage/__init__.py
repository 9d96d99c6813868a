"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements an in-memory backend, but designed to be swappable.
"""

from feetracker.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
)
from feetracker.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLedgerStore,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryLedgerStore",
]
