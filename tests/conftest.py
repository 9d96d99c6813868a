"""
Shared test fixtures.

Stores get deterministic ids ("id-1", "id-2", ...) and a fixed clock so
tests can assert on exact values. No test talks to a real AI service.
"""

import pytest

from feetracker.audit import AuditLogger
from feetracker.config import get_settings
from feetracker.demo import load_demo_data
from feetracker.engine import compute_student_balances
from feetracker.services.storage import InMemoryAuditStorage, InMemoryLedgerStore

from tests.helpers import FIXED_NOW, sequential_ids


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Run every test against default settings."""
    for name in ("APP_TIMEZONE", "APP_CURRENCY_LABEL", "APP_RECENT_TRANSACTIONS_LIMIT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def store(audit_logger):
    """Empty store with predictable ids and clock."""
    return InMemoryLedgerStore(
        id_factory=sequential_ids(),
        clock=lambda: FIXED_NOW,
        audit_logger=audit_logger,
    )


@pytest.fixture
def demo_store(store):
    """
    Store loaded with the demo dataset.

    Ids: classes id-1 (Math), id-2 (Physics); students id-3 (Alice),
    id-4 (Bob), id-5 (Charlie); transactions id-6 to id-11.
    """
    load_demo_data(store)
    return store


@pytest.fixture
def demo_views(demo_store):
    snapshot = demo_store.snapshot()
    return compute_student_balances(
        snapshot.students, snapshot.transactions, snapshot.classes
    )
