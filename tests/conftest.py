"""
Pytest fixtures for record service tests.
"""

import pytest

from nr_permitting_api.app.core.db import SQLiteStorage
from nr_permitting_api.app.schemas.record import RecordCreate
from nr_permitting_api.app.services.record_service import RecordService


class FakeStorage:
    """Storage double that fails a configurable number of times.

    ``failures`` is a list of exceptions raised by successive calls;
    once it is exhausted calls return ``result``.
    """

    def __init__(self, failures=None, result=None):
        self.failures = list(failures or [])
        self.result = result
        self.calls = []

    async def _call(self, name, *args):
        self.calls.append((name, args))
        if self.failures:
            raise self.failures.pop(0)
        return self.result

    async def insert(self, table, values):
        result = await self._call("insert", table, values)
        return dict(values) if result is None else result

    async def select_one(self, table, filters):
        return await self._call("select_one", table, filters)

    async def select_many(self, table, filters, order_by=()):
        result = await self._call("select_many", table, filters, order_by)
        return result or []


@pytest.fixture
def storage(tmp_path):
    """SQLite storage on a fresh, migrated database file."""
    storage = SQLiteStorage(str(tmp_path / "records.db"), timeout=1)
    storage.init_db()
    return storage


@pytest.fixture
def service(storage):
    """Record service over the temporary database without backoff delays."""
    return RecordService(storage, retry_base_delay=0)


@pytest.fixture
def sample_request():
    """Permit submission used across tests."""
    return RecordCreate(
        version="1.0.0",
        kind="ProcessEventSet",
        system_id="sys-A",
        record_id="rec-1",
        record_kind="Permit",
        process_event={"event_type": "submitted"},
    )


@pytest.fixture
def fake_storage():
    """The ``FakeStorage`` class, for tests that inject storage failures."""
    return FakeStorage
