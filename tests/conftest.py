"""Shared pytest fixtures for vparecon tests."""

import tempfile
import os
from datetime import datetime, UTC
from pathlib import Path
from typing import Iterable, Optional
import pytest

from vparecon.config import ReconConfig
from vparecon.database.base import RegistryStore
from vparecon.database.factories import create_sqlite_store
from vparecon.domain.entities import Registrant, RegistrantRecord
from vparecon.domain.errors import ConflictError, NotFoundError, StoreError, StoreLimitError
from vparecon.domain.registrant import RegistrantService
from vparecon.domain.registrant_import import RegistrantImportService
from vparecon.events import CollectingEventSink


class InMemoryStore(RegistryStore):
    """Dictionary-backed store for exercising batch accounting.

    ``fail_delete_calls`` holds 1-based delete call numbers that raise
    StoreError instead of deleting.
    """

    def __init__(self, max_batch_size: int = 1000, max_page_size: int = 1000, fail_delete_calls=()):
        self.max_batch_size = max_batch_size
        self.max_page_size = max_page_size
        self.registrants: dict[int, Registrant] = {}
        self.fail_delete_calls = set(fail_delete_calls)
        self.delete_calls: list[list[int]] = []
        self._next_id = 1

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def initialize_schema(self) -> None:
        pass

    def add(self, vpa: str, **fields) -> Registrant:
        now = fields.pop("updated_at", None) or datetime.now(UTC)
        registrant = Registrant(
            id=fields.pop("id", None) or self._next_id,
            vpa=vpa,
            phone=fields.get("phone"),
            cc_no=fields.get("cc_no"),
            route_no=fields.get("route_no"),
            name=fields.get("name"),
            inserted_at=now,
            updated_at=now,
        )
        self.registrants[registrant.id] = registrant
        self._next_id = max(self._next_id, registrant.id) + 1
        return registrant

    def create_registrant(self, vpa, phone=None, cc_no=None, route_no=None, name=None) -> Registrant:
        return self.add(vpa, phone=phone, cc_no=cc_no, route_no=route_no, name=name)

    def get_registrant(self, registrant_id: int) -> Optional[Registrant]:
        return self.registrants.get(registrant_id)

    def update_registrant(self, registrant_id, fields) -> Registrant:
        raise NotImplementedError

    def delete_registrant(self, registrant_id: int) -> None:
        if self.registrants.pop(registrant_id, None) is None:
            raise NotFoundError(f"Registrant {registrant_id} not found")

    def insert_registrants(self, records: list[RegistrantRecord]) -> int:
        if len(records) > self.max_batch_size:
            raise StoreLimitError("too many records")
        for record in records:
            if record.phone and any(
                r.phone == record.phone and r.vpa == record.vpa for r in self.registrants.values()
            ):
                raise ConflictError("duplicate entry")
            self.add(**record.to_fields())
        return len(records)

    def upsert_registrants(self, records, conflict_key) -> int:
        raise NotImplementedError

    def fetch_registrants(self, limit, offset=0, vpa=None):
        if limit > self.max_page_size:
            raise StoreLimitError("page too large")
        rows = sorted(self.registrants.values(), key=lambda r: r.id, reverse=True)
        return rows[offset : offset + limit], len(rows)

    def existing_registrant_ids(self, ids: Iterable[int]) -> set[int]:
        return {i for i in ids if i in self.registrants}

    def delete_registrants(self, ids: list[int]) -> int:
        if len(ids) > self.max_batch_size:
            raise StoreLimitError("too many ids")
        self.delete_calls.append(list(ids))
        if len(self.delete_calls) in self.fail_delete_calls:
            raise StoreError(f"delete call {len(self.delete_calls)} failed")
        removed = 0
        for registrant_id in ids:
            if self.registrants.pop(registrant_id, None) is not None:
                removed += 1
        return removed


@pytest.fixture
def temp_store():
    """Create a temporary SQLite-backed store for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    # Cleanup
    store.disconnect()
    store.engine.dispose()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_store():
    """Create an in-memory store."""
    return InMemoryStore()


@pytest.fixture
def config():
    """Default configuration."""
    return ReconConfig()


@pytest.fixture
def events():
    """Collecting event sink."""
    return CollectingEventSink()


@pytest.fixture
def registrant_service(temp_store, config):
    """Create a RegistrantService with a temporary store."""
    return RegistrantService(temp_store, config)


@pytest.fixture
def import_service(temp_store, config, events):
    """Create a RegistrantImportService with a temporary store."""
    return RegistrantImportService(temp_store, config, events)


@pytest.fixture
def sample_registrants(registrant_service):
    """Create a few registrants for testing."""
    return [
        registrant_service.add_registrant(
            vpa="9876543210@ybl", phone="9876543210", route_no="R1", cc_no="CC1", name="Alice"
        ),
        registrant_service.add_registrant(
            vpa="Bob.Kumar@okaxis", phone="9123456780", route_no="R2", name="Bob"
        ),
        registrant_service.add_registrant(vpa="carol@paytm", cc_no="CC3", name="Carol"),
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
