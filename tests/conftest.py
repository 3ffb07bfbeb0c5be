"""Shared test fixtures for all test modules."""

from pathlib import Path

import pytest

from benchstore.adapters.storage import InMemoryEntryStorage, JSONFileStorage
from benchstore.core.store import EntryStore
from tests.factories import EntryFactory, build_entry


@pytest.fixture
def make_entry() -> EntryFactory:
    """Factory fixture for building entries with sensible defaults."""
    return build_entry


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    """Provide a temporary root directory for file-backed stores."""
    return tmp_path / "bench"


@pytest.fixture
def file_storage(store_root: Path) -> JSONFileStorage:
    """File-backed storage rooted at a temporary directory."""
    return JSONFileStorage(store_root)


@pytest.fixture
def file_store(file_storage: JSONFileStorage) -> EntryStore:
    """Entry store over file-backed storage."""
    return EntryStore(file_storage, file_storage)


@pytest.fixture
def memory_storage() -> InMemoryEntryStorage:
    return InMemoryEntryStorage()


@pytest.fixture
def memory_store(memory_storage: InMemoryEntryStorage) -> EntryStore:
    """Entry store over in-memory storage."""
    return EntryStore(memory_storage, memory_storage)
