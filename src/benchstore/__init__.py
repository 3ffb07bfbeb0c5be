"""Durable benchmark history keyed by commit and branch.

Example:
    ```python
    from benchstore import open_store

    store = open_store("benchmarks")
    store.append_entries("main", entries, retention_limit=500)
    history = store.read_branch_history("main")
    ```
"""

from benchstore.adapters.storage import (
    InMemoryEntryStorage,
    JSONFileStorage,
    load_entry_file,
    open_store,
)
from benchstore.core.config import StoreConfig
from benchstore.core.exceptions import (
    DecodeError,
    EncodeError,
    InvalidEntryError,
    StorageIOError,
    StoreError,
)
from benchstore.core.models import (
    CommitInfo,
    Entry,
    EntryKey,
    Metadata,
    MetricResult,
    RunParameters,
)
from benchstore.core.releases import RELEASES_BRANCH, is_release_tag
from benchstore.core.store import AppendResult, EntryStore

__all__ = [
    "RELEASES_BRANCH",
    "AppendResult",
    "CommitInfo",
    "DecodeError",
    "EncodeError",
    "Entry",
    "EntryKey",
    "EntryStore",
    "InMemoryEntryStorage",
    "InvalidEntryError",
    "JSONFileStorage",
    "Metadata",
    "MetricResult",
    "RunParameters",
    "StorageIOError",
    "StoreConfig",
    "StoreError",
    "is_release_tag",
    "load_entry_file",
    "open_store",
]
