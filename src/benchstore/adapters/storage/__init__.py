"""Storage adapters implementing core ports."""

from benchstore.adapters.storage.in_memory import InMemoryEntryStorage
from benchstore.adapters.storage.json_files import (
    JSONFileStorage,
    load_entry_file,
    open_store,
)

__all__ = [
    "InMemoryEntryStorage",
    "JSONFileStorage",
    "load_entry_file",
    "open_store",
]
