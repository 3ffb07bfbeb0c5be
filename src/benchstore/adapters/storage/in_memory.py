"""In-memory storage adapter for benchmark history."""

from collections.abc import Sequence

from benchstore.core.catalog import sort_catalog
from benchstore.core.models import Entry, Metadata


class InMemoryEntryStorage:
    """In-memory implementation of BranchLogStoragePort and IndexStoragePort.

    Keeps branch logs and index documents in dicts. Suitable for testing
    and for callers that persist history themselves.
    """

    def __init__(self) -> None:
        self._branches: dict[str, list[Entry]] = {}
        self._catalog: list[str] = []
        self._release_tags: dict[str, str] = {}
        self._metadata: Metadata | None = None

    def read_branch(self, branch: str) -> list[Entry]:
        """Read a branch's entries, empty if the branch has none."""
        return list(self._branches.get(branch, []))

    def write_branch(self, branch: str, entries: Sequence[Entry]) -> None:
        """Replace a branch's entries."""
        self._branches[branch] = list(entries)

    def branch_names(self) -> list[str]:
        """Return the names of all branch logs held, including tag logs."""
        return sort_catalog(list(self._branches))

    def read_catalog(self) -> list[str]:
        return list(self._catalog)

    def write_catalog(self, names: Sequence[str]) -> None:
        self._catalog = list(names)

    def read_release_tags(self) -> dict[str, str]:
        return dict(self._release_tags)

    def write_release_tags(self, tags: dict[str, str]) -> None:
        self._release_tags = dict(tags)

    def read_metadata(self) -> Metadata | None:
        return self._metadata

    def write_metadata(self, metadata: Metadata) -> None:
        self._metadata = metadata
