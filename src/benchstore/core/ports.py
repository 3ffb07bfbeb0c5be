"""Storage and parser seams of the benchmark store.

Branch logs and the index documents (catalog, release tags, metadata) are
read and written whole. The parser that turns benchmark output into
measurements lives outside this package; only its call shape is fixed here.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from benchstore.core.models import Entry, Metadata, MetricResult


@runtime_checkable
class BranchLogStoragePort(Protocol):
    """Port for whole-branch entry history.

    Adapters implementing this protocol persist one ordered list of
    entries per branch name.
    Examples: InMemoryEntryStorage, JSONFileStorage.
    """

    def read_branch(self, branch: str) -> list[Entry]:
        """Read a branch's entries.

        Returns:
            The persisted entries, or an empty list if the branch has none.
        """
        ...

    def write_branch(self, branch: str, entries: Sequence[Entry]) -> None:
        """Persist entries verbatim, replacing the branch's prior contents."""
        ...


@runtime_checkable
class IndexStoragePort(Protocol):
    """Port for repository-wide documents: catalog, release tags, metadata.

    Examples: InMemoryEntryStorage, JSONFileStorage.
    """

    def read_catalog(self) -> list[str]:
        """Read the branch catalog, empty if none exists yet."""
        ...

    def write_catalog(self, names: Sequence[str]) -> None:
        """Persist the branch catalog."""
        ...

    def read_release_tags(self) -> dict[str, str]:
        """Read the commit SHA to release tag map, empty if none exists yet."""
        ...

    def write_release_tags(self, tags: dict[str, str]) -> None:
        """Persist the commit SHA to release tag map."""
        ...

    def read_metadata(self) -> Metadata | None:
        """Read repository metadata, None if none exists yet."""
        ...

    def write_metadata(self, metadata: Metadata) -> None:
        """Persist repository metadata, replacing any prior value."""
        ...


@runtime_checkable
class BenchmarkParserPort(Protocol):
    """Port for the benchmark output parser.

    Turns raw benchmark text into results. Parsing lives outside this
    package; the store only consumes what a parser produces.
    """

    def parse(self, text: str) -> tuple[list[MetricResult], str]:
        """Parse benchmark output.

        Returns:
            Tuple of (results in output order, detected CPU model or "").
        """
        ...
