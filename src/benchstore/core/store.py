"""Entry store facade.

Composes the catalog, branch log merge and release aggregation behind the
operations callers use. Every operation is a fresh load, compute, store
cycle against the storage ports; nothing is cached between calls.

Only one writer process per branch is supported. Two processes merging into
the same branch concurrently both read the same prior state and the last
write wins.
"""

import logging
import math
import time
from collections.abc import Sequence
from dataclasses import dataclass

from benchstore.core import catalog as catalog_ops
from benchstore.core.exceptions import InvalidEntryError
from benchstore.core.merge import merge_entries
from benchstore.core.models import Entry, Metadata
from benchstore.core.ports import BranchLogStoragePort, IndexStoragePort
from benchstore.core.releases import (
    RELEASES_BRANCH,
    catalog_name_for,
    is_release_tag,
    record_release_tags,
)

logger = logging.getLogger(__name__)


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


def _validate(branch: str, entry: Entry) -> None:
    if not entry.commit.sha:
        raise InvalidEntryError(f"entry for branch {branch!r} has no commit SHA")
    for result in entry.benchmarks:
        if not math.isfinite(result.value):
            raise InvalidEntryError(
                f"benchmark {result.name!r} for commit {entry.commit.sha} "
                f"has non-finite value {result.value}"
            )


@dataclass(frozen=True)
class AppendResult:
    """Summary of an append_entries call.

    Attributes:
        branch: Branch or tag name the batch was appended to.
        catalog_name: Name registered in the catalog (the aggregate for tags).
        catalog_added: True if the catalog gained a new name.
        stored: Number of entries in the branch log after the merge.
        released: True if the batch was also merged into the aggregate log.
    """

    branch: str
    catalog_name: str
    catalog_added: bool
    stored: int
    released: bool


class EntryStore:
    """Durable benchmark history keyed by branch.

    Args:
        branch_storage: Adapter holding per-branch entry logs.
        index_storage: Adapter holding the catalog, release tags and metadata.
        retention_limit: Default maximum entries per branch. Zero or a
            negative value keeps every entry.
        aggregate_branch: Name of the synthetic release timeline.
    """

    def __init__(
        self,
        branch_storage: BranchLogStoragePort,
        index_storage: IndexStoragePort,
        retention_limit: int = 0,
        aggregate_branch: str = RELEASES_BRANCH,
    ) -> None:
        self._branches = branch_storage
        self._index = index_storage
        self._retention_limit = retention_limit
        self._aggregate_branch = aggregate_branch

    @property
    def aggregate_branch(self) -> str:
        """Name of the synthetic release timeline."""
        return self._aggregate_branch

    # --- Catalog ---

    def read_catalog(self) -> list[str]:
        """Return the known branch names, aggregate first."""
        return self._index.read_catalog()

    def ensure_branch(self, branch: str) -> bool:
        """Register a branch (or the aggregate, for a release tag).

        Returns:
            True if the catalog gained a new name.
        """
        current = self._index.read_catalog()
        updated, added = catalog_ops.ensure(current, branch, self._aggregate_branch)
        if added:
            self._index.write_catalog(updated)
            logger.info(
                "Registered %r in catalog",
                catalog_name_for(branch, self._aggregate_branch),
            )
        return added

    # --- Branch logs ---

    def read_branch_history(self, branch: str) -> list[Entry]:
        """Return a branch's entries in chronological order, empty if none."""
        return self._branches.read_branch(branch)

    def write_branch_history(self, branch: str, entries: Sequence[Entry]) -> None:
        """Replace a branch's entries verbatim."""
        self._branches.write_branch(branch, entries)

    def merge_branch(
        self,
        branch: str,
        entries: Sequence[Entry],
        retention_limit: int | None = None,
    ) -> list[Entry]:
        """Merge a batch into one branch log without touching the catalog.

        The new contents are computed in full before anything is written.

        Returns:
            The persisted branch log contents.
        """
        limit = self._resolve_limit(retention_limit)
        existing = self._branches.read_branch(branch)
        merged = merge_entries(existing, entries, limit)
        self._branches.write_branch(branch, merged)
        logger.debug(
            "Merged %d entries into %r (%d -> %d)",
            len(entries),
            branch,
            len(existing),
            len(merged),
        )
        return merged

    def append_entry(
        self, branch: str, entry: Entry, retention_limit: int | None = None
    ) -> AppendResult:
        """Append a single entry. Equivalent to a one-element batch."""
        return self.append_entries(branch, [entry], retention_limit)

    def append_entries(
        self,
        branch: str,
        entries: Sequence[Entry],
        retention_limit: int | None = None,
    ) -> AppendResult:
        """Merge a batch into a branch, registering it in the catalog.

        When ``branch`` is a release tag the batch is also merged into the
        aggregate log and the release tag map is updated.

        Args:
            branch: Branch or tag name.
            entries: Newly parsed entries.
            retention_limit: Maximum entries kept per log. None uses the
                store default; zero or a negative value keeps every entry.

        Raises:
            InvalidEntryError: If an entry has no commit SHA or holds a
                non-finite measurement.
            StoreError: If reading or writing any document fails.
        """
        catalog_name = catalog_name_for(branch, self._aggregate_branch)
        if not entries:
            return AppendResult(branch, catalog_name, False, 0, False)

        limit = self._resolve_limit(retention_limit)
        for entry in entries:
            _validate(branch, entry)

        added = self.ensure_branch(branch)
        merged = self.merge_branch(branch, entries, limit)

        released = is_release_tag(branch)
        if released:
            # @tra: Store.Releases.AggregateMerge
            self.merge_branch(self._aggregate_branch, entries, limit)
            tags = self._index.read_release_tags()
            self._index.write_release_tags(record_release_tags(tags, branch, entries))

        logger.info(
            "Stored %d entries for %r (commit %s)",
            len(entries),
            branch,
            entries[0].commit.sha[:7],
        )
        return AppendResult(branch, catalog_name, added, len(merged), released)

    # --- Release tags ---

    def read_release_tags(self) -> dict[str, str]:
        """Return the commit SHA to release tag map."""
        return self._index.read_release_tags()

    # --- Metadata ---

    def read_metadata(self) -> Metadata:
        """Return repository metadata, empty values if none was written."""
        metadata = self._index.read_metadata()
        return metadata if metadata is not None else Metadata()

    def write_metadata(self, repo_url: str, module_id: str = "") -> Metadata:
        """Replace repository metadata, stamping the current time."""
        metadata = Metadata(
            repo_url=repo_url,
            last_update=_now_millis(),
            module_id=module_id,
        )
        self._index.write_metadata(metadata)
        return metadata

    def _resolve_limit(self, retention_limit: int | None) -> int:
        return self._retention_limit if retention_limit is None else retention_limit
