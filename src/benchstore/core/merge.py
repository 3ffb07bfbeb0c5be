"""Merge of incoming benchmark batches into an existing branch log.

An incoming entry replaces the logged entry with the same key in place,
rather than being removed and re-appended, so a replay with an unchanged
commit date keeps its position among equal-time entries.
"""

from collections.abc import Sequence

from benchstore.core.models import Entry, EntryKey
from benchstore.core.ordering import sort_by_commit_date


def trim_to_retention(entries: list[Entry], retention_limit: int) -> list[Entry]:
    """Keep only the trailing ``retention_limit`` entries.

    Args:
        entries: Chronologically sorted entries.
        retention_limit: Maximum number of entries to keep. Zero or a
            negative value keeps every entry.

    Returns:
        The newest entries, oldest dropped first.
    """
    if retention_limit > 0 and len(entries) > retention_limit:
        return entries[-retention_limit:]
    return entries


def dedupe_batch(incoming: Sequence[Entry]) -> list[Entry]:
    """Collapse entries sharing a key within one batch.

    The last occurrence of each key wins and takes that occurrence's position.
    """
    latest: dict[EntryKey, Entry] = {}
    for entry in incoming:
        key = entry.entry_key()
        latest.pop(key, None)
        latest[key] = entry
    return list(latest.values())


def merge_entries(
    existing: Sequence[Entry],
    incoming: Sequence[Entry],
    retention_limit: int = 0,
) -> list[Entry]:
    """Merge a batch into existing history.

    An existing entry sharing a key with an incoming entry is replaced by it
    in place; incoming entries with new keys are appended. The result is
    sorted by effective commit time and finally trimmed to the retention
    limit. Because the sort is stable, a replacement with an unchanged
    commit time keeps its position among equal-time entries.

    Args:
        existing: Current branch log contents.
        incoming: Newly arrived entries. The incoming side always wins.
        retention_limit: Maximum entries to keep after the merge, zero or
            negative for unlimited.

    Returns:
        The new branch log contents.
    """
    # @tra: Core.Merge.ReplaceByKey
    replacements = {entry.entry_key(): entry for entry in dedupe_batch(incoming)}
    placed: set[EntryKey] = set()
    merged: list[Entry] = []
    for entry in existing:
        key = entry.entry_key()
        if key not in replacements:
            merged.append(entry)
        elif key not in placed:
            merged.append(replacements[key])
            placed.add(key)
    merged.extend(e for k, e in replacements.items() if k not in placed)

    # @tra: Core.Merge.SortAfterMerge
    merged = sort_by_commit_date(merged)

    # @tra: Core.Merge.RetentionAfterSort
    return trim_to_retention(merged, retention_limit)
