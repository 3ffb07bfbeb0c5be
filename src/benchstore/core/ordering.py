"""Chronological ordering of benchmark entries.

Entries are ordered by their commit date. When either side of a comparison
has a commit date that is not a valid RFC 3339 timestamp, both sides are
compared by their numeric ``timestamp`` instead.
"""

import functools
import re
from collections.abc import Iterable
from datetime import datetime

from benchstore.core.models import Entry

_RFC3339_RE = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)


def parse_commit_date(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp.

    Args:
        value: Date string such as ``2024-01-02T15:04:05Z``.

    Returns:
        Timezone-aware datetime, or None if the string is not a full
        RFC 3339 date-time with an offset.
    """
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        return None
    date, clock, fraction, offset = match.groups()
    # datetime carries microseconds; finer digits are dropped
    fraction = (fraction or "")[:6].ljust(6, "0")
    offset = "+00:00" if offset in ("Z", "z") else offset
    try:
        return datetime.fromisoformat(f"{date}T{clock}.{fraction}{offset}")
    except ValueError:
        return None


def compare_entries(a: Entry, b: Entry) -> int:
    """Three-way comparison by effective commit time.

    Returns:
        Negative if ``a`` sorts first, positive if ``b`` does, 0 if equal.
    """
    # @tra: Core.Ordering.CommitDate
    da = parse_commit_date(a.commit.date)
    db = parse_commit_date(b.commit.date)
    if da is None or db is None:
        # @tra: Core.Ordering.TimestampFallback
        return (a.timestamp > b.timestamp) - (a.timestamp < b.timestamp)
    return (da > db) - (da < db)


def sort_by_commit_date(entries: Iterable[Entry]) -> list[Entry]:
    """Return entries sorted by effective commit time.

    The sort is stable: entries comparing equal keep their input order.
    """
    return sorted(entries, key=functools.cmp_to_key(compare_entries))
