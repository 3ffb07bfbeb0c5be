"""Tests for merging batches into branch history."""

import pytest

from benchstore.core.merge import dedupe_batch, merge_entries, trim_to_retention
from tests.factories import EntryFactory


def _shas(entries) -> list[str]:
    return [e.commit.sha for e in entries]


def _value(entry) -> float:
    return entry.benchmarks[0].value


class TestMergeEntries:
    """Tests for merge_entries()."""

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_merge_into_empty_history(self, make_entry: EntryFactory) -> None:
        entry = make_entry("aaa")

        assert merge_entries([], [entry]) == [entry]

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_empty_batch_keeps_history(self, make_entry: EntryFactory) -> None:
        existing = [make_entry("aaa")]

        assert merge_entries(existing, []) == existing

    @pytest.mark.core
    @pytest.mark.tier(0)
    @pytest.mark.tra("Core.Merge.ReplaceByKey")
    def test_same_key_is_replaced_by_incoming(self, make_entry: EntryFactory) -> None:
        old = make_entry("aaa", value=100)
        new = make_entry("aaa", value=42)

        result = merge_entries([old], [new])

        assert result == [new]

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_incoming_wins_even_when_older(self, make_entry: EntryFactory) -> None:
        existing = make_entry("aaa", date="2024-02-01T00:00:00Z", value=1)
        incoming = make_entry("aaa", date="2024-01-01T00:00:00Z", value=2)

        result = merge_entries([existing], [incoming])

        assert result == [incoming]

    @pytest.mark.core
    @pytest.mark.tier(0)
    @pytest.mark.parametrize(
        "overrides",
        [
            {"sha": "bbb"},
            {"cpu": "cpu2"},
            {"goos": "darwin"},
            {"goarch": "arm64"},
            {"go_version": "go1.23"},
            {"cgo": True},
        ],
    )
    def test_different_keys_do_not_collide(
        self, make_entry: EntryFactory, overrides: dict
    ) -> None:
        base = make_entry("aaa")
        other = make_entry(**{"sha": "aaa", **overrides})

        result = merge_entries([base], [other])

        assert len(result) == 2

    @pytest.mark.core
    @pytest.mark.tier(0)
    @pytest.mark.tra("Core.Merge.SortAfterMerge")
    def test_out_of_order_arrival_is_sorted(self, make_entry: EntryFactory) -> None:
        e1 = make_entry("a", date="2024-01-01T00:00:00Z")
        e2 = make_entry("b", date="2024-01-02T00:00:00Z")
        e3 = make_entry("c", date="2024-01-03T00:00:00Z")

        result = merge_entries([e1, e3], [e2])

        assert _shas(result) == ["a", "b", "c"]

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_replaced_entry_moves_when_date_changes(
        self, make_entry: EntryFactory
    ) -> None:
        a = make_entry("a", date="2024-01-01T00:00:00Z")
        b = make_entry("b", date="2024-01-02T00:00:00Z")
        a_moved = make_entry("a", date="2024-01-03T00:00:00Z")

        result = merge_entries([a, b], [a_moved])

        assert _shas(result) == ["b", "a"]

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_replace_with_equal_time_keeps_relative_order(
        self, make_entry: EntryFactory
    ) -> None:
        """A replacement with the same commit time stays where it was."""
        same = "2024-01-01T00:00:00Z"
        x = make_entry("x", date=same)
        y = make_entry("y", date=same)
        z = make_entry("z", date=same)
        y_new = make_entry("y", date=same, value=7)

        result = merge_entries([x, y, z], [y_new])

        assert _shas(result) == ["x", "y", "z"]
        assert _value(result[1]) == 7

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_new_keys_follow_equal_time_entries(
        self, make_entry: EntryFactory
    ) -> None:
        same = "2024-01-01T00:00:00Z"
        x = make_entry("x", date=same)
        y = make_entry("y", date=same)
        w = make_entry("w", date=same)

        result = merge_entries([x, y], [w])

        assert _shas(result) == ["x", "y", "w"]

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_replayed_appends_replace_in_place(self, make_entry: EntryFactory) -> None:
        history = merge_entries([], [make_entry("aaa", date="2024-01-01T00:00:00Z")])
        history = merge_entries(
            history, [make_entry("bbb", date="2024-01-02T00:00:00Z")]
        )
        history = merge_entries(
            history, [make_entry("aaa", date="2024-01-01T00:00:00Z", value=42)]
        )

        assert _shas(history) == ["aaa", "bbb"]
        assert _value(history[0]) == 42

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_batch_and_single_appends_agree(self, make_entry: EntryFactory) -> None:
        existing = [make_entry("a", date="2024-01-01T00:00:00Z")]
        incoming = make_entry("b", date="2024-01-02T00:00:00Z")

        assert merge_entries(existing, [incoming]) == merge_entries(
            existing, (incoming,)
        )

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_duplicate_keys_within_batch_keep_last(
        self, make_entry: EntryFactory
    ) -> None:
        first = make_entry("a", value=1)
        second = make_entry("a", value=2)

        result = merge_entries([], [first, second])

        assert result == [second]

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_does_not_mutate_inputs(self, make_entry: EntryFactory) -> None:
        existing = [make_entry("a", value=1)]
        incoming = [make_entry("a", value=2)]

        merge_entries(existing, incoming)

        assert _value(existing[0]) == 1
        assert _value(incoming[0]) == 2


class TestRetention:
    """Tests for retention trimming."""

    @pytest.mark.core
    @pytest.mark.tier(0)
    @pytest.mark.tra("Core.Merge.RetentionAfterSort")
    def test_keeps_latest_entries(self, make_entry: EntryFactory) -> None:
        entries = [
            make_entry(f"s{i}", date=f"2024-01-0{i}T00:00:00Z") for i in range(1, 6)
        ]

        result = merge_entries([], entries, retention_limit=3)

        assert _shas(result) == ["s3", "s4", "s5"]

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_retention_applies_after_sort(self, make_entry: EntryFactory) -> None:
        """An old entry arriving last is the one trimmed."""
        existing = [
            make_entry("b", date="2024-01-02T00:00:00Z"),
            make_entry("c", date="2024-01-03T00:00:00Z"),
        ]
        late_old = make_entry("a", date="2024-01-01T00:00:00Z")

        result = merge_entries(existing, [late_old], retention_limit=2)

        assert _shas(result) == ["b", "c"]

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_retention_after_replace(self, make_entry: EntryFactory) -> None:
        existing = [
            make_entry("a", date="2024-01-01T00:00:00Z"),
            make_entry("b", date="2024-01-02T00:00:00Z"),
        ]
        replacement = make_entry("b", date="2024-01-02T00:00:00Z", value=9)

        result = merge_entries(existing, [replacement], retention_limit=2)

        assert _shas(result) == ["a", "b"]
        assert _value(result[1]) == 9

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_zero_means_unlimited(self, make_entry: EntryFactory) -> None:
        entries = [make_entry(f"s{i}", timestamp=i, date="") for i in range(10)]

        assert len(merge_entries([], entries, retention_limit=0)) == 10

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_negative_means_unlimited(self, make_entry: EntryFactory) -> None:
        entries = [make_entry(f"s{i}", timestamp=i, date="") for i in range(10)]

        assert len(merge_entries([], entries, retention_limit=-1)) == 10

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_trim_below_limit_is_noop(self, make_entry: EntryFactory) -> None:
        entries = [make_entry("a")]

        assert trim_to_retention(entries, 5) == entries


class TestDedupeBatch:
    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_last_occurrence_takes_its_position(
        self, make_entry: EntryFactory
    ) -> None:
        a1 = make_entry("a", value=1)
        b = make_entry("b")
        a2 = make_entry("a", value=2)

        assert dedupe_batch([a1, b, a2]) == [b, a2]
