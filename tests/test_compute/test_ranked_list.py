"""Tests for fftsearch.compute.ranked_list.

Tests verify:
- Admission keeps the list sorted by non-increasing metric
- A full fixed list evicts its weakest entry
- Dynamic lists double instead of evicting
- Sentinel slots always trail genuine entries
"""

from __future__ import annotations

import numpy as np
import pytest

from fftsearch.compute.ranked_list import DEFAULT_DYNAMIC_CAPACITY, RankedList


def _floats(capacity: int | None = 5) -> RankedList[float]:
    return RankedList(capacity, metric=lambda c: c, sentinel=0.0)


class TestFixedList:
    def test_percolation_keeps_order(self) -> None:
        lst = _floats(5)
        for value in [10.0, 8.0, 6.0, 4.0, 2.0]:
            lst.admit(value)

        new_min = lst.admit(7.0)

        assert lst.metrics() == [10.0, 8.0, 7.0, 6.0, 4.0]
        assert new_min == 4.0
        assert lst.min_metric == 4.0

    def test_weak_candidate_rejected_when_full(self) -> None:
        lst = _floats(3)
        for value in [5.0, 4.0, 3.0]:
            lst.admit(value)

        assert lst.admit(2.5) == 3.0
        assert lst.metrics() == [5.0, 4.0, 3.0]

    def test_equal_metric_does_not_displace(self) -> None:
        lst = _floats(2)
        lst.admit(5.0)
        lst.admit(3.0)

        lst.admit(3.0)

        assert lst.metrics() == [5.0, 3.0]

    def test_sentinels_trail_genuine_entries(self) -> None:
        lst = _floats(5)
        lst.admit(1.0)
        lst.admit(9.0)

        assert lst.metrics() == [9.0, 1.0, 0.0, 0.0, 0.0]
        assert lst.count == 2
        assert lst.entries() == [9.0, 1.0]
        assert len(lst.trimmed()) == 5

    def test_count_saturates_at_capacity(self) -> None:
        lst = _floats(2)
        for value in [1.0, 2.0, 3.0, 4.0]:
            lst.admit(value)

        assert lst.count == 2
        assert lst.capacity == 2

    def test_random_sequence_retains_top_values(self, rng: np.random.Generator) -> None:
        values = rng.uniform(0.1, 100.0, size=200)
        lst = _floats(7)
        for value in values:
            lst.admit(float(value))

        metrics = lst.metrics()
        assert metrics == sorted(metrics, reverse=True)
        np.testing.assert_allclose(metrics, np.sort(values)[::-1][:7])

    def test_explicit_threshold_overrides_minimum(self) -> None:
        lst = _floats(3)
        lst.admit(2.0, threshold=5.0)
        lst.admit(6.0, threshold=5.0)

        assert lst.entries() == [6.0]

    def test_invalid_capacity(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            _floats(0)


class TestDynamicList:
    def test_starts_at_default_capacity(self) -> None:
        lst = _floats(None)
        assert lst.is_dynamic
        assert lst.capacity == DEFAULT_DYNAMIC_CAPACITY

    def test_doubles_when_full(self) -> None:
        lst = _floats(None)
        for value in range(1, 11):
            lst.push(float(value))
        assert lst.capacity == 10
        assert lst.count == 10

        lst.push(0.5)

        assert lst.capacity == 20
        assert lst.count == 11
        assert lst.entries() == [float(v) for v in range(10, 0, -1)] + [0.5]

    def test_growth_keeps_every_entry(self, rng: np.random.Generator) -> None:
        values = rng.uniform(1.0, 2.0, size=45)
        lst = _floats(None)
        for value in values:
            lst.push(float(value))

        assert lst.capacity == 80
        np.testing.assert_allclose(lst.trimmed(), np.sort(values)[::-1])


class TestSentinelOrdering:
    def test_push_rejects_candidates_at_or_below_sentinel(self) -> None:
        lst = _floats(4)
        lst.push(3.0)

        with pytest.raises(ValueError, match="sentinel"):
            lst.push(-0.5)
        with pytest.raises(ValueError, match="sentinel"):
            lst.push(0.0)

        assert lst.metrics() == [3.0, 0.0, 0.0, 0.0]
        assert lst.count == 1

    def test_admit_ignores_candidates_below_sentinel(self) -> None:
        lst = _floats(4)
        lst.admit(2.0)

        assert lst.admit(-1.0, threshold=-5.0) == 0.0
        assert lst.entries() == [2.0]

    def test_outranks_sentinel(self) -> None:
        lst = _floats(2)
        assert lst.outranks_sentinel(0.1)
        assert not lst.outranks_sentinel(0.0)
        assert not lst.outranks_sentinel(-0.1)
