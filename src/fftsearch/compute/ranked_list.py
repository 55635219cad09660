"""Bounded, always-sorted candidate list.

`RankedList` keeps candidates ordered by non-increasing metric. A new entry
overwrites the last slot and percolates towards the front (one insertion-sort
step), so insertion is O(capacity) in the worst case and O(1) when the list is
dominated by weak noise candidates.

Two lifecycles are supported:

- fixed: the caller chooses the capacity; the weakest entry is evicted when a
  stronger one arrives and the admission threshold is the current minimum;
- dynamic: the capacity starts at `DEFAULT_DYNAMIC_CAPACITY` and doubles
  whenever every slot is genuine and another candidate arrives. The caller
  supplies the admission threshold (typically from a significance model).

In both, a candidate whose metric does not exceed the sentinel metric is
refused, so unfilled slots always trail genuine entries.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

from fftsearch.errors import SearchResourceError

logger = logging.getLogger(__name__)

C = TypeVar("C")

DEFAULT_DYNAMIC_CAPACITY = 10


class RankedList(Generic[C]):
    """Sorted candidate list with fixed or doubling capacity.

    Example:
        >>> lst = RankedList(3, metric=lambda c: c, sentinel=0.0)
        >>> lst.push(5.0), lst.push(7.0)
        (0.0, 0.0)
        >>> lst.entries()
        [7.0, 5.0]
    """

    def __init__(
        self,
        capacity: int | None = None,
        *,
        metric: Callable[[C], float],
        sentinel: C,
    ) -> None:
        """Create a list.

        Args:
            capacity: Number of fixed slots, or None for a dynamic list.
            metric: Ranking metric of a candidate (higher is better).
            sentinel: Zero-metric placeholder used for unfilled slots.
        """
        if capacity is not None and int(capacity) < 1:
            raise ValueError(f"capacity must be >= 1 (got {capacity})")
        self._dynamic = capacity is None
        self._metric = metric
        self._sentinel = sentinel
        self._sentinel_metric = float(metric(sentinel))
        self._count = 0
        size = DEFAULT_DYNAMIC_CAPACITY if capacity is None else int(capacity)
        self._slots: list[C] = self._allocate(size)

    def _allocate(self, size: int) -> list[C]:
        try:
            return [self._sentinel] * size
        except MemoryError as exc:
            raise SearchResourceError("candidate list", size) from exc

    @property
    def is_dynamic(self) -> bool:
        return self._dynamic

    @property
    def capacity(self) -> int:
        """Physical number of slots."""
        return len(self._slots)

    @property
    def count(self) -> int:
        """Genuine admissions (saturates at capacity for fixed lists)."""
        return self._count

    @property
    def min_metric(self) -> float:
        """Metric of the last (weakest) slot."""
        return float(self._metric(self._slots[-1]))

    @property
    def last(self) -> C:
        return self._slots[-1]

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[C]:
        return iter(self._slots)

    def __getitem__(self, index: int) -> C:
        return self._slots[index]

    def metrics(self) -> list[float]:
        return [float(self._metric(c)) for c in self._slots]

    def entries(self) -> list[C]:
        """Genuine entries, best first."""
        return self._slots[: min(self._count, len(self._slots))]

    def slots(self) -> list[C]:
        """All slots including trailing sentinels."""
        return list(self._slots)

    def trimmed(self) -> list[C]:
        """Dynamic lists are trimmed to genuine entries; fixed lists keep every slot."""
        if self._dynamic:
            return self.entries()
        return self.slots()

    def _grow(self) -> None:
        new_size = 2 * len(self._slots)
        self._slots.extend(self._allocate(new_size - len(self._slots)))
        logger.debug("Grew candidate list to %d slots", new_size)

    def outranks_sentinel(self, candidate: C) -> bool:
        """True if `candidate` would sort ahead of every unfilled slot."""
        return float(self._metric(candidate)) > self._sentinel_metric

    def push(self, candidate: C) -> float:
        """Insert a candidate and return the new minimum metric.

        Raises:
            ValueError: if the candidate does not outrank the sentinel, since
                unfilled slots must always trail genuine entries.
        """
        if not self.outranks_sentinel(candidate):
            raise ValueError(
                f"candidate metric {self._metric(candidate)!r} does not exceed "
                f"the sentinel metric {self._sentinel_metric!r}"
            )
        if self._dynamic and self._count == len(self._slots):
            self._grow()

        slots = self._slots
        metric = self._metric
        ii = len(slots) - 1
        slots[ii] = candidate
        value = metric(candidate)
        while ii > 0 and metric(slots[ii - 1]) < value:
            slots[ii - 1], slots[ii] = slots[ii], slots[ii - 1]
            ii -= 1

        if self._dynamic or self._count < len(slots):
            self._count += 1
        return float(metric(slots[-1]))

    def admit(self, candidate: C, threshold: float | None = None) -> float:
        """Insert `candidate` if its metric beats `threshold`.

        In a fixed list the default threshold is the current minimum metric.
        Candidates that do not outrank the sentinel are never admitted.
        Returns the (possibly updated) minimum metric.
        """
        limit = self.min_metric if threshold is None else float(threshold)
        if self._metric(candidate) > limit and self.outranks_sentinel(candidate):
            return self.push(candidate)
        return self.min_metric
