"""Harmonic-summing candidate search over an oversampled power array.

Both spectrum searches share one loop: for every harmonic order the running
sum of powers is scanned and each bin above the current admission threshold
is pushed into a `RankedList`. What differs between the searches is captured
by an `AdmissionPolicy`: how the threshold is derived and what candidate a
detection becomes.

Thresholds never decrease within a pass, so bins are pre-selected against the
threshold at the start of the pass with `numpy.flatnonzero` and then re-tested
one by one against the live threshold.
"""

from __future__ import annotations

import logging
from typing import Protocol, TypeVar

import numpy as np
from numpy.typing import NDArray

from fftsearch.compute.powers import harmonic_sums
from fftsearch.compute.ranked_list import RankedList
from fftsearch.compute.significance import candidate_sigma, power_for_sigma
from fftsearch.domain.candidates import BinaryCandidate, FftCandidate

logger = logging.getLogger(__name__)

C = TypeVar("C")


class AdmissionPolicy(Protocol[C]):
    def threshold(self, harm: int, ranked: RankedList[C]) -> float:
        """Minimum (summed) power a bin needs to be considered."""
        ...

    def make_candidate(self, index: int, power: float, harm: int) -> C:
        """Candidate for a detection at oversampled `index`."""
        ...


class PlainPolicy:
    """Admission for `search_fft`.

    With a fixed list the threshold is the weakest retained power. With a
    dynamic list it is the power reaching `sigmacutoff` given the harmonic
    order and `numtrials` bins searched.
    """

    def __init__(
        self,
        *,
        numbetween: int,
        dynamic: bool,
        sigmacutoff: float,
        numtrials: float,
    ) -> None:
        self.dr = 1.0 / float(numbetween)
        self.dynamic = dynamic
        self.sigmacutoff = float(sigmacutoff)
        self.numtrials = float(numtrials)
        self._sigma_powers: dict[int, float] = {}

    def threshold(self, harm: int, ranked: RankedList[FftCandidate]) -> float:
        if not self.dynamic:
            return ranked.min_metric
        pow_min = self._sigma_powers.get(harm)
        if pow_min is None:
            pow_min = power_for_sigma(self.sigmacutoff, harm, self.numtrials)
            self._sigma_powers[harm] = pow_min
        return pow_min

    def make_candidate(self, index: int, power: float, harm: int) -> FftCandidate:
        return FftCandidate(r=self.dr * index, power=power, numsum=harm)


class BinaryPolicy:
    """Admission for `search_minifft`.

    The list is ranked by significance. The raw pass admits anything stronger
    than the weakest retained power; summed passes require the power that
    reaches the weakest retained significance for that harmonic order.
    """

    def __init__(self, *, numbetween: int) -> None:
        self.dr = 1.0 / float(numbetween)

    def threshold(self, harm: int, ranked: RankedList[BinaryCandidate]) -> float:
        if harm == 1:
            return ranked.last.mini_power
        return power_for_sigma(ranked.min_metric, harm, 1)

    def make_candidate(self, index: int, power: float, harm: int) -> BinaryCandidate:
        return BinaryCandidate(
            mini_r=self.dr * index,
            mini_power=power,
            mini_sigma=candidate_sigma(power, harm, 1),
            mini_numsum=float(harm),
        )


def run_harmonic_search(
    fullpows: NDArray[np.float64],
    ranked: RankedList[C],
    policy: AdmissionPolicy[C],
    *,
    numharmsum: int,
    start: int,
) -> RankedList[C]:
    """Scan harmonic orders 1..numharmsum, filling `ranked` in place.

    Args:
        fullpows: Oversampled fundamental powers.
        ranked: Destination list.
        policy: Threshold and candidate construction rules.
        numharmsum: Highest harmonic order summed.
        start: First oversampled bin searched (summed sums start there too).
    """
    for harm, sumpows in harmonic_sums(fullpows, numharmsum, start):
        threshold = policy.threshold(harm, ranked)
        hits = np.flatnonzero(sumpows[start:] > threshold) + start
        admitted = 0
        for jj in hits:
            power = float(sumpows[jj])
            if power <= threshold:
                continue
            candidate = policy.make_candidate(int(jj), power, harm)
            # Detections with no significance (sigma <= 0) would sort behind unfilled slots.
            if not ranked.outranks_sentinel(candidate):
                continue
            ranked.push(candidate)
            threshold = policy.threshold(harm, ranked)
            admitted += 1
        logger.debug(
            "Harmonic %d: %d bins above start threshold, %d admitted, list count=%d",
            harm,
            hits.size,
            admitted,
            ranked.count,
        )
    return ranked
