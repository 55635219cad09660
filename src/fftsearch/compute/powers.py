"""Power extraction, band statistics and incoherent harmonic summation."""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np
from numpy.typing import NDArray

from fftsearch.errors import SearchResourceError

# Power written over DC (and the aliased Nyquist mirror) in every power array.
SENTINEL_POWER = 1.0


def complex_powers(values: NDArray[np.complex128], norm: float = 1.0) -> NDArray[np.float64]:
    """Return `|z|**2 * norm` for every element."""
    vals = np.asarray(values, dtype=np.complex128)
    try:
        return (vals.real * vals.real + vals.imag * vals.imag) * float(norm)
    except MemoryError as exc:
        raise SearchResourceError("power array", vals.size) from exc


def band_statistics(powers: NDArray[np.float64]) -> tuple[float, float]:
    """Mean and (population) variance of a band of powers; zeros if empty."""
    pw = np.asarray(powers, dtype=np.float64)
    if pw.size == 0:
        return 0.0, 0.0
    return float(np.mean(pw)), float(np.var(pw))


def raw_band_powers(
    spectrum: NDArray[np.complex128], lobin: int, norm: float
) -> NDArray[np.float64]:
    """Non-oversampled powers of `spectrum[lobin:]` with DC replaced by the sentinel."""
    raw = complex_powers(spectrum[lobin:], norm)
    if lobin == 0 and raw.size:
        raw[0] = SENTINEL_POWER
    return raw


def harmonic_indices(numtosearch: int, harm: int) -> NDArray[np.intp]:
    """Fundamental-grid index contributing to harmonic `harm` at each bin."""
    return (np.arange(int(numtosearch), dtype=np.intp) + harm // 2) // harm


def harmonic_sums(
    fullpows: NDArray[np.float64],
    numharmsum: int,
    start: int = 0,
) -> Iterator[tuple[int, NDArray[np.float64]]]:
    """Yield `(harm, sumpows)` for harm = 1..numharmsum.

    `sumpows` is a running sum updated in place (only for bins >= `start`);
    harmonic 1 is a copy of `fullpows`. Consumers must not keep references
    across iterations.
    """
    if numharmsum < 1:
        raise ValueError(f"numharmsum must be >= 1 (got {numharmsum})")
    try:
        sumpows = np.array(fullpows, dtype=np.float64, copy=True)
    except MemoryError as exc:
        raise SearchResourceError("harmonic sum array", len(fullpows)) from exc
    yield 1, sumpows

    numtosearch = sumpows.size
    for harm in range(2, numharmsum + 1):
        idx = harmonic_indices(numtosearch, harm)[start:]
        sumpows[start:] += fullpows[idx]
        yield harm, sumpows
