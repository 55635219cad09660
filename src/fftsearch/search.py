"""Spectrum search drivers.

- `search_fft`: oversampled, harmonic-summed search of a short spectrum that
  returns frequency/power candidates (fixed or sigma-driven count).
- `search_minifft`: the same search over a mini-spectrum cut from a long
  observation, returning binary-pulsar candidates annotated with pulsar and
  orbital period estimates.

Each call is one synchronous pass. The only state shared between calls is the
interpolation kernel cache, which is passed in explicitly (or taken from a
per-thread default).
"""

from __future__ import annotations

import logging
from dataclasses import replace

import numpy as np
from numpy.typing import ArrayLike

from fftsearch.compute.harmonic_search import BinaryPolicy, PlainPolicy, run_harmonic_search
from fftsearch.compute.kernel_cache import KernelCache, default_kernel_cache
from fftsearch.compute.padding import LOWACC_HALFWIDTH, choose_padded_length
from fftsearch.compute.powers import (
    SENTINEL_POWER,
    band_statistics,
    complex_powers,
    raw_band_powers,
)
from fftsearch.compute.ranked_list import RankedList
from fftsearch.compute.spreading import as_spectrum, spread_and_interpolate
from fftsearch.domain.candidates import (
    BinaryCandidate,
    FftCandidate,
    FftSearchResult,
    InterpType,
    MiniFftSearchResult,
    binary_candidate_sigma,
    fft_candidate_power,
)
from fftsearch.errors import InvalidCandidateCountError, SearchResourceError

logger = logging.getLogger(__name__)


def _effective_numbetween(interp: InterpType, numbetween: int) -> int:
    if interp == InterpType.INTERBIN:
        if numbetween != 2:
            logger.debug("Interbinning forces numbetween=2 (requested %d)", numbetween)
        return 2
    if numbetween < 2:
        raise ValueError(f"numbetween must be >= 2 for interpolation (got {numbetween})")
    return int(numbetween)


def _check_common(numharmsum: int) -> None:
    if numharmsum < 1:
        raise ValueError(f"numharmsum must be >= 1 (got {numharmsum})")


def search_fft(
    spectrum: ArrayLike,
    *,
    lobin: int = 0,
    numharmsum: int = 1,
    numbetween: int = 2,
    interp: InterpType | str = InterpType.INTERBIN,
    norm: float = 1.0,
    sigmacutoff: float = 3.0,
    numcands: int = 0,
    lowacc_halfwidth: int = LOWACC_HALFWIDTH,
    kernel_cache: KernelCache | None = None,
) -> FftSearchResult:
    """Search a short spectrum for periodic candidates.

    Parameters
    ----------
    spectrum : array-like
        One-sided complex spectrum (index 0 is DC), length a power of two.
    lobin : int
        Lowest Fourier bin searched.
    numharmsum : int
        Highest harmonic order summed.
    numbetween : int
        Oversampling factor (forced to 2 for interbinning).
    interp : InterpType
        INTERBIN is fast but less sensitive; INTERPOLATE is slower but more
        sensitive.
    norm : float
        Every power is divided by this value.
    sigmacutoff : float
        When `numcands` is 0, the minimum trials-corrected significance kept.
    numcands : int
        Number of candidate slots, or 0 to size the list from `sigmacutoff`.
    kernel_cache : KernelCache, optional
        Cache for interpolation kernels; defaults to a per-thread cache.

    Returns
    -------
    FftSearchResult
        Candidates sorted by decreasing power plus raw-power statistics. A
        fixed-count search returns every slot (unfilled slots have zero
        power); a sigma-driven search returns only genuine candidates.
    """
    fft = as_spectrum(spectrum)
    interp = InterpType(interp)
    _check_common(numharmsum)
    if numcands < 0:
        raise InvalidCandidateCountError(numcands, "search_fft (use 0 for a sigma-driven count)")
    if lobin < 0:
        raise ValueError(f"lobin must be >= 0 (got {lobin})")
    if not norm > 0.0:
        raise ValueError(f"norm must be positive (got {norm})")

    n = fft.size
    numbetween = _effective_numbetween(interp, int(numbetween))
    if lobin >= n:
        logger.warning("lobin=%d is beyond the %d-bin spectrum; nothing will be searched", lobin, n)

    inv_norm = 1.0 / float(norm)
    padded_length, half_width = choose_padded_length(n, numbetween, lowacc_halfwidth=lowacc_halfwidth)
    spread = spread_and_interpolate(
        fft,
        padded_length=padded_length,
        numbetween=numbetween,
        half_width=half_width,
        interp=interp,
        kernel_cache=kernel_cache if kernel_cache is not None else default_kernel_cache(),
    )

    # Statistics come from the original (not oversampled) powers.
    raw = raw_band_powers(fft, min(lobin, n), inv_norm)
    pow_avg, pow_var = band_statistics(raw)
    pow_max = float(raw.max()) if raw.size else 0.0

    numtosearch = n * numbetween
    fullpows = complex_powers(spread[:numtosearch], inv_norm)
    fullpows[0] = SENTINEL_POWER
    del spread

    dynamic = numcands == 0
    ranked: RankedList[FftCandidate] = RankedList(
        None if dynamic else int(numcands),
        metric=fft_candidate_power,
        sentinel=FftCandidate(),
    )
    policy = PlainPolicy(
        numbetween=numbetween,
        dynamic=dynamic,
        sigmacutoff=sigmacutoff,
        numtrials=n - lobin,
    )
    run_harmonic_search(
        fullpows,
        ranked,
        policy,
        numharmsum=int(numharmsum),
        start=max(int(lobin) * numbetween, 1),
    )

    candidates = [replace(c, numsum=int(numharmsum)) for c in ranked.trimmed()]
    num_found = min(ranked.count, ranked.capacity)
    logger.debug(
        "search_fft: n=%d numbetween=%d numharmsum=%d -> %d candidates (dynamic=%s)",
        n,
        numbetween,
        numharmsum,
        num_found,
        dynamic,
    )
    return FftSearchResult(
        candidates=candidates,
        num_candidates=num_found,
        dynamic=dynamic,
        pow_avg=pow_avg,
        pow_var=pow_var,
        pow_max=pow_max,
        numharmsum=int(numharmsum),
        numbetween=numbetween,
        interp=interp,
    )


def _aliased_powers(powers: np.ndarray) -> np.ndarray:
    """Mirror powers about Nyquist so aliased frequencies are searched too."""
    fftlen = powers.size
    try:
        fullpows = np.empty(2 * fftlen, dtype=np.float64)
    except MemoryError as exc:
        raise SearchResourceError("aliased power array", 2 * fftlen) from exc
    fullpows[:fftlen] = powers
    fullpows[fftlen] = SENTINEL_POWER
    fullpows[fftlen + 1 :] = powers[fftlen - 1 : 0 : -1]
    return fullpows


def search_minifft(
    minifft: ArrayLike,
    numcands: int,
    *,
    full_n: float,
    full_t: float,
    full_lo_r: float,
    numharmsum: int = 1,
    numbetween: int = 2,
    interp: InterpType | str = InterpType.INTERBIN,
    check_aliased: bool = False,
    lowacc_halfwidth: int = LOWACC_HALFWIDTH,
    kernel_cache: KernelCache | None = None,
) -> MiniFftSearchResult:
    """Search a mini-spectrum for binary-pulsar candidates.

    Parameters
    ----------
    minifft : array-like
        Complex mini-spectrum (a transform of a stretch of a long spectrum).
    numcands : int
        Number of candidate slots returned (>= 1).
    full_n : float
        Number of points in the original long transform.
    full_t : float
        Duration of the original time series (seconds).
    full_lo_r : float
        First bin of the long transform that was mini-transformed.
    numharmsum, numbetween, interp, kernel_cache
        As for `search_fft`.
    check_aliased : bool
        Include frequencies aliased about Nyquist in the search (slower,
        more sensitive).

    Returns
    -------
    MiniFftSearchResult
        Exactly `numcands` candidates sorted by decreasing significance;
        unfilled slots have zero significance.
    """
    if numcands < 1:
        raise InvalidCandidateCountError(numcands, "search_minifft")
    data = as_spectrum(minifft)
    interp = InterpType(interp)
    _check_common(numharmsum)

    n = data.size
    numbetween = _effective_numbetween(interp, int(numbetween))
    fftlen = n * numbetween
    padded_length, half_width = choose_padded_length(n, numbetween, lowacc_halfwidth=lowacc_halfwidth)
    spread = spread_and_interpolate(
        data,
        padded_length=padded_length,
        numbetween=numbetween,
        half_width=half_width,
        interp=interp,
        kernel_cache=kernel_cache if kernel_cache is not None else default_kernel_cache(),
    )

    powers = complex_powers(spread[:fftlen])
    del spread
    fullpows = _aliased_powers(powers) if check_aliased else powers
    fullpows[0] = SENTINEL_POWER

    ranked: RankedList[BinaryCandidate] = RankedList(
        int(numcands),
        metric=binary_candidate_sigma,
        sentinel=BinaryCandidate(),
    )
    run_harmonic_search(
        fullpows,
        ranked,
        BinaryPolicy(numbetween=numbetween),
        numharmsum=int(numharmsum),
        start=1,
    )

    candidates = [
        c.with_origin(
            full_n=full_n,
            full_t=full_t,
            full_lo_r=full_lo_r,
            mini_n=fftlen,
            numminifft=n,
        )
        for c in ranked.slots()
    ]
    logger.debug(
        "search_minifft: n=%d lo_r=%.0f aliased=%s -> %d of %d slots filled",
        n,
        full_lo_r,
        check_aliased,
        ranked.count,
        ranked.capacity,
    )
    return MiniFftSearchResult(
        candidates=candidates,
        numharmsum=int(numharmsum),
        numbetween=numbetween,
        interp=interp,
        check_aliased=bool(check_aliased),
    )
