"""Padded FFT length selection for oversampled spectra."""

from __future__ import annotations

from enum import Enum

# Number of bins on each side of a frequency used by the Fourier response.
LOWACC_HALFWIDTH = 16
NUMLOCPOWAVG = 20
DELTAAVGBINS = 5
HIGHACC_HALFWIDTH = 3 * LOWACC_HALFWIDTH + NUMLOCPOWAVG // 2 + DELTAAVGBINS

# Highly composite transform lengths (fast for mixed-radix FFTs).
FFT_LENGTH_LADDER: tuple[int, ...] = (
    144,
    288,
    540,
    1080,
    2100,
    4200,
    8232,
    16464,
    32805,
    65610,
    131220,
    262440,
    525000,
    1050000,
)

MIN_SPECTRUM_LENGTH = 8


class Accuracy(str, Enum):
    LOWACC = "LOWACC"
    HIGHACC = "HIGHACC"


def response_halfwidth(accuracy: Accuracy = Accuracy.LOWACC) -> int:
    """Half-width (in bins) of the Fourier interpolation response."""
    if accuracy == Accuracy.HIGHACC:
        return HIGHACC_HALFWIDTH
    return LOWACC_HALFWIDTH


def next_fft_length(needed: int) -> int:
    """Round `needed` up to the next ladder length (lengths <= 144 are used as is)."""
    needed = int(needed)
    if needed <= FFT_LENGTH_LADDER[0]:
        return needed
    for length in FFT_LENGTH_LADDER:
        if needed <= length:
            return length
    return ((needed + 1000) // 1000) * 1000


def choose_padded_length(
    n: int,
    numbetween: int,
    *,
    lowacc_halfwidth: int = LOWACC_HALFWIDTH,
) -> tuple[int, int]:
    """Choose the oversampled transform length and pad width.

    Assumes `n` is a power of two. The pad is the smaller of `n // 8` and the
    low-accuracy response half-width scaled by `numbetween // 2`; it doubles as
    the kernel half-width for interpolation.

    Returns:
        (padded_length, pad_bins)
    """
    n = int(n)
    numbetween = int(numbetween)
    if n < MIN_SPECTRUM_LENGTH:
        raise ValueError(f"spectrum length must be >= {MIN_SPECTRUM_LENGTH} (got {n})")
    if numbetween < 1:
        raise ValueError(f"numbetween must be >= 1 (got {numbetween})")
    if lowacc_halfwidth < 1:
        raise ValueError(f"lowacc_halfwidth must be >= 1 (got {lowacc_halfwidth})")

    pad_bins = min(n // 8, int(lowacc_halfwidth) * (numbetween // 2))
    needed = (n + pad_bins) * numbetween
    return next_fft_length(needed), pad_bins
