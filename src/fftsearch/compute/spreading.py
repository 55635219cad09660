"""Spreading a spectrum onto an oversampled grid.

Original bin `k` lands on index `k * numbetween`; the points in between are
then estimated either by interbinning (a closed-form midpoint approximation,
only valid for `numbetween == 2`) or by correlating with a sinc-like kernel.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from fftsearch.compute.kernel_cache import KernelCache
from fftsearch.domain.candidates import InterpType
from fftsearch.errors import SearchResourceError

logger = logging.getLogger(__name__)

TWO_BY_PI = 2.0 / np.pi

# Placeholder written over DC and the Nyquist mirror: their true amplitudes
# are outliers that would otherwise dominate the statistics.
SENTINEL_AMPLITUDE = 1.0 + 0.0j


def as_spectrum(data: object) -> NDArray[np.complex128]:
    """Coerce complex input, or `(N, 2)` real/imag pairs, to a 1-D complex array."""
    arr = np.asarray(data)
    if arr.ndim == 2 and arr.shape[1] == 2 and not np.iscomplexobj(arr):
        arr = arr[:, 0] + 1j * arr[:, 1]
    if arr.ndim != 1:
        raise ValueError(f"spectrum must be 1-D complex or (N, 2) real/imag pairs, got shape {arr.shape}")
    return np.asarray(arr, dtype=np.complex128)


def _zeros(what: str, size: int) -> NDArray[np.complex128]:
    try:
        return np.zeros(int(size), dtype=np.complex128)
    except MemoryError as exc:
        raise SearchResourceError(what, size) from exc


def spread_with_pad(
    data: NDArray[np.complex128],
    numresult: int,
    numbetween: int,
    numpad: int = 0,
) -> NDArray[np.complex128]:
    """Place `data[k]` at `k * numbetween` in a zero buffer of `numresult` points.

    The last `numpad` points are left as zeros.
    """
    result = _zeros("oversampled spectrum", numresult)
    numtoplace = min(data.size, (int(numresult) - int(numpad)) // int(numbetween))
    result[: numtoplace * numbetween : numbetween] = data[:numtoplace]
    return result


def interbin(spread: NDArray[np.complex128], numtosearch: int) -> NDArray[np.complex128]:
    """Fill odd indices below `numtosearch` with the interbinning estimate, in place."""
    odd = np.arange(1, int(numtosearch), 2)
    spread[odd] = TWO_BY_PI * (spread[odd - 1] - spread[odd + 1])
    return spread


def complex_corr_conv(
    data: NDArray[np.complex128], kernel_fft: NDArray[np.complex128]
) -> NDArray[np.complex128]:
    """Circular correlation of `data` with a kernel given in the Fourier domain."""
    if data.size != kernel_fft.size:
        raise ValueError(f"data ({data.size}) and kernel ({kernel_fft.size}) lengths differ")
    return np.fft.ifft(np.fft.fft(data) * np.conj(kernel_fft))


def spread_and_interpolate(
    spectrum: NDArray[np.complex128],
    *,
    padded_length: int,
    numbetween: int,
    half_width: int,
    interp: InterpType,
    kernel_cache: KernelCache,
) -> NDArray[np.complex128]:
    """Return the oversampled spectrum (length `padded_length`).

    DC and the Nyquist mirror (`n * numbetween`) are replaced by the sentinel
    amplitude right after spreading, before interpolation.
    """
    numtosearch = spectrum.size * numbetween
    spread = spread_with_pad(spectrum, padded_length, numbetween)
    spread[0] = SENTINEL_AMPLITUDE
    if numtosearch < spread.size:
        spread[numtosearch] = SENTINEL_AMPLITUDE

    if interp == InterpType.INTERPOLATE:
        kernel = kernel_cache.get_kernel(padded_length, numbetween, half_width)
        return complex_corr_conv(spread, kernel)
    return interbin(spread, numtosearch)
