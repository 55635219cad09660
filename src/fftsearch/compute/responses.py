"""Fourier-domain response of a sinusoid and kernel placement.

The response of a pure sinusoid at fractional bin offset `roffset`, sampled
`numbetween` times per bin, is `exp(i x) sin(x) / x` with
`x = pi * (numkern / (2 numbetween) + roffset) - pi * k / numbetween`.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# Taylor coefficients for the response at (nearly) zero offset.
_SMALL_ROFFSET = 1e-3
_RE_COEFF = 6.579736267392905746
_IM_COEFF = 10.335425560099940058


def gen_r_response(roffset: float, numbetween: int, numkern: int) -> NDArray[np.complex128]:
    """Generate the complex Fourier response used for interpolation.

    Parameters
    ----------
    roffset : float
        Offset of the sinusoid from an integer bin, in bins (0 <= roffset < 1).
    numbetween : int
        Points per bin in the generated response.
    numkern : int
        Number of complex points in the response (even).

    Returns
    -------
    np.ndarray
        Complex response, centred on index `numkern // 2`.
    """
    if numbetween < 1:
        raise ValueError(f"numbetween must be >= 1 (got {numbetween})")
    if numkern < 2 or numkern % 2:
        raise ValueError(f"numkern must be a positive even number (got {numkern})")
    if not (0.0 <= roffset < 1.0):
        raise ValueError(f"roffset must be in [0, 1) (got {roffset})")

    startr = np.pi * (numkern / (2.0 * numbetween) + roffset)
    delta = -np.pi / numbetween
    x = startr + delta * np.arange(numkern, dtype=np.float64)

    response = np.empty(numkern, dtype=np.complex128)
    zero = x == 0.0
    xs = np.where(zero, 1.0, x)
    sinc = np.sin(xs) / xs
    response.real = np.cos(xs) * sinc
    response.imag = np.sin(xs) * sinc
    response[zero] = 1.0 + 0.0j

    if abs(roffset) < _SMALL_ROFFSET:
        r2 = roffset * roffset
        response[numkern // 2] = complex(1.0 - _RE_COEFF * r2, roffset * (np.pi - _IM_COEFF * r2))
    return response


def place_complex_kernel(kernel: NDArray[np.complex128], numresult: int) -> NDArray[np.complex128]:
    """Embed a centred kernel in a zero buffer for circular correlation.

    The second half of `kernel` (non-negative lags) goes to the start of the
    buffer and the first half (negative lags) wraps to its end.
    """
    kernel = np.asarray(kernel, dtype=np.complex128)
    halfwidth = kernel.size // 2
    if 2 * halfwidth > numresult:
        raise ValueError(f"kernel of {kernel.size} points does not fit in {numresult} points")
    result = np.zeros(int(numresult), dtype=np.complex128)
    result[:halfwidth] = kernel[halfwidth : 2 * halfwidth]
    result[numresult - halfwidth :] = kernel[:halfwidth]
    return result
