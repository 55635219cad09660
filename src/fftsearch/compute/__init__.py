"""Compute primitives for oversampled, harmonic-summed spectrum searches.

This package provides:
- Ranked candidate lists (fixed or growable)
- FFT length selection and Fourier interpolation kernels
- Spectrum spreading, interbinning and interpolation
- Power normalization, harmonic summing and significance conversion
"""

from fftsearch.compute.kernel_cache import KernelCache, default_kernel_cache
from fftsearch.compute.padding import Accuracy, choose_padded_length, next_fft_length
from fftsearch.compute.ranked_list import RankedList
from fftsearch.compute.significance import candidate_sigma, power_for_sigma

__all__ = [
    "Accuracy",
    "KernelCache",
    "RankedList",
    "candidate_sigma",
    "choose_padded_length",
    "default_kernel_cache",
    "next_fft_length",
    "power_for_sigma",
]
