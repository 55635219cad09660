"""Domain models for fftsearch.

This package is domain-only. It intentionally excludes compute and I/O
concerns.
"""

from fftsearch.domain.candidates import (
    BinaryCandidate,
    FftCandidate,
    FftSearchResult,
    InterpType,
    MiniFftSearchResult,
    binary_candidate_sigma,
    fft_candidate_power,
)

__all__ = [
    "BinaryCandidate",
    "FftCandidate",
    "FftSearchResult",
    "InterpType",
    "MiniFftSearchResult",
    "binary_candidate_sigma",
    "fft_candidate_power",
]
