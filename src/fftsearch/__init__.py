"""fftsearch: harmonic-summing Fourier-domain searches for periodic signals.

Usage:
    >>> from fftsearch import search_fft
    >>> result = search_fft(spectrum, numharmsum=4, numcands=0, sigmacutoff=3.0)
    >>> result.top_candidate
"""

from __future__ import annotations

__version__ = "0.1.0"

from fftsearch.annotate import annotate_binary_candidates, is_new_binary_candidate
from fftsearch.config import SearchConfig
from fftsearch.domain import (
    BinaryCandidate,
    FftCandidate,
    FftSearchResult,
    InterpType,
    MiniFftSearchResult,
)
from fftsearch.errors import InvalidCandidateCountError, SearchResourceError
from fftsearch.search import search_fft, search_minifft

__all__ = [
    "BinaryCandidate",
    "FftCandidate",
    "FftSearchResult",
    "InterpType",
    "InvalidCandidateCountError",
    "MiniFftSearchResult",
    "SearchConfig",
    "SearchResourceError",
    "__version__",
    "annotate_binary_candidates",
    "is_new_binary_candidate",
    "search_fft",
    "search_minifft",
]
