"""Catalog utilities for candidate identification.

Usage:
    >>> from fftsearch.catalogs import load_pulsar_catalog, match_binary_candidate
    >>> catalog = load_pulsar_catalog(Path("binaries.csv"))
    >>> match = match_binary_candidate(cand, obs, catalog)
"""

from fftsearch.catalogs.pulsars import (
    NO_MATCH_DESCRIPTION,
    KnownPulsar,
    ObservationInfo,
    PulsarMatch,
    describe_candidate_match,
    load_pulsar_catalog,
    match_binary_candidate,
    ordinal,
    save_catalog,
)

__all__ = [
    "KnownPulsar",
    "NO_MATCH_DESCRIPTION",
    "ObservationInfo",
    "PulsarMatch",
    "describe_candidate_match",
    "load_pulsar_catalog",
    "match_binary_candidate",
    "ordinal",
    "save_catalog",
]
