"""Candidate and search-result domain models.

This module provides:
- InterpType: how the spectrum is brought to sub-bin resolution
- FftCandidate: one candidate from a plain spectrum search
- BinaryCandidate: one candidate from a mini-spectrum (binary) search
- FftSearchResult / MiniFftSearchResult: ranked candidates plus statistics

Candidates are plain frozen dataclasses because a search may create many of
them in a tight loop; the result wrappers are pydantic models like the rest
of the host-facing types.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class InterpType(str, Enum):
    """Sub-bin resolution strategy."""

    INTERBIN = "INTERBIN"  # fast, less sensitive
    INTERPOLATE = "INTERPOLATE"  # Fourier interpolation, slower, more sensitive


@dataclass(frozen=True)
class FftCandidate:
    """A candidate from a plain oversampled power-spectrum search."""

    r: float = 0.0  # fractional Fourier bin
    power: float = 0.0  # normalized (summed) power
    numsum: int = 0  # harmonics summed during the search

    @property
    def is_sentinel(self) -> bool:
        return self.power == 0.0


@dataclass(frozen=True)
class BinaryCandidate:
    """A candidate from a mini-spectrum search for binary pulsars.

    `mini_*` quantities refer to the mini-spectrum; `full_*` quantities
    describe the long spectrum the mini-spectrum was cut from.
    """

    mini_r: float = 0.0  # fractional bin in the mini-spectrum
    mini_power: float = 0.0
    mini_sigma: float = 0.0
    mini_numsum: float = 0.0
    mini_n: float = 0.0  # oversampled mini-spectrum length
    full_n: float = 0.0
    full_t: float = 0.0  # seconds
    full_lo_r: float = 0.0
    psr_p: float = 0.0  # seconds
    orb_p: float = 0.0  # seconds

    @property
    def is_sentinel(self) -> bool:
        return self.mini_sigma == 0.0

    @property
    def orb_p_err(self) -> float:
        """Approximate uncertainty of the orbital period (seconds)."""
        if self.mini_n == 0.0:
            return 0.0
        return 0.5 * self.full_t / self.mini_n

    @property
    def psr_p_err(self) -> float:
        """Approximate uncertainty of the pulsar spin period (seconds)."""
        if self.full_lo_r == 0.0:
            return self.psr_p
        return abs(
            self.full_t / (self.full_lo_r + 0.5 * self.mini_n) - self.full_t / self.full_lo_r
        )

    def with_origin(
        self,
        *,
        full_n: float,
        full_t: float,
        full_lo_r: float,
        mini_n: float,
        numminifft: int,
    ) -> BinaryCandidate:
        """Back-map the detection onto the long spectrum it came from."""
        return replace(
            self,
            full_n=float(full_n),
            full_t=float(full_t),
            full_lo_r=float(full_lo_r),
            mini_n=float(mini_n),
            psr_p=float(full_t) / (float(full_lo_r) + numminifft),
            orb_p=float(full_t) * self.mini_r / float(mini_n),
        )


def fft_candidate_power(cand: FftCandidate) -> float:
    return cand.power


def binary_candidate_sigma(cand: BinaryCandidate) -> float:
    return cand.mini_sigma


class FftSearchResult(FrozenModel):
    """Ranked candidates and noise statistics from `search_fft`."""

    candidates: list[FftCandidate]
    num_candidates: int = Field(ge=0, description="Genuine (non-sentinel) candidates")
    dynamic: bool = Field(description="True if the candidate count was sigma-driven")
    pow_avg: float
    pow_var: float = Field(ge=0)
    pow_max: float = Field(ge=0)
    numharmsum: int = Field(ge=1)
    numbetween: int = Field(ge=1, description="Effective oversampling factor")
    interp: InterpType

    @property
    def top_candidate(self) -> FftCandidate | None:
        if self.num_candidates == 0:
            return None
        return self.candidates[0]


class MiniFftSearchResult(FrozenModel):
    """Ranked binary candidates from `search_minifft`."""

    candidates: list[BinaryCandidate]
    numharmsum: int = Field(ge=1)
    numbetween: int = Field(ge=1, description="Effective oversampling factor")
    interp: InterpType
    check_aliased: bool

    @property
    def num_candidates(self) -> int:
        """Number of slots holding a genuine detection."""
        return sum(1 for c in self.candidates if not c.is_sentinel)

    @property
    def genuine_candidates(self) -> list[BinaryCandidate]:
        return [c for c in self.candidates if not c.is_sentinel]
