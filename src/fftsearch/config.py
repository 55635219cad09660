"""Search configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from fftsearch.compute.padding import LOWACC_HALFWIDTH
from fftsearch.domain.candidates import InterpType


@dataclass(frozen=True)
class SearchConfig:
    """
    Configuration shared by the plain and binary spectrum searches.

    This dataclass is frozen (immutable) so one configuration can be reused
    across many mini-spectra of a long observation.

    Attributes
    ----------
    numharmsum : int
        Highest harmonic order summed during the search (default: 1).
    numbetween : int
        Oversampling factor; forced to 2 when interbinning (default: 2).
    interp : InterpType
        INTERBIN (fast) or INTERPOLATE (more sensitive).
    norm : float
        Powers are divided by this value (plain search only).
    sigmacutoff : float
        Minimum trials-corrected significance kept when `numcands` is 0.
    numcands : int
        Fixed number of candidates, or 0 for a sigma-driven count. The binary
        search always needs a positive count.
    check_aliased : bool
        Also search frequencies aliased about Nyquist (binary search only).
    lowacc_halfwidth : int
        Low-accuracy response half-width bounding the pad (bins).
    """

    numharmsum: int = 1
    numbetween: int = 2
    interp: InterpType = InterpType.INTERBIN
    norm: float = 1.0
    sigmacutoff: float = 3.0
    numcands: int = 0
    check_aliased: bool = False
    lowacc_halfwidth: int = LOWACC_HALFWIDTH

    def __post_init__(self) -> None:
        if not isinstance(self.interp, InterpType):
            object.__setattr__(self, "interp", InterpType(str(self.interp).upper()))
        self.validate()

    def validate(self) -> None:
        if self.numharmsum < 1:
            raise ValueError(f"numharmsum must be >= 1, got {self.numharmsum}")
        if self.numbetween < 2:
            raise ValueError(f"numbetween must be >= 2, got {self.numbetween}")
        if not self.norm > 0.0:
            raise ValueError(f"norm must be positive, got {self.norm}")
        if self.numcands < 0:
            raise ValueError(f"numcands must be >= 0, got {self.numcands}")
        if self.lowacc_halfwidth < 1:
            raise ValueError(f"lowacc_halfwidth must be >= 1, got {self.lowacc_halfwidth}")

    @property
    def effective_numbetween(self) -> int:
        return 2 if self.interp == InterpType.INTERBIN else int(self.numbetween)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> SearchConfig:
        """Build a config from a JSON-like mapping; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown search config keys: {', '.join(unknown)}")
        return cls(**dict(values))

    def with_overrides(self, **overrides: Any) -> SearchConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["interp"] = self.interp.value
        return out

    def search_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for `fftsearch.search.search_fft`."""
        return {
            "numharmsum": self.numharmsum,
            "numbetween": self.numbetween,
            "interp": self.interp,
            "norm": self.norm,
            "sigmacutoff": self.sigmacutoff,
            "numcands": self.numcands,
            "lowacc_halfwidth": self.lowacc_halfwidth,
        }

    def minifft_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for `fftsearch.search.search_minifft` (less `numcands`)."""
        return {
            "numharmsum": self.numharmsum,
            "numbetween": self.numbetween,
            "interp": self.interp,
            "check_aliased": self.check_aliased,
            "lowacc_halfwidth": self.lowacc_halfwidth,
        }
