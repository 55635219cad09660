"""Known-pulsar matching for binary candidates (metrics-only).

This module checks a binary candidate against a catalog of known pulsars:
the pulsar must lie near the observed position, be in a binary, and have a
spin-period harmonic and an orbital-period harmonic that agree with the
candidate within its period uncertainties.

Design notes:
- This is intended to be reusable and open-safe: it contains no curated
  datasets. Host apps provide their catalog as CSV or JSON.
"""

from __future__ import annotations

import csv
import json
import math
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from fftsearch.domain.candidates import BinaryCandidate

SECONDS_PER_DAY = 86400.0
MAX_SPIN_HARMONIC = 40
MAX_ORBIT_HARMONIC = 9

# Candidate positions within this many beam diameters of a pulsar are checked.
BEAM_SEARCH_FACTOR = 5.0


def ordinal(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 22 -> '22nd'."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _with_epoch_letter(name: str, letter: str) -> str:
    name = name.strip()
    if name[:1].upper() == letter:
        return letter + name[1:]
    return letter + name


@dataclass
class KnownPulsar:
    """An entry in the pulsar catalog."""

    jname: str
    ra_deg: float
    dec_deg: float
    p: float  # spin period at `epoch_mjd` (s)
    pdot: float = 0.0
    epoch_mjd: float = 0.0
    pb_days: float | None = None  # orbital period, None if isolated
    bname: str = ""

    def __post_init__(self) -> None:
        if self.p <= 0:
            raise ValueError(f"period must be positive, got {self.p}")

    @property
    def is_binary(self) -> bool:
        return self.pb_days is not None and self.pb_days > 0

    @property
    def name(self) -> str:
        """Designation with its epoch letter, B-name preferred (e.g. 'B1913+16')."""
        if self.bname:
            return _with_epoch_letter(self.bname, "B")
        return _with_epoch_letter(self.jname, "J")

    def period_at(self, epoch_mjd: float) -> float:
        """Spin period predicted at `epoch_mjd`."""
        return self.p + self.pdot * SECONDS_PER_DAY * (epoch_mjd - self.epoch_mjd)


@dataclass(frozen=True)
class ObservationInfo:
    """Pointing and epoch of the observation a candidate came from."""

    ra_deg: float
    dec_deg: float
    fov_arcsec: float  # beam width
    epoch_mjd: float


@dataclass(frozen=True)
class PulsarMatch:
    """A catalog pulsar that explains a binary candidate."""

    pulsar: KnownPulsar
    catalog_index: int  # 1-based
    spin_harmonic: int
    orbit_harmonic: int
    predicted_period: float
    separation_arcsec: float

    def describe(self, full: bool = False) -> str:
        psr = self.pulsar
        k = ordinal(self.orbit_harmonic)
        if not full:
            if self.spin_harmonic > 1:
                return f"{k} H {psr.name}"
            return f"PSR {psr.name}"
        of_what = (
            f"of the {ordinal(self.spin_harmonic)} harmonic of PSR"
            if self.spin_harmonic > 1
            else "of PSR"
        )
        # B-named pulsars seen at a spin harmonic are reported as modulation harmonics.
        kind = "modulation" if psr.bname and self.spin_harmonic > 1 else "phasemod"
        return (
            f"Possibly the {k} {kind} harmonic {of_what} {psr.name} "
            f"(p = {self.predicted_period:11.7f} s, pbin = {psr.pb_days:9.4f} d)."
        )


NO_MATCH_DESCRIPTION = "I don't recognize this candidate in the pulsar database."


def _compute_angular_separation(ra1: float, dec1: float, ra2: float, dec2: float) -> float:
    """Compute angular separation between two sky positions in arcseconds."""
    ra1_rad = math.radians(ra1)
    dec1_rad = math.radians(dec1)
    ra2_rad = math.radians(ra2)
    dec2_rad = math.radians(dec2)

    delta_ra = ra2_rad - ra1_rad

    cos_dec1 = math.cos(dec1_rad)
    cos_dec2 = math.cos(dec2_rad)
    sin_dec1 = math.sin(dec1_rad)
    sin_dec2 = math.sin(dec2_rad)

    numerator = math.sqrt(
        (cos_dec2 * math.sin(delta_ra)) ** 2
        + (cos_dec1 * sin_dec2 - sin_dec1 * cos_dec2 * math.cos(delta_ra)) ** 2
    )
    denominator = sin_dec1 * sin_dec2 + cos_dec1 * cos_dec2 * math.cos(delta_ra)

    separation_rad = math.atan2(numerator, denominator)
    return math.degrees(separation_rad) * 3600.0


def _ra_difference_deg(ra1: float, ra2: float) -> float:
    """Absolute RA difference in degrees, wrapped into [0, 180]."""
    diff = abs(ra1 - ra2) % 360.0
    return min(diff, 360.0 - diff)


def match_binary_candidate(
    cand: BinaryCandidate,
    obs: ObservationInfo,
    catalog: Iterable[KnownPulsar],
) -> PulsarMatch | None:
    """Return the first catalog binary pulsar consistent with `cand`, if any.

    A pulsar matches when it is within `BEAM_SEARCH_FACTOR` beam diameters of
    the pointing, some spin harmonic `p / j` (j <= 40) is within `psr_p_err` of
    the candidate's spin period, and some orbital harmonic `pb * k` (k <= 9) is
    within `orb_p_err` of the candidate's orbital period.
    """
    radius_arcsec = BEAM_SEARCH_FACTOR * 2.0 * obs.fov_arcsec
    radius_deg = radius_arcsec / 3600.0
    psr_err = cand.psr_p_err
    orb_err = cand.orb_p_err

    for idx, psr in enumerate(catalog, start=1):
        if _ra_difference_deg(psr.ra_deg, obs.ra_deg) >= radius_deg:
            continue
        separation = _compute_angular_separation(psr.ra_deg, psr.dec_deg, obs.ra_deg, obs.dec_deg)
        if separation >= radius_arcsec or not psr.is_binary:
            continue

        predicted = psr.period_at(obs.epoch_mjd)
        pb_seconds = float(psr.pb_days) * SECONDS_PER_DAY
        for j in range(1, MAX_SPIN_HARMONIC + 1):
            if abs(predicted / j - cand.psr_p) >= psr_err:
                continue
            for k in range(1, MAX_ORBIT_HARMONIC + 1):
                if abs(pb_seconds * k - cand.orb_p) < orb_err:
                    return PulsarMatch(
                        pulsar=psr,
                        catalog_index=idx,
                        spin_harmonic=j,
                        orbit_harmonic=k,
                        predicted_period=predicted,
                        separation_arcsec=separation,
                    )
    return None


def describe_candidate_match(
    cand: BinaryCandidate,
    obs: ObservationInfo,
    catalog: Iterable[KnownPulsar],
    *,
    full: bool = False,
) -> tuple[int, str]:
    """Return `(catalog_index or 0, text)` describing what `cand` may be."""
    match = match_binary_candidate(cand, obs, catalog)
    if match is None:
        return 0, NO_MATCH_DESCRIPTION if full else ""
    return match.catalog_index, match.describe(full=full)


def _pulsar_from_dict(d: dict[str, Any]) -> KnownPulsar:
    pb = d.get("pb_days")
    return KnownPulsar(
        jname=str(d["jname"]),
        ra_deg=float(d["ra_deg"]),
        dec_deg=float(d["dec_deg"]),
        p=float(d["p"]),
        pdot=float(d.get("pdot") or 0.0),
        epoch_mjd=float(d.get("epoch_mjd") or 0.0),
        pb_days=float(pb) if pb not in (None, "") else None,
        bname=str(d.get("bname") or ""),
    )


def save_catalog(pulsars: Iterable[KnownPulsar], path: Path) -> None:
    """Save a pulsar catalog to a JSON file."""
    data = {"version": "1.0", "pulsars": [asdict(p) for p in pulsars]}
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def load_pulsar_catalog(path: Path) -> list[KnownPulsar]:
    """Load a pulsar catalog from a JSON (``{"pulsars": [...]}``) or CSV file."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        with open(path) as f:
            data = json.load(f)
        if "pulsars" not in data:
            raise ValueError(f"Invalid catalog file: missing 'pulsars' key in {path}")
        return [_pulsar_from_dict(d) for d in data["pulsars"]]

    required_columns = {"jname", "ra_deg", "dec_deg", "p"}
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError(f"Empty or invalid CSV file: {path}")
        missing = required_columns - set(reader.fieldnames)
        if missing:
            raise ValueError(f"Missing required columns: {sorted(missing)}")
        return [_pulsar_from_dict(row) for row in reader]


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
