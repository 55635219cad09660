"""Plain-text rendering of binary search candidates.

Nothing here touches the filesystem; callers decide where the text goes.
"""

from __future__ import annotations

from collections.abc import Sequence

from fftsearch.annotate import NOTE_WIDTH
from fftsearch.domain.candidates import BinaryCandidate
from fftsearch.errors import InvalidCandidateCountError

LINES_PER_PAGE = 87

_HEADER = (
    "#               P_orbit +/- Error   P_pulsar +/- Error   FullFFT   MiniFFT   MiniFFT  Num   Sum                   \n"
    "# Cand  Sigma         (sec)                (sec)         Low Bin   Length      Bin    Sum  Power  Notes           \n"
    "#------------------------------------------------------------------------------------------------------------------\n"
)

_FOOTER = "\n Notes:  MH = Modulation harmonic.  H = Pulsar harmonic.  # indicates the candidate number.\n"


def _format_psr_p(psr_p: float, width: int) -> str:
    if psr_p < 0.001:
        return f"{psr_p:{width}.5e}"
    return f"{psr_p:{width}.9f}"


def _candidate_row(number: int, cand: BinaryCandidate, note: str) -> str:
    return (
        f" {number:4d} {cand.mini_sigma:7.3f}  "
        f" {cand.orb_p:8.2f}"
        f" {cand.orb_p_err:<7.2g} "
        f" {_format_psr_p(cand.psr_p, 12)}"
        f" {cand.psr_p_err:<7.2g} "
        f" {cand.full_lo_r:9.0f}  "
        f" {cand.mini_n:6.0f} "
        f" {cand.mini_r:8.1f} "
        f" {cand.mini_numsum:2.0f} "
        f"{cand.mini_power:7.2f} "
        f" {note[:NOTE_WIDTH]}\n"
    )


def format_binary_candidates(
    cands: Sequence[BinaryCandidate],
    notes: Sequence[str] | None = None,
    *,
    lines_per_page: int = LINES_PER_PAGE,
) -> str:
    """Render candidates as a fixed-width table, repeating the header per page.

    Raises:
        InvalidCandidateCountError: if `cands` is empty.
    """
    if len(cands) <= 0:
        raise InvalidCandidateCountError(len(cands), "format_binary_candidates")
    if lines_per_page < 1:
        raise ValueError(f"lines_per_page must be >= 1, got {lines_per_page}")
    if notes is None:
        notes = [""] * len(cands)
    elif len(notes) != len(cands):
        raise ValueError(f"Got {len(notes)} notes for {len(cands)} candidates")

    parts: list[str] = []
    for start in range(0, len(cands), lines_per_page):
        parts.append(_HEADER)
        for k in range(start, min(start + lines_per_page, len(cands))):
            parts.append(_candidate_row(k + 1, cands[k], notes[k]))
    parts.append(_FOOTER)
    return "".join(parts)


def describe_binary_candidate(cand: BinaryCandidate) -> str:
    """Multi-line summary of one candidate."""
    lines = [
        f"  Sigma       =  {cand.mini_sigma:<7.3f}",
        f"  Orbit p     =  {cand.orb_p:<8.2f}",
        f"  Pulsar p    =  {_format_psr_p(cand.psr_p, 0).strip()}",
        f"  rlo (full)  =  {cand.full_lo_r:<10.0f}",
        f"  N (mini)    =  {cand.mini_n:<6.0f}",
        f"  r (detect)  =  {cand.mini_r:<9.3f}",
        f"  Power       =  {cand.mini_power:<8.3f}",
        f"  Numsum      =  {cand.mini_numsum:<2.0f}",
        f"  N (full)    =  {cand.full_n:<10.0f}",
        f"  T (full)    =  {cand.full_t:<13.6f}",
    ]
    return "\n".join(lines) + "\n"
