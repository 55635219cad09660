"""Cross-candidate annotation of binary search results.

Mini-spectrum searches of neighbouring stretches of a long spectrum tend to
detect the same binary, or its spin/orbital harmonics, several times. These
helpers flag such repeats so a human can skim a candidate list quickly.
"""

from __future__ import annotations

from collections.abc import Sequence

from fftsearch.domain.candidates import BinaryCandidate

NOTE_WIDTH = 18
MAX_SPIN_HARMONIC = 40
MAX_ORBIT_HARMONIC = 9

# Candidates closer than this (mini-spectrum bins) are considered one detection.
DUPLICATE_R_TOLERANCE = 0.6


def is_new_binary_candidate(new: BinaryCandidate, existing: Sequence[BinaryCandidate]) -> bool:
    """False if `existing` already holds a stronger version of `new`.

    The scan stops at the first sentinel entry.
    """
    for cand in existing:
        if cand.mini_sigma == 0.0:
            break
        if (
            cand.mini_n == new.mini_n
            and abs(cand.mini_r - new.mini_r) < DUPLICATE_R_TOLERANCE
            and cand.mini_sigma > new.mini_sigma
        ):
            return False
    return True


def _note(text: str) -> str:
    return text[:NOTE_WIDTH]


def annotate_binary_candidates(cands: Sequence[BinaryCandidate]) -> list[str]:
    """Return one note per candidate ("" when nothing was found).

    Candidate `j` is noted as a repeat of another candidate `i`
    ("Same as #i?") or as a harmonic of it ("MH=<orbit> H=<spin> of #i")
    when the long-spectrum start bins agree for some spin harmonic and the
    orbital periods agree for some orbital harmonic. Only the first note for
    each candidate is kept; numbering is 1-based.
    """
    notes = [""] * len(cands)
    for ii, ref in enumerate(cands):
        if ref.is_sentinel:
            continue
        for jj, other in enumerate(cands):
            if ii == jj or other.is_sentinel or other.mini_n == 0.0:
                continue
            perr = other.orb_p_err
            for kk in range(1, MAX_SPIN_HARMONIC + 1):
                if abs(ref.full_lo_r - other.full_lo_r / kk) >= ref.mini_n:
                    continue
                for ll in range(1, MAX_ORBIT_HARMONIC + 1):
                    if abs(ref.orb_p - other.orb_p / ll) >= perr:
                        continue
                    if not notes[jj]:
                        if ll == 1 and kk == 1:
                            notes[jj] = _note(f"Same as #{ii + 1}?")
                        else:
                            notes[jj] = _note(f"MH={ll} H={kk} of #{ii + 1}")
                        break
    return notes
