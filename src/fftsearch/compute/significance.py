"""Gaussian-equivalent significance of (summed) Fourier powers.

A normalized power summed over `numsum` harmonics of pure noise is distributed
as chi-squared with `2 * numsum` degrees of freedom (in units of `2 * power`).
Significances are corrected for `numtrials` independent trials.

Everything is carried as a log probability. Bright pulsars routinely produce
powers of 1e3 to 1e5, whose tail probabilities are far below the smallest
double, so the far tail uses the asymptotic expansion of the incomplete gamma
function (Abramowitz & Stegun 26.4.19) instead of `scipy.stats.chi2.logsf`.
"""

from __future__ import annotations

import math

from scipy import optimize, special, stats

# Above these chi2/dof ratios the asymptotic expansion is used.
ASYMPTOTIC_CHI2_RATIO = 15.0
ASYMPTOTIC_CHI2_RATIO_HIGH_DOF = 6.0
HIGH_DOF = 150.0

# Below this log probability `chi2.isf` can no longer be handed exp(logq).
MIN_DIRECT_LOG_Q = -700.0


def _log_asymptotic_incomplete_gamma(a: float, z: float) -> float:
    """log of the upper incomplete gamma function Gamma(a, z) for z >> a.

    The series terminates (and is exact) for integer `a`. Otherwise it is
    truncated at its smallest term.
    """
    x = 1.0
    term = 1.0
    ii = 1
    while True:
        new_term = term * (a - ii) / z
        if abs(new_term) <= 1e-15 or abs(new_term) >= abs(term):
            break
        x += new_term
        term = new_term
        ii += 1
    return (a - 1.0) * math.log(z) - z + math.log(x)


def chi2_logp(chi2: float, dof: float) -> float:
    """Natural log of the chi-squared survival probability.

    Stays finite for arbitrarily large `chi2`.
    """
    if chi2 <= 0.0:
        return 0.0
    ratio = chi2 / dof
    if ratio > ASYMPTOTIC_CHI2_RATIO or (dof > HIGH_DOF and ratio > ASYMPTOTIC_CHI2_RATIO_HIGH_DOF):
        a = 0.5 * dof
        return _log_asymptotic_incomplete_gamma(a, 0.5 * chi2) - float(special.gammaln(a))
    return float(stats.chi2.logsf(chi2, dof))


def chi2_for_logp(logq: float, dof: float) -> float:
    """Inverse of `chi2_logp`: the chi-squared value whose log survival is `logq`."""
    if logq >= 0.0:
        return 0.0
    if logq > MIN_DIRECT_LOG_Q:
        return float(stats.chi2.isf(math.exp(logq), dof))

    def excess(x: float) -> float:
        return chi2_logp(x, dof) - logq

    # Far tail: logp ~ (a - 1) log(z) - z, so z ~ -logq brackets the root.
    lo = max(float(dof), -logq)
    while excess(lo) <= 0.0:
        lo *= 0.5
    hi = 2.0 * lo
    while excess(hi) > 0.0:
        hi *= 2.0
    return float(optimize.brentq(excess, lo, hi, xtol=1e-12, rtol=1e-14))


def equivalent_gaussian_sigma(logp: float) -> float:
    """One-sided Gaussian sigma whose tail probability is `exp(logp)`.

    Probabilities of 1 or more (after a trials correction) carry no
    significance and map to 0.0.
    """
    if logp >= 0.0:
        return 0.0
    return float(-special.ndtri_exp(logp))


def candidate_sigma(power: float, numsum: int, numtrials: float) -> float:
    """Approximate significance of a candidate of `numsum` summed powers."""
    if power <= 0.0:
        return 0.0
    logp = chi2_logp(2.0 * power, 2.0 * numsum)
    if numtrials > 1.0:
        logp += math.log(numtrials)
    return equivalent_gaussian_sigma(logp)


def power_for_sigma(sigma: float, numsum: int, numtrials: float) -> float:
    """Summed power needed to reach `sigma` after `numtrials` trials."""
    logq = float(stats.norm.logsf(sigma)) - math.log(max(float(numtrials), 1.0))
    return 0.5 * chi2_for_logp(logq, 2.0 * numsum)
