from __future__ import annotations

import math

import numpy as np
import pytest
from scipy import special, stats

from fftsearch.compute.significance import (
    candidate_sigma,
    chi2_for_logp,
    chi2_logp,
    equivalent_gaussian_sigma,
    power_for_sigma,
)


class TestCandidateSigma:
    def test_single_harmonic_closed_form(self) -> None:
        # For one harmonic the chance probability of power P is exp(-P).
        assert candidate_sigma(10.0, 1, 1) == pytest.approx(stats.norm.isf(math.exp(-10.0)), rel=1e-9)

    def test_non_positive_power_has_no_significance(self) -> None:
        assert candidate_sigma(0.0, 1, 1) == 0.0
        assert candidate_sigma(-3.0, 4, 100) == 0.0

    def test_increases_with_power(self) -> None:
        sigmas = [candidate_sigma(p, 2, 1000) for p in (5.0, 10.0, 20.0, 40.0)]
        assert sigmas == sorted(sigmas)

    def test_trials_reduce_significance(self) -> None:
        assert candidate_sigma(30.0, 1, 1e6) < candidate_sigma(30.0, 1, 1)

    def test_swamped_by_trials_maps_to_zero(self) -> None:
        assert candidate_sigma(1.0, 1, 1e9) == 0.0

    def test_extreme_power_stays_finite(self) -> None:
        sigma = candidate_sigma(5000.0, 1, 1)
        assert np.isfinite(sigma)
        assert sigma > 90.0


class TestPowerForSigma:
    @pytest.mark.parametrize(
        "sigma,numsum,numtrials",
        [(3.0, 1, 1), (5.0, 1, 1), (6.0, 4, 1024), (8.0, 16, 1e6)],
    )
    def test_inverts_candidate_sigma(self, sigma: float, numsum: int, numtrials: float) -> None:
        power = power_for_sigma(sigma, numsum, numtrials)
        assert candidate_sigma(power, numsum, numtrials) == pytest.approx(sigma, rel=1e-6)

    def test_more_harmonics_need_more_power(self) -> None:
        assert power_for_sigma(5.0, 4, 1) > power_for_sigma(5.0, 1, 1)

    def test_trials_clamped_to_one(self) -> None:
        assert power_for_sigma(4.0, 2, 0) == power_for_sigma(4.0, 2, 1)


def test_chi2_logp_matches_scipy() -> None:
    assert chi2_logp(12.0, 4.0) == pytest.approx(math.log(stats.chi2.sf(12.0, 4.0)))


def test_equivalent_gaussian_sigma_of_certainty() -> None:
    assert equivalent_gaussian_sigma(0.0) == 0.0
    assert equivalent_gaussian_sigma(math.log(0.5)) == pytest.approx(0.0, abs=1e-12)


class TestBrightSignals:
    @pytest.mark.parametrize("power", [1e3, 1e4, 1e5])
    def test_single_harmonic_sigma_is_finite(self, power: float) -> None:
        # One harmonic: log p = -P exactly.
        assert chi2_logp(2.0 * power, 2.0) == pytest.approx(-power, rel=1e-12)
        sigma = candidate_sigma(power, 1, 1)
        assert np.isfinite(sigma)
        assert sigma == pytest.approx(-special.ndtri_exp(-power), rel=1e-9)

    def test_sigma_keeps_ranking_bright_powers(self) -> None:
        sigmas = [candidate_sigma(p, 4, 1e4) for p in (900.0, 4000.0, 2e4, 1e5)]
        assert all(np.isfinite(sigmas))
        assert sigmas == sorted(sigmas)
        assert len(set(sigmas)) == 4

    def test_asymptotic_tail_matches_closed_form(self) -> None:
        # dof = 4: sf(x) = exp(-x/2) (1 + x/2).
        assert chi2_logp(100.0, 4.0) == pytest.approx(-50.0 + math.log(51.0), rel=1e-12)
        assert chi2_logp(3000.0, 4.0) == pytest.approx(-1500.0 + math.log(1501.0), rel=1e-12)

    @pytest.mark.parametrize("sigma,numsum", [(38.0, 1), (60.0, 2), (200.0, 8), (447.0, 1)])
    def test_power_for_sigma_beyond_double_range(self, sigma: float, numsum: int) -> None:
        power = power_for_sigma(sigma, numsum, 1)
        assert np.isfinite(power)
        assert candidate_sigma(power, numsum, 1) == pytest.approx(sigma, rel=1e-6)

    def test_chi2_for_logp_inverts_far_tail(self) -> None:
        assert chi2_for_logp(-5000.0, 2.0) == pytest.approx(10000.0, rel=1e-10)
        assert chi2_for_logp(0.0, 6.0) == 0.0
