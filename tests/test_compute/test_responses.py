from __future__ import annotations

import numpy as np
import pytest

from fftsearch.compute.responses import gen_r_response, place_complex_kernel


class TestGenRResponse:
    def test_centre_is_unity_for_zero_offset(self) -> None:
        resp = gen_r_response(0.0, 2, 8)
        assert resp[4] == pytest.approx(1.0 + 0.0j)

    def test_magnitude_is_sinc(self) -> None:
        numbetween, numkern = 4, 32
        resp = gen_r_response(0.3, numbetween, numkern)
        x = np.pi * (numkern / (2.0 * numbetween) + 0.3) - np.pi * np.arange(numkern) / numbetween
        np.testing.assert_allclose(np.abs(resp), np.abs(np.sin(x) / x), rtol=1e-12)

    def test_phase_follows_argument(self) -> None:
        resp = gen_r_response(0.3, 2, 16)
        x = np.pi * (4.0 + 0.3) - np.pi * np.arange(16) / 2
        expected = np.exp(1j * x) * np.sin(x) / x
        np.testing.assert_allclose(resp, expected, rtol=1e-12, atol=1e-15)

    def test_whole_bin_offsets_vanish(self) -> None:
        resp = gen_r_response(0.0, 2, 16)
        others = np.delete(resp[::2], 4)
        assert np.max(np.abs(others)) < 1e-12

    @pytest.mark.parametrize(
        "roffset,numbetween,numkern",
        [(1.0, 2, 8), (-0.1, 2, 8), (0.0, 0, 8), (0.0, 2, 7), (0.0, 2, 0)],
    )
    def test_invalid_arguments(self, roffset: float, numbetween: int, numkern: int) -> None:
        with pytest.raises(ValueError):
            gen_r_response(roffset, numbetween, numkern)


class TestPlaceComplexKernel:
    def test_wraps_negative_lags_to_end(self) -> None:
        kernel = np.array([1 + 1j, 2 + 2j, 3 + 3j, 4 + 4j])
        placed = place_complex_kernel(kernel, 8)
        np.testing.assert_array_equal(placed, [3 + 3j, 4 + 4j, 0, 0, 0, 0, 1 + 1j, 2 + 2j])

    def test_kernel_too_long(self) -> None:
        with pytest.raises(ValueError, match="does not fit"):
            place_complex_kernel(np.ones(10, dtype=complex), 8)
