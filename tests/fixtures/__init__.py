"""Synthetic spectra shared by the search tests."""

from tests.fixtures.spectra import make_minifft, make_real_spectrum

__all__ = ["make_minifft", "make_real_spectrum"]
