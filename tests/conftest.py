from __future__ import annotations

import numpy as np
import pytest


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator so injected-signal tests are deterministic."""
    return np.random.default_rng(42)
