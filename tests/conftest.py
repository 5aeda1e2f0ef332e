"""Shared fixtures for ptbarrier tests."""

import numpy as np
import pytest


# ---------------------------------------------------------------------------
# Correlations
# ---------------------------------------------------------------------------

@pytest.fixture
def band_correlations():
    """One or more correlations in every quadrature band of the CDF helper."""
    return np.array([-0.999, -0.95, -0.8, -0.5, -0.1, 0.0, 0.2, 0.6, 0.9, 0.93, 0.99, 0.9999])


@pytest.fixture
def limit_points():
    """Integration limits away from zero (Owen's T reference needs h, k != 0)."""
    return np.array([-2.5, -1.0, -0.3, 0.4, 1.7])
