"""Tests for the bivariate normal CDF helper."""

import math

import numpy as np
import pytest
from scipy.special import owens_t
from scipy.stats import norm

from ptbarrier import InvalidParameter, NumericalInstability
from ptbarrier.bivariate import bivariate_normal_cdf, bivariate_normal_cdf_grid


def _owen_reference(h: float, k: float, rho: float) -> float:
    """Owen (1956): Phi2 through Owen's T function, valid for h, k != 0, |rho| < 1."""
    s = math.sqrt(1.0 - rho * rho)
    a_h = (k - rho * h) / (h * s)
    a_k = (h - rho * k) / (k * s)
    beta = 0.0 if h * k > 0 else 0.5
    return float(
        0.5 * (norm.cdf(h) + norm.cdf(k)) - owens_t(h, a_h) - owens_t(k, a_k) - beta
    )


# ---------------------------------------------------------------------------
# Closed-form reference values
# ---------------------------------------------------------------------------

class TestClosedForms:

    def test_origin_arcsine_law(self, band_correlations):
        """M(0, 0; rho) = 1/4 + asin(rho) / (2 pi) in every quadrature band."""
        for rho in band_correlations:
            expected = 0.25 + math.asin(rho) / (2 * math.pi)
            assert bivariate_normal_cdf(0.0, 0.0, rho) == pytest.approx(expected, abs=1e-11)

    def test_independence_is_product(self, limit_points):
        for a in limit_points:
            for b in limit_points:
                expected = norm.cdf(a) * norm.cdf(b)
                assert bivariate_normal_cdf(a, b, 0.0) == pytest.approx(expected, abs=1e-14)

    def test_matches_owens_t(self, limit_points, band_correlations):
        for rho in band_correlations:
            if abs(rho) >= 1.0:
                continue
            for a in limit_points:
                for b in limit_points:
                    got = bivariate_normal_cdf(a, b, rho)
                    assert got == pytest.approx(_owen_reference(a, b, rho), abs=1e-9), (a, b, rho)

    def test_perfect_correlation(self, limit_points):
        for a in limit_points:
            for b in limit_points:
                assert bivariate_normal_cdf(a, b, 1.0) == pytest.approx(
                    norm.cdf(min(a, b)), abs=1e-14
                )
                assert bivariate_normal_cdf(a, b, -1.0) == pytest.approx(
                    max(0.0, norm.cdf(a) + norm.cdf(b) - 1.0), abs=1e-14
                )


# ---------------------------------------------------------------------------
# Structural identities
# ---------------------------------------------------------------------------

class TestIdentities:

    def test_symmetric_in_limits(self, limit_points, band_correlations):
        for rho in band_correlations:
            for a in limit_points:
                for b in limit_points:
                    assert bivariate_normal_cdf(a, b, rho) == pytest.approx(
                        bivariate_normal_cdf(b, a, rho), abs=1e-13
                    )

    def test_complement_identity(self, limit_points, band_correlations):
        """M(a, b; rho) + M(a, -b; -rho) = N(a)."""
        for rho in band_correlations:
            for a in limit_points:
                for b in limit_points:
                    total = bivariate_normal_cdf(a, b, rho) + bivariate_normal_cdf(a, -b, -rho)
                    assert total == pytest.approx(norm.cdf(a), abs=1e-12)

    def test_monotone_in_correlation(self):
        rhos = np.linspace(-0.99, 0.99, 41)
        values = [bivariate_normal_cdf(0.3, -0.4, rho) for rho in rhos]
        assert np.all(np.diff(values) > 0)

    def test_result_in_unit_interval(self, band_correlations):
        for rho in band_correlations:
            for a, b in ((-8.0, -8.0), (8.0, 8.0), (-8.0, 8.0), (3.0, -3.0)):
                value = bivariate_normal_cdf(a, b, rho)
                assert 0.0 <= value <= 1.0


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------

class TestEdgeCases:

    def test_infinite_limits(self):
        assert bivariate_normal_cdf(-math.inf, 0.5, 0.3) == 0.0
        assert bivariate_normal_cdf(0.5, -math.inf, 0.3) == 0.0
        assert bivariate_normal_cdf(math.inf, 0.5, 0.3) == pytest.approx(norm.cdf(0.5))
        assert bivariate_normal_cdf(0.5, math.inf, -0.3) == pytest.approx(norm.cdf(0.5))
        assert bivariate_normal_cdf(math.inf, math.inf, 0.9) == pytest.approx(1.0)

    def test_huge_arguments_tiny_correlation(self):
        """Cover event next to the evaluation date: limits ~1e4, rho ~1e-5."""
        assert bivariate_normal_cdf(0.7, 2.0e4, 1e-5) == pytest.approx(norm.cdf(0.7), abs=1e-14)
        assert bivariate_normal_cdf(0.7, -2.0e4, 1e-5) == pytest.approx(0.0, abs=1e-14)

    def test_huge_arguments_near_unit_correlation(self):
        value = bivariate_normal_cdf(-2.0e4, 1.5e4, -0.97)
        assert value == pytest.approx(0.0, abs=1e-14)
        value = bivariate_normal_cdf(40.0, -35.0, 0.97)
        assert value == pytest.approx(0.0, abs=1e-14)

    def test_rho_rounding_slack(self):
        assert bivariate_normal_cdf(0.2, 0.1, 1.0 + 1e-14) == pytest.approx(norm.cdf(0.1))

    def test_rho_out_of_range(self):
        with pytest.raises(InvalidParameter, match="rho must be in"):
            bivariate_normal_cdf(0.0, 0.0, 1.5)

    def test_nan_input(self):
        with pytest.raises(NumericalInstability, match="NaN"):
            bivariate_normal_cdf(float("nan"), 0.0, 0.5)


class TestGrid:

    def test_grid_matches_scalar(self, limit_points):
        a = limit_points[:, None]
        b = limit_points[None, :]
        grid = bivariate_normal_cdf_grid(a, b, 0.6)
        assert grid.shape == (len(limit_points), len(limit_points))
        for i, ai in enumerate(limit_points):
            for j, bj in enumerate(limit_points):
                assert grid[i, j] == bivariate_normal_cdf(ai, bj, 0.6)
