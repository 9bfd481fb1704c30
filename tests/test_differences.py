"""
Tests for the nine-point finite difference stencils.

Reference values are computed by hand on a 5x5 ramp field with periodic
wraparound.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from thinfilm.differences import (
    neighbours,
    gradient,
    laplacian,
    gradient_fast,
    laplacian_fast,
)


@pytest.fixture
def ramp():
    """f[i, j] = 5 i + j + 1 on a 5x5 lattice."""
    return np.arange(1.0, 26.0).reshape(5, 5)


class TestNeighbours:
    """Test periodic neighbour views."""

    def test_shifted_values(self, ramp):
        """Neighbour views pick the periodic neighbours."""
        fip, fjp, fim, fjm, fipjp, fimjp, fimjm, fipjm = neighbours(ramp)

        assert fip[0, 0] == ramp[1, 0]
        assert fim[0, 0] == ramp[4, 0]
        assert fjp[0, 0] == ramp[0, 1]
        assert fjm[0, 0] == ramp[0, 4]
        assert fipjp[0, 0] == ramp[1, 1]
        assert fimjp[0, 0] == ramp[4, 1]
        assert fimjm[0, 0] == ramp[4, 4]
        assert fipjm[0, 0] == ramp[1, 4]


class TestGradient:
    """Test the nine-point gradient."""

    def test_ramp_x(self, ramp):
        """x derivative of the ramp, boundary rows see the wraparound jump."""
        gx, _ = gradient(ramp)

        expected = np.full((5, 5), 5.0)
        expected[0, :] = -7.5
        expected[4, :] = -7.5

        np.testing.assert_allclose(gx, expected, atol=1e-12)

    def test_ramp_y(self, ramp):
        """y derivative of the ramp."""
        _, gy = gradient(ramp)

        expected = np.full((5, 5), 1.0)
        expected[:, 0] = -1.5
        expected[:, 4] = -1.5

        np.testing.assert_allclose(gy, expected, atol=1e-12)

    def test_constant_field(self):
        """Gradient of a constant field vanishes."""
        gx, gy = gradient(np.full((8, 6), 3.7))

        np.testing.assert_allclose(gx, 0.0, atol=1e-14)
        np.testing.assert_allclose(gy, 0.0, atol=1e-14)

    def test_scale(self, ramp):
        """The scale factor multiplies both components."""
        gx, gy = gradient(ramp)
        gx2, gy2 = gradient(ramp, -2.0)

        np.testing.assert_allclose(gx2, -2.0 * gx)
        np.testing.assert_allclose(gy2, -2.0 * gy)

    def test_fast_matches_reference(self):
        """Numba gradient matches the NumPy version."""
        rng = np.random.default_rng(1)
        f = rng.random((17, 11))

        gx, gy = gradient(f, 0.5)
        gx_fast, gy_fast = gradient_fast(f, 0.5)

        np.testing.assert_allclose(gx_fast, gx, rtol=1e-12, atol=1e-14)
        np.testing.assert_allclose(gy_fast, gy, rtol=1e-12, atol=1e-14)

    def test_quasi_one_dimensional(self):
        """With ly = 1 the x derivative is the central difference."""
        f = np.array([1.0, 4.0, 9.0, 16.0, 25.0, 36.0])[:, None]
        gx, gy = gradient(f)

        expected = 0.5 * (np.roll(f, -1, axis=0) - np.roll(f, 1, axis=0))

        np.testing.assert_allclose(gx, expected, atol=1e-12)
        np.testing.assert_allclose(gy, 0.0, atol=1e-14)


class TestLaplacian:
    """Test the nine-point Laplacian."""

    def test_ramp(self, ramp):
        """Laplacian of the ramp with scale -1."""
        expected = np.array([
            [-30.0, -25.0, -25.0, -25.0, -20.0],
            [-5.0, 0.0, 0.0, 0.0, 5.0],
            [-5.0, 0.0, 0.0, 0.0, 5.0],
            [-5.0, 0.0, 0.0, 0.0, 5.0],
            [20.0, 25.0, 25.0, 25.0, 30.0],
        ])

        np.testing.assert_allclose(laplacian(ramp, -1.0), expected, atol=1e-12)

    def test_sum_vanishes(self):
        """On a periodic lattice the Laplacian sums to zero."""
        rng = np.random.default_rng(2)
        f = rng.random((12, 9))

        assert abs(np.sum(laplacian(f))) < 1e-12

    def test_fast_matches_reference(self, ramp):
        """Numba Laplacian matches the NumPy version."""
        np.testing.assert_allclose(laplacian_fast(ramp, -1.0), laplacian(ramp, -1.0), atol=1e-12)

    def test_quasi_one_dimensional(self):
        """With ly = 1 the stencil reduces to f[i+1] + f[i-1] - 2 f[i]."""
        f = np.array([0.0, 1.0, 3.0, 2.0, 5.0, 1.0, 0.5])[:, None]

        expected = np.roll(f, -1, axis=0) + np.roll(f, 1, axis=0) - 2.0 * f

        np.testing.assert_allclose(laplacian(f), expected, atol=1e-12)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
