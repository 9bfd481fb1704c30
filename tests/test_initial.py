"""
Tests for initial height fields.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from thinfilm.initial import (
    PRECURSOR,
    base_radius,
    single_droplet,
    two_droplets,
    rivulet,
    sine_film,
)


class TestDroplets:
    """Test spherical cap droplets."""

    def test_single_droplet_apex(self):
        """Apex height is R (1 - cos(pi theta))."""
        radius, theta = 40.0, 1/6
        h = single_droplet(64, 64, radius, theta)

        assert np.isclose(h[32, 32], radius * (1.0 - np.cos(np.pi * theta)))
        assert np.isclose(h.max(), h[32, 32])

    def test_single_droplet_precursor(self):
        h = single_droplet(64, 64, 20, 1/9)

        assert h.min() == PRECURSOR
        assert h[0, 0] == PRECURSOR

    def test_single_droplet_symmetry(self):
        h = single_droplet(33, 33, 30, 1/9, center=(16, 16))

        np.testing.assert_allclose(h, h[::-1, :])
        np.testing.assert_allclose(h, h.T)

    def test_two_droplets_touch(self):
        """Two equal droplets meet at lx // 2 on the precursor film."""
        radius, theta = 500, 1/9
        h = two_droplets(1024, 1, radius, theta)[:, 0]

        assert np.isclose(h[512], PRECURSOR)
        assert h[512 - 20] > PRECURSOR
        assert h[512 + 20] > PRECURSOR
        np.testing.assert_allclose(h[512 - 100:512], h[512 + 100:512:-1])

    def test_two_droplets_apex(self):
        radius, theta = 500, 1/9
        h = two_droplets(1024, 1, radius, theta)[:, 0]
        apex = radius * (1.0 - np.cos(np.pi * theta))

        assert np.isclose(h.max(), apex, rtol=1e-3)

    def test_base_radius(self):
        assert np.isclose(base_radius(10.0, 0.5), 10.0)


class TestRivulet:
    def test_invariant_along_axis(self):
        h = rivulet(32, 16, 20, 1/9, orientation="y")

        np.testing.assert_allclose(h, np.repeat(h[:, :1], 16, axis=1))

    def test_orientation_x(self):
        h = rivulet(16, 32, 20, 1/9, orientation="x")

        np.testing.assert_allclose(h, np.repeat(h[:1, :], 16, axis=0))
        assert np.argmax(h[0]) == 16

    def test_bad_orientation(self):
        with pytest.raises(ValueError):
            rivulet(16, 16, 10, 1/9, orientation="z")


class TestSineFilm:
    def test_mean_and_amplitude(self):
        h = sine_film(32, 32, h0=1.0, eps=0.1)

        assert np.isclose(np.mean(h), 1.0)
        assert np.isclose(h.max(), 1.1)
        assert np.isclose(h.min(), 0.9)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
