"""
Tests for coalescence analysis helpers.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from thinfilm.analysis import bridge_height, fit_power_law
from thinfilm.initial import two_droplets


class TestBridgeHeight:
    def test_touching_droplets(self):
        h = two_droplets(256, 1, 100, 1/9)

        h0, position = bridge_height(h, half_width=10)

        assert np.isclose(h0, 0.05)
        assert abs(position - 128) <= 1

    def test_synthetic_neck(self):
        x = np.arange(64, dtype=np.float64)
        h = (1.0 + 0.01 * (x - 30) ** 2)[:, None] * np.ones((1, 5))

        h0, position = bridge_height(h, center=32, half_width=8, row=2)

        assert h0 == 1.0
        assert position == 30


class TestPowerLaw:
    def test_recovers_exponent(self):
        t = np.linspace(100, 10000, 50)
        y = 0.3 * t ** (2/3)

        exponent, prefactor, r_value = fit_power_law(t, y)

        assert np.isclose(exponent, 2/3)
        assert np.isclose(prefactor, 0.3)
        assert np.isclose(r_value, 1.0)

    def test_non_positive_data(self):
        with pytest.raises(ValueError):
            fit_power_law([0.0, 1.0, 2.0], [1.0, 2.0, 3.0])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
