"""
Tests for collision with forcing and streaming.

The dummy distribution cases use feq = 1 everywhere except a value of 2
at the origin, so every direction can be traced after streaming.
"""

import warnings

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from thinfilm.lattice import EX, EY, Q, force_weights
from thinfilm.collision import (
    bgk_collision,
    bgk_and_stream,
    bgk_and_stream_fast,
    force_correction,
    tau_from_viscosity,
    viscosity_from_tau,
    validate_tau,
)
from thinfilm.streaming import stream_periodic, stream_periodic_fast

# c_k (e_k . F) for Fx = 0.1, Fy = -0.1 with the two-diagonal scheme
EXPECTED_CORRECTION = np.array(
    [0.0, 1/30, -1/30, -1/30, 1/30, 0.0, -0.2/24, 0.0, 0.2/24]
)


def dummy_dists():
    f_eq = np.ones((5, 5, Q))
    f_eq[0, 0, :] = 2.0
    f_temp = np.ones((5, 5, Q))
    f_out = np.zeros((5, 5, Q))
    return f_out, f_eq, f_temp


def shifted(field, k):
    return np.roll(field, (EX[k], EY[k]), axis=(0, 1))


@pytest.mark.parametrize("update", [bgk_and_stream, bgk_and_stream_fast])
class TestBGKAndStream:
    """Fused collision and streaming on dummy distributions."""

    def test_tau_one_no_force(self, update):
        """tau = 1 streams the equilibrium."""
        f_out, f_eq, f_temp = dummy_dists()
        zero = np.zeros((5, 5))

        update(f_out, f_eq, f_temp, zero, zero, 1.0)

        for k in range(Q):
            np.testing.assert_allclose(f_out[..., k], shifted(f_eq[..., 0], k), atol=1e-15)

    def test_tau_three_quarter_no_force(self, update):
        """Relaxation mixes the previous populations and the equilibrium."""
        f_out, f_eq, f_temp = dummy_dists()
        zero = np.zeros((5, 5))
        tau = 0.75
        relaxed = (1.0 - 1.0 / tau) * 1.0 + 1.0 / tau * f_eq[..., 0]

        update(f_out, f_eq, f_temp, zero, zero, tau)

        for k in range(Q):
            np.testing.assert_allclose(f_out[..., k], shifted(relaxed, k), atol=1e-14)

    def test_tau_one_with_force(self, update):
        """Forces enter on the axes and the anti-diagonals only."""
        f_out, f_eq, f_temp = dummy_dists()

        update(f_out, f_eq, f_temp, np.full((5, 5), 0.1), np.full((5, 5), -0.1), 1.0)

        for k in range(Q):
            expected = shifted(f_eq[..., 0] + EXPECTED_CORRECTION[k], k)
            np.testing.assert_allclose(f_out[..., k], expected, atol=1e-15)

    def test_tau_three_quarter_with_force(self, update):
        f_out, f_eq, f_temp = dummy_dists()
        tau = 0.75
        relaxed = (1.0 - 1.0 / tau) * 1.0 + 1.0 / tau * f_eq[..., 0]

        update(f_out, f_eq, f_temp, np.full((5, 5), 0.1), np.full((5, 5), -0.1), tau)

        for k in range(Q):
            expected = shifted(relaxed + EXPECTED_CORRECTION[k], k)
            np.testing.assert_allclose(f_out[..., k], expected, atol=1e-14)

    def test_isotropic_variant(self, update):
        """The isotropic scheme also forces the diagonals 5 and 7."""
        f_out, f_eq, f_temp = dummy_dists()
        force = np.full((5, 5), 0.1)

        update(f_out, f_eq, f_temp, force, force, 1.0, "isotropic")

        np.testing.assert_allclose(f_out[..., 5], shifted(f_eq[..., 0] + 0.2 / 24, 5), atol=1e-15)
        np.testing.assert_allclose(f_out[..., 7], shifted(f_eq[..., 0] - 0.2 / 24, 7), atol=1e-15)

    def test_aliased_buffers(self, update):
        """Streaming into the input buffer is rejected."""
        f_out, f_eq, f_temp = dummy_dists()
        zero = np.zeros((5, 5))

        with pytest.raises(ValueError):
            update(f_temp, f_eq, f_temp, zero, zero, 1.0)

    def test_unknown_variant(self, update):
        f_out, f_eq, f_temp = dummy_dists()
        zero = np.zeros((5, 5))

        with pytest.raises(ValueError):
            update(f_out, f_eq, f_temp, zero, zero, 1.0, "guo")


class TestCollision:
    """Test the local collision step."""

    def test_in_place(self):
        """Collision may overwrite its input."""
        rng = np.random.default_rng(5)
        f = rng.random((6, 6, Q))
        f_eq = rng.random((6, 6, Q))
        fx = 0.01 * rng.standard_normal((6, 6))
        fy = 0.01 * rng.standard_normal((6, 6))

        expected = bgk_collision(f, f_eq, fx, fy, 0.8)
        bgk_collision(f, f_eq, fx, fy, 0.8, out=f)

        np.testing.assert_allclose(f, expected)

    def test_force_correction_conserves_mass(self):
        """Force injection does not change the local height."""
        rng = np.random.default_rng(6)
        fx = rng.standard_normal((8, 8))
        fy = rng.standard_normal((8, 8))

        for variant in ("two_diagonal", "isotropic"):
            correction = force_correction(fx, fy, variant)
            np.testing.assert_allclose(np.sum(correction, axis=-1), 0.0, atol=1e-14)

    def test_force_weights(self):
        fw = force_weights()
        np.testing.assert_allclose(fw[1:5], 1/3)
        np.testing.assert_allclose(fw[[0, 5, 7]], 0.0)
        np.testing.assert_allclose(fw[[6, 8]], 1/24)


class TestStreaming:
    """Test periodic streaming."""

    def test_single_value(self):
        """A single population moves one site along its velocity."""
        for k in range(Q):
            f = np.zeros((5, 4, Q))
            f[2, 1, k] = 1.0

            f_out = stream_periodic(f)

            assert f_out[(2 + EX[k]) % 5, (1 + EY[k]) % 4, k] == 1.0
            assert np.sum(f_out) == 1.0

    def test_wraparound(self):
        """Populations leaving the lattice re-enter on the other side."""
        f = np.zeros((5, 4, Q))
        f[4, 3, 5] = 1.0

        assert stream_periodic(f)[0, 0, 5] == 1.0

    def test_fast_matches_reference(self):
        f = np.random.default_rng(7).random((9, 6, Q))

        np.testing.assert_array_equal(stream_periodic_fast(f), stream_periodic(f))

    def test_aliased_output(self):
        f = np.zeros((4, 4, Q))
        with pytest.raises(ValueError):
            stream_periodic(f, f)


class TestRelaxationTime:
    """Test tau and viscosity helpers."""

    def test_viscosity(self):
        assert np.isclose(viscosity_from_tau(1.0), 1/6)
        assert np.isclose(tau_from_viscosity(1/6), 1.0)

    def test_non_positive_tau(self):
        with pytest.raises(ValueError):
            validate_tau(0.0)
        with pytest.raises(ValueError):
            viscosity_from_tau(-1.0)

    def test_unstable_tau_warns(self):
        with pytest.warns(UserWarning):
            validate_tau(0.5)

    def test_large_tau_warns(self):
        with pytest.warns(UserWarning):
            validate_tau(2.5)

    def test_regular_tau_silent(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert validate_tau(1.0) == 1.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
