"""
CPU Backends

NumPy reference implementation and Numba-accelerated kernels behind the
backend interface used by `SimulationState`.

All methods write into caller-owned buffers so that a state allocates its
arrays once and reuses them every step.
"""

import numpy as np

from ..lattice import EX, EY, W
from ..differences import gradient, laplacian, gradient_numba, laplacian_numba
from ..pressure import filmpressure_unchecked, filmpressure_numba, h_grad_p_numba
from ..equilibrium import compute_equilibrium, compute_equilibrium_numba
from ..collision import bgk_and_stream, bgk_and_stream_fast
from ..observables import compute_moments, compute_moments_numba
from ..forces import slippage, slippage_numba, thermal_fluctuations


class CPUBackend:
    """
    CPU backend using NumPy or Numba.

    Parameters
    ----------
    use_fast : bool
        Use Numba-accelerated kernels (default True)
    """

    def __init__(self, use_fast=True):
        self.use_fast = use_fast
        self.name = "numba" if use_fast else "numpy"
        self._ex = EX.astype(np.float64)
        self._ey = EY.astype(np.float64)

    def __repr__(self):
        return f"CPUBackend(use_fast={self.use_fast})"

    # ------------------------------------------------------------------
    # Memory
    # ------------------------------------------------------------------

    def zeros(self, shape):
        return np.zeros(shape, dtype=np.float64)

    def to_device(self, array):
        return np.array(array, dtype=np.float64, copy=True)

    def to_host(self, array):
        return np.array(array, copy=True)

    def copy_into(self, dst, src):
        dst[...] = src

    def total(self, array):
        return float(np.sum(array))

    # ------------------------------------------------------------------
    # Stencils and pressure
    # ------------------------------------------------------------------

    def gradient(self, f, gx, gy, scale=1.0):
        if self.use_fast:
            gradient_numba(f, gx, gy, float(scale))
        else:
            gx[...], gy[...] = gradient(f, scale)

    def laplacian(self, f, out, scale=1.0):
        if self.use_fast:
            laplacian_numba(f, out, float(scale))
        else:
            out[...] = laplacian(f, scale)

    def filmpressure(self, h, theta, out, gamma, n, m, hmin, hcrit):
        if self.use_fast:
            filmpressure_numba(h, theta, out, float(gamma), int(n), int(m), float(hmin), float(hcrit))
        else:
            out[...] = filmpressure_unchecked(h, gamma, theta, n, m, hmin, hcrit)

    def h_grad_p(self, h, p, out_x, out_y):
        self.gradient(p, out_x, out_y)
        if self.use_fast:
            h_grad_p_numba(h, out_x, out_y)
        else:
            out_x *= h
            out_y *= h

    # ------------------------------------------------------------------
    # Forces
    # ------------------------------------------------------------------

    def slippage(self, h, vx, vy, out_x, out_y, delta, mu):
        if self.use_fast:
            slippage_numba(h, vx, vy, out_x, out_y, float(delta), float(mu))
        else:
            out_x[...], out_y[...] = slippage(h, vx, vy, delta, mu)

    def thermal(self, h, out_x, out_y, kbt, mu, delta, rng):
        out_x[...], out_y[...] = thermal_fluctuations(h, kbt, mu, delta, rng)

    def assemble_force(self, out, h_grad_p, slip, fluct):
        """out = -h grad p - slip - fluct"""
        np.negative(h_grad_p, out=out)
        out -= slip
        out -= fluct

    def add(self, out, term):
        out += term

    # ------------------------------------------------------------------
    # Lattice Boltzmann
    # ------------------------------------------------------------------

    def equilibrium(self, h, vx, vy, f_eq, gravity=0.0):
        if self.use_fast:
            compute_equilibrium_numba(h, vx, vy, f_eq, self._ex, self._ey, W, float(gravity))
        else:
            f_eq[...] = compute_equilibrium(h, vx, vy, gravity)

    def bgk_and_stream(self, f_out, f_eq, f_temp, fx, fy, tau, variant="two_diagonal"):
        if self.use_fast:
            bgk_and_stream_fast(f_out, f_eq, f_temp, fx, fy, tau, variant)
        else:
            bgk_and_stream(f_out, f_eq, f_temp, fx, fy, tau, variant)

    def moments(self, f, h, vx, vy, floor):
        if self.use_fast:
            compute_moments_numba(f, h, vx, vy, self._ex, self._ey, float(floor))
        else:
            h[...], vx[...], vy[...] = compute_moments(f, floor)

    def synchronize(self):
        pass
