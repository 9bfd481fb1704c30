"""
Substrate Friction and Thermal Forces

Body forces of the thin-film model that are added to the pressure force
before collision.

Friction with a Navier slip length delta (Zitz et al., PRE 100, 033313):

    F_slip = 6 mu h v / (2 h^2 + 6 delta h + 3 delta^2)

Thermal fluctuations of the stochastic thin-film equation (Zitz et al.,
PRFluids 6, 2021) are Gaussian with variance matching the friction:

    F_th = sqrt(12 kbt mu h / (2 h^2 + 6 delta h + 3 delta^2)) * N(0, 1)
"""

import numpy as np
from numba import njit, prange


def friction_denominator(h, delta):
    return 2.0 * h * h + 6.0 * delta * h + 3.0 * delta * delta


def slippage(h, vx, vy, delta, mu):
    """
    Friction force of the film on the substrate.

    Parameters
    ----------
    h : ndarray
        Film height, shape (lx, ly)
    vx, vy : ndarray
        Velocity fields, shape (lx, ly)
    delta : float
        Slip length
    mu : float
        Kinematic viscosity

    Returns
    -------
    slip_x, slip_y : ndarray
        Friction force, shape (lx, ly). Enters the total force with a
        minus sign.
    """
    factor = 6.0 * mu * h / friction_denominator(h, delta)
    return factor * vx, factor * vy


@njit(parallel=True, cache=True)
def slippage_numba(h, vx, vy, slip_x, slip_y, delta, mu):
    """Numba-accelerated friction force, writes into slip_x, slip_y."""
    lx, ly = h.shape

    for i in prange(lx):
        for j in range(ly):
            h_ij = h[i, j]
            factor = 6.0 * mu * h_ij / (2.0 * h_ij * h_ij + 6.0 * delta * h_ij + 3.0 * delta * delta)
            slip_x[i, j] = factor * vx[i, j]
            slip_y[i, j] = factor * vy[i, j]


def thermal_amplitude(h, kbt, mu, delta):
    """Standard deviation of the thermal force at every site."""
    return np.sqrt(2.0 * kbt * mu * 6.0 * h / friction_denominator(h, delta))


def thermal_fluctuations(h, kbt, mu, delta, rng):
    """
    Random thermal forces.

    Parameters
    ----------
    h : ndarray
        Film height, shape (lx, ly)
    kbt : float
        Thermal energy
    mu : float
        Kinematic viscosity
    delta : float
        Slip length
    rng : numpy.random.Generator
        Source of the Gaussian noise

    Returns
    -------
    fluc_x, fluc_y : ndarray
        Thermal forces, shape (lx, ly)
    """
    amplitude = thermal_amplitude(h, kbt, mu, delta)
    fluc_x = amplitude * rng.standard_normal(h.shape)
    fluc_y = amplitude * rng.standard_normal(h.shape)
    return fluc_x, fluc_y
