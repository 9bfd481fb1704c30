"""
Macroscopic Observable Extraction

Film height and velocity as moments of the distribution functions:
    - Height (0th moment): h = sum_k(f_k)
    - Momentum (1st moment): h*v = sum_k(f_k * e_k)

Where the height is at or below a small floor the velocity is set to zero
instead of dividing by a vanishing height.
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, Q

VELOCITY_FLOOR = 1e-10


def compute_height(f):
    """
    Compute height field from distribution functions.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (lx, ly, Q)

    Returns
    -------
    h : ndarray
        Height field, shape (lx, ly)
    """
    return np.sum(f, axis=-1)


def compute_velocity(f, h=None, floor=VELOCITY_FLOOR):
    """
    Compute velocity field from distribution functions.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (lx, ly, Q)
    h : ndarray, optional
        Height field, computed from f if None
    floor : float
        Height at or below which the velocity is zero

    Returns
    -------
    vx, vy : ndarray
        Velocity fields, shape (lx, ly)
    """
    if h is None:
        h = compute_height(f)

    lx, ly, _ = f.shape
    h_vx = np.zeros((lx, ly), dtype=np.float64)
    h_vy = np.zeros((lx, ly), dtype=np.float64)

    for k in range(1, Q):
        h_vx += f[..., k] * EX[k]
        h_vy += f[..., k] * EY[k]

    wet = h > floor
    h_safe = np.where(wet, h, 1.0)

    vx = np.where(wet, h_vx / h_safe, 0.0)
    vy = np.where(wet, h_vy / h_safe, 0.0)

    return vx, vy


def compute_moments(f, floor=VELOCITY_FLOOR):
    """
    Compute height and velocity from distribution functions.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (lx, ly, Q)
    floor : float
        Height at or below which the velocity is zero

    Returns
    -------
    h : ndarray
        Height field
    vx, vy : ndarray
        Velocity fields
    """
    h = compute_height(f)
    vx, vy = compute_velocity(f, h, floor)
    return h, vx, vy


@njit(parallel=True, cache=True)
def compute_moments_numba(f, h, vx, vy, ex, ey, floor):
    """
    Numba-accelerated moment computation.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (lx, ly, Q)
    h : ndarray
        Output height, shape (lx, ly)
    vx, vy : ndarray
        Output velocity, shape (lx, ly)
    ex, ey : ndarray
        Lattice velocities
    floor : float
        Height at or below which the velocity is zero
    """
    lx, ly, q = f.shape

    for i in prange(lx):
        for j in range(ly):
            h_local = 0.0
            h_vx = 0.0
            h_vy = 0.0

            for k in range(q):
                f_k = f[i, j, k]
                h_local += f_k
                h_vx += f_k * ex[k]
                h_vy += f_k * ey[k]

            h[i, j] = h_local

            if h_local > floor:
                vx[i, j] = h_vx / h_local
                vy[i, j] = h_vy / h_local
            else:
                vx[i, j] = 0.0
                vy[i, j] = 0.0


def compute_moments_fast(f, floor=VELOCITY_FLOOR):
    """Fast moments using Numba, see `compute_moments`."""
    lx, ly, _ = f.shape

    h = np.zeros((lx, ly), dtype=np.float64)
    vx = np.zeros((lx, ly), dtype=np.float64)
    vy = np.zeros((lx, ly), dtype=np.float64)

    ex = EX.astype(np.float64)
    ey = EY.astype(np.float64)

    compute_moments_numba(f, h, vx, vy, ex, ey, floor)

    return h, vx, vy


def total_mass(h):
    """Total liquid volume of a height field."""
    return float(np.sum(h))
