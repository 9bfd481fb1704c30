"""
Equilibrium Distribution Functions

Shallow-water equilibrium for the D2Q9 lattice (Zhou, 2004; Salmon, 1999).

The film height plays the role of the density. The equilibrium is a
second-order expansion in the velocity with

    f_0^eq = h * (1 - 5/6 * g * h - 2/3 * u^2)
    f_i^eq = w_i * h * (3/2 * g * h + 3 (e_i . u) + 9/2 (e_i . u)^2 - 3/2 u^2)

for i = 1..8, w_i = 1/9 on the axes and 1/36 on the diagonals. Its
moments are

    sum_i f_i^eq             = h
    sum_i f_i^eq e_i         = h u
    sum_i f_i^eq e_ia e_ib   = g h^2 / 2 delta_ab + h u_a u_b

so the only parameter besides the local state is gravity g, which is zero
for the thin-film model.
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, W, Q


def compute_equilibrium(h, vx, vy, gravity=0.0):
    """
    Compute equilibrium distribution for all lattice sites.

    Parameters
    ----------
    h : ndarray
        Height field, shape (lx, ly)
    vx : ndarray
        X-velocity field, shape (lx, ly)
    vy : ndarray
        Y-velocity field, shape (lx, ly)
    gravity : float
        Gravitational acceleration (default 0.0)

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (lx, ly, Q)
    """
    lx, ly = h.shape
    f_eq = np.zeros((lx, ly, Q), dtype=np.float64)

    u_sq = vx * vx + vy * vy
    gh = 1.5 * gravity * h

    f_eq[..., 0] = h * (1.0 - 5/6 * gravity * h - 2/3 * u_sq)

    for i in range(1, Q):
        eu = EX[i] * vx + EY[i] * vy
        f_eq[..., i] = W[i] * h * (gh + 3.0 * eu + 4.5 * eu * eu - 1.5 * u_sq)

    return f_eq


@njit(parallel=True, cache=True)
def compute_equilibrium_numba(h, vx, vy, f_eq, ex, ey, w, gravity):
    """
    Numba-accelerated equilibrium computation.

    Parameters
    ----------
    h : ndarray
        Height field, shape (lx, ly)
    vx, vy : ndarray
        Velocity fields, shape (lx, ly)
    f_eq : ndarray
        Output equilibrium distribution, shape (lx, ly, Q)
    ex, ey : ndarray
        Lattice velocity components
    w : ndarray
        Lattice weights
    gravity : float
    """
    lx, ly, q = f_eq.shape

    for i in prange(lx):
        for j in range(ly):
            h_ij = h[i, j]
            vx_ij = vx[i, j]
            vy_ij = vy[i, j]
            u_sq = vx_ij * vx_ij + vy_ij * vy_ij
            gh = 1.5 * gravity * h_ij

            f_eq[i, j, 0] = h_ij * (1.0 - 5/6 * gravity * h_ij - 2/3 * u_sq)

            for k in range(1, q):
                eu = ex[k] * vx_ij + ey[k] * vy_ij
                f_eq[i, j, k] = w[k] * h_ij * (gh + 3.0 * eu + 4.5 * eu * eu - 1.5 * u_sq)


def compute_equilibrium_fast(h, vx, vy, gravity=0.0):
    """
    Fast equilibrium computation using Numba.

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (lx, ly, Q)
    """
    lx, ly = h.shape
    f_eq = np.zeros((lx, ly, Q), dtype=np.float64)

    ex = EX.astype(np.float64)
    ey = EY.astype(np.float64)

    compute_equilibrium_numba(
        np.ascontiguousarray(h, dtype=np.float64),
        np.ascontiguousarray(vx, dtype=np.float64),
        np.ascontiguousarray(vy, dtype=np.float64),
        f_eq, ex, ey, W, float(gravity),
    )

    return f_eq


def equilibrium_single_site(h, vx, vy, gravity=0.0):
    """
    Equilibrium distribution for a single lattice site.

    Parameters
    ----------
    h : float
        Height at the site
    vx, vy : float
        Velocity at the site
    gravity : float

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q,)
    """
    f_eq = np.zeros(Q, dtype=np.float64)
    u_sq = vx * vx + vy * vy

    f_eq[0] = h * (1.0 - 5/6 * gravity * h - 2/3 * u_sq)
    for i in range(1, Q):
        eu = EX[i] * vx + EY[i] * vy
        f_eq[i] = W[i] * h * (1.5 * gravity * h + 3.0 * eu + 4.5 * eu * eu - 1.5 * u_sq)

    return f_eq
