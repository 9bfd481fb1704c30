"""
Film Pressure

Capillary pressure of the thin-film model, Laplace term plus disjoining
pressure:

    p = -gamma * lap(h) - Pi(h)

    Pi(h) = kappa(theta) * [(hmin / (h + hcrit))^n - (hmin / (h + hcrit))^m]

    kappa(theta) = gamma * (1 - cos(pi * theta)) * (n - 1)(m - 1) / ((n - m) * hmin)

kappa acts as a Hamaker constant chosen so that a film of thickness
hmin - hcrit is in mechanical equilibrium and the wetting energy matches
the contact angle theta (given in units of pi). Pi enters with a negative
sign, so dp/dh > 0 at the equilibrium film and precursor films are
linearly stable under F = -h grad(p). The powers are taken by
repeated multiplication, n and m are positive integers with n > m.

hcrit keeps the power-law terms finite for vanishing films. With
hcrit = 0 and h = 0 the result is non-finite, which is left to the caller.

References
----------
- Peschka et al., PNAS 116, 9275 (2019)
- Craster and Matar, Rev. Mod. Phys. 81, 1131 (2009)
"""

import numpy as np
from numba import njit, prange

from .config import validate_exponents
from .differences import gradient, gradient_numba, laplacian

# Parameters of filmpressure_default
DEFAULT_GAMMA = 0.01
DEFAULT_N = 9
DEFAULT_M = 3
DEFAULT_HMIN = 0.1
DEFAULT_HCRIT = 0.05


def power_broad(arg, n):
    """
    Integer power by repeated multiplication.

    Works for scalars and arrays alike.

    >>> power_broad(3, 3)
    27
    """
    temp = 1
    for _ in range(n):
        temp = temp * arg
    return temp


@njit(cache=True)
def power_broad_numba(arg, n):
    temp = 1.0
    for _ in range(n):
        temp *= arg
    return temp


def disjoining_kappa(gamma, theta, n, m, hmin):
    """
    Prefactor of the disjoining pressure.

    Parameters
    ----------
    gamma : float
        Surface tension
    theta : float or ndarray
        Contact angle in units of pi
    n, m : int
        Power-law exponents
    hmin : float
        Disjoining pressure length

    Returns
    -------
    kappa : float or ndarray
    """
    return gamma * (1.0 - np.cos(np.pi * theta)) * (n - 1) * (m - 1) / ((n - m) * hmin)


def check_pressure_parameters(n, m, hmin):
    """Raise ValueError for exponents or a length the power law cannot use."""
    validate_exponents(n, m)
    if hmin <= 0.0:
        raise ValueError(f"hmin must be > 0, got {hmin}")


def disjoining_pressure(h, gamma, theta, n, m, hmin, hcrit):
    """Power-law disjoining pressure Pi(h), see module docstring."""
    check_pressure_parameters(n, m, hmin)
    return _disjoining_pressure(h, gamma, theta, n, m, hmin, hcrit)


def _disjoining_pressure(h, gamma, theta, n, m, hmin, hcrit):
    kappa = disjoining_kappa(gamma, theta, n, m, hmin)
    ratio = hmin / (h + hcrit)

    return kappa * (power_broad(ratio, n) - power_broad(ratio, m))


def filmpressure(h, gamma, theta, n, m, hmin, hcrit):
    """
    Capillary plus disjoining pressure of a height field.

    Parameters
    ----------
    h : ndarray
        Film height, shape (lx, ly)
    gamma : float
        Surface tension
    theta : float or ndarray
        Contact angle in units of pi, scalar or shape (lx, ly)
    n, m : int
        Disjoining pressure exponents, n > m > 0
    hmin : float
        Disjoining pressure length, > 0
    hcrit : float
        Regulariser for h -> 0

    Returns
    -------
    p : ndarray
        Pressure field, shape (lx, ly)
    """
    check_pressure_parameters(n, m, hmin)
    return filmpressure_unchecked(h, gamma, theta, n, m, hmin, hcrit)


def filmpressure_unchecked(h, gamma, theta, n, m, hmin, hcrit):
    """`filmpressure` without parameter checks, for use inside the time loop."""
    return laplacian(h, -gamma) - _disjoining_pressure(h, gamma, theta, n, m, hmin, hcrit)


def filmpressure_default(h, theta):
    """
    Film pressure with gamma=0.01, n=9, m=3, hmin=0.1, hcrit=0.05.
    """
    return filmpressure(
        h, DEFAULT_GAMMA, theta, DEFAULT_N, DEFAULT_M, DEFAULT_HMIN, DEFAULT_HCRIT
    )


@njit(parallel=True, cache=True)
def filmpressure_numba(h, theta, out, gamma, n, m, hmin, hcrit):
    """
    Numba-accelerated film pressure.

    Parameters
    ----------
    h : ndarray
        Film height, shape (lx, ly)
    theta : ndarray
        Contact angle field in units of pi, shape (lx, ly)
    out : ndarray
        Output pressure, shape (lx, ly)
    gamma, hmin, hcrit : float
    n, m : int
    """
    lx, ly = h.shape
    geometry = (n - 1) * (m - 1) / ((n - m) * hmin)

    for i in prange(lx):
        ip = (i + 1) % lx
        im = (i - 1 + lx) % lx
        for j in range(ly):
            jp = (j + 1) % ly
            jm = (j - 1 + ly) % ly

            lap = (
                2/3 * (h[ip, j] + h[i, jp] + h[im, j] + h[i, jm])
                + 1/6 * (h[ip, jp] + h[im, jp] + h[im, jm] + h[ip, jm])
                - 10/3 * h[i, j]
            )
            kappa = gamma * (1.0 - np.cos(np.pi * theta[i, j])) * geometry
            ratio = hmin / (h[i, j] + hcrit)

            out[i, j] = -gamma * lap - kappa * (
                power_broad_numba(ratio, n) - power_broad_numba(ratio, m)
            )


def filmpressure_fast(h, gamma, theta, n, m, hmin, hcrit):
    """Numba film pressure returning a new array, see `filmpressure`."""
    check_pressure_parameters(n, m, hmin)

    h = np.ascontiguousarray(h, dtype=np.float64)
    theta = np.ascontiguousarray(np.broadcast_to(theta, h.shape), dtype=np.float64)
    out = np.empty_like(h)
    filmpressure_numba(h, theta, out, float(gamma), int(n), int(m), float(hmin), float(hcrit))
    return out


def h_grad_p(h, p):
    """
    Pressure gradient weighted with the film height.

    Returns
    -------
    h_dpx, h_dpy : ndarray
        h * dp/dx and h * dp/dy, shape (lx, ly)
    """
    gx, gy = gradient(p)
    return h * gx, h * gy


@njit(parallel=True, cache=True)
def h_grad_p_numba(h, gx, gy):
    """Scale a gradient by the film height in place."""
    lx, ly = h.shape
    for i in prange(lx):
        for j in range(ly):
            gx[i, j] = h[i, j] * gx[i, j]
            gy[i, j] = h[i, j] * gy[i, j]


def h_grad_p_fast(h, p):
    """Numba variant of `h_grad_p`."""
    p = np.ascontiguousarray(p, dtype=np.float64)
    gx = np.empty_like(p)
    gy = np.empty_like(p)
    gradient_numba(p, gx, gy, 1.0)
    h_grad_p_numba(np.ascontiguousarray(h, dtype=np.float64), gx, gy)
    return gx, gy
