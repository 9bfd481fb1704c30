"""
Collision Operator with Forcing

BGK single-relaxation-time collision for the thin-film lattice Boltzmann
scheme, followed by injection of the local force and periodic streaming.

For every site and direction k

    f_k^post = (1 - 1/tau) * f_k + 1/tau * f_k^eq + c_k * (e_k . F)

with c_k = 1/3 on the axis directions and 1/24 on the anti-diagonals
k = 6, 8 (two-diagonal scheme). The rest population and the diagonals
k = 5, 7 receive no force. tau = 1 replaces the populations by the
equilibrium.

The kinematic viscosity of the film is

    mu = c_s^2 * (tau - 0.5)

with c_s^2 = 1/3, so tau <= 0.5 gives a non-positive viscosity.
"""

import warnings

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, Q, CS2, force_weights
from .streaming import stream_periodic, _check_buffers


def tau_from_viscosity(nu, dt=1.0, cs2=CS2):
    """
    Compute relaxation time from kinematic viscosity.

    tau = nu / (c_s^2 * dt) + 0.5
    """
    return nu / (cs2 * dt) + 0.5


def viscosity_from_tau(tau, dt=1.0, cs2=CS2):
    """
    Compute kinematic viscosity from relaxation time.

    nu = c_s^2 * (tau - 0.5) * dt

    Raises
    ------
    ValueError
        If tau <= 0
    """
    if tau <= 0.0:
        raise ValueError(f"tau must be > 0, got {tau}")
    return cs2 * (tau - 0.5) * dt


def validate_tau(tau, name="tau"):
    """
    Validate a relaxation time.

    Raises
    ------
    ValueError
        If tau <= 0

    Returns
    -------
    tau : float
        Validated tau value
    """
    if tau <= 0.0:
        raise ValueError(f"{name} must be > 0, got {tau}")
    if tau <= 0.5:
        warnings.warn(
            f"{name} = {tau} gives a non-positive viscosity, "
            f"the scheme is unstable for tau <= 0.5."
        )
    elif tau > 2.0:
        warnings.warn(
            f"{name} = {tau} is large, which may cause slow convergence. "
            f"Consider tau in range (0.5, 2.0) for efficiency."
        )
    return tau


def force_correction(fx, fy, variant="two_diagonal"):
    """
    Per-direction force terms c_k * (e_k . F).

    Parameters
    ----------
    fx, fy : ndarray
        Force field, shape (lx, ly)
    variant : str
        Forcing scheme, "two_diagonal" or "isotropic"

    Returns
    -------
    correction : ndarray
        Shape (lx, ly, Q)
    """
    fw = force_weights(variant)
    correction = np.zeros(fx.shape + (Q,), dtype=np.float64)

    for k in range(Q):
        if fw[k] != 0.0:
            correction[..., k] = fw[k] * (EX[k] * fx + EY[k] * fy)

    return correction


def bgk_collision(f, f_eq, fx, fy, tau, variant="two_diagonal", out=None):
    """
    BGK relaxation plus force injection.

    Parameters
    ----------
    f : ndarray
        Distribution functions of the previous step, shape (lx, ly, Q)
    f_eq : ndarray
        Equilibrium distribution, shape (lx, ly, Q)
    fx, fy : ndarray
        Force field, shape (lx, ly)
    tau : float
        Relaxation time
    variant : str
        Forcing scheme
    out : ndarray, optional
        Output buffer, may be `f` itself since collision is local

    Returns
    -------
    f_post : ndarray
        Post-collision distribution
    """
    fw = force_weights(variant)
    omega = 1.0 - 1.0 / tau
    inv_tau = 1.0 / tau

    if out is None:
        out = np.empty_like(f)

    for k in range(Q):
        out[..., k] = omega * f[..., k] + inv_tau * f_eq[..., k]
        if fw[k] != 0.0:
            out[..., k] += fw[k] * (EX[k] * fx + EY[k] * fy)

    return out


def bgk_and_stream(f_out, f_eq, f_temp, fx, fy, tau, variant="two_diagonal"):
    """
    One collision and streaming update.

    The populations of the previous step are read from `f_temp`, which is
    overwritten with the post-collision values. The streamed result is
    written to `f_out`.

    Parameters
    ----------
    f_out : ndarray
        Output distribution, shape (lx, ly, Q)
    f_eq : ndarray
        Equilibrium distribution, shape (lx, ly, Q)
    f_temp : ndarray
        Previous distribution, used as scratch, shape (lx, ly, Q)
    fx, fy : ndarray
        Force field, shape (lx, ly)
    tau : float
        Relaxation time
    variant : str
        Forcing scheme

    Returns
    -------
    f_out : ndarray
    """
    _check_buffers(f_temp, f_out)
    bgk_collision(f_temp, f_eq, fx, fy, tau, variant, out=f_temp)
    return stream_periodic(f_temp, f_out)


@njit(parallel=True, cache=True)
def bgk_and_stream_numba(f_out, f_eq, f_temp, fx, fy, omega, inv_tau, ex, ey, fw):
    """
    Fused collision and streaming (pull scheme).

    Every output value gathers the collided population of its upstream
    site, `f_temp` is left untouched.

    Parameters
    ----------
    f_out : ndarray
        Output distribution, shape (lx, ly, Q)
    f_eq : ndarray
        Equilibrium distribution, shape (lx, ly, Q)
    f_temp : ndarray
        Previous distribution, shape (lx, ly, Q)
    fx, fy : ndarray
        Force field, shape (lx, ly)
    omega : float
        1 - 1/tau
    inv_tau : float
        1/tau
    ex, ey : ndarray
        Lattice velocities
    fw : ndarray
        Force coefficients per direction
    """
    lx, ly, q = f_out.shape

    for i in prange(lx):
        for j in range(ly):
            for k in range(q):
                i_src = (i - ex[k] + lx) % lx
                j_src = (j - ey[k] + ly) % ly

                f_post = omega * f_temp[i_src, j_src, k] + inv_tau * f_eq[i_src, j_src, k]
                if fw[k] != 0.0:
                    f_post += fw[k] * (ex[k] * fx[i_src, j_src] + ey[k] * fy[i_src, j_src])

                f_out[i, j, k] = f_post


def bgk_and_stream_fast(f_out, f_eq, f_temp, fx, fy, tau, variant="two_diagonal"):
    """Numba-accelerated collision and streaming, see `bgk_and_stream`."""
    _check_buffers(f_temp, f_out)
    fw = force_weights(variant)
    omega = 1.0 - 1.0 / tau
    inv_tau = 1.0 / tau

    bgk_and_stream_numba(f_out, f_eq, f_temp, fx, fy, omega, inv_tau, EX, EY, fw)
    return f_out
