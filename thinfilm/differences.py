"""
Finite Difference Stencils

Nine-point gradient and Laplacian on a doubly periodic lattice.

Both operators use the full Moore neighbourhood of a site, the weights
minimise the anisotropy of the discretisation error (Junk & Klar, SIAM J.
Sci. Comput. 22, 2000; Thampi et al., J. Comput. Phys. 234, 2013):

    df/dx = 1/3 (f[i+1,j] - f[i-1,j])
          + 1/12 (f[i+1,j+1] - f[i-1,j+1] - f[i-1,j-1] + f[i+1,j-1])

    lap f = 2/3 (f[i+1,j] + f[i,j+1] + f[i-1,j] + f[i,j-1])
          + 1/6 (f[i+1,j+1] + f[i-1,j+1] + f[i-1,j-1] + f[i+1,j-1])
          - 10/3 f[i,j]

Indices wrap around in both directions, every site has eight neighbours.
Fields have shape (lx, ly) with x along axis 0.
"""

import numpy as np
from numba import njit, prange


def neighbours(f):
    """
    Periodic neighbour views of a field.

    Returns
    -------
    tuple of ndarray
        (fip, fjp, fim, fjm, fipjp, fimjp, fimjm, fipjm) where for example
        fipjm[i, j] = f[i+1, j-1].
    """
    fip = np.roll(f, -1, axis=0)
    fjp = np.roll(f, -1, axis=1)
    fim = np.roll(f, 1, axis=0)
    fjm = np.roll(f, 1, axis=1)
    fipjp = np.roll(fip, -1, axis=1)
    fimjp = np.roll(fim, -1, axis=1)
    fimjm = np.roll(fim, 1, axis=1)
    fipjm = np.roll(fip, 1, axis=1)
    return fip, fjp, fim, fjm, fipjp, fimjp, fimjm, fipjm


def gradient(f, scale=1.0):
    """
    Nine-point gradient of a periodic field.

    Parameters
    ----------
    f : ndarray
        Scalar field, shape (lx, ly)
    scale : float
        Uniform factor applied to both components

    Returns
    -------
    gx, gy : ndarray
        Derivatives along x and y, shape (lx, ly)
    """
    fip, fjp, fim, fjm, fipjp, fimjp, fimjm, fipjm = neighbours(f)

    gx = scale * (1/3 * (fip - fim) + 1/12 * (fipjp - fimjp - fimjm + fipjm))
    gy = scale * (1/3 * (fjp - fjm) + 1/12 * (fipjp + fimjp - fimjm - fipjm))

    return gx, gy


def laplacian(f, scale=1.0):
    """
    Nine-point Laplacian of a periodic field.

    Parameters
    ----------
    f : ndarray
        Scalar field, shape (lx, ly)
    scale : float
        Leading coefficient folded into the result, e.g. -gamma

    Returns
    -------
    out : ndarray
        scale * lap(f), shape (lx, ly)
    """
    fip, fjp, fim, fjm, fipjp, fimjp, fimjm, fipjm = neighbours(f)

    return scale * (
        2/3 * (fip + fjp + fim + fjm)
        + 1/6 * (fipjp + fimjp + fimjm + fipjm)
        - 10/3 * f
    )


@njit(parallel=True, cache=True)
def gradient_numba(f, gx, gy, scale):
    """
    Numba-accelerated nine-point gradient.

    Parameters
    ----------
    f : ndarray
        Scalar field, shape (lx, ly)
    gx, gy : ndarray
        Output derivatives, shape (lx, ly)
    scale : float
        Uniform factor applied to both components
    """
    lx, ly = f.shape

    for i in prange(lx):
        ip = (i + 1) % lx
        im = (i - 1 + lx) % lx
        for j in range(ly):
            jp = (j + 1) % ly
            jm = (j - 1 + ly) % ly

            gx[i, j] = scale * (
                1/3 * (f[ip, j] - f[im, j])
                + 1/12 * (f[ip, jp] - f[im, jp] - f[im, jm] + f[ip, jm])
            )
            gy[i, j] = scale * (
                1/3 * (f[i, jp] - f[i, jm])
                + 1/12 * (f[ip, jp] + f[im, jp] - f[im, jm] - f[ip, jm])
            )


@njit(parallel=True, cache=True)
def laplacian_numba(f, out, scale):
    """
    Numba-accelerated nine-point Laplacian.

    Parameters
    ----------
    f : ndarray
        Scalar field, shape (lx, ly)
    out : ndarray
        Output field, shape (lx, ly)
    scale : float
        Leading coefficient
    """
    lx, ly = f.shape

    for i in prange(lx):
        ip = (i + 1) % lx
        im = (i - 1 + lx) % lx
        for j in range(ly):
            jp = (j + 1) % ly
            jm = (j - 1 + ly) % ly

            out[i, j] = scale * (
                2/3 * (f[ip, j] + f[i, jp] + f[im, j] + f[i, jm])
                + 1/6 * (f[ip, jp] + f[im, jp] + f[im, jm] + f[ip, jm])
                - 10/3 * f[i, j]
            )


def gradient_fast(f, scale=1.0):
    """Numba gradient returning new arrays, see `gradient`."""
    f = np.ascontiguousarray(f, dtype=np.float64)
    gx = np.empty_like(f)
    gy = np.empty_like(f)
    gradient_numba(f, gx, gy, float(scale))
    return gx, gy


def laplacian_fast(f, scale=1.0):
    """Numba Laplacian returning a new array, see `laplacian`."""
    f = np.ascontiguousarray(f, dtype=np.float64)
    out = np.empty_like(f)
    laplacian_numba(f, out, float(scale))
    return out
