"""
Streaming Step

Propagation of post-collision populations along the lattice velocities
with periodic wraparound:

    f_k(x + e_k, t + 1) = f_k^post(x, t)

Implemented as a gather (pull) from x - e_k into a separate output
buffer. Reading and writing the same array would overwrite values that
other sites still have to read, so the output never aliases the input.
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, Q


def _check_buffers(f_post, f_out):
    if f_out is f_post or np.shares_memory(f_out, f_post):
        raise ValueError("Streaming output must not share memory with its input")


def stream_periodic(f_post, f_out=None):
    """
    Streaming step with periodic boundary conditions.

    Parameters
    ----------
    f_post : ndarray
        Post-collision distribution, shape (lx, ly, Q)
    f_out : ndarray, optional
        Output buffer, shape (lx, ly, Q). Allocated when omitted.

    Returns
    -------
    f_out : ndarray
        Post-streaming distribution
    """
    if f_out is None:
        f_out = np.empty_like(f_post)
    else:
        _check_buffers(f_post, f_out)

    f_out[..., 0] = f_post[..., 0]
    for k in range(1, Q):
        # np.roll by +e moves the value at x to x + e
        f_out[..., k] = np.roll(f_post[..., k], (EX[k], EY[k]), axis=(0, 1))

    return f_out


@njit(parallel=True, cache=True)
def stream_periodic_numba(f_post, f_out, ex, ey):
    """
    Numba-accelerated streaming with periodic boundaries (pull scheme).

    Parameters
    ----------
    f_post : ndarray
        Input distribution functions, shape (lx, ly, Q)
    f_out : ndarray
        Output distribution functions, shape (lx, ly, Q)
    ex, ey : ndarray
        Lattice velocity components
    """
    lx, ly, q = f_post.shape

    for i in prange(lx):
        for j in range(ly):
            for k in range(q):
                i_src = (i - ex[k] + lx) % lx
                j_src = (j - ey[k] + ly) % ly

                f_out[i, j, k] = f_post[i_src, j_src, k]


def stream_periodic_fast(f_post, f_out=None):
    """Fast streaming using Numba, see `stream_periodic`."""
    if f_out is None:
        f_out = np.empty_like(f_post)
    else:
        _check_buffers(f_post, f_out)

    stream_periodic_numba(f_post, f_out, EX, EY)
    return f_out
