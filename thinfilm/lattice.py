"""
D2Q9 Lattice Constants for the Thin-Film Solver

Discrete velocities, weights and forcing coefficients shared by every
module and backend.
"""
import numpy as np

# D2Q9 lattice velocities (x along axis 0, y along axis 1)
#     6   2   5
#       \ | /
#     3 - 0 - 1
#       / | \
#     7   4   8

EX = np.array([0, 1, 0, -1, 0, 1, -1, -1, 1], dtype=np.int32)
EY = np.array([0, 0, 1, 0, -1, 1, 1, -1, -1], dtype=np.int32)

# Weights of the moving populations in the shallow-water equilibrium.
# The rest population is fixed by mass conservation instead.
W = np.array([4/9, 1/9, 1/9, 1/9, 1/9, 1/36, 1/36, 1/36, 1/36], dtype=np.float64)

CS2 = 1.0 / 3.0

Q = 9

# Force injection coefficients c_k, correction is c_k * (e_k . F).
# The two-diagonal scheme only forces the anti-diagonals 6 and 8.
FORCE_WEIGHTS = {
    "two_diagonal": np.array(
        [0.0, 1/3, 1/3, 1/3, 1/3, 0.0, 1/24, 0.0, 1/24], dtype=np.float64
    ),
    "isotropic": np.array(
        [0.0, 1/3, 1/3, 1/3, 1/3, 1/24, 1/24, 1/24, 1/24], dtype=np.float64
    ),
}


def force_weights(variant="two_diagonal"):
    """Return the per-direction force coefficients for a forcing variant."""
    try:
        return FORCE_WEIGHTS[variant]
    except KeyError:
        raise ValueError(
            f"Unknown forcing variant {variant!r}, "
            f"expected one of {sorted(FORCE_WEIGHTS)}"
        ) from None
