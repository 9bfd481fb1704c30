"""
Coalescence Analysis

Bridge height between two droplets and power-law fits of its growth.
For thin droplets with constant surface tension the bridge grows as
h0(t) ~ t^(2/3) in an intermediate time window (Hernandez-Sanchez et al.,
PRL 109, 184502, 2012).
"""

import numpy as np
from scipy import stats


def bridge_height(h, center=None, half_width=None, row=None):
    """
    Minimum film thickness in the neck between two droplets.

    Parameters
    ----------
    h : ndarray
        Height field, shape (lx, ly)
    center : int, optional
        Position of the neck along x, default lx // 2
    half_width : int, optional
        Half width of the searched region, default lx // 4
    row : int, optional
        Line y = row through both droplet centres, default ly // 2

    Returns
    -------
    h0 : float
        Bridge height
    position : int
        x position of the minimum
    """
    lx, ly = h.shape
    center = lx // 2 if center is None else center
    half_width = lx // 4 if half_width is None else half_width
    row = ly // 2 if row is None else row

    lo = max(center - half_width, 0)
    hi = min(center + half_width + 1, lx)
    neck = h[lo:hi, row]

    idx = int(np.argmin(neck))
    return float(neck[idx]), lo + idx


def fit_power_law(t, y):
    """
    Fit y = a * t^b by linear regression in log-log space.

    Parameters
    ----------
    t : array_like
        Positive times
    y : array_like
        Positive observable

    Returns
    -------
    exponent : float
        b
    prefactor : float
        a
    r_value : float
        Correlation coefficient of the log-log fit
    """
    t = np.asarray(t, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    if np.any(t <= 0) or np.any(y <= 0):
        raise ValueError("Power-law fit needs strictly positive data")

    result = stats.linregress(np.log(t), np.log(y))
    return result.slope, float(np.exp(result.intercept)), result.rvalue
