"""
Initial Height Fields

Shape builders for droplets, rivulets and perturbed films. Contact angles
are given in units of pi like everywhere else in the package. Heights
below the precursor thickness are raised to it, the default precursor is
the root hmin - hcrit of the default disjoining pressure.
"""

import numpy as np

PRECURSOR = 0.05


def _grid(lx, ly):
    x = np.arange(lx, dtype=np.float64)[:, None]
    y = np.arange(ly, dtype=np.float64)[None, :]
    return x, y


def spherical_cap(r_sq, radius, theta):
    """
    Height of a spherical cap with given sphere radius and contact angle.

    Parameters
    ----------
    r_sq : ndarray
        Squared distance to the cap axis
    radius : float
        Radius of the sphere
    theta : float
        Contact angle in units of pi

    Returns
    -------
    h : ndarray
        Cap height, negative outside the wetted area
    """
    return np.sqrt(np.maximum(radius * radius - r_sq, 0.0)) - radius * np.cos(np.pi * theta)


def base_radius(radius, theta):
    """Footprint radius of a cap, R sin(pi theta)."""
    return radius * np.sin(np.pi * theta)


def single_droplet(lx, ly, radius, theta, center=None, precursor=PRECURSOR):
    """
    Sessile droplet shaped as a spherical cap.

    Parameters
    ----------
    lx, ly : int
        Lattice size
    radius : float
        Radius of the sphere the cap is cut from
    theta : float
        Contact angle in units of pi
    center : tuple, optional
        Position of the cap axis, default (lx // 2, ly // 2)
    precursor : float
        Minimum film thickness

    Returns
    -------
    h : ndarray
        Height field, shape (lx, ly)
    """
    if center is None:
        center = (lx // 2, ly // 2)
    x, y = _grid(lx, ly)

    r_sq = (x - center[0]) ** 2 + (y - center[1]) ** 2
    h = spherical_cap(r_sq, radius, theta)

    return np.maximum(h, precursor)


def two_droplets(lx, ly, radius, theta, precursor=PRECURSOR, radius2=None):
    """
    Two sessile droplets touching in the middle of the x axis.

    The caps are centred on the line y = ly // 2 at a distance of their
    base radii from x = lx // 2, so the contact lines meet at one point.

    Parameters
    ----------
    lx, ly : int
        Lattice size
    radius : float
        Sphere radius of the left droplet
    theta : float
        Contact angle in units of pi
    precursor : float
        Minimum film thickness
    radius2 : float, optional
        Sphere radius of the right droplet, defaults to `radius`

    Returns
    -------
    h : ndarray
        Height field, shape (lx, ly)
    """
    if radius2 is None:
        radius2 = radius
    x, y = _grid(lx, ly)
    cx = lx // 2
    cy = ly // 2

    left = cx - base_radius(radius, theta)
    right = cx + base_radius(radius2, theta)

    h_left = spherical_cap((x - left) ** 2 + (y - cy) ** 2, radius, theta)
    h_right = spherical_cap((x - right) ** 2 + (y - cy) ** 2, radius2, theta)

    return np.maximum(np.maximum(h_left, h_right), precursor)


def rivulet(lx, ly, radius, theta, orientation="y", center=None, precursor=PRECURSOR):
    """
    Straight rivulet with a circular cross section.

    Parameters
    ----------
    lx, ly : int
        Lattice size
    radius : float
        Radius of the cylinder the rivulet is cut from
    theta : float
        Contact angle in units of pi
    orientation : str
        Axis the rivulet runs along, "x" or "y"
    center : float, optional
        Position of the rivulet axis across the flow direction
    precursor : float
        Minimum film thickness

    Returns
    -------
    h : ndarray
        Height field, shape (lx, ly)
    """
    x, y = _grid(lx, ly)

    if orientation == "y":
        center = lx // 2 if center is None else center
        r_sq = (x - center) ** 2 + 0.0 * y
    elif orientation == "x":
        center = ly // 2 if center is None else center
        r_sq = 0.0 * x + (y - center) ** 2
    else:
        raise ValueError(f"orientation must be 'x' or 'y', got {orientation!r}")

    return np.maximum(spherical_cap(r_sq, radius, theta), precursor)


def sine_film(lx, ly, h0=1.0, eps=0.1, kx=1, ky=1):
    """
    Flat film with a sinusoidal undulation.

    h = h0 + eps * sin(2 pi kx x / lx) * sin(2 pi ky y / ly)
    """
    x, y = _grid(lx, ly)
    return h0 + eps * np.sin(2.0 * np.pi * kx * x / lx) * np.sin(2.0 * np.pi * ky * y / ly)
