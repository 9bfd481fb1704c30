"""
System Constants

Immutable run configuration for the thin-film solver. One instance is
created per run and handed to the state and backend constructors.

Defaults describe the common partially wetting case: surface tension
0.01, a 20 degree contact angle (theta is given in units of pi) and a
(9, 3) disjoining pressure with hmin = 0.1 and hcrit = 0.05.
"""

from dataclasses import dataclass, replace
from typing import Optional
import numbers

from .collision import tau_from_viscosity, validate_tau, viscosity_from_tau
from .lattice import force_weights


@dataclass(frozen=True)
class SystemConstants:
    """
    Parameters of a thin-film lattice Boltzmann run.

    Parameters
    ----------
    lx, ly : int
        Lattice size along x and y
    tau : float
        BGK relaxation time
    gamma : float
        Surface tension
    theta : float
        Equilibrium contact angle in units of pi
    n, m : int
        Exponents of the disjoining pressure, n > m > 0
    hmin : float
        Disjoining pressure length scale
    hcrit : float
        Regulariser of the power-law terms for vanishing film height
    gravity : float
        Gravitational acceleration in the shallow-water equilibrium
    delta : float
        Slip length of the substrate friction
    kbt : float
        Thermal energy, zero disables the fluctuation force
    forcing : str
        Force injection variant, "two_diagonal" or "isotropic"
    velocity_floor : float
        Height below which the velocity is set to zero
    tmax, tdump : int
        Number of time steps and sampling interval
    seed : int, optional
        Seed of the thermal noise generator
    """

    lx: int = 256
    ly: int = 256
    tau: float = 1.0
    gamma: float = 0.01
    theta: float = 1.0 / 9.0
    n: int = 9
    m: int = 3
    hmin: float = 0.1
    hcrit: float = 0.05
    gravity: float = 0.0
    delta: float = 1.0
    kbt: float = 0.0
    forcing: str = "two_diagonal"
    velocity_floor: float = 1e-10
    tmax: int = 1000
    tdump: int = 100
    seed: Optional[int] = None

    def __post_init__(self):
        if self.lx < 1 or self.ly < 1:
            raise ValueError(f"Grid size must be positive, got ({self.lx}, {self.ly})")
        if self.tau <= 0.0:
            raise ValueError(f"tau must be > 0, got {self.tau}")
        validate_exponents(self.n, self.m)
        if self.hmin <= 0.0:
            raise ValueError(f"hmin must be > 0, got {self.hmin}")
        if self.hcrit < 0.0:
            raise ValueError(f"hcrit must be >= 0, got {self.hcrit}")
        if self.kbt < 0.0:
            raise ValueError(f"kbt must be >= 0, got {self.kbt}")
        if self.velocity_floor < 0.0:
            raise ValueError(f"velocity_floor must be >= 0, got {self.velocity_floor}")
        if self.tdump < 1:
            raise ValueError(f"tdump must be >= 1, got {self.tdump}")
        force_weights(self.forcing)
        validate_tau(self.tau)

    @property
    def mu(self):
        """Kinematic viscosity set by tau."""
        return viscosity_from_tau(self.tau)

    @property
    def omega(self):
        return 1.0 - 1.0 / self.tau

    @property
    def shape(self):
        return (self.lx, self.ly)

    @property
    def force_weights(self):
        return force_weights(self.forcing)

    @classmethod
    def from_viscosity(cls, lx, ly, nu, **kwargs):
        """Build constants from a kinematic viscosity instead of tau."""
        return cls(lx=lx, ly=ly, tau=tau_from_viscosity(nu), **kwargs)

    def with_changes(self, **changes):
        """Copy with some fields replaced, validated like a new instance."""
        return replace(self, **changes)


def validate_exponents(n, m):
    """
    Check the disjoining pressure exponents.

    Raises
    ------
    ValueError
        If n or m is not an integer, m <= 0 or n <= m.
    """
    for name, value in (("n", n), ("m", m)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise ValueError(f"{name} must be an integer, got {value!r}")
    if m <= 0:
        raise ValueError(f"m must be > 0, got {m}")
    if n <= m:
        raise ValueError(f"n must be larger than m, got n={n}, m={m}")
