"""
Thin-film lattice Boltzmann solver.

Simulates the thin-film equation on a doubly periodic D2Q9 lattice with
a shallow-water equilibrium, capillary and disjoining pressure, substrate
friction and optional thermal fluctuations.
"""

from .config import SystemConstants
from .state import SimulationState, SimulationDiverged
from .kernels import get_backend, BACKENDS
from .differences import gradient, laplacian
from .pressure import filmpressure, filmpressure_default, power_broad, h_grad_p
from .equilibrium import compute_equilibrium
from .collision import bgk_and_stream, bgk_collision, force_correction
from .streaming import stream_periodic
from .observables import compute_moments, total_mass
from .forces import slippage, thermal_fluctuations
from .initial import single_droplet, two_droplets, rivulet, sine_film
from .analysis import bridge_height, fit_power_law

__version__ = "0.1.0"

__all__ = [
    "SystemConstants",
    "SimulationState",
    "SimulationDiverged",
    "get_backend",
    "BACKENDS",
    "gradient",
    "laplacian",
    "filmpressure",
    "filmpressure_default",
    "power_broad",
    "h_grad_p",
    "compute_equilibrium",
    "bgk_and_stream",
    "bgk_collision",
    "force_correction",
    "stream_periodic",
    "compute_moments",
    "total_mass",
    "slippage",
    "thermal_fluctuations",
    "single_droplet",
    "two_droplets",
    "rivulet",
    "sine_film",
    "bridge_height",
    "fit_power_law",
]
