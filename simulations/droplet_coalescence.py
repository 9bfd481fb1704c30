"""
Droplet Coalescence Simulation

Two sessile droplets that touch in a single point merge into one. The
thickness of the liquid bridge at the touching point grows as

    h0(t) ~ t^(2/3)

in the low contact angle regime (Hernandez-Sanchez et al., PRL 109,
184502, 2012). The experiment runs on a quasi one-dimensional lattice
(ly = 1), where the nine-point stencils reduce to the central differences
of the one-dimensional thin-film equation.
"""

import time
import sys
import os

import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from thinfilm import (
    SystemConstants,
    SimulationState,
    two_droplets,
    bridge_height,
    fit_power_law,
)
from thinfilm.initial import base_radius


class CoalescenceSimulation:
    """
    Coalescence of two equal droplets.

    Parameters
    ----------
    lx : int
        Number of lattice sites along the coalescence axis
    radius : float
        Radius of the circles the droplets are cut from
    theta : float
        Contact angle in units of pi
    ly : int
        Lattice size across the coalescence axis, 1 for the quasi 1D case
    backend : str
        Execution backend
    **kwargs
        Further SystemConstants fields, e.g. tau or gamma
    """

    def __init__(self, lx=1024, radius=500, theta=1/9, ly=1, backend="numba", **kwargs):
        self.sys = SystemConstants(lx=lx, ly=ly, theta=theta, **kwargs)
        self.radius = radius

        self.state = SimulationState(self.sys, backend=backend)
        self.state.initialize(two_droplets(lx, ly, radius, theta))

        self.times = []
        self.bridge = []

    @property
    def base_radius(self):
        return base_radius(self.radius, self.sys.theta)

    def measure(self, height=None):
        """Record the bridge height of the current state."""
        if height is None:
            height = self.state.snapshot()["height"]
        h0, _ = bridge_height(height, half_width=int(self.base_radius) // 2)
        self.times.append(self.state.time)
        self.bridge.append(h0)
        return h0

    def run(self, num_steps, dump=100, verbose=True):
        """
        Run the coalescence and sample the bridge height.

        Parameters
        ----------
        num_steps : int
            Number of time steps
        dump : int
            Steps between bridge height samples
        verbose : bool
            Print progress information

        Returns
        -------
        times, bridge : ndarray
            Sample times and bridge heights
        """
        mass_initial = self.state.mass

        for step in range(num_steps):
            self.state.step()

            if (step + 1) % dump == 0:
                h0 = self.measure()
                if verbose:
                    print(f"Step {step + 1}: h0 = {h0:.4f}")

        if verbose:
            drift = abs(self.state.mass - mass_initial) / mass_initial
            print(f"Relative mass drift: {drift:.2e}")

        return np.array(self.times), np.array(self.bridge)

    def growth_exponent(self, t_min=None, t_max=None):
        """
        Power-law exponent of the bridge growth in a time window.

        Returns
        -------
        exponent : float
        prefactor : float
        """
        t = np.array(self.times, dtype=np.float64)
        h0 = np.array(self.bridge, dtype=np.float64)

        mask = np.ones_like(t, dtype=bool)
        if t_min is not None:
            mask &= t >= t_min
        if t_max is not None:
            mask &= t <= t_max

        exponent, prefactor, _ = fit_power_law(t[mask], h0[mask])
        return exponent, prefactor


def run_coalescence_simulation(lx=1024, radius=500, theta=1/9, num_steps=20000,
                               dump=100, backend="numba", verbose=True):
    """
    Run the coalescence experiment and fit the bridge growth.

    Returns
    -------
    sim : CoalescenceSimulation
        Simulation object with results
    """
    if verbose:
        print("Droplet Coalescence Simulation")
        print("=" * 50)
        print(f"Grid: {lx} x 1, droplet radius: {radius}")
        print(f"Contact angle: {theta:.4f} pi")
        print(f"Backend: {backend}")
        print()

    sim = CoalescenceSimulation(lx, radius, theta, backend=backend)

    start = time.perf_counter()
    sim.run(num_steps, dump=dump, verbose=False)
    elapsed = time.perf_counter() - start

    if verbose:
        exponent, _ = sim.growth_exponent(t_min=10 * dump)
        print(f"Simulation time: {elapsed:.2f}s")
        print(f"Final bridge height: {sim.bridge[-1]:.4f}")
        print(f"Growth exponent: {exponent:.3f} (thin-film theory: 2/3)")

    return sim


if __name__ == "__main__":
    run_coalescence_simulation()
