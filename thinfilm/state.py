"""
Simulation State

Owns every array of a thin-film run and advances it one time step at a
time. The update of a step is

    filmpressure -> h grad p -> friction (-> thermal noise)
    -> force assembly -> equilibrium -> collision and streaming -> moments

Between steps `fout` holds the populations of the current time level.
`ftemp` is the second population buffer; the two are swapped before
collision so that streaming never writes into the array it reads.
"""

import time

import numpy as np

from .config import SystemConstants
from .kernels import get_backend
from .lattice import Q


class SimulationDiverged(RuntimeError):
    """Total mass left the tolerance band or became non-finite."""


class SimulationState:
    """
    Thin-film lattice Boltzmann state.

    Parameters
    ----------
    constants : SystemConstants
        Run configuration, shared read-only
    backend : str or backend
        "numpy", "numba" or "cuda" (default "numba")

    Attributes
    ----------
    fout, ftemp, feq : array
        Population buffers, shape (lx, ly, 9)
    height, velx, vely, pressure : array
        Macroscopic fields, shape (lx, ly)
    Fx, Fy : array
        Total force of the current step
    h_grad_px, h_grad_py, slipx, slipy, kbtx, kbty : array
        Force contributions
    theta : array
        Contact angle field in units of pi
    time : int
        Number of completed steps
    """

    def __init__(self, constants, backend="numba"):
        if not isinstance(constants, SystemConstants):
            raise TypeError(f"Expected SystemConstants, got {type(constants).__name__}")

        self.sys = constants
        self.backend = get_backend(backend)
        self.thermal = constants.kbt > 0.0
        self.rng = np.random.default_rng(constants.seed)

        b = self.backend
        shape = constants.shape
        pop_shape = shape + (Q,)

        # Populations
        self.fout = b.zeros(pop_shape)
        self.ftemp = b.zeros(pop_shape)
        self.feq = b.zeros(pop_shape)

        # Macroscopic fields
        self.height = b.zeros(shape)
        self.velx = b.zeros(shape)
        self.vely = b.zeros(shape)
        self.pressure = b.zeros(shape)
        self.theta = b.to_device(np.full(shape, constants.theta, dtype=np.float64))

        # Forces
        self.Fx = b.zeros(shape)
        self.Fy = b.zeros(shape)
        self.h_grad_px = b.zeros(shape)
        self.h_grad_py = b.zeros(shape)
        self.slipx = b.zeros(shape)
        self.slipy = b.zeros(shape)
        self.kbtx = b.zeros(shape)
        self.kbty = b.zeros(shape)

        self.time = 0
        self.initialized = False

    def __repr__(self):
        return (
            f"SimulationState(shape={self.sys.shape}, backend={self.backend.name!r}, "
            f"time={self.time})"
        )

    def _field(self, values, name):
        field = np.broadcast_to(np.asarray(values, dtype=np.float64), self.sys.shape)
        if not np.all(np.isfinite(field)):
            raise ValueError(f"{name} contains non-finite values")
        return np.ascontiguousarray(field)

    def initialize(self, height, theta=None, velx=None, vely=None):
        """
        Set the initial fields and put the populations at equilibrium.

        Parameters
        ----------
        height : array_like
            Initial film height, shape (lx, ly), non-negative
        theta : float or array_like, optional
            Contact angle (field) in units of pi, default sys.theta
        velx, vely : float or array_like, optional
            Initial velocity, default zero
        """
        height = self._field(height, "height")
        if np.any(height < 0.0):
            raise ValueError("height must be non-negative")

        b = self.backend
        b.copy_into(self.height, height)
        b.copy_into(self.velx, self._field(0.0 if velx is None else velx, "velx"))
        b.copy_into(self.vely, self._field(0.0 if vely is None else vely, "vely"))
        if theta is not None:
            b.copy_into(self.theta, self._field(theta, "theta"))

        b.equilibrium(self.height, self.velx, self.vely, self.fout, self.sys.gravity)
        b.copy_into(self.ftemp, b.to_host(self.fout))

        self.time = 0
        self.initialized = True

    def _external(self, term):
        return self.backend.to_device(np.broadcast_to(np.asarray(term, dtype=np.float64), self.sys.shape))

    def step(self, extra_fx=None, extra_fy=None):
        """
        Advance the state by one time step.

        Parameters
        ----------
        extra_fx, extra_fy : float or array_like, optional
            Additional body forces added to the total force of this step
        """
        if not self.initialized:
            raise RuntimeError("initialize() must be called before step()")

        b = self.backend
        s = self.sys

        b.filmpressure(self.height, self.theta, self.pressure, s.gamma, s.n, s.m, s.hmin, s.hcrit)
        b.h_grad_p(self.height, self.pressure, self.h_grad_px, self.h_grad_py)
        b.slippage(self.height, self.velx, self.vely, self.slipx, self.slipy, s.delta, s.mu)
        if self.thermal:
            b.thermal(self.height, self.kbtx, self.kbty, s.kbt, s.mu, s.delta, self.rng)

        b.assemble_force(self.Fx, self.h_grad_px, self.slipx, self.kbtx)
        b.assemble_force(self.Fy, self.h_grad_py, self.slipy, self.kbty)
        if extra_fx is not None:
            b.add(self.Fx, self._external(extra_fx))
        if extra_fy is not None:
            b.add(self.Fy, self._external(extra_fy))

        b.equilibrium(self.height, self.velx, self.vely, self.feq, s.gravity)

        self.fout, self.ftemp = self.ftemp, self.fout
        b.bgk_and_stream(self.fout, self.feq, self.ftemp, self.Fx, self.Fy, s.tau, s.forcing)

        b.moments(self.fout, self.height, self.velx, self.vely, s.velocity_floor)

        self.time += 1

    @property
    def mass(self):
        """Total liquid volume, sum of the height field."""
        return self.backend.total(self.height)

    def snapshot(self):
        """
        Read-only host copies of the macroscopic fields.

        Returns
        -------
        dict
            time, height, velx, vely, pressure
        """
        b = self.backend
        b.synchronize()
        snap = {"time": self.time}
        for name in ("height", "velx", "vely", "pressure"):
            field = b.to_host(getattr(self, name))
            field.flags.writeable = False
            snap[name] = field
        return snap

    def run(self, steps=None, dump=None, verbose=True, report_interval=None, mass_tolerance=None):
        """
        Run the time loop.

        Parameters
        ----------
        steps : int, optional
            Number of time steps, default sys.tmax
        dump : int, optional
            Sampling interval of snapshots, default sys.tdump
        verbose : bool
            Print progress information
        report_interval : int, optional
            Steps between progress reports, default `dump`
        mass_tolerance : float, optional
            Relative deviation of the total mass that stops the run,
            checked at every sample

        Returns
        -------
        snapshots : list of dict
            Snapshots taken every `dump` steps

        Raises
        ------
        SimulationDiverged
            If the mass check fails
        """
        steps = self.sys.tmax if steps is None else steps
        dump = self.sys.tdump if dump is None else dump
        report_interval = dump if report_interval is None else report_interval

        mass_initial = self.mass
        snapshots = []
        lattice_sites = self.sys.lx * self.sys.ly

        start = time.perf_counter()

        for step in range(steps):
            self.step()

            if (step + 1) % dump == 0:
                snapshots.append(self.snapshot())

                if mass_tolerance is not None:
                    self.check_mass(mass_initial, mass_tolerance)

            if verbose and (step + 1) % report_interval == 0:
                self.backend.synchronize()
                elapsed = time.perf_counter() - start
                mlups = (step + 1) * lattice_sites / elapsed / 1e6
                print(f"Time step {self.time}, mass {self.mass:.6g}, MLUPS: {mlups:.2f}")

        self.backend.synchronize()

        if verbose:
            total = time.perf_counter() - start
            print(f"Completed {steps} steps in {total:.2f}s")

        return snapshots

    def check_mass(self, reference, tolerance):
        """
        Compare the total mass with a reference value.

        Raises
        ------
        SimulationDiverged
            If the mass is non-finite or deviates by more than `tolerance`
            relative to `reference`
        """
        mass = self.mass
        if not np.isfinite(mass):
            raise SimulationDiverged(f"Mass became non-finite at time step {self.time}")

        deviation = abs(mass - reference) / abs(reference) if reference != 0 else abs(mass)
        if deviation > tolerance:
            raise SimulationDiverged(
                f"Mass deviates by {deviation:.2e} from {reference:.6g} "
                f"at time step {self.time} (tolerance {tolerance:.2e})"
            )
        return mass
