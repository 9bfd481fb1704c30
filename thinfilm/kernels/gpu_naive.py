"""
Naive GPU Backend

CUDA kernels using Numba, one thread per lattice site.

Fields live on the device for the whole run. Only sampling (`to_host`),
mass monitoring (`total`) and the thermal noise, which is drawn on the
host, move data across the bus.
"""

import math

import numpy as np
from numba import cuda

from ..lattice import force_weights
from ..forces import thermal_fluctuations


def check_cuda_available():
    """Check if a CUDA device can be used."""
    return cuda.is_available()


# =============================================================================
# Device Functions
# =============================================================================

@cuda.jit(device=True)
def get_ex(k):
    """Get x-component of lattice velocity."""
    # EX = [0, 1, 0, -1, 0, 1, -1, -1, 1]
    if k == 0 or k == 2 or k == 4:
        return 0
    elif k == 1 or k == 5 or k == 8:
        return 1
    else:  # k == 3, 6, 7
        return -1


@cuda.jit(device=True)
def get_ey(k):
    """Get y-component of lattice velocity."""
    # EY = [0, 0, 1, 0, -1, 1, 1, -1, -1]
    if k == 0 or k == 1 or k == 3:
        return 0
    elif k == 2 or k == 5 or k == 6:
        return 1
    else:  # k == 4, 7, 8
        return -1


@cuda.jit(device=True)
def get_weight(k):
    """Equilibrium weight of a moving population."""
    if k < 5:
        return 1.0 / 9.0
    else:
        return 1.0 / 36.0


@cuda.jit(device=True)
def power_int(arg, n):
    temp = 1.0
    for _ in range(n):
        temp *= arg
    return temp


@cuda.jit(device=True)
def laplacian_site(f, i, j, lx, ly):
    ip = (i + 1) % lx
    im = (i - 1 + lx) % lx
    jp = (j + 1) % ly
    jm = (j - 1 + ly) % ly
    return (
        2.0 / 3.0 * (f[ip, j] + f[i, jp] + f[im, j] + f[i, jm])
        + 1.0 / 6.0 * (f[ip, jp] + f[im, jp] + f[im, jm] + f[ip, jm])
        - 10.0 / 3.0 * f[i, j]
    )


# =============================================================================
# Stencil Kernels
# =============================================================================

@cuda.jit
def gradient_kernel(f, gx, gy, scale, lx, ly):
    i, j = cuda.grid(2)

    if i < lx and j < ly:
        ip = (i + 1) % lx
        im = (i - 1 + lx) % lx
        jp = (j + 1) % ly
        jm = (j - 1 + ly) % ly

        gx[i, j] = scale * (
            1.0 / 3.0 * (f[ip, j] - f[im, j])
            + 1.0 / 12.0 * (f[ip, jp] - f[im, jp] - f[im, jm] + f[ip, jm])
        )
        gy[i, j] = scale * (
            1.0 / 3.0 * (f[i, jp] - f[i, jm])
            + 1.0 / 12.0 * (f[ip, jp] + f[im, jp] - f[im, jm] - f[ip, jm])
        )


@cuda.jit
def laplacian_kernel(f, out, scale, lx, ly):
    i, j = cuda.grid(2)

    if i < lx and j < ly:
        out[i, j] = scale * laplacian_site(f, i, j, lx, ly)


@cuda.jit
def filmpressure_kernel(h, theta, out, gamma, n, m, hmin, hcrit, lx, ly):
    """
    Capillary and disjoining pressure.

    p = -gamma * lap(h) - kappa(theta) * [(hmin/(h+hcrit))^n - (hmin/(h+hcrit))^m]
    """
    i, j = cuda.grid(2)

    if i < lx and j < ly:
        geometry = (n - 1) * (m - 1) / ((n - m) * hmin)
        kappa = gamma * (1.0 - math.cos(math.pi * theta[i, j])) * geometry
        ratio = hmin / (h[i, j] + hcrit)

        out[i, j] = -gamma * laplacian_site(h, i, j, lx, ly) - kappa * (
            power_int(ratio, n) - power_int(ratio, m)
        )


@cuda.jit
def scale_by_height_kernel(h, gx, gy, lx, ly):
    i, j = cuda.grid(2)

    if i < lx and j < ly:
        gx[i, j] = h[i, j] * gx[i, j]
        gy[i, j] = h[i, j] * gy[i, j]


# =============================================================================
# Force Kernels
# =============================================================================

@cuda.jit
def slippage_kernel(h, vx, vy, slip_x, slip_y, delta, mu, lx, ly):
    i, j = cuda.grid(2)

    if i < lx and j < ly:
        h_ij = h[i, j]
        factor = 6.0 * mu * h_ij / (2.0 * h_ij * h_ij + 6.0 * delta * h_ij + 3.0 * delta * delta)
        slip_x[i, j] = factor * vx[i, j]
        slip_y[i, j] = factor * vy[i, j]


@cuda.jit
def assemble_force_kernel(out, h_grad_p, slip, fluct, lx, ly):
    i, j = cuda.grid(2)

    if i < lx and j < ly:
        out[i, j] = -h_grad_p[i, j] - slip[i, j] - fluct[i, j]


@cuda.jit
def add_kernel(out, term, lx, ly):
    i, j = cuda.grid(2)

    if i < lx and j < ly:
        out[i, j] += term[i, j]


# =============================================================================
# Lattice Boltzmann Kernels
# =============================================================================

@cuda.jit
def equilibrium_kernel(h, vx, vy, f_eq, gravity, lx, ly):
    """Shallow-water equilibrium, layout (lx, ly, 9)."""
    i, j = cuda.grid(2)

    if i < lx and j < ly:
        h_ij = h[i, j]
        vx_ij = vx[i, j]
        vy_ij = vy[i, j]
        u_sq = vx_ij * vx_ij + vy_ij * vy_ij
        gh = 1.5 * gravity * h_ij

        f_eq[i, j, 0] = h_ij * (1.0 - 5.0 / 6.0 * gravity * h_ij - 2.0 / 3.0 * u_sq)

        for k in range(1, 9):
            eu = get_ex(k) * vx_ij + get_ey(k) * vy_ij
            f_eq[i, j, k] = get_weight(k) * h_ij * (gh + 3.0 * eu + 4.5 * eu * eu - 1.5 * u_sq)


@cuda.jit
def bgk_stream_kernel(f_out, f_eq, f_temp, fx, fy, omega, inv_tau, fw, lx, ly):
    """
    Fused BGK collision, force injection and streaming (pull scheme).
    """
    i, j = cuda.grid(2)

    if i < lx and j < ly:
        for k in range(9):
            ex = get_ex(k)
            ey = get_ey(k)
            i_src = (i - ex + lx) % lx
            j_src = (j - ey + ly) % ly

            f_post = omega * f_temp[i_src, j_src, k] + inv_tau * f_eq[i_src, j_src, k]
            if fw[k] != 0.0:
                f_post += fw[k] * (ex * fx[i_src, j_src] + ey * fy[i_src, j_src])

            f_out[i, j, k] = f_post


@cuda.jit
def moments_kernel(f, h, vx, vy, floor, lx, ly):
    i, j = cuda.grid(2)

    if i < lx and j < ly:
        h_local = 0.0
        h_vx = 0.0
        h_vy = 0.0

        for k in range(9):
            f_k = f[i, j, k]
            h_local += f_k
            h_vx += f_k * get_ex(k)
            h_vy += f_k * get_ey(k)

        h[i, j] = h_local

        if h_local > floor:
            vx[i, j] = h_vx / h_local
            vy[i, j] = h_vy / h_local
        else:
            vx[i, j] = 0.0
            vy[i, j] = 0.0


# =============================================================================
# Backend
# =============================================================================

class CUDABackend:
    """
    GPU backend using Numba CUDA.

    Parameters
    ----------
    block_size : tuple
        CUDA block dimensions (default (16, 16))
    """

    name = "cuda"

    def __init__(self, block_size=(16, 16)):
        if not check_cuda_available():
            raise RuntimeError("CUDA backend requested but no CUDA device is available")
        self.block_size = block_size
        self._force_weights = {}

    def __repr__(self):
        return f"CUDABackend(block_size={self.block_size})"

    def _launch(self, shape):
        lx, ly = shape[0], shape[1]
        grid_size = (
            (lx + self.block_size[0] - 1) // self.block_size[0],
            (ly + self.block_size[1] - 1) // self.block_size[1],
        )
        return (grid_size, self.block_size), lx, ly

    def _fw(self, variant):
        if variant not in self._force_weights:
            self._force_weights[variant] = cuda.to_device(force_weights(variant))
        return self._force_weights[variant]

    # Memory

    def zeros(self, shape):
        return cuda.to_device(np.zeros(shape, dtype=np.float64))

    def to_device(self, array):
        return cuda.to_device(np.ascontiguousarray(array, dtype=np.float64))

    def to_host(self, array):
        return array.copy_to_host()

    def copy_into(self, dst, src):
        dst.copy_to_device(src)

    def total(self, array):
        return float(np.sum(array.copy_to_host()))

    # Stencils and pressure

    def gradient(self, f, gx, gy, scale=1.0):
        launch, lx, ly = self._launch(f.shape)
        gradient_kernel[launch](f, gx, gy, float(scale), lx, ly)

    def laplacian(self, f, out, scale=1.0):
        launch, lx, ly = self._launch(f.shape)
        laplacian_kernel[launch](f, out, float(scale), lx, ly)

    def filmpressure(self, h, theta, out, gamma, n, m, hmin, hcrit):
        launch, lx, ly = self._launch(h.shape)
        filmpressure_kernel[launch](
            h, theta, out, float(gamma), int(n), int(m), float(hmin), float(hcrit), lx, ly
        )

    def h_grad_p(self, h, p, out_x, out_y):
        launch, lx, ly = self._launch(h.shape)
        gradient_kernel[launch](p, out_x, out_y, 1.0, lx, ly)
        scale_by_height_kernel[launch](h, out_x, out_y, lx, ly)

    # Forces

    def slippage(self, h, vx, vy, out_x, out_y, delta, mu):
        launch, lx, ly = self._launch(h.shape)
        slippage_kernel[launch](h, vx, vy, out_x, out_y, float(delta), float(mu), lx, ly)

    def thermal(self, h, out_x, out_y, kbt, mu, delta, rng):
        fluc_x, fluc_y = thermal_fluctuations(h.copy_to_host(), kbt, mu, delta, rng)
        out_x.copy_to_device(fluc_x)
        out_y.copy_to_device(fluc_y)

    def assemble_force(self, out, h_grad_p, slip, fluct):
        launch, lx, ly = self._launch(out.shape)
        assemble_force_kernel[launch](out, h_grad_p, slip, fluct, lx, ly)

    def add(self, out, term):
        launch, lx, ly = self._launch(out.shape)
        add_kernel[launch](out, term, lx, ly)

    # Lattice Boltzmann

    def equilibrium(self, h, vx, vy, f_eq, gravity=0.0):
        launch, lx, ly = self._launch(h.shape)
        equilibrium_kernel[launch](h, vx, vy, f_eq, float(gravity), lx, ly)

    def bgk_and_stream(self, f_out, f_eq, f_temp, fx, fy, tau, variant="two_diagonal"):
        launch, lx, ly = self._launch(f_out.shape)
        bgk_stream_kernel[launch](
            f_out, f_eq, f_temp, fx, fy, 1.0 - 1.0 / tau, 1.0 / tau, self._fw(variant), lx, ly
        )

    def moments(self, f, h, vx, vy, floor):
        launch, lx, ly = self._launch(h.shape)
        moments_kernel[launch](f, h, vx, vy, float(floor), lx, ly)

    def synchronize(self):
        """Wait for all kernels to complete."""
        cuda.synchronize()
