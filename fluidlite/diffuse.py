"""
diffuse.py — Implicit Diffusion via In-Place Relaxation
========================================================
Diffusion makes fluids spread out over time.
  - High dye diffusion → dye bleeds into its neighbors (watercolor)
  - Low dye diffusion  → dye stays tight
  - High viscosity     → velocity smooths out fast (honey)
  - Low viscosity      → thin fluid (air, water)

The math: one backward-Euler step of the heat equation,
  (1 + 4a) x[c] - a * (x[l] + x[r] + x[d] + x[u]) = x0[c]

with a = diff * dt * W * H / 4. Implicit, so it's unconditionally stable
for any dt, diff or grid size.

The relaxation sweep updates cells in row-major order and reads its
neighbors from the SAME array it is writing. Left/down neighbors are
already this sweep's values, right/up neighbors are last sweep's. That
ordering must be kept, so the sweep is a sequential numba loop rather
than a two-buffer NumPy slice update.
"""

import numpy as np
from numba import njit

from .grid import set_boundary


@njit(cache=True)
def _relax(x, x0, a, inv_c, iterations):
    h, w = x.shape
    for _ in range(iterations):
        for y in range(1, h - 1):
            for i in range(1, w - 1):
                x[y, i] = (x0[y, i] + a * (
                    x[y, i - 1] + x[y, i + 1] + x[y - 1, i] + x[y + 1, i]
                )) * inv_c
        set_boundary(x)


def diffusion_coefficient(diff: float, dt: float, width: int, height: int) -> float:
    """How much diffusion happens this timestep: a = diff * dt * W * H / 4."""
    return diff * dt * width * height * 0.25


def diffuse(x: np.ndarray, x0: np.ndarray, diff: float, dt: float, iterations: int):
    """
    Advance `x0` by one implicit diffusion step, writing the result into `x`.

    Args:
        x          : Output field, overwritten (shape (H, W))
        x0         : Source field, read only, must not alias `x`
        diff       : Diffusion coefficient (viscosity or dye diffusion), ≥ 0
        dt         : Timestep
        iterations : Relaxation sweeps; anything below 1 runs one sweep

    Modifies: x (in-place)
    """
    h, w = x.shape
    a = diffusion_coefficient(diff, dt, w, h)
    inv_c = 1.0 / (1.0 + 4.0 * a)

    np.copyto(x, x0)
    _relax(x, x0, a, inv_c, max(1, int(iterations)))


def diffusion_residual(x: np.ndarray, x0: np.ndarray, diff: float, dt: float) -> float:
    """
    Max absolute interior residual of the implicit equation for solution `x`.
    Zero means `x` solves the diffusion step exactly.
    """
    h, w = x.shape
    a = diffusion_coefficient(diff, dt, w, h)
    xd = x.astype(np.float64)
    neighbors = xd[1:-1, :-2] + xd[1:-1, 2:] + xd[:-2, 1:-1] + xd[2:, 1:-1]
    residual = (1.0 + 4.0 * a) * xd[1:-1, 1:-1] - a * neighbors - x0[1:-1, 1:-1]
    return float(np.abs(residual).max())
