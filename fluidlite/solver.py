"""
solver.py — Pressure Projection
================================
The projection step drives the velocity field toward INCOMPRESSIBILITY:
  div(v) ≈ 0 in the interior

This is the step that produces the swirling, fluid-like motion. Diffusion
and advection both leave the velocity field with divergence (fluid "piles
up" in some cells). We fix this by:
  1. Computing divergence of the current velocity field
  2. Solving the Poisson equation for pressure, starting from p = 0
  3. Subtracting the pressure gradient from velocity: v = v - ∇p

Like the diffuser, the pressure sweep reads neighbors from the array it is
writing, in row-major order. More sweeps push the residual divergence
toward (not exactly to) zero; zero sweeps leave velocity untouched apart
from the boundary pass.

The simulation calls this twice per frame: once before self-advection and
once after it.
"""

import numpy as np
from numba import njit

from .grid import set_boundary, compute_divergence


@njit(cache=True)
def _pressure_sweeps(p, div, iterations):
    h, w = p.shape
    for _ in range(iterations):
        for y in range(1, h - 1):
            for x in range(1, w - 1):
                p[y, x] = (div[y, x] + p[y, x - 1] + p[y, x + 1] +
                           p[y - 1, x] + p[y + 1, x]) * 0.25
        set_boundary(p)


def project(u: np.ndarray, v: np.ndarray, p: np.ndarray, div: np.ndarray,
            iterations: int):
    """
    Pressure projection: make the velocity field (approximately) divergence-free.

    Args:
        u, v       : Velocity components, corrected in-place
        p          : Pressure scratch buffer, rebuilt from zero
        div        : Divergence scratch buffer, rebuilt
        iterations : Pressure sweeps (more = closer to divergence-free)

    Modifies: u, v, p, div (in-place)
    """
    # Step 1: divergence of current velocity, pressure seeded to zero
    div[:] = compute_divergence(u, v)
    p[1:-1, 1:-1] = 0.0
    set_boundary(div)
    set_boundary(p)

    # Step 2: Poisson solve
    _pressure_sweeps(p, div, max(0, int(iterations)))

    # Step 3: subtract the pressure gradient (central differences)
    u[1:-1, 1:-1] -= 0.5 * (p[1:-1, 2:] - p[1:-1, :-2])
    v[1:-1, 1:-1] -= 0.5 * (p[2:, 1:-1] - p[:-2, 1:-1])
    set_boundary(u)
    set_boundary(v)


def mean_interior_divergence(u: np.ndarray, v: np.ndarray) -> float:
    """Mean |div| over interior cells. High divergence = broken simulation."""
    div = compute_divergence(u, v)
    return float(np.abs(div[1:-1, 1:-1]).mean())
