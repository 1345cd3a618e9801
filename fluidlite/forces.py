"""
forces.py — External Forces (Vorticity Confinement, Splats)
============================================================
Applies body forces and sources to the grid.

Vorticity confinement is the important one: diffusion, projection and
semi-Lagrangian advection all smear out small vortices. We find where
the fluid spins and push it to spin a bit more:

  curl  = dv/dx - du/dy
  N     = ∇|curl| / (|∇|curl|| + 1e-6)
  force = eps * (N.y * curl, -N.x * curl)

This is an artificial compensating term, not physically derived.

Splats are the "emitter": dye and momentum added inside a radius with a
smooth (1 - dist²/r²)² falloff that reaches zero at the rim.
"""

import numpy as np
from .grid import FluidGrid


# Keeps the normalization finite where |curl| is flat.
CURL_GRADIENT_EPSILON = 1e-6


def vorticity_confinement(u: np.ndarray, v: np.ndarray, curl: np.ndarray, eps: float):
    """
    Add the confinement force to the velocity field.

    Curl is computed for interior cells; the force is applied to cells at
    least 2 away from every edge (the |curl| gradient needs curl on both
    sides).

    Args:
        u, v : Velocity components, modified in-place
        curl : Scratch buffer, overwritten with the curl field
        eps  : Confinement strength

    Modifies: u, v, curl (in-place)
    """
    curl[:] = 0.0
    curl[1:-1, 1:-1] = 0.5 * (
        (v[1:-1, 2:] - v[1:-1, :-2]) -
        (u[2:, 1:-1] - u[:-2, 1:-1])
    )

    h, w = curl.shape
    if w < 5 or h < 5:
        return  # No cell is 2 away from every edge

    mag = np.abs(curl)
    nx = 0.5 * (mag[2:-2, 3:-1] - mag[2:-2, 1:-3])
    ny = 0.5 * (mag[3:-1, 2:-2] - mag[1:-3, 2:-2])
    length = np.sqrt(nx * nx + ny * ny) + CURL_GRADIENT_EPSILON

    c = curl[2:-2, 2:-2]
    u[2:-2, 2:-2] += eps * (ny / length) * c
    v[2:-2, 2:-2] -= eps * (nx / length) * c


def apply_splat(grid: FluidGrid, cx: float, cy: float, radius: float,
                dye_amount: float, force_x: float, force_y: float):
    """
    Inject dye and momentum around (cx, cy).

    Every cell within `radius` gets dye_amount*k added to density and
    (force_x, force_y)*k added to velocity, k = (1 - dist²/radius²)².
    Iteration is clipped to the integer bounding box inside the grid.

    Args:
        grid             : The FluidGrid to modify in-place
        cx, cy           : Center in cell coordinates (may be fractional)
        radius           : Influence radius in cells; ≤ 0 does nothing
        dye_amount       : Peak dye added at the center
        force_x, force_y : Peak velocity impulse at the center
    """
    if radius <= 0:
        return

    w, h = grid.width, grid.height
    x_lo = min(max(int(cx - radius), 0), w - 1)
    x_hi = min(max(int(cx + radius), 0), w - 1)
    y_lo = min(max(int(cy - radius), 0), h - 1)
    y_hi = min(max(int(cy + radius), 0), h - 1)

    ys, xs = np.mgrid[y_lo:y_hi + 1, x_lo:x_hi + 1]
    r2 = radius * radius
    dist2 = (xs - cx) ** 2 + (ys - cy) ** 2
    k = np.where(dist2 <= r2, (1.0 - dist2 / r2) ** 2, 0.0)

    window = (slice(y_lo, y_hi + 1), slice(x_lo, x_hi + 1))
    grid.density[window] += dye_amount * k
    grid.u[window] += force_x * k
    grid.v[window] += force_y * k
