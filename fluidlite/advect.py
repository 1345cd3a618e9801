"""
advect.py — Semi-Lagrangian Advection
======================================
This is what makes fluid look like it's *actually flowing*.

The algorithm (per cell):
  1. Look at the current cell center position.
  2. Trace BACKWARD along the velocity field by one timestep (dt).
     → "Where did the stuff in this cell come FROM?"
  3. Clamp that point to [0.5, dim - 1.5] so all four lattice
     neighbors used for sampling exist.
  4. Sample the source field there with bilinear interpolation.
     That sampled value becomes the new value for this cell.

Every output is a weighted average of four existing values, so
advection on its own never creates a new minimum or maximum.

Key reference: Jos Stam, "Stable Fluids" (SIGGRAPH 1999)
"""

import numpy as np


def _backtrace(u: np.ndarray, v: np.ndarray, dt: float) -> tuple[np.ndarray, np.ndarray]:
    """Back-traced, clamped sample positions (px, py) for every cell."""
    h, w = u.shape
    ys, xs = np.indices((h, w), dtype=np.float64)
    px = np.clip(xs - dt * u, 0.5, w - 1.5)
    py = np.clip(ys - dt * v, 0.5, h - 1.5)
    return px, py


def _bilinear_weights(px: np.ndarray, py: np.ndarray):
    """Lower-corner indices and fractional offsets for a bilinear lookup."""
    x0 = np.floor(px).astype(np.intp)
    y0 = np.floor(py).astype(np.intp)
    return x0, y0, px - x0, py - y0


def _bilinear_interpolate(field: np.ndarray, x0, y0, sx, sy) -> np.ndarray:
    """
    Blend the four lattice values around each query point.

    Lerp in X along the lower and upper rows, then lerp in Y.
    """
    c00 = field[y0, x0]
    c10 = field[y0, x0 + 1]
    c01 = field[y0 + 1, x0]
    c11 = field[y0 + 1, x0 + 1]

    lower = c00 * (1 - sx) + c10 * sx
    upper = c01 * (1 - sx) + c11 * sx
    return lower * (1 - sy) + upper * sy


def advect_scalar(dst: np.ndarray, src: np.ndarray,
                  u: np.ndarray, v: np.ndarray, dt: float):
    """
    Transport a scalar field (dye) along the velocity field.

    Args:
        dst  : Output field, overwritten
        src  : Field being transported, read only
        u, v : Transporting velocity
        dt   : Timestep

    Modifies: dst (in-place)
    """
    px, py = _backtrace(u, v, dt)
    x0, y0, sx, sy = _bilinear_weights(px, py)
    dst[:] = _bilinear_interpolate(src, x0, y0, sx, sy)


def advect_velocity(u_dst: np.ndarray, v_dst: np.ndarray,
                    u_src: np.ndarray, v_src: np.ndarray, dt: float):
    """
    Self-advection: the velocity field carries itself.

    Both components are sampled at the SAME back-traced point, computed
    once from the source velocity, so u and v stay consistent.

    Modifies: u_dst, v_dst (in-place)
    """
    px, py = _backtrace(u_src, v_src, dt)
    x0, y0, sx, sy = _bilinear_weights(px, py)
    u_dst[:] = _bilinear_interpolate(u_src, x0, y0, sx, sy)
    v_dst[:] = _bilinear_interpolate(v_src, x0, y0, sx, sy)
