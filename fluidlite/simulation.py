"""
simulation.py — Master Physics Loop
====================================
This is the complete simulation step that ties everything together.
One call to `step()` advances the fluid by one frame.

Physics pipeline per frame (the order is part of the contract, each
stage relies on what the previous one left behind):
  1. Snapshot velocity
  2. Diffuse velocity (viscosity)
  3. Project velocity (remove divergence from diffusion)
  4. Vorticity confinement (optional)
  5. Snapshot velocity again
  6. Advect velocity (self-advection, snapshot is source and carrier)
  7. Project again (remove divergence from advection)
  8. Snapshot dye
  9. Diffuse dye
 10. Snapshot diffused dye
 11. Advect dye through the final velocity
 12. Decay dye, snapping near-zero values to exactly 0

This follows the "Stable Fluids" paper by Jos Stam.
"""

import numpy as np
from .grid import FluidGrid, set_boundary
from .advect import advect_scalar, advect_velocity
from .diffuse import diffuse
from .forces import apply_splat, vorticity_confinement
from .solver import project, mean_interior_divergence


# ── Dye decay ─────────────────────────────────────────────────────────────────
DENSITY_RETENTION = 0.997   # fraction of dye kept each frame
DENSITY_EPSILON   = 0.001   # dye below this snaps to exactly 0


class FluidSimulation:
    """
    The complete 2D fluid simulation.

    Usage:
        sim = FluidSimulation(160, 96)
        for frame in range(100):
            sim.add_splat(80, 48, 10, 10.0, 14.0, 0.0)
            sim.step(0.12, 0.0007, 0.0002, 25, 10, True, 0.9)
            density = sim.density        # Hand to the renderer
    """

    def __init__(self, width: int, height: int):
        """
        Args:
            width, height : Grid size in cells (each ≥ 3)
        """
        self.grid = FluidGrid(width, height)
        self.frame = 0

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    @property
    def density(self) -> np.ndarray:
        """Row-major dye field, length W*H."""
        return self.grid.flat("density")

    @property
    def velocity(self) -> tuple[np.ndarray, np.ndarray]:
        """Row-major (u, v), each length W*H."""
        return self.grid.flat("u"), self.grid.flat("v")

    def resize(self, width: int, height: int):
        """Reallocate at new dimensions. All prior state is discarded."""
        self.grid.resize(width, height)
        self.frame = 0

    def reset(self):
        """Zero every field, keep the size."""
        self.grid.reset()
        self.frame = 0

    def add_splat(self, cx: float, cy: float, radius: float,
                  dye_amount: float, force_x: float, force_y: float):
        """Inject dye and momentum around (cx, cy). See forces.apply_splat."""
        apply_splat(self.grid, cx, cy, radius, dye_amount, force_x, force_y)

    def step(self, dt: float, viscosity: float, dye_diffusion: float,
             projection_iters: int, diffusion_iters: int,
             vorticity_enabled: bool, vorticity_eps: float):
        """
        Advance the simulation by one frame, mutating velocity and dye in place.

        Args:
            dt                : Timestep
            viscosity         : Velocity diffusion coefficient
            dye_diffusion     : Dye diffusion coefficient
            projection_iters  : Pressure sweeps per projection (< 1 runs 1)
            diffusion_iters   : Relaxation sweeps per diffusion (< 1 runs 1)
            vorticity_enabled : Apply vorticity confinement
            vorticity_eps     : Confinement strength
        """
        g = self.grid
        projection_iters = max(1, int(projection_iters))
        diffusion_iters = max(1, int(diffusion_iters))

        # ── Velocity: diffuse, project, confine ────────────────────────────
        np.copyto(g.u_prev, g.u)
        np.copyto(g.v_prev, g.v)
        diffuse(g.u, g.u_prev, viscosity, dt, diffusion_iters)
        diffuse(g.v, g.v_prev, viscosity, dt, diffusion_iters)

        project(g.u, g.v, g.pressure, g.divergence, projection_iters)

        if vorticity_enabled:
            vorticity_confinement(g.u, g.v, g.curl, vorticity_eps)

        # ── Velocity: self-advect, project again ───────────────────────────
        np.copyto(g.u_prev, g.u)
        np.copyto(g.v_prev, g.v)
        advect_velocity(g.u, g.v, g.u_prev, g.v_prev, dt)

        project(g.u, g.v, g.pressure, g.divergence, projection_iters)

        # ── Dye: diffuse, advect through the final velocity ────────────────
        np.copyto(g.density_prev, g.density)
        diffuse(g.density, g.density_prev, dye_diffusion, dt, diffusion_iters)

        np.copyto(g.density_prev, g.density)
        advect_scalar(g.density, g.density_prev, g.u, g.v, dt)
        set_boundary(g.density)

        # ── Dye decay ──────────────────────────────────────────────────────
        g.density *= DENSITY_RETENTION
        g.density[g.density < DENSITY_EPSILON] = 0.0

        self.frame += 1

    def status(self) -> dict:
        """Snapshot of the current state for HUDs and headless runs."""
        g = self.grid
        speed = np.sqrt(g.u * g.u + g.v * g.v)
        return {
            "frame"           : self.frame,
            "density_max"     : float(g.density.max()),
            "density_total"   : float(g.density.sum()),
            "speed_max"       : float(speed.max()),
            "divergence_mean" : mean_interior_divergence(g.u, g.v),
        }
