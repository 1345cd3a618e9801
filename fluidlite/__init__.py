"""
fluidlite/ — 2D Stable-Fluids Solver
=====================================
Exports the interfaces a host (terminal renderer, viewer, CLI) uses.

Host imports: FluidSimulation → step(), add_splat(), density
Tunables:     FluidParams → step_kwargs()
Sources:      Emitter, seed_vortex_ring
"""

from .grid import FluidGrid
from .simulation import FluidSimulation
from .config import FluidParams
from .emitter import Emitter, seed_vortex_ring

__all__ = ["FluidGrid", "FluidSimulation", "FluidParams", "Emitter", "seed_vortex_ring"]
