"""
emitter.py — Dye/Momentum Sources
==================================
A movable emitter that splats dye with a randomly directed kick, plus the
start-up "vortex ring" pattern used when a session begins or is reset.
"""

import math
from dataclasses import dataclass

import numpy as np

from .simulation import FluidSimulation


# Emitter must stay this far from the walls so its splat lands in the interior.
EDGE_MARGIN = 2.0

# ── Vortex ring seed ──────────────────────────────────────────────────────────
RING_SPLATS = 12
RING_RADIUS_FRACTION = 0.18   # ring radius as a fraction of min(W, H)
RING_SPLAT_RADIUS = 12.0
RING_DYE = 22.0
RING_FORCE = 18.0


@dataclass
class Emitter:
    """Position (in cells) and strength of the interactive dye source."""

    x: float
    y: float
    dye: float = 10.0
    force: float = 14.0
    radius: float = 10.0

    @classmethod
    def centered(cls, width: int, height: int, **kwargs) -> "Emitter":
        return cls(x=width * 0.5, y=height * 0.5, **kwargs)

    def clamp(self, width: int, height: int):
        """Keep the emitter inside [2, dim - 3] on both axes."""
        self.x = min(max(self.x, EDGE_MARGIN), width - 1 - EDGE_MARGIN)
        self.y = min(max(self.y, EDGE_MARGIN), height - 1 - EDGE_MARGIN)

    def move(self, dx: float, dy: float, width: int, height: int):
        self.x += dx
        self.y += dy
        self.clamp(width, height)

    def inject(self, sim: FluidSimulation, rng: np.random.Generator):
        """Splat dye at the emitter with a force in a random direction."""
        angle = rng.uniform(0.0, 2.0 * math.pi)
        sim.add_splat(self.x, self.y, self.radius, self.dye,
                      math.cos(angle) * self.force,
                      math.sin(angle) * self.force)


def seed_vortex_ring(sim: FluidSimulation):
    """
    Splat a ring of tangential kicks around the grid center.
    Gives a fresh session something swirling to look at.
    """
    cx, cy = sim.width * 0.5, sim.height * 0.5
    ring = min(sim.width, sim.height) * RING_RADIUS_FRACTION

    for k in range(RING_SPLATS):
        a = k / RING_SPLATS * 2.0 * math.pi
        sim.add_splat(cx + math.cos(a) * ring, cy + math.sin(a) * ring,
                      RING_SPLAT_RADIUS, RING_DYE,
                      -math.sin(a) * RING_FORCE, math.cos(a) * RING_FORCE)
