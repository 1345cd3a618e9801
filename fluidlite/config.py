"""
config.py — Simulation Tunables
================================
Default parameters for one `FluidSimulation.step()` call, with the range
each one is meant to be dialed within (used by the CLI and the viewer).
"""

from dataclasses import dataclass, field, fields, replace


@dataclass
class FluidParams:
    """Per-step parameters of the fluid solver."""

    dt: float = field(
        default=0.12,
        metadata={"min": 0.0, "max": 1.0, "label": "Timestep"}
    )
    viscosity: float = field(
        default=0.0007,
        metadata={"min": 0.0, "max": 0.01, "label": "Viscosity",
                  "description": "Velocity diffusion (fluid thickness)"}
    )
    dye_diffusion: float = field(
        default=0.0002,
        metadata={"min": 0.0, "max": 0.01, "label": "Dye Diffusion",
                  "description": "How fast dye bleeds into neighboring cells"}
    )
    projection_iters: int = field(
        default=25,
        metadata={"min": 1, "max": 200, "label": "Pressure Iterations"}
    )
    diffusion_iters: int = field(
        default=10,
        metadata={"min": 1, "max": 100, "label": "Diffusion Iterations"}
    )
    vorticity: bool = field(
        default=True,
        metadata={"label": "Vorticity Confinement"}
    )
    vorticity_eps: float = field(
        default=0.9,
        metadata={"min": 0.0, "max": 5.0, "label": "Vorticity Strength",
                  "description": "Vortex confinement strength (adds swirl)"}
    )

    def step_kwargs(self) -> dict:
        """Keyword arguments for FluidSimulation.step()."""
        return {
            "dt": self.dt,
            "viscosity": self.viscosity,
            "dye_diffusion": self.dye_diffusion,
            "projection_iters": self.projection_iters,
            "diffusion_iters": self.diffusion_iters,
            "vorticity_enabled": self.vorticity,
            "vorticity_eps": self.vorticity_eps,
        }

    def clamped(self) -> "FluidParams":
        """Copy with every numeric field clamped into its [min, max] range."""
        changes = {}
        for f in fields(self):
            lo, hi = f.metadata.get("min"), f.metadata.get("max")
            if lo is None or hi is None:
                continue
            value = getattr(self, f.name)
            changes[f.name] = type(value)(min(max(value, lo), hi))
        return replace(self, **changes)
