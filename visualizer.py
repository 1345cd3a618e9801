"""
visualizer.py — Live Dye Viewer
================================
Renders the 2D dye field with matplotlib while the emitter keeps
splatting. The terminal renderer lives in `fluidlite.braille`; this is
the windowed view for tuning parameters and recording GIFs.

Uses matplotlib FuncAnimation for real-time updates.
"""

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as animation
from matplotlib.colors import LinearSegmentedColormap

from fluidlite import Emitter, FluidParams, FluidSimulation

# Amber colormap: black → dark amber → gold → pale yellow
AMBER_COLORS = ["#100c00", "#504400", "#b4960a", "#ffdc5a", "#fff0b4"]
amber_cmap = LinearSegmentedColormap.from_list("amber", AMBER_COLORS)


class FluidVisualizer:
    """
    Real-time viewer of the fluid simulation.

    Usage (standalone):
        from fluidlite import FluidSimulation, FluidParams, Emitter

        sim = FluidSimulation(160, 96)
        viz = FluidVisualizer(sim, FluidParams(), Emitter.centered(160, 96))
        viz.run()  # Opens live window
    """

    def __init__(self, simulation: FluidSimulation, params: FluidParams,
                 emitter: Emitter, seed: int = 0xC0FFEE):
        """
        Args:
            simulation : FluidSimulation instance
            params     : Per-step tunables
            emitter    : Dye source splatted every frame
            seed       : RNG seed for the emitter's kick direction
        """
        self.sim = simulation
        self.params = params
        self.emitter = emitter
        self.rng = np.random.default_rng(seed)

        self._setup_figure()

    def _setup_figure(self):
        """Initialize the matplotlib figure."""
        self.fig, self.ax = plt.subplots(figsize=(10, 6))
        self.fig.patch.set_facecolor('#0a0a0a')
        self.ax.set_facecolor('#0a0a0a')
        self.ax.set_xticks([])
        self.ax.set_yticks([])
        for spine in self.ax.spines.values():
            spine.set_edgecolor('#333333')

        self.img = self.ax.imshow(
            np.zeros((self.sim.height, self.sim.width)),
            cmap=amber_cmap,
            vmin=0, vmax=1.0,
            interpolation='bilinear',
            aspect='equal'
        )
        self.emitter_dot, = self.ax.plot(
            [self.emitter.x], [self.emitter.y], 'o', color='#fff0b4', markersize=4
        )
        # Inside the axes so blitting redraws it every frame
        self.title_text = self.ax.text(
            0.01, 0.98, "Fluid Lite — Frame 0", transform=self.ax.transAxes,
            va='top', color='#cccccc', fontsize=9, fontfamily='monospace'
        )

        plt.tight_layout()

    def update(self, frame_num):
        """Called by FuncAnimation each frame. Steps sim and updates the plot."""
        self.emitter.inject(self.sim, self.rng)
        self.sim.step(**self.params.step_kwargs())

        d = self.sim.density.reshape(self.sim.height, self.sim.width)
        peak = float(d.max())
        self.img.set_data(d / peak if peak > 0 else d)

        status = self.sim.status()
        self.title_text.set_text(
            f"Fluid Lite — Frame {status['frame']} | "
            f"maxD={status['density_max']:.2f} | "
            f"div_mean={status['divergence_mean']:.5f} | "
            f"vorticity={'on' if self.params.vorticity else 'off'}"
        )

        return [self.img, self.emitter_dot, self.title_text]

    def run(self, fps: int = 30, frames: int = 500):
        """
        Start the live animation window.

        Args:
            fps    : Target animation frame rate
            frames : Total frames to render
        """
        interval_ms = 1000 // fps
        self.anim = animation.FuncAnimation(
            self.fig,
            self.update,
            frames=frames,
            interval=interval_ms,
            blit=True
        )
        plt.show()

    def save_gif(self, path: str = "fluid_lite.gif", fps: int = 30, frames: int = 150):
        """Save animation as a GIF."""
        print(f"Rendering {frames} frames to {path}...")
        self.anim = animation.FuncAnimation(
            self.fig, self.update, frames=frames, interval=1000 // fps, blit=True
        )
        writer = animation.PillowWriter(fps=fps)
        self.anim.save(path, writer=writer)
        print(f"Saved: {path}")
