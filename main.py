"""
main.py — Master Entry Point
=============================
Top-level script that runs the fluid simulation.

Usage:
    python main.py                    # Headless stats (default)
    python main.py --mode braille     # Print braille frames to the terminal
    python main.py --mode braille --cols 80 --rows 24   # Grid sized to a terminal area
    python main.py --mode benchmark   # Benchmark step() performance
    python main.py --mode live        # Matplotlib live viewer
"""

import argparse
import time

import numpy as np


def build_session(width: int, height: int, seed: int):
    """Fresh simulation seeded with the vortex ring, a centered emitter and an RNG."""
    from fluidlite import Emitter, FluidSimulation, seed_vortex_ring

    sim = FluidSimulation(width, height)
    seed_vortex_ring(sim)
    emitter = Emitter.centered(width, height)
    return sim, emitter, np.random.default_rng(seed)


def run_live(params, width: int, height: int, seed: int):
    """Live matplotlib visualization."""
    from visualizer import FluidVisualizer

    print(f"Starting live simulation ({width}x{height})...")
    print("Close the window to exit.\n")

    sim, emitter, _ = build_session(width, height, seed)
    viz = FluidVisualizer(sim, params, emitter, seed=seed)
    viz.run(fps=30)


def run_headless(params, width: int, height: int, frames: int, seed: int):
    """Run simulation without display, printing stats every 10 frames."""
    print(f"\nHeadless simulation | {width}x{height} | {frames} frames")
    print(f"{'─'*60}")

    sim, emitter, rng = build_session(width, height, seed)
    total_times = []

    for f in range(frames):
        emitter.inject(sim, rng)

        t0 = time.perf_counter()
        sim.step(**params.step_kwargs())
        total_times.append((time.perf_counter() - t0) * 1000)

        if f % 10 == 0:
            s = sim.status()
            print(f"  Frame {f:04d} | {total_times[-1]:6.2f}ms | "
                  f"div_mean={s['divergence_mean']:.5f} | "
                  f"speed_max={s['speed_max']:.2f} | "
                  f"density={s['density_total']:.1f}")

    print(f"\n{'─'*60}")
    print(f"  Average: {np.mean(total_times):.2f}ms/frame ({1000/np.mean(total_times):.1f} FPS)")
    print(f"  Min:     {np.min(total_times):.2f}ms")
    print(f"  Max:     {np.max(total_times):.2f}ms")


def run_braille(params, width: int, height: int, frames: int, seed: int, every: int = 10):
    """Print the dye field as braille text every `every` frames."""
    from fluidlite.braille import render_braille

    sim, emitter, rng = build_session(width, height, seed)

    for f in range(1, frames + 1):
        emitter.inject(sim, rng)
        sim.step(**params.step_kwargs())

        if f % every == 0 or f == frames:
            frame = render_braille(sim.density, sim.width, sim.height,
                                   marker=(emitter.x, emitter.y))
            print(f"── frame {f} | maxD={frame.max_density:.2f} " + "─" * 20)
            print("\n".join(frame.rows))


def run_benchmark(params, width: int, height: int, frames: int, seed: int):
    """
    Timing breakdown for step() with and without vorticity confinement.
    The first steps also pay numba's compile cost, so they are warm-up only.
    """
    from dataclasses import replace

    print(f"\n{'='*60}")
    print(f"  STEP BENCHMARK | {width}x{height} | {frames} frames")
    print(f"{'='*60}")

    print(f"\n{'Config':<20} {'Mean':>9} {'Min':>9} {'Max':>9}")
    print(f"{'─'*50}")
    for label, p in (("vorticity on", replace(params, vorticity=True)),
                     ("vorticity off", replace(params, vorticity=False))):
        sim, emitter, rng = build_session(width, height, seed)

        # Warm up
        for _ in range(5):
            emitter.inject(sim, rng)
            sim.step(**p.step_kwargs())

        times = []
        for _ in range(frames):
            emitter.inject(sim, rng)
            t0 = time.perf_counter()
            sim.step(**p.step_kwargs())
            times.append((time.perf_counter() - t0) * 1000)

        print(f"  {label:<18} {np.mean(times):>7.2f}ms {np.min(times):>7.2f}ms {np.max(times):>7.2f}ms")

    print(f"\n  Pressure iterations: {params.projection_iters} | "
          f"Diffusion iterations: {params.diffusion_iters}")


def parse_params(args):
    from fluidlite import FluidParams

    params = FluidParams(
        dt=args.dt,
        viscosity=args.viscosity,
        dye_diffusion=args.dye_diffusion,
        projection_iters=args.proj_iters,
        diffusion_iters=args.diff_iters,
        vorticity=not args.no_vorticity,
        vorticity_eps=args.vorticity_eps,
    )
    return params.clamped()


def build_parser():
    from fluidlite import FluidParams

    defaults = FluidParams()
    parser = argparse.ArgumentParser(description="2D Stable-Fluids Simulation")
    parser.add_argument(
        "--mode", choices=["live", "headless", "benchmark", "braille"],
        default="headless",
        help="Run mode (default: headless)"
    )
    parser.add_argument("--width",  type=int, default=160, help="Grid width in cells (default: 160)")
    parser.add_argument("--height", type=int, default=96,  help="Grid height in cells (default: 96)")
    parser.add_argument("--cols",   type=int, help="Braille mode: size the grid to fill this many terminal columns")
    parser.add_argument("--rows",   type=int, help="Braille mode: size the grid to fill this many terminal rows")
    parser.add_argument("--frames", type=int, default=100, help="Number of frames")
    parser.add_argument("--seed",   type=int, default=0xC0FFEE, help="Emitter RNG seed")
    parser.add_argument("--dt",            type=float, default=defaults.dt)
    parser.add_argument("--viscosity",     type=float, default=defaults.viscosity)
    parser.add_argument("--dye-diffusion", type=float, default=defaults.dye_diffusion)
    parser.add_argument("--proj-iters",    type=int,   default=defaults.projection_iters)
    parser.add_argument("--diff-iters",    type=int,   default=defaults.diffusion_iters)
    parser.add_argument("--vorticity-eps", type=float, default=defaults.vorticity_eps)
    parser.add_argument("--no-vorticity",  action="store_true", help="Disable vorticity confinement")
    return parser


def parse_args(argv=None):
    """Parse and validate the command line. Invalid input exits via parser.error."""
    from fluidlite.braille import cell_grid

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cols is not None or args.rows is not None:
        if args.mode != "braille":
            parser.error("--cols/--rows only apply to --mode braille")
        cols = args.cols if args.cols is not None else args.width // 2
        rows = args.rows if args.rows is not None else args.height // 4
        if cols < 2 or rows < 1:
            parser.error(f"terminal area must be at least 2x1 cells, got {cols}x{rows}")
        args.width, args.height = cell_grid(cols, rows)

    if args.width < 3 or args.height < 3:
        parser.error(f"grid must be at least 3x3, got {args.width}x{args.height}")
    if args.mode == "braille" and args.height < 4:
        parser.error("braille mode needs at least one 2x4 block")
    if args.mode != "live" and args.frames < 1:
        parser.error(f"--frames must be at least 1, got {args.frames}")
    return args


if __name__ == "__main__":
    args = parse_args()
    params = parse_params(args)

    if args.mode == "live":
        run_live(params, args.width, args.height, args.seed)
    elif args.mode == "headless":
        run_headless(params, args.width, args.height, args.frames, args.seed)
    elif args.mode == "benchmark":
        run_benchmark(params, args.width, args.height, args.frames, args.seed)
    elif args.mode == "braille":
        run_braille(params, args.width, args.height, args.frames, args.seed)
