"""
Integration tests for fluidlite/simulation.py

Full step() pipeline: no-op behaviour, dye bookkeeping, wall invariants,
long-run stability and the small end-to-end splat scenario.
"""

import pytest

import numpy as np

from fluidlite import Emitter, FluidParams, FluidSimulation
from fluidlite.simulation import DENSITY_EPSILON, DENSITY_RETENTION
from fluidlite.solver import mean_interior_divergence


QUIET = dict(dt=0.1, viscosity=0.0005, dye_diffusion=0.0002,
             projection_iters=20, diffusion_iters=4,
             vorticity_enabled=False, vorticity_eps=0.0)


def fields(sim):
    g = sim.grid
    return g.u.copy(), g.v.copy(), g.density.copy()


# ===================================================================
# Construction and lifecycle
# ===================================================================


@pytest.mark.parametrize("width,height", [(2, 8), (8, 2)])
def test_rejects_grids_below_3x3(width, height):
    with pytest.raises(ValueError):
        FluidSimulation(width, height)


def test_read_access_is_row_major(sim):
    assert sim.density.shape == (32 * 24,)
    sim.add_splat(5, 7, 1.0, 2.0, 0.0, 0.0)
    assert sim.density[7 * 32 + 5] == pytest.approx(2.0)
    u, v = sim.velocity
    assert u.shape == v.shape == (32 * 24,)


def test_resize_discards_state(sim):
    sim.add_splat(16, 12, 4, 10.0, 1.0, 1.0)
    sim.step(**QUIET)

    sim.resize(20, 10)

    assert (sim.width, sim.height) == (20, 10)
    assert sim.frame == 0
    assert sim.density.shape == (200,)
    assert not sim.density.any()


def test_reset_keeps_size(sim):
    sim.add_splat(16, 12, 4, 10.0, 1.0, 1.0)
    sim.step(**QUIET)

    sim.reset()

    assert (sim.width, sim.height) == (32, 24)
    assert sim.frame == 0
    u, v, d = fields(sim)
    assert not d.any() and not u.any() and not v.any()


# ===================================================================
# Step behaviour
# ===================================================================


def test_zero_step_on_still_fluid_is_noop(sim):
    sim.step(dt=0.0, viscosity=0.0, dye_diffusion=0.0, projection_iters=10,
             diffusion_iters=4, vorticity_enabled=False, vorticity_eps=0.0)

    u, v, d = fields(sim)
    assert not u.any() and not v.any() and not d.any()
    assert sim.frame == 1


def test_step_returns_nothing(sim):
    assert sim.step(**QUIET) is None


def test_uniform_dye_decays_by_retention(sim):
    sim.grid.density[:] = 1.0

    sim.step(dt=0.1, viscosity=0.0, dye_diffusion=0.0, projection_iters=5,
             diffusion_iters=2, vorticity_enabled=False, vorticity_eps=0.0)

    np.testing.assert_allclose(sim.grid.density, DENSITY_RETENTION, rtol=1e-5)


def test_faint_dye_snaps_to_zero(sim):
    sim.grid.density[:] = DENSITY_EPSILON * 0.9

    sim.step(**QUIET)

    assert not sim.grid.density.any()


def test_zero_iterations_run_once():
    a, b = FluidSimulation(16, 16), FluidSimulation(16, 16)
    for s in (a, b):
        s.add_splat(8, 8, 4, 10.0, 3.0, -2.0)

    a.step(0.1, 0.001, 0.001, 0, 0, True, 0.5)
    b.step(0.1, 0.001, 0.001, 1, 1, True, 0.5)

    for x, y in zip(fields(a), fields(b)):
        np.testing.assert_array_equal(x, y)


def test_walls_hold_interior_copy_after_step(sim):
    sim.add_splat(10, 8, 5, 10.0, 6.0, 3.0)
    sim.step(**dict(QUIET, vorticity_enabled=True, vorticity_eps=0.5))

    for field in fields(sim):
        np.testing.assert_array_equal(field[0, 1:-1], field[1, 1:-1])
        np.testing.assert_array_equal(field[-1, 1:-1], field[-2, 1:-1])
        np.testing.assert_array_equal(field[:, 0], field[:, 1])
        np.testing.assert_array_equal(field[:, -1], field[:, -2])


def test_step_reduces_splat_divergence(sim):
    sim.add_splat(16, 12, 5, 0.0, 8.0, 0.0)
    g = sim.grid
    before = mean_interior_divergence(g.u, g.v)

    sim.step(**dict(QUIET, projection_iters=40))

    assert mean_interior_divergence(g.u, g.v) < before


def test_density_stays_non_negative(sim):
    rng = np.random.default_rng(11)
    emitter = Emitter.centered(32, 24, radius=5.0)
    params = FluidParams(dt=0.2, projection_iters=15, diffusion_iters=4)

    for _ in range(50):
        emitter.inject(sim, rng)
        sim.step(**params.step_kwargs())

    assert sim.grid.density.min() >= 0.0


def test_status_reports_state(sim):
    sim.add_splat(16, 12, 3, 5.0, 2.0, 0.0)
    sim.step(**QUIET)

    status = sim.status()

    assert status["frame"] == 1
    assert status["density_total"] == pytest.approx(float(sim.density.sum()))
    assert status["density_max"] > 0.0
    assert status["speed_max"] > 0.0
    assert status["divergence_mean"] >= 0.0


# ===================================================================
# End-to-end scenario
# ===================================================================


def test_single_splat_scenario():
    sim = FluidSimulation(10, 10)
    sim.add_splat(5, 5, 2, 10.0, 0, 0)
    injected = float(sim.density.sum())
    assert injected == pytest.approx(42.5)

    sim.step(dt=0.1, viscosity=0.0005, dye_diffusion=0.0002, projection_iters=20,
             diffusion_iters=4, vorticity_enabled=False, vorticity_eps=0)

    d = sim.density.reshape(10, 10)
    total = float(d.sum())
    assert 0.0 < total < injected

    ys, xs = np.indices(d.shape)
    near = np.hypot(xs - 5, ys - 5) <= 3.0
    assert d[near].sum() > 0.95 * total
    assert np.unravel_index(np.argmax(d), d.shape) == (5, 5)


# ===================================================================
# Long-run stability
# ===================================================================


@pytest.mark.slow
def test_no_explosion_over_ten_thousand_frames():
    sim = FluidSimulation(24, 24)
    ceilings = {"speed": 1e3, "density": 1e4}

    for frame in range(10_000):
        if frame % 20 == 0:
            sim.add_splat(12, 12, 4, 5.0, 3.0, -2.0)
        sim.step(dt=0.5, viscosity=0.005, dye_diffusion=0.005, projection_iters=10,
                 diffusion_iters=4, vorticity_enabled=False, vorticity_eps=0.0)

        if frame % 500 == 0:
            g = sim.grid
            assert np.abs(g.u).max() < ceilings["speed"]
            assert np.abs(g.v).max() < ceilings["speed"]
            assert g.density.max() < ceilings["density"]

    g = sim.grid
    assert np.isfinite(g.u).all() and np.isfinite(g.v).all()
    assert np.isfinite(g.density).all()
    assert np.abs(g.u).max() < ceilings["speed"]
    assert g.density.max() < ceilings["density"]


def test_vorticity_run_stays_finite():
    sim = FluidSimulation(32, 32)
    rng = np.random.default_rng(5)
    emitter = Emitter.centered(32, 32, radius=5.0, force=6.0)

    for frame in range(300):
        if frame % 10 == 0:
            emitter.inject(sim, rng)
        sim.step(dt=0.12, viscosity=0.0007, dye_diffusion=0.0002, projection_iters=20,
                 diffusion_iters=4, vorticity_enabled=True, vorticity_eps=0.3)

    g = sim.grid
    assert np.isfinite(g.u).all() and np.isfinite(g.v).all()
    assert np.abs(g.u).max() < 1e4 and np.abs(g.v).max() < 1e4
