"""
Pytest configuration and shared fixtures for the fluidlite test suite.
"""

import pytest

import numpy as np

from fluidlite import FluidSimulation


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (slower, cross-component)")
    config.addinivalue_line("markers", "slow: Slow tests (may take >10 seconds)")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test paths."""
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def sim():
    """A 32x24 simulation with all fields at zero."""
    return FluidSimulation(32, 24)


@pytest.fixture
def gradient_flow():
    """Velocity (u, v) = r * exp(-r²/2σ²): a smooth radial outflow with known divergence."""
    size, sigma = 32, 4.0
    ys, xs = np.indices((size, size), dtype=np.float64)
    c = (size - 1) / 2.0
    dx, dy = xs - c, ys - c
    g = np.exp(-(dx * dx + dy * dy) / (2.0 * sigma * sigma))
    return (dx * g).astype(np.float32), (dy * g).astype(np.float32)


@pytest.fixture
def vortex():
    """Counter-clockwise vortex u = -y·g, v = x·g with g = exp(-r²/σ²)."""
    size, sigma = 24, 5.0
    ys, xs = np.indices((size, size), dtype=np.float64)
    c = (size - 1) / 2.0
    dx, dy = xs - c, ys - c
    g = np.exp(-(dx * dx + dy * dy) / (sigma * sigma))
    return (-dy * g).astype(np.float32), (dx * g).astype(np.float32), np.hypot(dx, dy)
