"""
grid.py — Collocated 2D Grid + Edge Boundary Policy
====================================================
The foundation of the entire simulation.

Every field lives at CELL CENTERS on the same W×H lattice:
  - Velocity `u`, `v`       → shape (H, W), grid-cells per time unit
  - Density (dye) `density` → shape (H, W), kept ≥ 0
  - Pressure / divergence   → shape (H, W), scratch, rebuilt every projection

Arrays are indexed [y, x]. The host reads them row-major, so the flat
index of cell (x, y) is y*W + x.

Boundary policy: after every mutation the outer ring of a field is
overwritten with its nearest interior neighbor (zero-gradient wall).
This is a slip wall, not the no-slip mirror of textbook Stable Fluids.
"""

import numpy as np
from numba import njit


MIN_SIZE = 3

# Every buffer the grid owns, in allocation order.
FIELDS = (
    "u", "v", "u_prev", "v_prev",
    "density", "density_prev",
    "pressure", "divergence", "curl",
)


@njit(cache=True)
def set_boundary(field):
    """
    Copy the nearest interior row/column onto the outer ring of `field`.

    Rows first (y=0, y=H-1), then columns (x=0, x=W-1), so the column
    pass wins at the corners. Idempotent; no-op on fields thinner than 2.
    """
    h, w = field.shape
    if w < 2 or h < 2:
        return
    for x in range(w):
        field[0, x] = field[1, x]
        field[h - 1, x] = field[h - 2, x]
    for y in range(h):
        field[y, 0] = field[y, 1]
        field[y, w - 1] = field[y, w - 2]


def compute_divergence(u: np.ndarray, v: np.ndarray) -> np.ndarray:
    """
    Central-difference divergence on the interior (outer ring left at 0).

    Same sign convention as the projection: div = -0.5 * (du/dx + dv/dy).
    Used for diagnostics; the solver keeps its own buffer.
    """
    div = np.zeros_like(u)
    div[1:-1, 1:-1] = -0.5 * (
        (u[1:-1, 2:] - u[1:-1, :-2]) +
        (v[2:, 1:-1] - v[:-2, 1:-1])
    )
    return div


class FluidGrid:
    """
    W×H grid storing all simulation state.
    This is the single owner of every buffer passed between the physics steps.
    """

    def __init__(self, width: int, height: int):
        """
        Args:
            width  : Cells along X (≥ 3, interior loops need a 1-cell margin)
            height : Cells along Y (≥ 3)
        """
        self._allocate(width, height)

    def _allocate(self, width: int, height: int):
        width, height = int(width), int(height)
        if width < MIN_SIZE or height < MIN_SIZE:
            raise ValueError(
                f"Grid must be at least {MIN_SIZE}x{MIN_SIZE} cells, got {width}x{height}"
            )
        self.width = width
        self.height = height
        for name in FIELDS:
            setattr(self, name, np.zeros((height, width), dtype=np.float32))

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width

    def index(self, x: int, y: int) -> int:
        """Row-major flat index of cell (x, y)."""
        return y * self.width + x

    def flat(self, name: str) -> np.ndarray:
        """Row-major 1-D view (length W*H) of the named buffer. Writes go through."""
        if name not in FIELDS:
            raise ValueError(f"Unknown field: {name}. Use one of {', '.join(FIELDS)}.")
        return getattr(self, name).reshape(-1)

    def reset(self):
        """Zero out all fields."""
        for name in FIELDS:
            getattr(self, name)[:] = 0.0

    def resize(self, width: int, height: int):
        """Reallocate every buffer at the new size, discarding prior state."""
        self._allocate(width, height)

    def __repr__(self):
        speed = np.sqrt(self.u * self.u + self.v * self.v)
        return (
            f"FluidGrid({self.width}x{self.height})\n"
            f"  density  : max={self.density.max():.4f}, sum={self.density.sum():.2f}\n"
            f"  velocity : max_magnitude={speed.max():.4f}"
        )
