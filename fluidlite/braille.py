"""
braille.py — Braille Sub-Pixel Rendering
=========================================
Turns the dye field into terminal text. Each terminal cell shows a 2×4
block of simulation cells as one Unicode braille glyph (U+2800 + mask):

  dot 1  dot 4        bit 0  bit 3
  dot 2  dot 5   →    bit 1  bit 4
  dot 3  dot 6        bit 2  bit 5
  dot 7  dot 8        bit 6  bit 7

Dye is normalised by the frame's max (auto exposure), boosted and clamped
to [0, 1]; a dot lights up at 0.10. Each glyph also gets an intensity
level 0-4 from its block average, for the host to map onto colours.

This is a host-side helper. The solver never imports it.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np


BRAILLE_W = 2
BRAILLE_H = 4
BRAILLE_BASE = 0x2800
MARKER_GLYPH = "⣿"

# Bit for the dot at [dy, dx] inside a 2×4 block.
BRAILLE_BITS = np.array([
    [0x01, 0x08],
    [0x02, 0x10],
    [0x04, 0x20],
    [0x40, 0x80],
], dtype=np.int32)

EXPOSURE_GAIN = 1.4
DOT_THRESHOLD = 0.10
INTENSITY_THRESHOLDS = (0.15, 0.35, 0.55, 0.75)


@dataclass
class BrailleFrame:
    rows: list[str]          # one string per terminal row
    levels: np.ndarray       # (rows, cols) intensity level 0-4 per glyph
    max_density: float       # exposure reference for HUDs


def cell_grid(cols: int, rows: int) -> tuple[int, int]:
    """Simulation size (width, height) that exactly fills cols×rows terminal cells."""
    return cols * BRAILLE_W, rows * BRAILLE_H


def braille_char(mask: int) -> str:
    return chr(BRAILLE_BASE + mask)


def render_braille(density: np.ndarray, width: int, height: int,
                   marker: Optional[tuple[float, float]] = None) -> BrailleFrame:
    """
    Pack a row-major dye field into braille glyphs.

    Args:
        density       : Dye field, length width*height (or shape (height, width))
        width, height : Simulation grid size in cells
        marker        : Optional (x, y) in cells; its glyph is drawn solid

    Returns:
        BrailleFrame. Partial blocks at the right/bottom edge are dropped.
    """
    cols, rows = width // BRAILLE_W, height // BRAILLE_H
    d = np.asarray(density, dtype=np.float64).reshape(height, width)
    d = d[:rows * BRAILLE_H, :cols * BRAILLE_W]
    d = np.where(np.isfinite(d), d, 0.0)

    max_d = max(float(d.max()), 0.0) if d.size else 0.0
    exposure = 1.0 / max_d if max_d > 0.0 else 1.0
    v = np.clip(d * exposure * EXPOSURE_GAIN, 0.0, 1.0)

    blocks = v.reshape(rows, BRAILLE_H, cols, BRAILLE_W)
    lit = blocks >= DOT_THRESHOLD
    masks = (lit * BRAILLE_BITS[np.newaxis, :, np.newaxis, :]).sum(axis=(1, 3))
    levels = np.digitize(blocks.mean(axis=(1, 3)), INTENSITY_THRESHOLDS)

    marker_cell = None
    if marker is not None:
        mx, my = math.floor(marker[0] + 0.5), math.floor(marker[1] + 0.5)
        if 0 <= mx < cols * BRAILLE_W and 0 <= my < rows * BRAILLE_H:
            marker_cell = (my // BRAILLE_H, mx // BRAILLE_W)

    lines = []
    for r in range(rows):
        glyphs = []
        for c in range(cols):
            if (r, c) == marker_cell:
                glyphs.append(MARKER_GLYPH)
            elif masks[r, c] == 0:
                glyphs.append(" ")
            else:
                glyphs.append(braille_char(int(masks[r, c])))
        lines.append("".join(glyphs))

    return BrailleFrame(rows=lines, levels=levels, max_density=max_d)
