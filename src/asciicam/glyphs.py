from dataclasses import dataclass

import numpy as np

from asciicam.charsets import CharsetTable, GlyphMode

# Pattern-mode cells dimmer than this are not drawn at all
VISIBILITY_FLOOR = 0.1

# With ignore_white, cells brighter than this are not drawn
WHITE_CUTOFF = 250.0


@dataclass
class GlyphGrid:
    indices: np.ndarray  # (rows, cols) int64 into the charset
    alpha: np.ndarray  # (rows, cols) float 0-1
    visible: np.ndarray  # (rows, cols) bool


def force_edges(luminance: np.ndarray, edges: np.ndarray) -> np.ndarray:
    """Edge cells take the darkest luminance regardless of what earlier phases produced."""
    return np.where(edges, 0.0, luminance)


def density_indices(luminance: np.ndarray, length: int) -> np.ndarray:
    return np.floor(luminance / 255.0 * (length - 1)).astype(np.int64)


def pattern_indices(shape: tuple[int, int], length: int) -> np.ndarray:
    ys, xs = np.indices(shape)
    return (xs + ys) % length


def map_glyphs(luminance: np.ndarray, table: CharsetTable, ignore_white: bool = False) -> GlyphGrid:
    """Pick a glyph index and alpha per cell, and decide which cells get drawn.

    Density mode indexes the ramp by brightness and draws fully opaque.
    Pattern mode tiles the ramp by position and uses brightness as alpha.
    """
    length = len(table)
    visible = np.ones(luminance.shape, dtype=bool)
    if ignore_white:
        visible &= luminance <= WHITE_CUTOFF

    if table.mode is GlyphMode.PATTERN:
        indices = pattern_indices(luminance.shape, length)
        alpha = luminance / 255.0
        visible &= alpha >= VISIBILITY_FLOOR
    else:
        indices = density_indices(luminance, length)
        alpha = np.ones(luminance.shape)

    return GlyphGrid(indices=np.clip(indices, 0, length - 1), alpha=alpha, visible=visible)
