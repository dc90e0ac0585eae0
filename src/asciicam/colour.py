import colorsys
from dataclasses import dataclass
from typing import Callable

import numpy as np

from asciicam.options import ColorMode

RAINBOW_SATURATION = 1.0
RAINBOW_LIGHTNESS = 0.5

# The rainbow sweep advances one degree every 20 ms
MS_PER_HUE_DEGREE = 20.0


@dataclass
class ColourGrid:
    rgba: np.ndarray  # (rows, cols, 4) uint8 fill colour, alpha embedded where the mode carries it
    opacity: np.ndarray  # (rows, cols) float, surface-level opacity


def rainbow_phase(clock: Callable[[], float]) -> float:
    """Hue offset in degrees for the current moment. `clock` returns seconds."""
    return clock() * 1000.0 / MS_PER_HUE_DEGREE


def rainbow_columns(columns: int, phase: float) -> np.ndarray:
    """One RGB colour per column, hue sweeping 0-360 across the grid. Shape (columns, 3) uint8."""
    out = np.empty((columns, 3), dtype=np.uint8)
    for x in range(columns):
        hue = (x / columns * 360.0 + phase) % 360.0
        r, g, b = colorsys.hls_to_rgb(hue / 360.0, RAINBOW_LIGHTNESS, RAINBOW_SATURATION)
        out[x] = (round(r * 255), round(g * 255), round(b * 255))
    return out


def resolve_colours(
    mode: ColorMode,
    alpha: np.ndarray,
    sampled: np.ndarray,
    primary: tuple[int, int, int],
    phase: float = 0.0,
) -> ColourGrid:
    """Resolve fill colour and opacity for every cell.

    Mono carries alpha as surface opacity over an opaque primary colour. True
    colour and rainbow embed alpha in the fill and leave opacity at 1.
    """
    rows, cols = alpha.shape
    rgba = np.empty((rows, cols, 4), dtype=np.uint8)
    embedded = np.rint(np.clip(alpha, 0.0, 1.0) * 255.0).astype(np.uint8)

    if mode is ColorMode.MONO:
        rgba[..., :3] = primary
        rgba[..., 3] = 255
        return ColourGrid(rgba=rgba, opacity=alpha.astype(np.float64))

    if mode is ColorMode.TRUE:
        rgba[..., :3] = sampled
    else:
        rgba[..., :3] = rainbow_columns(cols, phase)[None, :, :]
    rgba[..., 3] = embedded
    return ColourGrid(rgba=rgba, opacity=np.ones((rows, cols)))
