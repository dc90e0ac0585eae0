from dataclasses import dataclass

import numpy as np
from loguru import logger

from asciicam.frame import Frame

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])

MID_GREY = 128.0


@dataclass
class SampledGrid:
    luminance: np.ndarray  # (rows, cols) float64, 0-255
    colours: np.ndarray  # (rows, cols, 3) uint8, as sampled
    valid: np.ndarray  # (rows, cols) bool, False where the source pixel lay outside the buffer


def source_offsets(frame: Frame, columns: int, rows: int) -> np.ndarray:
    """Byte offset of the nearest-neighbour source pixel for every cell. Shape (rows, cols)."""
    src_x = (np.arange(columns) / columns * frame.width).astype(np.int64)
    src_y = (np.arange(rows) / rows * frame.height).astype(np.int64)
    return (src_y[:, None] * frame.width + src_x[None, :]) * 4


def sample_frame(frame: Frame, columns: int, rows: int, invert: bool = False) -> SampledGrid:
    """Downsample a frame to the glyph grid by picking one pixel per cell.

    Cells whose source pixel falls outside the buffer (declared size larger
    than the data) stay at luminance 0 and colour black.
    """
    data = frame.as_array()
    offsets = source_offsets(frame, columns, rows)
    valid = offsets + 4 <= data.size

    colours = np.zeros((rows, columns, 3), dtype=np.uint8)
    picked = offsets[valid]
    for channel in range(3):
        colours[..., channel][valid] = data[picked + channel]

    luminance = colours.astype(np.float64) @ LUMA_WEIGHTS
    if invert:
        luminance = 255.0 - luminance
    luminance[~valid] = 0.0

    missing = int((~valid).sum())
    if missing:
        logger.warning(
            "Frame declares {}x{} pixels but holds {} bytes; {} of {} cells left blank",
            frame.width,
            frame.height,
            data.size,
            missing,
            valid.size,
        )
    return SampledGrid(luminance=luminance, colours=colours, valid=valid)


def contrast_factor(contrast: float) -> float:
    return 259.0 * (contrast + 255.0) / (255.0 * (259.0 - contrast))


def adjust_contrast(luminance: np.ndarray, contrast: float, brightness: float) -> np.ndarray:
    """Apply the contrast curve around mid grey, add brightness and clamp to 0-255."""
    factor = contrast_factor(contrast)
    return np.clip(factor * (luminance - MID_GREY) + MID_GREY + brightness, 0.0, 255.0)
