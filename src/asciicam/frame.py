import math
from dataclasses import dataclass

import numpy as np
from PIL import Image

from asciicam.errors import ConfigurationError

# Glyph cells are taller than wide; squash rows so output isn't stretched
ASPECT_CORRECTION = 0.55

# Base glyph cell at zoom 1.0, in pixels
BASE_CELL_WIDTH = 7
BASE_CELL_HEIGHT = 12


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, unlike Python's banker's rounding."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class Frame:
    """One captured bitmap: row-major RGBA samples, four bytes per pixel."""

    width: int
    height: int
    pixels: bytes

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(f"Frame dimensions must be positive, got {self.width}x{self.height}")

    @classmethod
    def from_image(cls, image: Image.Image) -> "Frame":
        image = image.convert("RGBA")
        return cls(width=image.width, height=image.height, pixels=image.tobytes())

    def as_array(self) -> np.ndarray:
        """Flat uint8 view of the pixel buffer."""
        return np.frombuffer(self.pixels, dtype=np.uint8)


def grid_size(frame_width: int, frame_height: int, columns: int) -> tuple[int, int]:
    """Return (columns, rows) of the glyph grid for a frame of the given size."""
    rows = round_half_up(frame_height / frame_width * columns * ASPECT_CORRECTION)
    return columns, max(1, rows)


def cell_size(zoom: float) -> tuple[int, int]:
    """Pixel size (width, height) of one glyph cell at the given zoom."""
    return round_half_up(BASE_CELL_WIDTH * zoom), round_half_up(BASE_CELL_HEIGHT * zoom)
