import math

import numpy as np

QUANT_LEVELS = 8
NOISE_AMPLITUDE = 25.0

# Floyd-Steinberg weights: (row offset, column offset, weight)
DIFFUSION = (
    (0, 1, 7 / 16),
    (1, -1, 3 / 16),
    (1, 0, 5 / 16),
    (1, 1, 1 / 16),
)


def quantize(value: float, levels: int = QUANT_LEVELS) -> float:
    """Snap a 0-255 value to the nearest multiple of 255 / levels, halves rounding away from zero."""
    scaled = value / 255.0 * levels
    step = math.copysign(math.floor(abs(scaled) + 0.5), scaled)
    return step * (255.0 / levels)


def diffuse_error(error: float) -> list[tuple[int, int, float]]:
    """Split a quantisation residual among the four forward neighbours."""
    return [(dy, dx, error * weight) for dy, dx, weight in DIFFUSION]


def floyd_steinberg(grid: np.ndarray, levels: int = QUANT_LEVELS) -> np.ndarray:
    """Error-diffusion dither over a luminance grid.

    Scans row-major, skipping the first and last column and the last row so
    every neighbour written to exists. Those boundary cells are not quantised
    themselves but still receive error. The result is clamped to 0-255.
    """
    rows, cols = grid.shape
    buf = grid.astype(np.float64).tolist()
    for y in range(rows - 1):
        row = buf[y]
        for x in range(1, cols - 1):
            old = row[x]
            new = quantize(old, levels)
            row[x] = new
            for dy, dx, share in diffuse_error(old - new):
                buf[y + dy][x + dx] += share
    return np.clip(np.array(buf, dtype=np.float64).reshape(rows, cols), 0.0, 255.0)


def add_noise(grid: np.ndarray, rng: np.random.Generator, amplitude: float = NOISE_AMPLITUDE) -> np.ndarray:
    """Perturb every cell independently by uniform noise in [-amplitude, amplitude]."""
    noise = rng.uniform(-amplitude, amplitude, size=grid.shape)
    return np.clip(grid + noise, 0.0, 255.0)
