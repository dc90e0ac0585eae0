import numpy as np

SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float64)
SOBEL_Y = SOBEL_X.T


def sobel_magnitude(grid: np.ndarray) -> np.ndarray:
    """Gradient magnitude of the interior cells. Shape (rows - 2, cols - 2)."""
    rows, cols = grid.shape
    inner_rows, inner_cols = max(rows - 2, 0), max(cols - 2, 0)
    gx = np.zeros((inner_rows, inner_cols))
    gy = np.zeros((inner_rows, inner_cols))
    for j in range(3):
        for i in range(3):
            window = grid[j : j + inner_rows, i : i + inner_cols]
            gx += SOBEL_X[j, i] * window
            gy += SOBEL_Y[j, i] * window
    return np.sqrt(gx * gx + gy * gy)


def detect_edges(grid: np.ndarray, threshold: float) -> np.ndarray:
    """Boolean edge mask, same shape as grid. Border cells are never edges."""
    mask = np.zeros(grid.shape, dtype=bool)
    if grid.shape[0] < 3 or grid.shape[1] < 3:
        return mask
    mask[1:-1, 1:-1] = sobel_magnitude(grid) > threshold
    return mask
