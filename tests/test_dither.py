import numpy as np
import pytest

from asciicam.dither import add_noise, diffuse_error, floyd_steinberg, quantize


def test_error_fractions_sum_to_residual():
    for error in (4.375, -17.2, 0.001, 31.875):
        shares = diffuse_error(error)
        assert sum(share for _, _, share in shares) == pytest.approx(error)


def test_diffusion_targets():
    assert [(dy, dx) for dy, dx, _ in diffuse_error(1.0)] == [(0, 1), (1, -1), (1, 0), (1, 1)]


def test_quantize_levels():
    assert quantize(0.0) == 0.0
    assert quantize(255.0) == 255.0
    assert quantize(100.0) == pytest.approx(95.625)
    # 15.9375 is exactly half a step and rounds up
    assert quantize(15.9375) == pytest.approx(31.875)


def test_floyd_steinberg_small_grid():
    grid = np.full((2, 3), 100.0)
    out = floyd_steinberg(grid)
    np.testing.assert_allclose(
        out,
        [
            [100.0, 95.625, 100.0 + 245 / 128],
            [100.0 + 105 / 128, 100.0 + 175 / 128, 100.0 + 35 / 128],
        ],
    )


def test_first_column_and_last_row_not_quantized():
    grid = np.full((3, 4), 100.0)
    out = floyd_steinberg(grid)
    assert out[0, 0] == 100.0
    assert out[1, 0] != pytest.approx(quantize(out[1, 0]))
    assert out[2, 1] != pytest.approx(quantize(out[2, 1]))


def test_extremes_are_stable():
    for value in (0.0, 255.0):
        grid = np.full((4, 5), value)
        np.testing.assert_array_equal(floyd_steinberg(grid), grid)


def test_floyd_steinberg_clamps():
    grid = np.full((3, 3), 254.0)
    grid[0, 1] = 240.0
    out = floyd_steinberg(grid)
    assert out.max() <= 255.0
    assert out.min() >= 0.0


def test_single_row_or_column_untouched():
    row = np.array([[10.0, 20.0, 30.0]])
    np.testing.assert_array_equal(floyd_steinberg(row), row)
    col = np.array([[10.0], [20.0], [30.0]])
    np.testing.assert_array_equal(floyd_steinberg(col), col)


def test_floyd_steinberg_does_not_mutate_input():
    grid = np.full((3, 3), 100.0)
    floyd_steinberg(grid)
    assert (grid == 100.0).all()


def test_noise_is_bounded():
    grid = np.full((20, 30), 128.0)
    out = add_noise(grid, np.random.default_rng(1))
    assert out.shape == grid.shape
    assert np.abs(out - grid).max() <= 25.0
    assert not np.array_equal(out, grid)


def test_noise_is_clamped():
    rng = np.random.default_rng(2)
    assert add_noise(np.zeros((10, 10)), rng).min() >= 0.0
    assert add_noise(np.full((10, 10), 255.0), rng).max() <= 255.0


def test_noise_is_reproducible_with_seed():
    grid = np.full((5, 5), 100.0)
    a = add_noise(grid, np.random.default_rng(42))
    b = add_noise(grid, np.random.default_rng(42))
    np.testing.assert_array_equal(a, b)
