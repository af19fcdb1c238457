"""Basin classification and root coloring."""

import numpy as np
import pytest

from newton_fractal.baseline import nearest_root_index
from newton_fractal.classification import (
    assign_colors,
    basin_indices,
    classify,
    hsb_to_rgb,
    plane_to_pixel,
)
from newton_fractal.complex_number import ComplexNumber
from newton_fractal.computation import grid_axis
from newton_fractal.constants import BACKGROUND_COLOR, BRIGHTNESS, HUE_STEP, SATURATION
from newton_fractal.polynomial import ComplexPolynomial
from newton_fractal.solver import find_all_roots, find_root

CUBIC = ComplexPolynomial(-1, 0, 0, 1)
RANGE = 2.5
STEP = 0.25
MAX_STEPS = 25


@pytest.fixture(scope="module")
def cubic_roots():
    return find_all_roots(CUBIC, max_iterations=100)


@pytest.fixture(scope="module")
def cubic_colors(cubic_roots):
    return assign_colors(cubic_roots, np.random.default_rng(3))


@pytest.fixture(scope="module")
def cubic_grid(cubic_roots, cubic_colors):
    return classify(CUBIC, cubic_roots, cubic_colors, RANGE, STEP, MAX_STEPS)


def _cell_color(grid, real, imaginary):
    axis = grid_axis(RANGE, STEP)
    x = int(np.flatnonzero(axis == real)[0])
    y = int(np.flatnonzero(axis == imaginary)[0])
    return tuple(int(c) for c in grid[x, y])


def _expected_color(roots, colors, real, imaginary):
    end_point = find_root(CUBIC, ComplexNumber(real, imaginary), MAX_STEPS)
    index = nearest_root_index(end_point, roots)
    return tuple(int(c) for c in colors.palette[index]), index


def test_grid_shape(cubic_grid):
    assert cubic_grid.shape == (20, 20, 3)
    assert cubic_grid.dtype == np.uint8


def test_same_basin_same_color(cubic_grid, cubic_roots, cubic_colors):
    color_a, index_a = _expected_color(cubic_roots, cubic_colors, 1.0, 0.0)
    color_b, index_b = _expected_color(cubic_roots, cubic_colors, 1.5, 0.0)
    assert index_a == index_b
    assert _cell_color(cubic_grid, 1.0, 0.0) == color_a
    assert _cell_color(cubic_grid, 1.5, 0.0) == color_b


def test_different_basins_different_colors(cubic_grid, cubic_roots, cubic_colors):
    color_real, index_real = _expected_color(cubic_roots, cubic_colors, 1.0, 0.0)
    color_upper, index_upper = _expected_color(cubic_roots, cubic_colors, -0.5, 0.75)
    color_lower, index_lower = _expected_color(cubic_roots, cubic_colors, -0.5, -0.75)
    assert len({index_real, index_upper, index_lower}) == 3
    assert _cell_color(cubic_grid, 1.0, 0.0) == color_real
    assert _cell_color(cubic_grid, -0.5, 0.75) == color_upper
    assert _cell_color(cubic_grid, -0.5, -0.75) == color_lower
    assert len({color_real, color_upper, color_lower}) == 3


def test_every_cell_has_a_root_color(cubic_grid, cubic_colors):
    palette = {tuple(int(c) for c in color) for color in cubic_colors.palette}
    cells = {tuple(int(c) for c in color) for color in cubic_grid.reshape(-1, 3)}
    assert cells <= palette


def test_chunking_does_not_change_result(cubic_roots):
    whole = basin_indices(CUBIC, cubic_roots, RANGE, STEP, MAX_STEPS, chunk_size=20)
    small = basin_indices(CUBIC, cubic_roots, RANGE, STEP, MAX_STEPS, chunk_size=3)
    np.testing.assert_array_equal(whole, small)


def test_empty_root_set_paints_background():
    grid = classify(CUBIC, [], assign_colors([]), RANGE, 0.5, MAX_STEPS)
    assert grid.shape == (10, 10, 3)
    assert (grid == np.array(BACKGROUND_COLOR, dtype=np.uint8)).all()


def test_constant_polynomial_is_classified_without_error():
    indices = basin_indices(ComplexPolynomial(1), [], RANGE, 0.5, MAX_STEPS)
    assert (indices == -1).all()


def test_assign_colors_steps_around_the_wheel(cubic_roots):
    colors = assign_colors(cubic_roots, np.random.default_rng(11))
    hue = float(np.random.default_rng(11).random())
    expected = []
    for _ in cubic_roots:
        hue += HUE_STEP
        expected.append(hsb_to_rgb(hue, SATURATION, BRIGHTNESS))
    assert [tuple(int(c) for c in color) for color in colors.palette] == expected
    assert colors.color_of(cubic_roots[0]) == expected[0]
    assert len(set(expected)) == len(expected)


def test_assign_colors_is_reproducible(cubic_roots):
    a = assign_colors(cubic_roots, np.random.default_rng(5))
    b = assign_colors(cubic_roots, np.random.default_rng(5))
    np.testing.assert_array_equal(a.palette, b.palette)


def test_color_assignment_is_read_only(cubic_colors, cubic_roots):
    with pytest.raises(TypeError):
        cubic_colors.as_mapping()[cubic_roots[0]] = (0, 0, 0)
    with pytest.raises(ValueError):
        cubic_colors.palette[0, 0] = 1


def test_colorize_background_for_missing_root(cubic_colors):
    indices = np.array([[0, -1], [1, 2]])
    rgb = cubic_colors.colorize(indices)
    assert tuple(rgb[0, 1]) == BACKGROUND_COLOR
    assert tuple(rgb[1, 1]) == tuple(cubic_colors.palette[2])


@pytest.mark.parametrize(
    "hue,expected",
    [(0.0, (255, 0, 0)), (1.0, (255, 0, 0)), (0.5, (0, 255, 255)), (1.5, (0, 255, 255))],
)
def test_hsb_to_rgb(hue, expected):
    assert hsb_to_rgb(hue, 1.0, 1.0) == expected


def test_plane_to_pixel():
    assert plane_to_pixel(-2.5, 2.5, 2000) == 0
    assert plane_to_pixel(0.0, 2.5, 2000) == 1000
    assert plane_to_pixel(1.25, 2.5, 100) == 75
    np.testing.assert_array_equal(plane_to_pixel(np.array([-2.5, 0.0]), 2.5, 10), [0, 5])
