"""Basin classification and fractal coloring."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

import numpy as np
from matplotlib.colors import hsv_to_rgb

from .complex_number import ComplexNumber
from .computation import allocate_indices, compute_chunk, prepare_grid
from .constants import BACKGROUND_COLOR, BRIGHTNESS, CHUNK_SIZE, COLOR_SEED, HUE_STEP, SATURATION
from .polynomial import ComplexPolynomial

__all__ = [
    "ColorAssignment",
    "assign_colors",
    "hsb_to_rgb",
    "basin_indices",
    "classify",
    "plane_to_pixel",
]

RGB = Tuple[int, int, int]


def hsb_to_rgb(hue: float, saturation: float, brightness: float) -> RGB:
    """Convert a hue/saturation/brightness triple to 8-bit RGB; the hue wraps around."""
    rgb = hsv_to_rgb(np.array([hue % 1.0, saturation, brightness], dtype=np.float64))
    r, g, b = (int(channel * 255.0 + 0.5) for channel in rgb)
    return r, g, b


@dataclass(frozen=True, eq=False)
class ColorAssignment:
    """One color per root, in root insertion order; read-only once built."""

    roots: Tuple[ComplexNumber, ...]
    palette: np.ndarray
    background: RGB = BACKGROUND_COLOR

    def __post_init__(self) -> None:
        if len(self.roots) != len(self.palette):
            raise ValueError(
                f"palette has {len(self.palette)} colors for {len(self.roots)} roots"
            )
        self.palette.setflags(write=False)

    def as_mapping(self) -> Mapping[ComplexNumber, RGB]:
        return MappingProxyType(
            {root: tuple(int(c) for c in color) for root, color in zip(self.roots, self.palette)}
        )

    def color_of(self, root: ComplexNumber) -> RGB:
        return self.as_mapping()[root]

    def colorize(self, indices: np.ndarray) -> np.ndarray:
        """Turn a grid of root indices into an RGB grid; ``-1`` becomes the background."""
        lookup = np.vstack([self.palette.reshape(-1, 3), np.array([self.background])]).astype(np.uint8)
        return lookup[indices]


def assign_colors(
    roots: Sequence[ComplexNumber],
    rng: Optional[np.random.Generator] = None,
) -> ColorAssignment:
    """Give each root a color, advancing the hue by ``HUE_STEP`` from a random start."""
    if rng is None:
        rng = np.random.default_rng(COLOR_SEED)
    hue = float(rng.random())
    colors = []
    for _ in roots:
        hue += HUE_STEP
        colors.append(hsb_to_rgb(hue, SATURATION, BRIGHTNESS))
    palette = np.array(colors, dtype=np.uint8).reshape(len(colors), 3)
    return ColorAssignment(tuple(roots), palette)


def basin_indices(
    polynomial: ComplexPolynomial,
    roots: Sequence[ComplexNumber],
    plane_range: float,
    step_size: float,
    max_iterations: int,
    chunk_size: int = CHUNK_SIZE,
) -> np.ndarray:
    """Index of the nearest root for the Newton iterate of every grid cell.

    The grid is indexed ``[real, imaginary]``. ``roots`` must be complete
    before this is called; chunks only read it.
    """
    grid = prepare_grid(polynomial, roots, plane_range, step_size, max_iterations, chunk_size)
    indices = allocate_indices(grid)
    for chunk_id in range(grid.total_chunks):
        start, end, chunk = compute_chunk(grid, chunk_id)
        indices[start:end, :] = chunk
    return indices


def classify(
    polynomial: ComplexPolynomial,
    roots: Sequence[ComplexNumber],
    colors: ColorAssignment,
    plane_range: float,
    step_size: float,
    max_iterations_per_point: int,
    chunk_size: int = CHUNK_SIZE,
) -> np.ndarray:
    """Color grid of shape ``(n, n, 3)`` with the color of each cell's basin."""
    indices = basin_indices(
        polynomial, roots, plane_range, step_size, max_iterations_per_point, chunk_size
    )
    return colors.colorize(indices)


def plane_to_pixel(value, plane_range: float, pixels: int):
    """Affine map from ``[-plane_range, plane_range)`` to ``[0, pixels)``."""
    scaled = (np.asarray(value, dtype=np.float64) + plane_range) * (pixels / (2.0 * plane_range))
    pixel = scaled.astype(np.int64)
    if pixel.ndim == 0:
        return int(pixel)
    return pixel
