"""Rendering surfaces that receive a finished color grid."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol

import numpy as np
from matplotlib import pyplot as plt

from .classification import plane_to_pixel
from .computation import grid_axis
from .constants import BACKGROUND_COLOR

__all__ = ["RenderSurface", "FigureSurface", "rasterize"]


class RenderSurface(Protocol):
    def draw(self, color_grid: np.ndarray, plane_range: float, step_size: float) -> None:
        ...


def rasterize(
    color_grid: np.ndarray,
    plane_range: float,
    step_size: float,
    width: int,
    height: int,
) -> np.ndarray:
    """Place every grid cell on a ``(height, width, 3)`` image.

    Cell ``[i, j]`` lands on the pixel of its plane coordinate; pixels no cell
    maps to keep the background color.
    """
    axis = grid_axis(plane_range, step_size)
    if color_grid.shape[:2] != (axis.size, axis.size):
        raise ValueError(
            f"color grid shape {color_grid.shape[:2]} does not match a {axis.size}x{axis.size} grid"
        )

    image = np.empty((height, width, 3), dtype=np.uint8)
    image[:, :] = BACKGROUND_COLOR

    px = plane_to_pixel(axis, plane_range, width)
    py = plane_to_pixel(axis, plane_range, height)
    cols = np.flatnonzero((px >= 0) & (px < width))
    rows = np.flatnonzero((py >= 0) & (py < height))
    image[py[rows][None, :], px[cols][:, None]] = color_grid[np.ix_(cols, rows)]
    return image


class FigureSurface:
    """Matplotlib-backed surface with fixed pixel dimensions."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.image: Optional[np.ndarray] = None

    def draw(self, color_grid: np.ndarray, plane_range: float, step_size: float) -> None:
        self.image = rasterize(color_grid, plane_range, step_size, self.width, self.height)

    def figure(self, title: Optional[str] = None):
        if self.image is None:
            raise RuntimeError("nothing has been drawn yet")
        fig, ax = plt.subplots(figsize=(6, 6))
        ax.imshow(self.image)
        ax.set_axis_off()
        if title:
            ax.set_title(title)
        return fig

    def save(self, path: str | Path) -> Path:
        if self.image is None:
            raise RuntimeError("nothing has been drawn yet")
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        plt.imsave(out, self.image)
        return out
