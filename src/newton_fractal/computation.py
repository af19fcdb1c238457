from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from numba import njit, prange

from .constants import EPSILON, SLOPE_NUDGE

__all__ = ["grid_axis", "BasinGrid", "prepare_grid", "allocate_indices", "compute_chunk"]


def grid_axis(plane_range: float, step_size: float) -> np.ndarray:
    """Sample coordinates ``-plane_range + k * step_size`` covering ``[-range, range)``."""
    if plane_range <= 0:
        raise ValueError(f"plane_range must be positive, got {plane_range}")
    if step_size <= 0:
        raise ValueError(f"step_size must be positive, got {step_size}")
    count = int(math.ceil(2.0 * plane_range / step_size - 1e-9))
    return -plane_range + step_size * np.arange(count, dtype=np.float64)


@dataclass(frozen=True)
class BasinGrid:
    """Read-only inputs shared by every chunk of a classification run."""

    coef_re: np.ndarray
    coef_im: np.ndarray
    deriv_re: np.ndarray
    deriv_im: np.ndarray
    roots_re: np.ndarray
    roots_im: np.ndarray
    axis: np.ndarray
    max_iterations: int
    chunk_size: int

    @property
    def size(self) -> int:
        return int(self.axis.shape[0])

    @property
    def total_chunks(self) -> int:
        return (self.size + self.chunk_size - 1) // self.chunk_size


def prepare_grid(
    polynomial,
    roots: Sequence,
    plane_range: float,
    step_size: float,
    max_iterations: int,
    chunk_size: int,
) -> BasinGrid:
    """Flatten a ``ComplexPolynomial`` and its frozen root set into kernel arrays."""
    if max_iterations < 0:
        raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    coef_re, coef_im = polynomial.coefficient_arrays()
    deriv_re, deriv_im = polynomial.derive().coefficient_arrays()
    roots_re = np.array([z.real for z in roots], dtype=np.float64)
    roots_im = np.array([z.imaginary for z in roots], dtype=np.float64)
    for array in (coef_re, coef_im, deriv_re, deriv_im, roots_re, roots_im):
        array.setflags(write=False)
    return BasinGrid(
        coef_re,
        coef_im,
        deriv_re,
        deriv_im,
        roots_re,
        roots_im,
        grid_axis(plane_range, step_size),
        int(max_iterations),
        int(chunk_size),
    )


def allocate_indices(grid: BasinGrid) -> np.ndarray:
    return np.full((grid.size, grid.size), -1, dtype=np.int64)


@njit
def _horner(c_re: np.ndarray, c_im: np.ndarray, x_re: float, x_im: float) -> Tuple[float, float]:
    n = c_re.shape[0]
    y_re = c_re[n - 1]
    y_im = c_im[n - 1]
    for k in range(n - 2, -1, -1):
        t_re = y_re * x_re - y_im * x_im
        t_im = y_re * x_im + y_im * x_re
        y_re = t_re + c_re[k]
        y_im = t_im + c_im[k]
    return y_re, y_im


@njit
def _newton_point(
    x_re: float,
    x_im: float,
    c_re: np.ndarray,
    c_im: np.ndarray,
    d_re: np.ndarray,
    d_im: np.ndarray,
    max_iterations: int,
    epsilon: float,
    nudge: float,
) -> Tuple[float, float]:
    # Same arithmetic, in the same order, as solver.find_root.
    for _ in range(max_iterations):
        s_re, s_im = _horner(d_re, d_im, x_re, x_im)
        if not (math.isfinite(s_re) and math.isfinite(s_im)):
            break
        if s_re == 0.0 and s_im == 0.0:
            s_re = s_re + nudge
            s_im = s_im + nudge
        f_re, f_im = _horner(c_re, c_im, x_re, x_im)
        if not (math.isfinite(f_re) and math.isfinite(f_im)):
            break
        denominator = s_re * s_re + s_im * s_im
        if denominator == 0.0:
            break
        q_re = (f_re * s_re + f_im * s_im) / denominator
        q_im = (f_im * s_re - f_re * s_im) / denominator
        n_re = x_re - q_re
        n_im = x_im - q_im
        if not (math.isfinite(q_re) and math.isfinite(q_im) and math.isfinite(n_re) and math.isfinite(n_im)):
            break
        x_re = n_re
        x_im = n_im
        if math.sqrt(x_re * x_re + x_im * x_im) < epsilon:
            break
    return x_re, x_im


@njit
def _nearest_root(x_re: float, x_im: float, roots_re: np.ndarray, roots_im: np.ndarray) -> int:
    best = -1
    best_distance = np.inf
    for k in range(roots_re.shape[0]):
        dx = x_re - roots_re[k]
        dy = x_im - roots_im[k]
        distance = math.sqrt(dx * dx + dy * dy)
        if distance < best_distance:
            best_distance = distance
            best = k
    return best


@njit(parallel=True)
def _compute_chunk(
    c_re: np.ndarray,
    c_im: np.ndarray,
    d_re: np.ndarray,
    d_im: np.ndarray,
    roots_re: np.ndarray,
    roots_im: np.ndarray,
    axis: np.ndarray,
    max_iterations: int,
    chunk_size: int,
    chunk_id: int,
    epsilon: float,
    nudge: float,
) -> Tuple[int, int, np.ndarray]:
    size = axis.shape[0]
    start_row = chunk_id * chunk_size
    end_row = min(start_row + chunk_size, size)
    if start_row >= size:
        return start_row, start_row, np.zeros((0, size), dtype=np.int64)

    chunk_rows = end_row - start_row
    chunk = np.empty((chunk_rows, size), dtype=np.int64)

    for local_x in prange(chunk_rows):
        real = axis[start_row + local_x]
        for y in range(size):
            x_re, x_im = _newton_point(
                real, axis[y], c_re, c_im, d_re, d_im, max_iterations, epsilon, nudge
            )
            chunk[local_x, y] = _nearest_root(x_re, x_im, roots_re, roots_im)

    return start_row, end_row, chunk


def compute_chunk(grid: BasinGrid, chunk_id: int) -> Tuple[int, int, np.ndarray]:
    """Classify rows ``chunk_id * chunk_size`` up to the next chunk boundary.

    Returns ``(start_row, end_row, chunk)`` where ``chunk[i, j]`` is the index
    of the root nearest to the Newton iterate started at
    ``axis[start_row + i] + axis[j]*i``, or ``-1`` when there are no roots.
    """
    return _compute_chunk(
        grid.coef_re,
        grid.coef_im,
        grid.deriv_re,
        grid.deriv_im,
        grid.roots_re,
        grid.roots_im,
        grid.axis,
        grid.max_iterations,
        grid.chunk_size,
        int(chunk_id),
        EPSILON,
        SLOPE_NUDGE,
    )
