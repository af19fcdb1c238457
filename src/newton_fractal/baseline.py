"""Baseline basin classification on the pure-Python object model."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .complex_number import ComplexNumber
from .computation import grid_axis
from .polynomial import ComplexPolynomial
from .solver import find_root


def nearest_root_index(point: ComplexNumber, roots: Sequence[ComplexNumber]) -> int:
    """Index of the root closest to ``point``; the first one wins ties, ``-1`` if none."""
    best = -1
    best_distance = float("inf")
    for index, root in enumerate(roots):
        distance = point.distance_to(root)
        if distance < best_distance:
            best_distance = distance
            best = index
    return best


def compute_basins(
    polynomial: ComplexPolynomial,
    roots: Sequence[ComplexNumber],
    plane_range: float,
    step_size: float,
    max_iterations: int,
) -> np.ndarray:
    """Root index for every grid cell, indexed ``[real, imaginary]``."""
    axis = grid_axis(plane_range, step_size)
    image = np.full((axis.size, axis.size), -1, dtype=np.int64)

    for x, real in enumerate(axis):
        for y, imaginary in enumerate(axis):
            end_point = find_root(
                polynomial, ComplexNumber(float(real), float(imaginary)), max_iterations
            )
            image[x, y] = nearest_root_index(end_point, roots)

    return image
