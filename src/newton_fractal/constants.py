"""Shared numeric constants for the Newton fractal engine."""

from __future__ import annotations

from typing import Final, Tuple

# Tolerance for convergence near the origin and for root de-duplication.
EPSILON: Final[float] = 1e-6

# Plane search: samples in [-SEARCH_RANGE, SEARCH_RANGE) on both axes.
# Increase the range if roots go missing, decrease the step if roots lie close
# together.
SEARCH_RANGE: Final[float] = 5.0
SEARCH_STEP: Final[float] = 0.1
SEARCH_ITERATIONS_PER_DEGREE: Final[int] = 10

# Rendering defaults.
RENDER_RANGE: Final[float] = 2.5
IMAGE_WIDTH: Final[int] = 2000
IMAGE_HEIGHT: Final[int] = 2000
MAX_STEPS: Final[int] = 25
CHUNK_SIZE: Final[int] = 50

# Color wheel.
HUE_STEP: Final[float] = 0.069
SATURATION: Final[float] = 0.6
BRIGHTNESS: Final[float] = 0.9
BACKGROUND_COLOR: Final[Tuple[int, int, int]] = (46, 46, 50)

# Seeds for the explicit generators.
POLYNOMIAL_SEED: Final[int] = 42
COLOR_SEED: Final[int] = 1870309217

# Added to both components of an exactly-zero slope. Its squared modulus must
# not underflow to zero.
SLOPE_NUDGE: Final[float] = 1e-12

# Random polynomial coefficients (except the constant term) are scaled by this.
RANDOM_COEFFICIENT_SCALE: Final[float] = 4.5
