"""Compare the chunked numba classifier against the pure-Python baseline."""

from pathlib import Path

import numpy as np
import pytest

from newton_fractal.baseline import compute_basins
from newton_fractal.classification import basin_indices
from newton_fractal.config import load_sweep_configs
from newton_fractal.solver import find_all_roots

TEST_CONFIGS = load_sweep_configs(Path(__file__).with_name("test_configs.yaml"))


@pytest.mark.parametrize("config", TEST_CONFIGS, ids=lambda c: c.run_name)
def test_kernel_matches_baseline(config):
    polynomial = config.polynomial()
    roots = find_all_roots(
        polynomial, config.search_range, config.search_step, config.search_iterations
    )

    kernel = basin_indices(
        polynomial, roots, config.plane_range, config.step_size, config.max_steps, config.chunk_size
    )
    baseline = compute_basins(
        polynomial, roots, config.plane_range, config.step_size, config.max_steps
    )

    assert kernel.shape == baseline.shape == (config.grid_size, config.grid_size)
    # Cells on basin boundaries may flip on a last-bit difference.
    mismatch = np.count_nonzero(kernel != baseline) / kernel.size
    assert mismatch < 0.01, f"Mismatch: {config.run_name}"
