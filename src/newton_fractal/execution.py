"""Execution helpers for Newton fractal CLI workflows."""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np

from .classification import assign_colors
from .computation import allocate_indices, compute_chunk, prepare_grid
from .config import RenderConfig, load_sweep_configs
from .polynomial import ComplexPolynomial
from .report import RenderReport
from .solver import default_search_iterations, find_all_roots
from .surface import FigureSurface


def _log(tag: str, message: str) -> None:
    print(f"[{tag}] {message}", flush=True)


def _chunk_record(chunk_id: int, start: int, end: int, comp_time: float) -> Dict[str, Any]:
    return {
        "chunk_id": int(chunk_id),
        "start_row": int(start),
        "end_row": int(end - 1) if end > start else int(end),
        "comp_time": comp_time,
    }


def discover_roots(config: RenderConfig, polynomial: ComplexPolynomial):
    iterations = config.search_iterations
    if iterations is None:
        iterations = default_search_iterations(polynomial)
    roots = find_all_roots(polynomial, config.search_range, config.search_step, iterations)

    _log("Search", f"Roots found: {len(roots)} of degree {polynomial.degree}")
    for z in roots:
        residual = polynomial.eval(z)
        _log("Search", f"z = {z}  f(z) = {residual.real:.10f} {residual.imaginary:.10f}i")
    if len(roots) < polynomial.degree:
        _log(
            "Search",
            "Search grid exhausted before all roots were found; "
            "increase search_range or decrease search_step",
        )
    return roots


def run_render(config: RenderConfig) -> RenderReport:
    """Discover roots, classify every grid cell chunk by chunk and rasterize."""
    start_time = time.perf_counter()
    polynomial = config.polynomial()
    _log("Run", f"Polynomial: {polynomial}")

    roots = discover_roots(config, polynomial)
    search_time = time.perf_counter() - start_time

    rng = np.random.default_rng(config.color_seed)
    colors = assign_colors(roots, rng)

    grid = prepare_grid(
        polynomial, roots, config.plane_range, config.step_size, config.max_steps, config.chunk_size
    )
    indices = allocate_indices(grid)
    chunk_records: List[Dict[str, Any]] = []

    classify_start = time.perf_counter()
    for chunk_id in range(grid.total_chunks):
        comp_start = time.perf_counter()
        start, end, chunk = compute_chunk(grid, chunk_id)
        comp_time = time.perf_counter() - comp_start
        indices[start:end, :] = chunk
        chunk_records.append(_chunk_record(chunk_id, start, end, comp_time))
        _log("Chunk", f"Classifying chunk {chunk_id} (rows {start}:{end}) took {comp_time:.4f}s")
    classify_time = time.perf_counter() - classify_start

    surface = FigureSurface(config.width, config.height)
    surface.draw(colors.colorize(indices), config.plane_range, config.step_size)

    timing = {
        "wall_time": time.perf_counter() - start_time,
        "search_time": search_time,
        "classify_time": classify_time,
        "total_chunks": grid.total_chunks,
    }
    return RenderReport(surface.image, tuple(roots), colors, timing, chunk_records)


def run_single_render(
    config: RenderConfig,
    suite_name: Optional[str] = None,
    output: str | Path | None = None,
) -> RenderReport:
    """Render one configuration, log it to MLflow and optionally save the image."""
    _log(
        "Run",
        f"Starting render '{config.run_name}' "
        f"(grid={config.grid_size}x{config.grid_size}, max_steps={config.max_steps}, "
        f"chunks={config.total_chunks})",
    )

    report = run_render(config)

    if output is not None:
        surface = FigureSurface(config.width, config.height)
        surface.image = report.image
        path = surface.save(output)
        _log("Run", f"Image saved to {path}")

    suite = suite_name or os.environ.get("NEWTON_FRACTAL_SUITE") or "default"
    if os.environ.get("SKIP_MLFLOW"):
        _log("Run", "SKIP_MLFLOW set - skipping MLflow logging.")
    else:
        from .logging import log_to_mlflow

        _log("Run", "Render finished, logging to MLflow...")
        log_to_mlflow(config, report, suite)

    wall_time = report.timing.get("wall_time", 0.0)
    print(f"[Timing] Total: {wall_time:.4f}s")
    return report


def run_sweep(
    config_path: str | Path | None,
    task_id: Optional[int] = None,
    suite_name: Optional[str] = None,
    configs: Optional[list[RenderConfig]] = None,
    descriptor: Optional[str] = None,
    output_dir: str | Path | None = None,
) -> int:
    """Run a sweep defined in a YAML configuration file or a pre-loaded list."""
    if configs is None:
        if config_path is None:
            raise ValueError("config_path must be provided when configs is None")
        configs = load_sweep_configs(config_path)
        descriptor = descriptor or str(config_path)
    else:
        descriptor = descriptor or (str(config_path) if config_path else "sweep")

    if not configs:
        print("ERROR: No configurations found in sweep", file=sys.stderr)
        return 1

    if task_id is not None:
        if task_id < 0 or task_id >= len(configs):
            print(f"ERROR: task-id {task_id} out of range [0, {len(configs) - 1}]", file=sys.stderr)
            return 1
        config = configs[task_id]
        print(f"[Task {task_id}] Running: {config.run_name}")
        return 0 if _run_guarded(config, suite_name, output_dir) else 1

    print("=" * 70)
    print(f"Running {len(configs)} configurations from {descriptor}")
    print("=" * 70)

    successes = 0
    failures: list[tuple[int, str]] = []

    for idx, cfg in enumerate(configs):
        print(f"\n[{idx + 1}/{len(configs)}] {cfg.run_name}")
        if _run_guarded(cfg, suite_name, output_dir):
            successes += 1
            print("    ✓ Completed")
        else:
            failures.append((idx, cfg.run_name))

    print("\n" + "=" * 70)
    print("Summary")
    print("=" * 70)
    print(f"Total:      {len(configs)}")
    print(f"Successful: {successes}")
    print(f"Failed:     {len(failures)}")

    if failures:
        print("\nFailed configurations:")
        for idx, name in failures:
            print(f"  [{idx}] {name}")
        return 1

    return 0


def _run_guarded(
    config: RenderConfig,
    suite_name: Optional[str],
    output_dir: str | Path | None,
) -> bool:
    output = Path(output_dir) / f"{config.run_name}.png" if output_dir else None
    try:
        run_single_render(config, suite_name, output)
    except (ValueError, ArithmeticError, OSError) as exc:
        print(f"    ✗ FAILED: {type(exc).__name__}: {exc}", file=sys.stderr)
        return False
    return True
