"""MLflow logging for Newton fractal renders."""

from __future__ import annotations

import os
import platform
from typing import Any, Dict, List, Sequence

import mlflow
import pandas as pd
from matplotlib import pyplot as plt

from .config import RenderConfig
from .report import RenderReport
from .surface import FigureSurface

DEFAULT_TRACKING_URI = "file:./mlruns"
EXPERIMENT_NAME = "newton_fractal"


def log_to_mlflow(
    config: RenderConfig,
    report: RenderReport,
    suite_name: str = "default",
) -> None:
    """Log a render to MLflow with the rendered image, roots and chunk timings.

    If MLFLOW_RUN_ID is set in the environment, the existing run is continued.
    Otherwise a new run is created.

    Args:
        config: Render configuration
        report: Combined outputs (image, roots, timing stats, chunk table)
        suite_name: Name of the sweep suite, used for tagging/filtering
    """
    if os.environ.get("SKIP_MLFLOW"):
        return

    mlflow.set_tracking_uri(_resolve_tracking_uri())
    mlflow.set_experiment(os.environ.get("MLFLOW_EXPERIMENT_NAME") or EXPERIMENT_NAME)

    existing_run_id = os.environ.get("MLFLOW_RUN_ID")
    if existing_run_id:
        run_context = mlflow.start_run(run_id=existing_run_id)
    else:
        run_context = mlflow.start_run(run_name=config.run_name)

    with run_context as run:
        polynomial = config.polynomial()
        mlflow.set_tags(
            {
                "node_name": platform.node(),
                "suite": suite_name,
                "polynomial": str(polynomial),
            }
        )
        mlflow.log_params(config.to_dict())

        root_records = report.root_records(polynomial)
        if root_records:
            mlflow.log_table(_records_to_table(root_records), "roots.json")

        chunk_records = report.copy_chunks()
        if chunk_records:
            mlflow.log_table(_records_to_table(chunk_records), "chunks.json")

        timing_stats = report.timing or {}
        metrics = {
            "wall_time": float(timing_stats.get("wall_time", 0.0)),
            "search_time": float(timing_stats.get("search_time", 0.0)),
            "classify_time": float(timing_stats.get("classify_time", 0.0)),
            "total_chunks": float(timing_stats.get("total_chunks", 0)),
            "root_count": float(len(report.roots)),
            "degree": float(polynomial.degree),
        }
        mlflow.log_metrics(metrics)

        if report.image is not None:
            surface = FigureSurface(config.width, config.height)
            surface.image = report.image
            fig = surface.figure(title=str(polynomial))
            mlflow.log_figure(fig, "figures/newton_fractal.png")
            plt.close(fig)

        print(f"[MLflow] Logged run: {config.run_name} (suite: {suite_name})")
        print(f"[MLflow] Run ID: {run.info.run_id}")


def _records_to_table(records: Sequence[Dict[str, Any]]) -> Dict[str, List[Any]]:
    """Convert row-wise records into MLflow table format."""
    frame = pd.DataFrame.from_records(records)
    return frame.to_dict(orient="list")


def _resolve_tracking_uri() -> str:
    return os.environ.get("MLFLOW_TRACKING_URI") or DEFAULT_TRACKING_URI
