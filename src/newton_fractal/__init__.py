"""Newton fractal - root finding and basin coloring with MLflow tracking."""

__version__ = "1.0.0"

# Numeric core - lightweight, no tracking dependencies
from .classification import ColorAssignment, assign_colors, basin_indices, classify, plane_to_pixel
from .complex_number import ComplexNumber, NonFiniteValueError
from .config import RenderConfig, default_render_config
from .polynomial import ComplexPolynomial, InvalidPolynomialError, Polynomial
from .solver import evaluate, find_all_roots, find_root, real_roots, slope


# Conditional imports - only loaded when needed
def __getattr__(name):
    """Lazy loading of heavy modules."""
    if name in ("run_render", "run_single_render", "run_sweep"):
        from . import execution

        return getattr(execution, name)
    elif name == "log_to_mlflow":
        from .logging import log_to_mlflow

        return log_to_mlflow
    elif name in ("load_sweep_configs", "get_config_by_index"):
        from . import config

        return getattr(config, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "ComplexNumber",
    "NonFiniteValueError",
    "Polynomial",
    "ComplexPolynomial",
    "InvalidPolynomialError",
    "evaluate",
    "slope",
    "find_root",
    "find_all_roots",
    "real_roots",
    "ColorAssignment",
    "assign_colors",
    "basin_indices",
    "classify",
    "plane_to_pixel",
    "RenderConfig",
    "default_render_config",
    "run_render",
    "run_single_render",
    "run_sweep",
    "log_to_mlflow",
    "load_sweep_configs",
    "get_config_by_index",
]
