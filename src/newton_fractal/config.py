"""Configuration objects and YAML loading for Newton fractal renders."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from itertools import product
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np
import yaml

from .computation import grid_axis
from .constants import (
    CHUNK_SIZE,
    COLOR_SEED,
    IMAGE_HEIGHT,
    IMAGE_WIDTH,
    MAX_STEPS,
    POLYNOMIAL_SEED,
    RENDER_RANGE,
    SEARCH_RANGE,
    SEARCH_STEP,
)
from .polynomial import ComplexPolynomial

Coefficient = Union[float, complex]

# x^5 + x^2 - x + 1
DEFAULT_COEFFICIENTS: Tuple[Coefficient, ...] = (1.0, -1.0, 1.0, 0.0, 0.0, 1.0)


@dataclass(frozen=True)
class RenderConfig:
    """Runtime configuration for a single Newton fractal render."""

    width: int
    height: int
    coefficients: Tuple[Coefficient, ...] = DEFAULT_COEFFICIENTS
    random_degree: Optional[int] = None  # overrides coefficients when set
    polynomial_seed: int = POLYNOMIAL_SEED
    plane_range: float = RENDER_RANGE
    max_steps: int = MAX_STEPS
    search_range: float = SEARCH_RANGE
    search_step: float = SEARCH_STEP
    search_iterations: Optional[int] = None  # None => degree * 10
    chunk_size: int = CHUNK_SIZE
    color_seed: int = COLOR_SEED

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"image size must be positive, got {self.width}x{self.height}")
        if self.plane_range <= 0 or self.search_range <= 0 or self.search_step <= 0:
            raise ValueError("plane_range, search_range and search_step must be positive")
        if self.max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {self.max_steps}")
        if self.search_iterations is not None and self.search_iterations < 0:
            raise ValueError(f"search_iterations must be non-negative, got {self.search_iterations}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.random_degree is not None and self.random_degree < 0:
            raise ValueError(f"random_degree must be non-negative, got {self.random_degree}")

    @property
    def step_size(self) -> float:
        return 2.0 * self.plane_range / self.width

    @property
    def grid_size(self) -> int:
        return int(grid_axis(self.plane_range, self.step_size).size)

    @property
    def total_chunks(self) -> int:
        return (self.grid_size + self.chunk_size - 1) // self.chunk_size

    @property
    def image_size(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def run_name(self) -> str:
        """Generate unique run name embedding all parameters."""
        if self.random_degree is not None:
            label = f"random{self.random_degree}_seed{self.polynomial_seed}"
        else:
            label = f"deg{len(self.coefficients) - 1}"
        return f"{label}_s{self.max_steps}_r{self.plane_range:g}_c{self.chunk_size}_{self.image_size}"

    def polynomial(self) -> ComplexPolynomial:
        if self.random_degree is not None:
            rng = np.random.default_rng(self.polynomial_seed)
            return ComplexPolynomial.generate_random(self.random_degree, rng)
        return ComplexPolynomial(*self.coefficients)

    def to_dict(self) -> dict:
        """Convert to dictionary for MLflow logging."""
        data = asdict(self)
        data["coefficients"] = ",".join(str(c) for c in self.coefficients)
        return data


DEFAULT_RENDER_CONFIG = RenderConfig(width=IMAGE_WIDTH, height=IMAGE_HEIGHT)


def default_render_config(**overrides: object) -> RenderConfig:
    """Return the canonical default config optionally overridden with kwargs."""
    return replace(DEFAULT_RENDER_CONFIG, **_coerce_fields(_coerce_dimensions(overrides)))


def load_sweep_configs(yaml_path: str | Path) -> List[RenderConfig]:
    """Load YAML config and generate all parameter sweep combinations.

    Supports a top-level ``sweep`` as well as named sweeps nested under
    ``experiments``.
    """
    cfg = _read_yaml(yaml_path)
    global_defaults: Dict[str, object] = cfg.get("defaults", {}) or {}

    if "experiments" in cfg:
        configs: List[RenderConfig] = []
        for exp in cfg.get("experiments") or []:
            sweep = exp.get("sweep")
            if not sweep:
                continue
            exp_defaults = {**global_defaults, **(exp.get("defaults", {}) or {})}
            configs.extend(_expand_sweep(exp_defaults, sweep))
        return configs

    sweep: Dict[str, object] = cfg.get("sweep", {}) or {}
    return _expand_sweep(global_defaults, sweep)


def load_named_sweep_configs(
    yaml_path: str | Path,
    suite: str | None = None,
) -> List[tuple[str, List[RenderConfig]]]:
    cfg = _read_yaml(yaml_path)
    defaults: Dict[str, object] = cfg.get("defaults", {}) or {}
    experiments = cfg.get("experiments")
    results: List[tuple[str, List[RenderConfig]]] = []

    if experiments:
        for exp in experiments:
            name = exp.get("name")
            if not name:
                continue
            if suite and name != suite:
                continue
            sweep = exp.get("sweep") or {}
            exp_defaults = {**defaults, **(exp.get("defaults", {}) or {})}
            results.append((name, _expand_sweep(exp_defaults, sweep)))
        if suite and not results:
            raise ValueError(f"Suite '{suite}' not found in {yaml_path}")
        return results

    sweep: Dict[str, object] = cfg.get("sweep", {}) or {}
    label = cfg.get("name") or Path(yaml_path).stem
    return [(label, _expand_sweep(defaults, sweep))]


def get_config_by_index(yaml_path: str | Path, index: int) -> RenderConfig:
    """Get a specific config by index from sweep."""
    configs = load_sweep_configs(yaml_path)
    if index < 0 or index >= len(configs):
        raise ValueError(f"Config index {index} out of range [0, {len(configs) - 1}]")
    return configs[index]


def parse_image_size(value: str) -> Tuple[int, int]:
    try:
        width_str, height_str = value.lower().split("x")
        return int(width_str.strip()), int(height_str.strip())
    except ValueError as exc:
        raise ValueError(f"image size must look like WIDTHxHEIGHT, got {value!r}") from exc


def parse_coefficient(value: object) -> Coefficient:
    """Accept numbers and strings such as ``"-1"`` or ``"0.5-2j"``."""
    if isinstance(value, str):
        number = complex(value.replace(" ", ""))
    else:
        number = complex(value)  # type: ignore[arg-type]
    return number.real if number.imag == 0 else number


def _read_yaml(yaml_path: str | Path) -> dict:
    with open(yaml_path) as f:
        return yaml.safe_load(f) or {}


def _build_render_config(raw_data: Dict[str, object]) -> RenderConfig:
    data = _coerce_fields(_coerce_dimensions(dict(raw_data)))
    return RenderConfig(**data)  # type: ignore[arg-type]


def _coerce_fields(data: Dict[str, object]) -> Dict[str, object]:
    result = dict(data)
    if "coefficients" in result:
        result["coefficients"] = tuple(parse_coefficient(c) for c in result["coefficients"])  # type: ignore[union-attr]
    for key in ("plane_range", "search_range", "search_step"):
        if key in result:
            result[key] = float(result[key])  # type: ignore[arg-type]
    for key in ("max_steps", "chunk_size", "color_seed", "polynomial_seed"):
        if key in result:
            result[key] = int(result[key])  # type: ignore[arg-type]
    for key in ("random_degree", "search_iterations"):
        if result.get(key) is not None:
            result[key] = int(result[key])  # type: ignore[arg-type]
    return result


def _expand_sweep(defaults: Dict[str, object], sweep: Dict[str, object]) -> List[RenderConfig]:
    """Expand sweep definition into RenderConfig instances."""
    param_grid = {k: sweep[k] for k in sweep if k != "image_shape"}
    shape_options = sweep.get("image_shape")

    keys = list(param_grid.keys())
    if not keys:
        return _expand_shapes(defaults, shape_options)

    configs: List[RenderConfig] = []
    for combo in product(*[param_grid[k] for k in keys]):
        data = {**defaults, **dict(zip(keys, combo))}
        configs.extend(_expand_shapes(data, shape_options))
    return configs


def _coerce_dimensions(data: Dict[str, object]) -> Dict[str, object]:
    result = dict(data)
    for key in ("image_size", "image_shape"):
        entry = result.pop(key, None)
        if entry is not None:
            width, height = _normalize_shape_entry(entry)
            result.setdefault("width", width)
            result.setdefault("height", height)
    if "width" in result:
        result["width"] = int(result["width"])  # type: ignore[arg-type]
    if "height" in result:
        result["height"] = int(result["height"])  # type: ignore[arg-type]
    return result


def _normalize_shape_entry(entry: object) -> Tuple[int, int]:
    if isinstance(entry, dict):
        width = entry.get("width")
        height = entry.get("height")
        if width is None or height is None:
            raise ValueError("image_shape dict must include 'width' and 'height'")
        return int(width), int(height)
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return int(entry[0]), int(entry[1])
    if isinstance(entry, str):
        return parse_image_size(entry)
    raise ValueError(f"Unsupported image shape specification: {entry!r}")


def _expand_shapes(base: Dict[str, object], shape_options: object) -> List[RenderConfig]:
    if not shape_options:
        return [_build_render_config(base)]

    shapes: Iterable[Tuple[int, int]]
    if isinstance(shape_options, (list, tuple)):
        shapes = [_normalize_shape_entry(opt) for opt in shape_options]
    else:
        shapes = [_normalize_shape_entry(shape_options)]

    return [_build_render_config({**base, "width": w, "height": h}) for w, h in shapes]
