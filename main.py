from __future__ import annotations

import argparse
import sys
from pathlib import Path

from newton_fractal.config import default_render_config, load_named_sweep_configs, parse_coefficient
from newton_fractal.execution import run_single_render, run_sweep


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Render Newton fractals.")
    parser.add_argument("--sweep", type=str, help="Path to sweep YAML file")
    parser.add_argument("--suite", type=str, help="Name of suite/experiment within sweep file")
    parser.add_argument("--list-suites", action="store_true", help="List suites in sweep file")
    parser.add_argument("--task-id", type=int, help="Run specific config index")
    parser.add_argument("--output-dir", type=str, help="Directory for sweep images")

    parser.add_argument(
        "--coefficients",
        type=str,
        help="Comma separated coefficients, constant term first (e.g. '-1,0,0,1' for x^3-1)",
    )
    parser.add_argument("--random-degree", type=int, help="Render a random polynomial of this degree")
    parser.add_argument("--polynomial-seed", type=int, help="Seed for --random-degree")
    parser.add_argument("--image-size", type=str, help="WIDTHxHEIGHT in pixels")
    parser.add_argument("--range", type=float, dest="plane_range", help="Render [-range, range) on both axes")
    parser.add_argument("--max-steps", type=int, help="Newton steps per pixel")
    parser.add_argument("--chunk-size", type=int, help="Grid rows per chunk")
    parser.add_argument("--output", type=str, help="Save the rendered image to this path")

    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # Handle sweep runs
    if args.sweep:
        sweep_path = Path(args.sweep)

        if args.list_suites:
            for name, configs in load_named_sweep_configs(sweep_path):
                label = name or sweep_path.stem
                print(f"{label}: {len(configs)} configurations")
            return 0

        if args.task_id is not None and args.suite is None:
            sys.exit("ERROR: --task-id requires --suite")

        suites = load_named_sweep_configs(sweep_path, args.suite)

        exit_code = 0
        for suite_name, configs in suites:
            descriptor = f"{sweep_path}::{suite_name}" if suite_name else str(sweep_path)
            rc = run_sweep(sweep_path, args.task_id, suite_name, configs, descriptor, args.output_dir)
            exit_code = exit_code or rc
        return exit_code

    if args.suite:
        sys.exit("ERROR: --suite requires --sweep")

    overrides = {}
    if args.coefficients:
        overrides["coefficients"] = tuple(parse_coefficient(c) for c in args.coefficients.split(","))
    if args.random_degree is not None:
        overrides["random_degree"] = args.random_degree
    if args.polynomial_seed is not None:
        overrides["polynomial_seed"] = args.polynomial_seed
    if args.image_size:
        overrides["image_size"] = args.image_size
    if args.plane_range is not None:
        overrides["plane_range"] = args.plane_range
    if args.max_steps is not None:
        overrides["max_steps"] = args.max_steps
    if args.chunk_size is not None:
        overrides["chunk_size"] = args.chunk_size

    try:
        config = default_render_config(**overrides)
    except ValueError as exc:
        sys.exit(f"ERROR: {exc}")

    run_single_render(config, None, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
