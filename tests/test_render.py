"""Render pipeline: chunked classification, rasterization and the report."""

import numpy as np
import pytest

from newton_fractal.config import default_render_config
from newton_fractal.constants import BACKGROUND_COLOR
from newton_fractal.execution import run_render
from newton_fractal.surface import FigureSurface, rasterize


@pytest.fixture(scope="module")
def cubic_report():
    config = default_render_config(
        coefficients=[-1, 0, 0, 1], image_size="32x32", chunk_size=5, search_iterations=100
    )
    return config, run_render(config)


def test_report_shape_and_roots(cubic_report):
    config, report = cubic_report
    assert report.image.shape == (32, 32, 3)
    assert report.image.dtype == np.uint8
    assert len(report.roots) == 3
    assert report.timing["total_chunks"] == config.total_chunks == 7
    assert [c["chunk_id"] for c in report.chunks] == list(range(7))
    assert report.chunks[-1]["end_row"] == 31


def test_image_uses_root_colors(cubic_report):
    _, report = cubic_report
    palette = {tuple(int(v) for v in row) for row in report.colors.palette}
    pixels = {tuple(int(v) for v in p) for p in report.image.reshape(-1, 3)}
    assert pixels <= palette | {BACKGROUND_COLOR}
    assert len(pixels & palette) == 3

    background = np.all(report.image == BACKGROUND_COLOR, axis=-1)
    assert background.mean() < 0.05


def test_root_records(cubic_report):
    config, report = cubic_report
    records = report.root_records(config.polynomial())
    assert [r["index"] for r in records] == [0, 1, 2]
    for record in records:
        assert abs(record["residual_real"]) < 1e-6
        assert abs(record["residual_imaginary"]) < 1e-6
        assert record["color"].startswith("#") and len(record["color"]) == 7

    copied = report.copy_chunks()
    copied[0]["chunk_id"] = 99
    assert report.chunks[0]["chunk_id"] == 0


def test_rasterize_places_cells():
    grid = np.zeros((4, 4, 3), dtype=np.uint8)
    grid[1, 2] = (255, 0, 0)
    image = rasterize(grid, 2.0, 1.0, 8, 8)

    assert image.shape == (8, 8, 3)
    # cell (real=-1, imag=0) lands on column 2, row 4
    assert tuple(image[4, 2]) == (255, 0, 0)
    # odd pixels are never hit by a 4x4 grid
    assert tuple(image[1, 1]) == BACKGROUND_COLOR


def test_rasterize_rejects_mismatched_grid():
    with pytest.raises(ValueError):
        rasterize(np.zeros((3, 3, 3), dtype=np.uint8), 2.0, 1.0, 8, 8)


def test_figure_surface_save(tmp_path):
    surface = FigureSurface(8, 8)
    with pytest.raises(RuntimeError):
        surface.save(tmp_path / "empty.png")

    surface.draw(np.zeros((4, 4, 3), dtype=np.uint8), 2.0, 1.0)
    path = surface.save(tmp_path / "nested" / "out.png")
    assert path.exists()
