import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from movie_collage.background import (
    draw_gradient_background,
    draw_text,
    draw_title,
    format_stats_line,
    frame_title,
    text_origin,
)
from movie_collage.canvas import to_bgra
from movie_collage.config import LayoutSettings
from movie_collage.models import MovieStats


def test_gradient_endpoints_match_configured_colors():
    start = (10, 20, 30, 255)
    end = (200, 100, 50, 128)
    canvas = np.zeros((50, 7, 4), dtype=np.uint8)

    draw_gradient_background(canvas, start, end)

    assert tuple(map(int, canvas[0, 0])) == to_bgra(start)
    assert tuple(map(int, canvas[-1, 0])) == to_bgra(end)


def test_gradient_rows_are_uniform_and_monotonic():
    canvas = np.zeros((40, 9, 4), dtype=np.uint8)
    draw_gradient_background(canvas, (0, 0, 0, 255), (255, 255, 255, 255))

    for row in canvas:
        unique_pixels = {tuple(map(int, pixel)) for pixel in row}
        assert len(unique_pixels) == 1

    column = canvas[:, 0, 0].astype(int)
    assert np.all(np.diff(column) >= 0)


def test_gradient_single_row_uses_start_color():
    canvas = np.zeros((1, 3, 4), dtype=np.uint8)
    draw_gradient_background(canvas, (1, 2, 3, 4), (9, 9, 9, 9))
    assert tuple(map(int, canvas[0, 0])) == (3, 2, 1, 4)


def test_text_origin_uses_coarse_width_estimate():
    assert text_origin("abcd", 540, 125, 48, True) == (540 - (4 * 24) // 2, 125)
    assert text_origin("abc", 100, 50, 15, True) == (100 - (3 * 7) // 2, 50)
    assert text_origin("abcd", 540, 125, 48, False) == (540, 125)


def test_frame_title_only_suffixed_for_multi_frame_runs():
    assert frame_title("2025 in Movies", 1, 1) == "2025 in Movies"
    assert frame_title("2025 in Movies", 2, 3) == "2025 in Movies - Part 2"


def test_format_stats_line():
    stats = MovieStats(count=12, total_hours=23.456, avg_rating=7.04)
    assert format_stats_line(stats) == "12 Movies * 23.5 Hours * Rating 7.0"


def test_draw_text_marks_pixels_near_anchor():
    canvas = np.zeros((100, 300, 4), dtype=np.uint8)
    canvas[:, :] = (0, 0, 0, 255)

    draw_text(canvas, "HELLO", 150, 60, 24, (255, 255, 255, 255), center=True)

    written = np.argwhere(canvas[:, :, 0] > 0)
    assert written.size > 0
    ys, xs = written[:, 0], written[:, 1]
    assert ys.max() <= 62
    assert ys.min() >= 30
    assert xs.min() >= 150 - (5 * 12) // 2 - 2


def test_draw_text_ignores_empty_string():
    canvas = np.zeros((20, 20, 4), dtype=np.uint8)
    draw_text(canvas, "", 10, 10, 24, (255, 255, 255, 255))
    assert not canvas.any()


def test_draw_title_writes_in_top_margin_only():
    layout = LayoutSettings()
    canvas = np.zeros((layout.canvas_height, layout.canvas_width, 4), dtype=np.uint8)

    draw_title(canvas, layout, "My Movies", MovieStats(3, 4.5, 7.5), (255, 255, 255, 255))

    written_rows = np.argwhere(canvas[:, :, 3] > 0)[:, 0]
    assert written_rows.size > 0
    assert written_rows.max() < layout.top_margin
