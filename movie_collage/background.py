"""Gradient background and bitmap-text rendering for collage frames."""

from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np

from movie_collage.canvas import Color, composite_over, to_bgra
from movie_collage.config import LayoutSettings
from movie_collage.models import MovieStats

FONT_FACE = cv2.FONT_HERSHEY_SIMPLEX
# Scale divisor at which a FONT_FACE glyph advance is roughly half the font size.
FONT_BASE_SIZE = 36
TEXT_PADDING = 4


def draw_gradient_background(canvas: np.ndarray, start_color: Color, end_color: Color) -> None:
    """Fill ``canvas`` with a vertical gradient from ``start_color`` to ``end_color``.

    Every pixel of a row receives the same color; row ``0`` matches the start
    color and the last row matches the end color.
    """
    height = canvas.shape[0]
    if height == 0:
        return

    if height > 1:
        ratios = np.arange(height, dtype=np.float64) / (height - 1)
    else:
        ratios = np.zeros(1, dtype=np.float64)

    start = np.asarray(to_bgra(start_color), dtype=np.float64)
    end = np.asarray(to_bgra(end_color), dtype=np.float64)
    rows = start[None, :] * (1.0 - ratios[:, None]) + end[None, :] * ratios[:, None]
    rows = np.clip(np.rint(rows), 0, 255).astype(np.uint8)

    canvas[:, :] = rows[:, None, :]


def text_origin(text: str, x: int, y: int, size: int, center: bool) -> Tuple[int, int]:
    """Return the baseline origin for ``text`` anchored at ``(x, y)``.

    Centering uses a coarse width estimate of half the font size per character
    rather than measured glyph metrics.
    """
    if not center:
        return x, y
    text_width = len(text) * (size // 2)
    return x - text_width // 2, y


def _font_scale(size: int) -> float:
    return max(size, 1) / FONT_BASE_SIZE


def _font_thickness(size: int) -> int:
    return 2 if size >= 40 else 1


def draw_text(
    canvas: np.ndarray,
    text: str,
    x: int,
    y: int,
    size: int,
    color: Color,
    *,
    center: bool = False,
) -> None:
    """Draw ``text`` with its baseline at ``y`` using the fixed Hershey face."""
    if not text:
        return

    scale = _font_scale(size)
    thickness = _font_thickness(size)
    (text_width, text_height), baseline = cv2.getTextSize(text, FONT_FACE, scale, thickness)

    layer_width = text_width + 2 * TEXT_PADDING
    layer_height = text_height + baseline + thickness + 2 * TEXT_PADDING
    glyphs = np.zeros((layer_height, layer_width), dtype=np.uint8)
    cv2.putText(
        glyphs,
        text,
        (TEXT_PADDING, TEXT_PADDING + text_height),
        FONT_FACE,
        scale,
        255,
        thickness,
        cv2.LINE_8,
    )

    layer = np.zeros((layer_height, layer_width, 4), dtype=np.uint8)
    layer[glyphs > 0] = to_bgra(color)

    origin_x, origin_y = text_origin(text, x, y, size, center)
    composite_over(canvas, layer, origin_x - TEXT_PADDING, origin_y - text_height - TEXT_PADDING)


def frame_title(title: str, frame_number: int, total_frames: int) -> str:
    if total_frames > 1:
        return f"{title} - Part {frame_number}"
    return title


def format_stats_line(stats: MovieStats) -> str:
    return f"{stats.count} Movies * {stats.total_hours:.1f} Hours * Rating {stats.avg_rating:.1f}"


def draw_title(
    canvas: np.ndarray,
    layout: LayoutSettings,
    title: str,
    stats: MovieStats,
    text_color: Color,
) -> None:
    """Draw the centered title and, beneath it, the stats line."""
    title_x, title_y = layout.title_position
    draw_text(canvas, title, title_x, title_y, layout.title_font_size, text_color, center=True)

    stats_x, stats_y = layout.stats_position
    draw_text(
        canvas,
        format_stats_line(stats),
        stats_x,
        stats_y,
        layout.stats_font_size,
        text_color,
        center=True,
    )


__all__ = [
    "draw_gradient_background",
    "draw_text",
    "draw_title",
    "format_stats_line",
    "frame_title",
    "text_origin",
]
