"""Rounded-corner clipping, shadow, border and placeholder rendering for poster cells."""

from __future__ import annotations

import numpy as np

from movie_collage.background import draw_text
from movie_collage.canvas import Color, composite_over, solid_layer
from movie_collage.config import LayoutSettings
from movie_collage.geometry import rounded_rect_mask

SHADOW_OFFSET = 4
SHADOW_COLOR: Color = (0, 0, 0, 100)
BORDER_THICKNESS = 2
BORDER_COLOR: Color = (255, 255, 255, 200)
PLACEHOLDER_COLOR: Color = (200, 200, 200, 255)
PLACEHOLDER_TEXT_COLOR: Color = (100, 100, 100, 255)
PLACEHOLDER_FONT_SIZE = 16


def create_rounded_rect_mask(width: int, height: int, radius: int) -> np.ndarray:
    """Return a BGRA mask: opaque white inside the rounded rectangle, transparent outside."""
    return solid_layer(width, height, (255, 255, 255, 255), rounded_rect_mask(width, height, radius))


def apply_border_radius(image: np.ndarray, radius: int) -> np.ndarray:
    """Return a copy of a BGRA ``image`` made transparent outside its rounded corners."""
    height, width = image.shape[:2]
    result = np.zeros_like(image)
    inside = rounded_rect_mask(width, height, radius)
    result[inside] = image[inside]
    return result


def draw_shadow_with_mask(canvas: np.ndarray, mask: np.ndarray, x: int, y: int, color: Color) -> None:
    """Flood every mask pixel with any alpha with ``color`` and blend it at ``(x, y)``."""
    height, width = mask.shape[:2]
    covered = mask[:, :, 3] > 0
    composite_over(canvas, solid_layer(width, height, color, covered), x, y)


def draw_rounded_rect(
    canvas: np.ndarray,
    x: int,
    y: int,
    width: int,
    height: int,
    radius: int,
    color: Color,
) -> None:
    """Blend a filled rounded rectangle of ``color`` onto ``canvas``."""
    inside = rounded_rect_mask(width, height, radius)
    composite_over(canvas, solid_layer(width, height, color, inside), x, y)


def draw_rounded_border(
    canvas: np.ndarray,
    x: int,
    y: int,
    width: int,
    height: int,
    radius: int,
    color: Color,
) -> None:
    # Filled; the poster drawn on top leaves only the outset ring visible.
    draw_rounded_rect(canvas, x, y, width, height, radius, color)


def draw_poster_with_effects(
    canvas: np.ndarray,
    poster: np.ndarray,
    x: int,
    y: int,
    layout: LayoutSettings,
) -> None:
    """Composite shadow, border ring and the rounded poster, in that order."""
    rounded_poster = apply_border_radius(poster, layout.border_radius)

    shadow_mask = create_rounded_rect_mask(layout.poster_width, layout.poster_height, layout.border_radius)
    draw_shadow_with_mask(canvas, shadow_mask, x + SHADOW_OFFSET, y + SHADOW_OFFSET, SHADOW_COLOR)

    draw_rounded_border(
        canvas,
        x - BORDER_THICKNESS,
        y - BORDER_THICKNESS,
        layout.poster_width + 2 * BORDER_THICKNESS,
        layout.poster_height + 2 * BORDER_THICKNESS,
        layout.border_radius + BORDER_THICKNESS,
        BORDER_COLOR,
    )

    composite_over(canvas, rounded_poster, x, y)


def draw_placeholder_poster(
    canvas: np.ndarray,
    title: str,
    x: int,
    y: int,
    layout: LayoutSettings,
) -> None:
    """Draw a grey rounded tile with ``title`` centered in it."""
    draw_rounded_rect(
        canvas,
        x,
        y,
        layout.poster_width,
        layout.poster_height,
        layout.border_radius,
        PLACEHOLDER_COLOR,
    )
    draw_text(
        canvas,
        title,
        x + layout.poster_width // 2,
        y + layout.poster_height // 2,
        PLACEHOLDER_FONT_SIZE,
        PLACEHOLDER_TEXT_COLOR,
        center=True,
    )


__all__ = [
    "BORDER_COLOR",
    "BORDER_THICKNESS",
    "PLACEHOLDER_COLOR",
    "SHADOW_COLOR",
    "SHADOW_OFFSET",
    "apply_border_radius",
    "create_rounded_rect_mask",
    "draw_placeholder_poster",
    "draw_poster_with_effects",
    "draw_rounded_border",
    "draw_rounded_rect",
    "draw_shadow_with_mask",
]
