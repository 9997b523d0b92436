"""Rounded-rectangle geometry shared by every masking routine."""

from __future__ import annotations

from typing import List, Tuple

import numpy as np


def _corner_centers(
    rect_x: int,
    rect_y: int,
    width: int,
    height: int,
    radius: int,
) -> List[Tuple[int, int]]:
    # Trailing corners sit one extra pixel inward so the silhouette stays symmetric.
    return [
        (rect_x + radius, rect_y + radius),
        (rect_x + width - radius - 1, rect_y + radius),
        (rect_x + radius, rect_y + height - radius - 1),
        (rect_x + width - radius - 1, rect_y + height - radius - 1),
    ]


def is_inside_rounded_rect(
    x: int,
    y: int,
    rect_x: int,
    rect_y: int,
    width: int,
    height: int,
    radius: int,
) -> bool:
    """Return ``True`` when ``(x, y)`` lies inside the rounded rectangle."""
    if rect_x + radius <= x < rect_x + width - radius:
        return rect_y <= y < rect_y + height
    if rect_y + radius <= y < rect_y + height - radius:
        return rect_x <= x < rect_x + width

    radius_sq = radius * radius
    for cx, cy in _corner_centers(rect_x, rect_y, width, height, radius):
        dx = x - cx
        dy = y - cy
        if dx * dx + dy * dy <= radius_sq:
            return True
    return False


def rounded_rect_mask(width: int, height: int, radius: int) -> np.ndarray:
    """Boolean ``(height, width)`` mask of pixels inside the rounded rectangle.

    Agrees pixel for pixel with :func:`is_inside_rounded_rect` evaluated with the
    rectangle anchored at the origin.
    """
    if width <= 0 or height <= 0:
        return np.zeros((max(0, height), max(0, width)), dtype=bool)

    ys, xs = np.ogrid[0:height, 0:width]
    in_h_band = (xs >= radius) & (xs < width - radius)
    in_v_band = (ys >= radius) & (ys < height - radius)

    mask = np.broadcast_to(in_h_band, (height, width)).copy()
    mask |= np.broadcast_to(in_v_band, (height, width)) & ~in_h_band

    radius_sq = radius * radius
    in_corner = np.zeros((height, width), dtype=bool)
    for cx, cy in _corner_centers(0, 0, width, height, radius):
        in_corner |= (xs - cx) ** 2 + (ys - cy) ** 2 <= radius_sq

    undecided = ~in_h_band & ~in_v_band
    mask |= undecided & in_corner
    return mask


__all__ = ["is_inside_rounded_rect", "rounded_rect_mask"]
