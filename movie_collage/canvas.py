"""Pixel buffer helpers: allocation, color conversion and source-over blending."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from movie_collage.config import LayoutSettings

Color = Tuple[int, int, int, int]


def to_bgra(color: Sequence[int]) -> Tuple[int, int, int, int]:
    """Convert an RGBA color into the BGRA channel order used by OpenCV buffers."""
    r, g, b, a = (int(channel) for channel in color)
    return (b, g, r, a)


def new_canvas(layout: LayoutSettings) -> np.ndarray:
    """Allocate a fully transparent BGRA canvas at the layout's dimensions."""
    return np.zeros((layout.canvas_height, layout.canvas_width, 4), dtype=np.uint8)


def solid_layer(width: int, height: int, color: Color, mask: Optional[np.ndarray] = None) -> np.ndarray:
    """Build a BGRA layer filled with ``color`` wherever ``mask`` is set."""
    layer = np.zeros((height, width, 4), dtype=np.uint8)
    if mask is None:
        layer[:, :] = to_bgra(color)
    else:
        layer[mask] = to_bgra(color)
    return layer


def _clip_region(
    canvas: np.ndarray,
    layer: np.ndarray,
    x: int,
    y: int,
) -> Optional[Tuple[slice, slice, slice, slice]]:
    canvas_height, canvas_width = canvas.shape[:2]
    layer_height, layer_width = layer.shape[:2]

    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(canvas_width, x + layer_width)
    y1 = min(canvas_height, y + layer_height)
    if x0 >= x1 or y0 >= y1:
        return None

    return (
        slice(y0, y1),
        slice(x0, x1),
        slice(y0 - y, y1 - y),
        slice(x0 - x, x1 - x),
    )


def composite_over(canvas: np.ndarray, layer: np.ndarray, x: int, y: int) -> None:
    """Blend a BGRA ``layer`` onto ``canvas`` at ``(x, y)`` using source-over.

    Parts of the layer falling outside the canvas are clipped away.
    """
    clipped = _clip_region(canvas, layer, x, y)
    if clipped is None:
        return
    canvas_rows, canvas_cols, layer_rows, layer_cols = clipped

    region = canvas[canvas_rows, canvas_cols].astype(np.float32)
    source = layer[layer_rows, layer_cols].astype(np.float32)

    region_alpha = region[:, :, 3] / 255.0
    source_alpha = source[:, :, 3] / 255.0

    inverse_source_alpha = 1.0 - source_alpha
    out_alpha = source_alpha + region_alpha * inverse_source_alpha

    combined_color = (
        source[:, :, :3] * source_alpha[..., None]
        + region[:, :, :3] * (region_alpha * inverse_source_alpha)[..., None]
    )

    divisor = np.maximum(out_alpha[..., None], 1e-6)
    out_color = combined_color / divisor

    zero_alpha_mask = out_alpha <= 0
    if np.any(zero_alpha_mask):
        out_color[zero_alpha_mask] = 0

    blended = np.empty(region.shape, dtype=np.uint8)
    blended[:, :, :3] = np.clip(np.rint(out_color), 0, 255).astype(np.uint8)
    blended[:, :, 3] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)
    canvas[canvas_rows, canvas_cols] = blended


__all__ = ["Color", "composite_over", "new_canvas", "solid_layer", "to_bgra"]
