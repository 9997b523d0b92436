"""Single-frame composition: background, title, stats and the poster grid."""

from __future__ import annotations

import logging
from datetime import tzinfo
from pathlib import Path
from typing import List, Optional, Sequence

import cv2
import numpy as np

from movie_collage.background import draw_gradient_background, draw_title, frame_title
from movie_collage.canvas import new_canvas
from movie_collage.config import CollageConfig, LayoutSettings
from movie_collage.effects import draw_placeholder_poster, draw_poster_with_effects
from movie_collage.errors import FrameWriteError, PosterLoadError
from movie_collage.models import CellOutcome, HistoryEntry, RenderedFrame
from movie_collage.posters import load_poster
from movie_collage.stats import DetailsLookup, calculate_stats


def frame_output_path(output_dir: Path, year: int, frame_number: int, total_frames: int) -> Path:
    """Return the PNG path for a frame; single-frame runs carry no part suffix."""
    if total_frames > 1:
        filename = f"movie_collage_{year}_part_{frame_number}.png"
    else:
        filename = f"movie_collage_{year}.png"
    return Path(output_dir) / filename


class FrameCompositor:
    """Render and persist one collage canvas for a slice of the watch history."""

    def __init__(
        self,
        layout: LayoutSettings,
        collage: CollageConfig,
        lookup: DetailsLookup,
        *,
        image_dir: Path,
        output_dir: Path,
        logger: logging.Logger,
        tz: Optional[tzinfo] = None,
    ) -> None:
        self.layout = layout
        self.collage = collage
        self.lookup = lookup
        self.image_dir = Path(image_dir)
        self.output_dir = Path(output_dir)
        self.logger = logger
        self.tz = tz

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def draw_cell(self, canvas: np.ndarray, entry: HistoryEntry, index: int) -> CellOutcome:
        """Draw grid cell ``index`` for ``entry`` and report what was drawn."""
        x, y = self.layout.cell_position(index)

        if y + self.layout.poster_height > self.layout.safe_bottom:
            return CellOutcome.SKIPPED_OVERFLOW

        try:
            poster = load_poster(entry, self.image_dir, self.layout, self.tz)
        except PosterLoadError as exc:
            self.logger.debug("Poster unavailable for %s: %s", entry.title, exc)
            draw_placeholder_poster(canvas, entry.title, x, y, self.layout)
            return CellOutcome.PLACEHOLDER

        draw_poster_with_effects(canvas, poster, x, y, self.layout)
        return CellOutcome.DRAWN

    def render(
        self,
        entries: Sequence[HistoryEntry],
        frame_number: int,
        total_frames: int,
    ) -> RenderedFrame:
        canvas = new_canvas(self.layout)
        draw_gradient_background(canvas, self.collage.background_start, self.collage.background_end)

        stats = calculate_stats(entries, self.lookup, logger=self.logger)
        title = frame_title(self.collage.display_title, frame_number, total_frames)
        draw_title(canvas, self.layout, title, stats, self.collage.text_color)

        outcomes: List[CellOutcome] = []
        for index, entry in enumerate(entries):
            outcome = self.draw_cell(canvas, entry, index)
            outcomes.append(outcome)

            if outcome is CellOutcome.SKIPPED_OVERFLOW:
                x, y = self.layout.cell_position(index)
                self.logger.warning(
                    "Poster at position (%s,%s) would overflow into safe zone; skipping %s",
                    x,
                    y,
                    entry.title,
                )
            elif outcome is CellOutcome.PLACEHOLDER:
                self.logger.warning("Drew placeholder for %s", entry.title)

        return RenderedFrame(canvas=canvas, stats=stats, outcomes=tuple(outcomes))

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def output_path(self, frame_number: int, total_frames: int) -> Path:
        return frame_output_path(self.output_dir, self.collage.year, frame_number, total_frames)

    def save(self, canvas: np.ndarray, path: Path) -> None:
        success, buffer = cv2.imencode(".png", canvas)
        if not success:
            raise FrameWriteError(f"Failed to encode frame for {path}")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(buffer.tobytes())
        except OSError as exc:
            raise FrameWriteError(f"Failed to write frame {path}: {exc}") from exc


__all__ = ["FrameCompositor", "frame_output_path"]
