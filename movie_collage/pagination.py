"""Split the watch history into frames and drive per-frame composition."""

from __future__ import annotations

import logging
import math
from typing import List, Sequence

from movie_collage.compositor import FrameCompositor
from movie_collage.config import LayoutSettings
from movie_collage.errors import CollageGenerationError, LayoutError
from movie_collage.models import CollageResult, FrameResult, FrameSlice, HistoryEntry


def posters_per_frame(layout: LayoutSettings) -> int:
    """Number of grid cells that fit below the title area of one canvas.

    Raises :class:`LayoutError` when rows have no positive height.
    """
    row_pitch = layout.poster_height + layout.poster_spacing_y
    if row_pitch <= 0:
        raise LayoutError(
            f"Row height {layout.poster_height} plus spacing {layout.poster_spacing_y} must be positive"
        )

    available_height = layout.working_height - layout.title_area_height
    max_rows = available_height // row_pitch
    return max(0, max_rows) * layout.posters_per_row


def plan_frames(total_posters: int, per_frame: int) -> List[FrameSlice]:
    """Partition ``[0, total_posters)`` into contiguous frames of ``per_frame`` entries.

    The final frame holds the remainder. Raises :class:`LayoutError` when
    ``per_frame`` is not positive.
    """
    if per_frame <= 0:
        raise LayoutError(
            f"Layout yields {per_frame} posters per frame; enlarge the canvas or shrink the posters"
        )

    num_frames = math.ceil(total_posters / per_frame)
    frames: List[FrameSlice] = []
    for index in range(num_frames):
        start = index * per_frame
        end = min(start + per_frame, total_posters)
        frames.append(FrameSlice(frame_number=index + 1, start=start, end=end))
    return frames


class CollageGenerator:
    """Render one persisted image per frame, strictly in order, failing fast."""

    def __init__(self, compositor: FrameCompositor, *, logger: logging.Logger) -> None:
        self.compositor = compositor
        self.logger = logger

    def generate(self, history: Sequence[HistoryEntry]) -> CollageResult:
        per_frame = posters_per_frame(self.compositor.layout)
        frames = plan_frames(len(history), per_frame)
        total_frames = len(frames)

        self.logger.info(
            "Generating %s frame(s) for %s movies (%s posters per frame)",
            total_frames,
            len(history),
            per_frame,
        )

        result = CollageResult(posters_per_frame=per_frame)
        for frame in frames:
            try:
                frame_result = self._generate_frame(history, frame, total_frames)
            except Exception as exc:
                raise CollageGenerationError(frame.frame_number, exc) from exc
            result.frames.append(frame_result)

        return result

    def _generate_frame(
        self,
        history: Sequence[HistoryEntry],
        frame: FrameSlice,
        total_frames: int,
    ) -> FrameResult:
        entries = history[frame.start:frame.end]
        rendered = self.compositor.render(entries, frame.frame_number, total_frames)

        output_path = self.compositor.output_path(frame.frame_number, total_frames)
        self.compositor.save(rendered.canvas, output_path)
        self.logger.info("Generated frame %s: %s", frame.frame_number, output_path)

        return FrameResult(
            frame_number=frame.frame_number,
            total_frames=total_frames,
            frame_slice=frame,
            output_path=output_path,
            stats=rendered.stats,
            outcomes=rendered.outcomes,
        )


__all__ = ["CollageGenerator", "plan_frames", "posters_per_frame"]
