"""Data models used across the movie collage generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class HistoryEntry:
    """A single watched-movie record from the history provider."""

    watched_at: datetime
    title: str
    tmdb_id: Optional[int] = None
    history_id: Optional[int] = None
    year: Optional[int] = None

    @property
    def has_tmdb_id(self) -> bool:
        return bool(self.tmdb_id)


@dataclass(frozen=True)
class MovieDetails:
    """Movie metadata looked up per history entry.

    ``vote_average`` of 0 means unrated and ``runtime`` of 0 means unknown.
    """

    movie_id: int
    title: str = ""
    vote_average: float = 0.0
    runtime: int = 0
    poster_path: str = ""


@dataclass(frozen=True)
class MovieStats:
    """Summary statistics rendered beneath a frame title."""

    count: int
    total_hours: float
    avg_rating: float


@dataclass(frozen=True)
class FrameSlice:
    """Half-open index range ``[start, end)`` of the history assigned to one frame."""

    frame_number: int
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start


class CellOutcome(Enum):
    """Result of drawing a single poster cell."""

    DRAWN = "drawn"
    PLACEHOLDER = "placeholder"
    SKIPPED_OVERFLOW = "skipped_overflow"


@dataclass
class RenderedFrame:
    """Canvas for one frame plus what happened to each of its cells."""

    canvas: np.ndarray
    stats: MovieStats
    outcomes: Tuple[CellOutcome, ...]


@dataclass(frozen=True)
class FrameResult:
    """Summary of a persisted frame."""

    frame_number: int
    total_frames: int
    frame_slice: FrameSlice
    output_path: Path
    stats: MovieStats
    outcomes: Tuple[CellOutcome, ...]


@dataclass
class CollageResult:
    """Summary of a full collage run."""

    posters_per_frame: int
    frames: list[FrameResult] = field(default_factory=list)

    @property
    def output_paths(self) -> Sequence[Path]:
        return [frame.output_path for frame in self.frames]


__all__ = [
    "CellOutcome",
    "CollageResult",
    "FrameResult",
    "FrameSlice",
    "HistoryEntry",
    "MovieDetails",
    "MovieStats",
    "RenderedFrame",
]
