"""
Paginated poster-collage generator for a year of watched movies.
"""

from movie_collage.app import MovieCollage
from movie_collage.compositor import FrameCompositor, frame_output_path
from movie_collage.config import AppConfig, CollageConfig, LayoutSettings, load_config
from movie_collage.errors import (
    CollageError,
    CollageGenerationError,
    FrameWriteError,
    LayoutError,
    PosterLoadError,
)
from movie_collage.models import CellOutcome, CollageResult, HistoryEntry, MovieDetails, MovieStats
from movie_collage.pagination import CollageGenerator, plan_frames, posters_per_frame

__all__ = [
    "AppConfig",
    "CellOutcome",
    "CollageConfig",
    "CollageError",
    "CollageGenerationError",
    "CollageGenerator",
    "CollageResult",
    "FrameCompositor",
    "FrameWriteError",
    "HistoryEntry",
    "LayoutError",
    "LayoutSettings",
    "MovieCollage",
    "MovieDetails",
    "MovieStats",
    "PosterLoadError",
    "frame_output_path",
    "load_config",
    "plan_frames",
    "posters_per_frame",
]
