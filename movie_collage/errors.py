"""Exception hierarchy for the movie collage generator."""

from __future__ import annotations


class CollageError(RuntimeError):
    """Base class for failures that abort a collage run."""


class LayoutError(CollageError):
    """Raised when the layout cannot place a single poster per frame."""


class FrameWriteError(CollageError):
    """Raised when a rendered frame cannot be encoded or written to disk."""


class CollageGenerationError(CollageError):
    """Raised when generating a specific frame fails."""

    def __init__(self, frame_number: int, cause: BaseException) -> None:
        super().__init__(f"error generating frame {frame_number}: {cause}")
        self.frame_number = frame_number


class PosterLoadError(RuntimeError):
    """Raised when a poster image is missing or cannot be decoded."""


__all__ = [
    "CollageError",
    "CollageGenerationError",
    "FrameWriteError",
    "LayoutError",
    "PosterLoadError",
]
