"""Poster image naming, decoding, resizing and download logic."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Callable, Optional, Sequence

import cv2
import numpy as np
import requests

from movie_collage.config import LayoutSettings
from movie_collage.errors import PosterLoadError
from movie_collage.models import HistoryEntry, MovieDetails
from movie_collage.tmdb_client import TmdbError

POSTER_FILENAME_FORMAT = "%Y-%m-%d_%H-%M-%S"
POSTER_EXTENSION = ".jpg"


def poster_filename(watched_at: datetime, tz: Optional[tzinfo] = None) -> str:
    """Return the poster filename for a watch timestamp, e.g. ``2025-01-05_21-12-44.jpg``.

    Aware timestamps are converted to ``tz`` (the system local zone when
    omitted); naive timestamps are taken as already local.
    """
    local_time = watched_at.astimezone(tz) if watched_at.tzinfo is not None else watched_at
    return local_time.strftime(POSTER_FILENAME_FORMAT) + POSTER_EXTENSION


def poster_path(image_dir: Path, watched_at: datetime, tz: Optional[tzinfo] = None) -> Path:
    return Path(image_dir) / poster_filename(watched_at, tz)


def ensure_bgra(image: Optional[np.ndarray]) -> Optional[np.ndarray]:
    if image is None:
        return None
    if len(image.shape) == 2 or image.shape[2] == 1:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    if image.shape[2] == 3:
        opaque_alpha = np.full((image.shape[0], image.shape[1], 1), 255, dtype=image.dtype)
        return np.concatenate((image, opaque_alpha), axis=2)
    if image.shape[2] != 4:
        return None
    return image


def load_image(path: Path) -> np.ndarray:
    """Decode a PNG or JPEG file; the extension picks the decoder."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise PosterLoadError(f"Failed to read poster {path}: {exc}") from exc

    if str(path).lower().endswith(".png"):
        flags = cv2.IMREAD_UNCHANGED
    else:
        flags = cv2.IMREAD_COLOR

    image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), flags)
    if image is None:
        raise PosterLoadError(f"Failed to decode poster {path}")
    if image.dtype != np.uint8:
        image = cv2.convertScaleAbs(image, alpha=255.0 / 65535.0)
    return image


def resize_image(image: np.ndarray, width: int, height: int) -> np.ndarray:
    """Resize to exactly ``width`` x ``height`` with Lanczos resampling, as BGRA."""
    try:
        resized = cv2.resize(image, (width, height), interpolation=cv2.INTER_LANCZOS4)
        bgra = ensure_bgra(resized)
    except cv2.error as exc:
        raise PosterLoadError(f"Failed to resize poster to {width}x{height}: {exc}") from exc
    if bgra is None:
        raise PosterLoadError(f"Unsupported channel layout {image.shape}")
    return bgra


def load_poster(
    entry: HistoryEntry,
    image_dir: Path,
    layout: LayoutSettings,
    tz: Optional[tzinfo] = None,
) -> np.ndarray:
    """Load the poster for ``entry`` as a poster-cell sized BGRA array."""
    path = poster_path(image_dir, entry.watched_at, tz)
    image = load_image(path)
    return resize_image(image, layout.poster_width, layout.poster_height)


@dataclass
class DownloadSummary:
    downloaded: int = 0
    existing: int = 0
    skipped: int = 0
    failed: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "downloaded": self.downloaded,
            "existing": self.existing,
            "skipped": self.skipped,
            "failed": self.failed,
        }


class PosterDownloader:
    """Fetch poster images into the directory the poster loader reads from."""

    def __init__(
        self,
        image_dir: Path,
        poster_url: Callable[[str], str],
        logger: logging.Logger,
        *,
        tz: Optional[tzinfo] = None,
        http_timeout: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.image_dir = Path(image_dir)
        self.poster_url = poster_url
        self.logger = logger
        self.tz = tz
        self.http_timeout = http_timeout
        self.session = session or requests.Session()

    def target_path(self, entry: HistoryEntry) -> Path:
        return poster_path(self.image_dir, entry.watched_at, self.tz)

    def download(self, entry: HistoryEntry, details: MovieDetails) -> bool:
        """Download the poster for ``entry``; returns ``False`` when it could not be fetched."""
        if not details.poster_path:
            self.logger.warning("No poster path for %s", entry.title)
            return False

        target = self.target_path(entry)
        url = self.poster_url(details.poster_path)
        try:
            response = self.session.get(url, timeout=self.http_timeout)
            response.raise_for_status()
            self.image_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(response.content)
        except (requests.RequestException, OSError) as exc:
            self.logger.error("Failed to download poster for %s from %s: %s", entry.title, url, exc)
            return False

        self.logger.debug("Downloaded poster for %s to %s", entry.title, target)
        return True

    def download_all(
        self,
        history: Sequence[HistoryEntry],
        lookup: Callable[[int], MovieDetails],
    ) -> DownloadSummary:
        summary = DownloadSummary()
        for entry in history:
            if not entry.has_tmdb_id:
                self.logger.warning("No TMDB ID available for %s", entry.title)
                summary.skipped += 1
                continue
            if self.target_path(entry).exists():
                summary.existing += 1
                continue
            try:
                details = lookup(entry.tmdb_id)
            except TmdbError as exc:
                self.logger.error("Failed to look up poster for %s: %s", entry.title, exc)
                summary.failed += 1
                continue
            if self.download(entry, details):
                summary.downloaded += 1
            else:
                summary.failed += 1
        return summary


__all__ = [
    "DownloadSummary",
    "POSTER_FILENAME_FORMAT",
    "PosterDownloader",
    "ensure_bgra",
    "load_image",
    "load_poster",
    "poster_filename",
    "poster_path",
    "resize_image",
]
