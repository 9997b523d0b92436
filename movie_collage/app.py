"""
Movie Collage Generator
Fetches a year of watched movies, downloads their posters and renders paginated poster collages.
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from pathlib import Path
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

from movie_collage.compositor import FrameCompositor
from movie_collage.config import AppConfig, load_config
from movie_collage.models import CollageResult, HistoryEntry, MovieDetails
from movie_collage.pagination import CollageGenerator
from movie_collage.posters import DownloadSummary, PosterDownloader
from movie_collage.tmdb_client import TmdbClient
from movie_collage.trakt_client import TraktClient, year_window

# Load environment variables
load_dotenv()


def _resolve_timezone(name: str, logger: logging.Logger) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (KeyError, ValueError):
        logger.warning("Unknown timezone %s, falling back to UTC", name)
        return ZoneInfo("UTC")


class MovieCollage:
    """Facade wiring configuration, API clients, poster downloads and frame generation."""

    def __init__(
        self,
        config_file: str = "config.json",
        *,
        config: Optional[AppConfig] = None,
        logger: Optional[logging.Logger] = None,
        trakt_client: Optional[TraktClient] = None,
        tmdb_client: Optional[TmdbClient] = None,
    ) -> None:
        self.config_path = Path(config_file)
        self.config = config or load_config(self.config_path)
        self.logger = logger or logging.getLogger("movie_collage")
        self.tz = _resolve_timezone(self.config.timezone, self.logger)
        self._trakt_client = trakt_client
        self._tmdb_client = tmdb_client

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    def _get_trakt_client(self) -> TraktClient:
        if self._trakt_client is None:
            self._trakt_client = TraktClient(
                self.config.trakt,
                http_timeout=self.config.http_timeout_seconds,
            )
        return self._trakt_client

    def _get_tmdb_client(self) -> TmdbClient:
        if self._tmdb_client is None:
            self._tmdb_client = TmdbClient(
                self.config.tmdb,
                http_timeout=self.config.http_timeout_seconds,
            )
        return self._tmdb_client

    def lookup_details(self, movie_id: int) -> MovieDetails:
        return self._get_tmdb_client().get_movie_details(movie_id)

    def _get_poster_downloader(self) -> PosterDownloader:
        return PosterDownloader(
            self.config.paths.image_dir,
            self._get_tmdb_client().poster_url,
            self.logger,
            tz=self.tz,
            http_timeout=self.config.http_timeout_seconds,
        )

    def _get_generator(self) -> CollageGenerator:
        compositor = FrameCompositor(
            self.config.layout,
            self.config.collage,
            self.lookup_details,
            image_dir=self.config.paths.image_dir,
            output_dir=self.config.paths.output_dir,
            logger=self.logger,
            tz=self.tz,
        )
        return CollageGenerator(compositor, logger=self.logger)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch_history(self, now: Optional[datetime] = None) -> List[HistoryEntry]:
        start, end = year_window(self.config.collage.year, self.config.timezone, now)
        return self._get_trakt_client().fetch_movie_history(start, end)

    def poster_urls(self, history: Optional[Sequence[HistoryEntry]] = None) -> List[str]:
        """Full poster URLs for the history, oldest watch first."""
        entries = self.fetch_history() if history is None else history
        urls: List[str] = []
        for index, entry in enumerate(entries, start=1):
            self.logger.info("Processing movie %s: %s", index, entry.title)
            if not entry.has_tmdb_id:
                self.logger.warning("No TMDB ID available for %s", entry.title)
                continue
            details = self.lookup_details(entry.tmdb_id)
            urls.append(self._get_tmdb_client().poster_url(details.poster_path))
        urls.reverse()
        return urls

    def download_posters(self, history: Sequence[HistoryEntry]) -> DownloadSummary:
        summary = self._get_poster_downloader().download_all(history, self.lookup_details)
        self.logger.info("Poster download complete: %s", summary.as_dict())
        return summary

    def generate(self, history: Sequence[HistoryEntry]) -> CollageResult:
        return self._get_generator().generate(history)

    def run(self) -> CollageResult:
        """Fetch history, fetch posters when enabled, and write every frame."""
        history = self.fetch_history()
        if self.config.download_posters:
            self.download_posters(history)
        result = self.generate(history)
        self.logger.info(
            "Collage complete: %s frame(s) written to %s",
            len(result.frames),
            self.config.paths.output_dir,
        )
        return result


__all__ = ["MovieCollage"]
