"""
TMDB API helpers for looking up movie details and poster locations.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from movie_collage.config import TmdbSettings
from movie_collage.models import MovieDetails

LOGGER = logging.getLogger(__name__)


class TmdbError(RuntimeError):
    """Raised when TMDB API interaction fails."""


def build_poster_url(image_base_url: str, poster_size: str, poster_path: str) -> str:
    return f"{image_base_url}{poster_size}{poster_path}"


def _build_session(api_key: str) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "accept": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
    )
    return session


def _handle_response(response: requests.Response) -> dict:
    try:
        response.raise_for_status()
    except requests.HTTPError as exc:
        raise TmdbError(str(exc)) from exc

    try:
        payload = response.json()
    except ValueError as exc:
        raise TmdbError("Failed to parse TMDB API response as JSON") from exc

    if not isinstance(payload, dict):
        raise TmdbError("Unexpected TMDB API response shape")
    return payload


def _number(value: Any, cast: type) -> Any:
    try:
        return cast(value or 0)
    except (TypeError, ValueError):
        return cast(0)


def _parse_details(movie_id: int, data: dict) -> MovieDetails:
    return MovieDetails(
        movie_id=_number(data.get("id") or movie_id, int),
        title=str(data.get("title") or ""),
        vote_average=_number(data.get("vote_average"), float),
        runtime=_number(data.get("runtime"), int),
        poster_path=str(data.get("poster_path") or ""),
    )


class TmdbClient:
    """Movie detail provider backed by the TMDB v3 API."""

    def __init__(
        self,
        settings: TmdbSettings,
        *,
        http_timeout: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")
        self.http_timeout = http_timeout
        self.session = session or _build_session(settings.api_key)

    def get_movie_details(self, movie_id: int) -> MovieDetails:
        try:
            response = self.session.get(
                f"{self.base_url}/movie/{int(movie_id)}",
                timeout=self.http_timeout,
            )
        except requests.RequestException as exc:
            raise TmdbError(f"Failed to fetch movie {movie_id}: {exc}") from exc

        payload = _handle_response(response)
        details = _parse_details(movie_id, payload)
        LOGGER.debug("Fetched TMDB details for %s: %s", movie_id, details)
        return details

    def poster_url(self, poster_path: str) -> str:
        return build_poster_url(self.settings.image_base_url, self.settings.poster_size, poster_path)


__all__ = ["TmdbClient", "TmdbError", "build_poster_url"]
