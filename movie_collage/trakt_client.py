"""
Trakt API helpers for retrieving a user's movie watch history.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo

import requests

from movie_collage.config import TraktSettings
from movie_collage.models import HistoryEntry

LOGGER = logging.getLogger(__name__)

TRAKT_API_VERSION = "2"
TRAKT_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.000Z"


class TraktError(RuntimeError):
    """Raised when Trakt API interaction fails."""


def parse_iso_datetime(value: str) -> datetime:
    """Parse ISO datetimes, accepting a trailing 'Z' for UTC."""
    text = value.strip()
    if not text:
        raise ValueError("Datetime value is empty")

    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"

    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO datetime: {value}") from exc


def format_trakt_time(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime(TRAKT_TIME_FORMAT)


def year_window(year: int, tz_name: str, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Return the UTC window from Jan 1 of ``year`` to the end of today, in ``tz_name``.

    The end is capped at the last instant of ``year`` so past years are
    covered in full.
    """
    try:
        tz = ZoneInfo(tz_name)
    except (KeyError, ValueError):
        LOGGER.warning("Unknown timezone %s, falling back to UTC", tz_name)
        tz = ZoneInfo("UTC")

    local_now = (now or datetime.now(tz)).astimezone(tz)
    start = datetime(year, 1, 1, tzinfo=tz)
    end_of_today = datetime.combine(local_now.date(), time.max, tzinfo=tz)
    end_of_year = datetime.combine(date(year, 12, 31), time.max, tzinfo=tz)
    end = min(end_of_today, end_of_year)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def _build_session(api_key: str) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "Content-Type": "application/json",
            "trakt-api-key": api_key,
            "trakt-api-version": TRAKT_API_VERSION,
        }
    )
    return session


def _handle_response(response: requests.Response) -> list:
    try:
        response.raise_for_status()
    except requests.HTTPError as exc:
        raise TraktError(str(exc)) from exc

    try:
        payload = response.json()
    except ValueError as exc:
        raise TraktError("Failed to parse Trakt API response as JSON") from exc

    if not isinstance(payload, list):
        raise TraktError("Unexpected Trakt API response shape")
    return payload


def _parse_entry(data: dict) -> Optional[HistoryEntry]:
    watched_raw = data.get("watched_at")
    if not watched_raw:
        return None
    try:
        watched_at = parse_iso_datetime(watched_raw)
    except ValueError:
        LOGGER.warning("Skipping history entry with invalid watched_at: %s", watched_raw)
        return None

    movie = data.get("movie") or {}
    ids = movie.get("ids") or {}
    tmdb_id = ids.get("tmdb")
    return HistoryEntry(
        watched_at=watched_at,
        title=str(movie.get("title") or ""),
        tmdb_id=int(tmdb_id) if tmdb_id else None,
        history_id=data.get("id"),
        year=movie.get("year"),
    )


class TraktClient:
    """Watch-history provider backed by the Trakt v2 API."""

    def __init__(
        self,
        settings: TraktSettings,
        *,
        http_timeout: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not settings.username:
            raise TraktError("No Trakt username configured")
        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")
        self.http_timeout = http_timeout
        self.session = session or _build_session(settings.api_key)

    def fetch_movie_history(self, start: datetime, end: datetime) -> List[HistoryEntry]:
        """Return every movie watched between ``start`` and ``end``, in API order."""
        url = f"{self.base_url}/users/{self.settings.username}/history/movies"
        start_at = format_trakt_time(start)
        end_at = format_trakt_time(end)
        LOGGER.info("Fetching Trakt history from %s to %s", start_at, end_at)

        entries: List[HistoryEntry] = []
        page = 1
        while True:
            params = {
                "start_at": start_at,
                "end_at": end_at,
                "limit": self.settings.page_limit,
                "page": page,
            }
            try:
                response = self.session.get(url, params=params, timeout=self.http_timeout)
            except requests.RequestException as exc:
                raise TraktError(f"Failed to fetch history page {page}: {exc}") from exc

            payload = _handle_response(response)
            for item in payload:
                if not isinstance(item, dict):
                    continue
                entry = _parse_entry(item)
                if entry is not None:
                    entries.append(entry)

            try:
                page_count = int(response.headers.get("X-Pagination-Page-Count", page))
            except (TypeError, ValueError):
                page_count = page
            if not payload or page >= page_count:
                break
            page += 1

        LOGGER.info("Fetched %s history entries", len(entries))
        return entries


__all__ = [
    "TraktClient",
    "TraktError",
    "format_trakt_time",
    "parse_iso_datetime",
    "year_window",
]
