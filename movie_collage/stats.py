"""Statistics helpers for collage frames."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from movie_collage.models import HistoryEntry, MovieDetails, MovieStats
from movie_collage.tmdb_client import TmdbError

LOGGER = logging.getLogger(__name__)

DetailsLookup = Callable[[int], MovieDetails]


def calculate_stats(
    entries: Sequence[HistoryEntry],
    lookup: DetailsLookup,
    *,
    logger: Optional[logging.Logger] = None,
) -> MovieStats:
    """Aggregate count, total runtime hours and average rating for ``entries``.

    Entries without a TMDB id, or whose lookup fails, contribute to the count
    only. Ratings and runtimes of zero are treated as unknown.
    """
    log = logger or LOGGER
    total_rating = 0.0
    rating_count = 0
    total_minutes = 0

    for entry in entries:
        if not entry.has_tmdb_id:
            continue

        try:
            details = lookup(entry.tmdb_id)
        except TmdbError as exc:
            log.warning("Failed to look up details for %s: %s", entry.title, exc)
            continue

        if details.vote_average > 0:
            total_rating += details.vote_average
            rating_count += 1

        if details.runtime > 0:
            total_minutes += details.runtime

    avg_rating = total_rating / rating_count if rating_count else 0.0

    return MovieStats(
        count=len(entries),
        total_hours=total_minutes / 60.0,
        avg_rating=avg_rating,
    )


__all__ = ["DetailsLookup", "calculate_stats"]
