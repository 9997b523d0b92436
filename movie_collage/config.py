"""Configuration dataclasses and loading helpers for the movie collage generator."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

RGBA = Tuple[int, int, int, int]

DEFAULT_BACKGROUND_START: RGBA = (20, 24, 48, 255)
DEFAULT_BACKGROUND_END: RGBA = (88, 28, 92, 255)
DEFAULT_TEXT_COLOR: RGBA = (255, 255, 255, 255)


def _parse_bool(value: Any, default: bool) -> bool:
    """Parse truthy/falsy values from multiple input types."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    if isinstance(value, (int, float)):
        return value != 0
    return default


def _parse_positive_int(value: Any, default: int) -> int:
    """Parse a positive integer with fallback to default."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _parse_int(value: Any, default: int) -> int:
    """Parse any integer (zero and negatives allowed) with fallback to default."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _parse_color(value: Any, default: RGBA) -> RGBA:
    """Parse and clamp color definitions to RGBA tuples."""

    def _clamp_channels(channels: Any) -> Optional[RGBA]:
        if not isinstance(channels, (list, tuple)) or len(channels) not in (3, 4):
            return None
        try:
            clamped = [max(0, min(255, int(channel))) for channel in channels]
        except (TypeError, ValueError):
            return None
        if len(clamped) == 3:
            clamped.append(255)
        return (clamped[0], clamped[1], clamped[2], clamped[3])

    if isinstance(value, dict):
        if "hex" in value and isinstance(value["hex"], str):
            return _parse_color(value["hex"], default)
        if "value" in value:
            return _clamp_channels(value["value"]) or default
        return default

    if isinstance(value, (list, tuple)):
        return _clamp_channels(value) or default

    if isinstance(value, str):
        hex_value = value.strip().lstrip("#")
        if len(hex_value) not in (6, 8):
            return default
        try:
            channels = [int(hex_value[i:i + 2], 16) for i in range(0, len(hex_value), 2)]
        except ValueError:
            return default
        return _clamp_channels(channels) or default

    return default


@dataclass(frozen=True)
class LayoutSettings:
    """Immutable canvas geometry shared by every component of a collage run."""

    canvas_width: int = 1080
    canvas_height: int = 1920
    top_margin: int = 250
    bottom_margin: int = 250
    side_margin: int = 60
    poster_width: int = 180
    poster_height: int = 270
    posters_per_row: int = 3
    poster_spacing_x: int = 10
    poster_spacing_y: int = 10
    border_radius: int = 8
    title_area_height: int = 120
    title_font_size: int = 48
    stats_font_size: int = 24
    stats_line_offset: int = 60

    @property
    def working_width(self) -> int:
        return self.canvas_width - 2 * self.side_margin

    @property
    def working_height(self) -> int:
        return self.canvas_height - self.top_margin - self.bottom_margin

    @property
    def safe_bottom(self) -> int:
        """Lowest y coordinate a poster's bottom edge may reach."""
        return self.canvas_height - self.bottom_margin

    @property
    def grid_width(self) -> int:
        return (
            self.posters_per_row * self.poster_width
            + (self.posters_per_row - 1) * self.poster_spacing_x
        )

    @property
    def grid_start_x(self) -> int:
        """Left edge of the poster grid, centered within the working width."""
        return self.side_margin + (self.working_width - self.grid_width) // 2

    @property
    def title_position(self) -> Tuple[int, int]:
        return (self.canvas_width // 2, self.top_margin // 2)

    @property
    def stats_position(self) -> Tuple[int, int]:
        return (self.canvas_width // 2, self.top_margin // 2 + self.stats_line_offset)

    def cell_position(self, index: int) -> Tuple[int, int]:
        """Return the top-left corner of grid cell ``index`` (row-major)."""
        row = index // self.posters_per_row
        col = index % self.posters_per_row
        x = self.grid_start_x + col * (self.poster_width + self.poster_spacing_x)
        y = (
            self.top_margin
            + self.title_area_height
            + row * (self.poster_height + self.poster_spacing_y)
        )
        return x, y


@dataclass(frozen=True)
class CollageConfig:
    """Per-run collage appearance: title, display year and colors (RGBA)."""

    title: str
    year: int
    background_start: RGBA = DEFAULT_BACKGROUND_START
    background_end: RGBA = DEFAULT_BACKGROUND_END
    text_color: RGBA = DEFAULT_TEXT_COLOR

    @property
    def display_title(self) -> str:
        """The configured title, or the default one for ``year`` when none was set."""
        return self.title or _default_title(self.year)


@dataclass(frozen=True)
class TraktSettings:
    """Settings for the watch-history provider."""

    username: str = ""
    api_key: str = ""
    base_url: str = "https://api.trakt.tv"
    page_limit: int = 100


@dataclass(frozen=True)
class TmdbSettings:
    """Settings for the movie-detail provider."""

    api_key: str = ""
    base_url: str = "https://api.themoviedb.org/3"
    image_base_url: str = "https://image.tmdb.org/t/p/"
    poster_size: str = "w780"


@dataclass(frozen=True)
class PathSettings:
    """Filesystem locations for poster images and generated frames."""

    image_dir: Path = Path("images")
    output_dir: Path = Path("images")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object for the movie collage generator."""

    collage: CollageConfig
    layout: LayoutSettings = field(default_factory=LayoutSettings)
    trakt: TraktSettings = field(default_factory=TraktSettings)
    tmdb: TmdbSettings = field(default_factory=TmdbSettings)
    paths: PathSettings = field(default_factory=PathSettings)
    timezone: str = "America/Chicago"
    download_posters: bool = True
    http_timeout_seconds: int = 30


def _default_title(year: int) -> str:
    return f"My {year} in Movies"


def _parse_collage(raw: Mapping[str, Any], default_year: int) -> CollageConfig:
    if not isinstance(raw, Mapping):
        raw = {}
    year = _parse_positive_int(raw.get("year"), default_year)
    title = str(raw.get("title") or "").strip()
    return CollageConfig(
        title=title,
        year=year,
        background_start=_parse_color(raw.get("background_start"), DEFAULT_BACKGROUND_START),
        background_end=_parse_color(raw.get("background_end"), DEFAULT_BACKGROUND_END),
        text_color=_parse_color(raw.get("text_color"), DEFAULT_TEXT_COLOR),
    )


def _parse_layout(raw: Mapping[str, Any]) -> LayoutSettings:
    default = LayoutSettings()
    if not isinstance(raw, Mapping):
        return default
    overrides = {
        item.name: _parse_int(raw[item.name], getattr(default, item.name))
        for item in fields(LayoutSettings)
        if item.name in raw
    }
    return replace(default, **overrides)


def _parse_trakt(raw: Mapping[str, Any], env: Mapping[str, str]) -> TraktSettings:
    default = TraktSettings()
    if not isinstance(raw, Mapping):
        raw = {}
    return TraktSettings(
        username=str(raw.get("username") or env.get("TRAKT_USER", default.username)),
        api_key=env.get("TRAKT_KEY", default.api_key),
        base_url=str(raw.get("base_url", default.base_url)),
        page_limit=_parse_positive_int(raw.get("page_limit"), default.page_limit),
    )


def _parse_tmdb(raw: Mapping[str, Any], env: Mapping[str, str]) -> TmdbSettings:
    default = TmdbSettings()
    if not isinstance(raw, Mapping):
        raw = {}
    return TmdbSettings(
        api_key=env.get("TMDB_KEY", default.api_key),
        base_url=str(raw.get("base_url", default.base_url)),
        image_base_url=str(raw.get("image_base_url", default.image_base_url)),
        poster_size=str(raw.get("poster_size", default.poster_size)),
    )


def _parse_paths(raw: Mapping[str, Any]) -> PathSettings:
    default = PathSettings()
    if not isinstance(raw, Mapping):
        return default
    return PathSettings(
        image_dir=Path(raw.get("image_dir", default.image_dir)),
        output_dir=Path(raw.get("output_dir", default.output_dir)),
    )


def _load_env_config(env: Mapping[str, str], default_year: int) -> AppConfig:
    """Fallback configuration derived from environment variables."""
    collage = _parse_collage(
        {
            "title": env.get("COLLAGE_TITLE"),
            "year": env.get("COLLAGE_YEAR"),
        },
        default_year,
    )
    paths = _parse_paths(
        {
            "image_dir": env.get("IMAGE_DIR", "images"),
            "output_dir": env.get("OUTPUT_DIR", "images"),
        }
    )
    return AppConfig(
        collage=collage,
        trakt=_parse_trakt({}, env),
        tmdb=_parse_tmdb({}, env),
        paths=paths,
        timezone=env.get("TIMEZONE", "America/Chicago"),
        download_posters=_parse_bool(env.get("DOWNLOAD_POSTERS"), True),
        http_timeout_seconds=_parse_positive_int(env.get("HTTP_TIMEOUT_SECONDS"), 30),
    )


def load_config(
    config_path: Path | str,
    env: Mapping[str, str] | None = None,
    *,
    now: datetime | None = None,
) -> AppConfig:
    """Load configuration from a JSON file or environment defaults."""
    source_env = env if env is not None else os.environ
    default_year = (now or datetime.now()).year
    path = Path(config_path)

    if not path.exists():
        return _load_env_config(source_env, default_year)

    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    return AppConfig(
        collage=_parse_collage(data.get("collage", {}), default_year),
        layout=_parse_layout(data.get("layout", {})),
        trakt=_parse_trakt(data.get("trakt", {}), source_env),
        tmdb=_parse_tmdb(data.get("tmdb", {}), source_env),
        paths=_parse_paths(data.get("paths", {})),
        timezone=str(data.get("timezone", "America/Chicago")),
        download_posters=_parse_bool(data.get("download_posters"), True),
        http_timeout_seconds=_parse_positive_int(data.get("http_timeout_seconds"), 30),
    )


__all__ = [
    "AppConfig",
    "CollageConfig",
    "LayoutSettings",
    "PathSettings",
    "TmdbSettings",
    "TraktSettings",
    "load_config",
    "_parse_bool",
    "_parse_color",
    "_parse_positive_int",
]
