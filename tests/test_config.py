import json
import sys
from datetime import datetime
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from movie_collage.config import (
    DEFAULT_BACKGROUND_START,
    LayoutSettings,
    _parse_bool,
    _parse_color,
    load_config,
)

NOW = datetime(2025, 6, 1, 12, 0, 0)


def test_parse_color_accepts_hex_and_lists():
    default = (1, 2, 3, 4)

    assert _parse_color("#ff8000", default) == (255, 128, 0, 255)
    assert _parse_color("ff800080", default) == (255, 128, 0, 128)
    assert _parse_color([10, 20, 30], default) == (10, 20, 30, 255)
    assert _parse_color({"hex": "#000000"}, default) == (0, 0, 0, 255)
    assert _parse_color({"value": [300, -5, 7, 8]}, default) == (255, 0, 7, 8)


def test_parse_color_falls_back_on_invalid_input():
    default = (1, 2, 3, 4)

    assert _parse_color("#12345", default) == default
    assert _parse_color("zzzzzz", default) == default
    assert _parse_color([1, 2], default) == default
    assert _parse_color(None, default) == default


def test_parse_bool_variants():
    assert _parse_bool("yes", False) is True
    assert _parse_bool("off", True) is False
    assert _parse_bool(0, True) is False
    assert _parse_bool(None, True) is True


def test_load_config_from_json(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "collage": {"year": 2024, "background_start": "#102030"},
                "layout": {"canvas_height": 1200, "posters_per_row": 4},
                "trakt": {"username": "cinephile", "page_limit": 50},
                "tmdb": {"poster_size": "w500"},
                "paths": {"image_dir": "posters", "output_dir": "collages"},
                "timezone": "Europe/Berlin",
                "download_posters": False,
                "http_timeout_seconds": 10,
            }
        ),
        encoding="utf-8",
    )
    env = {"TRAKT_KEY": "trakt-secret", "TMDB_KEY": "tmdb-secret"}

    config = load_config(config_path, env, now=NOW)

    assert config.collage.year == 2024
    assert config.collage.title == ""
    assert config.collage.display_title == "My 2024 in Movies"
    assert config.collage.background_start == (16, 32, 48, 255)
    assert config.layout.canvas_height == 1200
    assert config.layout.posters_per_row == 4
    assert config.layout.canvas_width == LayoutSettings().canvas_width
    assert config.trakt.username == "cinephile"
    assert config.trakt.api_key == "trakt-secret"
    assert config.trakt.page_limit == 50
    assert config.tmdb.api_key == "tmdb-secret"
    assert config.tmdb.poster_size == "w500"
    assert config.paths.image_dir == Path("posters")
    assert config.paths.output_dir == Path("collages")
    assert config.timezone == "Europe/Berlin"
    assert config.download_posters is False
    assert config.http_timeout_seconds == 10


def test_load_config_from_environment(tmp_path):
    env = {
        "COLLAGE_TITLE": "Year of Film",
        "TRAKT_USER": "watcher",
        "IMAGE_DIR": "/data/posters",
        "DOWNLOAD_POSTERS": "false",
    }

    config = load_config(tmp_path / "missing.json", env, now=NOW)

    assert config.collage.title == "Year of Film"
    assert config.collage.year == 2025
    assert config.collage.background_start == DEFAULT_BACKGROUND_START
    assert config.trakt.username == "watcher"
    assert config.paths.image_dir == Path("/data/posters")
    assert config.paths.output_dir == Path("images")
    assert config.download_posters is False
    assert config.layout == LayoutSettings()


def test_invalid_layout_values_keep_defaults(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"layout": {"poster_width": "wide", "top_margin": 0}}), encoding="utf-8")

    config = load_config(config_path, {}, now=NOW)

    assert config.layout.poster_width == 180
    assert config.layout.top_margin == 0
