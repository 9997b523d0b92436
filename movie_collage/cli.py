"""
Command line interface for the movie collage generator.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from movie_collage.app import MovieCollage
from movie_collage.config import AppConfig, load_config
from movie_collage.errors import CollageError
from movie_collage.logging_setup import configure_logging
from movie_collage.tmdb_client import TmdbError
from movie_collage.trakt_client import TraktError


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Apply command line overrides on top of the loaded configuration."""
    collage = config.collage
    if args.year is not None:
        collage = replace(collage, year=args.year)
    if args.title is not None:
        collage = replace(collage, title=args.title)

    paths = config.paths
    if args.output_dir is not None:
        paths = replace(paths, output_dir=args.output_dir)
    if args.image_dir is not None:
        paths = replace(paths, image_dir=args.image_dir)

    download_posters = config.download_posters and not args.no_download
    return replace(config, collage=collage, paths=paths, download_posters=download_posters)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="movie-collage",
        description="Render a year of watched movies into paginated poster collages.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config.json"),
        help="Path to the JSON configuration file (default: config.json).",
    )
    parser.add_argument("--year", type=int, help="Collage year (default: from config or current year).")
    parser.add_argument("--title", help="Override the collage title.")
    parser.add_argument("--output-dir", type=Path, help="Directory for generated frames.")
    parser.add_argument("--image-dir", type=Path, help="Directory holding poster images.")
    parser.add_argument(
        "--no-download",
        action="store_true",
        help="Use posters already on disk instead of downloading them.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file.")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("generate", help="Fetch history and write collage frames (default).")
    subparsers.add_parser("posters", help="Print the poster URL of every watched movie.")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = configure_logging(level=args.log_level, log_file=args.log_file)

    config = apply_overrides(load_config(args.config), args)
    app = MovieCollage(str(args.config), config=config, logger=logger)

    try:
        if args.command == "posters":
            for url in app.poster_urls():
                print(url)
            return 0

        result = app.run()
    except (CollageError, TraktError, TmdbError) as exc:
        logger.error("%s", exc)
        return 1

    for path in result.output_paths:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
