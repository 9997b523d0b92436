"""CLI entrypoint for the movie collage generator."""

import sys

from movie_collage.cli import main


if __name__ == "__main__":
    sys.exit(main())
