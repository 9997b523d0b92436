"""Logging configuration for command line runs of the movie collage generator."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

DEFAULT_LOGGER_NAME = "movie_collage"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# HTTP client loggers that log every request at DEBUG/INFO.
CHATTY_LOGGERS = ("urllib3",)


def resolve_level(level: Union[int, str]) -> int:
    """Map a level name such as ``"debug"`` (or a numeric level) to its integer value."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def _open_log_file(log_file: Union[str, Path]) -> tuple[Optional[logging.Handler], Optional[str]]:
    log_path = Path(log_file)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path, encoding="utf-8"), None
    except OSError as exc:
        return None, f"Cannot write log file '{log_path}', logging to the console only. Reason: {exc}"


def configure_logging(
    logger_name: Optional[str] = None,
    *,
    level: Union[int, str] = logging.INFO,
    log_file: Union[str, Path, None] = None,
) -> logging.Logger:
    """Configure console logging, plus ``log_file`` when given, and return the app logger.

    HTTP client chatter stays at WARNING unless ``level`` is DEBUG. An
    unwritable ``log_file`` is reported on the returned logger instead of
    aborting the run.
    """
    numeric_level = resolve_level(level)
    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [stream_handler]

    pending_warning: Optional[str] = None
    if log_file:
        file_handler, pending_warning = _open_log_file(log_file)
        if file_handler:
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)

    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(
            numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
        )

    logger = logging.getLogger(logger_name or DEFAULT_LOGGER_NAME)
    logger.setLevel(numeric_level)

    if pending_warning:
        logger.warning(pending_warning)

    return logger


__all__ = ["configure_logging", "resolve_level"]
