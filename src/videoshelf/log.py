"""Logging setup for the service process."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process.

    Args:
        level: Log level name (e.g., "INFO", "DEBUG").
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # yt-dlp is chatty at INFO when it emits through its own logger
    logging.getLogger("yt_dlp").setLevel(logging.WARNING)
