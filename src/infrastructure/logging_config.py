from __future__ import annotations

import logging

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", log_format: str = DEFAULT_LOG_FORMAT) -> None:
    """Configure root logging once for the app process.

    Unknown level names fall back to INFO. Noisy third-party loggers
    are kept at WARNING.
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(level=resolved, format=log_format)
    logging.getLogger("watchdog").setLevel(logging.WARNING)
