"""
Logging configuration for the application.

Sets up structured logging with a consistent format.
Never logs sensitive data (API keys, uploaded file contents, identity headers).
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = (
    "uvicorn.access",
    "httpx",
    "httpcore",
    "sqlalchemy.engine",
)


def configure_logging(level: str = "INFO", sql_echo: bool = False) -> None:
    """Configure structured logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
        sql_echo: Keep SQLAlchemy statement logging at INFO when True.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    for name in NOISY_LOGGERS:
        if name == "sqlalchemy.engine" and sql_echo:
            logging.getLogger(name).setLevel(logging.INFO)
            continue
        logging.getLogger(name).setLevel(logging.WARNING)
