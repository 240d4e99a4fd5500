"""
Basic logging configuration for the application.

``setup_logging`` attaches a console handler and, optionally, a file
handler to the root logger.  ``create_app`` calls it with the
``LOG_LEVEL`` and ``LOG_FILE`` settings; an empty ``LOG_FILE`` means
console only.  The application modules log through
``logging.getLogger(__name__)``: registrations, updates and deletions at
INFO, rejected duplicates at WARNING, failed request validation at INFO.

It is safe to call repeatedly: the second and later calls are no-ops,
which matters when tests build several applications in one process.
"""

import logging
from pathlib import Path
from typing import Optional


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file
        handler is added.
    """
    logger = logging.getLogger()
    if logger.handlers:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
