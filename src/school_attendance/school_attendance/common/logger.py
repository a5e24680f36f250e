from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Package root logger (module loggers use logging.getLogger(__name__)).
LOGGER_NAME = __name__.rsplit(".", 2)[0]
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"


def configure_logging(*, level: str = "INFO", log_dir: Optional[str] = None) -> logging.Logger:
    """Attach console (and optionally rotating file) handlers to the package logger.

    Safe to call more than once: handlers are replaced, not stacked.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        # Rotates at 5MB
        file_handler = RotatingFileHandler(
            path / "attendance.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
