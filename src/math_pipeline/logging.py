from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.logging import RichHandler

from .config import RuntimeConfig

LOGGER_NAME = "math_pipeline"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def init_logging(runtime: RuntimeConfig, *, console: bool = True) -> logging.Logger:
    """Attach console and optional rotating file handlers to the package logger."""

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(runtime.log_level)
    if logger.handlers:
        return logger

    if console:
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    if runtime.log_file is not None:
        log_file = Path(runtime.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=1_000_000,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)
    return logger


__all__ = ["LOGGER_NAME", "init_logging"]
