"""Logging configuration for the world analyzer CLI."""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'


def _attach(logger: logging.Logger, handler: logging.Handler, fmt: str, level: int) -> None:
    handler.setFormatter(logging.Formatter(fmt))
    handler.setLevel(level)
    logger.addHandler(handler)


def log_file_name(when: Optional[datetime] = None) -> str:
    """Name of the run log, ``dat_analyzer_YYYYmmdd_HHMMSS.log``."""
    when = when or datetime.now()
    return f"dat_analyzer_{when:%Y%m%d_%H%M%S}.log"


def setup_logging(log_dir: Optional[str] = None, log_level: int = logging.INFO) -> Optional[Path]:
    """Route library loggers to stderr and, with ``log_dir``, to a run log.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output.

    Returns:
        Path of the run log, or None when logging to the console only
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(log_level)

    _attach(root_logger, logging.StreamHandler(sys.stderr), CONSOLE_FORMAT, log_level)
    if log_dir is None:
        return None

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / log_file_name()
    _attach(root_logger, logging.FileHandler(log_file, encoding='utf-8'), FILE_FORMAT, log_level)
    root_logger.debug(f"Logging to {log_file} at {logging.getLevelName(log_level)}")
    return log_file
