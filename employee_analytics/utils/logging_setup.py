# ========================
# employee_analytics/utils/logging_setup.py
# ========================

"""
Logging Configuration

Centralized logging setup for the pipeline.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

# Modules that log once per record at DEBUG
ROW_DETAIL_LOGGERS = (
    'employee_analytics.pipeline.cleaning',
    'employee_analytics.pipeline.transformation',
)


class RowDetailFilter(logging.Filter):
    """Drop DEBUG records from per-record loggers; other levels pass."""

    def __init__(self, logger_names: Iterable[str] = ROW_DETAIL_LOGGERS):
        super().__init__()
        self.logger_names = tuple(logger_names)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno > logging.DEBUG:
            return True
        return not any(
            record.name == name or record.name.startswith(name + '.')
            for name in self.logger_names
        )


def setup_logging(log_level: str = "INFO",
                  log_file: Optional[str] = None,
                  log_dir: str = "logs",
                  row_detail_on_console: bool = False) -> None:
    """
    Set up logging configuration for the pipeline.

    Args:
        log_level (str): Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file (str): Optional log file name
        log_dir (str): Directory for log files
        row_detail_on_console (bool): Show per-record DEBUG lines from the
            parser and query engine on the console; the log file always
            gets them
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, date_format)
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if log_file else level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    if not row_detail_on_console:
        console_handler.addFilter(RowDetailFilter())
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_path = log_path / log_file
        file_handler = logging.FileHandler(file_path)
        file_handler.setLevel(logging.DEBUG)  # File gets all messages
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        logging.info(f"Logging to file: {file_path}")

    logging.info(f"Logging initialized - Level: {log_level}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name (str): Logger name

    Returns:
        logging.Logger: Configured logger
    """
    return logging.getLogger(name)
