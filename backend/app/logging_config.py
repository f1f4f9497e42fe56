"""
Logging configuration for the CalcBZ backend.

Uses structlog on top of the standard logging module:
- Console output (always)
- File output with weekly rotation
- JSON rendering by default, human-readable console rendering on request

Log rotation: weekly with 52 weeks (1 year) retention, gzip compression.
"""
import gzip
import logging
import logging.handlers
import shutil
import sys
from pathlib import Path
from typing import Any, Optional

import structlog
from structlog.types import EventDict

LOG_FILE_NAME = "calcbz.log"


def get_log_directory(base_dir: Optional[Path] = None) -> Path:
    """Get or create the log directory."""
    log_dir = base_dir or Path(__file__).parent.parent.parent / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def add_log_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add upper-case log level to the event dict."""
    if method_name == "warn":
        method_name = "warning"
    event_dict["level"] = method_name.upper()
    return event_dict


def _get_rotated_filename(default_name: str) -> str:
    """
    Custom namer for rotated log files.

    Example: calcbz.log.2025-11-28 -> calcbz.log.2025-11-28.gz
    """
    return default_name + ".gz"


def _compress_rotated_file(source: str, dest: str) -> None:
    """Gzip a rotated log file and remove the uncompressed original."""
    with open(source, 'rb') as f_in:
        with gzip.open(dest, 'wb') as f_out:
            shutil.copyfileobj(f_in, f_out)

    Path(source).unlink()


def configure_logging(
    log_level: str = "INFO",
    enable_file_logging: bool = True,
    json_logs: bool = True,
    log_dir: Optional[Path] = None,
    ) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_file_logging: Whether to also write to a rotating log file
        json_logs: Render events as JSON (False switches to structlog's console renderer)
        log_dir: Directory for the log file (defaults to <project>/logs)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    handlers.append(console_handler)

    if enable_file_logging:
        log_file = get_log_directory(log_dir) / LOG_FILE_NAME

        # W0 = rotate every Monday at midnight UTC, keep one year
        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=str(log_file),
            when="W0",
            interval=1,
            backupCount=52,
            encoding="utf-8",
            utc=True
            )
        file_handler.setLevel(numeric_level)
        file_handler.rotator = _compress_rotated_file
        file_handler.namer = _get_rotated_filename

        handlers.append(file_handler)

    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=numeric_level,
        force=True
        )

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
        )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("EMI calculated", principal="100000", months=12)
    """
    return structlog.get_logger(name)
