"""
Logging configuration for fwinspect.

Log lines go to stderr so that check results and JSON on stdout stay
parseable. File logging is optional and rotates.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging
import sys
from collections import Counter
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any

logger = logging.getLogger(__name__)


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    Set up the ``fwinspect`` logger.

    Args:
        level: Console logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Also write DEBUG-level logs to this rotating file
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup log files to keep

    Returns:
        Configured package logger
    """
    package_logger = logging.getLogger("fwinspect")
    package_logger.setLevel(logging.DEBUG if log_file else getattr(logging, level.upper()))
    package_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    package_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s | %(levelname)-8s | %(name)-30s | %(funcName)-24s | '
                '%(lineno)-4d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        package_logger.addHandler(file_handler)

    package_logger.propagate = False

    return package_logger


def configure_logging(debug: bool = False, log_file: str | None = None) -> None:
    """Logging setup used by the command line: warnings, or everything with --debug."""
    setup_logging(level="DEBUG" if debug else "WARNING", log_file=log_file)


# Fetch failures by kind, e.g. {"firewall_fetch_http": 2}
_fetch_errors: Counter = Counter()


def track_error(
    error_type: str,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
) -> None:
    """Log a firewall fetch failure and count it by type."""
    _fetch_errors[error_type] += 1

    log_msg = f"{error_type}: {message}"
    if context:
        log_msg += f" | Context: {context}"
    logger.error(log_msg, exc_info=exception)


def get_error_stats() -> dict[str, int]:
    """Get fetch failure counts by type."""
    return dict(_fetch_errors)


def reset_error_stats() -> None:
    """Clear fetch failure counts."""
    _fetch_errors.clear()
