"""Logging setup for the CLI and library modules.

Library modules log structured events through ``structlog.get_logger(__name__)``.
The CLI decides where they go: stderr when verbose, rolling files when a log
directory is configured.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog

LOG_FILE = "bid_lens.log"
LOG_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _rolling_file_handler(log_dir: Path) -> RotatingFileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        filename=str(log_dir / LOG_FILE),
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )


def setup_logging(
    level: int = logging.INFO,
    log_dir: Path | None = None,
    verbose: bool = False,
) -> logging.Logger:
    """Attach handlers to the ``bid_lens`` logger.

    The CLI prints its results on stdout, so diagnostics only go to stderr
    when ``verbose`` is set. Without a ``log_dir`` nothing is written to disk.

    Args:
        level: Logging level for the package.
        log_dir: Directory for the rolling ``bid_lens.log`` file.
        verbose: Echo log records to stderr.

    Returns:
        The ``bid_lens`` logger.
    """
    logger = logging.getLogger("bid_lens")
    logger.setLevel(level)

    # Repeated CLI runs in one process must not stack handlers
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    handlers: list[logging.Handler] = []
    if verbose:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_dir is not None:
        handlers.append(_rolling_file_handler(log_dir))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def configure_structlog(json_format: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog processors for the package.

    Module loggers created with ``structlog.get_logger(__name__)`` are routed
    through the stdlib ``bid_lens`` logger, so the handlers installed by
    :func:`setup_logging` receive them.

    Args:
        json_format: Whether to render events as JSON.
        log_level: The logging level to use.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_format:
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

