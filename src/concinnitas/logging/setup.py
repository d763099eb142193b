"""
Structured logging configuration.

Two independent pipelines:
1. File (JSON) - only when config.file is set. Captures everything (DEBUG+).
2. Technical console (stderr) - level from config.level, raised by --verbose.

User-facing report lines are printed by the CLI, not logged, so by default
the console only shows warnings and errors.

--verbose adds INFO, --verbose --verbose adds DEBUG, --quiet silences the console.
"""

import logging
import sys
from pathlib import Path

import structlog

from ..config.schema import LoggingConfig

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging(config: LoggingConfig, quiet: bool = False) -> None:
    """Configure structlog and the stdlib handlers behind it.

    Args:
        config: Logging configuration (level, file, verbose)
        quiet: If True, the console handler is not installed
    """
    logging.root.handlers.clear()
    structlog.reset_defaults()

    # Root logger lets everything through; the handlers filter by level
    logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[])

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    # ── Pipeline 1: JSON file ─────────────────────────────────────────────
    if config.file:
        file_path = Path(config.file)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(str(file_path), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=shared_processors,
            )
        )
        logging.root.addHandler(file_handler)

    # ── Pipeline 2: technical console ─────────────────────────────────────
    if not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(_console_level(config))
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
                foreign_pre_chain=shared_processors,
            )
        )
        logging.root.addHandler(console_handler)

    structlog.configure(
        processors=shared_processors + [
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _console_level(config: LoggingConfig) -> int:
    """Console level: the configured level, lowered by each --verbose.

    No -v  -> config.level (WARNING by default)
    -v     -> INFO
    -vv+   -> DEBUG
    """
    base = _LEVELS[config.level]
    if config.verbose >= 2:
        return logging.DEBUG
    if config.verbose == 1:
        return min(base, logging.INFO)
    return base

