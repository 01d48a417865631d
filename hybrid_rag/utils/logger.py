# -*- coding: utf-8 -*-
"""
Centralized logging configuration for the retrieval engine

Call setup_logging() once at the entry point (CLI script), then use
logger = logging.getLogger(__name__) in individual modules. Verbose query
diagnostics are logged at INFO, everything else at DEBUG.

Examples:
    from hybrid_rag.utils.logger import setup_logging, get_logger
    setup_logging(log_file="logs/queries.log")

    logger = get_logger(__name__)
    logger.info("Loaded %d chunks", 42)
"""
# Standard library
import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Prevents duplicate handlers when the CLI re-enters setup
_logging_configured = False


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    format_string: str = DEFAULT_FORMAT,
) -> None:
    """
    Configure root logging with console output and an optional log file.

    Safe to call multiple times; only the first call has an effect.

    Args:
        level: Logging level (default: logging.INFO)
        log_file: Optional path to a log file; parent directories are created
        format_string: Log record format
    """
    global _logging_configured

    if _logging_configured:
        return

    formatter = logging.Formatter(format_string)
    handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # httpx logs every embedding request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (same as logging.getLogger(name))."""
    return logging.getLogger(name)
